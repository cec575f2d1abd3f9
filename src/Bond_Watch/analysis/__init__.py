"""Bond valuation engine.

Re-exports all public functions so consumers can import directly:
    from Bond_Watch.analysis import compute_bond
"""

from Bond_Watch.analysis.valuation import (
    compute_bond,
    compute_discount,
    compute_duration,
    is_sold_out,
    normalize_capacity,
    normalize_max_payout,
)

__all__ = [
    "compute_bond",
    "compute_discount",
    "compute_duration",
    "is_sold_out",
    "normalize_capacity",
    "normalize_max_payout",
]
