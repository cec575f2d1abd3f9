"""Reporting module: duration/price formatting and terminal output.

Re-exports all public functions so consumers can import directly:
    from Bond_Watch.reporting import format_bond_duration, render_bonds
"""

from Bond_Watch.reporting.formatters import (
    bond_payload,
    format_bond_duration,
    format_discount,
    format_token_amount,
    format_usd,
    prettify_seconds,
    prettify_seconds_in_days,
)
from Bond_Watch.reporting.terminal import build_bonds_table, render_bond_detail, render_bonds

__all__ = [
    # Formatters
    "bond_payload",
    "format_bond_duration",
    "format_discount",
    "format_token_amount",
    "format_usd",
    "prettify_seconds",
    "prettify_seconds_in_days",
    # Terminal
    "build_bonds_table",
    "render_bond_detail",
    "render_bonds",
]
