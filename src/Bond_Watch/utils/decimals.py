"""Fixed-point helpers over ``decimal.Decimal``.

On-chain integers carry an implicit number of decimals. These helpers turn
them into Decimals whose exponent is exactly ``-decimals`` and run all
arithmetic under a context wide enough for any uint256 product, so nothing
rounds unless a caller asks for a target scale.
"""

from __future__ import annotations

from decimal import (
    ROUND_DOWN,
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
    localcontext,
)
from typing import Final

# Two uint256 values multiplied need 156 significant digits.
FIXED_POINT_PRECISION: Final[int] = 160

FIXED_POINT_CONTEXT: Final[Context] = Context(
    prec=FIXED_POINT_PRECISION,
    rounding=ROUND_DOWN,
    traps=[DivisionByZero, InvalidOperation, Overflow],
)


def scale_quantum(places: int) -> Decimal:
    """Return the quantum ``10 ** -places`` used to fix a Decimal's scale."""
    return Decimal(1).scaleb(-places)


def from_raw(value: int, decimals: int) -> Decimal:
    """Interpret an on-chain integer at *decimals* scale.

    ``from_raw(1_500_000_000, 9) == Decimal("1.500000000")``
    """
    return Decimal(value).scaleb(-decimals, FIXED_POINT_CONTEXT)


def mul(left: Decimal, right: Decimal) -> Decimal:
    """Exact product; the scale is the sum of both scales."""
    return FIXED_POINT_CONTEXT.multiply(left, right)


def add(left: Decimal, right: Decimal) -> Decimal:
    """Exact sum; the scale is the larger of both scales."""
    return FIXED_POINT_CONTEXT.add(left, right)


def sub(left: Decimal, right: Decimal) -> Decimal:
    """Exact difference; the scale is the larger of both scales."""
    return FIXED_POINT_CONTEXT.subtract(left, right)


def div_to_scale(numerator: Decimal, denominator: Decimal, places: int) -> Decimal:
    """Divide and truncate toward zero at exactly *places* decimal places.

    Raises:
        decimal.DivisionByZero: If *denominator* is zero.
    """
    with localcontext(FIXED_POINT_CONTEXT) as ctx:
        quotient = numerator / denominator
        return quotient.quantize(scale_quantum(places), rounding=ROUND_DOWN, context=ctx)
