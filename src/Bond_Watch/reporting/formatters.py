"""Human-readable formatting for bond durations, prices, and amounts.

Pure string helpers shared by the terminal renderer and the JSON API.
"""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Final

from Bond_Watch.models.bond import Bond

logger = logging.getLogger(__name__)

# --- Time units in seconds ---
SECONDS_PER_MINUTE: Final[int] = 60
SECONDS_PER_HOUR: Final[int] = 60 * 60
SECONDS_PER_DAY: Final[int] = 24 * 60 * 60

# Shown while a duration is not known yet
LOADING_PLACEHOLDER: Final[str] = "\u2014"
# Shown for durations shorter than one minute, including concluded markets
INSTANT_LABEL: Final[str] = "Instant"

DAY_RESOLUTION: Final[str] = "day"

_PERCENT_QUANTUM: Final[Decimal] = Decimal("0.01")
_USD_QUANTUM: Final[Decimal] = Decimal("0.01")


def _plural(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural}"


def prettify_seconds(seconds: float, resolution: str | None = None) -> str:
    """Render *seconds* as ``"2 days, 3 hrs, 5 mins"``.

    With ``resolution="day"`` only whole days are shown. Zero-valued units
    are omitted, so anything under a minute renders as an empty string.
    """
    total = max(0, math.floor(seconds))
    days, remainder = divmod(total, SECONDS_PER_DAY)
    hours, remainder = divmod(remainder, SECONDS_PER_HOUR)
    minutes = remainder // SECONDS_PER_MINUTE

    if resolution == DAY_RESOLUTION:
        return _plural(days, "day", "days")

    parts: list[str] = []
    if days:
        parts.append(_plural(days, "day", "days"))
    if hours:
        parts.append(_plural(hours, "hr", "hrs"))
    if minutes:
        parts.append(_plural(minutes, "min", "mins"))
    return ", ".join(parts)


def prettify_seconds_in_days(seconds: float) -> str:
    """Render a bond duration: whole days above one day, finer units below.

    ``prettify_seconds_in_days(7 * 86400) == "7 days"``
    """
    if seconds > SECONDS_PER_DAY:
        prettified = prettify_seconds(seconds, DAY_RESOLUTION)
    else:
        prettified = prettify_seconds(seconds)
    return prettified or INSTANT_LABEL


def format_bond_duration(duration: float | None) -> str:
    """Display value for a bond duration, or a placeholder while it is unknown.

    A zero duration is treated as not yet known.
    """
    if not duration:
        return LOADING_PLACEHOLDER
    return prettify_seconds_in_days(duration)


def format_discount(discount: Decimal) -> str:
    """Format a fractional discount as a percentage: 0.1 -> '10.00%'."""
    percent = (discount * 100).quantize(_PERCENT_QUANTUM, rounding=ROUND_HALF_EVEN)
    return f"{percent}%"


def format_usd(value: Decimal | None) -> str:
    """Format a Decimal as currency: 1234.5 -> '$1,234.50'."""
    if value is None:
        return LOADING_PLACEHOLDER
    rounded = value.quantize(_USD_QUANTUM, rounding=ROUND_HALF_EVEN)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.2f}"


def format_token_amount(value: Decimal, symbol: str, places: int = 4) -> str:
    """Format a token quantity with grouping: (1234.5, 'OHM') -> '1,234.5000 OHM'."""
    return f"{value:,.{places}f} {symbol}"


def bond_type_label(bond: Bond) -> str:
    """Short label for the bond accounting mode."""
    return "Fixed-term" if bond.is_fixed_term else "Fixed-expiration"


def bond_payload(bond: Bond) -> dict[str, object]:
    """JSON-ready dict of a bond plus its display duration."""
    payload: dict[str, object] = bond.model_dump(mode="json")
    payload["duration_display"] = format_bond_duration(bond.duration)
    return payload
