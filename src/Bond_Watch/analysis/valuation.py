"""Bond valuation: raw Bond Depository state to a normalized Bond snapshot.

Pure function of its inputs. The only time-dependent quantity (duration of a
fixed-expiration market) takes ``now`` as an argument instead of reading the
clock, so identical inputs always produce an identical Bond.

Bonds mature with a cliff: nothing is redeemable before expiry, the whole
payout is redeemable after it. Fixed-term markets expire a set time after each
deposit (a 7-day term deposited on day 1 expires day 8, deposited on day 2
expires day 9). Fixed-expiration markets expire at one shared timestamp (an
expiry of day 10 is a 9-day term for a day-1 deposit, 8 days for day 2).
"""

import logging
from decimal import Decimal

from Bond_Watch.models.bond import Bond, BondPrice, TokenAmounts
from Bond_Watch.models.market import RawMarket, RawTerms
from Bond_Watch.models.tokens import LPToken, Token
from Bond_Watch.utils.decimals import div_to_scale, from_raw, mul, sub
from Bond_Watch.utils.exceptions import InvalidMarketDataError

logger = logging.getLogger(__name__)

# --- Precision ---
DISCOUNT_DECIMALS: int = 9

# --- Sold-out threshold: one whole base token ---
SOLD_OUT_THRESHOLD: Decimal = Decimal("1")

_ZERO: Decimal = Decimal("0")


def compute_duration(terms: RawTerms, now: float) -> float:
    """Seconds a deposit made at *now* takes to mature.

    Fixed-term markets report the term length itself, which is independent of
    *now*. Fixed-expiration markets report the time left until conclusion and
    shrink as *now* advances; the result is negative once a market concludes.
    """
    if terms.fixed_term:
        return float(terms.vesting)
    return terms.conclusion - now


def compute_discount(base_token_per_usd: Decimal, price_in_usd: Decimal) -> Decimal:
    """Fractional discount of the bond price against the spot price.

    Negative when the bond is priced above spot.
    """
    return div_to_scale(sub(base_token_per_usd, price_in_usd), base_token_per_usd, DISCOUNT_DECIMALS)


def normalize_capacity(
    market: RawMarket,
    base_token: Token,
    quote_token: Token | LPToken,
    quote_token_per_base_token: Decimal,
) -> TokenAmounts:
    """Express the remaining market capacity in both tokens.

    Capacity is native in the quote token when ``capacity_in_quote`` is set,
    otherwise in the base token; the other side is derived through the market
    price and the base-token side always carries base-token decimals.
    """
    if market.capacity_in_quote:
        in_quote_token = from_raw(market.capacity, quote_token.decimals)
        in_base_token = div_to_scale(in_quote_token, quote_token_per_base_token, base_token.decimals)
    else:
        in_base_token = from_raw(market.capacity, base_token.decimals)
        in_quote_token = mul(in_base_token, quote_token_per_base_token)
    return TokenAmounts(in_base_token=in_base_token, in_quote_token=in_quote_token)


def normalize_max_payout(
    market: RawMarket,
    base_token: Token,
    quote_token_per_base_token: Decimal,
) -> TokenAmounts:
    """Max payout for the current deposit interval in both tokens.

    With 1,000 base tokens of capacity, 10 days to conclusion and a 1-day
    deposit interval, max payout is 100 base tokens.
    """
    in_base_token = from_raw(market.max_payout, base_token.decimals)
    return TokenAmounts(
        in_base_token=in_base_token,
        in_quote_token=mul(in_base_token, quote_token_per_base_token),
    )


def is_sold_out(capacity: TokenAmounts, max_payout: TokenAmounts) -> bool:
    """A market is sold out once capacity or max payout drops below one base token."""
    return (
        capacity.in_base_token < SOLD_OUT_THRESHOLD or max_payout.in_base_token < SOLD_OUT_THRESHOLD
    )


def compute_bond(
    market_id: str,
    market: RawMarket,
    terms: RawTerms,
    base_token: Token,
    quote_token: Token | LPToken,
    quote_token_per_base_token: Decimal,
    base_token_per_usd: Decimal,
    quote_token_per_usd: Decimal,
    *,
    now: float,
) -> Bond:
    """Value one bond market.

    Args:
        market_id: Depository market id.
        market: Decoded ``markets(id)`` struct.
        terms: Decoded ``terms(id)`` struct.
        base_token: The token the market sells (the protocol token).
        quote_token: The token the market buys, already resolved from
            ``market.quote_token``.
        quote_token_per_base_token: Quote tokens paid per base token, as
            reported by ``marketPrice(id)`` at base-token decimals.
        base_token_per_usd: USD price of one base token.
        quote_token_per_usd: USD price of one quote token.
        now: Current unix time in seconds.

    Returns:
        The valued, immutable Bond.

    Raises:
        InvalidMarketDataError: If the market price or either USD price is
            not positive.
    """
    for label, value in (
        ("market price", quote_token_per_base_token),
        (f"{base_token.symbol} price", base_token_per_usd),
        (f"{quote_token.symbol} price", quote_token_per_usd),
    ):
        if value <= _ZERO:
            raise InvalidMarketDataError(
                f"Cannot value market {market_id}: {label} must be positive, got {value}",
                market_id=market_id,
                source="valuation",
            )

    price_in_usd = mul(quote_token_per_usd, quote_token_per_base_token)
    discount = compute_discount(base_token_per_usd, price_in_usd)
    capacity = normalize_capacity(market, base_token, quote_token, quote_token_per_base_token)
    max_payout = normalize_max_payout(market, base_token, quote_token_per_base_token)

    bond = Bond(
        id=market_id,
        base_token=base_token,
        quote_token=quote_token,
        discount=discount,
        duration=compute_duration(terms, now),
        is_fixed_term=terms.fixed_term,
        is_sold_out=is_sold_out(capacity, max_payout),
        price=BondPrice(in_usd=price_in_usd, in_base_token=quote_token_per_base_token),
        capacity=capacity,
        max_payout=max_payout,
    )
    logger.debug(
        "Valued market %s (%s): discount=%s sold_out=%s",
        market_id,
        quote_token.symbol,
        bond.discount,
        bond.is_sold_out,
    )
    return bond
