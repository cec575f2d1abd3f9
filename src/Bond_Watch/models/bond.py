"""The valued Bond snapshot returned by the fetcher.

All monetary fields use Decimal with an explicit scale and serialize as
strings so JSON consumers never see float artifacts.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, field_serializer

from Bond_Watch.models.tokens import QuoteToken, Token


class TokenAmounts(BaseModel):
    """One quantity expressed in both the base and the quote token."""

    model_config = ConfigDict(frozen=True)

    in_base_token: Decimal
    in_quote_token: Decimal

    @field_serializer("in_base_token", "in_quote_token")
    def serialize_decimal(self, value: Decimal) -> str:
        """Serialize Decimal fields as strings to preserve precision."""
        return str(value)


class BondPrice(BaseModel):
    """Price of one base token bought through the bond."""

    model_config = ConfigDict(frozen=True)

    in_usd: Decimal
    in_base_token: Decimal

    @field_serializer("in_usd", "in_base_token")
    def serialize_decimal(self, value: Decimal) -> str:
        """Serialize Decimal fields as strings to preserve precision."""
        return str(value)


class Bond(BaseModel):
    """A live bond market valued at fetch time.

    Frozen because a Bond is a snapshot; refetch to observe new state.

    ``duration`` means two different things depending on ``is_fixed_term``:
    the term length each deposit vests over for fixed-term bonds, and the
    seconds remaining until the shared conclusion for fixed-expiration bonds.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    base_token: Token
    quote_token: QuoteToken
    discount: Decimal
    duration: float
    is_fixed_term: bool
    is_sold_out: bool
    price: BondPrice
    capacity: TokenAmounts
    max_payout: TokenAmounts

    @field_serializer("discount")
    def serialize_decimal(self, value: Decimal) -> str:
        """Serialize Decimal fields as strings to preserve precision."""
        return str(value)
