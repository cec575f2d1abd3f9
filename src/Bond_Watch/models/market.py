"""Raw Bond Depository market and terms snapshots, as decoded from the contract.

Integers are kept exactly as the contract returns them; scaling to token
decimals happens in the valuation step.
"""

from pydantic import BaseModel, ConfigDict, Field


class RawMarket(BaseModel):
    """The ``markets(id)`` struct of the Bond Depository.

    ``capacity`` is denominated in the quote token when ``capacity_in_quote``
    is set, otherwise in the base token. ``max_payout`` is always in the base
    token.
    """

    model_config = ConfigDict(frozen=True)

    capacity: int = Field(ge=0)
    quote_token: str
    capacity_in_quote: bool
    total_debt: int = Field(default=0, ge=0)
    max_payout: int = Field(ge=0)
    sold: int = Field(default=0, ge=0)
    purchased: int = Field(default=0, ge=0)


class RawTerms(BaseModel):
    """The ``terms(id)`` struct of the Bond Depository.

    ``vesting`` is the term length in seconds (fixed-term markets);
    ``conclusion`` is the absolute unix timestamp the market ends at.
    """

    model_config = ConfigDict(frozen=True)

    fixed_term: bool
    control_variable: int = Field(default=0, ge=0)
    vesting: int = Field(ge=0)
    conclusion: int = Field(ge=0)
    max_debt: int = Field(default=0, ge=0)
