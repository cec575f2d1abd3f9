"""Token descriptors: plain ERC-20 tokens and liquidity-pool tokens.

A quote token is either variant, selected at runtime by address lookup.
Both expose ``decimals`` and per-network ``addresses``; consumers that only
need those never look at ``kind``.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from Bond_Watch.models.enums import NetworkId

# uint256 holds at most 78 decimal digits
MAX_TOKEN_DECIMALS: int = 77


class _TokenBase(BaseModel):
    """Fields and behaviour shared by every token variant."""

    model_config = ConfigDict(frozen=True)

    name: str
    symbol: str
    decimals: int = Field(ge=0, le=MAX_TOKEN_DECIMALS)
    addresses: dict[NetworkId, str]

    @field_validator("addresses", mode="before")
    @classmethod
    def parse_network_keys(cls, value: object) -> object:
        """Accept network names (``"mainnet"``) as keys as well as chain ids."""
        if not isinstance(value, dict):
            return value
        return {
            NetworkId.from_name(key) if isinstance(key, str) and not key.isdigit() else key: address
            for key, address in value.items()
        }

    @field_serializer("addresses")
    def serialize_addresses(self, value: dict[NetworkId, str]) -> dict[str, str]:
        """Key addresses by lowercase network name."""
        return {network.name.lower(): address for network, address in value.items()}

    def address_for(self, network_id: NetworkId) -> str | None:
        """Return the contract address on *network_id*, if deployed there."""
        return self.addresses.get(network_id)


class Token(_TokenBase):
    """A fungible ERC-20 token.

    ``coingecko_id`` names the asset on the price API; tokens without one
    cannot be priced.
    """

    kind: Literal["token"] = "token"
    coingecko_id: str | None = None


class LPToken(_TokenBase):
    """A two-sided liquidity-pool share token (Uniswap V2 style pair).

    ``tokens`` lists the underlying assets in pair order (token0, token1),
    which is the order ``getReserves()`` reports them in.
    """

    kind: Literal["lp_token"] = "lp_token"
    decimals: int = Field(default=18, ge=0, le=MAX_TOKEN_DECIMALS)
    tokens: tuple[Token, Token]


QuoteToken = Annotated[Token | LPToken, Field(discriminator="kind")]
