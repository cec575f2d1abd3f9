"""Pydantic v2 models, enums, and type definitions.

Re-exports all public models so consumers can import directly:
    from Bond_Watch.models import Bond, NetworkId, Token
"""

from Bond_Watch.models.bond import Bond, BondPrice, TokenAmounts
from Bond_Watch.models.enums import NetworkId
from Bond_Watch.models.market import RawMarket, RawTerms
from Bond_Watch.models.tokens import LPToken, QuoteToken, Token

__all__ = [
    # Enums
    "NetworkId",
    # Tokens
    "LPToken",
    "QuoteToken",
    "Token",
    # Contract snapshots
    "RawMarket",
    "RawTerms",
    # Bond
    "Bond",
    "BondPrice",
    "TokenAmounts",
]
