"""Typed read access to the Bond Depository contract.

Each method maps one view function to a model. Decoding failures surface as
``ContractCallError`` tagged with the market id so the fetcher can log which
market was dropped.
"""

from __future__ import annotations

import logging
from typing import Final

from Bond_Watch.chain.abi import (
    AbiDecodeError,
    decode_address,
    decode_bool,
    decode_uint256_array,
    decode_words,
    encode_call,
)
from Bond_Watch.chain.rpc import RPC_SOURCE, JsonRpcClient
from Bond_Watch.models.market import RawMarket, RawTerms
from Bond_Watch.utils.exceptions import ContractCallError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# View signatures
# ---------------------------------------------------------------------------

LIVE_MARKETS_SIGNATURE: Final[str] = "liveMarkets()"
MARKETS_SIGNATURE: Final[str] = "markets(uint256)"
TERMS_SIGNATURE: Final[str] = "terms(uint256)"
MARKET_PRICE_SIGNATURE: Final[str] = "marketPrice(uint256)"

# Word counts of the returned structs
MARKET_WORDS: Final[int] = 7
TERMS_WORDS: Final[int] = 5


class BondDepository:
    """Read-only facade over one deployed Bond Depository.

    Usage::

        depository = BondDepository(rpc, address)
        for market_id in await depository.live_markets():
            market = await depository.markets(market_id)
    """

    def __init__(self, rpc: JsonRpcClient, address: str) -> None:
        self._rpc = rpc
        self._address = address

    async def live_markets(self) -> list[str]:
        """Ids of every market currently accepting deposits, as decimal strings."""
        data = await self._rpc.eth_call(to=self._address, data=encode_call(LIVE_MARKETS_SIGNATURE))
        try:
            ids = decode_uint256_array(data)
        except AbiDecodeError as exc:
            raise ContractCallError(
                f"Malformed liveMarkets() response: {exc}", source=RPC_SOURCE
            ) from exc
        logger.debug("Depository %s reports %d live markets", self._address, len(ids))
        return [str(market_id) for market_id in ids]

    async def markets(self, market_id: str) -> RawMarket:
        """Decode ``markets(id)``."""
        words = await self._call_words(MARKETS_SIGNATURE, market_id, MARKET_WORDS)
        try:
            return RawMarket(
                capacity=words[0],
                quote_token=decode_address(words[1]),
                capacity_in_quote=decode_bool(words[2]),
                total_debt=words[3],
                max_payout=words[4],
                sold=words[5],
                purchased=words[6],
            )
        except AbiDecodeError as exc:
            raise ContractCallError(
                f"Malformed markets({market_id}) response: {exc}",
                market_id=market_id,
                source=RPC_SOURCE,
            ) from exc

    async def terms(self, market_id: str) -> RawTerms:
        """Decode ``terms(id)``."""
        words = await self._call_words(TERMS_SIGNATURE, market_id, TERMS_WORDS)
        try:
            return RawTerms(
                fixed_term=decode_bool(words[0]),
                control_variable=words[1],
                vesting=words[2],
                conclusion=words[3],
                max_debt=words[4],
            )
        except AbiDecodeError as exc:
            raise ContractCallError(
                f"Malformed terms({market_id}) response: {exc}",
                market_id=market_id,
                source=RPC_SOURCE,
            ) from exc

    async def market_price(self, market_id: str) -> int:
        """Raw ``marketPrice(id)``: quote tokens per base token at base-token decimals."""
        words = await self._call_words(MARKET_PRICE_SIGNATURE, market_id, 1)
        return words[0]

    async def _call_words(self, signature: str, market_id: str, expected: int) -> list[int]:
        try:
            data = await self._rpc.eth_call(
                to=self._address, data=encode_call(signature, int(market_id))
            )
        except ContractCallError as exc:
            exc.market_id = market_id
            raise
        try:
            return decode_words(data, expected=expected)
        except AbiDecodeError as exc:
            raise ContractCallError(
                f"Malformed {signature} response for market {market_id}: {exc}",
                market_id=market_id,
                source=RPC_SOURCE,
            ) from exc
