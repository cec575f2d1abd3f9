"""USD price lookups for plain tokens and liquidity-pool tokens.

Plain tokens are priced through the CoinGecko simple-price API. LP tokens are
priced from their pair: the USD value of both reserves divided by the LP
supply. Prices are cached for ``price_ttl`` seconds.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from decimal import Decimal, InvalidOperation
from functools import partial
from typing import Final

import httpx

from Bond_Watch.chain.abi import AbiDecodeError, decode_words, encode_call
from Bond_Watch.chain.rpc import HTTP_OK, HTTP_TOO_MANY_REQUESTS, JsonRpcClient
from Bond_Watch.config import DEFAULT_COINGECKO_URL, DEFAULT_PRICE_TTL
from Bond_Watch.models.enums import NetworkId
from Bond_Watch.models.tokens import LPToken, Token
from Bond_Watch.services.cache import DATA_TYPE_PRICE, ServiceCache
from Bond_Watch.utils.decimals import add, div_to_scale, from_raw, mul
from Bond_Watch.utils.exceptions import (
    ContractCallError,
    PriceUnavailableError,
    RateLimitExceededError,
)
from Bond_Watch.utils.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

COINGECKO_SOURCE: Final[str] = "coingecko"
LP_SOURCE: Final[str] = "lp_pool"
VS_CURRENCY: Final[str] = "usd"

GET_RESERVES_SIGNATURE: Final[str] = "getReserves()"
TOTAL_SUPPLY_SIGNATURE: Final[str] = "totalSupply()"
# reserve0, reserve1, blockTimestampLast
RESERVES_WORDS: Final[int] = 3


class PriceService:
    """Fetch USD prices for any quote-token variant.

    Usage::

        prices = PriceService(cache=cache, rate_limiter=limiter, rpc_clients={NetworkId.MAINNET: rpc})
        ohm_usd = await prices.get_price(OHM_TOKEN, NetworkId.MAINNET)
        await prices.aclose()
    """

    def __init__(
        self,
        *,
        cache: ServiceCache,
        rate_limiter: RateLimiter,
        rpc_clients: dict[NetworkId, JsonRpcClient] | None = None,
        coingecko_url: str = DEFAULT_COINGECKO_URL,
        price_ttl: int = DEFAULT_PRICE_TTL,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._cache = cache
        self._rate_limiter = rate_limiter
        self._rpc_clients = dict(rpc_clients or {})
        self._coingecko_url = coingecko_url.rstrip("/")
        self._price_ttl = price_ttl
        self._in_flight: dict[str, asyncio.Task[Decimal]] = {}
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(
            timeout=httpx.Timeout(connect=5.0, read=30.0, write=10.0, pool=5.0),
        )

    async def aclose(self) -> None:
        """Close the price API client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def get_price(self, token: Token | LPToken, network_id: NetworkId) -> Decimal:
        """Return the USD price of one whole *token*.

        Concurrent lookups of the same price share a single request.

        Raises:
            PriceUnavailableError: If no price can be determined.
            RateLimitExceededError: If the price API rate limits us.
        """
        match token:
            case LPToken():
                return await self._get_lp_price(token, network_id)
            case Token():
                return await self._get_token_price(token)
            case _:
                msg = f"Unsupported token type: {type(token).__name__}"
                raise TypeError(msg)

    async def clear_prices(self) -> None:
        """Drop every cached price so the next lookup refetches."""
        await self._cache.invalidate_pattern(f"{COINGECKO_SOURCE}:{DATA_TYPE_PRICE}:*")
        await self._cache.invalidate_pattern(f"{LP_SOURCE}:{DATA_TYPE_PRICE}:*")

    # ------------------------------------------------------------------
    # Shared lookups
    # ------------------------------------------------------------------

    async def _shared_lookup(
        self,
        cache_key: str,
        fetch: Callable[[], Awaitable[Decimal]],
    ) -> Decimal:
        """Serve *cache_key* from the cache or join the lookup already running."""
        cached = await self._cache.get(cache_key)
        if cached is not None:
            return Decimal(cached)

        task = self._in_flight.get(cache_key)
        if task is None:
            task = asyncio.create_task(self._fetch_and_cache(cache_key, fetch))
            self._in_flight[cache_key] = task
            task.add_done_callback(partial(self._forget_lookup, cache_key))
        else:
            logger.debug("Joining in-flight price lookup: %s", cache_key)
        # One cancelled caller must not cancel the lookup for the others
        return await asyncio.shield(task)

    async def _fetch_and_cache(
        self,
        cache_key: str,
        fetch: Callable[[], Awaitable[Decimal]],
    ) -> Decimal:
        price = await fetch()
        await self._cache.set(cache_key, str(price), self._price_ttl)
        return price

    def _forget_lookup(self, cache_key: str, task: asyncio.Task[Decimal]) -> None:
        if self._in_flight.get(cache_key) is task:
            del self._in_flight[cache_key]
        if not task.cancelled() and task.exception() is not None:
            logger.debug("Price lookup %s failed: %s", cache_key, task.exception())

    # ------------------------------------------------------------------
    # Plain tokens
    # ------------------------------------------------------------------

    async def _get_token_price(self, token: Token) -> Decimal:
        if token.coingecko_id is None:
            raise PriceUnavailableError(
                f"{token.symbol} has no price source configured",
                source=COINGECKO_SOURCE,
            )

        cache_key = f"{COINGECKO_SOURCE}:{DATA_TYPE_PRICE}:{token.coingecko_id}"
        return await self._shared_lookup(
            cache_key,
            partial(self._fetch_coingecko_price, token.coingecko_id, token.symbol),
        )

    async def _fetch_coingecko_price(self, coingecko_id: str, symbol: str) -> Decimal:
        url = f"{self._coingecko_url}/simple/price"
        params = {"ids": coingecko_id, "vs_currencies": VS_CURRENCY}

        try:
            async with self._rate_limiter:
                response = await self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise PriceUnavailableError(
                f"Price request for {symbol} failed: {exc}",
                source=COINGECKO_SOURCE,
            ) from exc

        if response.status_code == HTTP_TOO_MANY_REQUESTS:
            raise RateLimitExceededError(
                f"Price API rate limited the {symbol} request",
                source=COINGECKO_SOURCE,
            )
        if response.status_code != HTTP_OK:
            raise PriceUnavailableError(
                f"Price API returned HTTP {response.status_code} for {symbol}",
                source=COINGECKO_SOURCE,
                http_status=response.status_code,
            )

        try:
            # parse_float keeps the quoted price exact
            body = response.json(parse_float=Decimal)
            price = Decimal(str(body[coingecko_id][VS_CURRENCY]))
        except (ValueError, KeyError, TypeError, InvalidOperation) as exc:
            raise PriceUnavailableError(
                f"Price API response has no {VS_CURRENCY} price for {symbol}",
                source=COINGECKO_SOURCE,
            ) from exc

        if not price.is_finite() or price <= 0:
            raise PriceUnavailableError(
                f"Price API returned a non-positive price for {symbol}: {price}",
                source=COINGECKO_SOURCE,
            )
        logger.info("Fetched %s price: $%s", symbol, price)
        return price

    # ------------------------------------------------------------------
    # Liquidity-pool tokens
    # ------------------------------------------------------------------

    async def _get_lp_price(self, token: LPToken, network_id: NetworkId) -> Decimal:
        pair_address = token.address_for(network_id)
        rpc = self._rpc_clients.get(network_id)
        if pair_address is None or rpc is None:
            raise PriceUnavailableError(
                f"{token.symbol} cannot be priced on {network_id.name.lower()}",
                source=LP_SOURCE,
            )

        cache_key = f"{LP_SOURCE}:{DATA_TYPE_PRICE}:{int(network_id)}:{pair_address.lower()}"
        return await self._shared_lookup(
            cache_key,
            partial(self._fetch_lp_price, token, network_id, rpc, pair_address),
        )

    async def _fetch_lp_price(
        self,
        token: LPToken,
        network_id: NetworkId,
        rpc: JsonRpcClient,
        pair_address: str,
    ) -> Decimal:
        token0, token1 = token.tokens
        try:
            reserves_data, supply_data, price0, price1 = await asyncio.gather(
                rpc.eth_call(to=pair_address, data=encode_call(GET_RESERVES_SIGNATURE)),
                rpc.eth_call(to=pair_address, data=encode_call(TOTAL_SUPPLY_SIGNATURE)),
                self.get_price(token0, network_id),
                self.get_price(token1, network_id),
            )
            reserve0, reserve1, _ = decode_words(reserves_data, expected=RESERVES_WORDS)[:3]
            (total_supply,) = decode_words(supply_data, expected=1)[:1]
        except (ContractCallError, AbiDecodeError) as exc:
            raise PriceUnavailableError(
                f"Could not read {token.symbol} pool state: {exc}",
                source=LP_SOURCE,
            ) from exc

        if total_supply == 0:
            raise PriceUnavailableError(
                f"{token.symbol} has zero supply",
                source=LP_SOURCE,
            )

        pool_value = add(
            mul(from_raw(reserve0, token0.decimals), price0),
            mul(from_raw(reserve1, token1.decimals), price1),
        )
        price = div_to_scale(pool_value, from_raw(total_supply, token.decimals), token.decimals)
        logger.info("Priced %s from pool reserves: $%s", token.symbol, price)
        return price
