"""Live bond market fetcher.

Enumerates the live markets of a Bond Depository and values each one in its
own concurrent pipeline::

    liveMarkets()
      └─ per market (independent, concurrent)
           ├─ markets(id) + terms(id)                       (join)
           ├─ resolve quote token from the registry
           ├─ base price + quote price + marketPrice(id)    (join)
           └─ compute_bond(...)

A pipeline that raises is dropped from the result and logged; it never
cancels or affects the other pipelines. Only a failing ``liveMarkets()`` call
is raised to the caller, because there is nothing left to degrade to.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Callable
from decimal import Decimal
from typing import Final, TypeVar

import httpx

from Bond_Watch.analysis.valuation import compute_bond
from Bond_Watch.chain.depository import BondDepository
from Bond_Watch.chain.rpc import JsonRpcClient, build_http_client
from Bond_Watch.config import DEFAULT_BONDS_TTL, Settings
from Bond_Watch.constants import OHM_TOKEN, PRICE_NETWORK
from Bond_Watch.models.bond import Bond
from Bond_Watch.models.enums import NetworkId
from Bond_Watch.models.tokens import Token
from Bond_Watch.services._helpers import (
    Rejected,
    fulfilled_values,
    gather_settled,
    rejected_errors,
)
from Bond_Watch.services.cache import DATA_TYPE_BONDS, ServiceCache
from Bond_Watch.services.pricing import PriceService
from Bond_Watch.services.token_registry import TokenRegistry
from Bond_Watch.utils.decimals import from_raw
from Bond_Watch.utils.exceptions import BondDataError, ConfigurationError
from Bond_Watch.utils.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

BONDS_QUERY_NAME: Final[str] = "useBonds"


def bonds_query_key(network_id: NetworkId) -> tuple[str, NetworkId]:
    """Memoization key for the bond list of one network."""
    return (BONDS_QUERY_NAME, network_id)


def _cache_key(network_id: NetworkId) -> str:
    name, network = bonds_query_key(network_id)
    return f"{name}:{DATA_TYPE_BONDS}:{int(network)}"


# ---------------------------------------------------------------------------
# Selectors
# ---------------------------------------------------------------------------


def exclude_sold_out(bonds: list[Bond]) -> list[Bond]:
    """Keep only bonds that can still be bought."""
    return [bond for bond in bonds if not bond.is_sold_out]


def sort_by_discount(bonds: list[Bond]) -> list[Bond]:
    """Best discount first; ties keep market id order."""
    return sorted(bonds, key=lambda bond: (-bond.discount, int(bond.id)))


class BondService:
    """Fetch and value every live bond market of a network.

    Usage::

        service = BondService.from_settings(Settings.from_env())
        try:
            bonds = await service.get_bonds(NetworkId.MAINNET, select=exclude_sold_out)
        finally:
            await service.aclose()
    """

    def __init__(
        self,
        *,
        depositories: dict[NetworkId, BondDepository],
        registry: TokenRegistry,
        prices: PriceService,
        cache: ServiceCache,
        base_token: Token = OHM_TOKEN,
        bonds_ttl: int = DEFAULT_BONDS_TTL,
        clock: Callable[[], float] = time.time,
        http_client: httpx.AsyncClient | None = None,
        unconfigured: dict[NetworkId, ConfigurationError] | None = None,
    ) -> None:
        self._depositories = dict(depositories)
        self._registry = registry
        self._prices = prices
        self._cache = cache
        self._base_token = base_token
        self._bonds_ttl = bonds_ttl
        self._clock = clock
        self._http_client = http_client
        self._unconfigured = dict(unconfigured or {})

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        cache: ServiceCache | None = None,
        rate_limiter: RateLimiter | None = None,
    ) -> BondService:
        """Wire RPC clients, depositories, and the price service from *settings*.

        Networks without both an RPC URL and a depository address are skipped;
        asking for them later raises the ``ConfigurationError`` that names the
        missing environment variable.
        """
        cache = cache if cache is not None else ServiceCache()
        limiter = (
            rate_limiter
            if rate_limiter is not None
            else RateLimiter(
                max_concurrent=settings.max_concurrent,
                requests_per_second=settings.requests_per_second,
            )
        )
        http_client = build_http_client()

        rpc_clients: dict[NetworkId, JsonRpcClient] = {}
        depositories: dict[NetworkId, BondDepository] = {}
        unconfigured: dict[NetworkId, ConfigurationError] = {}
        for network_id in NetworkId:
            try:
                url = settings.rpc_url_for(network_id)
            except ConfigurationError as exc:
                unconfigured[network_id] = exc
                continue
            rpc = JsonRpcClient(url, rate_limiter=limiter, client=http_client)
            rpc_clients[network_id] = rpc
            try:
                address = settings.depository_address_for(network_id)
            except ConfigurationError as exc:
                unconfigured[network_id] = exc
                continue
            depositories[network_id] = BondDepository(rpc, address)

        prices = PriceService(
            cache=cache,
            rate_limiter=limiter,
            rpc_clients=rpc_clients,
            coingecko_url=settings.coingecko_url,
            price_ttl=settings.price_ttl_seconds,
            client=http_client,
        )
        logger.info(
            "BondService configured for networks: %s",
            ", ".join(sorted(network.name.lower() for network in depositories)) or "none",
        )
        return cls(
            depositories=depositories,
            registry=TokenRegistry(),
            prices=prices,
            cache=cache,
            bonds_ttl=settings.bonds_ttl_seconds,
            http_client=http_client,
            unconfigured=unconfigured,
        )

    async def aclose(self) -> None:
        """Close the price service and the shared HTTP client, if owned."""
        await self._prices.aclose()
        if self._http_client is not None:
            await self._http_client.aclose()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_bonds(
        self,
        network_id: NetworkId,
        select: Callable[[list[Bond]], T] | None = None,
    ) -> list[Bond] | T:
        """Cached :meth:`fetch_bonds`, optionally transformed by *select*.

        The unselected list is cached per network for ``bonds_ttl`` seconds;
        *select* runs on every call.
        """
        cache_key = _cache_key(network_id)
        cached = await self._cache.get(cache_key)
        if cached is not None:
            logger.debug("Cache hit for bonds: %s", cache_key)
            bonds = _deserialize_bonds(cached)
        else:
            bonds = await self.fetch_bonds(network_id)
            await self._cache.set(cache_key, _serialize_bonds(bonds), self._bonds_ttl)

        return select(bonds) if select is not None else bonds

    async def refresh(self, network_id: NetworkId) -> None:
        """Forget the cached bonds of *network_id* and every cached price."""
        await self._cache.invalidate(_cache_key(network_id))
        await self._prices.clear_prices()
        logger.info("Cleared cached bonds for %s", network_id.name.lower())

    async def fetch_bonds(self, network_id: NetworkId) -> list[Bond]:
        """Value every live market on *network_id*, dropping any that fail.

        Raises:
            ConfigurationError: If *network_id* has no depository configured.
            ContractCallError: If the live market ids cannot be read.
        """
        depository = self._depository_for(network_id)
        market_ids = await depository.live_markets()

        outcomes = await gather_settled(
            self._value_market(depository, market_id) for market_id in market_ids
        )

        for market_id, outcome in zip(market_ids, outcomes, strict=True):
            if isinstance(outcome, Rejected):
                logger.warning(
                    "Dropping bond market %s on %s: %s",
                    market_id,
                    network_id.name.lower(),
                    _describe_error(outcome.error),
                )

        bonds = fulfilled_values(outcomes)
        logger.info(
            "Fetched %d of %d live bond markets on %s (%d dropped)",
            len(bonds),
            len(market_ids),
            network_id.name.lower(),
            len(rejected_errors(outcomes)),
        )
        return bonds

    async def fetch_bond(self, network_id: NetworkId, market_id: str) -> Bond:
        """Value a single market, raising instead of dropping on failure.

        Raises:
            ConfigurationError: If *network_id* has no depository configured.
            BondDataError: If any step of the market pipeline fails.
        """
        depository = self._depository_for(network_id)
        return await self._value_market(depository, market_id)

    # ------------------------------------------------------------------
    # Market pipeline
    # ------------------------------------------------------------------

    async def _value_market(self, depository: BondDepository, market_id: str) -> Bond:
        market, terms = await asyncio.gather(
            depository.markets(market_id),
            depository.terms(market_id),
        )

        quote_token = self._registry.require_token(market.quote_token, market_id=market_id)

        base_token_per_usd, quote_token_per_usd, raw_market_price = await asyncio.gather(
            self._prices.get_price(self._base_token, PRICE_NETWORK),
            self._prices.get_price(quote_token, PRICE_NETWORK),
            depository.market_price(market_id),
        )
        quote_token_per_base_token: Decimal = from_raw(raw_market_price, self._base_token.decimals)

        return compute_bond(
            market_id,
            market,
            terms,
            self._base_token,
            quote_token,
            quote_token_per_base_token,
            base_token_per_usd,
            quote_token_per_usd,
            now=self._clock(),
        )

    def _depository_for(self, network_id: NetworkId) -> BondDepository:
        depository = self._depositories.get(network_id)
        if depository is None:
            reason = self._unconfigured.get(network_id)
            if reason is not None:
                raise ConfigurationError(str(reason))
            msg = f"No Bond Depository configured for {network_id.name.lower()}"
            raise ConfigurationError(msg)
        return depository


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def _describe_error(error: BaseException) -> str:
    """One-line reason for a dropped market, naming the failing source."""
    if isinstance(error, BondDataError):
        return f"[{error.source}] {error}"
    return f"{type(error).__name__}: {error}"


def _serialize_bonds(bonds: list[Bond]) -> str:
    """Serialize a list of Bond models to a JSON string."""
    return json.dumps([bond.model_dump(mode="json") for bond in bonds])


def _deserialize_bonds(data: str) -> list[Bond]:
    """Deserialize a JSON string back to a list of Bond models."""
    raw_list: list[dict[str, object]] = json.loads(data)
    return [Bond.model_validate(item) for item in raw_list]
