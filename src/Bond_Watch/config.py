"""Runtime settings resolved from explicit arguments, environment, then defaults."""

from __future__ import annotations

import logging
import os
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

from Bond_Watch.constants import BOND_DEPOSITORY_ADDRESSES
from Bond_Watch.models.enums import NetworkId
from Bond_Watch.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

ENV_PREFIX: Final[str] = "BOND_WATCH_"

DEFAULT_MAINNET_RPC_URL: Final[str] = "https://eth.llamarpc.com"
DEFAULT_COINGECKO_URL: Final[str] = "https://api.coingecko.com/api/v3"
DEFAULT_BONDS_TTL: Final[int] = 60
DEFAULT_PRICE_TTL: Final[int] = 5 * 60
DEFAULT_MAX_CONCURRENT: Final[int] = 8
DEFAULT_REQUESTS_PER_SECOND: Final[float] = 10.0


class Settings(BaseModel):
    """Endpoints, contract addresses, and tuning knobs for one process.

    Build with :meth:`from_env` rather than the constructor so environment
    overrides apply.
    """

    model_config = ConfigDict(frozen=True)

    rpc_urls: dict[NetworkId, str] = Field(default_factory=dict)
    depository_addresses: dict[NetworkId, str] = Field(
        default_factory=lambda: dict(BOND_DEPOSITORY_ADDRESSES)
    )
    coingecko_url: str = DEFAULT_COINGECKO_URL
    bonds_ttl_seconds: int = Field(default=DEFAULT_BONDS_TTL, ge=0)
    price_ttl_seconds: int = Field(default=DEFAULT_PRICE_TTL, ge=0)
    max_concurrent: int = Field(default=DEFAULT_MAX_CONCURRENT, ge=1)
    requests_per_second: float = Field(default=DEFAULT_REQUESTS_PER_SECOND, gt=0)

    @classmethod
    def from_env(cls, **overrides: object) -> Settings:
        """Resolve settings: *overrides* > ``BOND_WATCH_*`` env vars > defaults."""
        rpc_urls: dict[NetworkId, str] = {NetworkId.MAINNET: DEFAULT_MAINNET_RPC_URL}
        depository_addresses = dict(BOND_DEPOSITORY_ADDRESSES)
        for network in NetworkId:
            rpc_url = _env(f"RPC_URL_{network.name}")
            if rpc_url:
                rpc_urls[network] = rpc_url
            depository = _env(f"DEPOSITORY_{network.name}")
            if depository:
                depository_addresses[network] = depository

        values: dict[str, object] = {
            "rpc_urls": rpc_urls,
            "depository_addresses": depository_addresses,
        }
        for field_name, env_key in (
            ("coingecko_url", "COINGECKO_URL"),
            ("bonds_ttl_seconds", "BONDS_TTL"),
            ("price_ttl_seconds", "PRICE_TTL"),
            ("max_concurrent", "MAX_CONCURRENT"),
            ("requests_per_second", "REQUESTS_PER_SECOND"),
        ):
            env_value = _env(env_key)
            if env_value:
                values[field_name] = env_value

        values.update(overrides)
        settings = cls.model_validate(values)
        logger.debug(
            "Settings resolved: networks=%s coingecko=%s",
            sorted(network.name.lower() for network in settings.rpc_urls),
            settings.coingecko_url,
        )
        return settings

    def rpc_url_for(self, network_id: NetworkId) -> str:
        """Return the JSON-RPC endpoint for *network_id*.

        Raises:
            ConfigurationError: If no endpoint is configured.
        """
        url = self.rpc_urls.get(network_id)
        if not url:
            msg = (
                f"No RPC URL configured for {network_id.name.lower()}; "
                f"set {ENV_PREFIX}RPC_URL_{network_id.name}"
            )
            raise ConfigurationError(msg)
        return url

    def depository_address_for(self, network_id: NetworkId) -> str:
        """Return the Bond Depository address on *network_id*.

        Raises:
            ConfigurationError: If the depository is not deployed/configured.
        """
        address = self.depository_addresses.get(network_id)
        if not address:
            msg = (
                f"No Bond Depository address for {network_id.name.lower()}; "
                f"set {ENV_PREFIX}DEPOSITORY_{network_id.name}"
            )
            raise ConfigurationError(msg)
        return address


def _env(key: str) -> str | None:
    """Read a ``BOND_WATCH_``-prefixed environment variable, ignoring blanks."""
    value = os.environ.get(f"{ENV_PREFIX}{key}", "").strip()
    return value or None
