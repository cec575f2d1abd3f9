"""Custom exception hierarchy for the Bond Watch application.

All per-market failures inherit from BondDataError, which carries the market
id and the data source that failed so the fetcher can log a useful reason
before dropping the market.
"""


class BondDataError(Exception):
    """Base exception for all failures while reading or valuing a bond market.

    Attributes:
        market_id: The bond market id involved, or None for network-wide calls.
        source: The data source that failed (e.g., "rpc", "coingecko", "registry").
        http_status: The HTTP status code, if the failure was HTTP-related.
    """

    def __init__(
        self,
        message: str,
        *,
        market_id: str | None = None,
        source: str,
        http_status: int | None = None,
    ) -> None:
        self.market_id = market_id
        self.source = source
        self.http_status = http_status
        super().__init__(message)


class UnknownTokenError(BondDataError):
    """Raised when a quote-token address is not in the token registry."""

    def __init__(
        self,
        message: str,
        *,
        address: str,
        market_id: str | None = None,
        source: str = "registry",
    ) -> None:
        self.address = address
        super().__init__(message, market_id=market_id, source=source)


class ContractCallError(BondDataError):
    """Raised when a JSON-RPC call fails or returns undecodable data."""


class PriceUnavailableError(BondDataError):
    """Raised when the price oracle cannot produce a USD price for a token."""


class InvalidMarketDataError(BondDataError):
    """Raised when market inputs cannot be valued (e.g., a non-positive price)."""


class RateLimitExceededError(BondDataError):
    """Raised when an upstream endpoint answers HTTP 429."""

    def __init__(
        self,
        message: str,
        *,
        market_id: str | None = None,
        source: str,
        http_status: int | None = 429,
        retry_after: float | None = None,
    ) -> None:
        self.retry_after = retry_after
        super().__init__(message, market_id=market_id, source=source, http_status=http_status)


class ConfigurationError(Exception):
    """Raised when a network is missing the settings needed to reach it."""
