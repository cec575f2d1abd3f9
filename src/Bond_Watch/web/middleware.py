"""Exception handlers mapping bond domain errors to HTTP responses.

Maps exceptions from ``Bond_Watch.utils.exceptions`` to status codes so route
handlers can let them propagate.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from Bond_Watch.utils.exceptions import (
    BondDataError,
    ConfigurationError,
    InvalidMarketDataError,
    PriceUnavailableError,
    RateLimitExceededError,
    UnknownTokenError,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Domain exception -> HTTP status handlers
# ---------------------------------------------------------------------------


async def _unknown_token_handler(request: Request, exc: UnknownTokenError) -> JSONResponse:
    """Map UnknownTokenError to HTTP 404."""
    logger.warning("Unknown quote token: %s", exc)
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def _invalid_market_data_handler(
    request: Request, exc: InvalidMarketDataError
) -> JSONResponse:
    """Map InvalidMarketDataError to HTTP 422."""
    logger.warning("Market cannot be valued: %s", exc)
    return JSONResponse(status_code=422, content={"detail": str(exc)})


async def _rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceededError
) -> JSONResponse:
    """Map RateLimitExceededError to HTTP 429, forwarding Retry-After."""
    logger.warning("Rate limit exceeded: %s", exc)
    headers = {"Retry-After": str(int(exc.retry_after))} if exc.retry_after else None
    return JSONResponse(status_code=429, content={"detail": str(exc)}, headers=headers)


async def _price_unavailable_handler(
    request: Request, exc: PriceUnavailableError
) -> JSONResponse:
    """Map PriceUnavailableError to HTTP 503."""
    logger.error("Price unavailable: %s", exc)
    return JSONResponse(status_code=503, content={"detail": str(exc)})


async def _bond_data_error_handler(request: Request, exc: BondDataError) -> JSONResponse:
    """Map base BondDataError to HTTP 502 (catch-all for upstream failures)."""
    logger.error("Bond data error [%s]: %s", exc.source, exc)
    return JSONResponse(status_code=502, content={"detail": str(exc)})


async def _configuration_error_handler(
    request: Request, exc: ConfigurationError
) -> JSONResponse:
    """Map ConfigurationError (network not configured) to HTTP 503."""
    logger.error("Configuration error: %s", exc)
    return JSONResponse(status_code=503, content={"detail": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    """Register all domain exception handlers on the FastAPI application.

    More specific exception types must be registered before their base classes
    so FastAPI matches them correctly.
    """
    app.add_exception_handler(UnknownTokenError, _unknown_token_handler)  # type: ignore[arg-type]
    app.add_exception_handler(InvalidMarketDataError, _invalid_market_data_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RateLimitExceededError, _rate_limit_exceeded_handler)  # type: ignore[arg-type]
    app.add_exception_handler(PriceUnavailableError, _price_unavailable_handler)  # type: ignore[arg-type]
    app.add_exception_handler(BondDataError, _bond_data_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ConfigurationError, _configuration_error_handler)  # type: ignore[arg-type]
