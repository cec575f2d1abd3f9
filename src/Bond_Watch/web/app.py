"""FastAPI app factory: JSON API over the bond fetcher."""

import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from starlette.requests import Request
from starlette.responses import Response

from Bond_Watch.config import Settings
from Bond_Watch.logging_config import configure_logging
from Bond_Watch.services.bonds import BondService
from Bond_Watch.web.middleware import register_exception_handlers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the app-wide BondService so its cache and rate limiter are shared."""
    service = BondService.from_settings(Settings.from_env())
    app.state.bond_service = service
    try:
        yield
    finally:
        await service.aclose()
        logger.info("BondService closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging()

    app = FastAPI(title="Bond Watch", lifespan=lifespan)
    register_exception_handlers(app)

    from Bond_Watch.web.routes import bonds_router

    app.include_router(bonds_router)

    # Request logging middleware
    access_logger = logging.getLogger("Bond_Watch.web.access")

    @app.middleware("http")
    async def log_requests(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        path = request.url.path

        if path == "/api/health":
            access_logger.debug(
                "%s %s %s %.0fms",
                request.method,
                path,
                response.status_code,
                duration_ms,
            )
        else:
            access_logger.info(
                "%s %s %s %.0fms",
                request.method,
                path,
                response.status_code,
                duration_ms,
            )
        return response

    @app.get("/api/health")
    async def health_check() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    logger.info("Bond Watch web app created")
    return app
