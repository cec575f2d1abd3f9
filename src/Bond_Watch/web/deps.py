"""Dependency injection providers for FastAPI route handlers.

Route handlers never construct services directly; they declare dependencies
and FastAPI injects the app-wide instances created during lifespan startup.
"""

import logging

from fastapi import Request

from Bond_Watch.services.bonds import BondService

logger = logging.getLogger(__name__)


async def get_bond_service(request: Request) -> BondService:
    """Return the app-wide BondService stored on ``app.state``.

    Sharing one instance keeps the bonds cache and the RPC rate limiter
    effective across requests.
    """
    service: BondService = request.app.state.bond_service
    return service
