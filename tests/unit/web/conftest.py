"""Shared fixtures for web route tests.

Provides a test FastAPI app with the BondService dependency overridden so
route tests never hit real RPC endpoints or price APIs.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from Bond_Watch.models import Bond, NetworkId
from Bond_Watch.web.app import create_app
from Bond_Watch.web.deps import get_bond_service


@pytest.fixture()
def bond_service(sample_bond: Bond, sold_out_bond: Bond) -> MagicMock:
    """BondService stand-in serving two bonds and applying ``select``."""
    bonds = [sample_bond, sold_out_bond]

    async def get_bonds(
        network_id: NetworkId, select: Callable[[list[Bond]], object] | None = None
    ) -> object:
        return select(bonds) if select is not None else bonds

    service = MagicMock()
    service.get_bonds = AsyncMock(side_effect=get_bonds)
    service.fetch_bond = AsyncMock(return_value=sample_bond)
    service.refresh = AsyncMock(return_value=None)
    return service


@pytest.fixture()
def app(bond_service: MagicMock) -> FastAPI:
    """Create a test app with the bond service dependency overridden."""
    test_app = create_app()

    async def override_get_bond_service() -> MagicMock:
        return bond_service

    test_app.dependency_overrides[get_bond_service] = override_get_bond_service
    return test_app


@pytest_asyncio.fixture()
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    """Async client talking to the app in-process."""
    transport = httpx.ASGITransport(app=app)  # type: ignore[arg-type]
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
