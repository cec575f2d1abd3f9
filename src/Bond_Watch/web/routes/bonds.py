"""Bond routes: live market list and single-market valuation as JSON.

Domain errors propagate to the handlers in ``Bond_Watch.web.middleware``.
"""

import logging
from enum import StrEnum
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import JSONResponse

from Bond_Watch.models.bond import Bond
from Bond_Watch.models.enums import NetworkId
from Bond_Watch.reporting.formatters import bond_payload
from Bond_Watch.services.bonds import BondService, exclude_sold_out, sort_by_discount
from Bond_Watch.web.deps import get_bond_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bonds", tags=["bonds"])


class NetworkName(StrEnum):
    MAINNET = "mainnet"
    TESTNET = "testnet"


class BondSort(StrEnum):
    ID = "id"
    DISCOUNT = "discount"


def _order(bonds: list[Bond], sort: BondSort) -> list[Bond]:
    if sort == BondSort.DISCOUNT:
        return sort_by_discount(bonds)
    return sorted(bonds, key=lambda bond: int(bond.id))


@router.get("")
async def list_bonds(
    service: Annotated[BondService, Depends(get_bond_service)],
    network: Annotated[NetworkName, Query()] = NetworkName.MAINNET,
    include_sold_out: Annotated[bool, Query()] = True,
    sort: Annotated[BondSort, Query()] = BondSort.ID,
    refresh: Annotated[bool, Query()] = False,
) -> JSONResponse:
    """Every live bond on *network*; markets that fail to value are omitted.

    ``refresh=true`` drops cached bonds and prices before fetching.
    """
    network_id = NetworkId.from_name(network.value)
    if refresh:
        await service.refresh(network_id)

    def _select(bonds: list[Bond]) -> list[Bond]:
        selected = bonds if include_sold_out else exclude_sold_out(bonds)
        return _order(selected, sort)

    bonds = await service.get_bonds(network_id, select=_select)
    logger.debug("Serving %d bonds for %s", len(bonds), network.value)
    return JSONResponse([bond_payload(bond) for bond in bonds])


@router.get("/{market_id}")
async def get_bond(
    service: Annotated[BondService, Depends(get_bond_service)],
    market_id: Annotated[int, Path(ge=0)],
    network: Annotated[NetworkName, Query()] = NetworkName.MAINNET,
) -> JSONResponse:
    """Value a single market, reporting why it failed instead of omitting it."""
    bond = await service.fetch_bond(NetworkId.from_name(network.value), str(market_id))
    return JSONResponse(bond_payload(bond))
