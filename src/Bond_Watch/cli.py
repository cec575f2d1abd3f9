"""CLI entry point for Bond Watch: live bond market valuations.

Provides the ``bond-watch`` command with subcommands for listing every live
bond market of a network and inspecting a single market.

This is the ONLY module where printing is allowed. All other modules use
``logging``. Async internals are bridged to typer's synchronous interface via
``asyncio.run()``.
"""

from __future__ import annotations

import asyncio
import json
from enum import StrEnum
from typing import Annotated

import typer
from rich.console import Console

from Bond_Watch.config import Settings
from Bond_Watch.logging_config import configure_logging
from Bond_Watch.models import Bond, NetworkId
from Bond_Watch.reporting.formatters import bond_payload
from Bond_Watch.reporting.terminal import render_bond_detail, render_bonds
from Bond_Watch.services import BondService, exclude_sold_out, sort_by_discount
from Bond_Watch.utils.exceptions import BondDataError, ConfigurationError

# ---------------------------------------------------------------------------
# Typer app
# ---------------------------------------------------------------------------

app = typer.Typer(name="bond-watch", help="Live bond market valuations from the Bond Depository")

# Rich console for formatted output
console = Console()


class NetworkChoice(StrEnum):
    """Network names accepted on the command line."""

    MAINNET = "mainnet"
    TESTNET = "testnet"


class SortChoice(StrEnum):
    """Orderings for the bond list."""

    ID = "id"
    DISCOUNT = "discount"


def _build_service() -> BondService:
    """Construct a BondService from environment settings."""
    return BondService.from_settings(Settings.from_env())


def _print_json(payload: object) -> None:
    console.print_json(json.dumps(payload))


# ---------------------------------------------------------------------------
# bonds command
# ---------------------------------------------------------------------------


@app.command()
def bonds(
    network: Annotated[
        NetworkChoice, typer.Option(help="Network whose depository to read")
    ] = NetworkChoice.MAINNET,
    sort: Annotated[SortChoice, typer.Option(help="Order bonds by id or discount")] = SortChoice.ID,
    include_sold_out: Annotated[
        bool, typer.Option("--include-sold-out/--hide-sold-out", help="Show sold-out markets")
    ] = True,
    as_json: Annotated[bool, typer.Option("--json", help="Print bonds as JSON")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Suppress info logging")] = False,
) -> None:
    """List every live bond market with its price, discount, and capacity."""
    configure_logging(verbose=verbose, quiet=quiet)
    network_id = NetworkId.from_name(network.value)

    try:
        result = asyncio.run(
            _bonds_async(network_id, sort=sort, include_sold_out=include_sold_out)
        )
    except (ConfigurationError, BondDataError) as exc:
        console.print(f"[red]Could not fetch bonds: {exc}[/red]")
        raise typer.Exit(code=1) from exc

    if as_json:
        _print_json([bond_payload(bond) for bond in result])
    else:
        render_bonds(result, network_id)


async def _bonds_async(
    network_id: NetworkId,
    *,
    sort: SortChoice,
    include_sold_out: bool,
) -> list[Bond]:
    """Fetch, filter, and order the bonds of *network_id*."""

    def _select(items: list[Bond]) -> list[Bond]:
        selected = items if include_sold_out else exclude_sold_out(items)
        if sort == SortChoice.DISCOUNT:
            return sort_by_discount(selected)
        return sorted(selected, key=lambda bond: int(bond.id))

    service = _build_service()
    try:
        return await service.get_bonds(network_id, select=_select)
    finally:
        await service.aclose()


# ---------------------------------------------------------------------------
# market command
# ---------------------------------------------------------------------------


@app.command()
def market(
    market_id: Annotated[int, typer.Argument(min=0, help="Bond Depository market id")],
    network: Annotated[
        NetworkChoice, typer.Option(help="Network whose depository to read")
    ] = NetworkChoice.MAINNET,
    as_json: Annotated[bool, typer.Option("--json", help="Print the bond as JSON")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    """Value a single bond market and show every field."""
    configure_logging(verbose=verbose)
    network_id = NetworkId.from_name(network.value)

    try:
        bond = asyncio.run(_market_async(network_id, str(market_id)))
    except (ConfigurationError, BondDataError) as exc:
        console.print(f"[red]Could not value market {market_id}: {exc}[/red]")
        raise typer.Exit(code=1) from exc

    if as_json:
        _print_json(bond_payload(bond))
    else:
        render_bond_detail(bond)


async def _market_async(network_id: NetworkId, market_id: str) -> Bond:
    """Value one market, closing the service afterwards."""
    service = _build_service()
    try:
        return await service.fetch_bond(network_id, market_id)
    finally:
        await service.aclose()
