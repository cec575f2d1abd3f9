"""Rich-based terminal output for bond listings and single-market details.

Color scheme: green = discounted, red = priced above spot, dim = sold out.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from Bond_Watch.models.bond import Bond
from Bond_Watch.models.enums import NetworkId
from Bond_Watch.reporting.formatters import (
    bond_type_label,
    format_bond_duration,
    format_discount,
    format_token_amount,
    format_usd,
)

logger = logging.getLogger(__name__)

# Shared console instance for terminal output
console = Console()

# --- Color scheme ---
COLOR_DISCOUNT: str = "green"
COLOR_PREMIUM: str = "red"
COLOR_HEADER: str = "bold cyan"
COLOR_MUTED: str = "dim"


def _discount_markup(bond: Bond) -> str:
    color = COLOR_DISCOUNT if bond.discount >= 0 else COLOR_PREMIUM
    return f"[{color}]{format_discount(bond.discount)}[/{color}]"


def build_bonds_table(bonds: list[Bond], network_id: NetworkId) -> Table:
    """One row per bond, sold-out markets dimmed."""
    table = Table(title=f"Live bonds ({network_id.name.lower()})", header_style=COLOR_HEADER)
    table.add_column("ID", justify="right")
    table.add_column("Bond")
    table.add_column("Price", justify="right")
    table.add_column("Discount", justify="right")
    table.add_column("Duration", justify="right")
    table.add_column("Type")
    table.add_column("Capacity", justify="right")
    table.add_column("Max payout", justify="right")
    table.add_column("Status")

    for bond in bonds:
        base_symbol = bond.base_token.symbol
        table.add_row(
            bond.id,
            bond.quote_token.symbol,
            format_usd(bond.price.in_usd),
            _discount_markup(bond),
            format_bond_duration(bond.duration),
            bond_type_label(bond),
            format_token_amount(bond.capacity.in_base_token, base_symbol),
            format_token_amount(bond.max_payout.in_base_token, base_symbol),
            "Sold out" if bond.is_sold_out else "Open",
            style=COLOR_MUTED if bond.is_sold_out else None,
        )
    return table


def render_bonds(bonds: list[Bond], network_id: NetworkId) -> None:
    """Print the bond table, or a notice when no market is live."""
    if not bonds:
        console.print(f"[yellow]No live bond markets on {network_id.name.lower()}.[/yellow]")
        return
    console.print(build_bonds_table(bonds, network_id))


def render_bond_detail(bond: Bond) -> None:
    """Print every valued field of a single bond."""
    base_symbol = bond.base_token.symbol
    quote_symbol = bond.quote_token.symbol

    detail = Table(show_header=False, box=None, padding=(0, 2))
    detail.add_column("Field", style="bold")
    detail.add_column("Value")
    detail.add_row("Type", bond_type_label(bond))
    detail.add_row("Duration", format_bond_duration(bond.duration))
    detail.add_row("Price", format_usd(bond.price.in_usd))
    detail.add_row(
        f"Price in {quote_symbol}",
        format_token_amount(bond.price.in_base_token, quote_symbol, places=6),
    )
    detail.add_row("Discount", _discount_markup(bond))
    detail.add_row(
        "Capacity",
        f"{format_token_amount(bond.capacity.in_base_token, base_symbol)} / "
        f"{format_token_amount(bond.capacity.in_quote_token, quote_symbol)}",
    )
    detail.add_row(
        "Max payout",
        f"{format_token_amount(bond.max_payout.in_base_token, base_symbol)} / "
        f"{format_token_amount(bond.max_payout.in_quote_token, quote_symbol)}",
    )
    detail.add_row("Status", "Sold out" if bond.is_sold_out else "Open")

    console.print(
        Panel(
            detail,
            title=f"Bond #{bond.id}: {quote_symbol} for {base_symbol}",
            style=COLOR_HEADER,
        )
    )
