"""CLI entry point for YachtMe - yacht charter site backend."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .admin.bookings import BookingAdmin
from .admin.calendar import DayStatus, parse_month
from .admin.errors import AdminError
from .admin.fleet import FleetAdmin
from .admin.site_settings import SettingsAdmin
from .config import get_settings
from .models.boat import BOAT_TYPE_LABELS
from .models.booking import BOOKING_STATUS_LABELS
from .storage.supabase_client import SupabaseGateway
from .utils import format_currency, format_date_short, generate_slug
from .version import APP_VERSION, GIT_SHA_SHORT

app = typer.Typer(
    name="yachtme",
    help="YachtMe - yacht charter catalog, bookings and back office",
)
console = Console()

DAY_STYLES = {
    DayStatus.FREE: "dim",
    DayStatus.CONFIRMED: "bold green",
    DayStatus.PENDING: "bold yellow",
    DayStatus.MIXED: "bold magenta",
}


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
):
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True)] if verbose else None,
    )


@app.command()
def version():
    """Show version and build information."""
    console.print(f"YachtMe v{APP_VERSION} (build: {GIT_SHA_SHORT})")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default: API_HOST)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port (default: API_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "yachtme.api.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
    )


@app.command()
def fleet(
    search: str = typer.Option("", "--search", "-s", help="Filter by name or type"),
):
    """List the boats in the fleet."""
    asyncio.run(_fleet(search))


async def _fleet(search: str):
    """Async implementation of fleet command."""
    workspace = FleetAdmin(SupabaseGateway())
    try:
        await workspace.load()
    except AdminError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    boats = workspace.filter(search)
    if not boats:
        console.print("[dim]No boats found[/dim]")
        return

    table = Table(title=f"Fleet ({len(boats)} boats)")
    table.add_column("Name", style="cyan")
    table.add_column("Slug", style="dim")
    table.add_column("Type", style="yellow")
    table.add_column("Full day", justify="right", style="green")
    table.add_column("Half day", justify="right")
    table.add_column("Seats", justify="right")
    table.add_column("Featured")

    for boat in boats:
        table.add_row(
            boat.name,
            boat.slug,
            BOAT_TYPE_LABELS[boat.type],
            format_currency(boat.price_full_day),
            format_currency(boat.price_half_day),
            str(boat.capacity) if boat.capacity else "-",
            "yes" if boat.is_featured else "",
        )

    console.print(table)


@app.command()
def bookings(
    search: str = typer.Option("", "--search", "-s", help="Customer name, email or boat"),
    status: str = typer.Option("all", "--status", help="all, pending, confirmed or cancelled"),
):
    """List bookings, newest first."""
    asyncio.run(_bookings(search, status))


async def _bookings(search: str, status: str):
    """Async implementation of bookings command."""
    workspace = BookingAdmin(SupabaseGateway())
    try:
        await workspace.load()
    except AdminError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    rows = workspace.filter(search, status)
    if not rows:
        console.print("[dim]No bookings found[/dim]")
        return

    table = Table(title=f"Bookings ({len(rows)} total)")
    table.add_column("Customer", style="cyan")
    table.add_column("Email", style="dim")
    table.add_column("Boat", style="yellow")
    table.add_column("From")
    table.add_column("To")
    table.add_column("Status")
    table.add_column("Total", justify="right", style="green")

    for booking in rows:
        table.add_row(
            booking.customer_name,
            booking.customer_email,
            booking.boat_name or "-",
            format_date_short(booking.start_date),
            format_date_short(booking.end_date),
            BOOKING_STATUS_LABELS[booking.status],
            format_currency(booking.total_price) if booking.total_price else "-",
        )

    console.print(table)


@app.command()
def calendar(
    month: Optional[str] = typer.Argument(None, help="Month as YYYY-MM (default: current)"),
):
    """Show booking occupancy for one month."""
    try:
        year, month_number = parse_month(month)
    except ValueError:
        console.print(f"[red]Invalid month: {month} (expected YYYY-MM)[/red]")
        raise typer.Exit(1)
    asyncio.run(_calendar(year, month_number))


async def _calendar(year: int, month: int):
    """Async implementation of calendar command."""
    workspace = BookingAdmin(SupabaseGateway())
    try:
        await workspace.load()
    except AdminError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    grid = workspace.calendar(year, month)
    table = Table(title=grid.title.capitalize())
    for label in grid.weekdays:
        table.add_column(label, justify="center")

    cells = [""] * grid.leading_blanks
    for day in grid.days:
        style = DAY_STYLES[day.status]
        suffix = f" ({day.count})" if day.count else ""
        cells.append(f"[{style}]{day.day.day}{suffix}[/{style}]")
    while len(cells) % 7:
        cells.append("")
    for i in range(0, len(cells), 7):
        table.add_row(*cells[i : i + 7])

    console.print(table)
    console.print(
        "[bold green]confirmed[/bold green]  [bold yellow]pending[/bold yellow]  "
        "[bold magenta]mixed[/bold magenta]"
    )


@app.command()
def settings():
    """Show site settings grouped as in the admin panel."""
    asyncio.run(_settings())


async def _settings():
    """Async implementation of settings command."""
    workspace = SettingsAdmin(SupabaseGateway())
    try:
        await workspace.load()
    except AdminError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    groups = workspace.groups()
    for title, entries in (
        ("Images", groups.images),
        ("Site", groups.site),
        ("Contact", groups.contact),
        ("Social", groups.social),
    ):
        if not entries:
            continue
        table = Table(title=title)
        table.add_column("Key", style="cyan")
        table.add_column("Label", style="yellow")
        table.add_column("Value")
        for entry in entries:
            table.add_row(entry.key, entry.label, entry.value or "[dim]-[/dim]")
        console.print(table)


@app.command("set-setting")
def set_setting(
    key: str = typer.Argument(..., help="Setting key, e.g. contact_phone"),
    value: str = typer.Argument(..., help="New value"),
):
    """Create or update one site setting."""
    asyncio.run(_set_setting(key, value))


async def _set_setting(key: str, value: str):
    """Async implementation of set-setting command."""
    workspace = SettingsAdmin(SupabaseGateway())
    try:
        result = await workspace.save(key, value)
    except AdminError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]{result.message}:[/green] {key} = {value}")


@app.command()
def slug(text: str = typer.Argument(..., help="Name or title")):
    """Print the URL slug generated for a name or title."""
    console.print(generate_slug(text))


if __name__ == "__main__":
    app()
