"""CLI entry point for junkcar - vehicle inventory search."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional

import typer
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import get_settings
from .errors import JunkcarError, NotFoundError, PersistenceError, ValidationError
from .models.filters import FilterSpecification
from .models.saved_search import SavedSearch
from .models.stats import VehicleStats
from .models.vehicle import Vehicle
from .search.filter_state import FilterState
from .search.saved_searches import JsonFileSearchStorage, SavedSearchRegistry
from .search.stats import summarize
from .storage.vehicle_store import VehicleStore

app = typer.Typer(
    name="junkcar",
    help="junkcar - search, save and summarize the yard's vehicle inventory",
)
saved_app = typer.Typer(help="Manage saved searches")
app.add_typer(saved_app, name="saved")

console = Console()

_VEHICLE_LIST = TypeAdapter(List[Vehicle])

# Shared filter options
SOURCE_OPT = typer.Option(
    None, "--source", help="JSON export of vehicles (defaults to Supabase)"
)
SEARCH_OPT = typer.Option("", "--search", "-s", help="Free-text search")
STATUS_OPT = typer.Option(
    "all", "--status", help="yard, sold, pick-your-part, sa-recycling or all"
)
PAPERWORK_OPT = typer.Option(
    "all", "--paperwork", help="Paperwork status, 'no-title' or all"
)
MIN_PRICE_OPT = typer.Option("", "--min-price", help="Minimum price (inclusive)")
MAX_PRICE_OPT = typer.Option("", "--max-price", help="Maximum price (inclusive)")
START_DATE_OPT = typer.Option("", "--start-date", help="Added on or after (YYYY-MM-DD)")
END_DATE_OPT = typer.Option("", "--end-date", help="Added on or before (YYYY-MM-DD)")
IMAGES_OPT = typer.Option(None, "--images/--no-images", help="Require (or exclude) photos")
DOCUMENTS_OPT = typer.Option(
    None, "--documents/--no-documents", help="Require (or exclude) documents"
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Configure logging for every command."""
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _fail(message: str) -> NoReturn:
    console.print(f"[red]{message}[/red]")
    raise typer.Exit(1)


def _filter_changes(
    search: str,
    status: str,
    paperwork: str,
    min_price: str,
    max_price: str,
    start_date: str,
    end_date: str,
    images: Optional[bool],
    documents: Optional[bool],
) -> Dict[str, Any]:
    """Collect only the filter options the user actually set."""
    changes: Dict[str, Any] = {}
    if search:
        changes["searchTerm"] = search
    if status != "all":
        changes["status"] = status
    if paperwork != "all":
        changes["paperwork"] = paperwork
    price = {k: v for k, v in (("min", min_price), ("max", max_price)) if v}
    if price:
        changes["priceRange"] = price
    dates = {k: v for k, v in (("startDate", start_date), ("endDate", end_date)) if v}
    if dates:
        changes["dateRange"] = dates
    if images is not None:
        changes["hasImages"] = images
    if documents is not None:
        changes["hasDocuments"] = documents
    return changes


def _apply_changes(state: FilterState, changes: Dict[str, Any]) -> None:
    try:
        state.set_filters(changes)
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = error["loc"][0] if error["loc"] else "value"
        raise ValidationError(f"Invalid filter {field}: {error['msg']}") from e


def _load_vehicles(source: Optional[Path]) -> List[Vehicle]:
    """Load vehicles from a JSON export or from Supabase."""
    if source is not None:
        try:
            return _VEHICLE_LIST.validate_json(source.read_text(encoding="utf-8"))
        except (OSError, PydanticValidationError) as e:
            raise ValidationError(f"Could not read vehicles from {source}: {e}") from e

    store = VehicleStore()
    with console.status("Loading vehicles..."):
        return asyncio.run(store.refresh())


def _get_registry() -> SavedSearchRegistry:
    settings = get_settings()
    return SavedSearchRegistry(JsonFileSearchStorage(settings.saved_searches_file))


def _describe_filters(spec: FilterSpecification) -> str:
    """One-line summary of the active filters."""
    parts = []
    if spec.search_term.strip():
        parts.append(f"search={spec.search_term!r}")
    if spec.status != "all":
        parts.append(f"status={getattr(spec.status, 'value', spec.status)}")
    if spec.paperwork != "all":
        parts.append(f"paperwork={spec.paperwork}")
    if spec.price_range.is_active:
        parts.append(f"price={spec.price_range.min or '0'}..{spec.price_range.max or '∞'}")
    if spec.date_range.is_active:
        parts.append(f"added={spec.date_range.start_date or '…'}..{spec.date_range.end_date or '…'}")
    if spec.has_images is not None:
        parts.append("with images" if spec.has_images else "without images")
    if spec.has_documents is not None:
        parts.append("with documents" if spec.has_documents else "without documents")
    return ", ".join(parts) or "no filters"


def _build_state(
    source: Optional[Path],
    saved: Optional[str],
    changes: Dict[str, Any],
) -> FilterState:
    state = FilterState(_load_vehicles(source))
    if saved:
        state.load_saved_search(_get_registry(), saved)
    _apply_changes(state, changes)
    return state


@app.command()
def inventory(
    source: Optional[Path] = SOURCE_OPT,
    saved: Optional[str] = typer.Option(None, "--saved", help="Start from a saved search ID"),
    limit: int = typer.Option(50, "--limit", "-n", help="Maximum rows to show"),
    search: str = SEARCH_OPT,
    status: str = STATUS_OPT,
    paperwork: str = PAPERWORK_OPT,
    min_price: str = MIN_PRICE_OPT,
    max_price: str = MAX_PRICE_OPT,
    start_date: str = START_DATE_OPT,
    end_date: str = END_DATE_OPT,
    images: Optional[bool] = IMAGES_OPT,
    documents: Optional[bool] = DOCUMENTS_OPT,
):
    """List vehicles matching the given filters."""
    changes = _filter_changes(
        search, status, paperwork, min_price, max_price, start_date, end_date, images, documents
    )
    try:
        state = _build_state(source, saved, changes)
    except (ValidationError, NotFoundError) as e:
        _fail(str(e))
    except JunkcarError as e:
        _fail(f"Error: {e}")

    results = state.filtered_vehicles
    if not results:
        console.print(f"[yellow]No vehicles found ({_describe_filters(state.filters)})[/yellow]")
        return

    table = Table(title=f"Vehicles: {state.total_results} of {len(state.vehicles)}")
    table.add_column("Vehicle", style="cyan")
    table.add_column("VIN", style="dim")
    table.add_column("Plate")
    table.add_column("Status", style="green")
    table.add_column("Title", justify="center")
    table.add_column("Price", justify="right")
    table.add_column("Added")

    for vehicle in results[:limit]:
        price = vehicle.sale_price or vehicle.purchase_price or "-"
        table.add_row(
            vehicle.display_name or vehicle.id,
            vehicle.vehicle_id or "-",
            vehicle.license_plate or "-",
            vehicle.status.value,
            "✓" if vehicle.title_present else "✗",
            price,
            (vehicle.created_at or "-")[:10],
        )

    console.print(table)
    if len(results) > limit:
        console.print(f"[dim]... and {len(results) - limit} more[/dim]")


def _show_stats(stats: VehicleStats, title: str):
    """Display dashboard statistics."""
    table = Table(title=title)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="green")

    table.add_row("Total vehicles", str(stats.total_count))
    table.add_row("Revenue", f"${stats.total_revenue:,.2f}")
    table.add_row("Pending paperwork", str(stats.pending_paperwork_count))
    table.add_row("Added today", str(stats.added_today_count))
    table.add_row("Avg. days to sell", str(stats.average_days_to_sell))
    table.add_row("Avg. profit", f"${stats.average_profit:,.2f}")
    for status, count in stats.count_by_status.items():
        table.add_row(f"Status: {status}", str(count))

    console.print(table)


@app.command()
def stats(
    source: Optional[Path] = SOURCE_OPT,
    saved: Optional[str] = typer.Option(None, "--saved", help="Start from a saved search ID"),
    search: str = SEARCH_OPT,
    status: str = STATUS_OPT,
    paperwork: str = PAPERWORK_OPT,
    min_price: str = MIN_PRICE_OPT,
    max_price: str = MAX_PRICE_OPT,
    start_date: str = START_DATE_OPT,
    end_date: str = END_DATE_OPT,
    images: Optional[bool] = IMAGES_OPT,
    documents: Optional[bool] = DOCUMENTS_OPT,
):
    """Show dashboard statistics for the (filtered) inventory."""
    changes = _filter_changes(
        search, status, paperwork, min_price, max_price, start_date, end_date, images, documents
    )
    try:
        state = _build_state(source, saved, changes)
    except (ValidationError, NotFoundError) as e:
        _fail(str(e))
    except JunkcarError as e:
        _fail(f"Error: {e}")

    _show_stats(summarize(state.filtered_vehicles), f"Inventory Statistics ({_describe_filters(state.filters)})")


# ==================== Saved Searches ====================


def _show_saved(searches: List[SavedSearch]):
    table = Table(title=f"Saved Searches ({len(searches)})")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Filters")
    table.add_column("Created")

    for search in searches:
        table.add_row(search.id, search.name, _describe_filters(search.filters), search.created_at[:19])

    console.print(table)


@saved_app.command("list")
def saved_list():
    """List saved searches."""
    searches = _get_registry().list()
    if not searches:
        console.print("[yellow]No saved searches[/yellow]")
        return
    _show_saved(searches)


@saved_app.command("save")
def saved_save(
    name: str = typer.Argument(..., help="Name for the search"),
    search: str = SEARCH_OPT,
    status: str = STATUS_OPT,
    paperwork: str = PAPERWORK_OPT,
    min_price: str = MIN_PRICE_OPT,
    max_price: str = MAX_PRICE_OPT,
    start_date: str = START_DATE_OPT,
    end_date: str = END_DATE_OPT,
    images: Optional[bool] = IMAGES_OPT,
    documents: Optional[bool] = DOCUMENTS_OPT,
):
    """Save the given filters under a name."""
    state = FilterState()
    changes = _filter_changes(
        search, status, paperwork, min_price, max_price, start_date, end_date, images, documents
    )
    try:
        _apply_changes(state, changes)
    except ValidationError as e:
        _fail(str(e))

    if not state.has_active_filters:
        _fail("No filters given; nothing to save")

    registry = _get_registry()
    try:
        saved_search = registry.save(name, state.filters)
    except ValidationError as e:
        _fail(str(e))
    except PersistenceError as e:
        console.print(f"[yellow]Search saved for this session only; it may not survive a restart: {e}[/yellow]")
        return

    console.print(f"[green]Search saved: {saved_search.name} ({saved_search.id})[/green]")


@saved_app.command("show")
def saved_show(search_id: str = typer.Argument(..., help="Saved search ID")):
    """Show the filters stored in a saved search."""
    registry = _get_registry()
    try:
        spec = registry.apply(search_id)
    except NotFoundError as e:
        _fail(str(e))

    table = Table(title=f"Saved Search: {registry.get(search_id).name}")
    table.add_column("Filter", style="cyan")
    table.add_column("Value")
    for key, value in spec.to_json_dict().items():
        table.add_row(key, str(value))
    console.print(table)


@saved_app.command("delete")
def saved_delete(search_id: str = typer.Argument(..., help="Saved search ID")):
    """Delete a saved search."""
    registry = _get_registry()
    if registry.get(search_id) is None:
        console.print(f"[yellow]No saved search with ID {search_id}[/yellow]")
        return
    try:
        registry.remove(search_id)
    except PersistenceError as e:
        console.print(f"[yellow]Search deleted for this session only; it may reappear after a restart: {e}[/yellow]")
        return
    console.print("[green]Search deleted[/green]")


if __name__ == "__main__":
    app()
