"""Typer-based CLI entry point."""

from __future__ import annotations

import asyncio
import functools
import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import typer
from rich import print
from rich.console import Console
from rich.table import Table

from sortgrid.bootstrap import TableContext, build_table
from sortgrid.domain.models.sort import SortMode
from sortgrid.errors import ConfigurationError, DataSourceError, SettingsError, SortGridError
from sortgrid.settings.loader import TableSettings, load_table_settings
from sortgrid.utils.console_logger import ensure_console_logger

app = typer.Typer(help="Sort and page through tabular data sources")
console = Console()


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (ConfigurationError, SettingsError, DataSourceError) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except SortGridError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    ensure_console_logger(logging.getLogger("sortgrid"), "sortgrid-cli", level=level)


def _parse_params(raw: List[str]) -> dict[str, str]:
    params: dict[str, str] = {}
    for item in raw:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected KEY=VALUE, got {item!r}")
        params[key] = value
    return params


def render_rows(context: TableContext) -> Table:
    """Build a Rich table from the engine's current rows."""
    orchestrator = context.orchestrator
    state = orchestrator.sort_state
    table = Table(show_lines=False)
    for column in orchestrator.columns:
        label = column.label
        if column.id == state.column_id:
            label += " ▲" if state.direction.sign > 0 else " ▼"
        table.add_column(label)
    for cells in orchestrator.formatted_rows():
        table.add_row(*("" if cell is None else str(cell) for cell in cells))
    return table


async def _browse(settings: TableSettings, sort: Optional[str], order: Optional[str], pages: int) -> TableContext:
    context = build_table(settings)
    try:
        if sort:
            await context.orchestrator.apply_sort(sort, order or "asc")
        else:
            await context.orchestrator.start()
        for _ in range(pages - 1):
            if not await context.orchestrator.on_scroll_proximity(True):
                break
    finally:
        if context.data_source is not None:
            await context.data_source.aclose()
    return context


@app.command()
@_handle_errors
def browse(
    settings_file: Path = typer.Argument(..., exists=True, dir_okay=False),
    url: Optional[str] = typer.Option(None, help="Override the endpoint from the settings file"),
    sort: Optional[str] = typer.Option(None, help="Column id to sort by"),
    order: Optional[str] = typer.Option(None, help="asc or desc"),
    pages: int = typer.Option(1, min=1, help="Number of pages to load"),
    page_size: Optional[int] = typer.Option(None, min=1, help="Rows per page"),
    param: List[str] = typer.Option([], help="Extra query parameter KEY=VALUE"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Fetch rows from a server-sorted endpoint and print them."""

    _configure_logging(verbose)
    settings = load_table_settings(settings_file)
    options = replace(settings.options, mode=SortMode.SERVER)
    if page_size is not None:
        options = replace(options, page_size=page_size)
    if param:
        options = replace(options, params={**options.params, **_parse_params(param)})
    settings = replace(settings, options=options, url=url or settings.url)

    context = asyncio.run(_browse(settings, sort, order, pages))
    console.print(render_rows(context))
    print(f"[green]Loaded {context.orchestrator.loaded_count} rows")


@app.command("sort")
@_handle_errors
def sort_file(
    settings_file: Path = typer.Argument(..., exists=True, dir_okay=False),
    records_file: Path = typer.Argument(..., exists=True, dir_okay=False),
    column: str = typer.Option(..., "--column", "-c", help="Column id to sort by"),
    order: Optional[str] = typer.Option(None, help="asc or desc; toggles from ascending when omitted"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Sort a JSON array of records locally and print the result."""

    _configure_logging(verbose)
    settings = load_table_settings(settings_file)
    settings = replace(settings, options=replace(settings.options, mode=SortMode.CLIENT, initial_sort=None))
    try:
        records = json.loads(records_file.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise typer.BadParameter(f"{records_file} is not valid JSON: {exc}") from exc
    if not isinstance(records, list):
        raise typer.BadParameter(f"{records_file} must contain a JSON array")

    context = build_table(settings, records=records)
    if not asyncio.run(context.orchestrator.apply_sort(column, order)):
        typer.echo(f"Column {column!r} is unknown or not sortable", err=True)
        raise typer.Exit(2)
    console.print(render_rows(context))


@app.command()
@_handle_errors
def validate(settings_file: Path = typer.Argument(..., exists=True, dir_okay=False)) -> None:
    """Check a table settings file against the schema."""

    settings = load_table_settings(settings_file)
    print(
        f"[green]OK[/green] {len(settings.columns)} columns, "
        f"mode={settings.options.mode.value}, page_size={settings.options.page_size}"
    )


if __name__ == "__main__":  # pragma: no cover
    app()
