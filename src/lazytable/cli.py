"""Typer-based CLI entry point."""

from __future__ import annotations

import asyncio
import functools
import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple

import typer
from rich.console import Console
from rich.table import Table

from lazytable.config import DEFAULT_DEMO_ROWS
from lazytable.domain.models import TableConfig
from lazytable.errors import ConfigError, LazyTableError
from lazytable.services import InMemoryTableService
from lazytable.settings import config_to_payload, load_table_config
from lazytable.utils.console_logger import ensure_console_logger
from lazytable.utils.numbers import add_thousands_separator
from lazytable.viewmodels import TableController, TablePresentationModel

app = typer.Typer(help="Lazily loaded, virtualized table engine")


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ConfigError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except LazyTableError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


def _setup_logging(verbose: bool) -> None:
    ensure_console_logger(
        logging.getLogger("lazytable"),
        "lazytable-cli",
        level=logging.DEBUG if verbose else logging.WARNING,
    )


def parse_filter_option(raw: str) -> Tuple[int, str]:
    """Parse ``COLUMN=TEXT`` into ``(column, text)``."""

    column, separator, text = raw.partition("=")
    if not separator or not column.strip().isdigit():
        raise typer.BadParameter(f"expected COLUMN=TEXT, got {raw!r}")
    return int(column), text


def parse_sort_option(raw: str) -> Tuple[int, str]:
    """Parse ``COLUMN:STATE`` into ``(column, state)``."""

    column, separator, state = raw.partition(":")
    if not separator or not column.strip().isdigit():
        raise typer.BadParameter(f"expected COLUMN:asc|desc, got {raw!r}")
    return int(column), state


async def run_demo(
    controller: TableController,
    *,
    filters: List[Tuple[int, str]],
    sort: Optional[Tuple[int, str]],
    scroll_to: Optional[int],
) -> None:
    """Load the table, apply filter edits and jump, waiting for every fetch."""

    controller.init()
    await controller.wait_idle()
    for column, text in filters:
        controller.set_column_filter(column, text)
        await controller.wait_idle()
    if sort is not None:
        controller.set_column_sorter(*sort)
        await controller.wait_idle()
    # A reset moves the viewport back to the top, like a view would.
    controller.scroll_top_changed(0)
    await controller.wait_idle()
    if scroll_to is not None:
        controller.update_scroll_index(scroll_to)
        await controller.wait_idle()


def render_window(controller: TableController) -> Table:
    """Build a rich table with the rows of the rendered window."""

    table = Table(
        title=(
            f"rows {add_thousands_separator(controller.current_data_set_size)} of "
            f"{add_thousands_separator(controller.total_data_size)}"
        )
    )
    table.add_column("#", justify="right", style="dim")
    for key in controller.entry_keys:
        table.add_column(key)
    first_row = controller.scroll_index
    last_row = min(first_row + controller.number_of_rendered_rows, controller.current_data_set_size)
    for row_index in range(first_row, last_row):
        cells = [
            str(controller.get_entry_value_by_index_and_key(row_index, column))
            for column in range(controller.keys_length)
        ]
        table.add_row(str(row_index + 1), *cells)
    return table


def render_geometry(controller: TableController) -> Table:
    table = Table(show_header=False, box=None)
    table.add_column("metric", style="bold")
    table.add_column("value", justify="right")
    table.add_row("scroll index", str(controller.scroll_index))
    table.add_row("scroll top", f"{controller.scroll_top}px")
    table.add_row("prefill", f"{controller.prefill_height}px")
    table.add_row("postfill", f"{controller.postfill_height}px")
    table.add_row("viewport", f"{controller.viewport_height}px")
    table.add_row("rendered rows", str(controller.number_of_rendered_rows))
    return table


@app.command()
@_handle_errors
def demo(
    rows: int = typer.Option(DEFAULT_DEMO_ROWS, "--rows", "-n", min=0, help="Size of the random dataset."),
    scroll_to: Optional[int] = typer.Option(None, "--scroll-to", "-s", help="Row index to jump to."),
    filters: Optional[List[str]] = typer.Option(None, "--filter", "-f", help="Column filter as COLUMN=TEXT."),
    sort: Optional[str] = typer.Option(None, "--sort", help="Sort as COLUMN:asc or COLUMN:desc."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for the random dataset."),
    delay: Optional[float] = typer.Option(
        None, "--delay", min=0.0, help="Simulated fetch latency in seconds (default: from config)."
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Table config JSON file."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every fetch."),
) -> None:
    """Scroll a random in-memory dataset and print the rendered window."""

    _setup_logging(verbose)
    parsed_filters = [parse_filter_option(raw) for raw in filters or []]
    parsed_sort = parse_sort_option(sort) if sort else None

    config: TableConfig = load_table_config(config_path)
    if delay is None:
        delay = config.simulated_fetch_delay
    service = InMemoryTableService.random(rows, seed=seed, simulated_fetch_delay=delay)
    controller = TableController(TablePresentationModel(config), service)
    try:
        asyncio.run(
            run_demo(controller, filters=parsed_filters, sort=parsed_sort, scroll_to=scroll_to)
        )
    finally:
        controller.dispose()

    console = Console()
    console.print(render_window(controller))
    console.print(render_geometry(controller))


@app.command("config")
@_handle_errors
def show_config(
    config_path: Optional[Path] = typer.Argument(None, help="Table config JSON file."),
) -> None:
    """Print the effective, validated table configuration."""

    config = load_table_config(config_path)
    typer.echo(json.dumps(config_to_payload(config), indent=2))


if __name__ == "__main__":  # pragma: no cover
    app()
