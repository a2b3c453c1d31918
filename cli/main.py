"""Dora validator scanner CLI.

Usage:
    python cli/main.py --help

Commands:
    scan       → scan the validator table and write per-colour result files
    last-page  → print the number of pages in the table
    preview    → show how the rows of one page are classified
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from dorascan.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
import logging
from typing import Optional

import typer

from dorascan.config import settings
from dorascan.report import write_report
from dorascan.scanner import (
    ScanError,
    build_client,
    discover_last_page,
    fetch_page,
    inspect_rows,
    scan,
    scan_sequential,
)
from dorascan.scanner.extractor import active_colors
from dorascan.scanner.models import HitSet

from cli.rendering import render_inspection, render_summary

app = typer.Typer(
    name="dorascan",
    help="Scan the Dora explorer validator table for flagged active validators.",
    no_args_is_help=True,
)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(level=level, format="[%(levelname)s] %(name)s: %(message)s")


async def _run_scan(
    start: int,
    end: Optional[int],
    concurrency: Optional[int],
    sequential: bool,
    max_pages: int,
    delay: Optional[float],
    include_green: bool,
) -> HitSet:
    async with build_client() as client:
        if sequential:
            return await scan_sequential(
                client, start, max_pages, delay=delay, include_green=include_green
            )
        if end is None:
            end = await discover_last_page(client)
        return await scan(
            client, start, end, concurrency=concurrency, include_green=include_green
        )


async def _last_page() -> int:
    async with build_client() as client:
        return await discover_last_page(client)


async def _preview(page: int, rows: int, include_green: bool):
    async with build_client() as client:
        raw = await fetch_page(client, page)
    return raw, inspect_rows(raw, limit=rows, include_green=include_green)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
@app.command("scan")
def scan_cmd(
    start: int = typer.Option(1, min=1, help="First page to scan."),
    end: Optional[int] = typer.Option(
        None,
        min=1,
        help="Last page to scan (default: discovered from page 1). Not valid with --sequential.",
    ),
    concurrency: Optional[int] = typer.Option(
        None,
        min=1,
        help="Pages fetched at once (default: SCAN_CONCURRENCY). Not valid with --sequential.",
    ),
    sequential: bool = typer.Option(
        False, "--sequential", help="Fetch one page at a time and stop at the first empty page."
    ),
    max_pages: int = typer.Option(2000, min=1, help="Page limit for --sequential."),
    delay: Optional[float] = typer.Option(
        None, min=0.0, help="Seconds between requests for --sequential (default: REQUEST_DELAY)."
    ),
    green: bool = typer.Option(False, "--green", help="Also report green (healthy) indicators."),
    output_dir: Optional[Path] = typer.Option(None, help="Directory for the result files."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Scan the table and write one result file per indicator colour."""
    if sequential and (end is not None or concurrency is not None):
        raise typer.BadParameter(
            "--end and --concurrency cannot be combined with --sequential."
        )
    _configure_logging(verbose)
    include_green = green or settings.include_green

    try:
        hit_set = asyncio.run(
            _run_scan(start, end, concurrency, sequential, max_pages, delay, include_green)
        )
    except ScanError as exc:
        typer.echo(f"[scan] Could not determine the page range: {exc}")
        raise typer.Exit(code=1)

    colors = active_colors(include_green)
    paths = write_report(hit_set, output_dir=output_dir, colors=colors)

    typer.echo(render_summary(hit_set, colors))
    for color, path in paths.items():
        typer.echo(f"[scan] {color.value} hits written to {path}")


@app.command("last-page")
def last_page_cmd(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Print the number of pages in the validator table."""
    _configure_logging(verbose)
    try:
        last_page = asyncio.run(_last_page())
    except ScanError as exc:
        typer.echo(f"[last-page] {exc}")
        raise typer.Exit(code=1)
    typer.echo(str(last_page))


@app.command("preview")
def preview_cmd(
    page: int = typer.Option(1, min=1, help="Page to inspect."),
    rows: int = typer.Option(3, min=1, help="Number of rows to show."),
    green: bool = typer.Option(False, "--green", help="Also check green indicators."),
) -> None:
    """Show how the first rows of a page are classified."""
    include_green = green or settings.include_green
    try:
        raw, inspections = asyncio.run(_preview(page, rows, include_green))
    except ScanError as exc:
        typer.echo(f"[preview] {exc}")
        raise typer.Exit(code=1)

    typer.echo(f"[preview] {raw.url}")
    typer.echo(f"[preview] Showing {len(inspections)} row(s)")
    for position, row in enumerate(inspections, start=1):
        typer.echo("")
        typer.echo(render_inspection(position, row))


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
