"""Row extraction: turns a :class:`RawPage` into classified validator hits."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag
from bs4.builder import ParserRejectedMarkup

from dorascan.config import settings
from dorascan.scanner.errors import ParseError
from dorascan.scanner.models import (
    UNKNOWN_INDEX,
    UNKNOWN_PUBLIC_KEY,
    IconColor,
    ParsedPage,
    RawPage,
    RowInspection,
    ValidatorHit,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Upstream table layout
# ---------------------------------------------------------------------------
# 0 slot, 1 time, 2 index, 3 depositor, 4 public key, 5 withdrawal creds,
# 6 amount, 7 transaction, 8 inclusion status, 9 validator state (icons).
# The header row is not reliable across page variants, so columns are
# addressed by position.  The state column is always the last cell.
EXPECTED_COLUMNS = 10
COLUMNS: Dict[str, int] = {
    "index": 2,
    "public_key": 4,
}

ROW_SELECTOR = "table tbody tr"
ACTIVE_MARKER = "active"

# CSS selectors marking a coloured status icon inside the state cell.
INDICATOR_SELECTORS: Dict[IconColor, Tuple[str, ...]] = {
    IconColor.RED: (".text-danger", ".badge-danger"),
    IconColor.YELLOW: (".text-warning", ".badge-warning"),
    IconColor.GREEN: (".text-success", ".badge-success"),
}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def parse_html(raw: RawPage) -> BeautifulSoup:
    """Parse *raw* into a document, wrapping parser rejection as ParseError.

    html5lib applies the HTML5 tree-building rules: unclosed cells and rows
    are closed implicitly and a missing <tbody> is inserted.
    """
    try:
        return BeautifulSoup(raw.html, "html5lib")
    except ParserRejectedMarkup as exc:
        raise ParseError(raw.page, raw.url, exc) from exc


def active_colors(include_green: Optional[bool] = None) -> List[IconColor]:
    """Colours to classify; green is opt-in and defaults to the setting."""
    if include_green is None:
        include_green = settings.include_green
    colors = [IconColor.RED, IconColor.YELLOW]
    if include_green:
        colors.append(IconColor.GREEN)
    return colors


def _cell_text(cells: List[Tag], field_name: str, fallback: str) -> str:
    position = COLUMNS[field_name]
    if position >= len(cells):
        return fallback
    return cells[position].get_text().strip()


def _matched_colors(status_cell: Tag, colors: List[IconColor]) -> List[IconColor]:
    matched = []
    for color in colors:
        selectors = ", ".join(INDICATOR_SELECTORS[color])
        if status_cell.select_one(selectors) is not None:
            matched.append(color)
    return matched


def _data_rows(soup: BeautifulSoup) -> List[List[Tag]]:
    """Return the cells of every table body row that has at least one cell."""
    rows = []
    for row in soup.select(ROW_SELECTOR):
        cells = row.find_all("td", recursive=False)
        if not cells:
            continue
        if len(cells) != EXPECTED_COLUMNS:
            logger.debug("Row with %d cells (expected %d)", len(cells), EXPECTED_COLUMNS)
        rows.append(cells)
    return rows


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_page(raw: RawPage, include_green: Optional[bool] = None) -> ParsedPage:
    """Extract every hit on *raw* together with its data-row count.

    A row is a hit only when its state cell mentions "active" and carries at
    least one recognised indicator.  A row with several indicators yields one
    hit per colour.  Missing index/public-key columns fall back to sentinel
    values instead of failing.

    Raises:
        ParseError: If the document cannot be parsed at all.
    """
    soup = parse_html(raw)
    rows = _data_rows(soup)
    active = active_colors(include_green)
    hits: List[ValidatorHit] = []

    for cells in rows:
        status_cell = cells[-1]
        if ACTIVE_MARKER not in status_cell.get_text().lower():
            continue

        colors = _matched_colors(status_cell, active)
        if not colors:
            continue

        index = _cell_text(cells, "index", UNKNOWN_INDEX)
        public_key = _cell_text(cells, "public_key", UNKNOWN_PUBLIC_KEY)
        for color in colors:
            hits.append(
                ValidatorHit(
                    page=raw.page,
                    url=raw.url,
                    index=index,
                    public_key=public_key,
                    color=color,
                )
            )

    return ParsedPage(page=raw.page, url=raw.url, row_count=len(rows), hits=hits)


def extract(raw: RawPage, include_green: Optional[bool] = None) -> List[ValidatorHit]:
    """Return the hits found on *raw*; see :func:`parse_page`."""
    return parse_page(raw, include_green).hits


def inspect_rows(
    raw: RawPage,
    limit: Optional[int] = None,
    include_green: Optional[bool] = None,
) -> List[RowInspection]:
    """Describe how the first *limit* data rows of *raw* are classified.

    Useful for checking the selectors against live markup before a full scan.
    """
    soup = parse_html(raw)
    rows = _data_rows(soup)
    if limit is not None:
        rows = rows[:limit]
    active = active_colors(include_green)

    inspections = []
    for cells in rows:
        status_cell = cells[-1]
        status_text = " ".join(status_cell.get_text(" ").split())
        inspections.append(
            RowInspection(
                index=_cell_text(cells, "index", UNKNOWN_INDEX),
                public_key=_cell_text(cells, "public_key", UNKNOWN_PUBLIC_KEY),
                status_text=status_text,
                is_active=ACTIVE_MARKER in status_cell.get_text().lower(),
                colors=tuple(_matched_colors(status_cell, active)),
                text=" ".join(cell.get_text(" ", strip=True) for cell in cells),
            )
        )
    return inspections
