"""Last-page discovery from the pagination links of page 1."""

from __future__ import annotations

import logging
import re

import httpx

from dorascan.config import settings
from dorascan.scanner.extractor import parse_html
from dorascan.scanner.fetcher import fetch_page

logger = logging.getLogger(__name__)


def _page_number(href: str) -> int | None:
    """Return the page number referenced by *href*, or ``None``.

    Only the run of ASCII digits right after the page key counts, so
    ``p=12abc`` reads as 12 and ``p=abc`` is ignored.
    """
    key = re.escape(settings.page_param)
    match = re.search(rf"[?&]{key}=([0-9]+)", href)
    if match is None:
        return None
    return int(match.group(1))


async def discover_last_page(client: httpx.AsyncClient) -> int:
    """Return the highest page number linked from page 1 of the table.

    A table without pagination links has exactly one page.

    Raises:
        FetchError: If page 1 cannot be retrieved.
        ParseError: If page 1 cannot be parsed.
    """
    raw = await fetch_page(client, 1)
    soup = parse_html(raw)
    table_path = settings.table_path

    last_page = 1
    for link in soup.select("a[href]"):
        href = link["href"]
        if table_path not in href:
            continue
        page = _page_number(href)
        if page is not None and page > last_page:
            last_page = page

    logger.info("Detected last page: %d", last_page)
    return last_page
