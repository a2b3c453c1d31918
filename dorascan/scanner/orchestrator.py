"""Scan orchestration: drives fetch + extract across a range of pages.

Two driving modes are available:

``scan``
    Bounded-concurrency batches over an inclusive page range.  Each batch of
    ``concurrency`` pages is fetched concurrently and awaited as a whole
    before the next batch starts.

``scan_sequential``
    One page at a time with a politeness delay, stopping at the first page
    that has no data rows (the upstream table is empty past its last page).

Per-page failures are logged and recorded on the returned :class:`HitSet`;
they never abort the scan.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

import httpx

from dorascan.config import settings
from dorascan.scanner.discovery import discover_last_page
from dorascan.scanner.errors import ScanError
from dorascan.scanner.extractor import parse_page
from dorascan.scanner.fetcher import fetch_page
from dorascan.scanner.models import HitSet, ParsedPage, ValidatorHit

logger = logging.getLogger(__name__)


async def scan_page(
    client: httpx.AsyncClient,
    page: int,
    include_green: Optional[bool] = None,
) -> ParsedPage:
    """Fetch and extract a single page.

    Raises:
        FetchError: If the page cannot be retrieved.
        ParseError: If the page cannot be parsed.
    """
    raw = await fetch_page(client, page)
    parsed = parse_page(raw, include_green)
    logger.info("Page %d: rows=%d, hits=%d", page, parsed.row_count, len(parsed.hits))
    return parsed


async def scan(
    client: httpx.AsyncClient,
    start_page: int,
    end_page: int,
    concurrency: Optional[int] = None,
    include_green: Optional[bool] = None,
) -> HitSet:
    """Scan pages ``start_page..end_page`` inclusive in concurrent batches.

    An inverted range returns an empty result without any request.
    *include_green* overrides ``settings.include_green`` for this scan.

    Raises:
        ValueError: If *concurrency* is less than 1.
    """
    limit = settings.concurrency if concurrency is None else concurrency
    if limit < 1:
        raise ValueError(f"concurrency must be at least 1, got {limit}")
    if end_page < start_page:
        return HitSet()

    pages = list(range(start_page, end_page + 1))
    all_hits: List[ValidatorHit] = []
    failed: List[int] = []

    for offset in range(0, len(pages), limit):
        batch = pages[offset:offset + limit]
        results = await asyncio.gather(
            *(scan_page(client, page, include_green) for page in batch),
            return_exceptions=True,
        )
        for page, result in zip(batch, results):
            if isinstance(result, ScanError):
                logger.warning("Error scanning page %d: %s", page, result)
                failed.append(page)
            elif isinstance(result, BaseException):
                raise result
            else:
                all_hits.extend(result.hits)

    hit_set = HitSet.build(all_hits, failed_pages=failed, pages_scanned=len(pages))
    logger.info(
        "Scanned %d page(s): %d unique hit(s), %d failed page(s)",
        hit_set.pages_scanned,
        len(hit_set),
        len(hit_set.failed_pages),
    )
    return hit_set


async def scan_sequential(
    client: httpx.AsyncClient,
    start_page: int,
    max_pages: int,
    delay: Optional[float] = None,
    stop_on_empty: bool = True,
    include_green: Optional[bool] = None,
) -> HitSet:
    """Scan up to *max_pages* pages one at a time starting at *start_page*.

    With *stop_on_empty* the scan ends after the first page that has no data
    rows.  *delay* seconds (default ``settings.request_delay``) are slept
    between consecutive requests.
    """
    pause = settings.request_delay if delay is None else delay
    all_hits: List[ValidatorHit] = []
    failed: List[int] = []
    processed = 0

    for page in range(start_page, start_page + max(0, max_pages)):
        if processed and pause > 0:
            await asyncio.sleep(pause)
        processed += 1

        try:
            parsed = await scan_page(client, page, include_green)
        except ScanError as exc:
            logger.warning("Error scanning page %d: %s", page, exc)
            failed.append(page)
            continue

        all_hits.extend(parsed.hits)
        if stop_on_empty and parsed.row_count == 0:
            logger.info("Page %d has no rows; stopping", page)
            break

    return HitSet.build(all_hits, failed_pages=failed, pages_scanned=processed)


async def scan_all(
    client: httpx.AsyncClient,
    concurrency: Optional[int] = None,
    include_green: Optional[bool] = None,
) -> HitSet:
    """Discover the page count, then scan every page.

    Raises:
        FetchError: If page 1 cannot be retrieved during discovery.
        ParseError: If page 1 cannot be parsed during discovery.
    """
    last_page = await discover_last_page(client)
    return await scan(
        client, 1, last_page, concurrency=concurrency, include_green=include_green
    )
