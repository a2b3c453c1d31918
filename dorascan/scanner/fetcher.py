"""Async HTTP fetcher for explorer table pages."""

from __future__ import annotations

import httpx

from dorascan.config import settings
from dorascan.scanner.errors import FetchError
from dorascan.scanner.locator import page_request
from dorascan.scanner.models import RawPage


def _default_headers() -> dict[str, str]:
    return {"User-Agent": settings.user_agent}


def build_client() -> httpx.AsyncClient:
    """Return the shared, connection-pooling client used for a whole scan.

    The caller owns the client and must close it (``async with``).
    """
    return httpx.AsyncClient(
        headers=_default_headers(),
        timeout=settings.request_timeout,
        follow_redirects=True,
    )


async def fetch_page(client: httpx.AsyncClient, page: int) -> RawPage:
    """Fetch *page* of the validator table and return a :class:`RawPage`.

    The identifying header and timeout are sent with every request so that a
    client built elsewhere behaves the same.  No retries are attempted.

    Raises:
        FetchError: On network failure, timeout, or a 4xx/5xx status code.
    """
    request = page_request(page)
    try:
        response = await client.get(
            request.url,
            headers=_default_headers(),
            timeout=settings.request_timeout,
        )
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise FetchError(
            page, request.url, exc, status_code=exc.response.status_code
        ) from exc
    except httpx.HTTPError as exc:
        raise FetchError(page, request.url, exc) from exc

    return RawPage(
        page=page,
        url=request.url,
        html=response.text,
        status_code=response.status_code,
    )
