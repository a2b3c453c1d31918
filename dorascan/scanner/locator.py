"""Page URL construction for the paginated validator table."""

from __future__ import annotations

from dorascan.config import settings
from dorascan.scanner.models import PageRequest


def page_url(page: int) -> str:
    """Return the URL for *page* (1-based).

    Page 1 is the site's default view and carries no page parameter; every
    other page appends it after the fixed filter parameters.
    """
    base = f"{settings.base_url}?{settings.base_params}"
    if page == 1:
        return base
    return f"{base}&{settings.page_param}={page}"


def page_request(page: int) -> PageRequest:
    return PageRequest(page=page, url=page_url(page))
