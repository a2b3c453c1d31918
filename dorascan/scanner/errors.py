"""Exceptions raised while fetching and parsing explorer pages."""

from __future__ import annotations


class ScanError(Exception):
    """Base class for per-page scan failures."""

    def __init__(self, page: int, url: str, cause: BaseException | str) -> None:
        self.page = page
        self.url = url
        self.cause = cause
        super().__init__(self._message())

    def _message(self) -> str:
        return f"page {self.page} ({self.url}): {self.cause}"


class FetchError(ScanError):
    """The page could not be retrieved.

    ``status_code`` is set when the server answered with a non-success status
    and is ``None`` for network-level failures (connect errors, timeouts).
    """

    def __init__(
        self,
        page: int,
        url: str,
        cause: BaseException | str,
        status_code: int | None = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(page, url, cause)

    def _message(self) -> str:
        if self.status_code is not None:
            return f"page {self.page} ({self.url}): HTTP {self.status_code}"
        return f"page {self.page} ({self.url}): request failed: {self.cause}"


class ParseError(ScanError):
    """The page body could not be parsed as HTML."""
