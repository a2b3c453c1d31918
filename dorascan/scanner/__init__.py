"""Scanner package: page discovery, fetch, row extraction and orchestration."""

from dorascan.scanner.discovery import discover_last_page
from dorascan.scanner.errors import FetchError, ParseError, ScanError
from dorascan.scanner.extractor import extract, inspect_rows, parse_page
from dorascan.scanner.fetcher import build_client, fetch_page
from dorascan.scanner.locator import page_url
from dorascan.scanner.models import HitSet, IconColor, RawPage, ValidatorHit
from dorascan.scanner.orchestrator import scan, scan_all, scan_sequential

__all__ = [
    "build_client",
    "discover_last_page",
    "extract",
    "fetch_page",
    "inspect_rows",
    "page_url",
    "parse_page",
    "scan",
    "scan_all",
    "scan_sequential",
    "FetchError",
    "HitSet",
    "IconColor",
    "ParseError",
    "RawPage",
    "ScanError",
    "ValidatorHit",
]
