"""Centralised settings for the validator scanner.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlparse

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Upstream explorer
    # ------------------------------------------------------------------
    base_url: str = field(
        default_factory=lambda: os.environ.get(
            "EXPLORER_BASE_URL",
            "https://dora.explorer.mainnet.lukso.network/validators/included_deposits",
        )
    )
    # Filters and page size; sent verbatim so the column layout stays stable.
    base_params: str = field(
        default_factory=lambda: os.environ.get(
            "EXPLORER_BASE_PARAMS", "f=&f.valid=1&f.orphaned=1&c=100"
        )
    )
    page_param: str = field(
        default_factory=lambda: os.environ.get("EXPLORER_PAGE_PARAM", "p")
    )

    @property
    def table_path(self) -> str:
        """Path of the scanned table without its leading slash.

        Pagination links are recognised by containing this path.
        """
        return urlparse(self.base_url).path.lstrip("/")

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "SCAN_USER_AGENT",
            "lukso-validator-checker/0.1 (+https://github.com/lukso-validator-checker)",
        )
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )

    # ------------------------------------------------------------------
    # Scan
    # ------------------------------------------------------------------
    concurrency: int = field(
        default_factory=lambda: int(os.environ.get("SCAN_CONCURRENCY", "5"))
    )
    request_delay: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_DELAY", "0.5"))
    )
    include_green: bool = field(default_factory=lambda: _env_flag("INCLUDE_GREEN"))

    # ------------------------------------------------------------------
    # Output / logging
    # ------------------------------------------------------------------
    output_dir: Path = field(
        default_factory=lambda: Path(os.environ.get("SCAN_OUTPUT_DIR", "scan_results"))
    )
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper()
    )

    def ensure_output_dir(self) -> None:
        """Create the output directory if it does not exist."""
        self.output_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton; import this everywhere:
#   from dorascan.config import settings
settings = Settings()
