"""Shared fixtures: pinned settings and builders for explorer table HTML."""

from __future__ import annotations

from typing import Callable, Iterable, Sequence

import pytest

from dorascan.config import settings

BASE_URL = "https://dora.explorer.mainnet.lukso.network/validators/included_deposits"
BASE_PARAMS = "f=&f.valid=1&f.orphaned=1&c=100"

RED_ACTIVE = '<span class="text-danger"><i class="fas fa-circle"></i></span> Active'
YELLOW_ACTIVE = '<span class="text-warning"><i class="fas fa-circle"></i></span> Active'
GREEN_ACTIVE = '<span class="text-success"><i class="fas fa-circle"></i></span> Active'
PLAIN_ACTIVE = "Active"


@pytest.fixture(autouse=True)
def pinned_settings(monkeypatch, tmp_path):
    """Pin every setting the scanner reads, independent of the environment."""
    monkeypatch.setattr(settings, "base_url", BASE_URL)
    monkeypatch.setattr(settings, "base_params", BASE_PARAMS)
    monkeypatch.setattr(settings, "page_param", "p")
    monkeypatch.setattr(settings, "user_agent", "test-agent/1.0")
    monkeypatch.setattr(settings, "request_timeout", 5.0)
    monkeypatch.setattr(settings, "concurrency", 5)
    monkeypatch.setattr(settings, "request_delay", 0.0)
    monkeypatch.setattr(settings, "include_green", False)
    monkeypatch.setattr(settings, "output_dir", tmp_path / "results")
    return settings


def _row(
    index: str = "1001",
    public_key: str = "0xaaa",
    state: str = RED_ACTIVE,
    cells: int = 10,
) -> str:
    values = [
        "12345", "2 mins ago", index, "0xdepositor", public_key,
        "0x01cred", "32 LYX", "0xtx", "Included",
    ]
    columns = values[: cells - 1] + [state]
    return "<tr>" + "".join(f"<td>{value}</td>" for value in columns) + "</tr>"


def _page(rows: Sequence[str] = (), links: Iterable[str] = ()) -> str:
    anchors = "".join(f'<a href="{href}">x</a>' for href in links)
    return (
        "<html><body>"
        "<table><thead><tr><th>Slot</th><th>State</th></tr></thead>"
        f"<tbody>{''.join(rows)}</tbody></table>"
        f'<nav class="pagination">{anchors}</nav>'
        "</body></html>"
    )


@pytest.fixture
def make_row() -> Callable[..., str]:
    return _row


@pytest.fixture
def make_page() -> Callable[..., str]:
    return _page
