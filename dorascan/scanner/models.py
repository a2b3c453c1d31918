"""Data models for the validator scan pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, List, Tuple

UNKNOWN_INDEX = "UNKNOWN_INDEX"
UNKNOWN_PUBLIC_KEY = "UNKNOWN_PUBLIC_KEY"


class IconColor(str, Enum):
    """Colour of a status indicator icon."""

    RED = "red"
    YELLOW = "yellow"
    GREEN = "green"

    @property
    def rank(self) -> int:
        return list(IconColor).index(self)


@dataclass(frozen=True)
class PageRequest:
    """A single page of the upstream table and the URL it is served from."""

    page: int
    url: str


@dataclass
class RawPage:
    """The raw HTTP response for a single page fetch."""

    page: int
    url: str
    html: str
    status_code: int = 200


@dataclass(frozen=True)
class ValidatorHit:
    """An active validator row flagged by a coloured status indicator."""

    page: int
    url: str
    index: str
    public_key: str
    color: IconColor

    @property
    def key(self) -> Tuple[str, IconColor]:
        """Natural key used for deduplication across pages."""
        return (self.public_key, self.color)


@dataclass
class ParsedPage:
    """Everything the extractor learned from one page."""

    page: int
    url: str
    row_count: int
    hits: List[ValidatorHit] = field(default_factory=list)


@dataclass(frozen=True)
class RowInspection:
    """Diagnostic view of one table row, used by the ``preview`` command."""

    index: str
    public_key: str
    status_text: str
    is_active: bool
    colors: Tuple[IconColor, ...]
    text: str


def dedupe_hits(hits: Iterable[ValidatorHit]) -> List[ValidatorHit]:
    """Return *hits* unique by ``(public_key, color)``.

    Hits are ordered by public key, colour and page; for duplicated keys the
    one from the lowest page wins.
    """
    ordered = sorted(hits, key=lambda h: (h.public_key, h.color.rank, h.page))
    seen: set[Tuple[str, IconColor]] = set()
    unique: List[ValidatorHit] = []
    for hit in ordered:
        if hit.key not in seen:
            seen.add(hit.key)
            unique.append(hit)
    return unique


@dataclass(frozen=True)
class HitSet:
    """Deduplicated result of a scan.

    ``failed_pages`` lists the pages whose fetch or parse failed; those pages
    contributed no hits.
    """

    hits: Tuple[ValidatorHit, ...] = ()
    failed_pages: Tuple[int, ...] = ()
    pages_scanned: int = 0

    @classmethod
    def build(
        cls,
        hits: Iterable[ValidatorHit],
        failed_pages: Iterable[int] = (),
        pages_scanned: int = 0,
    ) -> HitSet:
        return cls(
            hits=tuple(dedupe_hits(hits)),
            failed_pages=tuple(sorted(failed_pages)),
            pages_scanned=pages_scanned,
        )

    def __len__(self) -> int:
        return len(self.hits)

    def __iter__(self) -> Iterator[ValidatorHit]:
        return iter(self.hits)

    def by_color(self, color: IconColor) -> List[ValidatorHit]:
        return [hit for hit in self.hits if hit.color == color]
