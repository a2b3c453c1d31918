"""Result files: one text file per indicator colour, one line per hit."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Optional

from dorascan.config import settings
from dorascan.scanner.extractor import active_colors
from dorascan.scanner.models import HitSet, IconColor, ValidatorHit


def format_hit(hit: ValidatorHit) -> str:
    return (
        f"page={hit.page} url={hit.url} index={hit.index} "
        f"public_key={hit.public_key} color={hit.color.value}"
    )


def write_report(
    hit_set: HitSet,
    output_dir: Optional[Path] = None,
    colors: Optional[Iterable[IconColor]] = None,
) -> Dict[IconColor, Path]:
    """Write ``<color>_hits.txt`` for each colour and return the paths.

    Files are always written, even when empty, so a clean scan overwrites
    the results of a previous one.
    """
    if output_dir is None:
        settings.ensure_output_dir()
        output_dir = settings.output_dir
    else:
        output_dir.mkdir(parents=True, exist_ok=True)

    paths: Dict[IconColor, Path] = {}
    for color in active_colors() if colors is None else colors:
        path = output_dir / f"{color.value}_hits.txt"
        lines = [format_hit(hit) for hit in hit_set.by_color(color)]
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        paths[color] = path
    return paths
