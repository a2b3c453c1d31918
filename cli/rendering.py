"""Console rendering of scan results and row inspections."""

from __future__ import annotations

from typing import List

from dorascan.scanner.models import HitSet, IconColor, RowInspection


def render_summary(hit_set: HitSet, colors: List[IconColor]) -> str:
    """Render a short per-colour summary of *hit_set*.

    Example::

        Pages scanned : 12
        Failed pages  : 1 (7)
        red           : 3
        yellow        : 0
    """
    failed = hit_set.failed_pages
    failed_text = str(len(failed))
    if failed:
        failed_text += " (" + ", ".join(str(p) for p in failed) + ")"

    lines = [
        f"Pages scanned : {hit_set.pages_scanned}",
        f"Failed pages  : {failed_text}",
    ]
    for color in colors:
        lines.append(f"{color.value:<14}: {len(hit_set.by_color(color))}")
    return "\n".join(lines)


def render_inspection(position: int, row: RowInspection) -> str:
    """Render one inspected row as an indented block."""
    colors = ", ".join(c.value for c in row.colors) or "none"
    return "\n".join(
        [
            f"Row {position}:",
            f"  Text       : {row.text}",
            f"  Index      : {row.index}",
            f"  Public key : {row.public_key}",
            f"  Status     : {row.status_text!r}",
            f"  Has 'active': {row.is_active}",
            f"  Indicators : {colors}",
        ]
    )
