"""
ASCII rendering for gridspan layouts.

Draws the CSS grid of one breakpoint as a character grid: each cell shows
the first letter of the section whose block covers it.
"""

from __future__ import annotations

import logging
from typing import Callable

import simple_chalk as chalk  # type: ignore[import-untyped]

from grid_types import BREAKPOINTS, Breakpoint, CSSCoordinates, LayoutAbsolute

logger = logging.getLogger(__name__)

Colorizer = Callable[[str], str]

EMPTY_CHAR = "."
OVERLAP_CHAR = "#"


def _plain(s: str) -> str:
    return s


def section_colors(section_ids: list[str]) -> dict[str, Colorizer]:
    """Assign a colour per section, cycling through the palette."""
    colors: list[Colorizer] = [
        chalk.red,
        chalk.green,
        chalk.yellow,
        chalk.blue,
        chalk.magenta,
        chalk.cyan,
        chalk.redBright,
        chalk.greenBright,
        chalk.yellowBright,
        chalk.blueBright,
    ]
    return {sid: colors[i % len(colors)] for i, sid in enumerate(section_ids)}


def _covers(coords: CSSCoordinates, col: int, row: int) -> bool:
    return (
        coords.grid_column_start <= col < coords.grid_column_end
        and coords.grid_row_start <= row < coords.grid_row_end
    )


def render_layout(
    layout_absolute: LayoutAbsolute,
    bp: Breakpoint,
    cell_width: int = 3,
    color: bool = True,
) -> str:
    """
    Render one breakpoint of a layout as a framed character grid.

    Row 1 is drawn at the top. A block's first cell shows the upper-case
    section letter, its other cells the lower-case one; '.' marks an empty
    cell and '#' a cell covered by more than one block.

    Args:
        layout_absolute: Pipeline output
        bp: Breakpoint to draw
        cell_width: Characters per cell (default 3)
        color: Colour cells by section with simple_chalk

    Returns:
        Multi-line string
    """
    bp = Breakpoint(bp)
    placed = [
        (section_id, coords)
        for section_id, section in layout_absolute.sections.items()
        for coords in (section.coordinates.get(bp) or {}).values()
    ]

    cols = int(layout_absolute.grid_dimensions.columns.get(bp, 1))
    rows = int(layout_absolute.grid_dimensions.rows.get(bp, 1))
    for _, coords in placed:
        cols = max(cols, int(coords.grid_column_end) - 1)
        rows = max(rows, int(coords.grid_row_end) - 1)

    palette = section_colors(list(layout_absolute.sections))
    color_fn: Callable[[str], Colorizer] = (
        (lambda sid: palette.get(sid, _plain)) if color else (lambda sid: _plain)
    )

    title = f" {bp.value} {cols}x{rows} "
    inner_width = cols * cell_width
    if len(title) <= inner_width:
        pad = inner_width - len(title)
        top = "┌" + "─" * (pad // 2) + title + "─" * (pad - pad // 2) + "┐"
    else:
        top = "┌" + "─" * inner_width + "┐"

    lines = [top]
    for row in range(1, rows + 1):
        parts = ["│"]
        for col in range(1, cols + 1):
            owners = [(sid, c) for sid, c in placed if _covers(c, col, row)]
            if not owners:
                char, colorize = EMPTY_CHAR, _plain
            elif len(owners) > 1:
                char, colorize = OVERLAP_CHAR, (chalk.white if color else _plain)
            else:
                sid, coords = owners[0]
                letter = sid[0] if sid else "?"
                first_cell = col == coords.grid_column_start and row == coords.grid_row_start
                char = letter.upper() if first_cell else letter.lower()
                colorize = color_fn(sid)

            content = char if cell_width == 1 else char.center(cell_width)
            parts.append(colorize(content))
        parts.append("│")
        lines.append("".join(parts))
    lines.append("└" + "─" * inner_width + "┘")

    logger.debug("render_layout: bp=%s cols=%d rows=%d blocks=%d", bp.value, cols, rows, len(placed))
    return "\n".join(lines)


def render_all(
    layout_absolute: LayoutAbsolute,
    cell_width: int = 3,
    color: bool = True,
) -> str:
    """Render every breakpoint under a [bp] heading, smallest first, separated by blank lines."""
    return "\n\n".join(
        f"[{bp.value}]\n" + render_layout(layout_absolute, bp, cell_width, color) for bp in BREAKPOINTS
    )
