"""
CSS text output for a LayoutAbsolute.

Turns grid dimensions into container declarations, block coordinates into
grid-column/grid-row placements, and wraps both into one @media block per
breakpoint.
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping

from grid_diagnostics import Diagnostics, GridErrorCode, make_error
from grid_options import (
    DEFAULT_GRID_OPTIONS,
    Auto,
    CssLength,
    FitContent,
    Fr,
    GridNodeViewOptions,
    GridOptions,
    GridUnitValue,
    MaxContent,
    MinContent,
    MinMax,
    TrackBreadth,
)
from grid_types import BREAKPOINTS, Breakpoint, CSSCoordinates, LayoutAbsolute

logger = logging.getLogger(__name__)

EXPORT_ORIGIN = "cssExport"

# Lower edge of each breakpoint in px
BREAKPOINT_MIN_WIDTHS: dict[Breakpoint, int] = {
    Breakpoint.XS: 0,
    Breakpoint.SM: 600,
    Breakpoint.MD: 900,
    Breakpoint.LG: 1200,
    Breakpoint.XL: 1536,
}

FALLBACK_COORDINATES = (1, 2, 1, 2)  # column start/end, row start/end

NodeKey = tuple[str, str]  # (section id, block id)


def _num(value: float) -> str:
    """Render 2.0 as "2" and 2.5 as "2.5"."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


# =============================================================================
# Value Stringification
# =============================================================================


def css_length_to_string(length: CssLength) -> str:
    return f"{_num(length.value)}{length.unit}"


def track_breadth_to_string(breadth: TrackBreadth) -> str:
    match breadth:
        case CssLength():
            return css_length_to_string(breadth)
        case Fr(value=value):
            return f"{_num(value)}fr"
        case Auto():
            return "auto"
        case MinContent():
            return "min-content"
        case MaxContent():
            return "max-content"
        case FitContent(value=value):
            return f"fit-content({css_length_to_string(value)})"
    raise TypeError(f"Not a track breadth: {breadth!r}")


def grid_unit_value_to_string(value: GridUnitValue) -> str:
    if isinstance(value, MinMax):
        return f"minmax({track_breadth_to_string(value.min)}, {track_breadth_to_string(value.max)})"
    return track_breadth_to_string(value)


def gap_value_to_string(gap: CssLength) -> str:
    return css_length_to_string(gap)


# =============================================================================
# Declarations
# =============================================================================


def grid_container_declarations(
    layout_absolute: LayoutAbsolute,
    bp: Breakpoint,
    grid_options: GridOptions = DEFAULT_GRID_OPTIONS,
) -> dict[str, str]:
    """
    CSS properties of the grid container at one breakpoint.

    Columns share the width equally and may shrink to zero; rows size to
    their content. Unset row/column gaps fall back to gap, and an unset gap
    to 0px.
    """
    bp = Breakpoint(bp)
    columns = int(layout_absolute.grid_dimensions.columns.get(bp, 1))
    rows = int(layout_absolute.grid_dimensions.rows.get(bp, 1))
    gap = gap_value_to_string(grid_options.gap) if grid_options.gap else "0px"

    def implicit(units: GridUnitValue | None) -> str:
        return "auto" if units is None else grid_unit_value_to_string(units)

    return {
        "display": "grid",
        "width": "100%",
        "grid-template-columns": f"repeat({columns}, minmax(0, 1fr))",
        "grid-template-rows": f"repeat({rows}, minmax(min-content, auto))",
        "grid-auto-columns": implicit(grid_options.implicit_column_units),
        "grid-auto-rows": implicit(grid_options.implicit_row_units),
        "grid-auto-flow": grid_options.auto_flow,
        "overflow": grid_options.overflow,
        "justify-items": grid_options.justify_items,
        "align-items": grid_options.align_items,
        "justify-content": grid_options.justify_content,
        "align-content": grid_options.align_content,
        "gap": gap,
        "row-gap": gap_value_to_string(grid_options.row_gap) if grid_options.row_gap else gap,
        "column-gap": gap_value_to_string(grid_options.column_gap) if grid_options.column_gap else gap,
    }


def grid_item_declarations(
    coords: CSSCoordinates,
    view_options: GridNodeViewOptions | None = None,
) -> dict[str, str]:
    """Placement of one block, plus its presentation hints when given."""
    decls = {
        "grid-column": f"{_num(coords.grid_column_start)} / {_num(coords.grid_column_end)}",
        "grid-row": f"{_num(coords.grid_row_start)} / {_num(coords.grid_row_end)}",
    }
    if view_options is None:
        return decls

    if view_options.z_index is not None:
        decls["z-index"] = str(view_options.z_index)
    if view_options.min_width0:
        decls["min-width"] = "0"
    if view_options.min_height0:
        decls["min-height"] = "0"
    decls["justify-self"] = view_options.justify_self
    decls["align-self"] = view_options.align_self
    decls["pointer-events"] = view_options.pointer_events
    if view_options.visibility == "hidden":
        decls["visibility"] = "hidden"
    elif view_options.visibility == "visuallyHidden":
        decls["position"] = "absolute"
        decls["clip-path"] = "inset(50%)"
        decls["overflow"] = "hidden"
    return decls


def layout_item_declarations(
    layout_absolute: LayoutAbsolute,
    diagnostics: Diagnostics,
) -> dict[NodeKey, dict[Breakpoint, CSSCoordinates]]:
    """
    Collect every block's coordinates at every breakpoint.

    A block seen at some breakpoints but not others is repaired with the
    1/2 x 1/2 fallback (MISSING_COORDINATES). A section with no coordinate
    map at a breakpoint records SECTION_SHAPES_MISSING_BP; a block whose
    entry is empty records BOX_SHAPE_MISSING_BP.
    """
    nodes: dict[NodeKey, dict[Breakpoint, CSSCoordinates]] = {}

    for section_id, section in layout_absolute.sections.items():
        for bp in BREAKPOINTS:
            boxes_at_bp = section.coordinates.get(bp)
            if boxes_at_bp is None:
                diagnostics.append(
                    make_error(
                        EXPORT_ORIGIN,
                        GridErrorCode.SECTION_SHAPES_MISSING_BP,
                        f'Missing box shapes for section "{section_id}" at breakpoint "{bp.value}"',
                        element_id=section_id,
                        details={"sectionId": section_id, "bp": bp.value},
                    )
                )
                continue
            for box_id, coords in boxes_at_bp.items():
                if coords is None:
                    diagnostics.append(
                        make_error(
                            EXPORT_ORIGIN,
                            GridErrorCode.BOX_SHAPE_MISSING_BP,
                            f'Missing box shape for box "{box_id}" in section "{section_id}" '
                            f'at breakpoint "{bp.value}"',
                            element_id=box_id,
                            details={"sectionId": section_id, "boxId": box_id, "bp": bp.value},
                        )
                    )
                    continue
                nodes.setdefault((section_id, box_id), {})[bp] = coords

    for (section_id, box_id), per_bp in nodes.items():
        for bp in BREAKPOINTS:
            if bp in per_bp:
                continue
            diagnostics.append(
                make_error(
                    EXPORT_ORIGIN,
                    GridErrorCode.MISSING_COORDINATES,
                    f'Box "{box_id}" in section "{section_id}" is missing coordinates for '
                    f'breakpoint "{bp.value}". Recovering with default coordinates.',
                    element_id=box_id,
                    details={"sectionId": section_id, "boxId": box_id, "bp": bp.value},
                )
            )
            per_bp[bp] = CSSCoordinates(*FALLBACK_COORDINATES)

    return nodes


# =============================================================================
# Stylesheet
# =============================================================================


def default_selector(section_id: str, box_id: str) -> str:
    return f".{section_id}-{box_id}"


def _rule(selector: str, decls: Mapping[str, str], indent: str) -> list[str]:
    lines = [f"{indent}{selector} {{"]
    lines.extend(f"{indent}  {prop}: {value};" for prop, value in decls.items())
    lines.append(f"{indent}}}")
    return lines


def stylesheet(
    layout_absolute: LayoutAbsolute,
    diagnostics: Diagnostics,
    container_selector: str = ".gridspan",
    selector_fn: Callable[[str, str], str] = default_selector,
    grid_options: GridOptions = DEFAULT_GRID_OPTIONS,
    view_options: Mapping[NodeKey, GridNodeViewOptions] | None = None,
    min_widths: Mapping[Breakpoint, int] = BREAKPOINT_MIN_WIDTHS,
) -> str:
    """
    Render the whole layout as CSS text.

    Args:
        layout_absolute: Pipeline output
        diagnostics: Sink for missing-coordinate problems
        container_selector: Selector of the grid container element
        selector_fn: (section id, block id) -> selector of the block element
        grid_options: Container behaviour
        view_options: Optional per-block presentation hints
        min_widths: Breakpoint -> lower edge in px for the @media query

    Returns:
        One @media (min-width: ...) block per breakpoint, smallest first
    """
    nodes = layout_item_declarations(layout_absolute, diagnostics)
    view_options = view_options or {}

    out: list[str] = []
    for bp in BREAKPOINTS:
        out.append(f"/* {bp.value} */")
        out.append(f"@media (min-width: {min_widths[bp]}px) {{")
        out.extend(_rule(container_selector, grid_container_declarations(layout_absolute, bp, grid_options), "  "))
        for (section_id, box_id), per_bp in nodes.items():
            decls = grid_item_declarations(per_bp[bp], view_options.get((section_id, box_id)))
            out.extend(_rule(selector_fn(section_id, box_id), decls, "  "))
        out.append("}")

    logger.debug("stylesheet: %d nodes, %d lines", len(nodes), len(out))
    return "\n".join(out) + "\n"
