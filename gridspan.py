"""
Span-based responsive layout to CSS Grid coordinates.

Pipeline (each stage threads the same caller-owned diagnostics list):
    layout_to_tx                 spans -> initial boxes + transformation lists
    layout_tx_to_section_local   section transformations, section-local space
    layout_section_to_bounds     bounding box per section per breakpoint
    layout_section_to_absolute   arrange sections, absolute 1-based CSS lines
    check_sections_overlap       optional advisory overlap report

Nothing here raises on bad layout data: problems become diagnostics and a
fallback (skip, zero-size box, 1x1 grid) keeps the result complete.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from math import inf
from typing import Any, Mapping

from box_transformations import BoxVerb, transform_box_move
from grid_diagnostics import Diagnostics, GridErrorCode, make_error, make_warning
from grid_geometry import add_coordinates, get_origin, make_grid_box, subtract_coordinates
from grid_types import (
    BREAKPOINTS,
    BoxMap,
    BoxSpan,
    BPSGridBoxes,
    Breakpoint,
    Coordinate,
    CSSCoordinates,
    GridBox,
    GridBoxesAndTx,
    GridDiagnostic,
    Layout,
    LayoutAbsolute,
    LayoutSectionBounds,
    LayoutSectionLocal,
    LayoutWithTx,
    OverlapPolicy,
    SectionCoordinates,
)
from layout_theme import LayoutTheme, get_default_theme

logger = logging.getLogger(__name__)


# =============================================================================
# Stage 1: Spans -> Initial Boxes
# =============================================================================


def _read_span(raw: Any) -> BoxSpan | None:
    """Accept a BoxSpan or a {"spanX", "spanY"} mapping of positive integers."""
    if isinstance(raw, BoxSpan):
        try:
            span = BoxSpan.from_dict(raw.to_dict())
        except ValueError:
            return None
    elif isinstance(raw, Mapping) and "spanX" in raw and "spanY" in raw:
        try:
            span = BoxSpan.from_dict(raw)
        except (TypeError, ValueError):
            return None
    else:
        return None
    if span.span_x <= 0 or span.span_y <= 0:
        return None
    return span


def layout_to_tx(
    layout: Layout,
    diagnostics: Diagnostics,
    theme: LayoutTheme | None = None,
) -> LayoutWithTx:
    """
    Resolve every block span into an initial GridBox per breakpoint.

    Sections mapped to None are skipped silently. A section whose content is
    not a mapping records NO_SECTION_ID; a block without a usable span records
    BOX_SPAN_MISSING. Both are skipped.

    Args:
        layout: section id -> block id -> span
        diagnostics: Sink for problems encountered
        theme: Span-resolution strategy; the default theme when omitted

    Returns:
        LayoutWithTx holding boxes plus section and layout transformation lists
    """
    if theme is None:
        theme = get_default_theme(layout)

    result = LayoutWithTx(transformations=theme.layout_transforms(layout))

    for section_id, section in layout.items():
        if section is None:
            continue
        if not isinstance(section, Mapping):
            diagnostics.append(
                make_error(
                    "layoutToTx",
                    GridErrorCode.NO_SECTION_ID,
                    f"Section {section_id} has no boxes defined in layout. Skipping it.",
                    element_id=section_id,
                )
            )
            continue

        spans: dict[str, BoxSpan] = {}
        for box_id, raw_span in section.items():
            span = _read_span(raw_span)
            if span is None:
                diagnostics.append(
                    make_error(
                        "layoutToTx",
                        GridErrorCode.BOX_SPAN_MISSING,
                        f"Box {box_id} in section {section_id} has no box span defined in layout. Skipping it.",
                        element_id=box_id,
                        details={"sectionId": section_id, "span": raw_span},
                    )
                )
                continue
            spans[box_id] = span

        grid_boxes: BPSGridBoxes = {}
        for bp in BREAKPOINTS:
            grid_boxes[bp] = {
                box_id: theme.resolve_box_span(section_id, box_id, layout, span, bp)
                for box_id, span in spans.items()
            }

        result.sections[section_id] = GridBoxesAndTx(
            grid_boxes=grid_boxes,
            transformations=theme.section_box_transforms(section_id, layout),
        )
        logger.debug("layout_to_tx: section=%s blocks=%d", section_id, len(spans))

    return result


# =============================================================================
# Stage 2: Section-Local Transformations
# =============================================================================


def layout_tx_to_section_local(
    layout_tx: LayoutWithTx,
    diagnostics: Diagnostics,
    registry: Mapping[str, BoxVerb] | None = None,
) -> LayoutSectionLocal:
    """
    Apply each section's own transformation lists to its blocks.

    Boxes are copied into section-scoped maps first, so the input is left
    untouched. Layout-level transformations pass through unevaluated.
    """
    local = LayoutSectionLocal(transformations=layout_tx.transformations or {})

    for section_id, section in layout_tx.sections.items():
        if section is None:
            continue
        boxes_per_bp: BPSGridBoxes = {bp: dict(section.grid_boxes.get(bp) or {}) for bp in BREAKPOINTS}
        local.sections[section_id] = boxes_per_bp
        if section.transformations:
            transform_box_move(section.transformations, boxes_per_bp, diagnostics, registry)

    return local


# =============================================================================
# Stage 3: Section Bounding Boxes
# =============================================================================


def section_bounds(boxes: BoxMap) -> GridBox | None:
    """Minimal box enclosing every box in the map, or None for an empty map."""
    if not boxes:
        return None
    min_x = min_y = inf
    max_x = max_y = -inf
    for box in boxes.values():
        min_x = min(min_x, box.origin.x)
        min_y = min(min_y, box.origin.y)
        max_x = max(max_x, box.origin.x + box.diagonal.x)
        max_y = max(max_y, box.origin.y + box.diagonal.y)
    return make_grid_box(Coordinate(min_x, min_y), Coordinate(max_x - min_x, max_y - min_y))


def layout_section_to_bounds(
    layout_local: LayoutSectionLocal,
    diagnostics: Diagnostics,
) -> LayoutSectionBounds:
    """
    Compute one bounding box per section per breakpoint.

    A section with no blocks at a breakpoint records MISSING_BOX and gets a
    zero-sized box at the origin.
    """
    bounds = LayoutSectionBounds(
        sections=layout_local.sections,
        bounding_boxes={bp: {} for bp in BREAKPOINTS},
        transformations=layout_local.transformations,
    )

    for bp in BREAKPOINTS:
        for section_id, boxes_per_bp in layout_local.sections.items():
            bound = section_bounds(boxes_per_bp.get(bp) or {})
            if bound is None:
                diagnostics.append(
                    make_error(
                        "layoutSectionToBounds",
                        GridErrorCode.MISSING_BOX,
                        f"No boxes found for section {section_id} at breakpoint {bp.value}. "
                        f"Returning empty bounding box.",
                        element_id=section_id,
                        details={"bp": bp.value},
                    )
                )
                bound = make_grid_box(get_origin(), get_origin())
            bounds.bounding_boxes[bp][section_id] = bound

    return bounds


# =============================================================================
# Stage 4: Absolute Coordinates
# =============================================================================


def get_css_coordinates(box: GridBox) -> CSSCoordinates:
    return CSSCoordinates(
        grid_column_start=box.origin.x,
        grid_column_end=box.origin.x + box.diagonal.x,
        grid_row_start=box.origin.y,
        grid_row_end=box.origin.y + box.diagonal.y,
    )


def layout_section_to_absolute(
    layout_bounds: LayoutSectionBounds,
    diagnostics: Diagnostics,
    registry: Mapping[str, BoxVerb] | None = None,
) -> LayoutAbsolute:
    """
    Arrange sections against each other and emit absolute CSS grid lines.

    Steps, per breakpoint:
    1. Rebase blocks onto their section's bounding-box origin.
    2. Reset every bounding box origin to (1, 1).
    3. Run the layout-level transformations on the bounding boxes.
    4. Add each (moved) bounding-box origin back onto its blocks.
    5. Grid extents from the furthest bounding-box corner, minus 1, floor 1.
    6. Convert blocks to start/end line pairs.
    7. Shift everything so no start line is below 1 (EMPTY_GRID when a
       breakpoint has no blocks at all).
    """
    section_ids = list(layout_bounds.sections)

    # working copies; boxes are replaced, never mutated
    blocks: dict[str, BPSGridBoxes] = {
        s: {bp: dict(layout_bounds.sections[s].get(bp) or {}) for bp in BREAKPOINTS} for s in section_ids
    }
    bounding: dict[Breakpoint, BoxMap] = {
        bp: dict(layout_bounds.bounding_boxes.get(bp) or {}) for bp in BREAKPOINTS
    }

    # 1. rebase, 2. reset
    for bp in BREAKPOINTS:
        for section_id in section_ids:
            bound = bounding[bp].get(section_id)
            if bound is None:
                continue
            local = blocks[section_id][bp]
            for box_id, box in local.items():
                local[box_id] = make_grid_box(subtract_coordinates(box.origin, bound.origin), box.diagonal)
            bounding[bp][section_id] = make_grid_box(Coordinate(1, 1), bound.diagonal)

    # 3. arrange sections
    transform_box_move(layout_bounds.transformations, bounding, diagnostics, registry)

    # 4. re-expand
    for bp in BREAKPOINTS:
        for section_id in section_ids:
            bound = bounding[bp].get(section_id)
            if bound is None:
                continue
            local = blocks[section_id][bp]
            for box_id, box in local.items():
                local[box_id] = make_grid_box(add_coordinates(box.origin, bound.origin), box.diagonal)

    absolute = LayoutAbsolute()
    dims = absolute.grid_dimensions

    # 5. grid extents
    for bp in BREAKPOINTS:
        max_row: float = 0
        max_col: float = 0
        for bound in bounding[bp].values():
            max_row = max(max_row, bound.origin.y + bound.diagonal.y)
            max_col = max(max_col, bound.origin.x + bound.diagonal.x)
        dims.rows[bp] = max(1, max_row - 1)
        dims.columns[bp] = max(1, max_col - 1)

    # 6. CSS conversion
    min_start: dict[Breakpoint, list[float]] = {bp: [inf, inf] for bp in BREAKPOINTS}
    for section_id in section_ids:
        section_coords = SectionCoordinates()
        for bp in BREAKPOINTS:
            coords_at_bp: dict[str, CSSCoordinates] = {}
            for box_id, box in blocks[section_id][bp].items():
                coord = get_css_coordinates(box)
                coords_at_bp[box_id] = coord
                min_start[bp][0] = min(min_start[bp][0], coord.grid_column_start)
                min_start[bp][1] = min(min_start[bp][1], coord.grid_row_start)
            section_coords.coordinates[bp] = coords_at_bp
        absolute.sections[section_id] = section_coords

    # 7. normalize to lines >= 1
    for bp in BREAKPOINTS:
        min_x, min_y = min_start[bp]
        if min_x == inf and min_y == inf:
            diagnostics.append(
                make_warning(
                    "layoutSectionBtoAbsolute",
                    GridErrorCode.EMPTY_GRID,
                    f"Empty grid at breakpoint {bp.value}. Setting minimal dimensions",
                    details={"bp": bp.value},
                )
            )
            dims.columns[bp] = 1
            dims.rows[bp] = 1
            continue

        dx = 1 - min_x if min_x < 1 else 0
        dy = 1 - min_y if min_y < 1 else 0
        if dx == 0 and dy == 0:
            continue

        dims.columns[bp] += dx
        dims.rows[bp] += dy
        diagnostics.append(
            make_warning(
                "layoutSectionBtoAbsolute",
                GridErrorCode.GRID_NORMALIZED_TO_POSITIVE_LINES,
                f"Grid normalized to positive values at bp {bp.value}",
                details={"bp": bp.value, "dx": dx, "dy": dy},
            )
        )
        for section_id in section_ids:
            for coord in absolute.sections[section_id].coordinates[bp].values():
                coord.shift(dx, dy)

    logger.debug(
        "layout_section_to_absolute: sections=%d rows=%s columns=%s",
        len(section_ids),
        {bp.value: n for bp, n in dims.rows.items()},
        {bp.value: n for bp, n in dims.columns.items()},
    )
    return absolute


# =============================================================================
# Overlap Validation
# =============================================================================


@dataclass(frozen=True)
class PlacedBox:
    """A block's final coordinates tagged with where it came from."""

    bp: Breakpoint
    section_id: str
    box_id: str
    coords: CSSCoordinates

    @property
    def key(self) -> str:
        return f"{self.bp.value}::{self.section_id}::{self.box_id}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "sectionId": self.section_id,
            "boxId": self.box_id,
            "rect": {
                "colStart": self.coords.grid_column_start,
                "colEnd": self.coords.grid_column_end,
                "rowStart": self.coords.grid_row_start,
                "rowEnd": self.coords.grid_row_end,
            },
        }


def overlaps(a: CSSCoordinates, b: CSSCoordinates) -> bool:
    """Half-open interval overlap on both axes; shared edges do not count."""
    return (
        a.grid_column_start < b.grid_column_end
        and b.grid_column_start < a.grid_column_end
        and a.grid_row_start < b.grid_row_end
        and b.grid_row_start < a.grid_row_end
    )


def placed_boxes(layout_absolute: LayoutAbsolute, bp: Breakpoint) -> list[PlacedBox]:
    """Every block of every section at one breakpoint, in section then block order."""
    placed: list[PlacedBox] = []
    for section_id, section in layout_absolute.sections.items():
        for box_id, coords in (section.coordinates.get(bp) or {}).items():
            placed.append(PlacedBox(bp, section_id, box_id, coords))
    return placed


def check_sections_overlap(
    layout_absolute: LayoutAbsolute,
    diagnostics: Diagnostics,
    overlap_policy: OverlapPolicy | str,
    breakpoints: tuple[Breakpoint, ...] = BREAKPOINTS,
) -> int:
    """
    Report every overlapping pair of blocks, per breakpoint.

    Each unordered pair is compared once. Overlaps are warnings under "warn"
    and errors under "error"; under "allow" nothing is checked. Coordinates
    are never altered.

    Returns:
        Number of overlapping pairs reported
    """
    policy = OverlapPolicy(overlap_policy)
    if policy is OverlapPolicy.ALLOW:
        return 0
    make = make_warning if policy is OverlapPolicy.WARN else make_error

    reported = 0
    for bp in breakpoints:
        boxes = placed_boxes(layout_absolute, Breakpoint(bp))
        for i, a in enumerate(boxes):
            for b in boxes[i + 1 :]:
                if not overlaps(a.coords, b.coords):
                    continue
                details = {
                    "bp": a.bp.value,
                    "a": a.to_dict(),
                    "b": b.to_dict(),
                    "pairKey": f"{a.key}__{b.key}",
                }
                diagnostics.append(
                    make(
                        "CSSLayout",
                        GridErrorCode.OVERLAP_NOT_ALLOWED,
                        f"Boxes {a.key} and {b.key} are overlapping.",
                        details=details,
                    )
                )
                reported += 1
    return reported


# =============================================================================
# Orchestration
# =============================================================================


def css_layout_from_tx(
    layout_tx: LayoutWithTx,
    diagnostics: Diagnostics,
    grid_diagnostic: GridDiagnostic | None = None,
    registry: Mapping[str, BoxVerb] | None = None,
) -> LayoutAbsolute:
    """Run the section-local, bounds and absolute stages, then the optional overlap check."""
    if grid_diagnostic is None:
        grid_diagnostic = GridDiagnostic()

    local = layout_tx_to_section_local(layout_tx, diagnostics, registry)
    bounds = layout_section_to_bounds(local, diagnostics)
    absolute = layout_section_to_absolute(bounds, diagnostics, registry)

    if grid_diagnostic.overlap_policy is not OverlapPolicy.ALLOW:
        check_sections_overlap(
            absolute,
            diagnostics,
            grid_diagnostic.overlap_policy,
            grid_diagnostic.breakpoints,
        )
    return absolute


def css_layout(
    layout: Layout,
    diagnostics: Diagnostics,
    theme: LayoutTheme | None = None,
    grid_diagnostic: GridDiagnostic | None = None,
    registry: Mapping[str, BoxVerb] | None = None,
) -> LayoutAbsolute:
    """
    Turn a span layout into per-breakpoint CSS grid coordinates.

    Args:
        layout: section id -> block id -> span
        diagnostics: Caller-owned list; every stage appends to it
        theme: Span-resolution strategy (default theme when omitted)
        grid_diagnostic: Overlap policy and the breakpoints it covers
        registry: Alternative verb registry

    Returns:
        LayoutAbsolute with 1-based, end-exclusive coordinates
    """
    layout_tx = layout_to_tx(layout, diagnostics, theme)
    return css_layout_from_tx(layout_tx, diagnostics, grid_diagnostic, registry)
