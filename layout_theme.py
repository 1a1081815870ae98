"""
Layout themes: the strategy that turns spans into initial boxes and
supplies the default transformation lists.

Any object with the LayoutTheme attributes works as a theme; no base class
is required.
"""

from __future__ import annotations

from typing import Any, Protocol

from box_transformations import StackHorizontally, StackVertically
from grid_geometry import get_origin, make_grid_box
from grid_options import (
    DEFAULT_GRID_NODE_VIEW_OPTIONS,
    DEFAULT_GRID_OPTIONS,
    GridNodeViewOptions,
    GridOptions,
)
from grid_types import Breakpoint, BoxSpan, BoxTransformations, Coordinate, GridBox, Layout

__all__ = [
    "LayoutTheme",
    "DefaultLayoutTheme",
    "DEFAULT_TRANSFORMATIONS_RESPONSIVE_ROWS",
    "DEFAULT_TRANSFORMATIONS_RESPONSIVE_COLUMNS",
    "get_default_theme",
]


class LayoutTheme(Protocol):
    """Span resolution plus default transformation lists and option bags."""

    grid_node_options: GridNodeViewOptions
    grid_options: GridOptions

    def resolve_box_span(
        self,
        section: str,
        box_id: str,
        layout: Layout,
        span: BoxSpan,
        bp: Breakpoint,
    ) -> GridBox: ...

    def section_box_transforms(self, section: str, layout: Layout) -> BoxTransformations: ...

    def layout_transforms(self, layout: Layout) -> BoxTransformations: ...


# Blocks inside a section: a column on xs, a row from sm upwards
DEFAULT_TRANSFORMATIONS_RESPONSIVE_ROWS: dict[Breakpoint, tuple[Any, ...]] = {
    Breakpoint.XS: (StackVertically(),),
    Breakpoint.SM: (StackHorizontally(),),
    Breakpoint.MD: (StackHorizontally(),),
    Breakpoint.LG: (StackHorizontally(),),
    Breakpoint.XL: (StackHorizontally(),),
}

# Sections: always one below the other
DEFAULT_TRANSFORMATIONS_RESPONSIVE_COLUMNS: dict[Breakpoint, tuple[Any, ...]] = {
    Breakpoint.XS: (StackVertically(),),
    Breakpoint.SM: (StackVertically(),),
    Breakpoint.MD: (StackVertically(),),
    Breakpoint.LG: (StackVertically(),),
    Breakpoint.XL: (StackVertically(),),
}


def _fresh(transformations: dict[Breakpoint, tuple[Any, ...]]) -> dict[Breakpoint, list[Any]]:
    return {bp: list(entries) for bp, entries in transformations.items()}


class DefaultLayoutTheme:
    """
    Spans map directly to extents, except on xs where every block is one
    full-width column.
    """

    def __init__(
        self,
        grid_node_options: GridNodeViewOptions = DEFAULT_GRID_NODE_VIEW_OPTIONS,
        grid_options: GridOptions = DEFAULT_GRID_OPTIONS,
    ) -> None:
        self.grid_node_options = grid_node_options
        self.grid_options = grid_options

    def resolve_box_span(
        self,
        section: str,
        box_id: str,
        layout: Layout,
        span: BoxSpan,
        bp: Breakpoint,
    ) -> GridBox:
        dx = 1 if bp == Breakpoint.XS else span.span_x
        return make_grid_box(get_origin(), Coordinate(dx, span.span_y))

    def section_box_transforms(self, section: str, layout: Layout) -> BoxTransformations:
        return _fresh(DEFAULT_TRANSFORMATIONS_RESPONSIVE_ROWS)

    def layout_transforms(self, layout: Layout) -> BoxTransformations:
        return _fresh(DEFAULT_TRANSFORMATIONS_RESPONSIVE_COLUMNS)


def get_default_theme(layout: Layout | None = None) -> DefaultLayoutTheme:
    return DefaultLayoutTheme()
