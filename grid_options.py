"""
Static option bags carried by a layout theme.

GridOptions configures the grid container and GridNodeViewOptions each
placed node. The layout pipeline never reads them; css_export does.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping

__all__ = [
    "CssLength",
    "Fr",
    "Auto",
    "MinContent",
    "MaxContent",
    "FitContent",
    "MinMax",
    "TrackBreadth",
    "GridUnitValue",
    "GridOptions",
    "GridNodeViewOptions",
    "DEFAULT_GRID_OPTIONS",
    "DEFAULT_GRID_NODE_VIEW_OPTIONS",
    "resolve_grid_options",
    "resolve_grid_node_view_options",
]


# =============================================================================
# CSS Value Types
# =============================================================================


@dataclass(frozen=True)
class CssLength:
    value: float
    unit: str = "px"  # px | em | rem | %


@dataclass(frozen=True)
class Fr:
    value: float = 1


@dataclass(frozen=True)
class Auto:
    pass


@dataclass(frozen=True)
class MinContent:
    pass


@dataclass(frozen=True)
class MaxContent:
    pass


@dataclass(frozen=True)
class FitContent:
    value: CssLength


TrackBreadth = CssLength | Fr | Auto | MinContent | MaxContent | FitContent


@dataclass(frozen=True)
class MinMax:
    min: TrackBreadth
    max: TrackBreadth


GridUnitValue = TrackBreadth | MinMax


# =============================================================================
# Option Bags
# =============================================================================


@dataclass(frozen=True)
class GridOptions:
    """Grid container behaviour."""

    implicit_row_units: GridUnitValue | None = Fr(1)
    implicit_column_units: GridUnitValue | None = Fr(1)
    overflow: str = "visible"  # visible | hidden | scroll | auto
    auto_flow: str = "row"  # row | column | dense | row dense | column dense
    justify_items: str = "stretch"
    align_items: str = "stretch"
    justify_content: str = "start"
    align_content: str = "start"
    gap: CssLength | None = CssLength(0)
    row_gap: CssLength | None = CssLength(0)  # None falls back to gap
    column_gap: CssLength | None = CssLength(0)


@dataclass(frozen=True)
class GridNodeViewOptions:
    """Per-node presentation hints."""

    z_index: int | None = None
    min_width0: bool = True
    min_height0: bool = True
    justify_self: str = "stretch"  # start | end | center | stretch
    align_self: str = "stretch"
    pointer_events: str = "auto"  # auto | none
    data_attrs: dict[str, str] = field(default_factory=dict)
    aria: dict[str, str] = field(default_factory=dict)  # role, label, labelledBy, describedBy
    visibility: str = "visible"  # visible | hidden | visuallyHidden


DEFAULT_GRID_OPTIONS = GridOptions()
DEFAULT_GRID_NODE_VIEW_OPTIONS = GridNodeViewOptions()


def _check_keys(cls: type, overrides: Mapping[str, Any]) -> None:
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} option(s): {', '.join(unknown)}")


def resolve_grid_options(overrides: Mapping[str, Any] | None = None) -> GridOptions:
    """Defaults with the given fields replaced."""
    overrides = dict(overrides or {})
    _check_keys(GridOptions, overrides)
    return replace(DEFAULT_GRID_OPTIONS, **overrides)


def resolve_grid_node_view_options(overrides: Mapping[str, Any] | None = None) -> GridNodeViewOptions:
    """
    Defaults with the given fields replaced.

    data_attrs and aria are merged key by key rather than replaced.
    """
    overrides = dict(overrides or {})
    _check_keys(GridNodeViewOptions, overrides)
    defaults = DEFAULT_GRID_NODE_VIEW_OPTIONS
    overrides["data_attrs"] = {**defaults.data_attrs, **(overrides.get("data_attrs") or {})}
    overrides["aria"] = {**defaults.aria, **(overrides.get("aria") or {})}
    return replace(defaults, **overrides)
