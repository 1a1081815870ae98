"""
Shared type definitions for the gridspan system.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class Breakpoint(str, Enum):
    """Responsive size class, smallest first."""

    XS = "xs"
    SM = "sm"
    MD = "md"
    LG = "lg"
    XL = "xl"


# Processing order for every per-breakpoint structure
BREAKPOINTS: tuple[Breakpoint, ...] = (
    Breakpoint.XS,
    Breakpoint.SM,
    Breakpoint.MD,
    Breakpoint.LG,
    Breakpoint.XL,
)


class Anchor(str, Enum):
    """Named reference point on a GridBox."""

    BOTTOM_LEFT = "bottomLeft"  # origin
    BOTTOM_RIGHT = "bottomRight"
    TOP_LEFT = "topLeft"
    TOP_RIGHT = "topRight"  # origin + diagonal
    CENTER = "center"


class OverlapPolicy(str, Enum):
    """What the overlap validator does with intersecting blocks."""

    ALLOW = "allow"  # validator does not run
    WARN = "warn"
    ERROR = "error"  # labelled as errors, never aborts


# =============================================================================
# Geometry Types
# =============================================================================


@dataclass(frozen=True)
class Coordinate:
    """A point or a displacement in grid units."""

    x: float
    y: float

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class GridBox:
    """
    Axis-aligned rectangle: bottom-left origin plus a non-negative diagonal.

    The coordinate space of the origin (section-local, bounding-box
    relative or absolute) depends on the pipeline stage holding the box.
    Build boxes with grid_geometry.make_grid_box.
    """

    origin: Coordinate
    diagonal: Coordinate

    def __post_init__(self) -> None:
        if self.diagonal.x < 0 or self.diagonal.y < 0:
            object.__setattr__(
                self, "diagonal", Coordinate(abs(self.diagonal.x), abs(self.diagonal.y))
            )

    @property
    def width(self) -> float:
        return self.diagonal.x

    @property
    def height(self) -> float:
        return self.diagonal.y


def _whole_number(value: Any, name: str) -> int:
    # bool is an int subclass; 2.0 is accepted, 2.7 and "2" are not
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{name} must be an integer, got {value!r}")
    return int(value)


@dataclass(frozen=True)
class BoxSpan:
    """Column/row extent requested for a block."""

    span_x: int
    span_y: int

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "BoxSpan":
        """Read {"spanX", "spanY"}; raises ValueError unless both are whole numbers."""
        return BoxSpan(span_x=_whole_number(d["spanX"], "spanX"), span_y=_whole_number(d["spanY"], "spanY"))

    def to_dict(self) -> dict[str, int]:
        return {"spanX": self.span_x, "spanY": self.span_y}


@dataclass
class CSSCoordinates:
    """1-based, end-exclusive CSS Grid line numbers."""

    grid_column_start: float
    grid_column_end: float
    grid_row_start: float
    grid_row_end: float

    def shift(self, dx: float, dy: float) -> None:
        self.grid_column_start += dx
        self.grid_column_end += dx
        self.grid_row_start += dy
        self.grid_row_end += dy

    def to_dict(self) -> dict[str, float]:
        return {
            "gridColumnStart": self.grid_column_start,
            "gridColumnEnd": self.grid_column_end,
            "gridRowStart": self.grid_row_start,
            "gridRowEnd": self.grid_row_end,
        }


# =============================================================================
# Layout Types
# =============================================================================

# section id -> block id -> span; None sections/blocks are skipped
Layout = Mapping[str, "Mapping[str, BoxSpan | Mapping[str, int] | None] | None"]

# Insertion-ordered id -> box map; bulk verbs and stacking follow this order
BoxMap = dict[str, GridBox]

BPSGridBoxes = dict[Breakpoint, BoxMap]

# Breakpoint -> ordered transformation entries (see box_transformations)
BoxTransformations = Mapping[Breakpoint | str, "list[Any]"]


@dataclass
class GridBoxesAndTx:
    """Initial boxes of one section plus its own transformation lists."""

    grid_boxes: BPSGridBoxes
    transformations: BoxTransformations | None = None


@dataclass
class LayoutWithTx:
    """Span resolver output."""

    sections: dict[str, GridBoxesAndTx] = field(default_factory=dict)
    transformations: BoxTransformations | None = None


@dataclass
class LayoutSectionLocal:
    """Blocks positioned inside their sections; layout transforms still pending."""

    sections: dict[str, BPSGridBoxes] = field(default_factory=dict)
    transformations: BoxTransformations | None = None


@dataclass
class LayoutSectionBounds:
    """Section-local blocks plus one bounding box per section per breakpoint."""

    sections: dict[str, BPSGridBoxes] = field(default_factory=dict)
    bounding_boxes: dict[Breakpoint, BoxMap] = field(default_factory=dict)
    transformations: BoxTransformations | None = None


@dataclass
class GridDimensions:
    """Row and column counts per breakpoint."""

    rows: dict[Breakpoint, float] = field(default_factory=dict)
    columns: dict[Breakpoint, float] = field(default_factory=dict)


@dataclass
class SectionCoordinates:
    """Final CSS coordinates of one section's blocks."""

    coordinates: dict[Breakpoint, dict[str, CSSCoordinates]] = field(default_factory=dict)


@dataclass
class LayoutAbsolute:
    """Pipeline result: grid dimensions and per-block CSS coordinates."""

    grid_dimensions: GridDimensions = field(default_factory=GridDimensions)
    sections: dict[str, SectionCoordinates] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "gridDimensions": {
                "rows": {bp.value: n for bp, n in self.grid_dimensions.rows.items()},
                "columns": {bp.value: n for bp, n in self.grid_dimensions.columns.items()},
            },
            "sections": {
                section_id: {
                    "coordinates": {
                        bp.value: {box_id: c.to_dict() for box_id, c in boxes.items()}
                        for bp, boxes in section.coordinates.items()
                    }
                }
                for section_id, section in self.sections.items()
            },
        }


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class GridDiagnostic:
    """
    Optional post-pipeline validation settings.

    Accepts enum members or their string values; breakpoints are kept in
    the fixed processing order. Unknown values raise ValueError.
    """

    overlap_policy: OverlapPolicy = OverlapPolicy.ALLOW
    breakpoints: tuple[Breakpoint, ...] = BREAKPOINTS

    def __post_init__(self) -> None:
        try:
            policy = OverlapPolicy(self.overlap_policy)
        except ValueError:
            raise ValueError(f"Unknown overlap policy: {self.overlap_policy!r}") from None
        try:
            requested = {Breakpoint(bp) for bp in self.breakpoints}
        except ValueError:
            raise ValueError(f"Unknown breakpoint in {list(self.breakpoints)!r}") from None
        object.__setattr__(self, "overlap_policy", policy)
        object.__setattr__(self, "breakpoints", tuple(bp for bp in BREAKPOINTS if bp in requested))

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "GridDiagnostic":
        return GridDiagnostic(
            overlap_policy=d.get("overlapPolicy") or OverlapPolicy.ALLOW,
            breakpoints=tuple(BREAKPOINTS if d.get("breakpoints") is None else d["breakpoints"]),
        )
