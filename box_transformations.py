"""
Positioning verbs and the transformation interpreter.

A transformation list is an ordered sequence of verb invocations per
breakpoint. Each verb rewrites one box (or every box) of a mutable
id -> GridBox map and writes the result back, so later entries in the same
list observe the effect of earlier ones.

Entries are either typed variants (MoveTo, StackVertically, ...) or
single-key mappings in wire form:

    {"moveTo": {"from": {"boxId": "block_1", "anchor": "topLeft"},
                "to": {"x": 1, "y": 2}}}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, ClassVar, Mapping, Sequence

from grid_diagnostics import Diagnostics, GridErrorCode, make_error
from grid_geometry import add_coordinates, box_position, make_grid_box, subtract_coordinates
from grid_types import Anchor, BoxMap, BoxTransformations, BREAKPOINTS, Breakpoint, Coordinate, GridBox

logger = logging.getLogger(__name__)


class TransformationParamsError(ValueError):
    """Raised when a wire-form entry's parameters cannot be read."""


# =============================================================================
# Parameter Types
# =============================================================================


@dataclass(frozen=True)
class BoxRef:
    """A box, optionally with the anchor used as its reference point."""

    box_id: str
    anchor: Anchor | str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"boxId": self.box_id}
        if self.anchor is not None:
            out["anchor"] = _wire(self.anchor)
        return out


# Absolute point, scalar broadcast to both axes, or another box's anchor
Target = Coordinate | float | BoxRef


@dataclass(frozen=True)
class MoveTo:
    """Move source's anchor onto a target point (plus optional gap)."""

    TAG: ClassVar[str] = "moveTo"

    source: BoxRef
    to: Target
    gap: Coordinate | None = None

    def to_dict(self) -> dict[str, Any]:
        return _params_dict({"from": self.source, "to": self.to, "gap": self.gap})

    @staticmethod
    def from_dict(d: Any) -> "MoveTo":
        body = _require_mapping(d, MoveTo.TAG)
        return MoveTo(
            source=_read_source(body, MoveTo.TAG),
            to=_read_target(_require_key(body, "to", MoveTo.TAG)),
            gap=_read_target(body.get("gap")),
        )


@dataclass(frozen=True)
class MoveBy:
    """Shift a box by a displacement (plus optional gap)."""

    TAG: ClassVar[str] = "moveBy"

    source: BoxRef
    by: Coordinate | float
    gap: Coordinate | None = None

    def to_dict(self) -> dict[str, Any]:
        return _params_dict({"from": self.source, "by": self.by, "gap": self.gap})

    @staticmethod
    def from_dict(d: Any) -> "MoveBy":
        body = _require_mapping(d, MoveBy.TAG)
        return MoveBy(
            source=_read_source(body, MoveBy.TAG),
            by=_read_target(_require_key(body, "by", MoveBy.TAG)),
            gap=_read_target(body.get("gap")),
        )


@dataclass(frozen=True)
class AlignToX:
    """Like MoveTo, restricted to the X axis."""

    TAG: ClassVar[str] = "alignToX"

    source: BoxRef
    to: float | BoxRef
    gap: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return _params_dict({"from": self.source, "to": self.to, "gap": self.gap})

    @staticmethod
    def from_dict(d: Any) -> "AlignToX":
        body = _require_mapping(d, AlignToX.TAG)
        return AlignToX(
            source=_read_source(body, AlignToX.TAG),
            to=_read_target(_require_key(body, "to", AlignToX.TAG)),
            gap=body.get("gap"),
        )


@dataclass(frozen=True)
class AlignToY:
    """Like MoveTo, restricted to the Y axis."""

    TAG: ClassVar[str] = "alignToY"

    source: BoxRef
    to: float | BoxRef
    gap: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return _params_dict({"from": self.source, "to": self.to, "gap": self.gap})

    @staticmethod
    def from_dict(d: Any) -> "AlignToY":
        body = _require_mapping(d, AlignToY.TAG)
        return AlignToY(
            source=_read_source(body, AlignToY.TAG),
            to=_read_target(_require_key(body, "to", AlignToY.TAG)),
            gap=body.get("gap"),
        )


@dataclass(frozen=True)
class AlignAllToX:
    """AlignToX applied to every box in the map."""

    TAG: ClassVar[str] = "alignAllToX"

    to: float | BoxRef
    anchor: Anchor | str

    def to_dict(self) -> dict[str, Any]:
        return _params_dict({"to": self.to, "anchor": self.anchor})

    @staticmethod
    def from_dict(d: Any) -> "AlignAllToX":
        body = _require_mapping(d, AlignAllToX.TAG)
        return AlignAllToX(
            to=_read_target(_require_key(body, "to", AlignAllToX.TAG)),
            anchor=_require_key(body, "anchor", AlignAllToX.TAG),
        )


@dataclass(frozen=True)
class AlignAllToY:
    """AlignToY applied to every box in the map."""

    TAG: ClassVar[str] = "alignAllToY"

    to: float | BoxRef
    anchor: Anchor | str

    def to_dict(self) -> dict[str, Any]:
        return _params_dict({"to": self.to, "anchor": self.anchor})

    @staticmethod
    def from_dict(d: Any) -> "AlignAllToY":
        body = _require_mapping(d, AlignAllToY.TAG)
        return AlignAllToY(
            to=_read_target(_require_key(body, "to", AlignAllToY.TAG)),
            anchor=_require_key(body, "anchor", AlignAllToY.TAG),
        )


@dataclass(frozen=True)
class StackHorizontally:
    """Lay boxes left to right in map order, starting at x = 0."""

    TAG: ClassVar[str] = "stackHorizontally"

    gap: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return _params_dict({"gap": self.gap})

    @staticmethod
    def from_dict(d: Any) -> "StackHorizontally":
        body = _require_mapping(d or {}, StackHorizontally.TAG)
        return StackHorizontally(gap=body.get("gap"))


@dataclass(frozen=True)
class StackVertically:
    """Lay boxes bottom to top in map order, starting at y = 0."""

    TAG: ClassVar[str] = "stackVertically"

    gap: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return _params_dict({"gap": self.gap})

    @staticmethod
    def from_dict(d: Any) -> "StackVertically":
        body = _require_mapping(d or {}, StackVertically.TAG)
        return StackVertically(gap=body.get("gap"))


Transformation = (
    MoveTo
    | MoveBy
    | AlignToX
    | AlignToY
    | AlignAllToX
    | AlignAllToY
    | StackHorizontally
    | StackVertically
)

TRANSFORMATION_VARIANTS: dict[str, type] = {
    cls.TAG: cls
    for cls in (
        MoveTo,
        MoveBy,
        AlignToX,
        AlignToY,
        AlignAllToX,
        AlignAllToY,
        StackHorizontally,
        StackVertically,
    )
}

TRANSFORMATION_IDS: tuple[str, ...] = tuple(TRANSFORMATION_VARIANTS)


# =============================================================================
# Wire-form helpers
# =============================================================================


def _wire(value: Any) -> Any:
    if isinstance(value, (Coordinate, BoxRef)):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    return value


def _params_dict(fields: dict[str, Any]) -> dict[str, Any]:
    return {k: _wire(v) for k, v in fields.items() if v is not None}


def _require_mapping(d: Any, tag: str) -> Mapping[str, Any]:
    if not isinstance(d, Mapping):
        raise TransformationParamsError(f"{tag} parameters must be a mapping, got {type(d).__name__}")
    return d


def _require_key(body: Mapping[str, Any], key: str, tag: str) -> Any:
    if key not in body:
        raise TransformationParamsError(f"{tag} parameters are missing '{key}'")
    return body[key]


def _read_source(body: Mapping[str, Any], tag: str) -> BoxRef:
    raw = _require_key(body, "from", tag)
    if not isinstance(raw, Mapping) or "boxId" not in raw:
        raise TransformationParamsError(f"{tag} 'from' must be a mapping with a boxId")
    return BoxRef(str(raw["boxId"]), raw.get("anchor"))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_point(value: Any) -> bool:
    return isinstance(value, Coordinate) and _is_number(value.x) and _is_number(value.y)


def _read_target(raw: Any) -> Any:
    """
    Convert wire shapes to Coordinate/BoxRef.

    Only numeric {x, y} pairs and {boxId, anchor} pairs are converted; anything
    else passes through for the verb to reject as invalid parameters.
    """
    if isinstance(raw, Mapping):
        if "x" in raw and "y" in raw and _is_number(raw["x"]) and _is_number(raw["y"]):
            return Coordinate(raw["x"], raw["y"])
        if "boxId" in raw and "anchor" in raw:
            return BoxRef(str(raw["boxId"]), raw["anchor"])
    return raw


# =============================================================================
# Verbs
# =============================================================================

VerbResult = GridBox | dict[str, GridBox] | None
BoxVerb = Callable[[Any, BoxMap, Diagnostics], VerbResult]


def _invalid_params(diagnostics: Diagnostics, origin: str, what: str) -> None:
    diagnostics.append(
        make_error(
            origin,
            GridErrorCode.INVALID_TRANSFORMATION_PARAMS,
            f"{origin} transformation has invalid '{what}' parameter",
        )
    )


def _validate_box_from(box_id: str, boxes: BoxMap, diagnostics: Diagnostics, origin: str) -> GridBox | None:
    box = boxes.get(box_id)
    if box is None:
        diagnostics.append(
            make_error(
                origin,
                GridErrorCode.UNKNOWN_NODE_ID,
                f"{origin} transformation has invalid 'from' boxId: {box_id}",
                element_id=box_id,
            )
        )
    return box


def _resolve_target(to: Any, boxes: BoxMap, diagnostics: Diagnostics, origin: str) -> Coordinate | None:
    """Resolve a 'to'/'by' value against the current state of the map."""
    match to:
        case bool():
            pass
        case int() | float():
            return Coordinate(to, to)
        case Coordinate() if _is_point(to):
            return to
        case BoxRef(box_id=box_id, anchor=anchor):
            box_to = boxes.get(box_id)
            if box_to is None:
                diagnostics.append(
                    make_error(
                        origin,
                        GridErrorCode.UNKNOWN_NODE_ID,
                        f"{origin} transformation has invalid 'to' boxId: {box_id}",
                        element_id=box_id,
                    )
                )
                return None
            point = box_position(box_to, anchor)
            if point is None:
                diagnostics.append(
                    make_error(
                        origin,
                        GridErrorCode.UNKNOWN_ANCHOR,
                        f"{origin} transformation has invalid 'to' anchor: {_wire(anchor)}",
                        element_id=box_id,
                    )
                )
            return point
    _invalid_params(diagnostics, origin, "to")
    return None


def _source_anchor(box: GridBox, source: BoxRef, diagnostics: Diagnostics, origin: str) -> Coordinate | None:
    point = box_position(box, source.anchor)
    if point is None:
        diagnostics.append(
            make_error(
                origin,
                GridErrorCode.UNKNOWN_ANCHOR,
                f"{origin} transformation has invalid 'from' anchor: {_wire(source.anchor)}",
                element_id=source.box_id,
            )
        )
    return point


def _replace(boxes: BoxMap, box_id: str, box: GridBox, displacement: Coordinate) -> GridBox:
    new_box = make_grid_box(add_coordinates(box.origin, displacement), box.diagonal)
    boxes[box_id] = new_box
    return new_box


def move_to(params: MoveTo, boxes: BoxMap, diagnostics: Diagnostics) -> GridBox | None:
    origin = MoveTo.TAG
    box_from = _validate_box_from(params.source.box_id, boxes, diagnostics, origin)
    if box_from is None:
        return None
    to_point = _resolve_target(params.to, boxes, diagnostics, origin)
    if to_point is None:
        return None
    from_anchor = _source_anchor(box_from, params.source, diagnostics, origin)
    if from_anchor is None:
        return None
    if params.gap is not None:
        if not _is_point(params.gap):
            _invalid_params(diagnostics, origin, "gap")
            return None
        to_point = add_coordinates(to_point, params.gap)

    displacement = subtract_coordinates(to_point, from_anchor)
    return _replace(boxes, params.source.box_id, box_from, displacement)


def move_by(params: MoveBy, boxes: BoxMap, diagnostics: Diagnostics) -> GridBox | None:
    origin = MoveBy.TAG
    box_from = _validate_box_from(params.source.box_id, boxes, diagnostics, origin)
    if box_from is None:
        return None

    by = params.by
    if _is_number(by):
        delta = Coordinate(by, by)
    elif _is_point(by):
        delta = by
    else:
        _invalid_params(diagnostics, origin, "by")
        return None
    if params.gap is not None:
        if not _is_point(params.gap):
            _invalid_params(diagnostics, origin, "gap")
            return None
        delta = add_coordinates(delta, params.gap)

    return _replace(boxes, params.source.box_id, box_from, delta)


def _align_to(
    axis: str,
    origin: str,
    source: BoxRef,
    to: Any,
    gap: Any,
    boxes: BoxMap,
    diagnostics: Diagnostics,
) -> GridBox | None:
    """Shared body of alignToX/alignToY; axis is "x" or "y"."""
    box_from = _validate_box_from(source.box_id, boxes, diagnostics, origin)
    if box_from is None:
        return None
    to_point = _resolve_target(to, boxes, diagnostics, origin)
    if to_point is None:
        return None
    from_anchor = _source_anchor(box_from, source, diagnostics, origin)
    if from_anchor is None:
        return None
    if gap is not None and not _is_number(gap):
        _invalid_params(diagnostics, origin, "gap")
        return None

    gap = gap or 0
    # only the aligned axis may change
    if axis == "x":
        displacement = Coordinate(to_point.x - from_anchor.x + gap, 0)
    else:
        displacement = Coordinate(0, to_point.y - from_anchor.y + gap)
    return _replace(boxes, source.box_id, box_from, displacement)


def align_to_x(params: AlignToX, boxes: BoxMap, diagnostics: Diagnostics) -> GridBox | None:
    return _align_to("x", AlignToX.TAG, params.source, params.to, params.gap, boxes, diagnostics)


def align_to_y(params: AlignToY, boxes: BoxMap, diagnostics: Diagnostics) -> GridBox | None:
    return _align_to("y", AlignToY.TAG, params.source, params.to, params.gap, boxes, diagnostics)


def _no_boxes_processed(diagnostics: Diagnostics, origin: str) -> None:
    diagnostics.append(
        make_error(
            origin,
            GridErrorCode.NO_BOXES_PROCESSED,
            f"{origin} transformation could not process any box",
        )
    )


def _align_all(
    axis: str,
    origin: str,
    params: AlignAllToX | AlignAllToY,
    boxes: BoxMap,
    diagnostics: Diagnostics,
) -> dict[str, GridBox] | None:
    single = AlignToX.TAG if axis == "x" else AlignToY.TAG
    moved: dict[str, GridBox] = {}
    for box_id in list(boxes):
        new_box = _align_to(axis, single, BoxRef(box_id, params.anchor), params.to, None, boxes, diagnostics)
        if new_box is not None:
            moved[box_id] = new_box

    if not moved:
        _no_boxes_processed(diagnostics, origin)
        return None
    return moved


def align_all_to_x(params: AlignAllToX, boxes: BoxMap, diagnostics: Diagnostics) -> dict[str, GridBox] | None:
    return _align_all("x", AlignAllToX.TAG, params, boxes, diagnostics)


def align_all_to_y(params: AlignAllToY, boxes: BoxMap, diagnostics: Diagnostics) -> dict[str, GridBox] | None:
    return _align_all("y", AlignAllToY.TAG, params, boxes, diagnostics)


def _stack(
    axis: str,
    origin: str,
    gap: Any,
    boxes: BoxMap,
    diagnostics: Diagnostics,
) -> dict[str, GridBox] | None:
    """
    Place boxes one after another along an axis in map insertion order.

    For extents w_0..w_{n-1} the leading edges become
    x_0 = 0, x_{k+1} = x_k + w_k + gap.
    """
    if gap is not None and not _is_number(gap):
        _invalid_params(diagnostics, origin, "gap")
        return None

    single = AlignToX.TAG if axis == "x" else AlignToY.TAG
    cursor: float = 0
    moved: dict[str, GridBox] = {}
    for box_id in list(boxes):
        new_box = _align_to(axis, single, BoxRef(box_id, Anchor.BOTTOM_LEFT), cursor, None, boxes, diagnostics)
        if new_box is None:
            continue
        moved[box_id] = new_box
        extent = new_box.diagonal.x if axis == "x" else new_box.diagonal.y
        cursor += extent + (gap or 0)

    if not moved:
        _no_boxes_processed(diagnostics, origin)
        return None
    return moved


def stack_horizontally(
    params: StackHorizontally, boxes: BoxMap, diagnostics: Diagnostics
) -> dict[str, GridBox] | None:
    return _stack("x", StackHorizontally.TAG, params.gap, boxes, diagnostics)


def stack_vertically(
    params: StackVertically, boxes: BoxMap, diagnostics: Diagnostics
) -> dict[str, GridBox] | None:
    return _stack("y", StackVertically.TAG, params.gap, boxes, diagnostics)


def default_box_transformations() -> dict[str, BoxVerb]:
    """Registry of the eight built-in verbs, keyed by wire tag."""
    return {
        MoveTo.TAG: move_to,
        MoveBy.TAG: move_by,
        AlignToY.TAG: align_to_y,
        AlignToX.TAG: align_to_x,
        AlignAllToX.TAG: align_all_to_x,
        AlignAllToY.TAG: align_all_to_y,
        StackHorizontally.TAG: stack_horizontally,
        StackVertically.TAG: stack_vertically,
    }


# =============================================================================
# Interpreter
# =============================================================================

INTERPRETER_ORIGIN = "transformBoxMove"


def transformations_at(transformations: BoxTransformations | None, bp: Breakpoint) -> Sequence[Any]:
    """Entries for one breakpoint; keys may be Breakpoint members or their string values."""
    if not transformations:
        return ()
    entries = transformations.get(bp)
    if entries is None:
        entries = transformations.get(bp.value)
    return entries or ()


def _read_entry(entry: Any) -> tuple[str | None, Any]:
    """Split an entry into (tag, raw parameters)."""
    if isinstance(entry, tuple(TRANSFORMATION_VARIANTS.values())):
        return entry.TAG, entry
    if isinstance(entry, Mapping):
        keys = list(entry)
        if not keys:
            return None, None
        return str(keys[0]), entry[keys[0]]
    return None, entry


def apply_transformation(
    entry: Any,
    boxes: BoxMap,
    diagnostics: Diagnostics,
    registry: Mapping[str, BoxVerb] | None = None,
) -> VerbResult:
    """
    Run a single entry against a box map.

    Never raises on bad input: unknown tags record UNKNOWN_TRANSFORMATION,
    failed verbs record CONSTRAINT_VIOLATION with the serialized parameters.
    """
    if registry is None:
        registry = default_box_transformations()

    tag, params = _read_entry(entry)
    if tag is None or tag not in registry:
        diagnostics.append(
            make_error(
                INTERPRETER_ORIGIN,
                GridErrorCode.UNKNOWN_TRANSFORMATION,
                f"Unknown transformation key: {tag if tag is not None else type(entry).__name__}",
            )
        )
        return None

    variant = TRANSFORMATION_VARIANTS.get(tag)
    if variant is not None and not isinstance(params, variant):
        try:
            params = variant.from_dict(params)
        except TransformationParamsError as exc:
            diagnostics.append(make_error(tag, GridErrorCode.INVALID_TRANSFORMATION_PARAMS, str(exc)))
            _constraint_violation(diagnostics, tag, params)
            return None

    result = registry[tag](params, boxes, diagnostics)
    if result is None:
        _constraint_violation(diagnostics, tag, params)
    return result


def _constraint_violation(diagnostics: Diagnostics, tag: str, params: Any) -> None:
    wire = params.to_dict() if hasattr(params, "to_dict") else params
    diagnostics.append(
        make_error(
            INTERPRETER_ORIGIN,
            GridErrorCode.CONSTRAINT_VIOLATION,
            f"{tag} transformation failed for box {json.dumps(wire, default=str)}",
            details={"transformation": tag, "params": wire},
        )
    )


def transform_box_move(
    transformations: BoxTransformations | None,
    grid_boxes: dict[Breakpoint, BoxMap],
    diagnostics: Diagnostics,
    registry: Mapping[str, BoxVerb] | None = None,
) -> None:
    """
    Apply per-breakpoint transformation lists to per-breakpoint box maps, in place.

    Breakpoints run in the fixed order xs, sm, md, lg, xl and never share
    state. Within a breakpoint, entries run strictly in list order. Every
    entry and every breakpoint is processed regardless of failures.

    Args:
        transformations: Breakpoint -> ordered entries (missing breakpoints are skipped)
        grid_boxes: Breakpoint -> mutable id -> GridBox map, updated in place
        diagnostics: Sink for any problems encountered
        registry: Tag -> verb; defaults to default_box_transformations()
    """
    if registry is None:
        registry = default_box_transformations()

    for bp in BREAKPOINTS:
        entries = transformations_at(transformations, bp)
        if not entries:
            continue
        boxes = grid_boxes.setdefault(bp, {})
        logger.debug("transform_box_move: bp=%s entries=%d boxes=%d", bp.value, len(entries), len(boxes))
        for entry in entries:
            apply_transformation(entry, boxes, diagnostics, registry)
