"""
Coordinate algebra and GridBox helpers.

Every operation is pure and returns a new value.
"""

from __future__ import annotations

from math import acos, cos, sin, sqrt
from typing import Iterable

from grid_types import Anchor, Coordinate, GridBox

__all__ = [
    "Matrix2x2",
    "UNIT_MATRIX",
    "ZERO_MATRIX",
    "REFLECTION_ON_X_AXIS",
    "REFLECTION_ON_Y_AXIS",
    "get_origin",
    "linear_combination",
    "multiply_scalar",
    "add_coordinates",
    "subtract_coordinates",
    "reflect_on_x_axis",
    "reflect_on_y_axis",
    "rotate_by_clockwise",
    "rotation_by_theta_clockwise",
    "multiply",
    "invert",
    "dot",
    "norm",
    "distance",
    "normalize",
    "angle_between",
    "bounding_box",
    "lerp",
    "clamp",
    "min_coordinate",
    "max_coordinate",
    "copy_coordinate",
    "make_grid_box",
    "copy_grid_box",
    "box_position",
]


# Row-major: ((m00, m01), (m10, m11))
Matrix2x2 = tuple[tuple[float, float], tuple[float, float]]

UNIT_MATRIX: Matrix2x2 = ((1, 0), (0, 1))
ZERO_MATRIX: Matrix2x2 = ((0, 0), (0, 0))
REFLECTION_ON_X_AXIS: Matrix2x2 = ((1, 0), (0, -1))
REFLECTION_ON_Y_AXIS: Matrix2x2 = ((-1, 0), (0, 1))


# =============================================================================
# Algebra
# =============================================================================


def get_origin() -> Coordinate:
    return Coordinate(0, 0)


def linear_combination(alpha: float, a: Coordinate, beta: float, b: Coordinate) -> Coordinate:
    """Return alpha * a + beta * b."""
    return Coordinate(a.x * alpha + b.x * beta, a.y * alpha + b.y * beta)


def multiply_scalar(scalar: float, a: Coordinate) -> Coordinate:
    return linear_combination(scalar, a, 0, get_origin())


def add_coordinates(a: Coordinate, b: Coordinate) -> Coordinate:
    return linear_combination(1, a, 1, b)


def subtract_coordinates(a: Coordinate, b: Coordinate) -> Coordinate:
    return linear_combination(1, a, -1, b)


def invert(coord: Coordinate) -> Coordinate:
    return multiply_scalar(-1, coord)


def multiply(matrix: Matrix2x2, v: Coordinate) -> Coordinate:
    """Apply a 2x2 matrix to a column vector."""
    return Coordinate(
        matrix[0][0] * v.x + matrix[0][1] * v.y,
        matrix[1][0] * v.x + matrix[1][1] * v.y,
    )


def rotation_by_theta_clockwise(theta: float) -> Matrix2x2:
    """Rotation matrix for a clockwise turn of theta radians."""
    c = cos(theta)
    s = sin(theta)
    return ((c, s), (-s, c))


def reflect_on_x_axis(coord: Coordinate) -> Coordinate:
    return multiply(REFLECTION_ON_X_AXIS, coord)


def reflect_on_y_axis(coord: Coordinate) -> Coordinate:
    return multiply(REFLECTION_ON_Y_AXIS, coord)


def rotate_by_clockwise(theta: float, coord: Coordinate) -> Coordinate:
    return multiply(rotation_by_theta_clockwise(theta), coord)


# =============================================================================
# Metrics
# =============================================================================


def dot(a: Coordinate, b: Coordinate) -> float:
    return a.x * b.x + a.y * b.y


def norm(v: Coordinate) -> float:
    return sqrt(dot(v, v))


def distance(a: Coordinate, b: Coordinate) -> float:
    return norm(subtract_coordinates(b, a))


def normalize(v: Coordinate) -> Coordinate:
    """Unit vector in the direction of v; the zero vector stays zero."""
    length = norm(v)
    if length == 0:
        return get_origin()
    return Coordinate(v.x / length, v.y / length)


def angle_between(a: Coordinate, b: Coordinate) -> float:
    """Unsigned angle in radians; 0 when either vector is zero."""
    lengths = norm(a) * norm(b)
    if lengths == 0:
        return 0.0
    cos_theta = max(-1.0, min(1.0, dot(a, b) / lengths))
    return acos(cos_theta)


def bounding_box(points: Iterable[Coordinate]) -> tuple[Coordinate, Coordinate]:
    """
    Minimal axis-aligned bounds of a point set.

    Returns:
        (min, max) corners; both are the origin for an empty input
    """
    pts = list(points)
    if not pts:
        return (get_origin(), get_origin())
    xs = [p.x for p in pts]
    ys = [p.y for p in pts]
    return (Coordinate(min(xs), min(ys)), Coordinate(max(xs), max(ys)))


def lerp(a: Coordinate, b: Coordinate, t: float) -> Coordinate:
    return Coordinate(a.x + (b.x - a.x) * t, a.y + (b.y - a.y) * t)


def clamp(v: Coordinate, lo: Coordinate, hi: Coordinate) -> Coordinate:
    return Coordinate(max(lo.x, min(hi.x, v.x)), max(lo.y, min(hi.y, v.y)))


def min_coordinate(a: Coordinate, b: Coordinate) -> Coordinate:
    return Coordinate(min(a.x, b.x), min(a.y, b.y))


def max_coordinate(a: Coordinate, b: Coordinate) -> Coordinate:
    return Coordinate(max(a.x, b.x), max(a.y, b.y))


def copy_coordinate(coord: Coordinate) -> Coordinate:
    return Coordinate(coord.x, coord.y)


# =============================================================================
# GridBox
# =============================================================================


def make_grid_box(origin: Coordinate, diagonal: Coordinate) -> GridBox:
    """Build a GridBox, taking the absolute value of each diagonal component."""
    return GridBox(copy_coordinate(origin), Coordinate(abs(diagonal.x), abs(diagonal.y)))


def copy_grid_box(box: GridBox) -> GridBox:
    return make_grid_box(box.origin, box.diagonal)


def box_position(box: GridBox, anchor: Anchor | str) -> Coordinate | None:
    """
    Resolve an anchor on a box.

    Args:
        box: The box to measure
        anchor: Anchor member or its string value ("bottomLeft", "center", ...)

    Returns:
        The anchor point, or None if the anchor is not recognised
    """
    try:
        anchor = Anchor(anchor)
    except ValueError:
        return None

    o = box.origin
    d = box.diagonal
    match anchor:
        case Anchor.BOTTOM_LEFT:
            return Coordinate(o.x, o.y)
        case Anchor.BOTTOM_RIGHT:
            return Coordinate(o.x + d.x, o.y)
        case Anchor.TOP_LEFT:
            return Coordinate(o.x, o.y + d.y)
        case Anchor.TOP_RIGHT:
            return Coordinate(o.x + d.x, o.y + d.y)
        case Anchor.CENTER:
            return Coordinate(o.x + d.x / 2, o.y + d.y / 2)
    return None
