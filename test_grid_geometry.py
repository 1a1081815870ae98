"""
Tests for the geometry kernel and shared value types.
"""

from math import pi

import pytest

from grid_geometry import (
    REFLECTION_ON_X_AXIS,
    UNIT_MATRIX,
    add_coordinates,
    angle_between,
    bounding_box,
    box_position,
    clamp,
    copy_grid_box,
    distance,
    get_origin,
    invert,
    lerp,
    linear_combination,
    make_grid_box,
    multiply,
    normalize,
    reflect_on_x_axis,
    reflect_on_y_axis,
    rotate_by_clockwise,
    subtract_coordinates,
)
from grid_types import (
    BREAKPOINTS,
    Anchor,
    Breakpoint,
    BoxSpan,
    Coordinate,
    CSSCoordinates,
    GridDiagnostic,
    OverlapPolicy,
)


# =============================================================================
# Test Coordinate Algebra
# =============================================================================


class TestAlgebra:
    """Tests for coordinate arithmetic."""

    def test_origin(self) -> None:
        """get_origin is (0, 0)."""
        assert get_origin() == Coordinate(0, 0)

    def test_add_and_subtract(self) -> None:
        """Addition and subtraction are component-wise."""
        a = Coordinate(3, 5)
        b = Coordinate(1, -2)
        assert add_coordinates(a, b) == Coordinate(4, 3)
        assert subtract_coordinates(a, b) == Coordinate(2, 7)

    def test_linear_combination(self) -> None:
        """alpha * a + beta * b."""
        assert linear_combination(2, Coordinate(1, 1), 3, Coordinate(1, 0)) == Coordinate(5, 2)

    def test_invert(self) -> None:
        """Inversion negates both components."""
        assert invert(Coordinate(2, -3)) == Coordinate(-2, 3)

    def test_unit_matrix_is_identity(self) -> None:
        """Multiplying by the unit matrix changes nothing."""
        assert multiply(UNIT_MATRIX, Coordinate(4, 7)) == Coordinate(4, 7)

    def test_reflections(self) -> None:
        """Reflections flip one axis."""
        assert reflect_on_x_axis(Coordinate(2, 3)) == Coordinate(2, -3)
        assert reflect_on_y_axis(Coordinate(2, 3)) == Coordinate(-2, 3)
        assert multiply(REFLECTION_ON_X_AXIS, Coordinate(0, 1)) == Coordinate(0, -1)

    def test_rotation_quarter_turn_clockwise(self) -> None:
        """A clockwise quarter turn maps (0, 1) to (1, 0)."""
        rotated = rotate_by_clockwise(pi / 2, Coordinate(0, 1))
        assert rotated.x == pytest.approx(1)
        assert rotated.y == pytest.approx(0, abs=1e-12)


class TestMetrics:
    """Tests for distances, angles and bounds."""

    def test_distance(self) -> None:
        """3-4-5 triangle."""
        assert distance(Coordinate(0, 0), Coordinate(3, 4)) == pytest.approx(5)

    def test_normalize_zero_vector(self) -> None:
        """The zero vector stays zero."""
        assert normalize(get_origin()) == get_origin()

    def test_normalize_unit_length(self) -> None:
        """Normalized vectors have length 1."""
        n = normalize(Coordinate(3, 4))
        assert n.x == pytest.approx(0.6)
        assert n.y == pytest.approx(0.8)

    @pytest.mark.parametrize(
        "a, b, expected",
        [
            (Coordinate(1, 0), Coordinate(0, 1), pi / 2),
            (Coordinate(1, 0), Coordinate(-1, 0), pi),
            (Coordinate(2, 2), Coordinate(1, 1), 0),
            (Coordinate(0, 0), Coordinate(1, 1), 0),
        ],
    )
    def test_angle_between(self, a: Coordinate, b: Coordinate, expected: float) -> None:
        """Unsigned angle, 0 for a zero vector."""
        assert angle_between(a, b) == pytest.approx(expected, abs=1e-7)

    def test_bounding_box(self) -> None:
        """Bounds of a point set."""
        lo, hi = bounding_box([Coordinate(1, 5), Coordinate(-2, 3), Coordinate(4, 0)])
        assert lo == Coordinate(-2, 0)
        assert hi == Coordinate(4, 5)

    def test_bounding_box_empty(self) -> None:
        """No points gives origin bounds."""
        assert bounding_box([]) == (get_origin(), get_origin())

    def test_lerp_and_clamp(self) -> None:
        """Interpolation and clamping are component-wise."""
        assert lerp(Coordinate(0, 0), Coordinate(4, 2), 0.5) == Coordinate(2, 1)
        assert clamp(Coordinate(5, -1), Coordinate(0, 0), Coordinate(3, 3)) == Coordinate(3, 0)


# =============================================================================
# Test GridBox
# =============================================================================


class TestGridBox:
    """Tests for box construction and anchors."""

    @pytest.mark.parametrize("dx, dy", [(2, 3), (-2, 3), (2, -3), (-2, -3)])
    def test_make_grid_box_non_negative_diagonal(self, dx: int, dy: int) -> None:
        """The diagonal is non-negative for any sign of input."""
        box = make_grid_box(Coordinate(1, 1), Coordinate(dx, dy))
        assert box.diagonal == Coordinate(2, 3)
        assert box.origin == Coordinate(1, 1)

    def test_copy_grid_box(self) -> None:
        """Copies compare equal."""
        box = make_grid_box(Coordinate(1, 2), Coordinate(3, 4))
        assert copy_grid_box(box) == box

    @pytest.mark.parametrize(
        "anchor, expected",
        [
            (Anchor.BOTTOM_LEFT, Coordinate(1, 2)),
            (Anchor.BOTTOM_RIGHT, Coordinate(5, 2)),
            (Anchor.TOP_LEFT, Coordinate(1, 8)),
            (Anchor.TOP_RIGHT, Coordinate(5, 8)),
            (Anchor.CENTER, Coordinate(3, 5)),
            ("topRight", Coordinate(5, 8)),
        ],
    )
    def test_box_position(self, anchor: Anchor | str, expected: Coordinate) -> None:
        """Anchor identities on a 4x6 box at (1, 2)."""
        box = make_grid_box(Coordinate(1, 2), Coordinate(4, 6))
        assert box_position(box, anchor) == expected

    def test_box_position_unknown_anchor(self) -> None:
        """An unrecognised anchor resolves to None."""
        box = make_grid_box(Coordinate(0, 0), Coordinate(1, 1))
        assert box_position(box, "middle") is None
        assert box_position(box, None) is None  # type: ignore[arg-type]


# =============================================================================
# Test Value Types and Configuration
# =============================================================================


class TestValueTypes:
    """Tests for spans, CSS coordinates and GridDiagnostic."""

    def test_box_span_from_dict(self) -> None:
        """Wire keys spanX/spanY."""
        span = BoxSpan.from_dict({"spanX": 2, "spanY": 1})
        assert span == BoxSpan(2, 1)
        assert span.to_dict() == {"spanX": 2, "spanY": 1}

    @pytest.mark.parametrize("value", [2.7, True, "2", None])
    def test_box_span_rejects_non_integers(self, value: object) -> None:
        """Fractional, boolean and string spans are not truncated or coerced."""
        with pytest.raises(ValueError, match="spanX must be an integer"):
            BoxSpan.from_dict({"spanX": value, "spanY": 1})

    def test_css_coordinates_shift(self) -> None:
        """Shifting moves both ends of each axis."""
        coords = CSSCoordinates(0, 2, -1, 1)
        coords.shift(1, 2)
        assert coords.to_dict() == {
            "gridColumnStart": 1,
            "gridColumnEnd": 3,
            "gridRowStart": 1,
            "gridRowEnd": 3,
        }

    def test_grid_diagnostic_defaults(self) -> None:
        """Allow policy over every breakpoint."""
        config = GridDiagnostic()
        assert config.overlap_policy is OverlapPolicy.ALLOW
        assert config.breakpoints == BREAKPOINTS

    def test_grid_diagnostic_coerces_strings(self) -> None:
        """String values become enum members, kept in processing order."""
        config = GridDiagnostic(overlap_policy="warn", breakpoints=("lg", "xs"))  # type: ignore[arg-type]
        assert config.overlap_policy is OverlapPolicy.WARN
        assert config.breakpoints == (Breakpoint.XS, Breakpoint.LG)

    def test_grid_diagnostic_from_dict(self) -> None:
        """Wire shape with camelCase keys."""
        config = GridDiagnostic.from_dict({"overlapPolicy": "error", "breakpoints": ["md"]})
        assert config.overlap_policy is OverlapPolicy.ERROR
        assert config.breakpoints == (Breakpoint.MD,)

    def test_grid_diagnostic_rejects_unknown_policy(self) -> None:
        """Unknown policies raise ValueError."""
        with pytest.raises(ValueError, match="Unknown overlap policy"):
            GridDiagnostic(overlap_policy="strict")  # type: ignore[arg-type]

    def test_grid_diagnostic_rejects_unknown_breakpoint(self) -> None:
        """Unknown breakpoints raise ValueError."""
        with pytest.raises(ValueError, match="Unknown breakpoint"):
            GridDiagnostic(breakpoints=("xxl",))  # type: ignore[arg-type]
