"""
Tests for the default layout theme and the option bags it carries.
"""

import pytest

from box_transformations import StackHorizontally, StackVertically
from grid_options import (
    DEFAULT_GRID_NODE_VIEW_OPTIONS,
    DEFAULT_GRID_OPTIONS,
    CssLength,
    Fr,
    resolve_grid_node_view_options,
    resolve_grid_options,
)
from grid_types import BREAKPOINTS, Breakpoint, BoxSpan, Coordinate
from layout_theme import DefaultLayoutTheme, LayoutTheme, get_default_theme


class TestDefaultTheme:
    """Tests for span resolution and default transformation lists."""

    @pytest.mark.parametrize("bp", [bp for bp in BREAKPOINTS if bp is not Breakpoint.XS])
    def test_span_is_extent(self, bp: Breakpoint) -> None:
        """Above xs, the span maps directly to the box extent."""
        box = get_default_theme().resolve_box_span("main", "block_1", {}, BoxSpan(3, 2), bp)
        assert box.origin == Coordinate(0, 0)
        assert box.diagonal == Coordinate(3, 2)

    def test_xs_forces_single_column(self) -> None:
        """On xs every block is one column wide."""
        box = get_default_theme().resolve_box_span("main", "block_1", {}, BoxSpan(3, 2), Breakpoint.XS)
        assert box.diagonal == Coordinate(1, 2)

    def test_section_transforms(self) -> None:
        """Blocks stack vertically on xs and horizontally above."""
        transforms = get_default_theme().section_box_transforms("main", {})
        assert transforms[Breakpoint.XS] == [StackVertically()]
        for bp in BREAKPOINTS[1:]:
            assert transforms[bp] == [StackHorizontally()]

    def test_layout_transforms(self) -> None:
        """Sections always stack vertically."""
        transforms = get_default_theme().layout_transforms({})
        assert all(transforms[bp] == [StackVertically()] for bp in BREAKPOINTS)

    def test_lists_are_fresh(self) -> None:
        """Callers may extend the returned lists without affecting later calls."""
        theme = get_default_theme()
        theme.layout_transforms({})[Breakpoint.XS].append(StackHorizontally())
        assert theme.layout_transforms({})[Breakpoint.XS] == [StackVertically()]

    def test_satisfies_protocol(self) -> None:
        """The default theme can be used wherever a LayoutTheme is expected."""
        theme: LayoutTheme = DefaultLayoutTheme()
        assert theme.grid_options is DEFAULT_GRID_OPTIONS
        assert theme.grid_node_options is DEFAULT_GRID_NODE_VIEW_OPTIONS


class TestOptions:
    """Tests for option defaults and resolvers."""

    def test_grid_option_defaults(self) -> None:
        """Implicit tracks are 1fr and gaps are zero."""
        assert DEFAULT_GRID_OPTIONS.implicit_row_units == Fr(1)
        assert DEFAULT_GRID_OPTIONS.gap == CssLength(0)
        assert DEFAULT_GRID_OPTIONS.auto_flow == "row"

    def test_resolve_grid_options(self) -> None:
        """Overrides replace single fields."""
        options = resolve_grid_options({"gap": CssLength(1, "rem"), "overflow": "hidden"})
        assert options.gap == CssLength(1, "rem")
        assert options.overflow == "hidden"
        assert options.align_items == "stretch"

    def test_resolve_grid_options_unknown_key(self) -> None:
        """Unknown option names raise ValueError."""
        with pytest.raises(ValueError, match="colour"):
            resolve_grid_options({"colour": "red"})

    def test_node_view_options_merge_nested(self) -> None:
        """data_attrs and aria are merged key by key."""
        options = resolve_grid_node_view_options({"aria": {"role": "banner"}, "z_index": 2})
        assert options.aria == {"role": "banner"}
        assert options.z_index == 2
        assert options.min_width0 is True

    def test_node_view_defaults_not_shared(self) -> None:
        """Resolving never mutates the defaults."""
        resolve_grid_node_view_options({"data_attrs": {"testid": "x"}})
        assert DEFAULT_GRID_NODE_VIEW_OPTIONS.data_attrs == {}
