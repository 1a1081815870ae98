"""
Tests for CSS value stringification and stylesheet output.
"""

import pytest

from css_export import (
    css_length_to_string,
    grid_container_declarations,
    grid_item_declarations,
    grid_unit_value_to_string,
    layout_item_declarations,
    stylesheet,
    track_breadth_to_string,
)
from grid_diagnostics import Diagnostics, GridErrorCode, codes
from grid_options import (
    Auto,
    CssLength,
    FitContent,
    Fr,
    GridNodeViewOptions,
    MaxContent,
    MinContent,
    MinMax,
    resolve_grid_options,
)
from grid_types import BREAKPOINTS, Breakpoint, CSSCoordinates, LayoutAbsolute, SectionCoordinates
from gridspan import css_layout

EXAMPLE_LAYOUT = {
    "header": {"block_1": {"spanX": 2, "spanY": 1}},
    "main": {"block_1": {"spanX": 4, "spanY": 2}},
}


class TestStringify:
    """Tests for CSS value conversion."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (CssLength(16), "16px"),
            (CssLength(100, "%"), "100%"),
            (CssLength(1.5, "rem"), "1.5rem"),
            (Fr(2), "2fr"),
            (Auto(), "auto"),
            (MinContent(), "min-content"),
            (MaxContent(), "max-content"),
            (FitContent(CssLength(200)), "fit-content(200px)"),
        ],
    )
    def test_track_breadth(self, value: object, expected: str) -> None:
        """Every breadth kind renders to its CSS keyword or length."""
        assert track_breadth_to_string(value) == expected  # type: ignore[arg-type]

    def test_minmax(self) -> None:
        """minmax() wraps two breadths."""
        assert grid_unit_value_to_string(MinMax(CssLength(100), Fr(1))) == "minmax(100px, 1fr)"

    def test_whole_floats_drop_decimal(self) -> None:
        """2.0 renders as 2."""
        assert css_length_to_string(CssLength(2.0, "em")) == "2em"

    def test_unknown_breadth(self) -> None:
        """Anything else is a programming error."""
        with pytest.raises(TypeError):
            track_breadth_to_string("1fr")  # type: ignore[arg-type]


class TestDeclarations:
    """Tests for container and item declarations."""

    def test_container(self) -> None:
        """Track counts come from the grid dimensions."""
        result = css_layout(EXAMPLE_LAYOUT, [])
        decls = grid_container_declarations(result, Breakpoint.SM)
        assert decls["display"] == "grid"
        assert decls["grid-template-columns"] == "repeat(4, minmax(0, 1fr))"
        assert decls["grid-template-rows"] == "repeat(3, minmax(min-content, auto))"
        assert decls["grid-auto-rows"] == "1fr"
        assert decls["gap"] == "0px"

    def test_container_gap_fallback(self) -> None:
        """Unset row/column gaps fall back to gap."""
        options = resolve_grid_options({"gap": CssLength(8), "row_gap": None, "implicit_row_units": None})
        decls = grid_container_declarations(css_layout(EXAMPLE_LAYOUT, []), Breakpoint.XS, options)
        assert decls["row-gap"] == "8px"
        assert decls["column-gap"] == "0px"
        assert decls["grid-auto-rows"] == "auto"

    def test_item(self) -> None:
        """Start / end line pairs."""
        decls = grid_item_declarations(CSSCoordinates(1, 3, 2, 4))
        assert decls == {"grid-column": "1 / 3", "grid-row": "2 / 4"}

    def test_item_view_options(self) -> None:
        """Presentation hints are appended when given."""
        decls = grid_item_declarations(CSSCoordinates(1, 2, 1, 2), GridNodeViewOptions(z_index=3, visibility="hidden"))
        assert decls["z-index"] == "3"
        assert decls["min-width"] == "0"
        assert decls["visibility"] == "hidden"

    def test_layout_items_complete(self) -> None:
        """A pipeline result has coordinates for every block at every breakpoint."""
        diagnostics: Diagnostics = []
        nodes = layout_item_declarations(css_layout(EXAMPLE_LAYOUT, []), diagnostics)
        assert set(nodes) == {("header", "block_1"), ("main", "block_1")}
        assert all(set(per_bp) == set(BREAKPOINTS) for per_bp in nodes.values())
        assert diagnostics == []

    def test_layout_items_repaired(self) -> None:
        """Missing breakpoints are reported and filled with the 1/2 x 1/2 fallback."""
        layout = LayoutAbsolute()
        layout.sections["main"] = SectionCoordinates(
            {bp: {"block_1": CSSCoordinates(2, 3, 2, 3)} for bp in BREAKPOINTS if bp is not Breakpoint.LG}
        )
        diagnostics: Diagnostics = []
        nodes = layout_item_declarations(layout, diagnostics)
        assert codes(diagnostics) == [GridErrorCode.SECTION_SHAPES_MISSING_BP, GridErrorCode.MISSING_COORDINATES]
        assert nodes[("main", "block_1")][Breakpoint.LG] == CSSCoordinates(1, 2, 1, 2)
        assert nodes[("main", "block_1")][Breakpoint.XS] == CSSCoordinates(2, 3, 2, 3)


class TestStylesheet:
    """Tests for the full stylesheet."""

    def test_one_media_block_per_breakpoint(self) -> None:
        """Media queries use the breakpoint lower edges, smallest first."""
        css = stylesheet(css_layout(EXAMPLE_LAYOUT, []), [])
        assert css.count("@media") == len(BREAKPOINTS)
        assert css.index("(min-width: 0px)") < css.index("(min-width: 600px)") < css.index("(min-width: 1536px)")

    def test_selectors(self) -> None:
        """Container and block selectors appear with their declarations."""
        css = stylesheet(
            css_layout(EXAMPLE_LAYOUT, []),
            [],
            container_selector="#page",
            selector_fn=lambda section, box: f"[data-node='{section}/{box}']",
        )
        assert "  #page {" in css
        assert "  [data-node='main/block_1'] {" in css
        assert "    grid-row: 2 / 4;" in css
