"""Tests for ascii_render module."""

from ascii_render import render_all, render_layout, section_colors
from grid_types import BREAKPOINTS, Breakpoint, CSSCoordinates, LayoutAbsolute, SectionCoordinates
from gridspan import css_layout

EXAMPLE_LAYOUT = {
    "header": {"block_1": {"spanX": 2, "spanY": 1}},
    "main": {"block_1": {"spanX": 4, "spanY": 2}},
}


class TestRenderLayout:
    """Tests for single-breakpoint rendering."""

    def test_xs_single_column(self) -> None:
        """Header above main, first cell of each block upper-case."""
        result = css_layout(EXAMPLE_LAYOUT, [])
        text = render_layout(result, Breakpoint.XS, cell_width=1, color=False)
        assert text.split("\n") == [
            "┌─┐",
            "│H│",
            "│M│",
            "│m│",
            "└─┘",
        ]

    def test_sm_empty_cells(self) -> None:
        """Cells no block covers are dots."""
        result = css_layout(EXAMPLE_LAYOUT, [])
        lines = render_layout(result, "sm", cell_width=1, color=False).split("\n")  # type: ignore[arg-type]
        assert lines[1:4] == ["│Hh..│", "│Mmmm│", "│mmmm│"]

    def test_title_in_frame(self) -> None:
        """Wide enough frames carry the breakpoint and grid size."""
        result = css_layout(EXAMPLE_LAYOUT, [])
        top = render_layout(result, Breakpoint.SM, cell_width=3, color=False).split("\n")[0]
        assert " sm 4x3 " in top
        assert len(top) == 4 * 3 + 2

    def test_overlap_marker(self) -> None:
        """Cells covered by two blocks show '#'."""
        layout = LayoutAbsolute()
        layout.grid_dimensions.columns[Breakpoint.XS] = 2
        layout.grid_dimensions.rows[Breakpoint.XS] = 1
        layout.sections["a"] = SectionCoordinates({Breakpoint.XS: {"x": CSSCoordinates(1, 3, 1, 2)}})
        layout.sections["b"] = SectionCoordinates({Breakpoint.XS: {"y": CSSCoordinates(2, 3, 1, 2)}})
        lines = render_layout(layout, Breakpoint.XS, cell_width=1, color=False).split("\n")
        assert lines[1] == "│A#│"

    def test_color_keeps_letters(self) -> None:
        """Coloured output still contains the cell letters."""
        text = render_layout(css_layout(EXAMPLE_LAYOUT, []), Breakpoint.XS, cell_width=1)
        assert "H" in text and "M" in text


class TestRenderAll:
    """Tests for multi-breakpoint rendering."""

    def test_every_breakpoint(self) -> None:
        """One headed frame per breakpoint, separated by blank lines."""
        text = render_all(css_layout(EXAMPLE_LAYOUT, []), color=False)
        assert text.count("┌") == len(BREAKPOINTS)
        assert text.startswith("[xs]\n┌")
        for bp in BREAKPOINTS:
            assert f"[{bp.value}]" in text

    def test_section_colors_cycle(self) -> None:
        """Colours wrap around after the palette is used up."""
        ids = [f"s{i}" for i in range(12)]
        colors = section_colors(ids)
        assert colors["s0"] is colors["s10"]
        assert colors["s0"] is not colors["s1"]
