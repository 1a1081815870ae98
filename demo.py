"""
Console demo for gridspan: run a sample layout through the pipeline and
show each breakpoint, the diagnostics and optionally the CSS.
"""

from __future__ import annotations

import argparse
import logging

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ascii_render import render_layout
from box_transformations import StackVertically
from css_export import stylesheet
from grid_diagnostics import Diagnostics, Severity
from grid_parser import parse_layout_concise
from grid_types import BREAKPOINTS, Breakpoint, BoxTransformations, GridDiagnostic, Layout
from gridspan import css_layout
from layout_theme import DefaultLayoutTheme

LAYOUTS: dict[str, str] = {
    "basic": """
        header: block_1=2x1
        main: block_1=4x2
    """,
    "dashboard": """
        header: logo=1x1 nav=3x1
        sidebar: menu=1x3
        main: chart=3x2 table=3x1 stats=1x1
        footer: block_1=4x1
    """,
    "empty": """
        header: _
    """,
}


class OverlayTheme(DefaultLayoutTheme):
    """Default theme, except the sidebar is dropped on top of main from sm up."""

    def layout_transforms(self, layout: Layout) -> BoxTransformations:
        transforms = super().layout_transforms(layout)
        if "sidebar" not in layout or "main" not in layout:
            return transforms
        overlay = {
            "moveTo": {
                "from": {"boxId": "sidebar", "anchor": "bottomLeft"},
                "to": {"boxId": "main", "anchor": "bottomLeft"},
            }
        }
        for bp in BREAKPOINTS[1:]:
            transforms[bp] = [StackVertically(), overlay]
        return transforms


THEMES = {
    "default": DefaultLayoutTheme,
    "overlay": OverlayTheme,
}

SEVERITY_STYLES = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
    Severity.INFO: "dim",
}


def diagnostics_table(diagnostics: Diagnostics) -> Table:
    table = Table(title="Diagnostics", show_lines=False)
    table.add_column("Severity")
    table.add_column("Origin")
    table.add_column("Code", no_wrap=True)
    table.add_column("Message", overflow="fold")
    for entry in diagnostics:
        style = SEVERITY_STYLES.get(entry.severity, "")
        table.add_row(
            Text(entry.severity.value, style=style),
            entry.origin,
            entry.issue.code.value,
            entry.issue.message,
        )
    return table


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run a sample layout through gridspan.")
    parser.add_argument("layout", nargs="?", default="dashboard", choices=sorted(LAYOUTS))
    parser.add_argument("--theme", default="default", choices=sorted(THEMES))
    parser.add_argument("--overlap", default="warn", choices=["allow", "warn", "error"])
    parser.add_argument("--breakpoint", choices=[bp.value for bp in BREAKPOINTS], help="Show only this breakpoint")
    parser.add_argument("--css", action="store_true", help="Print the generated stylesheet")
    parser.add_argument("--no-color", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log pipeline progress")
    args = parser.parse_args(argv)

    # diagnostics are shown in the table; only surface them as log lines with --verbose
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
    )

    console = Console()
    layout = parse_layout_concise(LAYOUTS[args.layout])
    diagnostics: Diagnostics = []
    result = css_layout(
        layout,
        diagnostics,
        theme=THEMES[args.theme](),
        grid_diagnostic=GridDiagnostic(overlap_policy=args.overlap),
    )

    breakpoints = [Breakpoint(args.breakpoint)] if args.breakpoint else list(BREAKPOINTS)
    for bp in breakpoints:
        grid_text = render_layout(result, bp, color=not args.no_color)
        console.print(Panel(Text.from_ansi(grid_text), title=f"{args.layout} @ {bp.value}", expand=False))

    css = stylesheet(result, diagnostics) if args.css else None

    if diagnostics:
        console.print(diagnostics_table(diagnostics))
    else:
        console.print(Text("No diagnostics", style="green"))

    if css is not None:
        console.print(css, markup=False, highlight=False)


if __name__ == "__main__":
    main()
