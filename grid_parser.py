"""
Layout parsing utilities for gridspan.

Provides two parsing formats:
1. Per-section definitions in a dict
2. Concise multi-line format, one section per line
"""

from __future__ import annotations

import re

from grid_types import BoxSpan

__all__ = ["parse_layout", "parse_layout_concise", "format_layout"]

ParsedLayout = dict[str, dict[str, BoxSpan]]

_SPAN_TOKEN = re.compile(r"^(?P<box_id>[A-Za-z_][\w-]*)=(?P<span_x>\d+)x(?P<span_y>\d+)$")

_VALID_FORMATS = (
    "  Valid formats:\n"
    "    - '<blockId>=<spanX>x<spanY>' with positive integers (e.g., 'block_1=2x1')\n"
    "    - '_' or nothing: section without blocks"
)


def _parse_section(section_id: str, definition: str) -> dict[str, BoxSpan]:
    tokens = definition.split()
    if tokens == ["_"]:
        return {}

    blocks: dict[str, BoxSpan] = {}
    for position, token in enumerate(tokens):
        match = _SPAN_TOKEN.match(token)
        if match is None:
            raise ValueError(
                f"Invalid span token: '{token}'\n"
                f"  Section: '{section_id}'\n"
                f"  Definition: \"{definition}\"\n"
                f"  Position: token {position}\n" + _VALID_FORMATS
            )

        box_id = match["box_id"]
        span = BoxSpan(int(match["span_x"]), int(match["span_y"]))
        if span.span_x <= 0 or span.span_y <= 0:
            raise ValueError(
                f"Span must be positive: '{token}'\n"
                f"  Section: '{section_id}'\n"
                f"  Position: token {position}"
            )
        if box_id in blocks:
            raise ValueError(
                f"Duplicate block '{box_id}' in section '{section_id}'\n"
                f"  Definition: \"{definition}\""
            )
        blocks[box_id] = span

    return blocks


def parse_layout(definitions: dict[str, str]) -> ParsedLayout:
    """
    Parse a layout from per-section span strings.

    Format:
    - Blocks separated by whitespace, in the order they will be stacked
    - Each block is '<blockId>=<spanX>x<spanY>'
    - '_' or an empty string gives a section without blocks

    Example:
        {
            "header": "block_1=2x1",
            "main": "block_1=4x2 block_2=1x1",
        }

    Args:
        definitions: Dict mapping section id to span string

    Returns:
        Layout usable by gridspan.css_layout

    Raises:
        ValueError: On malformed tokens, non-positive spans or duplicate blocks
    """
    return {section_id: _parse_section(section_id, definition) for section_id, definition in definitions.items()}


def parse_layout_concise(definition: str) -> ParsedLayout:
    """
    Parse a layout from a multi-line string.

    Format:
    - One section per line: "name: block_1=2x1 block_2=1x1"
    - Blank lines and lines starting with '#' are ignored
    - Section order follows line order

    Example:
        \"\"\"
        header: block_1=2x1
        main: block_1=4x2
        \"\"\"

    Raises:
        ValueError: On missing colon, empty or duplicate section names, or bad tokens
    """
    layout: ParsedLayout = {}
    lines = [line.strip() for line in definition.strip().split("\n")]

    for line_idx, line in enumerate(lines):
        if not line or line.startswith("#"):
            continue

        if ":" not in line:
            raise ValueError(
                f"Invalid section definition on line {line_idx + 1}: '{line}'\n"
                f"  Expected format: 'name: block_1=2x1 ...'"
            )

        name, section_def = (part.strip() for part in line.split(":", 1))
        if not name:
            raise ValueError(f"Empty section name on line {line_idx + 1}: '{line}'")
        if name in layout:
            raise ValueError(f"Duplicate section '{name}' on line {line_idx + 1}")

        layout[name] = _parse_section(name, section_def)

    return layout


def format_layout(layout: ParsedLayout) -> str:
    """Inverse of parse_layout_concise."""
    lines = []
    for section_id, blocks in layout.items():
        tokens = [f"{box_id}={span.span_x}x{span.span_y}" for box_id, span in blocks.items()]
        lines.append(f"{section_id}: {' '.join(tokens) or '_'}")
    return "\n".join(lines)
