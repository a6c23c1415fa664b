"""Column alignment for annotated listing lines."""

from __future__ import annotations

from .ansi import visible_width

LABEL_GAP = 2


def widest_visible_width(lines: list[str]) -> int:
    """Return the widest rendered line in a batch, ignoring color codes."""
    return max((visible_width(line) for line in lines), default=0)


def place_label(raw_line: str, label_text: str, column_width: int, gap: int = LABEL_GAP) -> str:
    """Append ``label_text`` so it starts at ``column_width + gap``.

    Lines without a label are returned unchanged so untouched entries keep
    exactly what the listing tool printed.
    """
    if not label_text:
        return raw_line
    padding = max(column_width - visible_width(raw_line), 0) + gap
    return f"{raw_line}{' ' * padding}{label_text}"
