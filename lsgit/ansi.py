"""ANSI-aware text measurement for listing lines.

Strips escape sequences and measures visible terminal columns.
Annotation alignment depends on these widths matching what the terminal shows.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8


def strip_ansi(text: str) -> str:
    """Remove every CSI escape sequence from ``text``."""
    return ANSI_ESCAPE_RE.sub("", text)


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``.

    Tabs expand to the next 8-column stop, combining marks consume no columns,
    and East Asian wide/fullwidth characters consume two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def visible_width(text: str) -> int:
    """Return the number of terminal columns ``text`` occupies once rendered.

    Escape sequences are skipped and tabs are expanded relative to the
    running column, so a tab after 3 visible characters costs 5 columns.
    """
    col = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                i = match.end()
                continue
        col += char_display_width(text[i], col)
        i += 1
    return col


def colorize(text: str, sgr: str | None, reset: str = "\033[0m") -> str:
    """Wrap ``text`` in an SGR sequence, or return it unchanged when ``sgr`` is empty."""
    if not sgr or not text:
        return text
    return f"{sgr}{text}{reset}"
