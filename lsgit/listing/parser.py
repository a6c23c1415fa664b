"""Parsing of single listing-tool output lines.

Each line becomes a ``ParsedEntry``, a ``SectionHeader`` (``<path>:`` lines
the listing tool prints before each directory in recursive or multi-target
mode), or ``Unrecognized`` text that is echoed untouched.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..ansi import strip_ansi
from .options import ListingMode

TYPE_SUFFIXES = frozenset("/*@=|%")
SYMLINK_ARROW = " -> "
UNANNOTATED_NAMES = frozenset({".", ".."})

_TOTAL_RE = re.compile(r"^total \d+(?:[.,]\d+)?[KMGTPEZY]?$")
_QUOTED_TOKEN_RE = re.compile(r'"((?:[^"\\]|\\.)*)"')
_OCTAL_RE = re.compile(r"[0-7]{1,3}")
_C_ESCAPES = {"n": "\n", "t": "\t", "\\": "\\", '"': '"', "a": "\a", "b": "\b", "f": "\f", "r": "\r", "v": "\v"}


@dataclass(frozen=True)
class ParsedEntry:
    """One listed filesystem object.

    ``name`` is always the final path component. ``prefix`` keeps any
    directory part the listing tool echoed (``""`` when none) so callers can
    locate the entry relative to the listed directory.
    """

    name: str
    raw_line: str
    prefix: str = ""
    type_suffix: str | None = None
    is_symlink: bool = False

    @property
    def annotatable(self) -> bool:
        return self.name not in UNANNOTATED_NAMES


@dataclass(frozen=True)
class SectionHeader:
    path: str
    raw_line: str


@dataclass(frozen=True)
class Unrecognized:
    raw_line: str


ParsedLine = ParsedEntry | SectionHeader | Unrecognized


def _unescape_c(text: str) -> str:
    """Decode C-style escapes; octal escapes are raw bytes of a UTF-8 name."""
    out = bytearray()
    index = 0
    while index < len(text):
        ch = text[index]
        if ch == "\\" and index + 1 < len(text):
            nxt = text[index + 1]
            digits = _OCTAL_RE.match(text, index + 1)
            if digits:
                out.append(int(digits.group(0), 8) & 0xFF)
                index = digits.end()
                continue
            out.extend(_C_ESCAPES.get(nxt, nxt).encode("utf-8"))
            index += 2
            continue
        out.extend(ch.encode("utf-8", errors="surrogateescape"))
        index += 1
    return out.decode("utf-8", errors="replace")


def extract_quoted_name(visible: str) -> tuple[str, bool] | None:
    """Pull the entry name out of a quoted-name mode line.

    When a quoted token is followed by a symlink arrow, that token is the
    name and the arrow target is ignored.
    Returns ``(name, is_symlink)`` or ``None`` if nothing is quoted.
    """
    tokens = list(_QUOTED_TOKEN_RE.finditer(visible))
    if not tokens:
        return None
    for token in tokens:
        if visible[token.end() :].startswith(SYMLINK_ARROW):
            return _unescape_c(token.group(1)), True
    last = tokens[-1]
    name = _unescape_c(last.group(1))
    # Classify mode prints the type marker after the closing quote.
    trailer = visible[last.end() :].strip()
    if len(trailer) == 1 and trailer in TYPE_SUFFIXES:
        name += trailer
    return name, False


def extract_plain_name(visible: str) -> tuple[str, bool] | None:
    """Pull the entry name out of an unquoted line.

    The name is the right-most whitespace-delimited token; with a symlink
    arrow it is the token immediately before the arrow.
    """
    text = visible.rstrip()
    is_symlink = False
    if SYMLINK_ARROW in text:
        text = text.split(SYMLINK_ARROW, 1)[0].rstrip()
        is_symlink = True
    tokens = text.split()
    if not tokens:
        return None
    return tokens[-1], is_symlink


def split_type_suffix(name: str) -> tuple[str, str | None]:
    if len(name) > 1 and name[-1] in TYPE_SUFFIXES:
        return name[:-1], name[-1]
    return name, None


def split_prefix(name: str) -> tuple[str, str]:
    """Split an echoed path into ``(prefix, leaf)``."""
    trimmed = name.rstrip("/") or name
    if "/" not in trimmed:
        return "", trimmed
    prefix, leaf = trimmed.rsplit("/", 1)
    return prefix or "/", leaf


def parse_section_header(visible: str, mode: ListingMode) -> str | None:
    stripped = visible.rstrip()
    if not stripped.endswith(":") or len(stripped) < 2:
        return None
    body = stripped[:-1]
    if mode.quoted:
        match = _QUOTED_TOKEN_RE.fullmatch(body)
        return _unescape_c(match.group(1)) if match else None
    return body


def parse_line(raw_line: str, mode: ListingMode, expect_headers: bool = False) -> ParsedLine:
    """Classify one raw listing line.

    Escape sequences are stripped for parsing only; every returned value
    keeps ``raw_line`` verbatim for display.
    """
    visible = strip_ansi(raw_line).rstrip("\n")
    if not visible.strip():
        return Unrecognized(raw_line)
    if (mode.long_format or mode.block_sizes) and _TOTAL_RE.match(visible.strip()):
        return Unrecognized(raw_line)
    if expect_headers:
        header = parse_section_header(visible, mode)
        if header is not None:
            return SectionHeader(path=header, raw_line=raw_line)

    extracted = extract_quoted_name(visible) if mode.quoted else None
    if extracted is None:
        extracted = extract_plain_name(visible)
    if extracted is None:
        return Unrecognized(raw_line)
    name, is_symlink = extracted

    type_suffix = None
    if mode.classify:
        name, type_suffix = split_type_suffix(name)
    prefix, leaf = split_prefix(name)
    if not leaf:
        return Unrecognized(raw_line)
    return ParsedEntry(
        name=leaf,
        raw_line=raw_line,
        prefix=prefix,
        type_suffix=type_suffix,
        is_symlink=is_symlink or type_suffix == "@",
    )
