"""Listing pipeline and recursion controller.

For each directory the engine runs the listing tool once, parses its lines,
builds one status index, annotates every entry and writes the aligned result.
Subdirectories are listed by calling the same pipeline in-process with an
indented writer, bounded by a ``NestingState``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from .align import place_label, widest_visible_width
from .config import NESTING_DISABLED, NESTING_UNLIMITED
from .git import has_git_marker
from .labels import Label, compose_directory_label, compose_file_label, compose_repository_label, needs_delta, render_label
from .listing.options import ListingInvocation
from .listing.parser import ParsedEntry, ParsedLine, SectionHeader, parse_line
from .listing.runner import run_listing
from .palette import Palette
from .status.index import StatusIndex, build_status_index
from .status.numstat import NO_DELTA, Scope, summarize
from .status.repository import describe

logger = logging.getLogger(__name__)

INDENT = "    "
SKIPPED_DIRECTORIES = frozenset({".", "..", ".git"})


@dataclass(frozen=True)
class NestingState:
    """How many more directory levels the engine may descend.

    ``depth`` is ``None`` for unlimited nesting and ``0`` once disabled.
    """

    depth: int | None = 0

    @classmethod
    def from_setting(cls, nesting: int) -> "NestingState":
        if nesting <= NESTING_UNLIMITED:
            return UNLIMITED
        if nesting == NESTING_DISABLED:
            return DISABLED
        return cls(depth=nesting)

    @property
    def recurses(self) -> bool:
        return self.depth is None or self.depth > 0

    def child(self) -> "NestingState":
        """State handed to a subdirectory listing.

        The last permitted level is still listed but lists nothing deeper.
        """
        if self.depth is None:
            return self
        if self.depth > 1:
            return NestingState(depth=self.depth - 1)
        return DISABLED


UNLIMITED = NestingState(depth=None)
DISABLED = NestingState(depth=0)


class Writer(Protocol):
    def write(self, text: str) -> object: ...


class IndentedWriter:
    """Prefix every output line written through it with ``margin``."""

    def __init__(self, inner: Writer, margin: str = INDENT) -> None:
        self.inner = inner
        self.margin = margin
        self._at_line_start = True

    def write(self, text: str) -> int:
        for piece in text.splitlines(keepends=True):
            if self._at_line_start:
                self.inner.write(self.margin)
            self.inner.write(piece)
            self._at_line_start = piece.endswith("\n")
        return len(text)


@dataclass(frozen=True)
class EngineOptions:
    """Everything the pipeline needs that stays fixed for a whole run."""

    command: tuple[str, ...]
    invocation: ListingInvocation
    palette: Palette | None = None
    per_file_status: bool = False


@dataclass
class Section:
    """Lines printed for one directory, with the header that introduced it."""

    directory: Path
    header: SectionHeader | None = None
    lines: list[ParsedLine] = field(default_factory=list)


def split_sections(parsed_lines: list[ParsedLine], initial_directory: Path) -> list[Section]:
    sections = [Section(directory=initial_directory)]
    for parsed in parsed_lines:
        if isinstance(parsed, SectionHeader):
            sections.append(Section(directory=Path(parsed.path), header=parsed))
            continue
        sections[-1].lines.append(parsed)
    if not sections[0].lines and len(sections) > 1:
        sections.pop(0)
    return sections


def initial_directory(targets: tuple[str, ...], directory_as_file: bool) -> Path:
    """Directory that unheaded entries are relative to.

    A single directory target is listed as its contents; in every other
    case the listing tool echoes each entry's path relative to the cwd.
    """
    if len(targets) == 1 and not directory_as_file:
        target = Path(targets[0])
        if target.is_dir():
            return target
    return Path(".")


def entry_directory(section_directory: Path, entry: ParsedEntry) -> Path:
    if not entry.prefix:
        return section_directory
    prefix = Path(entry.prefix)
    return prefix if prefix.is_absolute() else section_directory / prefix


def is_plain_directory(path: Path) -> bool:
    return path.is_dir() and not path.is_symlink()


class ListingEngine:
    def __init__(self, options: EngineOptions, out: Writer, nesting: NestingState = DISABLED) -> None:
        self.options = options
        self.out = out
        mode = options.invocation.mode
        # Directory-as-file and internal recursion leave nothing for us to descend into.
        self.nesting = DISABLED if mode.directory_as_file or mode.recursive else nesting

    def run(self) -> int:
        """List the invocation's own targets and return the exit status."""
        invocation = self.options.invocation
        start = initial_directory(invocation.targets, invocation.mode.directory_as_file)
        return self._list(invocation.targets, start, invocation.expects_headers)

    def list_directory(self, directory: Path) -> int:
        """List one directory's contents through the full pipeline."""
        return self._list((str(directory),), directory, False)

    def _list(self, targets: tuple[str, ...], start: Path, expect_headers: bool) -> int:
        invocation = self.options.invocation
        result = run_listing(list(self.options.command), invocation.switches, targets)
        parsed = [parse_line(line, invocation.mode, expect_headers) for line in result.lines]
        status = result.returncode
        for section in split_sections(parsed, start):
            status = max(status, self._emit_section(section))
        return status

    def _emit_section(self, section: Section) -> int:
        if section.header is not None:
            self.out.write(section.header.raw_line + "\n")
        width = widest_visible_width([parsed_line.raw_line for parsed_line in section.lines])
        indexes: dict[Path, StatusIndex] = {}
        status = 0
        for parsed in section.lines:
            if not isinstance(parsed, ParsedEntry) or not parsed.annotatable:
                self.out.write(parsed.raw_line + "\n")
                continue
            directory = entry_directory(section.directory, parsed)
            if directory not in indexes:
                indexes[directory] = build_status_index(directory, self.options.per_file_status)
            label = self.annotate(directory, parsed, indexes[directory])
            self.out.write(place_label(parsed.raw_line, render_label(label, self.options.palette), width) + "\n")
            status = max(status, self._maybe_recurse(directory / parsed.name, parsed))
        return status

    def annotate(self, directory: Path, entry: ParsedEntry, index: StatusIndex) -> Label:
        """Compose the label for one entry; failures of any git query just drop that datum."""
        path = directory / entry.name
        code = index.lookup(entry.name)
        if is_plain_directory(path):
            if has_git_marker(path):
                return compose_repository_label(describe(path, code))
            return compose_directory_label(code)
        want_index, want_worktree = needs_delta(code)
        index_delta = summarize(directory, entry.name, Scope.INDEX) if want_index else NO_DELTA
        worktree_delta = summarize(directory, entry.name, Scope.WORKTREE) if want_worktree else NO_DELTA
        return compose_file_label(code, index_delta, worktree_delta)

    def _maybe_recurse(self, path: Path, entry: ParsedEntry) -> int:
        if not self.nesting.recurses or entry.name in SKIPPED_DIRECTORIES:
            return 0
        if entry.is_symlink or not is_plain_directory(path):
            return 0
        logger.debug("descending into %s", path)
        child = ListingEngine(self.options, IndentedWriter(self.out), self.nesting.child())
        return child.list_directory(path)
