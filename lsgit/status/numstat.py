"""Added/deleted line counts and executable-bit changes for one file."""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from pathlib import Path

from ..git import git_output

logger = logging.getLogger(__name__)

EXECUTABLE_BITS = 0o111

_NUMSTAT_RE = re.compile(r"^(\d+|-)\t(\d+|-)\t")
_MODE_CHANGE_RE = re.compile(r"^\s*mode change ([0-7]+) => ([0-7]+)\b")


class Scope(enum.Enum):
    """Which pair of snapshots a diff compares."""

    INDEX = "index"
    WORKTREE = "worktree"

    @property
    def diff_args(self) -> list[str]:
        return ["--cached"] if self is Scope.INDEX else []


class ModeChange(enum.Enum):
    EXECUTABLE_ADDED = "+x"
    EXECUTABLE_REMOVED = "-x"


@dataclass(frozen=True)
class LineDelta:
    added: int = 0
    deleted: int = 0
    mode_changes: frozenset[ModeChange] = frozenset()

    @property
    def total(self) -> int:
        return self.added + self.deleted

    def __bool__(self) -> bool:
        return self.total > 0 or bool(self.mode_changes)


NO_DELTA = LineDelta()


def parse_numstat_line(line: str) -> tuple[int, int] | None:
    """Parse the leading ``added<TAB>deleted`` pair; binary rows count as zero."""
    match = _NUMSTAT_RE.match(line)
    if not match:
        return None
    added, deleted = match.groups()
    return (0 if added == "-" else int(added), 0 if deleted == "-" else int(deleted))


def parse_mode_change(line: str) -> ModeChange | None:
    """Report an executable-bit flip from a ``mode change OLD => NEW`` summary line."""
    match = _MODE_CHANGE_RE.match(line)
    if not match:
        return None
    old_mode = int(match.group(1), 8)
    new_mode = int(match.group(2), 8)
    if not (old_mode ^ new_mode) & EXECUTABLE_BITS:
        return None
    if new_mode & EXECUTABLE_BITS:
        return ModeChange.EXECUTABLE_ADDED
    return ModeChange.EXECUTABLE_REMOVED


def parse_diff_summary(output: str) -> LineDelta:
    """Combine ``diff --numstat --summary`` output into one ``LineDelta``."""
    added = deleted = 0
    changes: set[ModeChange] = set()
    for line in output.splitlines():
        if not line.strip():
            continue
        counts = parse_numstat_line(line)
        if counts is not None:
            added += counts[0]
            deleted += counts[1]
            continue
        change = parse_mode_change(line)
        if change is not None:
            changes.add(change)
            continue
        if not line.startswith(" "):
            logger.warning("unexpected diff summary line %r", line)
    return LineDelta(added=added, deleted=deleted, mode_changes=frozenset(changes))


def summarize(directory: Path, name: str, scope: Scope) -> LineDelta:
    """Return the line delta for ``name`` in ``directory`` under ``scope``.

    No diff at all (a pure rename, a failed query) is the empty delta.
    """
    output = git_output(directory, ["diff", *scope.diff_args, "--no-color", "--numstat", "--summary", "--", name])
    if not output:
        return NO_DELTA
    return parse_diff_summary(output)
