"""Per-directory lookup of porcelain status codes.

``BatchIndex`` answers every lookup from one status query for the whole
directory; ``PerFileIndex`` issues one query per name. Both hide behind the
``StatusIndex`` protocol so the engine never knows which one is active.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from ..git import git_output, run_git, work_tree_prefix

logger = logging.getLogger(__name__)

CLEAN = "  "
STATUS_ARGS = ["status", "--porcelain=v1", "-z", "--ignored", "--untracked-files=normal"]
# Codes git reports once for a whole directory instead of for its contents.
COLLAPSED_CODES = frozenset({"??", "!!"})


@dataclass(frozen=True)
class StatusRecord:
    """One porcelain record: two-character code and repository-relative path."""

    code: str
    path: str
    raw: str

    @property
    def index_code(self) -> str:
        return self.code[0]

    @property
    def worktree_code(self) -> str:
        return self.code[1]


def parse_status_record(token: str) -> StatusRecord | None:
    """Parse one ``XY path`` porcelain token; ``None`` when malformed."""
    if len(token) < 4 or token[2] != " ":
        return None
    return StatusRecord(code=token[:2], path=token[3:], raw=token)


def iter_status_records(output: str) -> list[StatusRecord]:
    """Split ``status --porcelain -z`` output into records.

    Renamed and copied entries are followed by an extra token holding the
    source path; only the destination is kept.
    """
    records: list[StatusRecord] = []
    tokens = output.split("\0")
    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1
        if not token:
            continue
        record = parse_status_record(token)
        if record is None:
            logger.warning("skipping malformed status record %r", token)
            continue
        records.append(record)
        if "R" in record.code or "C" in record.code:
            index += 1
    return records


def leaf_name(path: str, prefix: str) -> str | None:
    """Reduce a repository-relative path to a leaf of the directory at ``prefix``.

    Paths outside the directory, or deeper than its immediate children, give
    ``None``; untracked/ignored directories keep their name without the
    trailing slash.
    """
    if prefix and not path.startswith(prefix):
        return None
    relative = path[len(prefix) :].rstrip("/")
    if not relative or "/" in relative:
        return None
    return relative


def covers_directory(record: StatusRecord, prefix: str) -> bool:
    """Whether ``record`` is the listed directory itself, untracked or ignored as a whole."""
    return bool(prefix) and record.path == prefix and record.code in COLLAPSED_CODES


class StatusIndex(Protocol):
    def lookup(self, name: str) -> str:
        """Return the two-character code for ``name`` (``"  "`` when clean or unknown)."""

    def record(self, name: str) -> StatusRecord | None:
        """Return the full record for ``name`` if one was reported."""


class EmptyIndex:
    """Index for directories outside any work tree."""

    def lookup(self, name: str) -> str:
        return CLEAN

    def record(self, name: str) -> StatusRecord | None:
        return None


class BatchIndex:
    """Index over one status query.

    Inside an untracked or ignored directory git reports only the directory,
    so ``enclosing`` is handed out for every name.
    """

    def __init__(self, records: dict[str, StatusRecord], enclosing: StatusRecord | None = None) -> None:
        self._records = dict(records)
        self.enclosing = enclosing

    @classmethod
    def from_output(cls, output: str, prefix: str) -> "BatchIndex":
        records: dict[str, StatusRecord] = {}
        enclosing = None
        for record in iter_status_records(output):
            if covers_directory(record, prefix):
                enclosing = record
                continue
            name = leaf_name(record.path, prefix)
            if name is not None:
                records[name] = record
        return cls(records, enclosing)

    def lookup(self, name: str) -> str:
        record = self.record(name)
        return record.code if record is not None else CLEAN

    def record(self, name: str) -> StatusRecord | None:
        return self._records.get(name, self.enclosing)

    def __len__(self) -> int:
        return len(self._records)


class PerFileIndex:
    """Index that queries status for each name on demand.

    Answers are identical to ``BatchIndex`` but cost one process per entry;
    results are remembered so repeated lookups stay cheap.
    """

    def __init__(self, directory: Path, prefix: str) -> None:
        self.directory = directory
        self.prefix = prefix
        self._cache: dict[str, StatusRecord | None] = {}

    def record(self, name: str) -> StatusRecord | None:
        if name not in self._cache:
            output = git_output(self.directory, [*STATUS_ARGS, "--", name])
            found = None
            if output is not None:
                for record in iter_status_records(output):
                    if leaf_name(record.path, self.prefix) == name or covers_directory(record, self.prefix):
                        found = record
                        break
            self._cache[name] = found
        return self._cache[name]

    def lookup(self, name: str) -> str:
        record = self.record(name)
        return record.code if record is not None else CLEAN


def build_status_index(directory: Path, per_file: bool = False) -> StatusIndex:
    """Build the status index for one listed directory.

    A directory outside any work tree gets an empty index. If the batch
    query itself fails inside a work tree, lookups fall back to per-file
    queries.
    """
    prefix = work_tree_prefix(directory)
    if prefix is None:
        return EmptyIndex()
    if per_file:
        return PerFileIndex(directory, prefix)

    proc = run_git(directory, [*STATUS_ARGS, "--", "."])
    if proc is None or proc.returncode != 0:
        logger.debug("batch status failed in %s, using per-file lookups", directory)
        return PerFileIndex(directory, prefix)
    return BatchIndex.from_output(proc.stdout, prefix)
