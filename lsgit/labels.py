"""Composition of annotation labels.

Labels are built as ordered ``(text, slot)`` segments and only turned into
colored text by :func:`render_label`, so composition stays free of escape
sequences. An empty segment list means the entry gets no annotation.
"""

from __future__ import annotations

from dataclasses import dataclass

from .ansi import colorize
from .palette import Palette
from .status.numstat import NO_DELTA, LineDelta, ModeChange
from .status.repository import (
    Added,
    Ahead,
    AheadBehind,
    Back,
    Behind,
    Detached,
    Drift,
    Forward,
    NewRef,
    NoUpstream,
    Relation,
    RepositoryDescriptor,
)


@dataclass(frozen=True)
class Segment:
    text: str
    slot: str | None = None


Label = tuple[Segment, ...]

EMPTY_LABEL: Label = ()

FIXED_PHRASES: dict[str, tuple[str, str]] = {
    "??": ("untracked", "untracked"),
    "!!": ("ignored", "ignored"),
}

UNMERGED_PHRASES: dict[str, str] = {
    "DD": "both deleted",
    "AU": "added by us",
    "UD": "deleted by them",
    "UA": "added by them",
    "DU": "deleted by us",
    "AA": "both added",
    "UU": "both modified",
}

INDEX_PHRASES: dict[str, tuple[str, str]] = {
    "M": ("staged", "staged"),
    "A": ("added", "added"),
    "D": ("deleted", "deleted"),
    "R": ("renamed", "renamed"),
    "C": ("copied", "copied"),
}

WORKTREE_PHRASES: dict[str, tuple[str, str]] = {
    "M": ("modified locally", "modified"),
    "A": ("added locally", "added"),
    "D": ("deleted locally", "deleted"),
}

# Columns whose phrase carries a line-delta suffix.
DELTA_CODE = "M"


def _braced(parts: list[Segment]) -> Label:
    if not parts:
        return EMPTY_LABEL
    return (Segment("{"), *parts, Segment("}"))


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def delta_segments(delta: LineDelta) -> list[Segment]:
    """Render ``, N line(s)`` plus any ``+x``/``-x`` mode flag."""
    parts: list[Segment] = []
    if delta.total:
        parts.append(Segment(", "))
        parts.append(Segment(_plural(delta.total, "line"), "lines"))
    for change in (ModeChange.EXECUTABLE_ADDED, ModeChange.EXECUTABLE_REMOVED):
        if change in delta.mode_changes:
            parts.append(Segment(", "))
            parts.append(Segment(change.value, "mode"))
    return parts


def _column_phrase(
    char: str, phrases: dict[str, tuple[str, str]], delta: LineDelta
) -> list[Segment]:
    if char == " ":
        return []
    phrase = phrases.get(char)
    if phrase is None:
        return [Segment(f"<{char}>", "unknown")]
    text, slot = phrase
    parts = [Segment(text, slot)]
    if char == DELTA_CODE:
        parts.extend(delta_segments(delta))
    return parts


def needs_delta(code: str) -> tuple[bool, bool]:
    """Return whether the index and worktree deltas feed into ``code``'s label."""
    if len(code) != 2 or code in FIXED_PHRASES or code in UNMERGED_PHRASES:
        return False, False
    return code[0] == DELTA_CODE, code[1] == DELTA_CODE


def compose_file_label(
    code: str | None,
    index_delta: LineDelta = NO_DELTA,
    worktree_delta: LineDelta = NO_DELTA,
) -> Label:
    """Map a two-character status code to a label.

    Fixed codes (untracked, ignored, the unmerged pairs) win outright;
    everything else is decomposed into an index phrase and a worktree
    phrase joined with ``+``. A clean or missing code yields no label.
    """
    if not code or len(code) != 2:
        return EMPTY_LABEL
    fixed = FIXED_PHRASES.get(code)
    if fixed is not None:
        return _braced([Segment(*fixed)])
    unmerged = UNMERGED_PHRASES.get(code)
    if unmerged is not None:
        return _braced([Segment("unmerged", "unmerged"), Segment(", "), Segment(unmerged, "unmerged")])

    index_parts = _column_phrase(code[0], INDEX_PHRASES, index_delta)
    worktree_parts = _column_phrase(code[1], WORKTREE_PHRASES, worktree_delta)
    if index_parts and worktree_parts:
        return _braced([*index_parts, Segment("+"), *worktree_parts])
    return _braced(index_parts or worktree_parts)


def compose_directory_label(code: str | None) -> Label:
    """Label an ordinary directory from its own status code only.

    Changes inside the directory are never summarized here; only untracked
    or ignored membership is shown.
    """
    fixed = FIXED_PHRASES.get(code or "")
    if fixed is None:
        return EMPTY_LABEL
    return _braced([Segment(*fixed)])


def relation_segments(relation: Relation) -> list[Segment]:
    if isinstance(relation, Ahead):
        return [Segment(f"{relation.count} ahead", "ahead")]
    if isinstance(relation, Behind):
        return [Segment(f"{relation.count} behind", "behind")]
    if isinstance(relation, AheadBehind):
        return [
            Segment(f"{relation.ahead} ahead", "ahead"),
            Segment(", "),
            Segment(f"{relation.behind} behind", "behind"),
        ]
    if isinstance(relation, NoUpstream):
        return [Segment("no upstream", "no_upstream")]
    return []


def drift_segments(drift: Drift | None, staged: bool = False) -> list[Segment]:
    """Render submodule drift; index-scope drift is prefixed with ``staged``."""
    if drift is None or isinstance(drift, Added):
        return []
    prefix = "staged " if staged else ""
    if isinstance(drift, Forward):
        return [Segment(f"{prefix}{drift.count} forward", "forward")]
    if isinstance(drift, Back):
        return [Segment(f"{prefix}{drift.count} back", "back")]
    if isinstance(drift, NewRef):
        return [Segment(f"{prefix}new ref", "new_ref")]
    return []


def compose_repository_label(descriptor: RepositoryDescriptor | None) -> Label:
    """Label a repository or submodule root.

    Produces ``(branch, relation, drift...)`` followed by an optional
    ``{added, N staged, M modified}`` group.
    """
    if descriptor is None:
        return EMPTY_LABEL

    if isinstance(descriptor.relation, Detached):
        head = [Segment("detached", "detached"), Segment(" "), Segment(descriptor.branch, "branch")]
    else:
        head = [Segment(descriptor.branch, "branch")]
    fragments = [
        relation_segments(descriptor.relation),
        drift_segments(descriptor.worktree_drift),
        drift_segments(descriptor.index_drift, staged=True),
    ]
    parts = [Segment("("), *head]
    for fragment in fragments:
        if fragment:
            parts.append(Segment(", "))
            parts.extend(fragment)
    parts.append(Segment(")"))

    group: list[Segment] = []
    if isinstance(descriptor.index_drift, Added):
        group.append(Segment("added", "added"))
    summary = descriptor.summary
    if summary is not None:
        for count, noun in ((summary.staged, "staged"), (summary.modified, "modified")):
            if count:
                if group:
                    group.append(Segment(", "))
                group.append(Segment(f"{count} {noun}", "dir_summary"))
    if group:
        parts.append(Segment(" "))
        parts.extend(_braced(group))
    return tuple(parts)


def label_text(label: Label) -> str:
    return "".join(segment.text for segment in label)


def render_label(label: Label, palette: Palette | None = None) -> str:
    """Turn segments into display text, colored when a palette is given."""
    if palette is None:
        return label_text(label)
    return "".join(colorize(segment.text, palette.color(segment.slot), palette.reset) for segment in label)
