"""Branch, upstream and submodule drift descriptors for repository roots.

A descriptor is built once per listed directory that carries a ``.git``
marker. Upstream tracking and submodule drift are independent axes; a
submodule can be behind its upstream while its pinned commit moves forward.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from ..git import git_count, git_line, git_output, is_submodule_root
from .index import iter_status_records
from .numstat import Scope

logger = logging.getLogger(__name__)

NO_BRANCH = "<no-branch>"
HEADS_PREFIX = "refs/heads/"
STAGED_INDEX_CODES = frozenset("ADMRC")
MODIFIED_WORKTREE_CODES = frozenset("MAD")

_GITLINK_RE = re.compile(r"^([-+])Subproject commit ([0-9a-f]+)(?:-dirty)?\s*$")


@dataclass(frozen=True)
class Clean:
    pass


@dataclass(frozen=True)
class Ahead:
    count: int


@dataclass(frozen=True)
class Behind:
    count: int


@dataclass(frozen=True)
class AheadBehind:
    ahead: int
    behind: int


@dataclass(frozen=True)
class NoUpstream:
    pass


@dataclass(frozen=True)
class Detached:
    pass


Relation = Clean | Ahead | Behind | AheadBehind | NoUpstream | Detached


@dataclass(frozen=True)
class Added:
    pass


@dataclass(frozen=True)
class Forward:
    count: int


@dataclass(frozen=True)
class Back:
    count: int


@dataclass(frozen=True)
class NewRef:
    pass


Drift = Added | Forward | Back | NewRef


@dataclass(frozen=True)
class DirStatusSummary:
    staged: int = 0
    modified: int = 0

    def __bool__(self) -> bool:
        return self.staged > 0 or self.modified > 0


@dataclass(frozen=True)
class RepositoryDescriptor:
    branch: str
    relation: Relation
    is_submodule: bool = False
    worktree_drift: Drift | None = None
    index_drift: Drift | None = None
    summary: DirStatusSummary | None = None


def relation_from_counts(ahead: int, behind: int) -> Relation:
    if ahead and behind:
        return AheadBehind(ahead, behind)
    if ahead:
        return Ahead(ahead)
    if behind:
        return Behind(behind)
    return Clean()


def resolve_upstream(directory: Path, branch: str) -> str | None:
    """Return the branch's upstream ref, else its push destination."""
    for suffix in ("@{upstream}", "@{push}"):
        ref = git_line(directory, ["rev-parse", "--symbolic-full-name", f"{branch}{suffix}"])
        if ref:
            return ref
    return None


def resolve_relation(directory: Path, head_ref: str, branch: str) -> Relation:
    upstream = resolve_upstream(directory, branch)
    if upstream is None:
        return NoUpstream()
    ahead = git_count(directory, f"{upstream}..{head_ref}") or 0
    behind = git_count(directory, f"{head_ref}..{upstream}") or 0
    return relation_from_counts(ahead, behind)


def parse_gitlink_diff(output: str) -> tuple[str | None, str | None]:
    """Extract ``(old, new)`` commit hashes from a gitlink diff."""
    old = new = None
    for line in output.splitlines():
        match = _GITLINK_RE.match(line)
        if not match:
            continue
        if match.group(1) == "-":
            old = match.group(2)
        else:
            new = match.group(2)
    return old, new


def classify_drift(submodule: Path, old: str | None, new: str | None) -> Drift | None:
    """Place ``new`` relative to ``old`` in the submodule's own history.

    Exactly one non-zero direction gives ``Forward``/``Back``; a commit that
    cannot be placed (unknown locally, or diverged) is a ``NewRef``.
    """
    if not old or not new or old == new:
        return None
    forward = git_count(submodule, f"{old}..{new}") or 0
    back = git_count(submodule, f"{new}..{old}") or 0
    if forward and not back:
        return Forward(forward)
    if back and not forward:
        return Back(back)
    return NewRef()


def resolve_drift(parent: Path, name: str, scope: Scope) -> Drift | None:
    output = git_output(parent, ["diff", *scope.diff_args, "--no-color", "--no-ext-diff", "--submodule=short", "--", name])
    if not output:
        return None
    old, new = parse_gitlink_diff(output)
    return classify_drift(parent / name, old, new)


def summarize_directory(directory: Path) -> DirStatusSummary | None:
    """Count staged and locally modified files anywhere under ``directory``.

    A file can count as both. Untracked and ignored files are not counted.
    """
    output = git_output(directory, ["status", "--porcelain=v1", "-z", "--untracked-files=no", "--", "."])
    if output is None:
        return None
    staged = modified = 0
    for record in iter_status_records(output):
        if record.index_code in STAGED_INDEX_CODES:
            staged += 1
        if record.worktree_code in MODIFIED_WORKTREE_CODES:
            modified += 1
    return DirStatusSummary(staged=staged, modified=modified)


def describe(directory: Path, index_code: str = "  ") -> RepositoryDescriptor | None:
    """Describe the repository or submodule rooted at ``directory``.

    ``index_code`` is the directory's status code in the enclosing
    repository; a staged addition marks a newly added submodule. Returns
    ``None`` for a freshly initialized repository with no commits.
    """
    is_submodule = is_submodule_root(directory)
    head_ref = git_line(directory, ["symbolic-ref", "-q", "HEAD"])
    if head_ref is None:
        short = git_line(directory, ["rev-parse", "--short", "-q", "--verify", "HEAD"])
        branch = short or NO_BRANCH
        relation: Relation = Detached()
    else:
        if git_line(directory, ["rev-parse", "-q", "--verify", head_ref]) is None:
            logger.debug("%s has no commits on %s", directory, head_ref)
            return None
        branch = head_ref[len(HEADS_PREFIX) :] if head_ref.startswith(HEADS_PREFIX) else head_ref
        relation = resolve_relation(directory, head_ref, branch)

    worktree_drift: Drift | None = None
    index_drift: Drift | None = None
    summary: DirStatusSummary | None = None
    if is_submodule:
        parent, name = directory.parent, directory.name
        worktree_drift = resolve_drift(parent, name, Scope.WORKTREE)
        if index_code[:1] == "A":
            index_drift = Added()
        else:
            index_drift = resolve_drift(parent, name, Scope.INDEX)
    else:
        summary = summarize_directory(directory)

    return RepositoryDescriptor(
        branch=branch,
        relation=relation,
        is_submodule=is_submodule,
        worktree_drift=worktree_drift,
        index_drift=index_drift,
        summary=summary,
    )
