"""Thin boundary around the ``git`` command-line client.

Every query is read-only and blocking. Failures of any kind (git missing,
not a repository, unknown ref, non-zero exit) collapse to ``None`` so callers
can treat them as absent data instead of errors. Paths after ``--`` are
always literal names, never glob patterns or pathspec magic.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

GIT_COMMAND = "git"


def run_git(cwd: Path, args: list[str], timeout_seconds: float | None = None) -> subprocess.CompletedProcess[str] | None:
    """Run ``git -C cwd <args>`` and return the completed process.

    Returns ``None`` only when the process could not be run at all; a
    non-zero exit is returned to the caller as-is.
    """
    try:
        return subprocess.run(
            [GIT_COMMAND, "--literal-pathspecs", "-C", str(cwd), *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout_seconds,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("git %s in %s failed to run: %s", " ".join(args), cwd, exc)
        return None


def git_output(cwd: Path, args: list[str]) -> str | None:
    """Return stdout of a successful git query, or ``None`` for any failure."""
    proc = run_git(cwd, args)
    if proc is None:
        return None
    if proc.returncode != 0:
        logger.debug("git %s in %s exited with %d", " ".join(args), cwd, proc.returncode)
        return None
    return proc.stdout


def git_line(cwd: Path, args: list[str]) -> str | None:
    """Return the first non-empty stdout line of a successful query."""
    output = git_output(cwd, args)
    if output is None:
        return None
    for line in output.splitlines():
        stripped = line.strip()
        if stripped:
            return stripped
    return None


def git_count(cwd: Path, revision_range: str) -> int | None:
    """Count commits in ``revision_range`` via ``rev-list --count``."""
    line = git_line(cwd, ["rev-list", "--count", revision_range])
    if line is None:
        return None
    try:
        return int(line)
    except ValueError:
        logger.warning("unexpected rev-list count %r in %s", line, cwd)
        return None


def work_tree_prefix(directory: Path) -> str | None:
    """Return ``directory``'s path relative to its work-tree root.

    The prefix is ``""`` at the root and ends with ``/`` otherwise, matching
    ``git rev-parse --show-prefix``. ``None`` means not inside a work tree.
    """
    output = git_output(directory, ["rev-parse", "--is-inside-work-tree", "--show-prefix"])
    if output is None:
        return None
    lines = output.splitlines()
    if not lines or lines[0].strip() != "true":
        return None
    return lines[1].strip() if len(lines) > 1 else ""


def has_git_marker(directory: Path) -> bool:
    """Return whether ``directory`` holds a ``.git`` file or directory."""
    return (directory / ".git").exists()


def is_submodule_root(directory: Path) -> bool:
    """Submodule checkouts record their git dir in a ``.git`` file."""
    return (directory / ".git").is_file()
