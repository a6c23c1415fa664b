"""Invocation of the external listing tool."""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


class ListingToolError(RuntimeError):
    """The listing command could not be started."""


@dataclass(frozen=True)
class ListingResult:
    lines: list[str]
    returncode: int


def default_listing_command() -> str:
    """Return the platform's listing command.

    BSD ``ls`` lacks the GNU switches the engine relies on, so macOS prefers
    GNU coreutils' ``gls`` when it is installed.
    """
    if sys.platform == "darwin" and shutil.which("gls"):
        return "gls"
    return "ls"


def run_listing(command: list[str], switches: tuple[str, ...], targets: tuple[str, ...], cwd: Path | None = None) -> ListingResult:
    """Run the listing tool and capture its stdout lines.

    stderr is inherited so the tool's own diagnostics reach the terminal.
    A non-zero exit still returns whatever lines were printed.
    """
    argv = [*command, *switches, "--", *targets] if targets else [*command, *switches]
    try:
        proc = subprocess.run(
            argv,
            stdout=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            cwd=None if cwd is None else str(cwd),
        )
    except OSError as exc:
        raise ListingToolError(f"cannot run {command[0]!r}: {exc.strerror or exc}") from exc
    if proc.returncode != 0:
        logger.debug("%s exited with %d", " ".join(argv), proc.returncode)
    return ListingResult(lines=proc.stdout.splitlines(), returncode=proc.returncode)
