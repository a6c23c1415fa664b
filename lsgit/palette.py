"""Label color palette and its git-config overrides.

Each semantic slot maps to an SGR sequence. Users override slots through
``git config color.lsgit.<slot> <color>``; git itself turns the color name
into an escape sequence so every git color syntax is accepted.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from pathlib import Path

from .git import git_output

logger = logging.getLogger(__name__)

COLOR_KEY_PREFIX = "color.lsgit."


@dataclass(frozen=True)
class Palette:
    """Semantic ANSI palette used when rendering labels."""

    reset: str = "\033[0m"
    untracked: str = "\033[31m"
    ignored: str = "\033[2m"
    unmerged: str = "\033[1;31m"
    staged: str = "\033[32m"
    added: str = "\033[32m"
    deleted: str = "\033[31m"
    renamed: str = "\033[36m"
    copied: str = "\033[36m"
    modified: str = "\033[33m"
    unknown: str = "\033[1;35m"
    lines: str = "\033[2m"
    mode: str = "\033[35m"
    branch: str = "\033[1;34m"
    ahead: str = "\033[32m"
    behind: str = "\033[31m"
    detached: str = "\033[1;31m"
    no_upstream: str = "\033[2m"
    forward: str = "\033[32m"
    back: str = "\033[31m"
    new_ref: str = "\033[33m"
    dir_summary: str = "\033[33m"

    def color(self, slot: str | None) -> str:
        """Return the SGR sequence for ``slot``, or ``""`` for an unknown slot."""
        if not slot or slot == "reset":
            return ""
        value = getattr(self, slot, "")
        return value if isinstance(value, str) else ""


DEFAULT_PALETTE = Palette()
SLOTS = tuple(field.name for field in dataclasses.fields(Palette) if field.name != "reset")


def configured_slots(cwd: Path) -> list[str]:
    """List palette slots the user overrode in git config."""
    output = git_output(cwd, ["config", "--get-regexp", r"^color\.lsgit\."])
    if output is None:
        return []
    slots: list[str] = []
    for line in output.splitlines():
        key = line.split(" ", 1)[0].strip().lower()
        slot = key[len(COLOR_KEY_PREFIX) :].replace("-", "_")
        if slot in SLOTS:
            slots.append(slot)
        elif key:
            logger.warning("ignoring unknown color key %s", key)
    return slots


def load_palette(cwd: Path) -> Palette:
    """Resolve the palette once at startup.

    Slots without an override keep their defaults without running git; an
    override git cannot parse falls back to the default as well.
    """
    overrides: dict[str, str] = {}
    for slot in configured_slots(cwd):
        key = COLOR_KEY_PREFIX + slot.replace("_", "-")
        output = git_output(cwd, ["config", "--get-color", key])
        if output:
            overrides[slot] = output
    return dataclasses.replace(DEFAULT_PALETTE, **overrides)
