"""Persistent JSON config plus environment overrides.

Holds the listing command, default listing switches, nesting depth, status
lookup strategy and color preference. All access is defensive: malformed or
missing config falls back to built-in defaults.
"""

from __future__ import annotations

import json
import logging
import os
import shlex
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "lsgit"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

ENV_LS_COMMAND = "LSGIT_LS"
ENV_LS_OPTIONS = "LSGIT_LS_OPTIONS"
ENV_NESTING = "LSGIT_NESTING"

NESTING_DISABLED = 0
NESTING_UNLIMITED = -1
COLOR_CHOICES = ("auto", "always", "never")
_UNLIMITED_WORDS = frozenset({"unlimited", "inf", "infinite", "all"})


@dataclass(frozen=True)
class Settings:
    """Effective configuration, built once at startup.

    ``ls_command`` is ``None`` when the platform default should be used.
    ``nesting`` is ``0`` for no recursion, ``-1`` for unlimited, else the
    number of directory levels to descend.
    """

    ls_command: tuple[str, ...] | None = None
    ls_options: tuple[str, ...] = ()
    nesting: int = NESTING_DISABLED
    per_file_status: bool = False
    color: str = "auto"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def parse_nesting(value: object) -> int | None:
    """Normalize a nesting value from JSON, the environment or the CLI.

    Negative integers and words like ``unlimited`` mean unlimited. Returns
    ``None`` for anything unusable.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return NESTING_UNLIMITED if value < 0 else value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _UNLIMITED_WORDS:
            return NESTING_UNLIMITED
        try:
            return parse_nesting(int(text))
        except ValueError:
            return None
    return None


def _split_command(value: object) -> tuple[str, ...] | None:
    if not isinstance(value, str):
        return None
    try:
        parts = tuple(shlex.split(value))
    except ValueError:
        logger.warning("ignoring unparsable command line %r", value)
        return None
    return parts or None


def settings_from_config(data: Mapping[str, object], base: Settings | None = None) -> Settings:
    """Apply persisted config keys on top of ``base``; wrong-typed keys are skipped."""
    settings = base or Settings()
    command = _split_command(data.get("ls_command"))
    if command is not None:
        settings = replace(settings, ls_command=command)
    options = _split_command(data.get("ls_options"))
    if options is not None:
        settings = replace(settings, ls_options=options)
    if "nesting" in data:
        nesting = parse_nesting(data["nesting"])
        if nesting is None:
            logger.warning("ignoring invalid nesting %r in config", data["nesting"])
        else:
            settings = replace(settings, nesting=nesting)
    per_file = data.get("per_file_status")
    if isinstance(per_file, bool):
        settings = replace(settings, per_file_status=per_file)
    color = data.get("color")
    if isinstance(color, str) and color in COLOR_CHOICES:
        settings = replace(settings, color=color)
    return settings


def settings_from_env(env: Mapping[str, str], base: Settings) -> Settings:
    """Apply ``LSGIT_*`` environment overrides on top of ``base``."""
    settings = base
    command = _split_command(env.get(ENV_LS_COMMAND))
    if command is not None:
        settings = replace(settings, ls_command=command)
    if ENV_LS_OPTIONS in env:
        options = _split_command(env[ENV_LS_OPTIONS])
        settings = replace(settings, ls_options=options or ())
    raw_nesting = env.get(ENV_NESTING)
    if raw_nesting:
        nesting = parse_nesting(raw_nesting)
        if nesting is None:
            logger.warning("ignoring invalid %s=%r", ENV_NESTING, raw_nesting)
        else:
            settings = replace(settings, nesting=nesting)
    return settings


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Merge defaults, the persisted config file and the environment."""
    settings = settings_from_config(load_config())
    return settings_from_env(os.environ if env is None else env, settings)
