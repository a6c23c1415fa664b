"""Command-line front door for lsgit.

Separates lsgit's own options from listing-tool switches, builds the
effective settings and palette once, then runs the listing engine and
exits with the listing tool's status.
"""

from __future__ import annotations

import argparse
import logging
import shlex
import sys
from dataclasses import replace
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from .config import Settings, load_settings, parse_nesting
from .engine import EngineOptions, ListingEngine, NestingState
from .listing.options import ListingMode, parse_listing_args, with_color_switch
from .listing.runner import ListingToolError, default_listing_command
from .palette import load_palette

logger = logging.getLogger(__name__)

_ALWAYS_WORDS = frozenset({"always", "yes", "force"})
_NEVER_WORDS = frozenset({"never", "no", "none"})


def _nesting_arg(value: str) -> int:
    """argparse type for ``--nesting``."""
    parsed = parse_nesting(value)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"invalid nesting value: {value!r}")
    return parsed


def _command_arg(value: str) -> tuple[str, ...]:
    """argparse type for ``--ls-command``: a shell-quoted command line."""
    try:
        parts = tuple(shlex.split(value))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid command: {exc}") from exc
    if not parts:
        raise argparse.ArgumentTypeError("command must not be empty")
    return parts


def _package_version() -> str:
    try:
        return version("lsgit")
    except PackageNotFoundError:
        return "unknown"


def build_parser() -> argparse.ArgumentParser:
    # ``-h`` belongs to the listing tool (human-readable sizes).
    parser = argparse.ArgumentParser(
        prog="lsgit",
        description="List directory contents annotated with git status.",
        epilog="Unrecognized switches and all paths are passed to the listing tool.",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("--help", action="help", help="Show this help message and exit.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")
    parser.add_argument(
        "--nesting",
        type=_nesting_arg,
        default=None,
        metavar="N",
        help="Descend N directory levels (0 disables, 'unlimited' or -1 for no limit).",
    )
    parser.add_argument("--ls-command", type=_command_arg, default=None, metavar="CMD", help="Listing command to run.")
    parser.add_argument(
        "--per-file-status",
        action="store_true",
        default=None,
        help="Query git status once per entry instead of once per directory.",
    )
    parser.add_argument("--verbose", action="store_true", help="Log git and listing diagnostics to stderr.")
    return parser


def resolve_color(mode: ListingMode, settings: Settings, isatty: bool) -> bool:
    """Decide whether labels are colored.

    An explicit ``--color`` listing switch wins over the configured
    preference; ``auto`` follows whether stdout is a terminal.
    """
    choice = mode.color if mode.color is not None else settings.color
    if choice in _ALWAYS_WORDS:
        return True
    if choice in _NEVER_WORDS:
        return False
    return isatty


def apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    overrides: dict[str, object] = {}
    if args.nesting is not None:
        overrides["nesting"] = args.nesting
    if args.ls_command:
        overrides["ls_command"] = args.ls_command
    if args.per_file_status:
        overrides["per_file_status"] = True
    return replace(settings, **overrides)


def run(argv: list[str] | None = None) -> int:
    """Parse ``argv`` (defaults to ``sys.argv[1:]``), list, and return the exit status."""
    parser = build_parser()
    args, passthrough = parser.parse_known_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
    )

    settings = apply_cli_overrides(load_settings(), args)
    invocation = parse_listing_args([*settings.ls_options, *passthrough])
    color = resolve_color(invocation.mode, settings, sys.stdout.isatty())
    invocation = with_color_switch(invocation, color)
    command = settings.ls_command or (default_listing_command(),)
    logger.debug("listing with %s %s", " ".join(command), " ".join(invocation.switches))

    options = EngineOptions(
        command=command,
        invocation=invocation,
        palette=load_palette(Path.cwd()) if color else None,
        per_file_status=settings.per_file_status,
    )
    engine = ListingEngine(options, sys.stdout, NestingState.from_setting(settings.nesting))
    try:
        return engine.run()
    except ListingToolError as exc:
        sys.stderr.write(f"lsgit: {exc}\n")
        return 127


def main(argv: list[str] | None = None) -> None:
    """Console-script entrypoint: exits with the aggregated listing status."""
    raise SystemExit(run(argv))


if __name__ == "__main__":
    main()
