"""lsgit: directory listings annotated with git status."""

from __future__ import annotations

__all__ = ["main"]


def main(argv: list[str] | None = None) -> None:
    """Run the command line; imported on first call so ``import lsgit`` stays cheap."""
    from .cli import main as cli_main

    cli_main(argv)
