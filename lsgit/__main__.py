"""``python -m lsgit`` runs the same entrypoint as the console script."""

from .cli import main

if __name__ == "__main__":
    main()
