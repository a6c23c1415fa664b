"""Make the in-tree ``lsgit`` package importable without an install.

Test modules live in nested directories without ``__init__.py`` files, so
pytest's rootdir insertion alone does not cover them.
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = str(Path(__file__).resolve().parent.parent)

if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)
