#!/usr/bin/env python3
"""
paths.py
-------------------
Path constants and configuration for the catalog project.

All project paths are defined as Path objects relative to the project
root directory.

The project structure:
    ROOT/
    ├── catalog/       # Package code and Alembic migrations
    ├── data/          # Key-value database
    └── logs/          # Application logs

Paths are resolved at import time; the database and log directories are
created lazily by the components that write to them.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from pathlib import Path


def _get_project_root() -> Path:
    """
    Determine project root directory.

    Assumes this file is at ROOT/catalog/core/paths.py and navigates up
    the directory tree to find ROOT.

    Returns:
        Path object for project root
    """
    # paths.py -> core/ -> catalog/ -> ROOT/
    return Path(__file__).resolve().parent.parent.parent


# ----- Project directory -----
ROOT: Path = _get_project_root()
PACKAGE_DIR = ROOT / "catalog"
DATA_DIR = ROOT / "data"

# --- Database ---
ALEMBIC_INI = ROOT / "alembic.ini"
ALEMBIC_DIR = PACKAGE_DIR / "migrations"
DB_DIR = DATA_DIR / "kv"
DB_PATH = DB_DIR / "catalog.db"

# ---- Logs ----
LOG_DIR = ROOT / "logs"
