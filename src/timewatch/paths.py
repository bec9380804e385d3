"""Helpers for locating application directories."""

from __future__ import annotations

from pathlib import Path

from platformdirs import PlatformDirs


APP_NAME = "timewatch"
APP_AUTHOR = "timewatch"
DB_FILENAME = "timewatch.sqlite3"


def get_data_dir() -> Path:
    """Return the base directory for persistent data."""
    dirs = PlatformDirs(appname=APP_NAME, appauthor=APP_AUTHOR, roaming=True)
    path = Path(dirs.user_data_path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_db_path(directory: Path | None = None, filename: str = DB_FILENAME) -> Path:
    return Path(directory or get_data_dir()) / filename
