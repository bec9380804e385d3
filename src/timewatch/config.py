"""Configuration models and helpers for timewatch."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .paths import DB_FILENAME, get_data_dir, get_db_path

DATA_DIR_ENV = "TIMEWATCH_DIR"


@dataclass(slots=True)
class TrackerSettings:
    """Where activities are stored and how summaries are laid out."""

    data_dir: Path
    db_filename: str = DB_FILENAME
    summary_tag_width: int = 30

    @property
    def db_path(self) -> Path:
        return get_db_path(self.data_dir, self.db_filename)

    @classmethod
    def from_directory(cls, directory: Path | None = None) -> "TrackerSettings":
        """Resolve the storage directory.

        An explicit ``directory`` wins, then ``$TIMEWATCH_DIR``, then the
        platform data directory.
        """
        if directory is not None:
            return cls(data_dir=Path(directory).expanduser())
        env_dir = os.environ.get(DATA_DIR_ENV)
        if env_dir:
            return cls(data_dir=Path(env_dir).expanduser())
        return cls(data_dir=get_data_dir())
