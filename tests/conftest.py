"""Shared pytest fixtures for timewatch tests."""

import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from timewatch.clock import Clock
from timewatch.db import SqliteCurrentActivityRepository, SqliteFinishedActivityRepository
from timewatch.memory import MemoryCurrentActivityRepository, MemoryFinishedActivityRepository
from timewatch.service import ActivityService


class FixedClock(Clock):
    """Clock frozen at a given instant."""

    def __init__(self, instant: datetime):
        self.instant = instant

    def now(self) -> datetime:
        return self.instant


@pytest.fixture
def temp_dir():
    """Create a temporary storage directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def db_path(temp_dir):
    return temp_dir / "timewatch.sqlite3"


@pytest.fixture
def clock():
    return FixedClock(datetime(2019, 12, 25, 19, 50, 0))


@pytest.fixture(params=["memory", "sqlite"])
def repositories(request, db_path):
    """Finished and current repositories for each storage backend."""
    if request.param == "memory":
        return MemoryFinishedActivityRepository(), MemoryCurrentActivityRepository()
    return SqliteFinishedActivityRepository(db_path), SqliteCurrentActivityRepository(db_path)


@pytest.fixture
def service(repositories):
    finished, current = repositories
    return ActivityService(finished=finished, current=current)
