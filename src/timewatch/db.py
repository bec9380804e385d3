"""SQLite storage for the current and finished activities."""

from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional

from .errors import InvalidIntervalError, StorageError
from .models import (
    DATETIME_FMT,
    Activity,
    ActivityId,
    OngoingActivity,
    Tags,
    parse_instant,
)
from .storage import ActivityEntry, ActivityPredicate

logger = logging.getLogger(__name__)


def open_database(path: Path) -> sqlite3.Connection:
    """Open (and initialize) the SQLite database."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path, isolation_level=None)
    conn.row_factory = sqlite3.Row
    initialize_schema(conn)
    return conn


@contextmanager
def database_connection(path: Path) -> Iterator[sqlite3.Connection]:
    """Yield an initialized connection; storage failures become StorageError."""
    try:
        conn = open_database(path)
    except (sqlite3.Error, OSError) as exc:
        raise StorageError(f"Cannot open activity database {path}: {exc}") from exc
    try:
        yield conn
    except sqlite3.Error as exc:
        raise StorageError(f"Activity database {path} failed: {exc}") from exc
    finally:
        conn.close()


def initialize_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS activities (
            id INTEGER PRIMARY KEY,
            start_time TEXT NOT NULL,
            end_time TEXT NOT NULL,
            tags TEXT NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_activities_start_time
            ON activities(start_time);

        CREATE TABLE IF NOT EXISTS current_activity (
            slot INTEGER PRIMARY KEY CHECK (slot = 0),
            start_time TEXT NOT NULL,
            tags TEXT NOT NULL
        );
        """
    )


def _encode_tags(tags: Tags) -> str:
    return json.dumps(list(tags))


def _decode_tags(raw: str) -> Tags:
    try:
        tags = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as exc:
        raise StorageError(f"Corrupt tag list in activity database: {raw!r}") from exc
    if not isinstance(tags, list):
        raise StorageError(f"Corrupt tag list in activity database: {raw!r}")
    return tuple(str(tag) for tag in tags)


def _decode_instant(raw: str) -> datetime:
    try:
        return parse_instant(raw)
    except (TypeError, ValueError) as exc:
        raise StorageError(f"Corrupt timestamp in activity database: {raw!r}") from exc


def _row_to_activity(row: sqlite3.Row) -> Activity:
    start_time = _decode_instant(row["start_time"])
    end_time = _decode_instant(row["end_time"])
    try:
        return Activity(
            start_time=start_time, end_time=end_time, tags=_decode_tags(row["tags"])
        )
    except InvalidIntervalError as exc:
        raise StorageError(f"Corrupt activity in activity database: {exc}") from exc


class SqliteCurrentActivityRepository:
    """Stores the ongoing activity as the single row of ``current_activity``."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)

    def get_current_activity(self) -> Optional[OngoingActivity]:
        with database_connection(self.db_path) as conn:
            row = conn.execute(
                "SELECT start_time, tags FROM current_activity WHERE slot = 0"
            ).fetchone()
        if row is None:
            return None
        return OngoingActivity(
            start_time=_decode_instant(row["start_time"]),
            tags=_decode_tags(row["tags"]),
        )

    def set_current_activity(self, activity: OngoingActivity) -> None:
        with database_connection(self.db_path) as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO current_activity (slot, start_time, tags)
                VALUES (0, ?, ?)
                """,
                (activity.start_time.strftime(DATETIME_FMT), _encode_tags(activity.tags)),
            )

    def reset_current_activity(self) -> None:
        with database_connection(self.db_path) as conn:
            conn.execute("DELETE FROM current_activity")


class SqliteFinishedActivityRepository:
    """Stores finished activities in the ``activities`` table.

    New ids are one past the highest id in use, starting at 0, so ids stay
    stable for the lifetime of a record.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)

    def write_activity(self, activity: Activity) -> ActivityId:
        with database_connection(self.db_path) as conn:
            row = conn.execute(
                "SELECT COALESCE(MAX(id) + 1, 0) AS next_id FROM activities"
            ).fetchone()
            activity_id = int(row["next_id"])
            conn.execute(
                """
                INSERT INTO activities (id, start_time, end_time, tags)
                VALUES (?, ?, ?, ?)
                """,
                (
                    activity_id,
                    activity.start_time.strftime(DATETIME_FMT),
                    activity.end_time.strftime(DATETIME_FMT),
                    _encode_tags(activity.tags),
                ),
            )
        logger.debug("Wrote activity id=%d to %s", activity_id, self.db_path)
        return activity_id

    def filter_activities(self, predicate: ActivityPredicate) -> list[ActivityEntry]:
        with database_connection(self.db_path) as conn:
            rows = list(
                conn.execute(
                    "SELECT id, start_time, end_time, tags FROM activities ORDER BY id"
                )
            )
        entries = [(int(row["id"]), _row_to_activity(row)) for row in rows]
        return [entry for entry in entries if predicate(entry)]

    def delete_activity(self, activity_id: ActivityId) -> Optional[Activity]:
        with database_connection(self.db_path) as conn:
            row = conn.execute(
                "SELECT id, start_time, end_time, tags FROM activities WHERE id = ?",
                (activity_id,),
            ).fetchone()
            if row is None:
                return None
            deleted = _row_to_activity(row)
            conn.execute("DELETE FROM activities WHERE id = ?", (activity_id,))
        logger.debug("Deleted activity id=%d from %s", activity_id, self.db_path)
        return deleted
