"""Domain models for tracked activities."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .errors import InvalidIntervalError

# Absolute instants are parsed and displayed with this pattern,
# e.g. 2019-12-25T18:43:00
DATETIME_FMT = "%Y-%m-%dT%H:%M:%S"

Tag = str
Tags = tuple[Tag, ...]
ActivityId = int


def truncate_to_second(value: datetime) -> datetime:
    return value.replace(microsecond=0)


def format_instant(value: datetime) -> str:
    return value.strftime(DATETIME_FMT)


def parse_instant(text: str) -> datetime:
    """Parse an instant written as ``YYYY-MM-DDTHH:MM:SS``."""
    return datetime.strptime(text, DATETIME_FMT)


@dataclass(frozen=True, slots=True)
class Activity:
    """A finished activity: a closed time interval carrying tags."""

    start_time: datetime
    end_time: datetime
    tags: Tags = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "start_time", truncate_to_second(self.start_time))
        object.__setattr__(self, "end_time", truncate_to_second(self.end_time))
        object.__setattr__(self, "tags", tuple(self.tags))
        if self.end_time < self.start_time:
            raise InvalidIntervalError(
                f"activity cannot end ({format_instant(self.end_time)}) "
                f"before it starts ({format_instant(self.start_time)})"
            )

    @property
    def duration_seconds(self) -> float:
        return (self.end_time - self.start_time).total_seconds()


@dataclass(frozen=True, slots=True)
class OngoingActivity:
    """An activity that has started but not ended yet."""

    start_time: datetime
    tags: Tags = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "start_time", truncate_to_second(self.start_time))
        object.__setattr__(self, "tags", tuple(self.tags))

    def into_activity(self, end_time: datetime) -> Activity:
        """Close the activity at ``end_time``.

        Raises:
            InvalidIntervalError: if ``end_time`` precedes the start time.
        """
        return Activity(start_time=self.start_time, end_time=end_time, tags=self.tags)

    def elapsed_seconds(self, now: datetime) -> float:
        return (now - self.start_time).total_seconds()
