"""Wall-clock access for the command-line layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, time, timedelta

from .models import truncate_to_second


def day_range(day: datetime) -> tuple[datetime, datetime]:
    """Return local midnight of ``day`` and of the following day."""
    start = datetime.combine(day.date(), time.min)
    return start, start + timedelta(days=1)


class Clock(ABC):
    """Source of the current instant and of calendar ranges around it."""

    @abstractmethod
    def now(self) -> datetime:
        ...

    def today_range(self) -> tuple[datetime, datetime]:
        return day_range(self.now())

    def yesterday_range(self) -> tuple[datetime, datetime]:
        return day_range(self.now() - timedelta(days=1))

    def week_range(self) -> tuple[datetime, datetime]:
        """Monday midnight of the current week to the Monday after."""
        today_start, _ = self.today_range()
        start = today_start - timedelta(days=today_start.weekday())
        return start, start + timedelta(days=7)


class SystemClock(Clock):
    """Local wall-clock time, truncated to whole seconds."""

    def now(self) -> datetime:
        return truncate_to_second(datetime.now())
