"""In-memory activity storage, used for tests and dry runs."""

from __future__ import annotations

from typing import Optional

from .models import Activity, ActivityId, OngoingActivity
from .storage import ActivityEntry, ActivityPredicate


class MemoryCurrentActivityRepository:
    def __init__(self) -> None:
        self._current: Optional[OngoingActivity] = None

    def get_current_activity(self) -> Optional[OngoingActivity]:
        return self._current

    def set_current_activity(self, activity: OngoingActivity) -> None:
        self._current = activity

    def reset_current_activity(self) -> None:
        self._current = None


class MemoryFinishedActivityRepository:
    """Keeps finished activities in a dict ordered by id.

    New ids are one past the highest id in use, starting at 0.
    """

    def __init__(self) -> None:
        self._activities: dict[ActivityId, Activity] = {}

    def write_activity(self, activity: Activity) -> ActivityId:
        activity_id = max(self._activities, default=-1) + 1
        self._activities[activity_id] = activity
        return activity_id

    def filter_activities(self, predicate: ActivityPredicate) -> list[ActivityEntry]:
        return [
            entry
            for entry in sorted(self._activities.items())
            if predicate(entry)
        ]

    def delete_activity(self, activity_id: ActivityId) -> Optional[Activity]:
        return self._activities.pop(activity_id, None)
