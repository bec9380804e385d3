"""Storage capabilities the activity service is written against."""

from __future__ import annotations

from typing import Callable, Optional, Protocol

from .models import Activity, ActivityId, OngoingActivity

ActivityEntry = tuple[ActivityId, Activity]
ActivityPredicate = Callable[[ActivityEntry], bool]


class CurrentActivityRepository(Protocol):
    """Holds zero or one ongoing activity.

    Each call is atomic on its own; the service composes them and is
    responsible for keeping a single activity current.
    """

    def get_current_activity(self) -> Optional[OngoingActivity]:
        ...

    def set_current_activity(self, activity: OngoingActivity) -> None:
        ...

    def reset_current_activity(self) -> None:
        ...


class FinishedActivityRepository(Protocol):
    """Identifier-indexed collection of finished activities.

    Identifiers are assigned by the repository on write. ``filter_activities``
    yields entries in ascending id order.
    """

    def write_activity(self, activity: Activity) -> ActivityId:
        ...

    def filter_activities(self, predicate: ActivityPredicate) -> list[ActivityEntry]:
        ...

    def delete_activity(self, activity_id: ActivityId) -> Optional[Activity]:
        ...
