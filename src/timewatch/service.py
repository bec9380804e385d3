"""Activity lifecycle: the single current activity and the finished history."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from .models import Activity, ActivityId, OngoingActivity
from .storage import (
    ActivityEntry,
    ActivityPredicate,
    CurrentActivityRepository,
    FinishedActivityRepository,
)

logger = logging.getLogger(__name__)


class ActivityService:
    """Start, stop, track and query activities.

    At most one activity is ongoing at a time. Starting while another
    activity is ongoing closes the previous one at the new start time.
    """

    def __init__(
        self,
        finished: FinishedActivityRepository,
        current: CurrentActivityRepository,
    ) -> None:
        self._finished = finished
        self._current = current

    def get_current_activity(self) -> Optional[OngoingActivity]:
        return self._current.get_current_activity()

    def start_activity(self, activity: OngoingActivity) -> OngoingActivity:
        self.stop_current_activity(activity.start_time)
        started = OngoingActivity(start_time=activity.start_time, tags=activity.tags)
        self._current.set_current_activity(started)
        logger.debug("Started activity %s at %s", started.tags, started.start_time)
        return started

    def stop_current_activity(self, time: datetime) -> Optional[Activity]:
        """Close the ongoing activity at ``time``.

        Returns ``None`` when nothing is ongoing. The finished activity is
        written before the current slot is reset, so a failed write leaves
        the ongoing activity in place.
        """
        current = self._current.get_current_activity()
        if current is None:
            logger.debug("No current activity to stop.")
            return None
        finished = current.into_activity(time)
        activity_id = self._finished.write_activity(finished)
        self._current.reset_current_activity()
        logger.debug("Stopped activity %s as id=%d", finished.tags, activity_id)
        return finished

    def filter_activities(self, predicate: ActivityPredicate) -> list[ActivityEntry]:
        return self._finished.filter_activities(predicate)

    def delete_activity(self, activity_id: ActivityId) -> Optional[Activity]:
        deleted = self._finished.delete_activity(activity_id)
        if deleted is None:
            logger.debug("No activity found for id=%d", activity_id)
        return deleted

    def track_activity(self, activity: Activity) -> Activity:
        activity_id = self._finished.write_activity(activity)
        logger.debug("Tracked activity %s as id=%d", activity.tags, activity_id)
        return activity

    def last_finished_activity(self) -> Optional[Activity]:
        """Return the finished activity with the latest end time, if any."""
        entries = self._finished.filter_activities(lambda _entry: True)
        if not entries:
            return None
        _activity_id, activity = max(entries, key=lambda entry: (entry[1].end_time, entry[0]))
        return activity
