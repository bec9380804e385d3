"""Tests for the activity lifecycle service, against every storage backend."""

from datetime import datetime

import pytest

from timewatch.errors import InvalidIntervalError, StorageError
from timewatch.memory import MemoryCurrentActivityRepository, MemoryFinishedActivityRepository
from timewatch.models import Activity, OngoingActivity
from timewatch.service import ActivityService


def at(hour, minute=0, second=0):
    return datetime(2019, 12, 25, hour, minute, second)


def everything(_entry):
    return True


class TestStop:
    def test_stop_when_idle_returns_none(self, service):
        """Stopping with nothing ongoing is a repeatable no-op."""
        for _ in range(3):
            assert service.stop_current_activity(at(9)) is None
            assert service.get_current_activity() is None
        assert service.filter_activities(everything) == []

    def test_start_then_stop(self, service):
        """Scenario: start 19:43 foo, stop 19:45."""
        service.start_activity(OngoingActivity(start_time=at(19, 43), tags=["foo"]))
        stopped = service.stop_current_activity(at(19, 45))

        expected = Activity(start_time=at(19, 43), end_time=at(19, 45), tags=["foo"])
        assert stopped == expected
        assert service.get_current_activity() is None
        assert service.filter_activities(everything) == [(0, expected)]

    def test_stop_before_start_fails_and_keeps_current(self, service):
        service.start_activity(OngoingActivity(start_time=at(10), tags=["a"]))
        with pytest.raises(InvalidIntervalError):
            service.stop_current_activity(at(9))
        assert service.get_current_activity() == OngoingActivity(start_time=at(10), tags=["a"])
        assert service.filter_activities(everything) == []

    def test_stop_at_start_time_gives_zero_length_activity(self, service):
        service.start_activity(OngoingActivity(start_time=at(10), tags=["a"]))
        stopped = service.stop_current_activity(at(10))
        assert stopped.duration_seconds == 0


class TestStart:
    def test_start_sets_current(self, service):
        started = service.start_activity(OngoingActivity(start_time=at(8), tags=["a"]))
        assert started == OngoingActivity(start_time=at(8), tags=["a"])
        assert service.get_current_activity() == started

    def test_restart_closes_previous_activity(self, service):
        """Scenario: start a at t0, start b at t1 without stopping."""
        service.start_activity(OngoingActivity(start_time=at(8), tags=["a"]))
        service.start_activity(OngoingActivity(start_time=at(9), tags=["b"]))

        assert service.filter_activities(everything) == [
            (0, Activity(start_time=at(8), end_time=at(9), tags=["a"]))
        ]
        assert service.get_current_activity() == OngoingActivity(start_time=at(9), tags=["b"])

    def test_many_starts_keep_single_current(self, service):
        for hour, tag in [(8, "a"), (9, "b"), (10, "c"), (11, "d")]:
            service.start_activity(OngoingActivity(start_time=at(hour), tags=[tag]))

        finished = service.filter_activities(everything)
        assert [activity.tags for _id, activity in finished] == [("a",), ("b",), ("c",)]
        for (_id, previous), (_next_id, following) in zip(finished, finished[1:]):
            assert previous.end_time == following.start_time
        assert service.get_current_activity().tags == ("d",)

    def test_start_before_current_start_is_rejected(self, service):
        """Auto-closing at an earlier time would create an invalid interval."""
        service.start_activity(OngoingActivity(start_time=at(10), tags=["a"]))
        with pytest.raises(InvalidIntervalError):
            service.start_activity(OngoingActivity(start_time=at(9), tags=["b"]))
        assert service.get_current_activity().tags == ("a",)

    def test_stop_start_stop(self, service):
        service.start_activity(OngoingActivity(start_time=at(8), tags=["a"]))
        service.stop_current_activity(at(9))
        service.start_activity(OngoingActivity(start_time=at(10), tags=["b"]))
        assert service.get_current_activity().tags == ("b",)
        assert len(service.filter_activities(everything)) == 1


class TestFilter:
    def test_range_filter(self, service):
        """Scenario: activity 08:30-08:45 filtered by two ranges."""
        service.start_activity(OngoingActivity(start_time=at(8, 30), tags=["a"]))
        service.stop_current_activity(at(8, 45))

        def in_range(start, end):
            return lambda entry: start <= entry[1].start_time <= end

        assert len(service.filter_activities(in_range(at(8), at(9)))) == 1
        assert service.filter_activities(in_range(at(9), at(10))) == []

    def test_filter_preserves_store_order(self, service):
        service.track_activity(Activity(start_time=at(12), end_time=at(13), tags=["late"]))
        service.track_activity(Activity(start_time=at(8), end_time=at(9), tags=["early"]))
        service.track_activity(Activity(start_time=at(10), end_time=at(11), tags=["mid"]))

        entries = service.filter_activities(lambda entry: entry[1].tags != ("early",))
        assert [(activity_id, activity.tags) for activity_id, activity in entries] == [
            (0, ("late",)),
            (2, ("mid",)),
        ]

    def test_returned_activities_cannot_alter_history(self, service):
        service.track_activity(Activity(start_time=at(8), end_time=at(9), tags=["a"]))
        _activity_id, activity = service.filter_activities(everything)[0]

        with pytest.raises(AttributeError):
            activity.tags.append("changed")
        assert service.filter_activities(everything)[0][1].tags == ("a",)
        assert hash(activity) == hash(
            Activity(start_time=at(8), end_time=at(9), tags=("a",))
        )

    def test_filter_on_empty_store(self, service):
        assert service.filter_activities(everything) == []


class TestDelete:
    def test_delete_present_id(self, service):
        tracked = service.track_activity(Activity(start_time=at(8), end_time=at(9), tags=["a"]))
        service.track_activity(Activity(start_time=at(10), end_time=at(11), tags=["b"]))

        assert service.delete_activity(0) == tracked
        remaining = service.filter_activities(everything)
        assert [activity_id for activity_id, _activity in remaining] == [1]

    def test_delete_absent_id(self, service):
        service.track_activity(Activity(start_time=at(8), end_time=at(9), tags=["a"]))
        assert service.delete_activity(42) is None
        assert len(service.filter_activities(everything)) == 1

    def test_deleted_id_is_not_returned_twice(self, service):
        service.track_activity(Activity(start_time=at(8), end_time=at(9), tags=["a"]))
        assert service.delete_activity(0) is not None
        assert service.delete_activity(0) is None

    def test_ids_stay_stable_after_delete(self, service):
        for hour in (8, 9, 10):
            service.track_activity(Activity(start_time=at(hour), end_time=at(hour, 30), tags=["x"]))
        service.delete_activity(1)
        service.track_activity(Activity(start_time=at(11), end_time=at(11, 30), tags=["y"]))

        ids = [activity_id for activity_id, _activity in service.filter_activities(everything)]
        assert ids == [0, 2, 3]


class TestTrack:
    def test_track_does_not_touch_current(self, service):
        service.start_activity(OngoingActivity(start_time=at(12), tags=["ongoing"]))
        tracked = service.track_activity(
            Activity(start_time=at(8), end_time=at(9), tags=["past"])
        )
        assert tracked.tags == ("past",)
        assert service.get_current_activity().tags == ("ongoing",)
        assert service.filter_activities(everything) == [(0, tracked)]


class TestLastFinished:
    def test_none_when_empty(self, service):
        assert service.last_finished_activity() is None

    def test_latest_end_time_wins(self, service):
        service.track_activity(Activity(start_time=at(12), end_time=at(13), tags=["late"]))
        service.track_activity(Activity(start_time=at(8), end_time=at(9), tags=["early"]))
        assert service.last_finished_activity().tags == ("late",)


class FailingFinishedRepository(MemoryFinishedActivityRepository):
    def write_activity(self, activity):
        raise StorageError("disk full")


class TestStorageFailure:
    def test_failed_write_keeps_current_activity(self):
        """A stop whose write fails leaves the ongoing activity in place."""
        current = MemoryCurrentActivityRepository()
        service = ActivityService(finished=FailingFinishedRepository(), current=current)
        service.start_activity(OngoingActivity(start_time=at(8), tags=["a"]))

        with pytest.raises(StorageError):
            service.stop_current_activity(at(9))
        assert current.get_current_activity() == OngoingActivity(start_time=at(8), tags=["a"])
