"""Text rendering for CLI output."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from .models import Activity, OngoingActivity, format_instant
from .storage import ActivityEntry

NO_CURRENT_ACTIVITY = "There is no active time tracking."
NO_FILTERED_DATA = "No filtered data found."
NO_ACTIVITY_TO_CONTINUE = "No activity to continue from."


def format_duration(seconds: float) -> str:
    total_seconds = int(round(seconds))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_tags(tags: Iterable[str]) -> str:
    return " ".join(tags)


def render_ongoing(activity: OngoingActivity, now: datetime) -> str:
    return "\n".join(
        [
            f"Tracking {format_tags(activity.tags)}",
            f"Total    {format_duration(max(activity.elapsed_seconds(now), 0))}",
        ]
    )


def render_started(activity: OngoingActivity) -> str:
    return "\n".join(
        [
            f"Tracking {format_tags(activity.tags)}",
            f"Started  {format_instant(activity.start_time)}",
        ]
    )


def render_recorded(activity: Activity) -> str:
    return "\n".join(
        [
            f"Recorded {format_tags(activity.tags)}",
            f"Started  {format_instant(activity.start_time)}",
            f"Stopped  {format_instant(activity.end_time)}",
            f"Total    {format_duration(activity.duration_seconds)}",
        ]
    )


def render_summary(
    entries: Iterable[ActivityEntry], *, with_id: bool = False, tag_width: int = 30
) -> str:
    """Render one line per activity, sorted by start time."""
    lines: list[str] = []
    for activity_id, activity in sorted(entries, key=lambda entry: entry[1].start_time):
        tags = format_tags(activity.tags)
        line = (
            f"{tags[:tag_width]:<{tag_width}} "
            f"{format_instant(activity.start_time)} "
            f"{format_instant(activity.end_time)} "
            f"{format_duration(activity.duration_seconds)}"
        )
        if with_id:
            line = f"{activity_id:>3} {line}"
        lines.append(line)
    if not lines:
        return NO_FILTERED_DATA
    return "\n".join(lines)


def render_deleted(activity_id: int, activity: Activity | None) -> str:
    if activity is None:
        return f"No activity found for id {activity_id}."
    return "\n".join(
        [f"Deleted {activity_id}", render_recorded(activity)]
    )
