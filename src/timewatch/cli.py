"""Command-line interface for timewatch."""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, TypeVar

import typer

from .clock import Clock, SystemClock
from .config import TrackerSettings
from .db import SqliteCurrentActivityRepository, SqliteFinishedActivityRepository
from .errors import TimewatchError
from .models import Activity, OngoingActivity
from .reporting import (
    NO_ACTIVITY_TO_CONTINUE,
    NO_CURRENT_ACTIVITY,
    render_deleted,
    render_ongoing,
    render_recorded,
    render_started,
    render_summary,
)
from .service import ActivityService
from .timephrase import parse_time_phrase, split_time_clue, split_time_range

logger = logging.getLogger(__name__)

app = typer.Typer(help="Track time spent on tagged activities.")

F = TypeVar("F", bound=Callable[..., None])


@dataclass(slots=True)
class CliState:
    settings: TrackerSettings
    service: ActivityService
    clock: Clock


def build_service(settings: TrackerSettings) -> ActivityService:
    return ActivityService(
        finished=SqliteFinishedActivityRepository(settings.db_path),
        current=SqliteCurrentActivityRepository(settings.db_path),
    )


def catch_timewatch_error(func: F) -> F:
    """Report domain and storage errors as a message and exit status 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except TimewatchError as exc:
            logger.debug("Command failed", exc_info=True)
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(code=1) from exc

    return wrapper  # type: ignore[return-value]


@app.callback(invoke_without_command=True)
@catch_timewatch_error
def main(
    ctx: typer.Context,
    directory: Optional[Path] = typer.Option(
        None,
        "--directory",
        "-d",
        path_type=Path,
        help="Directory holding the activity database.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs."),
) -> None:
    """Show the current activity when no command is given."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    clock = ctx.obj if isinstance(ctx.obj, Clock) else SystemClock()
    settings = TrackerSettings.from_directory(directory)
    logger.debug("Using activity database %s", settings.db_path)
    state = CliState(settings=settings, service=build_service(settings), clock=clock)
    ctx.obj = state

    if ctx.invoked_subcommand is None:
        current = state.service.get_current_activity()
        if current is None:
            typer.echo(NO_CURRENT_ACTIVITY)
        else:
            typer.echo(render_ongoing(current, clock.now()))


@app.command()
@catch_timewatch_error
def start(
    ctx: typer.Context,
    words: Optional[List[str]] = typer.Argument(
        None, help="Optional start time (e.g. '15min ago', '09:00') followed by tags."
    ),
) -> None:
    """Start tracking a new activity, stopping the current one."""
    state: CliState = ctx.obj
    when, tags = split_time_clue(words or [], state.clock)
    if not tags:
        raise typer.BadParameter("At least one tag is required.", param_hint="TAGS")
    started = state.service.start_activity(
        OngoingActivity(start_time=when or state.clock.now(), tags=tags)
    )
    typer.echo(render_started(started))


@app.command()
@catch_timewatch_error
def stop(
    ctx: typer.Context,
    words: Optional[List[str]] = typer.Argument(
        None, help="Optional stop time (e.g. '5 min ago'). Defaults to now."
    ),
) -> None:
    """Stop the current activity."""
    state: CliState = ctx.obj
    when = parse_time_phrase(" ".join(words), state.clock) if words else state.clock.now()
    stopped = state.service.stop_current_activity(when)
    if stopped is None:
        typer.echo(NO_CURRENT_ACTIVITY)
        return
    typer.echo(render_recorded(stopped))


@app.command("continue")
@catch_timewatch_error
def continue_(ctx: typer.Context) -> None:
    """Start again the most recently finished activity."""
    state: CliState = ctx.obj
    last = state.service.last_finished_activity()
    if last is None:
        typer.echo(NO_ACTIVITY_TO_CONTINUE)
        return
    started = state.service.start_activity(
        OngoingActivity(start_time=state.clock.now(), tags=last.tags)
    )
    typer.echo(render_started(started))


@app.command()
@catch_timewatch_error
def track(
    ctx: typer.Context,
    words: List[str] = typer.Argument(
        ..., help="Start time, end time and tags, optionally '<start> - <end> <tags>'."
    ),
) -> None:
    """Record an activity that already finished."""
    state: CliState = ctx.obj
    start_time, end_time, tags = split_time_range(words, state.clock)
    if not tags:
        raise typer.BadParameter("At least one tag is required.", param_hint="TAGS")
    tracked = state.service.track_activity(
        Activity(start_time=start_time, end_time=end_time, tags=tags)
    )
    typer.echo(render_recorded(tracked))


@app.command()
@catch_timewatch_error
def summary(
    ctx: typer.Context,
    with_id: bool = typer.Option(False, "--id", help="Show activity ids."),
    yesterday: bool = typer.Option(False, "--yesterday", help="Summarize yesterday."),
    week: bool = typer.Option(False, "--week", help="Summarize the current week."),
) -> None:
    """List finished activities that started today (or in another range)."""
    state: CliState = ctx.obj
    if yesterday and week:
        raise typer.BadParameter("--yesterday and --week are mutually exclusive.")
    if yesterday:
        range_start, range_end = state.clock.yesterday_range()
    elif week:
        range_start, range_end = state.clock.week_range()
    else:
        range_start, range_end = state.clock.today_range()
    entries = state.service.filter_activities(
        lambda entry: range_start <= entry[1].start_time <= range_end
    )
    typer.echo(
        render_summary(
            entries, with_id=with_id, tag_width=state.settings.summary_tag_width
        )
    )


@app.command()
@catch_timewatch_error
def delete(
    ctx: typer.Context,
    activity_id: int = typer.Argument(..., min=0, help="Id shown by 'summary --id'."),
) -> None:
    """Delete a finished activity."""
    state: CliState = ctx.obj
    deleted = state.service.delete_activity(activity_id)
    typer.echo(render_deleted(activity_id, deleted))
