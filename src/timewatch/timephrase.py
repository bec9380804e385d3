"""Resolve time phrases such as ``15min ago`` or ``09:00`` to instants."""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Optional, Sequence

from .clock import Clock
from .errors import TimeOutOfRangeError, TimePhraseError
from .models import Tag, parse_instant

_UNIT_SECONDS: dict[str, int] = {
    "s": 1,
    "sec": 1,
    "secs": 1,
    "second": 1,
    "seconds": 1,
    "m": 60,
    "min": 60,
    "mins": 60,
    "minute": 60,
    "minutes": 60,
    "h": 3600,
    "hr": 3600,
    "hrs": 3600,
    "hour": 3600,
    "hours": 3600,
    "d": 86400,
    "day": 86400,
    "days": 86400,
}

_AGO_PATTERN = re.compile(r"^(\d+)\s*([a-z]+)\s+ago$", re.IGNORECASE)
_CLOCK_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")
_DATETIME_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}$")

RANGE_SEPARATOR = "-"


def parse_time_phrase(phrase: str, clock: Clock) -> datetime:
    """Resolve ``phrase`` relative to ``clock``.

    Accepted forms are ``now``, ``<N><unit> ago`` (with or without a space
    before the unit), ``HH:MM[:SS]`` for today and ``YYYY-MM-DDTHH:MM:SS``.
    """
    text = re.sub(r"\s{2,}", " ", phrase).strip()
    if text.lower() == "now":
        return clock.now()

    if _DATETIME_PATTERN.match(text):
        try:
            return parse_instant(text)
        except ValueError as exc:
            raise TimePhraseError(f"Invalid date and time: {text!r}") from exc

    match = _CLOCK_PATTERN.match(text)
    if match:
        hour, minute, second = (int(part or 0) for part in match.groups())
        try:
            return clock.now().replace(hour=hour, minute=minute, second=second)
        except ValueError as exc:
            raise TimePhraseError(f"Invalid time of day: {text!r}") from exc

    match = _AGO_PATTERN.match(text)
    if match:
        amount, unit = match.groups()
        seconds = _UNIT_SECONDS.get(unit.lower())
        if seconds is not None:
            try:
                return clock.now() - timedelta(seconds=int(amount) * seconds)
            except (OverflowError, ValueError) as exc:
                raise TimeOutOfRangeError(f"Time phrase out of range: {text!r}") from exc

    raise TimePhraseError(f"Unrecognized time phrase: {text!r}")


def split_time_clue(
    words: Sequence[str], clock: Clock
) -> tuple[Optional[datetime], list[Tag]]:
    """Split the longest leading time phrase from ``words``.

    Returns the resolved instant (``None`` if no leading phrase resolves)
    and the remaining words, which are the tags.

    Raises:
        TimeOutOfRangeError: if a leading phrase is recognized but cannot
            be resolved.
    """
    for length in range(len(words), 0, -1):
        try:
            when = parse_time_phrase(" ".join(words[:length]), clock)
        except TimeOutOfRangeError:
            raise
        except TimePhraseError:
            continue
        return when, list(words[length:])
    return None, list(words)


def _leading_separator_index(words: Sequence[str], clock: Clock) -> Optional[int]:
    """Index of the first ``-`` if the words before it form a time phrase."""
    if RANGE_SEPARATOR not in words:
        return None
    index = list(words).index(RANGE_SEPARATOR)
    try:
        parse_time_phrase(" ".join(words[:index]), clock)
    except TimeOutOfRangeError:
        raise
    except TimePhraseError:
        return None
    return index


def split_time_range(
    words: Sequence[str], clock: Clock
) -> tuple[datetime, datetime, list[Tag]]:
    """Resolve ``<start> [-] <end> <tags...>`` into two instants and tags.

    A ``-`` only separates the bounds when it directly follows the start
    phrase; elsewhere it is an ordinary tag.
    """
    index = _leading_separator_index(words, clock)
    if index is not None:
        start = parse_time_phrase(" ".join(words[:index]), clock)
        rest = list(words[index + 1 :])
    else:
        start, rest = split_time_clue(words, clock)
        if start is None:
            raise TimePhraseError("Missing start time.")
    end, tags = split_time_clue(rest, clock)
    if end is None:
        raise TimePhraseError("Missing end time.")
    return start, end, tags
