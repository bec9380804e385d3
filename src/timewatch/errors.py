"""Exceptions raised by timewatch."""

from __future__ import annotations


class TimewatchError(Exception):
    """Base class for all errors reported to the user."""


class InvalidIntervalError(TimewatchError, ValueError):
    """An activity would end before it starts."""


class StorageError(TimewatchError):
    """The activity storage could not be read or written."""


class TimePhraseError(TimewatchError, ValueError):
    """A time phrase could not be resolved to an absolute instant."""


class TimeOutOfRangeError(TimePhraseError):
    """A recognized time phrase resolves to an unrepresentable instant."""
