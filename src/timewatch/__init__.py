"""Command-line tracking of time spent on tagged activities."""

__version__ = "0.1.0"
