"""Logging utilities."""

from .console import configure_logging
from .journal import DecisionEvent, JsonlJournal, utc_timestamp

__all__ = ["DecisionEvent", "JsonlJournal", "configure_logging", "utc_timestamp"]
