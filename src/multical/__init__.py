"""In-memory engine for timezoned calendars, recurring series and copies."""

from .const import __version__
from ._copy import CopyReport, copy_event, copy_events_in_range, copy_events_on_date
from .calendar import Calendar
from .exceptions import (
    AmbiguousError,
    CalendarError,
    ConflictError,
    DuplicateEventError,
    NotFoundError,
    ValidationError,
)
from .models import Event, same_identity
from .recurrence import RecurrenceRule, parse_weekdays
from .registry import CalendarRegistry
from .series import EditScope, EventSeries

__all__ = [
    "__version__",
    "CalendarRegistry",
    "Calendar",
    "Event",
    "EventSeries",
    "EditScope",
    "RecurrenceRule",
    "CopyReport",
    "copy_event",
    "copy_events_in_range",
    "copy_events_on_date",
    "parse_weekdays",
    "same_identity",
    "AmbiguousError",
    "CalendarError",
    "ConflictError",
    "DuplicateEventError",
    "NotFoundError",
    "ValidationError",
]
