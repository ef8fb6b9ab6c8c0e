"""Exception hierarchy for the multical calendar engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .models import Event


class CalendarError(Exception):
    """Base exception for all calendar engine errors."""


class ValidationError(CalendarError):
    """Malformed input: bad interval, weekday mask, zone or property."""


class ConflictError(CalendarError):
    """An insert or rename would break a uniqueness invariant."""


class DuplicateEventError(ConflictError):
    """An event with the same identity tuple already exists.

    Attributes:
        event: The stored event that the new one collides with.
    """

    def __init__(self, message: str, *, event: Event | None = None) -> None:
        super().__init__(message)
        self.event = event


class NotFoundError(CalendarError):
    """Unknown calendar, event or series locator."""


class AmbiguousError(CalendarError):
    """A locator matched more than one event.

    Attributes:
        matches: The events the locator resolved to.
    """

    def __init__(self, message: str, *, matches: Sequence[Event] = ()) -> None:
        super().__init__(message)
        self.matches = tuple(matches)
