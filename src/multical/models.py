"""Event data model."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any

from dateutil.parser import isoparse

from .const import (
    ALL_DAY_END,
    ALL_DAY_START,
    LAST_MINUTE_OF_DAY,
    EDITABLE_PROPERTIES,
    PROP_END,
    PROP_START,
    PROP_SUBJECT,
)
from .exceptions import ValidationError


@dataclass
class Event:
    """A single timed occurrence on a calendar.

    ``start`` and ``end`` are naive wall-clock values, interpreted in the
    zone of the owning calendar. Equality covers the identity tuple
    (subject, start, end) only; description, location and status are
    descriptive and never compared.
    """

    subject: str
    start: datetime
    end: datetime
    description: str | None = field(default=None, compare=False)
    location: str | None = field(default=None, compare=False)
    status: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        self.subject = _require_subject(self.subject)
        self.start = _require_wall_clock(self.start, PROP_START)
        self.end = _require_wall_clock(self.end, PROP_END)
        if self.start >= self.end:
            raise ValidationError(
                f"Event start {self.start.isoformat()} must precede end "
                f"{self.end.isoformat()}"
            )

    @classmethod
    def all_day(cls, subject: str, day: date, **details: Any) -> Event:
        """Construct an all-day event spanning the fixed 08:00-17:00 window."""
        return cls(
            subject,
            datetime.combine(day, ALL_DAY_START),
            datetime.combine(day, ALL_DAY_END),
            **details,
        )

    @property
    def start_date(self) -> date:
        """The date this event starts on."""
        return self.start.date()

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def identity(self) -> tuple[str, datetime, datetime]:
        """The (subject, start, end) tuple used for duplicate detection."""
        return (self.subject, self.start, self.end)

    # ------------------------------------------------------------------ #
    #  Mutation
    # ------------------------------------------------------------------ #

    def set_property(self, name: str, value: Any) -> None:
        """Update one named property in place.

        ``start`` and ``end`` accept a naive ``datetime`` or ISO-8601 text.
        The start/end ordering is only enforced at construction time.

        Raises:
            ValidationError: Unknown property name or unparsable date-time.
        """
        setattr(self, name, coerce_property(name, value))

    def clone(self) -> Event:
        """Return a deep copy, descriptive fields included."""
        return copy.deepcopy(self)

    def on_date(self, day: date) -> Event:
        """Return a copy re-dated to ``day`` keeping both clock times.

        Both start and end land on ``day``; an event that spans midnight
        therefore cannot be re-dated and raises ValidationError.
        """
        moved = Event(
            self.subject,
            datetime.combine(day, self.start.time()),
            datetime.combine(day, self.end.time()),
        )
        moved.description = self.description
        moved.location = self.location
        moved.status = self.status
        return moved

    # ------------------------------------------------------------------ #
    #  Predicates
    # ------------------------------------------------------------------ #

    def conflicts_with(self, other: Event) -> bool:
        return same_identity(self, other)

    def occurs_at(self, moment: datetime) -> bool:
        """Whether ``moment`` lies within [start, end], both ends inclusive."""
        return self.start <= moment <= self.end

    def overlaps_date(self, day: date) -> bool:
        """Whether this event touches ``day``.

        The window is one day wide on either side: the event must start
        before the midnight that ends ``day`` and end after 23:59 of the
        previous day.
        """
        return self.falls_within_dates(day, day)

    def falls_within_dates(self, first: date, last: date) -> bool:
        """Whether this event touches the inclusive range [first, last].

        Uses the same day-boundary slack as :meth:`overlaps_date`.
        """
        upper = datetime.combine(last, datetime.min.time()) + timedelta(days=1)
        lower = datetime.combine(first, LAST_MINUTE_OF_DAY) - timedelta(days=1)
        return self.start < upper and self.end > lower


def same_identity(first: Event, second: Event) -> bool:
    """Identity comparison used for duplicate rejection and lookups.

    Deliberately coarse: only subject, start and end take part.
    """
    return first.identity == second.identity


def sort_key(event: Event) -> tuple[datetime, datetime, str]:
    """Chronological ordering key: start, then end, then subject."""
    return (event.start, event.end, event.subject)


def parse_wall_clock(value: Any, name: str = PROP_START) -> datetime:
    """Parse ``value`` into a naive ``datetime``.

    Raises:
        ValidationError: If the value is not a date-time or carries a zone.
    """
    if isinstance(value, str):
        try:
            value = isoparse(value.strip())
        except (ValueError, OverflowError) as err:
            raise ValidationError(f"Invalid date-time for {name}: {value!r}") from err
    return _require_wall_clock(value, name)


def coerce_property(name: str, value: Any) -> Any:
    """Validate and normalise a property value before it is applied."""
    if name not in EDITABLE_PROPERTIES:
        raise ValidationError(f"Unknown property: {name}")
    if name in (PROP_START, PROP_END):
        return parse_wall_clock(value, name)
    if name == PROP_SUBJECT:
        return _require_subject(value)
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"Property {name} expects text, got {type(value).__name__}")
    return value


def _require_subject(value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"Subject must be text, got {type(value).__name__}")
    return value


def _require_wall_clock(value: Any, name: str) -> datetime:
    if not isinstance(value, datetime):
        raise ValidationError(
            f"Expected datetime for {name}, got {type(value).__name__}"
        )
    if value.tzinfo is not None:
        raise ValidationError(f"{name} must be a wall-clock value without a zone")
    return value
