"""Copying events between calendars."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo

from .calendar import Calendar
from .const import PROP_END, PROP_START
from .exceptions import AmbiguousError, DuplicateEventError, NotFoundError, ValidationError
from ._timezone import convert_wall_clock
from .models import Event, parse_wall_clock

_LOGGER = logging.getLogger(__name__)


@dataclass
class CopyReport:
    """Outcome of a batch copy.

    Attributes:
        copied: Events inserted into the target calendar.
        skipped: Shifted copies rejected because the target already held
            an event with the same identity.
    """

    copied: list[Event] = field(default_factory=list)
    skipped: list[Event] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.copied)


def copy_event(
    source: Calendar,
    target: Calendar,
    subject: str,
    source_start: Any,
    new_start: Any,
) -> Event:
    """Copy one event, located by subject and start, to ``new_start``.

    ``new_start`` is used verbatim as wall clock in the target calendar;
    no zone conversion is applied. The duration is preserved.

    Raises:
        NotFoundError: No event matches the locator.
        AmbiguousError: More than one event matches the locator.
        DuplicateEventError: The target already holds the copied identity.
    """
    source_start = parse_wall_clock(source_start, PROP_START)
    new_start = parse_wall_clock(new_start, PROP_START)
    matches = source.find_events(subject, source_start)
    if not matches:
        raise NotFoundError(
            f"No event {subject!r} starting at {source_start} in calendar {source.name}"
        )
    if len(matches) > 1:
        raise AmbiguousError(
            f"{len(matches)} events {subject!r} start at {source_start} in calendar {source.name}",
            matches=matches,
        )
    copied = _retimed(matches[0], new_start)
    target.add_event(copied)
    _LOGGER.debug(
        "Copied %r from %s@%s to %s@%s", subject, source.name, source_start, target.name, new_start
    )
    return copied


def copy_events_on_date(
    source: Calendar, target: Calendar, day: date, destination: date
) -> CopyReport:
    """Copy every event touching ``day`` so that it lands on ``destination``.

    Each start is shifted by the day offset, read in the source zone and
    rewritten as wall clock in the target zone.
    """
    return _copy_shifted(source, target, source.events_on_date(day), day, destination)


def copy_events_in_range(
    source: Calendar, target: Calendar, first: date, last: date, destination: date
) -> CopyReport:
    """Copy every event in [first, last], anchoring ``first`` on ``destination``.

    Raises:
        ValidationError: If ``first`` is after ``last``.
    """
    if first > last:
        raise ValidationError(f"Range start {first} is after range end {last}")
    return _copy_shifted(
        source, target, source.events_in_range(first, last), first, destination
    )


def _copy_shifted(
    source: Calendar,
    target: Calendar,
    events: list[Event],
    anchor: date,
    destination: date,
) -> CopyReport:
    offset = destination - anchor
    report = CopyReport()
    for event in events:
        start = shifted_start(event, offset, source.zone, target.zone)
        copied = _retimed(event, start)
        try:
            target.add_event(copied)
        except DuplicateEventError:
            _LOGGER.warning(
                "Skipping copy of %r to %s: calendar %s already holds it",
                event.subject,
                start,
                target.name,
            )
            report.skipped.append(copied)
        else:
            report.copied.append(copied)
    _LOGGER.debug(
        "Copied %d event(s) from %s to %s (%d skipped)",
        len(report.copied),
        source.name,
        target.name,
        len(report.skipped),
    )
    return report


def shifted_start(
    event: Event, offset: timedelta, from_zone: ZoneInfo, to_zone: ZoneInfo
) -> datetime:
    """Move ``event``'s start by whole days, then into ``to_zone`` wall clock."""
    moved = datetime.combine(event.start_date + timedelta(days=offset.days), event.start.time())
    return convert_wall_clock(moved, from_zone, to_zone)


def _retimed(event: Event, start: datetime) -> Event:
    copied = event.clone()
    copied.set_property(PROP_START, start)
    copied.set_property(PROP_END, start + event.duration)
    return copied
