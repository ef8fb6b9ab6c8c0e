"""A named, timezoned calendar of standalone events and event series."""

from __future__ import annotations

import logging
import threading
from datetime import date, datetime
from typing import Any, Iterable, Iterator
from zoneinfo import ZoneInfo

from .const import (
    DEFAULT_SCHEDULE_LIMIT,
    DEFAULT_TIMEZONE,
    IDENTITY_PROPERTIES,
    PROP_END,
    PROP_START,
    PROP_SUBJECT,
)
from .exceptions import AmbiguousError, DuplicateEventError, NotFoundError, ValidationError
from ._timezone import convert_wall_clock, get_zone
from .models import Event, coerce_property, parse_wall_clock, same_identity, sort_key
from .recurrence import RecurrenceRule
from .series import EditPlan, EditScope, EventSeries

_LOGGER = logging.getLogger(__name__)


class Calendar:
    """One calendar: standalone events plus recurring series in one zone.

    Every stored event lives in exactly one container, either the
    standalone list or a single series. No two stored events share an
    identity tuple. Mutations and multi-step reads hold the calendar lock
    for their whole duration.
    """

    def __init__(self, name: str, timezone: str = DEFAULT_TIMEZONE) -> None:
        self._name = name
        self._zone = get_zone(timezone)
        self._events: list[Event] = []
        self._series: list[EventSeries] = []
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, timezone={self.timezone!r})"

    def __len__(self) -> int:
        with self._lock:
            return len(self._events) + sum(len(s) for s in self._series)

    @property
    def name(self) -> str:
        return self._name

    def _rename(self, name: str) -> None:
        # Only CalendarRegistry.rename calls this; it keeps its keys in step.
        self._name = name

    @property
    def timezone(self) -> str:
        """IANA name of the zone wall-clock times are interpreted in."""
        return self._zone.key

    @property
    def zone(self) -> ZoneInfo:
        return self._zone

    # ------------------------------------------------------------------ #
    #  Insertion and removal
    # ------------------------------------------------------------------ #

    def add_event(self, event: Event) -> Event:
        """Store a standalone event.

        Raises:
            DuplicateEventError: If an event with the same identity exists.
        """
        with self._lock:
            self._ensure_unique([event])
            self._events.append(event)
        _LOGGER.debug("Added %r at %s to calendar %s", event.subject, event.start, self._name)
        return event

    def create_event(
        self, subject: str, start: datetime, end: datetime, **details: Any
    ) -> Event:
        return self.add_event(Event(subject, start, end, **details))

    def add_series(self, series: EventSeries) -> EventSeries:
        """Store a series.

        Raises:
            DuplicateEventError: If any occurrence collides with a stored event.
        """
        with self._lock:
            self._ensure_unique(series.events)
            self._series.append(series)
        _LOGGER.debug(
            "Added series of %d occurrence(s) on %s to calendar %s",
            len(series),
            series.weekdays,
            self._name,
        )
        return series

    def create_series(
        self,
        template: Event,
        weekdays: str,
        *,
        count: int | None = None,
        until: date | None = None,
    ) -> EventSeries:
        """Expand ``template`` on ``weekdays`` and store the resulting series."""
        rule = RecurrenceRule(weekdays, count=count, until=until)
        return self.add_series(EventSeries(template, rule))

    def remove_event(self, event: Event) -> bool:
        """Remove the stored event matching ``event``'s identity.

        Standalone events are searched first, then each series in turn.
        Returns whether anything was removed.
        """
        with self._lock:
            for index, stored in enumerate(self._events):
                if same_identity(stored, event):
                    del self._events[index]
                    _LOGGER.debug("Removed %r from calendar %s", event.subject, self._name)
                    return True
            for series in self._series:
                for stored in series.events:
                    if same_identity(stored, event):
                        series.release(stored)
                        _LOGGER.debug(
                            "Removed occurrence %r from a series in calendar %s",
                            event.subject,
                            self._name,
                        )
                        return True
        return False

    # ------------------------------------------------------------------ #
    #  Queries
    # ------------------------------------------------------------------ #

    @property
    def events(self) -> list[Event]:
        """Standalone events followed by every series' occurrences."""
        with self._lock:
            return list(self._iter_events())

    @property
    def standalone_events(self) -> list[Event]:
        with self._lock:
            return list(self._events)

    @property
    def series(self) -> list[EventSeries]:
        with self._lock:
            return list(self._series)

    def events_on_date(self, day: date) -> list[Event]:
        with self._lock:
            return [e for e in self._iter_events() if e.overlaps_date(day)]

    def events_in_range(self, first: date, last: date) -> list[Event]:
        with self._lock:
            return [e for e in self._iter_events() if e.falls_within_dates(first, last)]

    def is_busy_at(self, moment: datetime) -> bool:
        with self._lock:
            return any(e.occurs_at(moment) for e in self._iter_events())

    def find_events(
        self, subject: str, start: datetime, end: datetime | None = None
    ) -> list[Event]:
        """Return stored events matching a (subject, start[, end]) locator."""
        with self._lock:
            return [e for e in self._iter_events() if _matches(e, subject, start, end)]

    def upcoming_events(
        self, since: date, limit: int = DEFAULT_SCHEDULE_LIMIT
    ) -> list[Event]:
        """Return up to ``limit`` events starting on or after ``since``, by start."""
        threshold = datetime.combine(since, datetime.min.time())
        with self._lock:
            upcoming = sorted(
                (e for e in self._iter_events() if e.start >= threshold), key=sort_key
            )
        return upcoming[:limit]

    # ------------------------------------------------------------------ #
    #  Scoped edits
    # ------------------------------------------------------------------ #

    def edit_event(
        self, subject: str, start: datetime, end: datetime, prop: str, value: Any
    ) -> Event:
        """Edit exactly one event located by its full identity tuple."""
        return self._edit(EditScope.SINGLE, prop, value, subject, start, end)

    def edit_this_and_later(
        self, subject: str, start: datetime, prop: str, value: Any
    ) -> Event:
        """Edit the located occurrence and every later one in its series.

        Editing ``start`` promotes every touched occurrence to a standalone
        event. A standalone target is edited on its own.
        """
        return self._edit(EditScope.THIS_AND_LATER, prop, value, subject, start)

    def edit_all(self, subject: str, start: datetime, prop: str, value: Any) -> Event:
        """Edit every occurrence of the located event's series.

        Editing ``start`` dissolves the series. A standalone target is
        edited on its own.
        """
        return self._edit(EditScope.ALL, prop, value, subject, start)

    def _edit(
        self,
        scope: EditScope,
        prop: str,
        value: Any,
        subject: str,
        start: datetime,
        end: datetime | None = None,
    ) -> Event:
        value = coerce_property(prop, value)
        start = parse_wall_clock(start, PROP_START)
        if end is not None:
            end = parse_wall_clock(end, PROP_END)
        with self._lock:
            target, owner = self._locate(subject, start, end)
            if owner is None:
                plan = EditPlan(EditScope.SINGLE, prop, (target,), promote=False)
            else:
                plan = owner.plan_edit(target, scope, prop)
            self._ensure_edit_keeps_unique(plan, value)

            if owner is None:
                target.set_property(prop, value)
            else:
                self._events.extend(owner.apply_edit(plan, value))
        _LOGGER.debug(
            "Edited %s of %d event(s) (%s scope) in calendar %s",
            prop,
            len(plan.targets),
            scope.value,
            self._name,
        )
        return target

    def _locate(
        self, subject: str, start: datetime, end: datetime | None
    ) -> tuple[Event, EventSeries | None]:
        matches: list[tuple[Event, EventSeries | None]] = []
        for event in self._events:
            if _matches(event, subject, start, end):
                matches.append((event, None))
        for series in self._series:
            for event in series.events:
                if _matches(event, subject, start, end):
                    matches.append((event, series))
        if not matches:
            raise NotFoundError(f"No event {subject!r} starting at {start} in calendar {self._name}")
        if len(matches) > 1:
            raise AmbiguousError(
                f"{len(matches)} events {subject!r} start at {start} in calendar {self._name}",
                matches=[event for event, _ in matches],
            )
        return matches[0]

    # ------------------------------------------------------------------ #
    #  Timezone
    # ------------------------------------------------------------------ #

    def set_timezone(self, timezone: str) -> None:
        """Move the calendar to ``timezone``, keeping every event's instant.

        Each stored start and end is read as wall clock in the old zone and
        rewritten as wall clock in the new zone. Nothing changes if the
        move fails.

        Raises:
            ValidationError: Unknown zone, or an event whose start would no
                longer precede its end (a start inside a DST gap).
            DuplicateEventError: Two events would share an identity tuple,
                e.g. distinct instants landing on one fall-back wall clock.
        """
        new_zone = get_zone(timezone)
        with self._lock:
            old_zone = self._zone
            staged = [
                (
                    event,
                    convert_wall_clock(event.start, old_zone, new_zone),
                    convert_wall_clock(event.end, old_zone, new_zone),
                )
                for event in self._iter_events()
            ]
            for event, new_start, new_end in staged:
                if new_start >= new_end:
                    raise ValidationError(
                        f"Moving {event.subject!r} from {event.start} to {new_zone.key} "
                        f"would leave it starting at {new_start} after its end {new_end}"
                    )
            self._ensure_unique_among(
                [], [(event.subject, start, end) for event, start, end in staged]
            )
            for event, new_start, new_end in staged:
                event.set_property(PROP_START, new_start)
                event.set_property(PROP_END, new_end)
            self._zone = new_zone
        _LOGGER.debug(
            "Re-zoned calendar %s from %s to %s (%d event(s))",
            self._name,
            old_zone.key,
            new_zone.key,
            len(staged),
        )

    # ------------------------------------------------------------------ #
    #  Internals
    # ------------------------------------------------------------------ #

    def _iter_events(self) -> Iterator[Event]:
        yield from self._events
        for series in self._series:
            yield from series.events

    def _ensure_unique(self, candidates: Iterable[Event]) -> None:
        seen: dict[tuple, Event] = {e.identity: e for e in self._iter_events()}
        for candidate in candidates:
            existing = seen.get(candidate.identity)
            if existing is not None:
                raise DuplicateEventError(
                    f"Event {candidate.subject!r} from {candidate.start} to "
                    f"{candidate.end} already exists in calendar {self._name}",
                    event=existing,
                )
            seen[candidate.identity] = candidate

    def _ensure_edit_keeps_unique(self, plan: EditPlan, value: Any) -> None:
        if plan.prop not in IDENTITY_PROPERTIES:
            return
        touched = {id(event) for event in plan.targets}
        self._ensure_unique_among(
            [e for e in self._iter_events() if id(e) not in touched],
            [_edited_identity(event, plan.prop, value) for event in plan.targets],
        )

    def _ensure_unique_among(
        self, others: list[Event], identities: list[tuple]
    ) -> None:
        seen = {e.identity: e for e in others}
        for identity in identities:
            if identity in seen or identities.count(identity) > 1:
                subject, start, end = identity
                raise DuplicateEventError(
                    f"Change would duplicate {subject!r} from {start} to {end} "
                    f"in calendar {self._name}",
                    event=seen.get(identity),
                )


def _matches(event: Event, subject: str, start: datetime, end: datetime | None) -> bool:
    return event.subject == subject and event.start == start and (
        end is None or event.end == end
    )


def _edited_identity(event: Event, prop: str, value: Any) -> tuple:
    subject, start, end = event.identity
    if prop == PROP_SUBJECT:
        subject = value
    elif prop == PROP_START:
        start = value
    elif prop == PROP_END:
        end = value
    return (subject, start, end)

