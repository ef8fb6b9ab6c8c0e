"""Registry of named calendars and the currently selected one."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterator

from ._copy import CopyReport, copy_event, copy_events_in_range, copy_events_on_date
from ._timezone import get_zone
from .calendar import Calendar
from .const import DEFAULT_TIMEZONE
from .exceptions import ConflictError, NotFoundError, ValidationError
from .models import Event

_LOGGER = logging.getLogger(__name__)


class CalendarRegistry:
    """Owns calendars by unique name and tracks which one is selected.

    The selection lives on the registry instance, so independent
    registries never share state.

    Usage::

        registry = CalendarRegistry()
        registry.create("work", "America/New_York")
        work = registry.select("work")
        work.create_event("Standup", start, end)
    """

    def __init__(self, *, default_timezone: str = DEFAULT_TIMEZONE) -> None:
        self._default_timezone = get_zone(default_timezone).key
        self._calendars: dict[str, Calendar] = {}
        self._selected: str | None = None

    def __contains__(self, name: object) -> bool:
        return name in self._calendars

    def __len__(self) -> int:
        return len(self._calendars)

    def __iter__(self) -> Iterator[Calendar]:
        return iter(list(self._calendars.values()))

    # ------------------------------------------------------------------ #
    #  Calendars
    # ------------------------------------------------------------------ #

    def create(self, name: str, timezone: str | None = None) -> Calendar:
        """Create and register a calendar.

        Raises:
            ValidationError: Empty name or unknown zone.
            ConflictError: A calendar with ``name`` already exists.
        """
        _require_name(name)
        if name in self._calendars:
            raise ConflictError(f"Calendar {name!r} already exists")
        calendar = Calendar(
            name, timezone if timezone is not None else self._default_timezone
        )
        self._calendars[name] = calendar
        _LOGGER.debug("Created calendar %s in %s", name, calendar.timezone)
        return calendar

    def get(self, name: str) -> Calendar:
        """Raises NotFoundError if no calendar is called ``name``."""
        try:
            return self._calendars[name]
        except KeyError:
            raise NotFoundError(f"No calendar named {name!r}") from None

    def calendars(self) -> list[Calendar]:
        return list(self._calendars.values())

    def names(self) -> list[str]:
        return list(self._calendars)

    def select(self, name: str) -> Calendar:
        calendar = self.get(name)
        self._selected = name
        _LOGGER.debug("Selected calendar %s", name)
        return calendar

    @property
    def selected_name(self) -> str | None:
        return self._selected

    @property
    def active(self) -> Calendar:
        """The selected calendar.

        Raises:
            NotFoundError: If no calendar is selected.
        """
        if self._selected is None:
            raise NotFoundError("No calendar is selected")
        return self._calendars[self._selected]

    def rename(self, old_name: str, new_name: str) -> Calendar:
        """Rename a calendar, carrying the selection along with it.

        Raises:
            NotFoundError: ``old_name`` is unknown.
            ConflictError: ``new_name`` belongs to a different calendar.
        """
        calendar = self.get(old_name)
        _require_name(new_name)
        if new_name == old_name:
            return calendar
        if new_name in self._calendars:
            raise ConflictError(f"Calendar {new_name!r} already exists")
        del self._calendars[old_name]
        calendar._rename(new_name)
        self._calendars[new_name] = calendar
        if self._selected == old_name:
            self._selected = new_name
        _LOGGER.debug("Renamed calendar %s to %s", old_name, new_name)
        return calendar

    def set_timezone(self, name: str, timezone: str) -> Calendar:
        calendar = self.get(name)
        calendar.set_timezone(timezone)
        return calendar

    # ------------------------------------------------------------------ #
    #  Copying from the selected calendar
    # ------------------------------------------------------------------ #

    def copy_event(
        self, subject: str, source_start: Any, target_name: str, new_start: Any
    ) -> Event:
        """Copy one event from the selected calendar; see :func:`copy_event`."""
        target = self.get(target_name)
        return copy_event(self.active, target, subject, source_start, new_start)

    def copy_events_on_date(
        self, day: date, target_name: str, destination: date
    ) -> CopyReport:
        target = self.get(target_name)
        return copy_events_on_date(self.active, target, day, destination)

    def copy_events_in_range(
        self, first: date, last: date, target_name: str, destination: date
    ) -> CopyReport:
        target = self.get(target_name)
        return copy_events_in_range(self.active, target, first, last, destination)


def _require_name(name: Any) -> None:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(f"Invalid calendar name: {name!r}")
