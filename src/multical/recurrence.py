"""Weekday-mask recurrence rules and occurrence generation."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Iterable

from dateutil.rrule import DAILY, FR, MO, SA, SU, TH, TU, WE, rrule, weekday

from .const import MAX_OCCURRENCES, WEEKDAY_CODES
from .exceptions import ValidationError
from .models import Event

_LOGGER = logging.getLogger(__name__)

_RRULE_WEEKDAYS: dict[str, weekday] = dict(
    zip(WEEKDAY_CODES, (MO, TU, WE, TH, FR, SA, SU))
)


def parse_weekdays(mask: str | Iterable[str]) -> str:
    """Validate a weekday mask and return it in canonical Monday-first order.

    ``mask`` is a string of weekday symbols (``"MWF"``) or an iterable of
    single symbols. ``M T W R F S U`` stand for Monday through Sunday.

    Raises:
        ValidationError: If the mask is empty or holds an unknown symbol.
    """
    symbols = list(mask) if not isinstance(mask, str) else list(mask.strip())
    if not symbols:
        raise ValidationError("Weekday mask cannot be empty")
    unknown = [s for s in symbols if s not in _RRULE_WEEKDAYS]
    if unknown:
        raise ValidationError(
            f"Invalid weekday symbol(s) {''.join(map(str, unknown))!r}; "
            f"expected a subset of {WEEKDAY_CODES!r}"
        )
    return "".join(code for code in WEEKDAY_CODES if code in symbols)


@dataclass(frozen=True)
class RecurrenceRule:
    """A weekday mask plus exactly one termination condition.

    Attributes:
        weekdays: Canonical weekday mask, e.g. ``"TR"``.
        count: Number of occurrences to emit (0 is allowed).
        until: Last date an occurrence may fall on, inclusive.
    """

    weekdays: str
    count: int | None = None
    until: date | None = None
    max_occurrences: int = field(default=MAX_OCCURRENCES, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "weekdays", parse_weekdays(self.weekdays))
        if (self.count is None) == (self.until is None):
            raise ValidationError("Recurrence needs exactly one of count or until")
        if self.count is not None:
            if isinstance(self.count, bool) or not isinstance(self.count, int):
                raise ValidationError(f"Repeat count must be an integer, got {self.count!r}")
            if self.count < 0:
                raise ValidationError(f"Repeat count cannot be negative: {self.count}")
            if self.count > self.max_occurrences:
                raise ValidationError(
                    f"Repeat count {self.count} exceeds the limit of "
                    f"{self.max_occurrences} occurrences"
                )
        if self.until is not None:
            if isinstance(self.until, datetime):
                object.__setattr__(self, "until", self.until.date())
            elif not isinstance(self.until, date):
                raise ValidationError(f"Cutoff must be a date, got {self.until!r}")

    @property
    def weekday_numbers(self) -> frozenset[int]:
        """The mask as ``date.weekday()`` numbers (Monday is 0)."""
        return frozenset(WEEKDAY_CODES.index(code) for code in self.weekdays)

    def occurrence_dates(self, first: date) -> list[date]:
        """Return every mask day from ``first`` onward, honouring termination.

        A cutoff before ``first`` yields no dates.

        Raises:
            ValidationError: If the walk exceeds ``max_occurrences``.
        """
        if self.count == 0:
            return []
        dtstart = datetime.combine(first, time.min)
        until = (
            datetime.combine(self.until, time.max) if self.until is not None else None
        )
        rule = rrule(
            DAILY,
            dtstart=dtstart,
            byweekday=[_RRULE_WEEKDAYS[code] for code in self.weekdays],
            count=self.count,
            until=until,
        )
        dates = [dt.date() for dt in itertools.islice(rule, self.max_occurrences + 1)]
        if len(dates) > self.max_occurrences:
            raise ValidationError(
                f"Recurrence from {first} until {self.until} produces more than "
                f"{self.max_occurrences} occurrences"
            )
        return dates

    def expand(self, template: Event) -> list[Event]:
        """Generate one re-dated clone of ``template`` per occurrence.

        The walk starts on the template's start date; each clone keeps the
        template's start and end clock times.
        """
        occurrences = [template.on_date(day) for day in self.occurrence_dates(template.start_date)]
        _LOGGER.debug(
            "Expanded %r on %s into %d occurrence(s)",
            template.subject,
            self.weekdays,
            len(occurrences),
        )
        return occurrences
