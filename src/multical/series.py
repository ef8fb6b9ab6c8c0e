"""Recurring event series and scoped edit propagation."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterator

from .const import PROP_START
from .exceptions import NotFoundError
from .models import Event
from .recurrence import RecurrenceRule

_LOGGER = logging.getLogger(__name__)


class EditScope(enum.Enum):
    """How far an edit to one occurrence reaches."""

    SINGLE = "single"
    THIS_AND_LATER = "this_and_later"
    ALL = "all"


@dataclass(frozen=True)
class EditPlan:
    """The occurrences an edit will touch, resolved before anything mutates.

    Attributes:
        scope: The requested edit scope.
        prop: The property being edited.
        targets: Occurrences to mutate, in series order.
        promote: Whether the targets leave the series after mutation.
    """

    scope: EditScope
    prop: str
    targets: tuple[Event, ...]
    promote: bool


class EventSeries:
    """An ordered list of occurrences generated from a template and a rule.

    Occurrences are generated once, at construction. Afterwards they are
    edited in place or released to the owning calendar; membership is
    tracked by object identity, never by equality.
    """

    def __init__(self, template: Event, rule: RecurrenceRule) -> None:
        self._rule = rule
        self._events: list[Event] = rule.expand(template)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(weekdays={self.weekdays!r}, "
            f"occurrences={len(self._events)})"
        )

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Event]:
        return iter(tuple(self._events))

    def __contains__(self, event: object) -> bool:
        return any(member is event for member in self._events)

    @property
    def rule(self) -> RecurrenceRule:
        return self._rule

    @property
    def weekdays(self) -> str:
        return self._rule.weekdays

    @property
    def events(self) -> tuple[Event, ...]:
        """Snapshot of the current occurrences in series order."""
        return tuple(self._events)

    @property
    def is_dissolved(self) -> bool:
        """True once every occurrence has been promoted out."""
        return not self._events

    # ------------------------------------------------------------------ #
    #  Lookup
    # ------------------------------------------------------------------ #

    def find(self, subject: str, start: datetime) -> list[Event]:
        """Return occurrences matching ``subject`` and ``start``."""
        return [e for e in self._events if e.subject == subject and e.start == start]

    def contains(self, subject: str, start: datetime) -> bool:
        return bool(self.find(subject, start))

    def index_of(self, event: Event) -> int:
        for index, member in enumerate(self._events):
            if member is event:
                return index
        raise NotFoundError(f"Event {event.subject!r} at {event.start} is not in this series")

    # ------------------------------------------------------------------ #
    #  Edits
    # ------------------------------------------------------------------ #

    def plan_edit(self, target: Event, scope: EditScope, prop: str) -> EditPlan:
        """Resolve which occurrences an edit of ``target`` reaches.

        SINGLE touches only the target and never changes membership.
        THIS_AND_LATER touches the target and every later occurrence; ALL
        touches every occurrence. For those two scopes a ``start`` edit
        also promotes the touched occurrences out of the series.

        Raises:
            NotFoundError: If ``target`` is not a member of this series.
        """
        index = self.index_of(target)
        if scope is EditScope.SINGLE:
            return EditPlan(scope, prop, (target,), promote=False)
        if scope is EditScope.THIS_AND_LATER:
            targets = tuple(self._events[index:])
        else:
            targets = tuple(self._events)
        return EditPlan(scope, prop, targets, promote=prop == PROP_START)

    def apply_edit(self, plan: EditPlan, value: Any) -> list[Event]:
        """Mutate the planned occurrences and return the promoted ones.

        ``value`` must already be validated for ``plan.prop``; promoted
        events are no longer members when this returns and the caller
        takes ownership of them.
        """
        for event in plan.targets:
            event.set_property(plan.prop, value)
        if not plan.promote:
            return []
        if plan.scope is EditScope.ALL:
            released = self.dissolve()
        else:
            released = [self.release(event) for event in plan.targets]
        _LOGGER.debug(
            "Promoted %d occurrence(s) of %r out of series (%d left)",
            len(released),
            released[0].subject if released else None,
            len(self._events),
        )
        return released

    def release(self, event: Event) -> Event:
        """Remove ``event`` from the series and hand it to the caller."""
        return self._events.pop(self.index_of(event))

    def dissolve(self) -> list[Event]:
        """Release every occurrence, leaving the series empty."""
        released, self._events = self._events, []
        return released
