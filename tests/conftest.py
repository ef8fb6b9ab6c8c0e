"""Shared fixtures for the calendar engine tests."""

from __future__ import annotations

from datetime import datetime

import pytest

from multical import Calendar, CalendarRegistry, Event

NEW_YORK = "America/New_York"
LOS_ANGELES = "America/Los_Angeles"


@pytest.fixture
def registry() -> CalendarRegistry:
    """A registry holding cal1 (New York, selected) and cal2 (Los Angeles)."""
    reg = CalendarRegistry()
    reg.create("cal1", NEW_YORK)
    reg.create("cal2", LOS_ANGELES)
    reg.select("cal1")
    return reg


@pytest.fixture
def calendar() -> Calendar:
    return Calendar("work", NEW_YORK)


@pytest.fixture
def meeting() -> Event:
    return Event(
        "Meeting",
        datetime(2024, 3, 15, 10, 0),
        datetime(2024, 3, 15, 11, 0),
        description="Weekly sync",
        location="Room 5",
        status="confirmed",
    )
