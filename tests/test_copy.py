"""Tests for copying events between calendars."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from multical import (
    AmbiguousError,
    DuplicateEventError,
    NotFoundError,
    ValidationError,
    copy_events_on_date,
)


@pytest.fixture
def cal1(registry):
    return registry.get("cal1")


@pytest.fixture
def cal2(registry):
    return registry.get("cal2")


# =========================================================================== #
#  1. Single event by subject and start
# =========================================================================== #


class TestCopyEvent:
    def test_new_start_taken_verbatim_without_zone_conversion(self, registry, cal1, cal2):
        """Single copies keep the caller's wall clock, unlike date/range copies."""
        cal1.create_event(
            "Review", datetime(2024, 3, 15, 10, 0), datetime(2024, 3, 15, 11, 30), location="HQ"
        )
        copied = registry.copy_event(
            "Review", datetime(2024, 3, 15, 10, 0), "cal2", datetime(2024, 3, 20, 10, 0)
        )
        assert copied.start == datetime(2024, 3, 20, 10, 0)
        assert copied.end == datetime(2024, 3, 20, 11, 30)
        assert copied.location == "HQ"
        assert cal2.events == [copied]
        assert len(cal1) == 1

    def test_accepts_iso_text(self, registry, cal1, cal2):
        cal1.create_event("Review", datetime(2024, 3, 15, 10), datetime(2024, 3, 15, 11))
        registry.copy_event("Review", "2024-03-15T10:00", "cal2", "2024-04-01T09:00")
        assert cal2.events[0].start == datetime(2024, 4, 1, 9, 0)

    def test_not_found(self, registry, cal2):
        with pytest.raises(NotFoundError):
            registry.copy_event("Ghost", datetime(2024, 3, 15, 10), "cal2", datetime(2024, 3, 16, 10))
        assert cal2.events == []

    def test_ambiguous(self, registry, cal1, cal2):
        start = datetime(2024, 3, 15, 10)
        cal1.create_event("Call", start, start + timedelta(minutes=30))
        cal1.create_event("Call", start, start + timedelta(hours=1))
        with pytest.raises(AmbiguousError):
            registry.copy_event("Call", start, "cal2", datetime(2024, 3, 16, 10))
        assert cal2.events == []

    def test_conflict_at_target(self, registry, cal1, cal2):
        cal1.create_event("Review", datetime(2024, 3, 15, 10), datetime(2024, 3, 15, 11))
        cal2.create_event("Review", datetime(2024, 3, 16, 10), datetime(2024, 3, 16, 11))
        with pytest.raises(DuplicateEventError):
            registry.copy_event("Review", datetime(2024, 3, 15, 10), "cal2", datetime(2024, 3, 16, 10))
        assert len(cal2) == 1

    def test_unknown_target_checked_first(self, registry):
        with pytest.raises(NotFoundError, match="nowhere"):
            registry.copy_event("Ghost", datetime(2024, 3, 15, 10), "nowhere", datetime(2024, 3, 16))

    def test_copies_series_occurrence_as_standalone(self, registry, cal1, cal2):
        template = cal1.create_event("Gym", datetime(2024, 3, 15, 7), datetime(2024, 3, 15, 8))
        cal1.remove_event(template)
        cal1.create_series(template, "MW", count=2)
        registry.copy_event("Gym", datetime(2024, 3, 18, 7), "cal2", datetime(2024, 3, 18, 6))
        assert cal2.series == []
        assert cal2.standalone_events[0].start == datetime(2024, 3, 18, 6)


# =========================================================================== #
#  2. Events on a date
# =========================================================================== #


class TestCopyOnDate:
    def test_new_york_to_los_angeles_scenario(self, registry, cal1, cal2):
        cal1.create_event("Sync", datetime(2024, 3, 15, 10, 0), datetime(2024, 3, 15, 11, 0))
        report = registry.copy_events_on_date(date(2024, 3, 15), "cal2", date(2024, 3, 15))
        assert len(report) == 1
        copied = cal2.events[0]
        assert copied.start == datetime(2024, 3, 15, 7, 0)
        assert copied.end == datetime(2024, 3, 15, 8, 0)

    def test_shift_to_other_day(self, registry, cal1, cal2):
        cal1.create_event("Sync", datetime(2024, 3, 15, 10, 0), datetime(2024, 3, 15, 11, 0))
        cal1.create_event("Lunch", datetime(2024, 3, 15, 12, 0), datetime(2024, 3, 15, 13, 0))
        cal1.create_event("Other day", datetime(2024, 3, 18, 12), datetime(2024, 3, 18, 13))
        registry.copy_events_on_date(date(2024, 3, 15), "cal2", date(2024, 4, 2))
        starts = sorted(e.start for e in cal2.events)
        assert starts == [datetime(2024, 4, 2, 7, 0), datetime(2024, 4, 2, 9, 0)]

    def test_same_zone_copy_keeps_clock(self, registry, cal1):
        registry.create("cal3", "America/New_York")
        cal1.create_event("Sync", datetime(2024, 3, 15, 10), datetime(2024, 3, 15, 11))
        registry.copy_events_on_date(date(2024, 3, 15), "cal3", date(2024, 3, 22))
        assert registry.get("cal3").events[0].start == datetime(2024, 3, 22, 10)

    def test_conflicting_event_skipped_others_copied(self, registry, cal1, cal2):
        cal1.create_event("Sync", datetime(2024, 3, 15, 10), datetime(2024, 3, 15, 11))
        cal1.create_event("Lunch", datetime(2024, 3, 15, 12), datetime(2024, 3, 15, 13))
        existing = cal2.create_event("Sync", datetime(2024, 3, 15, 7), datetime(2024, 3, 15, 8))
        report = registry.copy_events_on_date(date(2024, 3, 15), "cal2", date(2024, 3, 15))
        assert [e.subject for e in report.copied] == ["Lunch"]
        assert [e.subject for e in report.skipped] == ["Sync"]
        assert len(cal2) == 2
        assert cal2.standalone_events[0] is existing

    def test_includes_series_occurrences(self, registry, cal1, cal2):
        template = cal1.create_event("Gym", datetime(2024, 3, 15, 7), datetime(2024, 3, 15, 8))
        cal1.remove_event(template)
        cal1.create_series(template, "MW", count=2)
        report = registry.copy_events_on_date(date(2024, 3, 20), "cal2", date(2024, 3, 21))
        assert [e.start for e in report.copied] == [datetime(2024, 3, 21, 4, 0)]

    def test_works_on_explicit_calendars(self, cal1, cal2):
        cal1.create_event("Sync", datetime(2024, 3, 15, 10), datetime(2024, 3, 15, 11))
        report = copy_events_on_date(cal2, cal1, date(2024, 3, 15), date(2024, 3, 15))
        assert report.copied == []

    def test_spring_forward_between_anchor_and_destination(self, registry, cal1):
        # 10:00 EST is 16:00 in Berlin, 10:00 EDT three days later is 15:00
        berlin = registry.create("cal3", "Europe/Berlin")
        cal1.create_event("Sync", datetime(2024, 3, 8, 10, 0), datetime(2024, 3, 8, 11, 0))
        registry.copy_events_on_date(date(2024, 3, 8), "cal3", date(2024, 3, 11))
        copied = berlin.events[0]
        assert copied.start == datetime(2024, 3, 11, 15, 0)
        assert copied.end - copied.start == timedelta(hours=1)

    def test_fall_back_between_anchor_and_destination(self, registry, cal1):
        # 10:00 EST on 2024-11-04 is 15:00Z, 16:00 CET
        berlin = registry.create("cal3", "Europe/Berlin")
        cal1.create_event("Sync", datetime(2024, 11, 1, 10, 0), datetime(2024, 11, 1, 11, 30))
        registry.copy_events_on_date(date(2024, 11, 1), "cal3", date(2024, 11, 4))
        copied = berlin.events[0]
        assert copied.start == datetime(2024, 11, 4, 16, 0)
        assert copied.end == datetime(2024, 11, 4, 17, 30)

    def test_destination_in_repeated_hour_has_fold_cleared(self, registry):
        # 06:30Z is the second 01:30 in New York on 2024-11-03
        utc = registry.create("utc", "UTC")
        registry.select("utc")
        utc.create_event("Late", datetime(2024, 11, 2, 6, 30), datetime(2024, 11, 2, 7, 0))
        report = registry.copy_events_on_date(date(2024, 11, 2), "cal1", date(2024, 11, 3))
        copied = report.copied[0]
        assert copied.start == datetime(2024, 11, 3, 1, 30)
        assert copied.start.fold == 0
        assert copied.end == datetime(2024, 11, 3, 2, 0)


# =========================================================================== #
#  3. Events in a range
# =========================================================================== #


class TestCopyInRange:
    def test_offset_anchored_on_range_start(self, registry, cal1, cal2):
        cal1.create_event("A", datetime(2024, 3, 15, 9), datetime(2024, 3, 15, 10))
        cal1.create_event("B", datetime(2024, 3, 17, 9), datetime(2024, 3, 17, 10))
        cal1.create_event("Outside", datetime(2024, 3, 25, 9), datetime(2024, 3, 25, 10))
        report = registry.copy_events_in_range(
            date(2024, 3, 15), date(2024, 3, 18), "cal2", date(2024, 4, 1)
        )
        assert {(e.subject, e.start) for e in report.copied} == {
            ("A", datetime(2024, 4, 1, 6, 0)),
            ("B", datetime(2024, 4, 3, 6, 0)),
        }

    def test_descriptive_fields_copied(self, registry, cal1, cal2):
        cal1.create_event(
            "A", datetime(2024, 3, 15, 9), datetime(2024, 3, 15, 10), description="notes", status="tentative"
        )
        registry.copy_events_in_range(date(2024, 3, 15), date(2024, 3, 15), "cal2", date(2024, 3, 15))
        copied = cal2.events[0]
        assert (copied.description, copied.status) == ("notes", "tentative")

    def test_inverted_range_fails(self, registry, cal2):
        with pytest.raises(ValidationError):
            registry.copy_events_in_range(
                date(2024, 3, 18), date(2024, 3, 15), "cal2", date(2024, 4, 1)
            )

    def test_requires_selected_source(self):
        from multical import CalendarRegistry

        reg = CalendarRegistry()
        reg.create("only")
        with pytest.raises(NotFoundError):
            reg.copy_events_in_range(date(2024, 3, 1), date(2024, 3, 2), "only", date(2024, 3, 3))
