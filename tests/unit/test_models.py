# File: tests/unit/test_models.py
"""
Unit tests for data models.
Tests all dataclasses and their methods.
"""

import pytest
from datetime import date, datetime

from promptly.models import (
    BatchResult,
    CalendarEvent,
    FormatError,
    Interval,
    Outcome,
    PlacementResult,
    RestrictedRange,
    SearchOutcome,
    SearchState,
    Task,
    TransportError,
    event_from_dict,
    restricted_range_from_dict,
    task_from_dict,
)
from conftest import PLAN_DAY, at, event, interval, task


# ==================== Interval Tests ====================

class TestInterval:
    """Tests for Interval dataclass."""

    def test_interval_creation(self):
        """Test basic interval creation and duration."""
        span = Interval(at(9), at(10, 30))

        assert span.start == at(9)
        assert span.end == at(10, 30)
        assert span.duration_minutes() == 90

    def test_empty_interval_raises_error(self):
        """Test that end must be after start."""
        with pytest.raises(ValueError, match="must be after start"):
            Interval(at(9), at(9))

    def test_shifted_keeps_duration(self):
        """Test forward shifting."""
        shifted = Interval(at(23), at(23, 30)).shifted(60)

        assert shifted.start == datetime(2025, 11, 19, 0, 0)
        assert shifted.duration_minutes() == 30

    def test_from_clock_minutes_crosses_midnight(self):
        """Test 11:30 PM to 12:30 AM is a one hour interval into the next day."""
        span = Interval.from_clock_minutes(PLAN_DAY, 1410, 30)

        assert span.start == at(23, 30)
        assert span.end == datetime(2025, 11, 19, 0, 30)
        assert span.duration_minutes() == 60

    def test_overlaps_is_half_open(self):
        """Test touching intervals do not overlap."""
        assert Interval(at(9), at(10)).overlaps(Interval(at(9, 30), at(11)))
        assert not Interval(at(9), at(10)).overlaps(Interval(at(10), at(11)))

    def test_to_dict_uses_local_strings(self):
        """Test wire format has no offset."""
        assert Interval(at(9), at(10)).to_dict() == {
            'start': '2025-11-18T09:00:00',
            'end': '2025-11-18T10:00:00',
        }


# ==================== Calendar Event Tests ====================

class TestCalendarEvent:
    """Tests for CalendarEvent dataclass."""

    def test_event_properties(self):
        lunch = event("Lunch", "12:00", "13:00")

        assert lunch.start == at(12)
        assert lunch.end == at(13)
        assert lunch.duration_minutes() == 60
        assert lunch.is_synthetic is False

    def test_event_overlap(self):
        """Test overlap between events."""
        assert event("A", "09:00", "10:00").overlaps_with(event("B", "09:30", "10:30"))
        assert not event("A", "09:00", "10:00").overlaps_with(event("B", "10:00", "11:00"))

    def test_to_dict_marks_synthetic(self):
        """Test synthetic placements are flagged in the wire shape."""
        placed = CalendarEvent("Report", interval("14:00", "15:00"), is_synthetic=True)
        data = placed.to_dict()

        assert data['start_datetime'] == '2025-11-18T14:00:00'
        assert data['is_synthetic'] is True
        assert data['description'] == ""

    def test_event_from_dict_display_times(self):
        """Test backend payload with 12-hour display strings."""
        parsed = event_from_dict(
            {'title': 'Lunch', 'start_time': '12:00 PM', 'end_time': '1:00 PM', 'event_id': 'e1'},
            PLAN_DAY
        )

        assert parsed.title == 'Lunch'
        assert parsed.source_id == 'e1'
        assert parsed.interval == Interval(at(12), at(13))

    def test_event_from_dict_crosses_midnight(self):
        """Test an end before the start rolls into the next day."""
        parsed = event_from_dict(
            {'title': 'Late show', 'start_time': '11:30 PM', 'end_time': '12:30 AM'},
            "2025-11-18"
        )

        assert parsed.end == datetime(2025, 11, 19, 0, 30)
        assert parsed.duration_minutes() == 60

    def test_event_from_dict_local_datetimes(self):
        """Test backend payload with full local datetimes."""
        parsed = event_from_dict({
            'summary': 'Flight',
            'start_datetime': '2025-11-18T22:00:00',
            'end_datetime': '2025-11-19T01:00:00',
        })

        assert parsed.title == 'Flight'
        assert parsed.duration_minutes() == 180

    def test_event_from_dict_invalid_time(self):
        """Test unparseable times raise FormatError."""
        with pytest.raises(FormatError):
            event_from_dict({'title': 'Bad', 'start_time': '25:00', 'end_time': '1:00 PM'}, PLAN_DAY)

    def test_event_from_dict_defaults_title(self):
        parsed = event_from_dict({'start_time': '9:00 AM', 'end_time': '9:30 AM'}, PLAN_DAY)
        assert parsed.title == 'No Title'


# ==================== Restricted Range Tests ====================

class TestRestrictedRange:
    """Tests for RestrictedRange dataclass."""

    def test_range_creation(self):
        night = RestrictedRange("1", 22 * 60, 23 * 60 + 59)

        assert night.start_time == "22:00"
        assert night.end_time == "23:59"
        assert night.to_dict() == {'id': '1', 'startTime': '22:00', 'endTime': '23:59'}

    def test_empty_range_raises_error(self):
        """Test start must be before end."""
        with pytest.raises(ValueError):
            RestrictedRange("1", 600, 600)

    def test_half_open_overlap(self):
        """Test a span ending exactly at the range start is free."""
        night = RestrictedRange("1", 1320, 1439)

        assert night.overlaps_minutes(1290, 1321)
        assert not night.overlaps_minutes(1260, 1320)
        assert not night.overlaps_minutes(1439, 1500)

    def test_from_dict_camel_case(self):
        parsed = restricted_range_from_dict({'id': 'r1', 'startTime': '13:00', 'endTime': '14:00'})

        assert parsed.id == 'r1'
        assert parsed.start_minutes == 780
        assert parsed.end_minutes == 840

    def test_from_dict_snake_case_and_fallback_id(self):
        parsed = restricted_range_from_dict({'start_time': '06:00', 'end_time': '07:30'}, fallback_id="7")

        assert parsed.id == "7"
        assert parsed.end_minutes == 450

    @pytest.mark.parametrize("record", [
        {'startTime': '25:00', 'endTime': '26:00'},
        {'startTime': '14:00', 'endTime': '13:00'},
        {'startTime': '14:00', 'endTime': '14:00'},
        {'startTime': '14:00'},
    ])
    def test_from_dict_rejects_corrupt_records(self, record):
        """Test corrupt records raise FormatError."""
        with pytest.raises(FormatError):
            restricted_range_from_dict(record)


# ==================== Task Tests ====================

class TestTask:
    """Tests for Task dataclass."""

    def test_task_creation(self):
        """Test basic task creation."""
        report = task("Write report", "12:15", "12:45")

        assert report.title == "Write report"
        assert report.duration_minutes() == 30
        assert report.category == "general"
        assert report.priority == 3

    def test_empty_title_raises_error(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            Task("   ", interval("09:00", "10:00"))

    def test_priority_coercion(self):
        """Test priority auto-converts from string, falling back to the default."""
        assert Task("A", interval("09:00", "10:00"), priority="1").priority == 1
        assert Task("A", interval("09:00", "10:00"), priority="high").priority == 3

    def test_event_description_falls_back_to_reasoning(self):
        bare = Task("A", interval("09:00", "10:00"), reasoning="Morning focus")
        assert bare.event_description == "Morning focus"

    def test_task_from_dict_bare_times(self):
        """Test planner entry with time-only values anchored on the planning day."""
        parsed = task_from_dict({
            'title': 'Gym',
            'start_time': '18:00:00',
            'end_time': '19:30:00',
            'category': 'health',
            'priority': 2,
            'reasoning': 'After work',
        }, default_date=PLAN_DAY)

        assert parsed.proposed_interval == Interval(at(18), at(19, 30))
        assert parsed.category == 'health'
        assert parsed.priority == 2
        assert parsed.reasoning == 'After work'

    def test_task_from_dict_full_datetimes(self):
        parsed = task_from_dict({
            'title': 'Call',
            'start_time': '2025-11-20T10:00:00',
            'end_time': '2025-11-20T10:30:00',
        })

        assert parsed.proposed_interval.start.date() == date(2025, 11, 20)

    def test_task_from_dict_single_digit_hour_with_seconds(self):
        """Test "9:00:00" keeps its minutes instead of being cut mid-field."""
        parsed = task_from_dict({'title': 'Run', 'start_time': '9:00:00', 'end_time': '9:45:00'}, PLAN_DAY)

        assert parsed.proposed_interval == Interval(at(9), at(9, 45))

    def test_task_from_dict_crosses_midnight(self):
        parsed = task_from_dict({'title': 'Night shift', 'start_time': '23:00', 'end_time': '01:00'}, PLAN_DAY)

        assert parsed.duration_minutes() == 120

    def test_task_from_dict_defaults_title(self):
        parsed = task_from_dict({'start_time': '09:00', 'end_time': '10:00'}, PLAN_DAY)
        assert parsed.title == 'Planned Task'

    def test_task_to_dict(self):
        """Test conversion to dictionary."""
        data = task("Report", "09:00", "10:00").to_dict()

        assert data['title'] == "Report"
        assert data['start_time'] == "2025-11-18T09:00:00"
        assert data['end_time'] == "2025-11-18T10:00:00"
        assert 'reasoning' not in data


# ==================== Result Tests ====================

class TestResults:
    """Tests for search and batch results."""

    def test_search_outcome_found(self):
        assert SearchOutcome(SearchState.FOUND, interval("09:00", "10:00")).found is True
        assert SearchOutcome(SearchState.EXHAUSTED).found is False

    def test_outcome_is_placed(self):
        assert Outcome.PLACED.is_placed
        assert Outcome.MOVED.is_placed
        assert not Outcome.SKIPPED.is_placed
        assert not Outcome.FAILED.is_placed

    def test_placement_describe(self):
        """Test one-line summaries per outcome."""
        moved = PlacementResult(
            task("Report", "12:15", "12:45"), Outcome.MOVED,
            final_interval=interval("14:15", "14:45"), moved_by_minutes=120
        )
        skipped = PlacementResult(task("Gym", "18:00", "19:00"), Outcome.SKIPPED,
                                  reason="no available slot within 12 hours")

        assert moved.describe() == "Report: 2:15 PM - 2:45 PM (moved in 2 hours)"
        assert skipped.describe() == "Gym: skipped (no available slot within 12 hours)"

    def test_batch_counts_and_summary(self):
        """Test aggregate counts and summary text."""
        result = BatchResult(total_count=4, results=[
            PlacementResult(task("A", "09:00", "10:00"), Outcome.PLACED, interval("09:00", "10:00")),
            PlacementResult(task("B", "10:00", "11:00"), Outcome.MOVED, interval("12:00", "13:00"), 120),
            PlacementResult(task("C", "11:00", "12:00"), Outcome.SKIPPED, reason="full"),
            PlacementResult(task("D", "12:00", "13:00"), Outcome.FAILED, reason="offline"),
        ])

        assert result.placed_count == 2
        assert result.moved_count == 1
        assert result.skipped_count == 1
        assert result.failed_count == 1

        lines = result.summary_text().splitlines()
        assert lines[0] == "Created 2 of 4 calendar events"
        assert "Moved 1 events to avoid conflicts" in lines
        assert "Skipped 1 events due to conflicts" in lines
        assert "Failed to create 1 events" in lines
        assert "  - D: failed (offline)" in lines

    def test_batch_to_dict(self):
        result = BatchResult(total_count=1, cancelled=True)
        data = result.to_dict()

        assert data['cancelled'] is True
        assert data['placed_count'] == 0
        assert data['results'] == []


# ==================== Error Tests ====================

class TestErrors:
    """Tests for error types."""

    def test_format_error_message(self):
        error = FormatError("9 o'clock", "'hh:mm AM/PM'")

        assert isinstance(error, ValueError)
        assert error.value == "9 o'clock"
        assert "expected 'hh:mm AM/PM'" in str(error)

    def test_transport_error_wraps_cause(self):
        cause = TimeoutError("timed out")
        error = TransportError("find_events", cause)

        assert isinstance(error, ConnectionError)
        assert error.cause is cause
        assert str(error) == "find_events failed: timed out"
