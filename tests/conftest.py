# File: tests/conftest.py
"""
Pytest configuration and shared fixtures.
Provides reusable calendars, tasks and restricted hours for all tests.
"""

import os
import sys
from datetime import date, datetime, timedelta
from pathlib import Path
from unittest.mock import Mock

import pytest

# Keep test runs from writing log files
os.environ.setdefault("PROMPTLY_LOG_DIR", "")

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from promptly.models import CalendarEvent, Interval, RestrictedRange, Task
from promptly.processors.conflict_processor import ConflictDetector
from promptly.processors.restriction_processor import RestrictionEngine
from promptly.processors.slot_search import SlotSearch
from promptly.services.memory_service import InMemoryCalendarService, StaticPreferenceStore

PLAN_DAY = date(2025, 11, 18)


def at(hour: int, minute: int = 0, day: date = PLAN_DAY) -> datetime:
    """Local datetime on the planning day."""
    return datetime(day.year, day.month, day.day, hour, minute)


def interval(start: str, end: str, day: date = PLAN_DAY) -> Interval:
    """Interval from "HH:MM" strings; an earlier end rolls into the next day."""
    sh, sm = (int(p) for p in start.split(":"))
    eh, em = (int(p) for p in end.split(":"))
    begin = at(sh, sm, day)
    finish = at(eh, em, day)
    if finish <= begin:
        finish += timedelta(days=1)
    return Interval(begin, finish)


def event(title: str, start: str, end: str, day: date = PLAN_DAY) -> CalendarEvent:
    return CalendarEvent(title=title, interval=interval(start, end, day), source_id=f"evt-{title}")


def task(title: str, start: str, end: str, day: date = PLAN_DAY) -> Task:
    return Task(title=title, proposed_interval=interval(start, end, day), description=f"{title} notes")


# ==================== Calendar Fixtures ====================

@pytest.fixture
def plan_day():
    return PLAN_DAY


@pytest.fixture
def lunch_event():
    return event("Lunch", "12:00", "13:00")


@pytest.fixture
def standup_event():
    return event("Standup", "09:00", "09:15")


@pytest.fixture
def workday_events(standup_event, lunch_event):
    """A typical day: standup, lunch, afternoon review."""
    return [standup_event, lunch_event, event("Review", "15:00", "16:00")]


# ==================== Restriction Fixtures ====================

@pytest.fixture
def night_range():
    return RestrictedRange(id="night", start_minutes=22 * 60, end_minutes=23 * 60 + 59)


@pytest.fixture
def night_restrictions(night_range):
    return RestrictionEngine([night_range])


# ==================== Processor Fixtures ====================

@pytest.fixture
def detector():
    return ConflictDetector(buffer_minutes=30)


@pytest.fixture
def slot_search(detector):
    return SlotSearch(detector)


# ==================== Collaborator Fixtures ====================

@pytest.fixture
def memory_calendar(workday_events):
    return InMemoryCalendarService(workday_events)


@pytest.fixture
def preference_store(night_range):
    return StaticPreferenceStore({"user123": [night_range]})


@pytest.fixture
def mock_calendar_resource():
    """Mock Google Calendar API resource."""
    mock = Mock()
    mock.events().list().execute.return_value = {'items': []}
    mock.events().insert().execute.return_value = {'id': 'new_event_id'}
    mock.events().patch().execute.return_value = {'id': 'moved_event_id'}
    return mock


@pytest.fixture
def mock_sheets_resource():
    """Mock Google Sheets API resource."""
    mock = Mock()
    mock.spreadsheets().values().get().execute.return_value = {
        'values': [
            ['user_id', 'id', 'startTime', 'endTime'],
            ['user123', 'night', '22:00', '23:59'],
            ['user123', 'broken', '25:00', '26:00'],
            ['other', 'lunch', '12:00', '13:00'],
            ['user123', 'siesta', '14:00'],
        ]
    }
    return mock
