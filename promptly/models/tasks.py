# promptly/models/tasks.py

import datetime
from dataclasses import dataclass
from typing import Optional

from .calendar import Interval
from .common import parse_date, parse_local_datetime, parse_clock_time, combine_minutes
from .errors import FormatError

DEFAULT_PRIORITY = 3


@dataclass
class Task:
    """A task the planner (or the user) wants on the calendar."""
    title: str
    proposed_interval: Interval
    description: str = ""
    category: str = "general"
    priority: int = DEFAULT_PRIORITY
    reasoning: Optional[str] = None

    def __post_init__(self):
        """Validate task data and auto-convert types."""
        if not self.title or not str(self.title).strip():
            raise ValueError("Task title cannot be empty")
        self.title = str(self.title).strip()

        if not isinstance(self.priority, int):
            try:
                self.priority = int(self.priority)
            except (TypeError, ValueError):
                self.priority = DEFAULT_PRIORITY

    def duration_minutes(self) -> int:
        return self.proposed_interval.duration_minutes()

    @property
    def event_description(self) -> str:
        """Text written to the calendar event: description, else the planner's reasoning."""
        return self.description or self.reasoning or ""

    def to_dict(self) -> dict:
        data = {
            'title': self.title,
            'description': self.description,
            'category': self.category,
            'priority': self.priority,
        }
        interval = self.proposed_interval.to_dict()
        data['start_time'] = interval['start']
        data['end_time'] = interval['end']
        if self.reasoning:
            data['reasoning'] = self.reasoning
        return data


def _task_time(raw, default_date: datetime.date) -> datetime.datetime:
    """A full local datetime, or a bare "HH:MM[:SS]" assumed to be on `default_date`."""
    if isinstance(raw, datetime.datetime):
        return raw.replace(tzinfo=None)
    if not isinstance(raw, str) or not raw.strip():
        raise FormatError(raw, "'YYYY-MM-DDTHH:MM:SS' or 'HH:MM'")
    raw = raw.strip()
    if 'T' in raw:
        return parse_local_datetime(raw)
    # Time only: drop seconds and anchor on the planning day
    return combine_minutes(default_date, parse_clock_time(":".join(raw.split(":")[:2])))


def task_from_dict(data: dict, default_date=None) -> Task:
    """
    Create Task from a planner payload entry.

    Planner entries look like {"title", "description", "category",
    "priority", "start_time", "end_time", "reasoning"}. Times carrying a date
    keep it; bare times are placed on `default_date` (today if omitted). An
    end time earlier than a bare start time is read as crossing midnight.

    Raises:
        FormatError: If a time cannot be parsed
        ValueError: If the title is empty or the interval is empty
    """
    day = parse_date(default_date) if default_date is not None else datetime.date.today()

    start = _task_time(data.get('start_time', data.get('start_datetime')), day)
    end = _task_time(data.get('end_time', data.get('end_datetime')), day)
    if end < start and end.date() == start.date():
        end += datetime.timedelta(days=1)

    return Task(
        title=str(data.get('title') or 'Planned Task'),
        proposed_interval=Interval(start, end),
        description=str(data.get('description') or ''),
        category=str(data.get('category') or 'general'),
        priority=data.get('priority', DEFAULT_PRIORITY),
        reasoning=data.get('reasoning') or None,
    )
