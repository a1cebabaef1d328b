# File: promptly/models/calendar.py

import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .common import (
    combine_minutes,
    format_local_datetime,
    normalize_span,
    parse_date,
    parse_display_time,
    parse_local_datetime,
)
from .errors import FormatError


@dataclass(frozen=True)
class Interval:
    """A half-open span of local civil time."""
    start: datetime.datetime
    end: datetime.datetime

    def __post_init__(self):
        """Validate interval ordering."""
        if self.end <= self.start:
            raise ValueError(
                f"Interval end must be after start: {self.start.isoformat()} - {self.end.isoformat()}"
            )

    @classmethod
    def from_clock_minutes(cls, day: datetime.date, start_minutes: int, end_minutes: int) -> 'Interval':
        """Build an interval on `day` from time-of-day minutes, rolling the end past midnight if needed."""
        start_minutes, end_minutes = normalize_span(start_minutes, end_minutes)
        return cls(combine_minutes(day, start_minutes), combine_minutes(day, end_minutes))

    def duration_minutes(self) -> int:
        """Calculate interval duration in minutes."""
        return int((self.end - self.start).total_seconds() // 60)

    def shifted(self, minutes: int) -> 'Interval':
        """Same duration, moved forward by `minutes`."""
        delta = datetime.timedelta(minutes=minutes)
        return Interval(self.start + delta, self.end + delta)

    def buffered(self, minutes: int) -> 'Interval':
        """Widened by `minutes` on both ends."""
        delta = datetime.timedelta(minutes=minutes)
        return Interval(self.start - delta, self.end + delta)

    def overlaps(self, other: 'Interval') -> bool:
        """Check if this interval overlaps with another."""
        return self.start < other.end and self.end > other.start

    def to_dict(self) -> dict:
        return {
            'start': format_local_datetime(self.start),
            'end': format_local_datetime(self.end),
        }

    def __str__(self) -> str:
        return f"{self.start.strftime('%Y-%m-%d %H:%M')}-{self.end.strftime('%H:%M')}"


@dataclass
class CalendarEvent:
    """An event on the user's calendar, or a placement made earlier in the current run."""
    title: str
    interval: Interval
    source_id: Optional[str] = None
    description: Optional[str] = None
    is_synthetic: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def start(self) -> datetime.datetime:
        return self.interval.start

    @property
    def end(self) -> datetime.datetime:
        return self.interval.end

    def duration_minutes(self) -> int:
        """Calculate event duration in minutes."""
        return self.interval.duration_minutes()

    def overlaps_with(self, other: 'CalendarEvent') -> bool:
        """Check if this event overlaps with another."""
        return self.interval.overlaps(other.interval)

    def to_dict(self) -> dict:
        """Convert to the Event Source wire shape."""
        data = {
            'title': self.title,
            'start_datetime': format_local_datetime(self.start),
            'end_datetime': format_local_datetime(self.end),
            'event_id': self.source_id,
            'description': self.description or "",
        }
        if self.is_synthetic:
            data['is_synthetic'] = True
        return data


def _event_time(raw: Any, day: datetime.date) -> datetime.datetime:
    """Resolve either a display time ("9:00 AM") on `day` or a full local datetime."""
    if isinstance(raw, datetime.datetime):
        return raw.replace(tzinfo=None)
    if not isinstance(raw, str) or not raw.strip():
        raise FormatError(raw, "'hh:mm AM/PM' or 'YYYY-MM-DDTHH:MM:SS'")
    if 'T' in raw or '-' in raw.split(':')[0]:
        return parse_local_datetime(raw)
    return combine_minutes(day, parse_display_time(raw))


def event_from_dict(data: dict, day=None) -> CalendarEvent:
    """
    Create CalendarEvent from a calendar backend payload.

    The backend reports times either as 12-hour display strings for the
    queried day ({"start_time": "11:30 PM", "end_time": "12:30 AM"}) or as
    local datetimes ({"start_datetime": "2025-11-18T09:00:00", ...}). An end
    before the start on the same day is read as crossing midnight.

    Raises:
        FormatError: If a time cannot be parsed
        ValueError: If the resolved interval is empty
    """
    query_day = parse_date(day) if day is not None else datetime.date.today()

    raw_start = data.get('start_datetime', data.get('start_time'))
    raw_end = data.get('end_datetime', data.get('end_time'))
    start = _event_time(raw_start, query_day)
    end = _event_time(raw_end, query_day)

    if end < start and end.date() == start.date():
        end += datetime.timedelta(days=1)

    return CalendarEvent(
        title=str(data.get('title') or data.get('summary') or 'No Title'),
        interval=Interval(start, end),
        source_id=data.get('event_id') or data.get('id'),
        description=data.get('description') or None,
        is_synthetic=bool(data.get('is_synthetic', False)),
    )
