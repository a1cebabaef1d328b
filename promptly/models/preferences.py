# File: promptly/models/preferences.py
"""
Data models for user scheduling preferences.
"""

from dataclasses import dataclass
from typing import Optional

from .common import format_clock_time, is_valid_time_range, parse_clock_time
from .errors import FormatError


@dataclass(frozen=True)
class RestrictedRange:
    """A recurring time-of-day window in which nothing may be scheduled."""
    id: str
    start_minutes: int
    end_minutes: int

    def __post_init__(self):
        """Validate range data."""
        if not 0 <= self.start_minutes < self.end_minutes:
            raise ValueError(
                f"Restricted range {self.id!r} must start before it ends: "
                f"{format_clock_time(self.start_minutes)}-{format_clock_time(self.end_minutes)}"
            )

    @property
    def start_time(self) -> str:
        return format_clock_time(self.start_minutes)

    @property
    def end_time(self) -> str:
        return format_clock_time(self.end_minutes)

    def overlaps_minutes(self, start: int, end: int) -> bool:
        """Half-open overlap against a minutes-since-midnight span, no buffer."""
        return start < self.end_minutes and self.start_minutes < end

    def to_dict(self) -> dict:
        """Convert to the stored record shape."""
        return {
            'id': self.id,
            'startTime': self.start_time,
            'endTime': self.end_time,
        }


def restricted_range_from_dict(data: dict, fallback_id: Optional[str] = None) -> RestrictedRange:
    """
    Create RestrictedRange from a stored record.

    Records use the preferences screen format: {"id", "startTime", "endTime"}
    with 24-hour "HH:MM" values. Snake-case keys are accepted too.

    Raises:
        FormatError: If a time is malformed or the range is empty
    """
    raw_start = data.get('startTime', data.get('start_time'))
    raw_end = data.get('endTime', data.get('end_time'))
    range_id = str(data.get('id') or fallback_id or f"{raw_start}-{raw_end}")

    start_str = str(raw_start).strip() if raw_start is not None else None
    end_str = str(raw_end).strip() if raw_end is not None else None
    if not is_valid_time_range(start_str, end_str):
        raise FormatError(f"{raw_start}-{raw_end}", "'HH:MM' times with the start before the end")

    return RestrictedRange(
        id=range_id, start_minutes=parse_clock_time(start_str), end_minutes=parse_clock_time(end_str)
    )
