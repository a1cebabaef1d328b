# File: promptly/models/common.py
"""
Time model for Promptly.

Every comparison in the scheduler goes through these helpers so that
12-hour display strings, 24-hour clock strings and local datetimes all reduce
to the same integer minutes-since-midnight. The system is timezone-naive:
datetimes are local civil time exactly as the calendar presents them.
"""

import datetime
import re
from typing import Optional, Tuple, Union

from .errors import FormatError

MINUTES_PER_DAY = 24 * 60

LOCAL_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"

_DISPLAY_TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])\s*$")
_CLOCK_TIME_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")
_LOCAL_DATETIME_RE = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[T ](\d{2}):(\d{2})(?::(\d{2})(?:\.\d+)?)?"
    r"(Z|[+-]\d{2}:?\d{2})?$"
)


def parse_display_time(value: str) -> int:
    """
    Parse a 12-hour "hh:mm AM/PM" string into minutes since midnight.

    Args:
        value: Display string such as "9:05 AM" or "12:30 pm"

    Returns:
        Minutes since midnight (0-1439)

    Raises:
        FormatError: If the marker is missing or hour/minute is out of range
    """
    if not isinstance(value, str):
        raise FormatError(value, "'hh:mm AM/PM'")

    match = _DISPLAY_TIME_RE.match(value)
    if not match:
        raise FormatError(value, "'hh:mm AM/PM'")

    hour, minute, marker = int(match.group(1)), int(match.group(2)), match.group(3).upper()
    if not 1 <= hour <= 12 or not 0 <= minute <= 59:
        raise FormatError(value, "hour 1-12 and minute 0-59")

    # 12 AM is midnight, 12 PM is noon
    hour = hour % 12
    if marker == "PM":
        hour += 12
    return hour * 60 + minute


def format_display_time(minutes: int) -> str:
    """Render minutes since midnight as "h:mm AM"."""
    minutes %= MINUTES_PER_DAY
    hour, minute = divmod(minutes, 60)
    marker = "AM" if hour < 12 else "PM"
    return f"{hour % 12 or 12}:{minute:02d} {marker}"


def is_valid_clock_time(value: str) -> bool:
    """Check a 24-hour "HH:MM" string."""
    return isinstance(value, str) and bool(_CLOCK_TIME_RE.match(value))


def parse_clock_time(value: str) -> int:
    """
    Parse a 24-hour "HH:MM" string (the stored restricted-hours format).

    Raises:
        FormatError: If the string is not a valid clock time
    """
    match = _CLOCK_TIME_RE.match(value) if isinstance(value, str) else None
    if not match:
        raise FormatError(value, "'HH:MM' (00:00-23:59)")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_clock_time(minutes: int) -> str:
    """Render minutes as "HH:MM". Values past midnight keep counting (e.g. "24:15")."""
    hour, minute = divmod(minutes, 60)
    return f"{hour:02d}:{minute:02d}"


def is_valid_time_range(start: str, end: str) -> bool:
    """True when both are valid clock times and start is strictly before end."""
    if not is_valid_clock_time(start) or not is_valid_clock_time(end):
        return False
    return parse_clock_time(start) < parse_clock_time(end)


def to_minutes_since_midnight(point: Union[datetime.datetime, datetime.time]) -> int:
    """Minutes since midnight of a datetime or time (seconds are truncated)."""
    return point.hour * 60 + point.minute


def normalize_span(start_minutes: int, end_minutes: int) -> Tuple[int, int]:
    """
    Normalize a time-of-day span that may cross midnight.

    "11:30 PM" to "12:30 AM" is (1410, 30) and becomes (1410, 1470).
    """
    if end_minutes < start_minutes:
        end_minutes += MINUTES_PER_DAY
    return start_minutes, end_minutes


def span_minutes(start_minutes: int, end_minutes: int) -> int:
    """Duration of a time-of-day span after cross-midnight normalization."""
    start, end = normalize_span(start_minutes, end_minutes)
    return end - start


def combine_minutes(day: datetime.date, minutes: int) -> datetime.datetime:
    """Local datetime for `minutes` after midnight of `day` (may roll into the next day)."""
    midnight = datetime.datetime.combine(day, datetime.time.min)
    return midnight + datetime.timedelta(minutes=minutes)


def format_local_datetime(
    day: Union[datetime.date, datetime.datetime],
    time: Optional[datetime.time] = None
) -> str:
    """
    Canonical local "YYYY-MM-DDTHH:MM:SS" string.

    Accepts either a datetime, or a date plus a time. No timezone conversion
    is done; any tzinfo is ignored.
    """
    if isinstance(day, datetime.datetime):
        moment = day
    else:
        moment = datetime.datetime.combine(day, time or datetime.time.min)
    return moment.replace(tzinfo=None, microsecond=0).strftime(LOCAL_DATETIME_FORMAT)


def parse_local_datetime(value: str) -> datetime.datetime:
    """
    Parse a local "YYYY-MM-DDTHH:MM[:SS]" string into a naive datetime.

    A trailing offset is accepted and dropped: the wall-clock reading is what
    the calendar shows, and that is what gets scheduled.

    Raises:
        FormatError: If the string is not a local datetime
    """
    match = _LOCAL_DATETIME_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise FormatError(value, "'YYYY-MM-DDTHH:MM:SS'")
    year, month, day, hour, minute = (int(match.group(i)) for i in range(1, 6))
    second = int(match.group(6) or 0)
    try:
        return datetime.datetime(year, month, day, hour, minute, second)
    except ValueError as e:
        raise FormatError(value, str(e)) from e


def parse_date(value: Union[str, datetime.date]) -> datetime.date:
    """Parse a "YYYY-MM-DD" civil date."""
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    try:
        return datetime.datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError as e:
        raise FormatError(value, "'YYYY-MM-DD'") from e


def describe_shift(minutes: int, day_offset_minutes: int = MINUTES_PER_DAY) -> str:
    """
    Human phrasing of a forward move, as shown after a reschedule.

    Args:
        minutes: Total forward shift in minutes
        day_offset_minutes: Shift that reads as "tomorrow at the same time"
    """
    if minutes == 0:
        return "at the original time"
    if minutes == day_offset_minutes:
        return "tomorrow at the same time"
    if minutes < 60:
        return f"in {minutes} minutes"
    hours, rest = divmod(minutes, 60)
    if hours < 24:
        if rest == 0:
            return f"in {hours} hour{'s' if hours != 1 else ''}"
        return f"in {hours}h {rest}m"
    days, hours = divmod(hours, 24)
    day_label = "day" if days == 1 else "days"
    if hours == 0 and rest == 0:
        return f"in {days} {day_label}"
    return f"in {days} {day_label}, {hours}h {rest}m"
