from .errors import FormatError, TransportError
from .enums import SearchState, Outcome
from .common import (
    MINUTES_PER_DAY,
    parse_display_time,
    format_display_time,
    parse_clock_time,
    format_clock_time,
    to_minutes_since_midnight,
    normalize_span,
    span_minutes,
    format_local_datetime,
    parse_local_datetime,
    parse_date,
)
from .calendar import Interval, CalendarEvent, event_from_dict
from .preferences import RestrictedRange, restricted_range_from_dict
from .tasks import Task, task_from_dict
from .schedule import SearchOutcome, PlacementResult, BatchResult

__all__ = [
    "FormatError",
    "TransportError",
    "SearchState",
    "Outcome",
    "MINUTES_PER_DAY",
    "parse_display_time",
    "format_display_time",
    "parse_clock_time",
    "format_clock_time",
    "to_minutes_since_midnight",
    "normalize_span",
    "span_minutes",
    "format_local_datetime",
    "parse_local_datetime",
    "parse_date",
    "Interval",
    "CalendarEvent",
    "event_from_dict",
    "RestrictedRange",
    "restricted_range_from_dict",
    "Task",
    "task_from_dict",
    "SearchOutcome",
    "PlacementResult",
    "BatchResult",
]
