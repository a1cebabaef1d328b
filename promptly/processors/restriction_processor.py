# File: promptly/processors/restriction_processor.py
"""
Restricted-hours processing.
Answers whether a candidate overlaps a user's restricted hours and finds the
next unrestricted start time.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from promptly.core.config_manager import Config
from promptly.models import (
    Interval,
    RestrictedRange,
    FormatError,
    MINUTES_PER_DAY,
    format_clock_time,
    normalize_span,
    parse_clock_time,
    restricted_range_from_dict,
    span_minutes,
    to_minutes_since_midnight,
)
from promptly.utils.logger import setup_logger

logger = setup_logger(__name__)

Span = Tuple[int, int]


@dataclass
class EventTimeValidation:
    """Result of checking a proposed time against restricted hours."""
    is_valid: bool
    suggestion: Optional[str] = None
    message: Optional[str] = None


class RestrictionEngine:
    """Immutable view over one user's restricted ranges, fetched once per run."""

    def __init__(
        self,
        ranges: Iterable[RestrictedRange] = (),
        step_minutes: int = Config.RESTRICTION_STEP_MINUTES
    ):
        if step_minutes <= 0:
            raise ValueError(f"Restriction step must be positive: {step_minutes}")
        self._ranges: Tuple[RestrictedRange, ...] = tuple(ranges)
        self.step_minutes = step_minutes

    @classmethod
    def from_records(
        cls,
        records: Iterable[dict],
        step_minutes: int = Config.RESTRICTION_STEP_MINUTES
    ) -> 'RestrictionEngine':
        """
        Build an engine from stored preference records.

        A corrupt record is skipped with a warning; one bad entry must not
        disable the check for the rest.
        """
        ranges: List[RestrictedRange] = []
        for index, record in enumerate(records):
            try:
                ranges.append(restricted_range_from_dict(record, fallback_id=str(index)))
            except (FormatError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping corrupt restricted-hours entry {record!r}: {e}")
        return cls(ranges, step_minutes=step_minutes)

    @property
    def ranges(self) -> Tuple[RestrictedRange, ...]:
        return self._ranges

    def __len__(self) -> int:
        return len(self._ranges)

    def __bool__(self) -> bool:
        return bool(self._ranges)

    @staticmethod
    def _as_span(candidate: Union[Interval, Span]) -> Span:
        """Reduce a candidate to a normalized time-of-day span."""
        if isinstance(candidate, Interval):
            start = to_minutes_since_midnight(candidate.start)
            return start, start + candidate.duration_minutes()
        return normalize_span(*candidate)

    def is_restricted(self, candidate: Union[Interval, Span]) -> bool:
        """
        True iff the candidate overlaps any restricted range.

        Uses the half-open test start < range.end and range.start < end, no
        buffer. Ranges recur daily, so a candidate running past midnight is
        also tested against the following day's ranges.
        """
        start, end = self._as_span(candidate)
        for restricted in self._ranges:
            if restricted.overlaps_minutes(start, end):
                return True
            if end > MINUTES_PER_DAY and restricted.overlaps_minutes(
                start - MINUTES_PER_DAY, end - MINUTES_PER_DAY
            ):
                return True
        return False

    def blocking_ranges(self, candidate: Union[Interval, Span]) -> List[RestrictedRange]:
        """Every range the candidate overlaps (used in log messages)."""
        start, end = self._as_span(candidate)
        return [
            r for r in self._ranges
            if r.overlaps_minutes(start, end)
            or (end > MINUTES_PER_DAY
                and r.overlaps_minutes(start - MINUTES_PER_DAY, end - MINUTES_PER_DAY))
        ]

    def next_available_slot(self, preferred_start: int, duration_minutes: int) -> Optional[int]:
        """
        First unrestricted start time at or after `preferred_start`.

        Steps forward by `step_minutes` while the start is before midnight.
        The end may spill past midnight, in which case it must also clear the
        next day's ranges.

        Args:
            preferred_start: Minutes since midnight
            duration_minutes: Length of the slot

        Returns:
            Start in minutes since midnight, or None if nothing fits before midnight
        """
        if duration_minutes <= 0:
            raise ValueError(f"Duration must be positive: {duration_minutes}")

        minutes = preferred_start
        while minutes < MINUTES_PER_DAY:
            if not self.is_restricted((minutes, minutes + duration_minutes)):
                return minutes
            minutes += self.step_minutes

        logger.debug(
            f"No unrestricted {duration_minutes}-minute slot after "
            f"{format_clock_time(preferred_start)}"
        )
        return None

    def validate_event_time(self, start_time: str, end_time: str) -> EventTimeValidation:
        """
        Check a proposed "HH:MM"-"HH:MM" event time and suggest an alternative.

        Raises:
            FormatError: If either time is malformed
        """
        start = parse_clock_time(start_time)
        end = parse_clock_time(end_time)

        if not self.is_restricted((start, end)):
            return EventTimeValidation(is_valid=True)

        suggestion_minutes = self.next_available_slot(start, span_minutes(start, end))
        if suggestion_minutes is None:
            return EventTimeValidation(
                is_valid=False,
                message="This time conflicts with your restricted hours. Please choose a different time."
            )

        suggestion = format_clock_time(suggestion_minutes)
        return EventTimeValidation(
            is_valid=False,
            suggestion=suggestion,
            message=f"This time conflicts with your restricted hours. Consider {suggestion} instead."
        )
