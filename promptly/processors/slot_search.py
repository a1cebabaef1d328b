# File: promptly/processors/slot_search.py
"""
Forward slot search.

Starting from a proposed interval, probe later and later copies of it until
one clears both the existing events and the user's restricted hours, or the
search horizon is used up. Every candidate is the original interval shifted
by a whole number of steps; nothing is derived from the previous candidate.
"""

from typing import Iterable, List, Optional

from promptly.models import CalendarEvent, Interval, SearchOutcome, SearchState
from promptly.processors.conflict_processor import ConflictDetector
from promptly.processors.restriction_processor import RestrictionEngine
from promptly.utils.logger import setup_logger

logger = setup_logger(__name__)


class SlotSearch:
    """Linear forward probing over in-memory events. No I/O."""

    def __init__(
        self,
        detector: Optional[ConflictDetector] = None,
        restrictions: Optional[RestrictionEngine] = None
    ):
        self.detector = detector or ConflictDetector()
        self.restrictions = restrictions

    def search(
        self,
        original: Interval,
        events: Iterable[CalendarEvent],
        step_minutes: int,
        horizon_minutes: int,
        exclude_title: Optional[str] = None,
        start_offset_minutes: int = 0
    ) -> SearchOutcome:
        """
        Find the first free copy of `original`.

        Args:
            original: Proposed interval
            events: Events to avoid (a snapshot; it is not modified)
            step_minutes: Shift added after each blocked probe
            horizon_minutes: Largest total shift that may be tried
            exclude_title: Title of the event being rescheduled, ignored as a conflict
            start_offset_minutes: Shift of the first probe (0 tries the proposed time)

        Returns:
            FOUND with the free interval and its shift, or EXHAUSTED
        """
        if step_minutes <= 0:
            raise ValueError(f"Step must be positive: {step_minutes}")
        if horizon_minutes < 0:
            raise ValueError(f"Horizon cannot be negative: {horizon_minutes}")
        if start_offset_minutes < 0:
            raise ValueError(f"Start offset cannot be negative: {start_offset_minutes}")

        events = list(events)
        elapsed = start_offset_minutes
        attempts = 0
        blocking: List[CalendarEvent] = []

        while elapsed <= horizon_minutes:
            candidate = original.shifted(elapsed)
            attempts += 1

            check = self.detector.check(candidate, events, exclude_title)
            restricted = (
                not check.has_conflict
                and self.restrictions is not None
                and self.restrictions.is_restricted(candidate)
            )

            if not check.has_conflict and not restricted:
                logger.debug(
                    f"Free slot {candidate} after {attempts} probe(s), moved {elapsed} min"
                )
                return SearchOutcome(
                    state=SearchState.FOUND,
                    interval=candidate,
                    moved_by_minutes=elapsed,
                    attempts=attempts,
                )

            blocking = check.conflicting_events
            if restricted:
                ids = ", ".join(r.id for r in self.restrictions.blocking_ranges(candidate))
                logger.debug(f"Candidate {candidate} falls in restricted hours: {ids}")

            elapsed += step_minutes

        logger.debug(
            f"No free slot for {original} within {horizon_minutes} min "
            f"({attempts} probe(s))"
        )
        return SearchOutcome(
            state=SearchState.EXHAUSTED,
            moved_by_minutes=0,
            attempts=attempts,
            blocking_events=blocking,
        )
