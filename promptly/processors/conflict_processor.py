# File: promptly/processors/conflict_processor.py
"""
Conflict detection against existing calendar events.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from promptly.core.config_manager import Config
from promptly.models import CalendarEvent, Interval
from promptly.utils.logger import setup_logger

logger = setup_logger(__name__)


@dataclass
class ConflictCheck:
    """Outcome of testing one candidate interval."""
    has_conflict: bool
    conflicting_events: List[CalendarEvent] = field(default_factory=list)

    @property
    def titles(self) -> List[str]:
        return [e.title for e in self.conflicting_events]


class ConflictDetector:
    """Buffered overlap test between a candidate and a set of events."""

    def __init__(self, buffer_minutes: int = Config.BUFFER_MINUTES):
        """
        Initialize conflict detector.

        Args:
            buffer_minutes: Padding added to both ends of the candidate
        """
        if buffer_minutes < 0:
            raise ValueError(f"Buffer cannot be negative: {buffer_minutes}")
        self.buffer_minutes = buffer_minutes

    def check(
        self,
        candidate: Interval,
        events: Iterable[CalendarEvent],
        exclude_title: Optional[str] = None
    ) -> ConflictCheck:
        """
        Test the buffered candidate against every event.

        An event conflicts when buffered_start < event.end and
        buffered_end > event.start. The comparison is strict, so a gap of
        exactly the buffer is free. Events titled `exclude_title` (the event
        being rescheduled) are ignored. All conflicting events are returned in
        input order.
        """
        buffered = candidate.buffered(self.buffer_minutes)
        conflicting = [
            event for event in events
            if not (exclude_title is not None and event.title == exclude_title)
            and buffered.start < event.end and buffered.end > event.start
        ]

        if conflicting:
            logger.debug(
                f"Candidate {candidate} blocked by: {', '.join(e.title for e in conflicting)}"
            )
        return ConflictCheck(has_conflict=bool(conflicting), conflicting_events=conflicting)

    def has_conflict(
        self,
        candidate: Interval,
        events: Iterable[CalendarEvent],
        exclude_title: Optional[str] = None
    ) -> bool:
        """Check if the buffered candidate touches any event."""
        return self.check(candidate, events, exclude_title).has_conflict
