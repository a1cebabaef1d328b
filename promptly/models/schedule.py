# File: promptly/models/schedule.py

from dataclasses import dataclass, field
from typing import List, Optional

from .calendar import CalendarEvent, Interval
from .common import describe_shift, format_display_time, to_minutes_since_midnight
from .enums import Outcome, SearchState
from .tasks import Task


@dataclass
class SearchOutcome:
    """Terminal state of one slot search."""
    state: SearchState
    interval: Optional[Interval] = None
    moved_by_minutes: int = 0
    attempts: int = 0
    blocking_events: List[CalendarEvent] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.state == SearchState.FOUND


@dataclass
class PlacementResult:
    """Represents what happened to a single task."""
    task: Task
    outcome: Outcome
    final_interval: Optional[Interval] = None
    moved_by_minutes: int = 0
    reason: Optional[str] = None
    conflicting_events: List[CalendarEvent] = field(default_factory=list)

    @property
    def is_moved(self) -> bool:
        return self.outcome == Outcome.MOVED

    def describe(self) -> str:
        """One line for the summary shown to the user."""
        if self.outcome.is_placed and self.final_interval:
            start = format_display_time(to_minutes_since_midnight(self.final_interval.start))
            end = format_display_time(to_minutes_since_midnight(self.final_interval.end))
            line = f"{self.task.title}: {start} - {end}"
            if self.is_moved:
                line += f" (moved {describe_shift(self.moved_by_minutes)})"
            return line
        return f"{self.task.title}: {self.outcome.value} ({self.reason or 'no reason given'})"

    def to_dict(self) -> dict:
        return {
            'title': self.task.title,
            'outcome': self.outcome.value,
            'final_interval': self.final_interval.to_dict() if self.final_interval else None,
            'moved_by_minutes': self.moved_by_minutes,
            'reason': self.reason,
            'conflicting_events': [e.title for e in self.conflicting_events],
        }


@dataclass
class BatchResult:
    """Aggregate outcome of one scheduling run."""
    results: List[PlacementResult] = field(default_factory=list)
    total_count: int = 0
    cancelled: bool = False

    def _count(self, *outcomes: Outcome) -> int:
        return sum(1 for r in self.results if r.outcome in outcomes)

    @property
    def placed_count(self) -> int:
        """Tasks that ended up on the calendar, moved or not."""
        return self._count(Outcome.PLACED, Outcome.MOVED)

    @property
    def moved_count(self) -> int:
        return self._count(Outcome.MOVED)

    @property
    def skipped_count(self) -> int:
        return self._count(Outcome.SKIPPED)

    @property
    def failed_count(self) -> int:
        return self._count(Outcome.FAILED)

    def summary_text(self) -> str:
        """Human-readable summary of the run."""
        lines = [f"Created {self.placed_count} of {self.total_count} calendar events"]
        if self.moved_count:
            lines.append(f"Moved {self.moved_count} events to avoid conflicts")
        if self.skipped_count:
            lines.append(f"Skipped {self.skipped_count} events due to conflicts")
        if self.failed_count:
            lines.append(f"Failed to create {self.failed_count} events")
        if self.cancelled:
            lines.append(
                f"Run cancelled after {len(self.results)} of {self.total_count} tasks"
            )
        for result in self.results:
            lines.append(f"  - {result.describe()}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            'placed_count': self.placed_count,
            'moved_count': self.moved_count,
            'skipped_count': self.skipped_count,
            'failed_count': self.failed_count,
            'total_count': self.total_count,
            'cancelled': self.cancelled,
            'results': [r.to_dict() for r in self.results],
        }
