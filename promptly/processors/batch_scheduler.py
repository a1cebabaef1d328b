# File: promptly/processors/batch_scheduler.py
"""
Batch placement of planner tasks.

Tasks are placed strictly in the order they arrive. Each placement joins the
working event set, so a later task treats an earlier task's final slot as a
real conflict. No event is exempt: a task sharing its title with an existing
event or an earlier task still has to avoid it.
"""

import threading
from typing import Iterable, List, Optional

from promptly.models import (
    BatchResult,
    CalendarEvent,
    Outcome,
    PlacementResult,
    Task,
    TransportError,
)
from promptly.processors.slot_search import SlotSearch
from promptly.services.base import EventSource
from promptly.utils.logger import setup_logger

logger = setup_logger(__name__)


class BatchScheduler:
    """Places an ordered list of tasks for one planning session."""

    def __init__(self, slot_search: Optional[SlotSearch] = None, event_source: Optional[EventSource] = None):
        """
        Initialize batch scheduler.

        Args:
            slot_search: Search used for every task
            event_source: When given, each placement is created on the calendar
                as soon as it is found
        """
        self.slot_search = slot_search or SlotSearch()
        self.event_source = event_source

    def schedule(
        self,
        tasks: Iterable[Task],
        existing_events: Iterable[CalendarEvent],
        step_minutes: int,
        horizon_minutes: int,
        cancel_event: Optional[threading.Event] = None,
        start_offset_minutes: int = 0
    ) -> BatchResult:
        """
        Place every task in input order.

        Args:
            tasks: Tasks in planner order
            existing_events: Snapshot of the calendar for the affected days
            step_minutes: Slot search step
            horizon_minutes: Slot search horizon
            cancel_event: When set, no further tasks are started
            start_offset_minutes: Shift of every task's first probe

        Returns:
            BatchResult with one PlacementResult per processed task
        """
        tasks = list(tasks)
        working_events: List[CalendarEvent] = list(existing_events)
        result = BatchResult(total_count=len(tasks))

        logger.info(
            f"Scheduling {len(tasks)} tasks against {len(working_events)} existing events "
            f"(step {step_minutes} min, horizon {horizon_minutes} min)"
        )

        for index, task in enumerate(tasks, start=1):
            if cancel_event is not None and cancel_event.is_set():
                logger.warning(f"Run cancelled before task {index} of {len(tasks)}")
                result.cancelled = True
                break

            placement = self._place(
                task, working_events, step_minutes, horizon_minutes, start_offset_minutes
            )
            result.results.append(placement)

            if placement.outcome.is_placed:
                working_events.append(CalendarEvent(
                    title=task.title,
                    interval=placement.final_interval,
                    description=task.event_description or None,
                    is_synthetic=True,
                ))

        logger.info(
            f"Batch complete: {result.placed_count} placed ({result.moved_count} moved), "
            f"{result.skipped_count} skipped, {result.failed_count} failed "
            f"of {result.total_count}"
        )
        return result

    def _place(
        self,
        task: Task,
        events: List[CalendarEvent],
        step_minutes: int,
        horizon_minutes: int,
        start_offset_minutes: int = 0
    ) -> PlacementResult:
        """Search a slot for one task and materialize it."""
        outcome = self.slot_search.search(
            task.proposed_interval,
            events,
            step_minutes=step_minutes,
            horizon_minutes=horizon_minutes,
            start_offset_minutes=start_offset_minutes,
        )

        if not outcome.found:
            hours = horizon_minutes / 60
            reason = f"no available slot within {hours:g} hours"
            logger.info(f"Skipping '{task.title}': {reason}")
            return PlacementResult(
                task=task,
                outcome=Outcome.SKIPPED,
                reason=reason,
                conflicting_events=outcome.blocking_events,
            )

        if self.event_source is not None:
            try:
                self.event_source.create_event(
                    task.title, outcome.interval, task.event_description or None
                )
            except TransportError as e:
                logger.error(f"Failed to create calendar event for '{task.title}': {e}")
                return PlacementResult(
                    task=task,
                    outcome=Outcome.FAILED,
                    final_interval=outcome.interval,
                    moved_by_minutes=outcome.moved_by_minutes,
                    reason=str(e),
                )

        moved = outcome.moved_by_minutes > 0
        if moved:
            logger.info(
                f"Placed '{task.title}' at {outcome.interval}, moved {outcome.moved_by_minutes} min"
            )
        else:
            logger.info(f"Placed '{task.title}' at {outcome.interval}")

        return PlacementResult(
            task=task,
            outcome=Outcome.MOVED if moved else Outcome.PLACED,
            final_interval=outcome.interval,
            moved_by_minutes=outcome.moved_by_minutes,
        )
