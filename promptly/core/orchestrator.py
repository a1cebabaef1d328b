# File: promptly/core/orchestrator.py
"""
Main orchestrator module for Promptly.
Coordinates the collaborators and the scheduling processors for one run.

Collaborator I/O happens at two points only: the snapshot taken at the start
of a run (restricted hours, calendar events) and the per-task
materialization of placements.
"""

import datetime
import threading
from dataclasses import dataclass
from typing import Iterable, List, Optional

from googleapiclient.discovery import Resource

from promptly.core.config_manager import Config
from promptly.models import (
    BatchResult,
    CalendarEvent,
    Outcome,
    PlacementResult,
    Task,
    TransportError,
    parse_date,
)
from promptly.models.common import describe_shift
from promptly.processors.batch_scheduler import BatchScheduler
from promptly.processors.conflict_processor import ConflictDetector
from promptly.processors.restriction_processor import EventTimeValidation, RestrictionEngine
from promptly.processors.slot_search import SlotSearch
from promptly.services.base import EventSource, PreferenceStore
from promptly.services.planner_service import PlannerClient, PlanResponse
from promptly.services.service_factory import ServiceFactory
from promptly.utils.logger import setup_logger

logger = setup_logger(__name__)


@dataclass(frozen=True)
class ScheduleOptions:
    """Search parameters for one kind of scheduling flow."""
    step_minutes: int
    horizon_minutes: int
    start_offset_minutes: int = 0
    respect_restrictions: bool = True

    def __post_init__(self):
        if self.step_minutes <= 0:
            raise ValueError(f"step_minutes must be positive: {self.step_minutes}")
        if self.horizon_minutes < 0:
            raise ValueError(f"horizon_minutes cannot be negative: {self.horizon_minutes}")
        if self.start_offset_minutes < 0:
            raise ValueError(f"start_offset_minutes cannot be negative: {self.start_offset_minutes}")

    @classmethod
    def ai_plan(cls) -> 'ScheduleOptions':
        """Confirming an AI plan: 1 hour steps, up to 12 hours later."""
        return cls(Config.AI_PLAN_STEP_MINUTES, Config.AI_PLAN_HORIZON_MINUTES)

    @classmethod
    def manual_reschedule(cls) -> 'ScheduleOptions':
        """Moving one event: tomorrow at the same time, then 30 minute steps up to 48 hours."""
        return cls(
            Config.MANUAL_STEP_MINUTES,
            Config.MANUAL_HORIZON_MINUTES,
            start_offset_minutes=Config.MANUAL_START_OFFSET_MINUTES,
        )


class SchedulingOrchestrator:
    """
    Entry point for scheduling runs.

    Wires the Event Source and Preference Store into the restriction,
    conflict, slot-search and batch processors.
    """

    def __init__(
        self,
        event_source: EventSource,
        preference_store: PreferenceStore,
        detector: Optional[ConflictDetector] = None,
        planner: Optional[PlannerClient] = None
    ):
        self.event_source = event_source
        self.preference_store = preference_store
        self.detector = detector or ConflictDetector()
        self.planner = planner

    # ==================== Snapshot ====================

    def load_restrictions(self, user_id: str) -> RestrictionEngine:
        """
        Fetch restricted hours once for this run.

        An unreachable store is logged and the run proceeds unrestricted.
        """
        try:
            ranges = self.preference_store.get_restricted_hours(user_id)
        except TransportError as e:
            logger.warning(f"Restricted hours unavailable for {user_id}, scheduling without them: {e}")
            return RestrictionEngine()

        logger.info(f"Loaded {len(ranges)} restricted ranges for {user_id}")
        return RestrictionEngine(ranges)

    def load_events(self, first_day: datetime.date, last_day: datetime.date) -> List[CalendarEvent]:
        """
        Snapshot every event on the civil dates `first_day` through `last_day`.

        Multi-day events are reported by each day they touch; duplicates are
        dropped.

        Raises:
            TransportError: If the Event Source fails
        """
        events: List[CalendarEvent] = []
        seen = set()
        current = first_day
        while current <= last_day:
            for event in self.event_source.find_events(current):
                key = (event.source_id, event.title, event.start, event.end)
                if key not in seen:
                    seen.add(key)
                    events.append(event)
            current += datetime.timedelta(days=1)

        logger.info(
            f"Snapshot of {len(events)} events from {first_day.isoformat()} to {last_day.isoformat()}"
        )
        return events

    @staticmethod
    def _search_window(intervals: List, options: 'ScheduleOptions', day: datetime.date):
        """Civil dates any candidate of any interval can touch."""
        reach = datetime.timedelta(minutes=options.start_offset_minutes + options.horizon_minutes)
        first_day = min([day] + [i.start.date() for i in intervals])
        last_day = max([day] + [(i.end + reach).date() for i in intervals])
        return first_day, last_day

    def _slot_search(self, restrictions: RestrictionEngine, options: ScheduleOptions) -> SlotSearch:
        return SlotSearch(
            self.detector,
            restrictions if options.respect_restrictions and restrictions else None
        )

    # ==================== Operations ====================

    def schedule_batch(
        self,
        user_id: str,
        day,
        tasks: Iterable[Task],
        existing_events: Optional[Iterable[CalendarEvent]] = None,
        options: Optional[ScheduleOptions] = None,
        cancel_event: Optional[threading.Event] = None
    ) -> BatchResult:
        """
        Place tasks on the calendar for one planning session.

        Args:
            user_id: Whose restricted hours apply
            day: Planning date (date or "YYYY-MM-DD")
            tasks: Tasks in planner order
            existing_events: Calendar snapshot; fetched from the Event Source if None
            options: Step and horizon; defaults to the AI-plan settings
            cancel_event: Stops the run between tasks when set

        Returns:
            BatchResult with counts and one PlacementResult per processed task

        Raises:
            TransportError: If the initial calendar snapshot cannot be taken
        """
        options = options or ScheduleOptions.ai_plan()
        day = parse_date(day)
        tasks = list(tasks)

        logger.info("=" * 60)
        logger.info(f"Scheduling run for {user_id} on {day.isoformat()}: {len(tasks)} tasks")
        logger.info("=" * 60)

        restrictions = self.load_restrictions(user_id)
        if existing_events is None:
            first_day, last_day = self._search_window(
                [t.proposed_interval for t in tasks], options, day
            )
            existing_events = self.load_events(first_day, last_day)

        scheduler = BatchScheduler(self._slot_search(restrictions, options), self.event_source)
        return scheduler.schedule(
            tasks,
            existing_events,
            step_minutes=options.step_minutes,
            horizon_minutes=options.horizon_minutes,
            cancel_event=cancel_event,
            start_offset_minutes=options.start_offset_minutes,
        )

    def reschedule_event(
        self,
        user_id: str,
        event: CalendarEvent,
        options: Optional[ScheduleOptions] = None
    ) -> PlacementResult:
        """
        Move an existing event to its next free slot.

        Tries the same time tomorrow first, then later in 30 minute steps up
        to 48 hours out (see ScheduleOptions.manual_reschedule). The event
        never conflicts with itself.
        """
        options = options or ScheduleOptions.manual_reschedule()
        task = Task(
            title=event.title,
            proposed_interval=event.interval,
            description=event.description or "",
            category="reschedule",
        )
        logger.info(f"Rescheduling '{event.title}' from {event.interval}")

        restrictions = self.load_restrictions(user_id)
        first_day, last_day = self._search_window([event.interval], options, event.start.date())
        try:
            snapshot = self.load_events(first_day, last_day)
        except TransportError as e:
            return PlacementResult(task=task, outcome=Outcome.FAILED, reason=str(e))

        outcome = self._slot_search(restrictions, options).search(
            event.interval,
            snapshot,
            step_minutes=options.step_minutes,
            horizon_minutes=options.horizon_minutes,
            exclude_title=event.title,
            start_offset_minutes=options.start_offset_minutes,
        )

        if not outcome.found:
            reason = f"no available slot within the next {options.horizon_minutes // 60} hours"
            logger.info(f"Could not reschedule '{event.title}': {reason}")
            return PlacementResult(
                task=task,
                outcome=Outcome.SKIPPED,
                reason=reason,
                conflicting_events=outcome.blocking_events,
            )

        try:
            self.event_source.move_event(event.title, event.interval, outcome.interval)
        except TransportError as e:
            logger.error(f"Failed to move '{event.title}': {e}")
            return PlacementResult(
                task=task,
                outcome=Outcome.FAILED,
                final_interval=outcome.interval,
                moved_by_minutes=outcome.moved_by_minutes,
                reason=str(e),
            )

        phrase = describe_shift(outcome.moved_by_minutes)
        logger.info(f"Moved '{event.title}' {phrase}")
        return PlacementResult(
            task=task,
            outcome=Outcome.MOVED if outcome.moved_by_minutes else Outcome.PLACED,
            final_interval=outcome.interval,
            moved_by_minutes=outcome.moved_by_minutes,
            reason=f"Moved {phrase}",
        )

    def validate_event_time(self, user_id: str, start_time: str, end_time: str) -> EventTimeValidation:
        """Check an "HH:MM"-"HH:MM" time against the user's restricted hours."""
        return self.load_restrictions(user_id).validate_event_time(start_time, end_time)

    def plan_from_prompt(
        self,
        user_id: str,
        day,
        prompt: str,
        options: Optional[ScheduleOptions] = None
    ) -> BatchResult:
        """
        Ask the planning service for tasks and schedule them.

        Raises:
            ValueError: If no planner client is configured
            TransportError: If the planner or the calendar snapshot fails
        """
        if self.planner is None:
            raise ValueError("No planner client configured")

        day = parse_date(day)
        plan: PlanResponse = self.planner.request_plan(prompt, default_date=day)
        if plan.summary:
            logger.info(f"Planner summary: {plan.summary}")
        for conflict in plan.conflicts:
            logger.info(f"Planner reported conflict: {conflict}")

        return self.schedule_batch(user_id, day, plan.tasks, options=options)


class OrchestratorFactory:
    """Factory for creating SchedulingOrchestrator instances with dependency injection."""

    @staticmethod
    def create_google(calendar_service: Resource, sheets_service: Resource) -> SchedulingOrchestrator:
        """
        Create an orchestrator over Google Calendar and Google Sheets.

        Raises:
            ValueError: If configuration is invalid
        """
        logger.info("Creating SchedulingOrchestrator via factory")

        if not Config.validate():
            raise ValueError("Configuration validation failed")

        event_source, preference_store = ServiceFactory.create_services(
            calendar_service, sheets_service
        )
        return SchedulingOrchestrator(
            event_source,
            preference_store,
            planner=ServiceFactory.create_planner_client(),
        )
