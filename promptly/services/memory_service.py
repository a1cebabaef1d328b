# File: promptly/services/memory_service.py
"""
In-memory collaborators for the CLI and tests.
"""

import datetime
from typing import Dict, Iterable, List, Optional

from promptly.models import CalendarEvent, Interval, RestrictedRange, TransportError, format_local_datetime
from promptly.services.base import EventSource, PreferenceStore
from promptly.utils.logger import setup_logger

logger = setup_logger(__name__)


class InMemoryCalendarService(EventSource):
    """A calendar held in a list. Created and moved events are visible to later queries."""

    def __init__(self, events: Iterable[CalendarEvent] = ()):
        self.events: List[CalendarEvent] = list(events)
        self._next_id = 1

    def find_events(self, day: datetime.date) -> List[CalendarEvent]:
        # An event belongs to every day it touches
        day_start = datetime.datetime.combine(day, datetime.time.min)
        day_end = day_start + datetime.timedelta(days=1)
        return [e for e in self.events if e.start < day_end and e.end > day_start]

    def create_event(
        self,
        title: str,
        interval: Interval,
        description: Optional[str] = None
    ) -> dict:
        event_id = f"local-{self._next_id}"
        self._next_id += 1
        self.events.append(CalendarEvent(
            title=title,
            interval=interval,
            source_id=event_id,
            description=description,
        ))
        logger.debug(f"Created local event '{title}' at {interval}")
        return {'success': True, 'message': 'Event created', 'data': {'event_id': event_id}}

    def move_event(self, title: str, old_interval: Interval, new_interval: Interval) -> dict:
        for event in self.events:
            if event.title == title and event.start == old_interval.start:
                event.interval = new_interval
                logger.debug(f"Moved local event '{title}' to {new_interval}")
                return {'success': True, 'message': 'Event moved'}
        raise TransportError(
            "move_event",
            LookupError(f"No event '{title}' at {format_local_datetime(old_interval.start)}")
        )


class StaticPreferenceStore(PreferenceStore):
    """Restricted hours from a fixed per-user mapping."""

    def __init__(self, ranges_by_user: Optional[Dict[str, List[RestrictedRange]]] = None):
        self.ranges_by_user = dict(ranges_by_user or {})

    def get_restricted_hours(self, user_id: str) -> List[RestrictedRange]:
        return list(self.ranges_by_user.get(user_id, []))
