# File: promptly/services/calendar_service.py

import datetime
from typing import List, Optional

import httplib2
import pytz
from googleapiclient.discovery import Resource
from googleapiclient.errors import HttpError

from promptly.core.config_manager import Config
from promptly.models import CalendarEvent, Interval, TransportError, format_local_datetime
from promptly.services.base import EventSource
from promptly.utils.logger import setup_logger

logger = setup_logger(__name__)


class GoogleCalendarService(EventSource):
    """Event Source backed by the Google Calendar API."""

    def __init__(
        self,
        calendar_service: Resource,
        calendar_id: str = Config.CALENDAR_ID,
        timezone: str = Config.TARGET_TIMEZONE
    ):
        """
        Initialize calendar service.

        Args:
            calendar_service: Authenticated Google Calendar API resource. Its
                HTTP transport should carry a timeout; a timed-out request is
                reported as a TransportError.
            calendar_id: Calendar to read and write
            timezone: Zone whose wall clock the scheduler works in
        """
        self.service = calendar_service
        self.calendar_id = calendar_id
        self.timezone_name = timezone
        self.timezone = pytz.timezone(timezone)
        self.generator_id = Config.GENERATOR_ID

    def _execute(self, request, operation: str) -> dict:
        """Run an API request, mapping transport failures to TransportError."""
        try:
            return request.execute(num_retries=Config.GOOGLE_NUM_RETRIES)
        except (HttpError, httplib2.HttpLib2Error, OSError) as e:
            logger.error(f"Google Calendar {operation} failed: {e}")
            raise TransportError(operation, e) from e

    def _to_wall_clock(self, time_str: str) -> Optional[datetime.datetime]:
        """Parse a Google dateTime and express it as naive local wall-clock time."""
        try:
            parsed = datetime.datetime.fromisoformat(time_str.replace('Z', '+00:00'))
        except (AttributeError, ValueError):
            return None
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(self.timezone).replace(tzinfo=None)
        return parsed

    def _day_window(self, day: datetime.date):
        start = self.timezone.localize(datetime.datetime.combine(day, datetime.time.min))
        end = self.timezone.localize(
            datetime.datetime.combine(day + datetime.timedelta(days=1), datetime.time.min)
        )
        return start.isoformat(), end.isoformat()

    def _list_raw_events(self, day: datetime.date) -> List[dict]:
        time_min, time_max = self._day_window(day)
        result = self._execute(
            self.service.events().list(
                calendarId=self.calendar_id,
                timeMin=time_min,
                timeMax=time_max,
                singleEvents=True,
                orderBy='startTime'
            ),
            "find_events"
        )
        return result.get('items', [])

    def find_events(self, day: datetime.date) -> List[CalendarEvent]:
        """
        Fetch the events of one civil date.

        All-day events carry no time range and are left out of the snapshot.
        """
        logger.info(f"Fetching calendar events for {day.isoformat()}")

        typed_events = []
        for event in self._list_raw_events(day):
            start_raw = event.get('start', {}).get('dateTime')
            end_raw = event.get('end', {}).get('dateTime')
            if not start_raw or not end_raw:
                logger.debug(f"Ignoring all-day event: {event.get('summary', 'No Title')}")
                continue

            start_dt = self._to_wall_clock(start_raw)
            end_dt = self._to_wall_clock(end_raw)
            if not start_dt or not end_dt or end_dt <= start_dt:
                logger.warning(f"Could not parse event times for {event.get('summary')}")
                continue

            extended_props = event.get('extendedProperties', {}).get('private', {})
            typed_events.append(CalendarEvent(
                title=event.get('summary', 'No Title'),
                interval=Interval(start_dt, end_dt),
                source_id=event.get('id'),
                description=event.get('description'),
                metadata={'generated': extended_props.get('sourceId') == self.generator_id},
            ))

        logger.info(f"Found {len(typed_events)} timed events on {day.isoformat()}")
        return typed_events

    def _event_times(self, interval: Interval) -> dict:
        return {
            'start': {
                'dateTime': format_local_datetime(interval.start),
                'timeZone': self.timezone_name,
            },
            'end': {
                'dateTime': format_local_datetime(interval.end),
                'timeZone': self.timezone_name,
            },
        }

    def create_event(
        self,
        title: str,
        interval: Interval,
        description: Optional[str] = None
    ) -> dict:
        """
        Create a calendar event for a placed task.

        Returns:
            The inserted event resource
        """
        body = {
            'summary': title,
            'description': description or "",
            'extendedProperties': {
                'private': {
                    'sourceId': self.generator_id,
                    'promptlyScheduled': interval.start.date().isoformat(),
                }
            },
        }
        body.update(self._event_times(interval))

        created = self._execute(
            self.service.events().insert(calendarId=self.calendar_id, body=body),
            "create_event"
        )
        logger.info(f"Created event '{title}' at {interval}")
        return created

    def move_event(self, title: str, old_interval: Interval, new_interval: Interval) -> dict:
        """
        Move the event titled `title` that starts at `old_interval.start`.

        Raises:
            TransportError: If the API fails or no such event exists
        """
        target = None
        for event in self._list_raw_events(old_interval.start.date()):
            start_raw = event.get('start', {}).get('dateTime')
            if event.get('summary') == title and start_raw \
                    and self._to_wall_clock(start_raw) == old_interval.start:
                target = event
                break

        if target is None:
            raise TransportError(
                "move_event",
                LookupError(f"No event '{title}' at {format_local_datetime(old_interval.start)}")
            )

        moved = self._execute(
            self.service.events().patch(
                calendarId=self.calendar_id,
                eventId=target['id'],
                body=self._event_times(new_interval)
            ),
            "move_event"
        )
        logger.info(f"Moved event '{title}' to {new_interval}")
        return moved
