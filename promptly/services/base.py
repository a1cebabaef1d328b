"""Collaborator interfaces the scheduler depends on."""
import datetime
from abc import ABC, abstractmethod
from typing import List, Optional

from promptly.models import CalendarEvent, Interval, RestrictedRange


class EventSource(ABC):
    """
    Calendar access scoped to civil dates.

    Datetimes cross this boundary as local "YYYY-MM-DDTHH:MM:SS" wall-clock
    values; no timezone offset is transmitted. Implementations raise
    TransportError when the backend fails or times out.
    """

    @abstractmethod
    def find_events(self, day: datetime.date) -> List[CalendarEvent]:
        """Return every event on `day`."""
        pass

    @abstractmethod
    def create_event(
        self,
        title: str,
        interval: Interval,
        description: Optional[str] = None
    ) -> dict:
        """Create an event and return the backend's response."""
        pass

    @abstractmethod
    def move_event(self, title: str, old_interval: Interval, new_interval: Interval) -> dict:
        """Move the event titled `title` starting at `old_interval.start`."""
        pass


class PreferenceStore(ABC):
    """Per-user scheduling preferences."""

    @abstractmethod
    def get_restricted_hours(self, user_id: str) -> List[RestrictedRange]:
        """
        Return the user's restricted ranges.

        Corrupt stored entries are skipped, not raised. Raises TransportError
        when the store cannot be reached.
        """
        pass
