# File: promptly/services/service_factory.py

from typing import Tuple

from googleapiclient.discovery import Resource

from promptly.core.config_manager import Config
from promptly.services.calendar_service import GoogleCalendarService
from promptly.services.planner_service import PlannerClient
from promptly.services.sheets_service import GoogleSheetsPreferenceStore
from promptly.utils.logger import setup_logger

logger = setup_logger(__name__)


class ServiceFactory:
    """Factory for creating collaborator instances."""

    @staticmethod
    def create_services(
        calendar_service: Resource,
        sheets_service: Resource
    ) -> Tuple[GoogleCalendarService, GoogleSheetsPreferenceStore]:
        """
        Wrap already-authenticated Google API resources.

        Args:
            calendar_service: Authenticated calendar API resource
            sheets_service: Authenticated sheets API resource

        Returns:
            Tuple of (event_source, preference_store)
        """
        logger.debug("Creating Google-backed collaborators")
        return (
            GoogleCalendarService(calendar_service),
            GoogleSheetsPreferenceStore(sheets_service)
        )

    @staticmethod
    def create_planner_client() -> PlannerClient:
        """Create the planning API client from configuration."""
        return PlannerClient(Config.PLANNER_API_URL, timeout=Config.HTTP_TIMEOUT_SECONDS)
