# File: promptly/services/sheets_service.py

from typing import List, Dict, Any

import httplib2
from googleapiclient.discovery import Resource
from googleapiclient.errors import HttpError

from promptly.core.config_manager import Config
from promptly.models import FormatError, RestrictedRange, TransportError, restricted_range_from_dict
from promptly.services.base import PreferenceStore
from promptly.utils.logger import setup_logger

logger = setup_logger(__name__)


class GoogleSheetsPreferenceStore(PreferenceStore):
    """
    Preference Store backed by a Google Sheet.

    The sheet has a header row and one row per restricted range:
    user_id | id | startTime | endTime
    """

    def __init__(
        self,
        sheets_service: Resource,
        sheet_id: str = Config.SHEET_ID,
        range_name: str = Config.RESTRICTED_HOURS_RANGE
    ):
        """
        Initialize sheets store.

        Args:
            sheets_service: Authenticated Google Sheets API resource
            sheet_id: Spreadsheet ID
            range_name: Range to fetch (e.g., "RestrictedHours!A:D")
        """
        self.service = sheets_service
        self.sheet_id = sheet_id
        self.range_name = range_name

    def _fetch_rows(self) -> List[Dict[str, Any]]:
        """Fetch the sheet as a list of header-keyed dicts."""
        try:
            result = self.service.spreadsheets().values().get(
                spreadsheetId=self.sheet_id,
                range=self.range_name
            ).execute(num_retries=Config.GOOGLE_NUM_RETRIES)
        except (HttpError, httplib2.HttpLib2Error, OSError) as e:
            logger.error(f"Error fetching restricted hours from sheets: {e}")
            raise TransportError("get_restricted_hours", e) from e

        values = result.get('values', [])
        if not values or len(values) < 2:
            logger.warning("No header or data rows found in restricted-hours sheet")
            return []

        headers = values[0]
        rows = []
        for row in values[1:]:
            # Pad short rows so every header has a cell
            row_padded = row + [''] * (len(headers) - len(row))
            rows.append({headers[j]: row_padded[j] for j in range(len(headers))})
        return rows

    def get_restricted_hours(self, user_id: str) -> List[RestrictedRange]:
        """
        Fetch a user's restricted ranges.

        Corrupt rows are skipped with a warning.
        """
        logger.info(f"Fetching restricted hours for user {user_id}")

        ranges: List[RestrictedRange] = []
        for index, row in enumerate(self._fetch_rows(), start=2):
            if str(row.get('user_id', '')).strip() != user_id:
                continue
            try:
                ranges.append(restricted_range_from_dict(row, fallback_id=f"row{index}"))
            except (FormatError, ValueError) as e:
                logger.warning(f"Skipping corrupt restricted-hours row {index}: {e}")

        logger.info(f"Loaded {len(ranges)} restricted ranges for user {user_id}")
        return ranges
