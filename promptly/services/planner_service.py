# File: promptly/services/planner_service.py
"""
Client for the external AI planning service.

The service turns free text into structured scheduled tasks. This module
only sends the text and converts the structured answer into Task objects.
"""

import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from promptly.core.config_manager import Config
from promptly.models import FormatError, Task, TransportError, task_from_dict
from promptly.utils.logger import setup_logger

logger = setup_logger(__name__)


@dataclass
class PlanResponse:
    """Structured answer from the planning service."""
    tasks: List[Task] = field(default_factory=list)
    conflicts: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    summary: str = ""
    rejected: List[str] = field(default_factory=list)


def parse_plan_response(data: Dict[str, Any], default_date: Optional[datetime.date] = None) -> PlanResponse:
    """
    Convert a planner payload into a PlanResponse.

    Malformed task entries are skipped with a warning and listed in
    `rejected`; the rest keep their order.
    """
    tasks: List[Task] = []
    rejected: List[str] = []

    for index, entry in enumerate(data.get('scheduled_tasks') or []):
        if not isinstance(entry, dict):
            logger.warning(f"Skipping non-object planner entry at position {index}")
            rejected.append(f"entry {index}")
            continue
        try:
            tasks.append(task_from_dict(entry, default_date))
        except (FormatError, ValueError) as e:
            title = entry.get('title', f'entry {index}')
            logger.warning(f"Skipping planner task '{title}': {e}")
            rejected.append(str(title))

    logger.info(f"Planner returned {len(tasks)} usable tasks ({len(rejected)} rejected)")
    return PlanResponse(
        tasks=tasks,
        conflicts=[str(c) for c in data.get('conflicts') or []],
        suggestions=[str(s) for s in data.get('suggestions') or []],
        summary=str(data.get('summary') or ''),
        rejected=rejected,
    )


class PlannerClient:
    """Requests a plan from the scheduling API."""

    def __init__(
        self,
        base_url: str = Config.PLANNER_API_URL,
        timeout: float = Config.HTTP_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def request_plan(self, prompt: str, default_date: Optional[datetime.date] = None) -> PlanResponse:
        """
        Send the user's request and return the structured plan.

        Raises:
            TransportError: On HTTP failure, timeout or a non-JSON body
        """
        url = f"{self.base_url}/schedule"
        logger.info(f"Requesting plan from {url}")

        try:
            response = self.session.post(
                url,
                json={"tasks": prompt},
                headers={"Content-Type": "application/json"},
                timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            logger.error(f"Planner request failed: {e}")
            raise TransportError("request_plan", e) from e
        except ValueError as e:
            logger.error(f"Planner returned a non-JSON body: {e}")
            raise TransportError("request_plan", e) from e

        if not isinstance(data, dict):
            raise TransportError("request_plan", ValueError("planner response is not an object"))

        return parse_plan_response(data, default_date)
