"""
Scheduling run from a JSON file.

Usage:
    python scripts/plan.py plan.json [--step 60] [--horizon 720] [--json]

The file holds one planning session:
    {
        "user_id": "user123",
        "date": "2025-11-18",
        "events": [{"title": "Lunch", "start_time": "12:00 PM", "end_time": "1:00 PM"}],
        "restricted_hours": [{"id": "1", "startTime": "22:00", "endTime": "23:59"}],
        "tasks": [{"title": "Write report", "start_time": "12:15:00", "end_time": "12:45:00"}]
    }
"""

import argparse
import json
import sys
import time
from pathlib import Path

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from promptly.core.config_manager import Config
from promptly.core.orchestrator import SchedulingOrchestrator, ScheduleOptions
from promptly.models import FormatError, event_from_dict, parse_date
from promptly.processors.restriction_processor import RestrictionEngine
from promptly.services.memory_service import InMemoryCalendarService, StaticPreferenceStore
from promptly.services.planner_service import parse_plan_response
from promptly.utils.logger import setup_logger

logger = setup_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Place planned tasks around an existing calendar.")
    parser.add_argument("input", type=Path, help="JSON planning session")
    parser.add_argument("--step", type=int, default=Config.AI_PLAN_STEP_MINUTES,
                        help="minutes added per search step")
    parser.add_argument("--horizon", type=int, default=Config.AI_PLAN_HORIZON_MINUTES,
                        help="largest shift tried, in minutes")
    parser.add_argument("--ignore-restrictions", action="store_true",
                        help="do not apply restricted hours")
    parser.add_argument("--json", action="store_true", help="print the result as JSON")
    return parser


def main(argv=None) -> int:
    """
    Main execution function.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = build_parser().parse_args(argv)
    start_time = time.time()

    if not Config.validate():
        logger.error("Configuration validation failed")
        return 1

    try:
        session = json.loads(args.input.read_text(encoding="utf-8"))
        day = parse_date(session.get("date") or time.strftime("%Y-%m-%d"))
        user_id = str(session.get("user_id", "local"))

        events = [event_from_dict(e, day) for e in session.get("events", [])]
        restrictions = RestrictionEngine.from_records(session.get("restricted_hours", []))
        plan = parse_plan_response({"scheduled_tasks": session.get("tasks", [])}, day)

        orchestrator = SchedulingOrchestrator(
            InMemoryCalendarService(events),
            StaticPreferenceStore({user_id: list(restrictions.ranges)}),
        )
        options = ScheduleOptions(
            step_minutes=args.step,
            horizon_minutes=args.horizon,
            respect_restrictions=not args.ignore_restrictions,
        )
        result = orchestrator.schedule_batch(user_id, day, plan.tasks, options=options)

    except FileNotFoundError as e:
        logger.error(f"Could not find: {e.filename}")
        return 1
    except (json.JSONDecodeError, FormatError, ValueError) as e:
        logger.error(f"Invalid planning session: {e}")
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(result.summary_text())

    logger.info(f"Total execution time: {time.time() - start_time:.2f} seconds")
    return 0


if __name__ == "__main__":
    sys.exit(main())
