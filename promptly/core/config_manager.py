# File: promptly/core/config_manager.py
"""
Centralized configuration management for Promptly.
Loads settings from environment variables (and a local .env file).
"""

import os
from pathlib import Path
from typing import List

import pytz
from dotenv import load_dotenv

BASE_DIR = Path(__file__).parent.parent.parent  # Go up 3 levels from promptly/core/

# Load environment variables
load_dotenv(BASE_DIR / ".env")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


class Config:
    """Application configuration singleton."""

    # Conflict detection
    BUFFER_MINUTES = _int_env("PROMPTLY_BUFFER_MINUTES", 30)

    # Restricted hours search granularity
    RESTRICTION_STEP_MINUTES = _int_env("PROMPTLY_RESTRICTION_STEP_MINUTES", 15)

    # AI plan confirmation: 1 hour steps, up to 12 hours later
    AI_PLAN_STEP_MINUTES = _int_env("PROMPTLY_AI_PLAN_STEP_MINUTES", 60)
    AI_PLAN_HORIZON_MINUTES = _int_env("PROMPTLY_AI_PLAN_HORIZON_MINUTES", 12 * 60)

    # Manual reschedule: start tomorrow at the same time, 30 minute steps, up to 48 hours
    MANUAL_STEP_MINUTES = _int_env("PROMPTLY_MANUAL_STEP_MINUTES", 30)
    MANUAL_HORIZON_MINUTES = _int_env("PROMPTLY_MANUAL_HORIZON_MINUTES", 48 * 60)
    MANUAL_START_OFFSET_MINUTES = _int_env("PROMPTLY_MANUAL_START_OFFSET_MINUTES", 24 * 60)

    # Calendar
    TARGET_TIMEZONE = os.getenv("TIMEZONE", "Europe/Amsterdam")
    CALENDAR_ID = os.getenv("CALENDAR_ID", "primary")
    GENERATOR_ID = "Promptly_Scheduler_v1"
    GOOGLE_NUM_RETRIES = _int_env("PROMPTLY_GOOGLE_NUM_RETRIES", 2)

    # Preferences sheet
    SHEET_ID = os.getenv("SHEET_ID", "")
    RESTRICTED_HOURS_RANGE = os.getenv("RESTRICTED_HOURS_RANGE", "RestrictedHours!A:D")

    # External planner
    PLANNER_API_URL = os.getenv("PLANNER_API_URL", "http://localhost:8000")
    HTTP_TIMEOUT_SECONDS = float(os.getenv("PROMPTLY_HTTP_TIMEOUT_SECONDS", "10"))

    @classmethod
    def errors(cls) -> List[str]:
        """Collect configuration problems."""
        errors = []

        if cls.BUFFER_MINUTES < 0:
            errors.append("PROMPTLY_BUFFER_MINUTES cannot be negative")

        for name in ("RESTRICTION_STEP_MINUTES", "AI_PLAN_STEP_MINUTES", "MANUAL_STEP_MINUTES"):
            if getattr(cls, name) <= 0:
                errors.append(f"{name} must be positive")

        if cls.AI_PLAN_HORIZON_MINUTES < cls.AI_PLAN_STEP_MINUTES:
            errors.append("AI_PLAN_HORIZON_MINUTES is shorter than one step")

        if cls.MANUAL_HORIZON_MINUTES < cls.MANUAL_START_OFFSET_MINUTES:
            errors.append("MANUAL_HORIZON_MINUTES is shorter than the start offset")

        if cls.TARGET_TIMEZONE not in pytz.all_timezones_set:
            errors.append(f"Unknown TIMEZONE: {cls.TARGET_TIMEZONE}")

        if cls.HTTP_TIMEOUT_SECONDS <= 0:
            errors.append("PROMPTLY_HTTP_TIMEOUT_SECONDS must be positive")

        return errors

    @classmethod
    def validate(cls) -> bool:
        """Validate that the configuration is usable."""
        errors = cls.errors()
        if errors:
            for error in errors:
                print(f"Configuration Error: {error}")
            return False

        return True
