# File: promptly/models/enums.py

from enum import Enum


class SearchState(Enum):
    """Slot search states."""
    PROBING = "probing"
    FOUND = "found"
    EXHAUSTED = "exhausted"


class Outcome(Enum):
    """Per-task result of a scheduling run."""
    PLACED = "placed"      # kept its proposed time
    MOVED = "moved"        # placed after a forward shift
    SKIPPED = "skipped"    # no free slot within the horizon
    FAILED = "failed"      # Event Source rejected the placement

    @property
    def is_placed(self) -> bool:
        return self in (Outcome.PLACED, Outcome.MOVED)
