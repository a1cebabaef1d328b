"""Promptly: conflict-aware slot finding for calendar tasks."""

__version__ = "0.3.0"
