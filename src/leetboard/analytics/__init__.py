"""Progress analytics over supplied daily series."""

from .progress import ProgressDay, ProgressSummary, summarize_progress

__all__ = [
    "ProgressDay",
    "ProgressSummary",
    "summarize_progress",
]
