"""Aggregates over a caller-supplied daily progress series."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class ProgressDay(BaseModel):
    date: str
    problems_solved: int = Field(default=0, ge=0)
    easy_solved: int = Field(default=0, ge=0)
    medium_solved: int = Field(default=0, ge=0)
    hard_solved: int = Field(default=0, ge=0)
    time_spent_minutes: int = Field(default=0, ge=0)
    submissions: int = Field(default=0, ge=0)
    accepted_submissions: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)


@dataclass(frozen=True)
class ProgressSummary:
    total_problems: int
    average_per_day: float
    active_days: int
    consistency: float
    easy_total: int
    medium_total: int
    hard_total: int


def summarize_progress(days: Sequence[ProgressDay]) -> Optional[ProgressSummary]:
    """Summarize a daily series; ``None`` when the series is empty.

    ``consistency`` is the share of days with at least one solve, as a
    percentage.
    """

    if not days:
        return None
    total = sum(day.problems_solved for day in days)
    active = sum(1 for day in days if day.problems_solved > 0)
    return ProgressSummary(
        total_problems=total,
        average_per_day=total / len(days),
        active_days=active,
        consistency=active / len(days) * 100,
        easy_total=sum(day.easy_solved for day in days),
        medium_total=sum(day.medium_solved for day in days),
        hard_total=sum(day.hard_solved for day in days),
    )
