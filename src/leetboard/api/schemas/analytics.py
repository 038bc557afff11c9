from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field

from leetboard.analytics import ProgressDay


class SkillBucketResponse(BaseModel):
    skill_level: str
    count: int
    percentage: float


class LeaderboardEntry(BaseModel):
    rank: int
    leetcode_id: str
    display_name: str
    total_solved: int
    skill_level: str | None = None


class ProgressRequest(BaseModel):
    days: List[ProgressDay] = Field(default_factory=list)


class ProgressSummaryResponse(BaseModel):
    total_problems: int
    average_per_day: float
    active_days: int
    consistency: float
    easy_total: int
    medium_total: int
    hard_total: int


class ReloadResponse(BaseModel):
    source: str
    total: int
    failures: List[str]


class ConnectionTestResponse(BaseModel):
    success: bool
    count: int
    data: List[Dict[str, Any]]
    message: str
