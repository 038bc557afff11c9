"""Pydantic models for API I/O."""

from .users import DifficultyResponse, LanguageCount, SummaryStatsResponse, UserListResponse, UserResponse
from .analytics import (
    ConnectionTestResponse,
    LeaderboardEntry,
    ProgressRequest,
    ProgressSummaryResponse,
    ReloadResponse,
    SkillBucketResponse,
)

__all__ = [
    "ConnectionTestResponse",
    "DifficultyResponse",
    "LanguageCount",
    "LeaderboardEntry",
    "ProgressRequest",
    "ProgressSummaryResponse",
    "ReloadResponse",
    "SkillBucketResponse",
    "SummaryStatsResponse",
    "UserListResponse",
    "UserResponse",
]
