from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel

from leetboard.models import DifficultyStats, UserRecord
from leetboard.view import SummaryStats, completion_percent, profile_url, top_languages


class LanguageCount(BaseModel):
    language: str
    count: int


class DifficultyResponse(BaseModel):
    solved: int
    completion: float
    acceptance_rate: float

    @classmethod
    def from_stats(cls, stats: DifficultyStats) -> "DifficultyResponse":
        return cls(
            solved=stats.solved,
            completion=completion_percent(stats),
            acceptance_rate=stats.acceptance_rate,
        )


class UserResponse(BaseModel):
    leetcode_id: str
    display_name: str
    collected_at: str | None = None
    avatar_url: str | None = None
    company: str | None = None
    school: str | None = None
    location: str | None = None
    star_rating: float | None = None
    ranking: int | None = None
    total_solved: int
    easy: DifficultyResponse
    medium: DifficultyResponse
    hard: DifficultyResponse
    easy_acceptance_rate: float
    medium_acceptance_rate: float
    hard_acceptance_rate: float
    overall_acceptance_rate: float
    skill_level: str | None = None
    current_streak: int
    max_streak: int
    last_7_days: int
    last_30_days: int
    language_stats: Dict[str, int]
    top_languages: List[LanguageCount]
    profile_url: str

    @classmethod
    def from_record(cls, record: UserRecord) -> "UserResponse":
        return cls(
            leetcode_id=record.leetcode_id,
            display_name=record.display_name,
            collected_at=record.collected_at,
            avatar_url=record.avatar_url,
            company=record.company,
            school=record.school,
            location=record.location,
            star_rating=record.star_rating,
            ranking=record.ranking,
            total_solved=record.total_solved,
            easy=DifficultyResponse.from_stats(record.easy),
            medium=DifficultyResponse.from_stats(record.medium),
            hard=DifficultyResponse.from_stats(record.hard),
            easy_acceptance_rate=record.easy_acceptance_rate,
            medium_acceptance_rate=record.medium_acceptance_rate,
            hard_acceptance_rate=record.hard_acceptance_rate,
            overall_acceptance_rate=record.overall_acceptance_rate,
            skill_level=record.skill_level,
            current_streak=record.current_streak,
            max_streak=record.max_streak,
            last_7_days=record.last_7_days,
            last_30_days=record.last_30_days,
            language_stats=dict(record.language_stats),
            top_languages=[
                LanguageCount(language=language, count=count)
                for language, count in top_languages(record)
            ],
            profile_url=profile_url(record),
        )


class SummaryStatsResponse(BaseModel):
    total_users: int
    average_solved: int
    active_users: int
    top_performer_id: str | None = None
    top_performer_name: str | None = None
    top_performer_solved: int = 0

    @classmethod
    def from_stats(cls, stats: SummaryStats) -> "SummaryStatsResponse":
        top = stats.top_performer
        return cls(
            total_users=stats.total_users,
            average_solved=stats.average_solved,
            active_users=stats.active_users,
            top_performer_id=top.leetcode_id if top else None,
            top_performer_name=top.display_name if top else None,
            top_performer_solved=top.total_solved if top else 0,
        )


class UserListResponse(BaseModel):
    source: str
    stats: SummaryStatsResponse
    total: int
    showing: int
    users: List[UserResponse]
