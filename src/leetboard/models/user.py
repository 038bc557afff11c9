"""Canonical user models shared across ingestion, loading and view layers."""

from __future__ import annotations

from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


SkillLevel = Literal["Beginner", "Intermediate", "Advanced", "Expert"]

SKILL_LEVELS: tuple[str, ...] = ("Beginner", "Intermediate", "Advanced", "Expert")


class DifficultyStats(BaseModel):
    """Per-difficulty solved count with completion and acceptance percentages."""

    solved: int = Field(default=0, ge=0)
    completion: float = Field(default=0.0, ge=0.0)
    acceptance_rate: float = Field(default=0.0, ge=0.0)

    model_config = ConfigDict(frozen=True)


class UserRecord(BaseModel):
    """Normalized user payload consumed by the view pipeline.

    ``skill_level`` is ``None`` for unclassified records; those never match a
    specific skill filter and are left out of the skill distribution.
    """

    leetcode_id: str = Field(..., min_length=1)
    display_name: str = ""
    collected_at: Optional[str] = None

    username: Optional[str] = None
    real_name: Optional[str] = None
    about_me: Optional[str] = None
    avatar_url: Optional[str] = None
    location: Optional[str] = None
    company: Optional[str] = None
    school: Optional[str] = None
    star_rating: Optional[float] = None
    ranking: Optional[int] = None
    reputation: int = Field(default=0, ge=0)

    total_solved: int = Field(default=0, ge=0)
    easy: DifficultyStats = Field(default_factory=DifficultyStats)
    medium: DifficultyStats = Field(default_factory=DifficultyStats)
    hard: DifficultyStats = Field(default_factory=DifficultyStats)
    # submission acceptance per difficulty, separate from the analysis rate on DifficultyStats
    easy_acceptance_rate: float = Field(default=0.0, ge=0.0, le=100.0)
    medium_acceptance_rate: float = Field(default=0.0, ge=0.0, le=100.0)
    hard_acceptance_rate: float = Field(default=0.0, ge=0.0, le=100.0)
    overall_acceptance_rate: float = Field(default=0.0, ge=0.0, le=100.0)
    language_stats: Dict[str, int] = Field(default_factory=dict)

    skill_level: Optional[SkillLevel] = None

    current_streak: int = Field(default=0, ge=0)
    max_streak: int = Field(default=0, ge=0)
    total_days_active: int = Field(default=0, ge=0)
    last_7_days: int = Field(default=0, ge=0)
    last_30_days: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)

    @property
    def easy_solved(self) -> int:
        return self.easy.solved

    @property
    def medium_solved(self) -> int:
        return self.medium.solved

    @property
    def hard_solved(self) -> int:
        return self.hard.solved

    @property
    def is_classified(self) -> bool:
        return self.skill_level is not None
