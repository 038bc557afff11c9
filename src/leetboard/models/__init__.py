"""Shared record models."""

from .user import SKILL_LEVELS, DifficultyStats, SkillLevel, UserRecord

__all__ = [
    "SKILL_LEVELS",
    "DifficultyStats",
    "SkillLevel",
    "UserRecord",
]
