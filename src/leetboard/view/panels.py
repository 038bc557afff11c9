"""Secondary dashboard panels: skill mix, leaderboard and per-user details."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from leetboard.models import SKILL_LEVELS, DifficultyStats, UserRecord

from .pipeline import sort_records


PROFILE_URL_TEMPLATE = "https://leetcode.com/{leetcode_id}"


@dataclass(frozen=True)
class SkillBucket:
    skill_level: str
    count: int
    percentage: float


def skill_distribution(records: Sequence[UserRecord]) -> list[SkillBucket]:
    """Count records per skill level.

    Percentages are taken over every record, unclassified ones included, so
    the buckets may sum to less than 100.
    """

    total = len(records)
    buckets: list[SkillBucket] = []
    for level in SKILL_LEVELS:
        count = sum(1 for record in records if record.skill_level == level)
        percentage = round(count / total * 100, 1) if total else 0.0
        buckets.append(SkillBucket(skill_level=level, count=count, percentage=percentage))
    return buckets


def top_performers(records: Sequence[UserRecord], limit: int = 5) -> list[UserRecord]:
    if limit <= 0:
        return []
    return sort_records(records, "total_solved")[:limit]


def top_languages(record: UserRecord, limit: int = 3) -> list[tuple[str, int]]:
    ranked = sorted(record.language_stats.items(), key=lambda item: -item[1])
    return ranked[: max(limit, 0)]


def completion_percent(stats: DifficultyStats) -> float:
    return max(0.0, min(stats.completion, 100.0))


def profile_url(record: UserRecord) -> str:
    return PROFILE_URL_TEMPLATE.format(leetcode_id=record.leetcode_id)


__all__ = [
    "PROFILE_URL_TEMPLATE",
    "SkillBucket",
    "completion_percent",
    "profile_url",
    "skill_distribution",
    "top_languages",
    "top_performers",
]
