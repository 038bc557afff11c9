"""Helpers to normalize raw profile rows and emit canonical user records."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, Field, ValidationError

from leetboard.models import SKILL_LEVELS, DifficultyStats, UserRecord


logger = logging.getLogger(__name__)

_CONSISTENCY_COUNT_FIELDS = ("current_streak", "max_streak", "total_days_active")
_PROFILE_TEXT_FIELDS = (
    "username",
    "real_name",
    "about_me",
    "avatar_url",
    "location",
    "company",
    "school",
)
_DIFFICULTIES = ("easy", "medium", "hard")


class ProfileDocument(BaseModel):
    """Raw user document in the nested snapshot shape.

    Flat ``user_profiles`` rows are folded into the same shape by
    :meth:`from_mapping`, so the rest of the ingestion only deals with one
    layout.
    """

    leetcode_id: Optional[str] = None
    display_name: Optional[str] = None
    collected_at: Optional[str] = None
    full_profile: Optional[Dict[str, Any]] = None
    difficulty_analysis: Optional[Dict[str, Any]] = None
    consistency_stats: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "ProfileDocument":
        if isinstance(row.get("data"), Mapping):
            data = row["data"]
            return cls(
                leetcode_id=_text(row.get("leetcode_id")),
                display_name=_text(row.get("display_name")),
                collected_at=_text(row.get("collected_at")),
                full_profile=_mapping_or_none(data.get("full_profile")),
                difficulty_analysis=_mapping_or_none(data.get("difficulty_analysis")),
                consistency_stats=_mapping_or_none(data.get("consistency_stats")) or {},
            )
        return cls.from_flat_row(row)

    @classmethod
    def from_flat_row(cls, row: Mapping[str, Any]) -> "ProfileDocument":
        full_profile = {name: row.get(name) for name in _PROFILE_TEXT_FIELDS}
        full_profile.update(
            star_rating=row.get("star_rating"),
            ranking=row.get("ranking"),
            reputation=row.get("reputation"),
            easy_solved=row.get("easy_solved"),
            medium_solved=row.get("medium_solved"),
            hard_solved=row.get("hard_solved"),
            total_solved=row.get("total_solved"),
            easy_acceptance_rate=row.get("easy_acceptance_rate"),
            medium_acceptance_rate=row.get("medium_acceptance_rate"),
            hard_acceptance_rate=row.get("hard_acceptance_rate"),
            overall_acceptance_rate=row.get("overall_acceptance_rate"),
            language_stats=row.get("language_stats"),
        )
        difficulty_analysis = {
            "skill_level": row.get("skill_level"),
            "total_solved": row.get("total_solved"),
            "difficulty_distribution": {
                level: {
                    "solved": row.get(f"{level}_solved"),
                    "completion": row.get(f"{level}_completion"),
                    "acceptance_rate": row.get(f"{level}_difficulty_acceptance"),
                }
                for level in _DIFFICULTIES
            },
            "overall_acceptance_rate": row.get("overall_acceptance_rate"),
        }
        consistency_stats = {
            "current_streak": row.get("current_streak"),
            "max_streak": row.get("max_streak"),
            "total_days_active": row.get("total_days_active"),
            "recent_activity": {
                "last_7_days": row.get("last_7_days_activity"),
                "last_30_days": row.get("last_30_days_activity"),
            },
        }
        return cls(
            leetcode_id=_text(row.get("leetcode_id")),
            display_name=_text(row.get("display_name")),
            collected_at=_text(row.get("collected_at")),
            full_profile=full_profile,
            difficulty_analysis=difficulty_analysis,
            consistency_stats=consistency_stats,
        )


@dataclass(frozen=True)
class IngestReport:
    total_rows: int
    accepted_rows: int
    rejected_rows: List[Tuple[str, str]] = field(default_factory=list)
    unclassified_ids: List[str] = field(default_factory=list)


class RowRejected(ValueError):
    """Raised internally when a raw row cannot become a ``UserRecord``."""


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _mapping_or_none(value: Any) -> Optional[Dict[str, Any]]:
    if isinstance(value, Mapping):
        return dict(value)
    return None


def _parse_number(value: Any, name: str) -> float:
    if value is None or value == "":
        return 0.0
    if isinstance(value, bool):
        raise RowRejected(f"{name} is not numeric")
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        else:
            number = float(str(value).strip())
    except (ValueError, OverflowError):
        raise RowRejected(f"{name} '{value}' is not numeric") from None
    if not math.isfinite(number):
        raise RowRejected(f"{name} '{value}' is not a finite number")
    return number


def _parse_optional_number(value: Any, name: str) -> Optional[float]:
    if value is None or value == "":
        return None
    return _parse_number(value, name)


class _Normalizer:
    """Clamp negative metrics while remembering that the row was out of range."""

    def __init__(self) -> None:
        self.out_of_range = False

    def count(self, value: Any, name: str) -> int:
        number = int(_parse_number(value, name))
        if number < 0:
            self.out_of_range = True
            return 0
        return number

    def rate(self, value: Any, name: str, *, upper: float | None = None) -> float:
        number = _parse_number(value, name)
        if number < 0:
            self.out_of_range = True
            return 0.0
        if upper is not None and number > upper:
            self.out_of_range = True
            return upper
        return number


def _parse_language_stats(value: Any) -> Dict[str, int]:
    if not isinstance(value, Mapping):
        return {}
    stats: Dict[str, int] = {}
    for language, count in value.items():
        try:
            number = int(_parse_number(count, f"language_stats.{language}"))
        except RowRejected:
            continue
        stats[str(language)] = max(0, number)
    return stats


def _difficulty(
    normalizer: _Normalizer,
    distribution: Mapping[str, Any],
    level: str,
    fallback_solved: Any,
) -> DifficultyStats:
    entry = distribution.get(level)
    if not isinstance(entry, Mapping):
        entry = {}
    solved = entry.get("solved")
    if solved is None:
        solved = fallback_solved
    return DifficultyStats(
        solved=normalizer.count(solved, f"{level}.solved"),
        completion=normalizer.rate(entry.get("completion"), f"{level}.completion"),
        acceptance_rate=normalizer.rate(entry.get("acceptance_rate"), f"{level}.acceptance_rate"),
    )


def document_to_record(document: ProfileDocument) -> Tuple[UserRecord, bool]:
    """Convert a raw document into a record.

    Returns the record and whether it is classified. Raises ``RowRejected``
    when the document lacks the identity or one of the required sections.
    """

    if not document.leetcode_id:
        raise RowRejected("missing leetcode_id")
    if document.full_profile is None:
        raise RowRejected("missing full_profile")
    if document.difficulty_analysis is None:
        raise RowRejected("missing difficulty_analysis")

    profile = document.full_profile
    analysis = document.difficulty_analysis
    consistency = document.consistency_stats
    recent = consistency.get("recent_activity")
    if not isinstance(recent, Mapping):
        recent = {}
    distribution = analysis.get("difficulty_distribution")
    if not isinstance(distribution, Mapping):
        distribution = {}

    normalizer = _Normalizer()
    total_solved = profile.get("total_solved")
    if total_solved is None:
        total_solved = analysis.get("total_solved")
    acceptance = profile.get("overall_acceptance_rate")
    if acceptance is None:
        acceptance = analysis.get("overall_acceptance_rate")

    ranking = _parse_optional_number(profile.get("ranking"), "ranking")
    star_rating = _parse_optional_number(profile.get("star_rating"), "star_rating")

    values: Dict[str, Any] = {
        "leetcode_id": document.leetcode_id,
        "display_name": document.display_name or "",
        "collected_at": document.collected_at,
        "star_rating": star_rating,
        "ranking": None if ranking is None else int(ranking),
        "reputation": normalizer.count(profile.get("reputation"), "reputation"),
        "total_solved": normalizer.count(total_solved, "total_solved"),
        "easy": _difficulty(normalizer, distribution, "easy", profile.get("easy_solved")),
        "medium": _difficulty(normalizer, distribution, "medium", profile.get("medium_solved")),
        "hard": _difficulty(normalizer, distribution, "hard", profile.get("hard_solved")),
        "overall_acceptance_rate": normalizer.rate(acceptance, "overall_acceptance_rate", upper=100.0),
        "language_stats": _parse_language_stats(profile.get("language_stats")),
        "last_7_days": normalizer.count(recent.get("last_7_days"), "last_7_days"),
        "last_30_days": normalizer.count(recent.get("last_30_days"), "last_30_days"),
    }
    for name in _PROFILE_TEXT_FIELDS:
        values[name] = _text(profile.get(name))
    for level in _DIFFICULTIES:
        name = f"{level}_acceptance_rate"
        values[name] = normalizer.rate(profile.get(name), name, upper=100.0)
    for name in _CONSISTENCY_COUNT_FIELDS:
        values[name] = normalizer.count(consistency.get(name), name)

    skill_level = analysis.get("skill_level")
    classified = skill_level in SKILL_LEVELS and not normalizer.out_of_range
    values["skill_level"] = skill_level if classified else None

    try:
        record = UserRecord(**values)
    except ValidationError as exc:
        raise RowRejected(f"invalid record: {exc.error_count()} field error(s)") from exc
    return record, classified


def rows_to_records(rows: Sequence[Mapping[str, Any]]) -> Tuple[List[UserRecord], IngestReport]:
    records: List[UserRecord] = []
    rejected: List[Tuple[str, str]] = []
    unclassified: List[str] = []
    seen_ids: set[str] = set()

    for index, row in enumerate(rows):
        identifier = f"row {index}"
        if not isinstance(row, Mapping):
            rejected.append((identifier, "row is not an object"))
            continue
        try:
            document = ProfileDocument.from_mapping(row)
            identifier = document.leetcode_id or identifier
            record, classified = document_to_record(document)
        except (RowRejected, ValidationError) as exc:
            rejected.append((identifier, str(exc)))
            continue
        if record.leetcode_id in seen_ids:
            rejected.append((record.leetcode_id, "duplicate leetcode_id"))
            continue
        seen_ids.add(record.leetcode_id)
        if not classified:
            unclassified.append(record.leetcode_id)
        records.append(record)

    if rejected:
        preview = ", ".join(f"{ident} ({reason})" for ident, reason in rejected[:5])
        more = len(rejected) - 5
        suffix = f", +{more} more" if more > 0 else ""
        logger.warning("Rejected %d of %d profile rows: %s%s", len(rejected), len(rows), preview, suffix)

    report = IngestReport(
        total_rows=len(rows),
        accepted_rows=len(records),
        rejected_rows=rejected,
        unclassified_ids=unclassified,
    )
    return records, report


def load_snapshot_json(path: Path) -> List[Mapping[str, Any]]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"snapshot {path} must contain a JSON array")
    return data


def load_records_from_json(path: Path) -> Tuple[List[UserRecord], IngestReport]:
    return rows_to_records(load_snapshot_json(path))


def record_to_snapshot(record: UserRecord) -> Dict[str, Any]:
    """Render a record back into the nested snapshot document."""

    return {
        "leetcode_id": record.leetcode_id,
        "display_name": record.display_name,
        "collected_at": record.collected_at,
        "data": {
            "full_profile": {
                **{name: getattr(record, name) for name in _PROFILE_TEXT_FIELDS},
                "star_rating": record.star_rating,
                "ranking": record.ranking,
                "reputation": record.reputation,
                "easy_solved": record.easy.solved,
                "medium_solved": record.medium.solved,
                "hard_solved": record.hard.solved,
                "total_solved": record.total_solved,
                "easy_acceptance_rate": record.easy_acceptance_rate,
                "medium_acceptance_rate": record.medium_acceptance_rate,
                "hard_acceptance_rate": record.hard_acceptance_rate,
                "overall_acceptance_rate": record.overall_acceptance_rate,
                "language_stats": dict(record.language_stats),
            },
            "difficulty_analysis": {
                "skill_level": record.skill_level,
                "total_solved": record.total_solved,
                "difficulty_distribution": {
                    level: getattr(record, level).model_dump() for level in _DIFFICULTIES
                },
                "overall_acceptance_rate": record.overall_acceptance_rate,
            },
            "consistency_stats": {
                "current_streak": record.current_streak,
                "max_streak": record.max_streak,
                "total_days_active": record.total_days_active,
                "recent_activity": {
                    "last_7_days": record.last_7_days,
                    "last_30_days": record.last_30_days,
                },
            },
        },
    }
