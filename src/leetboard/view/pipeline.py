"""Summary, filter and sort helpers behind the dashboard user list."""

from __future__ import annotations

import math
import unicodedata
from dataclasses import dataclass
from typing import Callable, Literal, Sequence, get_args

from leetboard.models import UserRecord


SortKey = Literal["total_solved", "current_streak", "overall_acceptance_rate", "display_name"]
SkillFilter = Literal["all", "Beginner", "Intermediate", "Advanced", "Expert"]

SORT_KEYS: tuple[str, ...] = get_args(SortKey)
SKILL_FILTERS: tuple[str, ...] = get_args(SkillFilter)


@dataclass(frozen=True)
class ViewCriteria:
    """Search, skill facet and sort selection for the user list."""

    search_term: str = ""
    skill_filter: str = "all"
    sort_by: str = "total_solved"


@dataclass(frozen=True)
class SummaryStats:
    """Headline numbers shown above the user list."""

    total_users: int
    average_solved: int
    top_performer: UserRecord | None
    active_users: int


@dataclass(frozen=True)
class DerivedView:
    """Stats over the full record set plus the filtered and sorted list."""

    stats: SummaryStats
    visible: list[UserRecord]
    total: int


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_stats(records: Sequence[UserRecord]) -> SummaryStats:
    total_users = len(records)
    solved_sum = 0
    top: UserRecord | None = None
    active = 0
    for record in records:
        solved_sum += record.total_solved
        # strict comparison keeps the earliest record on ties
        if top is None or record.total_solved > top.total_solved:
            top = record
        if record.last_7_days > 0:
            active += 1

    average = _round_half_up(solved_sum / total_users) if total_users else 0
    return SummaryStats(
        total_users=total_users,
        average_solved=average,
        top_performer=top,
        active_users=active,
    )


def _matches_search(record: UserRecord, needle: str) -> bool:
    if not needle:
        return True
    candidates = (record.display_name, record.leetcode_id, record.school)
    return any(value is not None and needle in value.casefold() for value in candidates)


def _matches_skill(record: UserRecord, skill_filter: str) -> bool:
    if skill_filter == "all":
        return True
    return record.is_classified and record.skill_level == skill_filter


def filter_records(
    records: Sequence[UserRecord],
    search_term: str = "",
    skill_filter: str = "all",
) -> list[UserRecord]:
    """Return records matching the search term and skill facet, in input order."""

    needle = (search_term or "").casefold()
    return [
        record
        for record in records
        if _matches_search(record, needle) and _matches_skill(record, skill_filter)
    ]


def collation_key(text: str) -> tuple[str, str, str]:
    """Sort key approximating a locale-aware comparison.

    Base letters compare first ignoring accents and case, then accents, then
    case with lowercase ahead of uppercase.
    """

    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), decomposed.casefold(), text.swapcase()


_NUMERIC_KEYS: dict[str, Callable[[UserRecord], float]] = {
    "total_solved": lambda record: record.total_solved,
    "current_streak": lambda record: record.current_streak,
    "overall_acceptance_rate": lambda record: record.overall_acceptance_rate,
}


def sort_records(records: Sequence[UserRecord], sort_by: str = "total_solved") -> list[UserRecord]:
    """Return a new stably sorted list; numeric keys descend, names ascend."""

    ordered = list(records)
    if sort_by == "display_name":
        ordered.sort(key=lambda record: collation_key(record.display_name))
        return ordered
    key = _NUMERIC_KEYS.get(sort_by)
    if key is None:
        return ordered
    # negate instead of reverse=True so equal keys keep input order
    ordered.sort(key=lambda record: -key(record))
    return ordered


def derive_view(
    records: Sequence[UserRecord],
    search_term: str = "",
    skill_filter: str = "all",
    sort_by: str = "total_solved",
) -> DerivedView:
    record_list = list(records)
    visible = sort_records(filter_records(record_list, search_term, skill_filter), sort_by)
    return DerivedView(stats=compute_stats(record_list), visible=visible, total=len(record_list))


def derive_view_for(records: Sequence[UserRecord], criteria: ViewCriteria) -> DerivedView:
    return derive_view(records, criteria.search_term, criteria.skill_filter, criteria.sort_by)


class ViewCache:
    """Keep the last derived view and reuse it while the inputs are unchanged.

    The record batch is compared by identity; loaders hand out a fresh
    sequence whenever the data changes.
    """

    def __init__(self) -> None:
        self._key: tuple[int, ViewCriteria] | None = None
        self._records: Sequence[UserRecord] | None = None
        self._view: DerivedView | None = None
        self.hits = 0
        self.misses = 0

    def get(self, records: Sequence[UserRecord], criteria: ViewCriteria) -> DerivedView:
        key = (id(records), criteria)
        if self._view is not None and self._key == key and self._records is records:
            self.hits += 1
            return self._view
        self.misses += 1
        self._view = derive_view_for(records, criteria)
        self._key = key
        self._records = records
        return self._view

    def clear(self) -> None:
        self._key = None
        self._records = None
        self._view = None


__all__ = [
    "DerivedView",
    "SKILL_FILTERS",
    "SORT_KEYS",
    "SkillFilter",
    "SortKey",
    "SummaryStats",
    "ViewCache",
    "ViewCriteria",
    "collation_key",
    "compute_stats",
    "derive_view",
    "derive_view_for",
    "filter_records",
    "sort_records",
]
