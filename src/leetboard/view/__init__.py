"""User list utilities (stats, filtering, sorting, export)."""

from .pipeline import (
    SKILL_FILTERS,
    SORT_KEYS,
    DerivedView,
    SummaryStats,
    ViewCache,
    ViewCriteria,
    compute_stats,
    derive_view,
    derive_view_for,
    filter_records,
    sort_records,
)
from .panels import (
    SkillBucket,
    completion_percent,
    profile_url,
    skill_distribution,
    top_languages,
    top_performers,
)
from .export import export_view_to_csv

__all__ = [
    "SKILL_FILTERS",
    "SORT_KEYS",
    "DerivedView",
    "SkillBucket",
    "SummaryStats",
    "ViewCache",
    "ViewCriteria",
    "completion_percent",
    "compute_stats",
    "derive_view",
    "derive_view_for",
    "export_view_to_csv",
    "filter_records",
    "profile_url",
    "skill_distribution",
    "sort_records",
    "top_languages",
    "top_performers",
]
