"""Persist and load saved view presets."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from leetboard.view import SKILL_FILTERS, SORT_KEYS, ViewCriteria

from .settings import ConfigError


@dataclass
class ViewProfile:
    search_term: str = ""
    skill_filter: str = "all"
    sort_by: str = "total_solved"

    @classmethod
    def load(cls, path: Path) -> "ViewProfile":
        """Read a saved view; raises ``ConfigError`` for unknown facet or sort values."""

        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ConfigError(f"view profile {path} must contain a JSON object")
        profile = cls(
            search_term=str(data.get("search_term") or ""),
            skill_filter=data.get("skill_filter", "all"),
            sort_by=data.get("sort_by", "total_solved"),
        )
        if profile.skill_filter not in SKILL_FILTERS:
            raise ConfigError(f"unknown skill_filter {profile.skill_filter!r} in {path}")
        if profile.sort_by not in SORT_KEYS:
            raise ConfigError(f"unknown sort_by {profile.sort_by!r} in {path}")
        return profile

    def save(self, path: Path) -> None:
        payload = {
            "search_term": self.search_term,
            "skill_filter": self.skill_filter,
            "sort_by": self.sort_by,
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def to_criteria(self) -> ViewCriteria:
        return ViewCriteria(
            search_term=self.search_term,
            skill_filter=self.skill_filter,
            sort_by=self.sort_by,
        )
