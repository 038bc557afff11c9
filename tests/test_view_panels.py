import csv
from io import StringIO

import pytest

from leetboard.models import DifficultyStats, UserRecord
from leetboard.view import (
    completion_percent,
    export_view_to_csv,
    profile_url,
    skill_distribution,
    top_languages,
    top_performers,
)


def _record(leetcode_id: str, **kwargs) -> UserRecord:
    return UserRecord(leetcode_id=leetcode_id, display_name=leetcode_id.title(), **kwargs)


def test_skill_distribution_counts_and_percentages():
    records = [
        _record("a", skill_level="Beginner"),
        _record("b", skill_level="Beginner"),
        _record("c", skill_level="Expert"),
        _record("d"),
    ]

    buckets = skill_distribution(records)

    assert [bucket.skill_level for bucket in buckets] == ["Beginner", "Intermediate", "Advanced", "Expert"]
    assert [bucket.count for bucket in buckets] == [2, 0, 0, 1]
    assert buckets[0].percentage == pytest.approx(50.0)
    assert buckets[3].percentage == pytest.approx(25.0)


def test_skill_distribution_empty_input():
    buckets = skill_distribution([])

    assert all(bucket.count == 0 and bucket.percentage == 0.0 for bucket in buckets)


def test_top_performers_limits_and_orders():
    records = [_record(f"u{solved}", total_solved=solved) for solved in (3, 9, 1, 7, 5, 8)]

    top = top_performers(records, limit=3)

    assert [record.total_solved for record in top] == [9, 8, 7]
    assert top_performers(records, limit=0) == []


def test_top_languages_sorted_by_count():
    record = _record("poly", language_stats={"Go": 4, "Python3": 120, "C++": 30, "Java": 30})

    assert top_languages(record) == [("Python3", 120), ("C++", 30), ("Java", 30)]
    assert top_languages(_record("none")) == []


def test_completion_percent_is_clamped():
    assert completion_percent(DifficultyStats(completion=135.0)) == 100.0
    assert completion_percent(DifficultyStats(completion=42.5)) == 42.5


def test_profile_url():
    assert profile_url(_record("neetcode")) == "https://leetcode.com/neetcode"


def test_export_view_to_csv_ranks_in_given_order():
    records = [
        _record("b", total_solved=20, skill_level="Beginner", overall_acceptance_rate=61.34),
        _record("a", total_solved=10, school="MIT"),
    ]

    rows = list(csv.DictReader(StringIO(export_view_to_csv(records))))

    assert [row["leetcode_id"] for row in rows] == ["b", "a"]
    assert rows[0]["rank"] == "1"
    assert rows[0]["overall_acceptance_rate"] == "61.3"
    assert rows[1]["school"] == "MIT"
    assert rows[1]["skill_level"] == ""
