"""CSV export helpers for the visible user list."""

from __future__ import annotations

import csv
from io import StringIO
from typing import Sequence

from leetboard.models import UserRecord


EXPORT_HEADERS: tuple[str, ...] = (
    "rank",
    "leetcode_id",
    "display_name",
    "school",
    "total_solved",
    "easy_solved",
    "medium_solved",
    "hard_solved",
    "overall_acceptance_rate",
    "current_streak",
    "max_streak",
    "last_7_days",
    "skill_level",
)


def export_view_to_csv(records: Sequence[UserRecord]) -> str:
    """Render records as CSV, ranked in the order given."""

    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(EXPORT_HEADERS)
    for rank, record in enumerate(records, start=1):
        writer.writerow([
            rank,
            record.leetcode_id,
            record.display_name,
            record.school or "",
            record.total_solved,
            record.easy.solved,
            record.medium.solved,
            record.hard.solved,
            f"{record.overall_acceptance_rate:.1f}",
            record.current_streak,
            record.max_streak,
            record.last_7_days,
            record.skill_level if record.is_classified else "",
        ])
    return buffer.getvalue()


__all__ = [
    "EXPORT_HEADERS",
    "export_view_to_csv",
]
