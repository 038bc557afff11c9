"""Command-line interface for browsing the dashboard user list."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List

from leetboard.config import ConfigError, Settings, ViewProfile
from leetboard.sources import (
    DataSource,
    SnapshotFileSource,
    SupabaseConfig,
    SupabaseConnector,
    SupabaseError,
    SupabaseSource,
    close_sources,
    load_with_fallback,
    sync_snapshot,
)
from leetboard.view import (
    SKILL_FILTERS,
    SORT_KEYS,
    derive_view_for,
    export_view_to_csv,
    skill_distribution,
)
from leetboard.view.pipeline import DerivedView


def _parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Browse LeetCode practice statistics")
    parser.add_argument(
        "--snapshot",
        type=Path,
        default=None,
        help="Path to the synced JSON snapshot (default from LEETBOARD_SNAPSHOT_PATH)",
    )
    parser.add_argument("--no-supabase", action="store_true", help="Do not fall back to the hosted table")
    parser.add_argument("--search", default=None, help="Case-insensitive match on name, id or school")
    parser.add_argument("--skill", choices=SKILL_FILTERS, default=None, help="Skill level facet")
    parser.add_argument("--sort-by", choices=SORT_KEYS, default=None, help="Sort key")
    parser.add_argument("--limit", type=int, default=None, help="Only print the first N users")
    parser.add_argument("--output", type=Path, default=None, help="Write the visible list to a CSV file")
    parser.add_argument("--json", action="store_true", help="Print the view as JSON")
    parser.add_argument("--load-profile", type=Path, default=None, help="Load a saved view JSON")
    parser.add_argument("--save-profile", type=Path, default=None, help="Save the view selection as JSON")
    parser.add_argument(
        "--sync",
        action="store_true",
        help="Refresh the snapshot from the hosted table before loading",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def _resolve_profile(args: argparse.Namespace) -> ViewProfile:
    profile = ViewProfile()
    if args.load_profile:
        try:
            profile = ViewProfile.load(args.load_profile)
        except (OSError, ValueError) as exc:
            raise SystemExit(f"Could not load view profile: {exc}") from exc
    if args.search is not None:
        profile.search_term = args.search
    if args.skill is not None:
        profile.skill_filter = args.skill
    if args.sort_by is not None:
        profile.sort_by = args.sort_by
    return profile


def _view_payload(view: DerivedView, source: str, limit: int | None) -> dict:
    top = view.stats.top_performer
    visible = view.visible if limit is None else view.visible[:limit]
    return {
        "source": source,
        "stats": {
            "total_users": view.stats.total_users,
            "average_solved": view.stats.average_solved,
            "active_users": view.stats.active_users,
            "top_performer": None if top is None else top.leetcode_id,
        },
        "showing": len(view.visible),
        "total": view.total,
        "users": [
            record.model_dump(include={"leetcode_id", "display_name", "total_solved", "skill_level"})
            for record in visible
        ],
    }


def _print_view(view: DerivedView, source: str, limit: int | None) -> None:
    stats = view.stats
    top = stats.top_performer
    print(f"Source: {source}")
    print(
        f"Users: {stats.total_users}  Avg solved: {stats.average_solved}  "
        f"Active (7d): {stats.active_users}  "
        f"Top: {top.display_name if top else 'N/A'} ({top.total_solved if top else 0})"
    )
    print(f"Showing {len(view.visible)} of {view.total} users")
    visible = view.visible if limit is None else view.visible[:limit]
    for rank, record in enumerate(visible, start=1):
        print(
            f"{rank:>4}. {record.display_name or record.leetcode_id:<24} @{record.leetcode_id:<20} "
            f"{record.total_solved:>5} solved  {record.overall_acceptance_rate:5.1f}%  "
            f"streak {record.current_streak:>3}  {record.skill_level if record.is_classified else '-'}"
        )


def main(argv: List[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = Settings.from_env()
    snapshot_path = args.snapshot or settings.snapshot_path
    profile = _resolve_profile(args)

    connector: SupabaseConnector | None = None
    if settings.supabase_configured and not args.no_supabase:
        try:
            connector = SupabaseConnector(SupabaseConfig.from_settings(settings))
        except ConfigError as exc:
            raise SystemExit(str(exc)) from exc

    if args.sync:
        if connector is None:
            raise SystemExit("--sync requires SUPABASE_URL and SUPABASE_ANON_KEY")
        if snapshot_path is None:
            raise SystemExit("--sync requires a snapshot path")
        try:
            report = sync_snapshot(connector, snapshot_path)
        except SupabaseError as exc:
            connector.close()
            raise SystemExit(f"Snapshot sync failed: {exc}") from exc
        print(f"Synced {report.accepted_rows}/{report.total_rows} users to {snapshot_path}")

    sources: List[DataSource] = []
    if snapshot_path is not None:
        sources.append(SnapshotFileSource(snapshot_path))
    if connector is not None:
        sources.append(SupabaseSource(connector))
    try:
        outcome = load_with_fallback(sources)
    finally:
        close_sources(sources)

    if args.save_profile:
        profile.save(args.save_profile)
        print(f"Saved view profile to {args.save_profile}")

    view = derive_view_for(outcome.records, profile.to_criteria())

    if args.json:
        payload = _view_payload(view, outcome.source, args.limit)
        payload["skills"] = [
            {"skill_level": bucket.skill_level, "count": bucket.count, "percentage": bucket.percentage}
            for bucket in skill_distribution(outcome.records)
        ]
        print(json.dumps(payload, indent=2))
    else:
        for failure in outcome.failures:
            print(f"Source {failure.source} unavailable: {failure.reason}")
        _print_view(view, outcome.source, args.limit)

    if args.output:
        args.output.write_text(export_view_to_csv(view.visible), encoding="utf-8")
        print(f"Wrote {len(view.visible)} users to {args.output}")


if __name__ == "__main__":
    main()
