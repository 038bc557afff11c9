"""REST API for the leetboard dashboard."""

from __future__ import annotations

import logging
from typing import Callable, List, Sequence

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import Response

from leetboard.analytics import summarize_progress
from leetboard.api.schemas import (
    ConnectionTestResponse,
    LeaderboardEntry,
    ProgressRequest,
    ProgressSummaryResponse,
    ReloadResponse,
    SkillBucketResponse,
    SummaryStatsResponse,
    UserListResponse,
    UserResponse,
)
from leetboard.config import ConfigError, Settings
from leetboard.sources import (
    DataSource,
    LoadOutcome,
    SupabaseConfig,
    SupabaseConnector,
    SupabaseError,
    build_sources,
    close_sources,
    load_with_fallback,
)
from leetboard.view import (
    ViewCache,
    ViewCriteria,
    compute_stats,
    export_view_to_csv,
    skill_distribution,
    top_performers,
)
from leetboard.view.pipeline import SkillFilter, SortKey


logger = logging.getLogger(__name__)

SourcesFactory = Callable[[], Sequence[DataSource]]
ConnectorFactory = Callable[[SupabaseConfig], SupabaseConnector]


def create_app(
    settings: Settings | None = None,
    *,
    sources_factory: SourcesFactory | None = None,
    connector_factory: ConnectorFactory = SupabaseConnector,
) -> FastAPI:
    app = FastAPI(title="leetboard dashboard")
    settings = settings or Settings.from_env()
    if sources_factory is None:
        def sources_factory() -> Sequence[DataSource]:
            return build_sources(settings, connector_factory=connector_factory)

    app.state.settings = settings
    app.state.outcome = None
    app.state.view_cache = ViewCache()

    def reload_outcome() -> LoadOutcome:
        sources = sources_factory()
        try:
            outcome = load_with_fallback(sources)
        finally:
            close_sources(sources)
        app.state.outcome = outcome
        app.state.view_cache.clear()
        return outcome

    def current_outcome() -> LoadOutcome:
        if app.state.outcome is None:
            return reload_outcome()
        return app.state.outcome

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/reload", response_model=ReloadResponse)
    async def reload() -> ReloadResponse:
        outcome = reload_outcome()
        return ReloadResponse(
            source=outcome.source,
            total=len(outcome.records),
            failures=[f"{failure.source}: {failure.reason}" for failure in outcome.failures],
        )

    @app.get("/users", response_model=UserListResponse)
    async def list_users(
        search: str = Query(""),
        skill: SkillFilter = Query("all"),
        sort_by: SortKey = Query("total_solved"),
    ) -> UserListResponse:
        outcome = current_outcome()
        criteria = ViewCriteria(search_term=search, skill_filter=skill, sort_by=sort_by)
        view = app.state.view_cache.get(outcome.records, criteria)
        return UserListResponse(
            source=outcome.source,
            stats=SummaryStatsResponse.from_stats(view.stats),
            total=view.total,
            showing=len(view.visible),
            users=[UserResponse.from_record(record) for record in view.visible],
        )

    @app.get("/users/export.csv")
    async def export_users(
        search: str = Query(""),
        skill: SkillFilter = Query("all"),
        sort_by: SortKey = Query("total_solved"),
    ) -> Response:
        outcome = current_outcome()
        criteria = ViewCriteria(search_term=search, skill_filter=skill, sort_by=sort_by)
        view = app.state.view_cache.get(outcome.records, criteria)
        return Response(
            content=export_view_to_csv(view.visible),
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=leetboard-users.csv"},
        )

    @app.get("/users/{leetcode_id}", response_model=UserResponse)
    async def get_user(leetcode_id: str) -> UserResponse:
        for record in current_outcome().records:
            if record.leetcode_id == leetcode_id:
                return UserResponse.from_record(record)
        raise HTTPException(status_code=404, detail="User not found")

    @app.get("/stats", response_model=SummaryStatsResponse)
    async def stats() -> SummaryStatsResponse:
        return SummaryStatsResponse.from_stats(compute_stats(current_outcome().records))

    @app.get("/analytics/skills", response_model=List[SkillBucketResponse])
    async def skills() -> List[SkillBucketResponse]:
        return [
            SkillBucketResponse(
                skill_level=bucket.skill_level,
                count=bucket.count,
                percentage=bucket.percentage,
            )
            for bucket in skill_distribution(current_outcome().records)
        ]

    @app.get("/analytics/leaderboard", response_model=List[LeaderboardEntry])
    async def leaderboard(limit: int = Query(5, ge=1, le=100)) -> List[LeaderboardEntry]:
        return [
            LeaderboardEntry(
                rank=rank,
                leetcode_id=record.leetcode_id,
                display_name=record.display_name,
                total_solved=record.total_solved,
                skill_level=record.skill_level,
            )
            for rank, record in enumerate(top_performers(current_outcome().records, limit), start=1)
        ]

    @app.post("/analytics/progress", response_model=ProgressSummaryResponse)
    async def progress(request: ProgressRequest) -> ProgressSummaryResponse:
        summary = summarize_progress(request.days)
        if summary is None:
            raise HTTPException(status_code=400, detail="progress series is empty")
        return ProgressSummaryResponse(
            total_problems=summary.total_problems,
            average_per_day=summary.average_per_day,
            active_days=summary.active_days,
            consistency=summary.consistency,
            easy_total=summary.easy_total,
            medium_total=summary.medium_total,
            hard_total=summary.hard_total,
        )

    @app.get("/supabase/test", response_model=ConnectionTestResponse)
    async def supabase_test() -> ConnectionTestResponse:
        try:
            config = SupabaseConfig.from_settings(settings)
        except ConfigError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        try:
            with connector_factory(config) as connector:
                rows = connector.ping()
        except SupabaseError as exc:
            logger.warning("Supabase connection test failed: %s", exc)
            raise HTTPException(status_code=500, detail=f"Failed to fetch from Supabase: {exc}") from exc
        return ConnectionTestResponse(
            success=True,
            count=len(rows),
            data=rows,
            message="Successfully fetched from Supabase",
        )

    return app
