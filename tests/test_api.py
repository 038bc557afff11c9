import csv
from io import StringIO

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from leetboard.api import create_app
from leetboard.config import Settings
from leetboard.sources import SnapshotFileSource, StaticSource, SupabaseConfig, SupabaseConnector


ROWS = [
    {
        "leetcode_id": "alice",
        "display_name": "Alice",
        "school": "Stanford University",
        "total_solved": 120,
        "easy_solved": 70,
        "medium_solved": 40,
        "hard_solved": 10,
        "easy_completion": 135.0,
        "easy_acceptance_rate": 72.0,
        "easy_difficulty_acceptance": 64.0,
        "overall_acceptance_rate": 61.0,
        "skill_level": "Advanced",
        "current_streak": 5,
        "last_7_days_activity": 4,
        "language_stats": {"Python3": 100, "Java": 20},
    },
    {
        "leetcode_id": "bob",
        "display_name": "bob",
        "total_solved": 30,
        "skill_level": "Beginner",
        "current_streak": 9,
        "last_7_days_activity": 0,
    },
    {
        "leetcode_id": "carol",
        "display_name": "Carol",
        "school": "MIT",
        "total_solved": 75,
        "skill_level": "Intermediate",
        "current_streak": 1,
        "last_7_days_activity": 2,
    },
]


@pytest.fixture
def anyio_backend():
    return "asyncio"


def _client(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")


@pytest.fixture
async def client():
    app = create_app(
        Settings(snapshot_path=None),
        sources_factory=lambda: [StaticSource(ROWS)],
    )
    async with _client(app) as async_client:
        async_client.app = app
        yield async_client


@pytest.mark.anyio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.anyio
async def test_users_default_view_sorted_by_total_solved(client: AsyncClient):
    resp = await client.get("/users")
    assert resp.status_code == 200
    body = resp.json()

    assert body["source"] == "static"
    assert body["total"] == 3
    assert body["showing"] == 3
    assert [user["leetcode_id"] for user in body["users"]] == ["alice", "carol", "bob"]
    assert body["stats"] == {
        "total_users": 3,
        "average_solved": 75,
        "active_users": 2,
        "top_performer_id": "alice",
        "top_performer_name": "Alice",
        "top_performer_solved": 120,
    }
    alice = body["users"][0]
    assert alice["profile_url"] == "https://leetcode.com/alice"
    assert alice["top_languages"][0] == {"language": "Python3", "count": 100}
    assert alice["easy"] == {"solved": 70, "completion": 100.0, "acceptance_rate": 64.0}
    assert alice["easy_acceptance_rate"] == 72.0


@pytest.mark.anyio
async def test_users_filter_search_and_sort(client: AsyncClient):
    resp = await client.get("/users", params={"skill": "Beginner"})
    assert [user["leetcode_id"] for user in resp.json()["users"]] == ["bob"]
    # stats describe the full batch regardless of the filter
    assert resp.json()["stats"]["total_users"] == 3

    resp = await client.get("/users", params={"search": "STANFORD"})
    assert [user["leetcode_id"] for user in resp.json()["users"]] == ["alice"]

    resp = await client.get("/users", params={"sort_by": "current_streak"})
    assert [user["leetcode_id"] for user in resp.json()["users"]] == ["bob", "alice", "carol"]

    resp = await client.get("/users", params={"sort_by": "display_name"})
    assert [user["display_name"] for user in resp.json()["users"]] == ["Alice", "bob", "Carol"]


@pytest.mark.anyio
async def test_users_rejects_unknown_skill_and_sort(client: AsyncClient):
    assert (await client.get("/users", params={"skill": "Wizard"})).status_code == 422
    assert (await client.get("/users", params={"sort_by": "salary"})).status_code == 422


@pytest.mark.anyio
async def test_users_view_is_cached(client: AsyncClient):
    await client.get("/users", params={"skill": "Advanced"})
    await client.get("/users", params={"skill": "Advanced"})

    cache = client.app.state.view_cache
    assert cache.hits >= 1


@pytest.mark.anyio
async def test_get_user(client: AsyncClient):
    resp = await client.get("/users/carol")
    assert resp.status_code == 200
    assert resp.json()["school"] == "MIT"

    missing = await client.get("/users/ghost")
    assert missing.status_code == 404
    assert missing.json()["detail"] == "User not found"


@pytest.mark.anyio
async def test_export_csv_follows_view(client: AsyncClient):
    resp = await client.get("/users/export.csv", params={"sort_by": "current_streak"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert "attachment" in resp.headers["content-disposition"]

    rows = list(csv.DictReader(StringIO(resp.text)))
    assert [row["leetcode_id"] for row in rows] == ["bob", "alice", "carol"]
    assert [row["rank"] for row in rows] == ["1", "2", "3"]


@pytest.mark.anyio
async def test_stats_and_analytics(client: AsyncClient):
    stats = (await client.get("/stats")).json()
    assert stats["average_solved"] == 75

    skills = (await client.get("/analytics/skills")).json()
    assert [bucket["count"] for bucket in skills] == [1, 1, 1, 0]

    board = (await client.get("/analytics/leaderboard", params={"limit": 2})).json()
    assert [(entry["rank"], entry["leetcode_id"]) for entry in board] == [(1, "alice"), (2, "carol")]

    assert (await client.get("/analytics/leaderboard", params={"limit": 0})).status_code == 422


@pytest.mark.anyio
async def test_progress_summary(client: AsyncClient):
    payload = {
        "days": [
            {"date": "2025-01-01", "problems_solved": 3, "easy_solved": 2, "medium_solved": 1},
            {"date": "2025-01-02", "problems_solved": 0},
            {"date": "2025-01-03", "problems_solved": 1, "hard_solved": 1},
            {"date": "2025-01-04", "problems_solved": 0},
        ]
    }
    resp = await client.post("/analytics/progress", json=payload)
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_problems"] == 4
    assert body["average_per_day"] == pytest.approx(1.0)
    assert body["active_days"] == 2
    assert body["consistency"] == pytest.approx(50.0)
    assert body["hard_total"] == 1

    empty = await client.post("/analytics/progress", json={"days": []})
    assert empty.status_code == 400

    negative = await client.post(
        "/analytics/progress", json={"days": [{"date": "2025-01-01", "problems_solved": -1}]}
    )
    assert negative.status_code == 422


@pytest.mark.anyio
async def test_reload_degrades_to_empty_state(tmp_path):
    app = create_app(
        Settings(snapshot_path=None),
        sources_factory=lambda: [SnapshotFileSource(tmp_path / "missing.json")],
    )
    async with _client(app) as client:
        reload = await client.post("/reload")
        assert reload.status_code == 200
        body = reload.json()
        assert body["source"] == "empty"
        assert body["total"] == 0
        assert body["failures"][0].startswith("snapshot:")

        users = (await client.get("/users")).json()
        assert users["users"] == []
        assert users["stats"]["top_performer_id"] is None
        assert users["stats"]["average_solved"] == 0


@pytest.mark.anyio
async def test_supabase_test_requires_configuration(client: AsyncClient):
    resp = await client.get("/supabase/test")
    assert resp.status_code == 500
    assert "SUPABASE_URL" in resp.json()["detail"]


def _mock_factory(handler):
    def factory(config: SupabaseConfig) -> SupabaseConnector:
        mock_client = httpx.Client(
            transport=httpx.MockTransport(handler),
            base_url=config.rest_url,
            headers=config.headers(),
        )
        return SupabaseConnector(config, client=mock_client)

    return factory


@pytest.mark.anyio
async def test_supabase_test_reports_rows():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=ROWS[:2])

    settings = Settings(
        snapshot_path=None,
        supabase_url="https://project.supabase.co",
        supabase_anon_key="anon-key",
    )
    app = create_app(settings, connector_factory=_mock_factory(handler))
    async with _client(app) as client:
        resp = await client.get("/supabase/test")
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["count"] == 2
        assert seen[0].url.params["limit"] == "5"

        # the same connector factory backs the default source chain
        users = (await client.get("/users")).json()
        assert users["source"] == "supabase"


@pytest.mark.anyio
async def test_supabase_test_reports_failures():
    settings = Settings(
        snapshot_path=None,
        supabase_url="https://project.supabase.co",
        supabase_anon_key="anon-key",
    )
    app = create_app(
        settings,
        connector_factory=_mock_factory(lambda request: httpx.Response(401, text="bad key")),
    )
    async with _client(app) as client:
        resp = await client.get("/supabase/test")
        assert resp.status_code == 500
        assert resp.json()["detail"].startswith("Failed to fetch from Supabase")
