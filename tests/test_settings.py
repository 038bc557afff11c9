import logging
from pathlib import Path

import pytest

from leetboard.config import ConfigError, Settings, ViewProfile
from leetboard.view import ViewCriteria


def test_settings_defaults_from_empty_env():
    settings = Settings.from_env({})

    assert settings.snapshot_path == Path("users_analytics.json")
    assert settings.supabase_table == "user_profiles"
    assert settings.http_timeout == 10.0
    assert not settings.supabase_configured


def test_settings_read_environment():
    env = {
        "LEETBOARD_SNAPSHOT_PATH": "/data/users.json",
        "SUPABASE_URL": " https://project.supabase.co ",
        "SUPABASE_ANON_KEY": "anon-key",
        "LEETBOARD_SUPABASE_TABLE": "profiles",
        "LEETBOARD_HTTP_TIMEOUT": "2.5",
    }

    settings = Settings.from_env(env)

    assert settings.snapshot_path == Path("/data/users.json")
    assert settings.supabase_url == "https://project.supabase.co"
    assert settings.supabase_table == "profiles"
    assert settings.http_timeout == 2.5
    assert settings.supabase_configured


def test_settings_invalid_timeout_falls_back(caplog):
    with caplog.at_level(logging.WARNING):
        settings = Settings.from_env({"LEETBOARD_HTTP_TIMEOUT": "soon", "SUPABASE_URL": "  "})

    assert settings.http_timeout == 10.0
    assert settings.supabase_url is None
    assert "LEETBOARD_HTTP_TIMEOUT" in caplog.text
    assert Settings.from_env({"LEETBOARD_HTTP_TIMEOUT": "-4"}).http_timeout == 0.1


def test_view_profile_roundtrip(tmp_path: Path):
    path = tmp_path / "view.json"
    ViewProfile(search_term="mit", skill_filter="Expert", sort_by="current_streak").save(path)

    loaded = ViewProfile.load(path)

    assert loaded.to_criteria() == ViewCriteria(
        search_term="mit",
        skill_filter="Expert",
        sort_by="current_streak",
    )


def test_view_profile_missing_keys_use_defaults(tmp_path: Path):
    path = tmp_path / "view.json"
    path.write_text('{"skill_filter": "Beginner"}', encoding="utf-8")

    profile = ViewProfile.load(path)

    assert profile.search_term == ""
    assert profile.skill_filter == "Beginner"
    assert profile.sort_by == "total_solved"


def test_view_profile_rejects_unknown_values(tmp_path: Path):
    path = tmp_path / "view.json"
    path.write_text('{"sort_by": "totl_solved"}', encoding="utf-8")

    with pytest.raises(ConfigError, match="sort_by"):
        ViewProfile.load(path)

    path.write_text('{"skill_filter": "Wizard"}', encoding="utf-8")
    with pytest.raises(ConfigError, match="skill_filter"):
        ViewProfile.load(path)

    path.write_text('["not", "an", "object"]', encoding="utf-8")
    with pytest.raises(ConfigError):
        ViewProfile.load(path)
