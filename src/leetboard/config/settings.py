"""Runtime settings resolved from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional


logger = logging.getLogger(__name__)

SNAPSHOT_PATH_ENV = "LEETBOARD_SNAPSHOT_PATH"
SUPABASE_URL_ENV = "SUPABASE_URL"
SUPABASE_KEY_ENV = "SUPABASE_ANON_KEY"
SUPABASE_TABLE_ENV = "LEETBOARD_SUPABASE_TABLE"
HTTP_TIMEOUT_ENV = "LEETBOARD_HTTP_TIMEOUT"

DEFAULT_SNAPSHOT_PATH = Path("users_analytics.json")
DEFAULT_TABLE = "user_profiles"
DEFAULT_HTTP_TIMEOUT = 10.0


class ConfigError(ValueError):
    """Raised when a required setting is missing."""


def _env_float(
    env: Mapping[str, str],
    name: str,
    default: float,
    *,
    clamp_min: float | None = None,
) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    return value


def _env_text(env: Mapping[str, str], name: str) -> Optional[str]:
    raw = env.get(name)
    if raw is None:
        return None
    return raw.strip() or None


@dataclass(frozen=True)
class Settings:
    snapshot_path: Optional[Path] = DEFAULT_SNAPSHOT_PATH
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    supabase_table: str = DEFAULT_TABLE
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if env is None else env
        snapshot = _env_text(env, SNAPSHOT_PATH_ENV)
        return cls(
            snapshot_path=Path(snapshot) if snapshot else DEFAULT_SNAPSHOT_PATH,
            supabase_url=_env_text(env, SUPABASE_URL_ENV),
            supabase_anon_key=_env_text(env, SUPABASE_KEY_ENV),
            supabase_table=_env_text(env, SUPABASE_TABLE_ENV) or DEFAULT_TABLE,
            http_timeout=_env_float(env, HTTP_TIMEOUT_ENV, DEFAULT_HTTP_TIMEOUT, clamp_min=0.1),
        )

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)
