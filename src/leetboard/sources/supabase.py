"""Thin client for the hosted ``user_profiles`` table over the PostgREST API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import httpx

from leetboard.config import ConfigError, Settings
from leetboard.config.settings import DEFAULT_HTTP_TIMEOUT, DEFAULT_TABLE


logger = logging.getLogger(__name__)


class SupabaseError(RuntimeError):
    """Raised when the hosted table cannot be queried."""


@dataclass(frozen=True)
class SupabaseConfig:
    url: str
    anon_key: str
    table: str = DEFAULT_TABLE
    timeout: float = DEFAULT_HTTP_TIMEOUT

    @classmethod
    def from_settings(cls, settings: Settings) -> "SupabaseConfig":
        if not settings.supabase_url or not settings.supabase_anon_key:
            raise ConfigError("SUPABASE_URL and SUPABASE_ANON_KEY must both be set")
        return cls(
            url=settings.supabase_url,
            anon_key=settings.supabase_anon_key,
            table=settings.supabase_table,
            timeout=settings.http_timeout,
        )

    @property
    def rest_url(self) -> str:
        return f"{self.url.rstrip('/')}/rest/v1"

    def headers(self) -> Dict[str, str]:
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {self.anon_key}",
            "Accept": "application/json",
        }


def _quote_filter_value(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class SupabaseConnector:
    """Query helper bound to one httpx client.

    The connector owns the client it creates and closes it in :meth:`close`;
    a client passed in by the caller is left open.
    """

    def __init__(self, config: SupabaseConfig, *, client: httpx.Client | None = None) -> None:
        self.config = config
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=config.rest_url,
            headers=config.headers(),
            timeout=config.timeout,
        )

    def __enter__(self) -> "SupabaseConnector":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _select(self, params: Mapping[str, str]) -> List[Dict[str, Any]]:
        query = {"select": "*", **params}
        try:
            resp = self._client.get(f"/{self.config.table}", params=query)
        except httpx.HTTPError as exc:
            raise SupabaseError(f"request to {self.config.table} failed: {exc}") from exc
        if resp.status_code >= 400:
            raise SupabaseError(
                f"{self.config.table} query returned HTTP {resp.status_code}: {resp.text[:200]}"
            )
        try:
            payload = resp.json()
        except ValueError as exc:
            raise SupabaseError(f"{self.config.table} returned invalid JSON") from exc
        if not isinstance(payload, list):
            raise SupabaseError(f"{self.config.table} returned {type(payload).__name__}, expected a list")
        return payload

    def fetch_all_users(self) -> List[Dict[str, Any]]:
        rows = self._select({})
        logger.info("Fetched %d rows from %s", len(rows), self.config.table)
        return rows

    def fetch_user(self, leetcode_id: str) -> Optional[Dict[str, Any]]:
        rows = self._select({"leetcode_id": f"eq.{leetcode_id}", "limit": "1"})
        return rows[0] if rows else None

    def search_users(self, term: str) -> List[Dict[str, Any]]:
        pattern = _quote_filter_value(f"*{term}*")
        clauses = ",".join(
            f"{column}.ilike.{pattern}" for column in ("display_name", "leetcode_id", "school")
        )
        return self._select({"or": f"({clauses})", "order": "total_solved.desc"})

    def users_by_skill_level(self, skill_level: str) -> List[Dict[str, Any]]:
        if skill_level == "all":
            return self.fetch_all_users()
        return self._select({"skill_level": f"eq.{skill_level}", "order": "total_solved.desc"})

    def ping(self, limit: int = 5) -> List[Dict[str, Any]]:
        return self._select({"limit": str(max(1, limit))})
