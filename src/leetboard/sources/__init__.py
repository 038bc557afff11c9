"""Data-loading layer: hosted table client and the source fallback chain."""

from .supabase import SupabaseConfig, SupabaseConnector, SupabaseError
from .strategies import (
    EMPTY_SOURCE,
    DataSource,
    LoadFailure,
    LoadOutcome,
    LoadSuccess,
    SnapshotFileSource,
    StaticSource,
    SupabaseSource,
    build_sources,
    close_sources,
    load_with_fallback,
)
from .snapshot import sync_snapshot

__all__ = [
    "EMPTY_SOURCE",
    "DataSource",
    "LoadFailure",
    "LoadOutcome",
    "LoadSuccess",
    "SnapshotFileSource",
    "StaticSource",
    "SupabaseConfig",
    "SupabaseConnector",
    "SupabaseError",
    "SupabaseSource",
    "build_sources",
    "close_sources",
    "load_with_fallback",
    "sync_snapshot",
]
