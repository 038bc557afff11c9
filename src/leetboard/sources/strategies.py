"""Ordered data-source strategies with typed load results."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, List, Mapping, Sequence, Union

from leetboard.config import ConfigError, Settings
from leetboard.ingest import IngestReport, load_snapshot_json, rows_to_records
from leetboard.models import UserRecord

from .supabase import SupabaseConfig, SupabaseConnector, SupabaseError


logger = logging.getLogger(__name__)

EMPTY_SOURCE = "empty"


@dataclass(frozen=True)
class LoadSuccess:
    source: str
    records: List[UserRecord]
    report: IngestReport


@dataclass(frozen=True)
class LoadFailure:
    source: str
    reason: str


LoadResult = Union[LoadSuccess, LoadFailure]


@dataclass(frozen=True)
class LoadOutcome:
    """Records chosen by the fallback chain and the failures seen on the way."""

    records: List[UserRecord]
    source: str
    failures: List[LoadFailure] = field(default_factory=list)
    report: IngestReport | None = None

    @property
    def is_empty(self) -> bool:
        return self.source == EMPTY_SOURCE


class DataSource:
    """Interface for loading the user batch.

    ``load`` must not raise for expected failures; it reports them as a
    ``LoadFailure`` so the chain can move on.
    """

    name = "source"

    def load(self) -> LoadResult:
        raise NotImplementedError

    def _from_rows(self, rows: Sequence[Mapping[str, Any]]) -> LoadResult:
        records, report = rows_to_records(rows)
        if not records:
            return LoadFailure(self.name, f"no usable records ({report.total_rows} rows)")
        return LoadSuccess(self.name, records, report)


class SnapshotFileSource(DataSource):
    """Synced JSON snapshot on disk."""

    name = "snapshot"

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> LoadResult:
        try:
            rows = load_snapshot_json(self.path)
        except (OSError, ValueError) as exc:
            return LoadFailure(self.name, f"{self.path}: {exc}")
        return self._from_rows(rows)


class SupabaseSource(DataSource):
    """Live query against the hosted table through a connector."""

    name = "supabase"

    def __init__(self, connector: SupabaseConnector) -> None:
        self.connector = connector

    def load(self) -> LoadResult:
        try:
            rows = self.connector.fetch_all_users()
        except SupabaseError as exc:
            return LoadFailure(self.name, str(exc))
        return self._from_rows(rows)


class StaticSource(DataSource):
    """Rows supplied in memory."""

    def __init__(self, rows: Sequence[Mapping[str, Any]], name: str = "static") -> None:
        self.rows = list(rows)
        self.name = name

    def load(self) -> LoadResult:
        return self._from_rows(self.rows)


def load_with_fallback(sources: Sequence[DataSource]) -> LoadOutcome:
    """Try each source in order and keep the first batch that loads."""

    failures: List[LoadFailure] = []
    for source in sources:
        try:
            result = source.load()
        except Exception as exc:
            logger.exception("Data source %s raised while loading", source.name)
            result = LoadFailure(source.name, f"unexpected error: {exc}")
        if isinstance(result, LoadSuccess):
            logger.info("Loaded %d users from %s", len(result.records), result.source)
            return LoadOutcome(
                records=result.records,
                source=result.source,
                failures=failures,
                report=result.report,
            )
        logger.warning("Data source %s failed: %s", result.source, result.reason)
        failures.append(result)

    logger.warning("All data sources failed; serving an empty user list")
    return LoadOutcome(records=[], source=EMPTY_SOURCE, failures=failures)


ConnectorFactory = Callable[[SupabaseConfig], SupabaseConnector]


def build_sources(
    settings: Settings,
    *,
    connector_factory: ConnectorFactory = SupabaseConnector,
) -> List[DataSource]:
    """Snapshot first, then Supabase when credentials are configured."""

    sources: List[DataSource] = []
    if settings.snapshot_path is not None:
        sources.append(SnapshotFileSource(settings.snapshot_path))
    if settings.supabase_configured:
        try:
            config = SupabaseConfig.from_settings(settings)
        except ConfigError as exc:
            logger.warning("Skipping Supabase source: %s", exc)
        else:
            sources.append(SupabaseSource(connector_factory(config)))
    return sources


def close_sources(sources: Sequence[DataSource]) -> None:
    for source in sources:
        if isinstance(source, SupabaseSource):
            source.connector.close()
