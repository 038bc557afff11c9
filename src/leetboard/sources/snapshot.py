"""Write the hosted table to the local JSON snapshot."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from leetboard.ingest import IngestReport, record_to_snapshot, rows_to_records

from .supabase import SupabaseConnector, SupabaseError


logger = logging.getLogger(__name__)


def sync_snapshot(connector: SupabaseConnector, path: Path) -> IngestReport:
    """Fetch every profile, normalize it and replace the snapshot at ``path``.

    The previous snapshot is left untouched when nothing usable comes back.
    """

    rows = connector.fetch_all_users()
    records, report = rows_to_records(rows)
    if not records:
        raise SupabaseError(f"no usable records returned ({report.total_rows} rows)")

    payload = [record_to_snapshot(record) for record in records]
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=path.name, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info("Wrote %d users to %s", len(records), path)
    return report
