"""Input adapters that normalize raw profile data."""

from .profiles import (
    IngestReport,
    ProfileDocument,
    RowRejected,
    document_to_record,
    load_records_from_json,
    load_snapshot_json,
    record_to_snapshot,
    rows_to_records,
)

__all__ = [
    "IngestReport",
    "ProfileDocument",
    "RowRejected",
    "document_to_record",
    "load_records_from_json",
    "load_snapshot_json",
    "record_to_snapshot",
    "rows_to_records",
]
