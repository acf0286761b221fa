"""Source adapters that read exported ledger collections."""

from ledger_ingestion.adapters.json_adapter import JsonSnapshotAdapter

__all__ = ["JsonSnapshotAdapter"]
