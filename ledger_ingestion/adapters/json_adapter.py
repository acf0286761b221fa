"""
JSON snapshot adapter.

Reads a JSON export of the ledger collections: one object whose keys are
collection names and whose values are arrays of documents::

    {"customers": [...], "suppliers": [...], "invoices": [...],
     "debitCreditNotes": [...], "payments": [...]}

Missing collections are empty.  ``notes`` is accepted as an alias for
``debitCreditNotes``.  Non-object entries inside a collection are skipped.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ledger_ingestion.documents import IngestionResult, snapshot_from_documents
from ledger_kernel.exceptions import SnapshotLoadError
from ledger_kernel.logging_config import get_logger

logger = get_logger("ingestion.json_adapter")

COLLECTION_KEYS: dict[str, tuple[str, ...]] = {
    "customers": ("customers",),
    "suppliers": ("suppliers",),
    "invoices": ("invoices",),
    "notes": ("debitCreditNotes", "notes"),
    "payments": ("payments",),
}


def _collection(data: dict[str, Any], keys: tuple[str, ...]) -> list[dict[str, Any]]:
    for key in keys:
        if key in data:
            value = data[key]
            if not isinstance(value, list):
                raise SnapshotLoadError(key, f"expected an array, got {type(value).__name__}")
            return [item for item in value if isinstance(item, dict)]
    return []


class JsonSnapshotAdapter:
    """Read a JSON export file into an ``IngestionResult``."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def read(self, source_path: Path | str, snapshot_id: str | None = None) -> IngestionResult:
        path = Path(source_path)
        with path.open("r", encoding=self.encoding) as f:
            try:
                data = json.load(f)
            except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                raise SnapshotLoadError(str(path), f"invalid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise SnapshotLoadError(str(path), "top-level JSON value must be an object")

        logger.debug("json_snapshot_read", extra={"path": str(path)})
        return snapshot_from_documents(
            customers=_collection(data, COLLECTION_KEYS["customers"]),
            suppliers=_collection(data, COLLECTION_KEYS["suppliers"]),
            invoices=_collection(data, COLLECTION_KEYS["invoices"]),
            notes=_collection(data, COLLECTION_KEYS["notes"]),
            payments=_collection(data, COLLECTION_KEYS["payments"]),
            snapshot_id=snapshot_id or path.stem,
        )
