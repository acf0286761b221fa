"""
ledger_ingestion -- map document-store exports into ledger records.

Sits above ``ledger_kernel``; produces ``LedgerSnapshot`` values plus the
non-fatal warnings raised while coercing fields.
"""

from ledger_ingestion.adapters import JsonSnapshotAdapter
from ledger_ingestion.coercion import (
    CoercionResult,
    coerce_amount,
    coerce_date,
    coerce_enum,
    coerce_text,
)
from ledger_ingestion.documents import (
    DocumentResult,
    IngestionResult,
    invoice_from_document,
    note_from_document,
    party_from_document,
    payment_from_document,
    snapshot_from_documents,
)

__all__ = [
    "CoercionResult",
    "DocumentResult",
    "IngestionResult",
    "JsonSnapshotAdapter",
    "coerce_amount",
    "coerce_date",
    "coerce_enum",
    "coerce_text",
    "invoice_from_document",
    "note_from_document",
    "party_from_document",
    "payment_from_document",
    "snapshot_from_documents",
]
