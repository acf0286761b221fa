"""
Document mapping (``ledger_ingestion.documents``).

Responsibility:
    Turn raw document-store records (camelCase dicts, one per document)
    into the typed ledger records, and assemble them into a
    ``LedgerSnapshot``.

Invariants enforced:
    - Mapping never raises for bad field values; every problem becomes a
      ``RecordWarning`` and the field falls back to its default.
    - Invoices without an invoice number or party, and notes without a note
      number or party, are skipped with MISSING_REQUIRED_FIELD.
    - Documents without an id are skipped with MISSING_REQUIRED_FIELD.
    - Defaults follow the document screens: direction In, party type
      customer, status Completed, note type Debit.

Field names:
    party     id, name, openingBalance
    invoice   id, invoiceNo, manualInvoiceNo, partyType, partyId, issueDate,
              dueDate, total, status
    note      id, noteType, noteNo, date, partyType, partyId, amount,
              relatedInvoiceNo, reason
    payment   id, date, direction, partyType, partyId, amount, method,
              reference, notes, status, invoiceId, bankTransferCharge
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from ledger_ingestion.coercion import (
    CoercionResult,
    coerce_amount,
    coerce_date,
    coerce_enum,
    coerce_text,
)
from ledger_kernel.domain.dtos import RecordWarning, WarningCode
from ledger_kernel.domain.records import (
    Invoice,
    Note,
    NoteType,
    Party,
    PartyType,
    Payment,
    PaymentDirection,
    PaymentStatus,
)
from ledger_kernel.domain.snapshot import LedgerSnapshot
from ledger_kernel.logging_config import get_logger

logger = get_logger("ingestion.documents")

Document = Mapping[str, Any]


@dataclass(frozen=True)
class DocumentResult:
    """One mapped document; ``record`` is None when the document was skipped."""

    record: Any = None
    warnings: tuple[RecordWarning, ...] = ()

    @property
    def skipped(self) -> bool:
        return self.record is None


@dataclass(frozen=True)
class IngestionResult:
    snapshot: LedgerSnapshot
    warnings: tuple[RecordWarning, ...] = ()


class _Collector:
    """Accumulates warnings while one document is mapped."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        self.warnings: list[RecordWarning] = []

    def take(self, result: CoercionResult) -> Any:
        if result.warning is not None:
            self.warnings.append(result.warning)
        return result.value

    def amount(self, doc: Document, field: str):
        return self.take(coerce_amount(doc.get(field), self.kind, self.record_id, field))

    def date(self, doc: Document, field: str):
        return self.take(coerce_date(doc.get(field), self.kind, self.record_id, field))

    def enum(self, doc: Document, field: str, enum_cls, default):
        return self.take(coerce_enum(doc.get(field), enum_cls, default, self.kind, self.record_id, field))

    def skip(self, field: str, raw: Any = None) -> DocumentResult:
        self.warnings.append(RecordWarning(
            code=WarningCode.MISSING_REQUIRED_FIELD,
            message=f"{self.kind} skipped: {field} is missing",
            record_kind=self.kind,
            record_id=self.record_id,
            field=field,
            raw_value=raw,
        ))
        return DocumentResult(record=None, warnings=tuple(self.warnings))

    def done(self, record: Any) -> DocumentResult:
        return DocumentResult(record=record, warnings=tuple(self.warnings))


def party_from_document(doc: Document, party_type: PartyType) -> DocumentResult:
    record_id = coerce_text(doc.get("id")) or ""
    c = _Collector("party", record_id)
    if not record_id:
        return c.skip("id")
    return c.done(Party(
        id=record_id,
        party_type=party_type,
        name=coerce_text(doc.get("name")) or "",
        opening_balance=c.amount(doc, "openingBalance"),
    ))


def invoice_from_document(doc: Document) -> DocumentResult:
    record_id = coerce_text(doc.get("id")) or ""
    c = _Collector("invoice", record_id)
    if not record_id:
        return c.skip("id")
    number = coerce_text(doc.get("invoiceNo"))
    if number is None:
        return c.skip("invoiceNo", doc.get("invoiceNo"))
    party_id = coerce_text(doc.get("partyId"))
    if party_id is None:
        return c.skip("partyId", doc.get("partyId"))
    return c.done(Invoice(
        id=record_id,
        system_number=number,
        manual_number=coerce_text(doc.get("manualInvoiceNo")),
        party_type=c.enum(doc, "partyType", PartyType, PartyType.CUSTOMER),
        party_id=party_id,
        total=c.amount(doc, "total"),
        issue_date=c.date(doc, "issueDate"),
        due_date=c.date(doc, "dueDate"),
        status=coerce_text(doc.get("status")),
    ))


def note_from_document(doc: Document) -> DocumentResult:
    record_id = coerce_text(doc.get("id")) or ""
    c = _Collector("note", record_id)
    if not record_id:
        return c.skip("id")
    number = coerce_text(doc.get("noteNo"))
    if number is None:
        return c.skip("noteNo", doc.get("noteNo"))
    party_id = coerce_text(doc.get("partyId"))
    if party_id is None:
        return c.skip("partyId", doc.get("partyId"))
    return c.done(Note(
        id=record_id,
        note_type=c.enum(doc, "noteType", NoteType, NoteType.DEBIT),
        note_no=number,
        party_type=c.enum(doc, "partyType", PartyType, PartyType.CUSTOMER),
        party_id=party_id,
        amount=c.amount(doc, "amount"),
        date=c.date(doc, "date"),
        related_invoice_no=coerce_text(doc.get("relatedInvoiceNo")),
        reason=coerce_text(doc.get("reason")),
    ))


def payment_from_document(doc: Document) -> DocumentResult:
    record_id = coerce_text(doc.get("id")) or ""
    c = _Collector("payment", record_id)
    if not record_id:
        return c.skip("id")
    return c.done(Payment(
        id=record_id,
        direction=c.enum(doc, "direction", PaymentDirection, PaymentDirection.IN),
        party_type=c.enum(doc, "partyType", PartyType, PartyType.CUSTOMER),
        party_id=coerce_text(doc.get("partyId")) or "",
        amount=c.amount(doc, "amount"),
        date=c.date(doc, "date"),
        status=c.enum(doc, "status", PaymentStatus, PaymentStatus.COMPLETED),
        invoice_id=coerce_text(doc.get("invoiceId")),
        reference=coerce_text(doc.get("reference")),
        method=coerce_text(doc.get("method")),
        bank_transfer_charge=c.amount(doc, "bankTransferCharge"),
        notes=coerce_text(doc.get("notes")),
    ))


def _map_all(results: Iterable[DocumentResult], warnings: list[RecordWarning]) -> tuple:
    records = []
    for result in results:
        warnings.extend(result.warnings)
        if not result.skipped:
            records.append(result.record)
    return tuple(records)


def snapshot_from_documents(
    customers: Iterable[Document] = (),
    suppliers: Iterable[Document] = (),
    invoices: Iterable[Document] = (),
    notes: Iterable[Document] = (),
    payments: Iterable[Document] = (),
    snapshot_id: str | None = None,
) -> IngestionResult:
    """Map every collection and build the snapshot, preserving input order."""
    warnings: list[RecordWarning] = []
    parties = _map_all(
        [party_from_document(d, PartyType.CUSTOMER) for d in customers]
        + [party_from_document(d, PartyType.SUPPLIER) for d in suppliers],
        warnings,
    )
    snapshot = LedgerSnapshot(
        parties=parties,
        invoices=_map_all((invoice_from_document(d) for d in invoices), warnings),
        notes=_map_all((note_from_document(d) for d in notes), warnings),
        payments=_map_all((payment_from_document(d) for d in payments), warnings),
        snapshot_id=snapshot_id,
    )

    logger.info("documents_ingested", extra={
        "snapshot_id": snapshot_id,
        "parties": len(snapshot.parties),
        "invoices": len(snapshot.invoices),
        "notes": len(snapshot.notes),
        "payments": len(snapshot.payments),
        "warnings": len(warnings),
    })
    for warning in warnings:
        logger.warning("document_field_coerced", extra=warning.as_log_extra())

    return IngestionResult(snapshot=snapshot, warnings=tuple(warnings))
