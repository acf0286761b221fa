"""
Module: ledger_kernel.selectors.ledger_snapshot_selector
Responsibility: Load a point-in-time ``LedgerSnapshot`` of the four ledger
    collections from the relational store.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Read-only: only SELECT statements are issued.
    - Deterministic order: rows are returned newest first by created_at, then
      by id, so repeated loads of an unchanged store produce equal snapshots.

Failure modes:
    - SnapshotLoadError wrapping the underlying SQLAlchemyError when a
      collection cannot be read.
    - A row holding an unknown party type, note type, direction or status
      is skipped and logged as snapshot_row_skipped; the rest of the
      collection still loads.

Usage:
    with session_scope() as session:
        snapshot = LedgerSnapshotSelector(session).load(PartyType.CUSTOMER)
"""

from __future__ import annotations

import time
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from ledger_kernel.domain.records import PartyType
from ledger_kernel.domain.snapshot import LedgerSnapshot
from ledger_kernel.exceptions import SnapshotLoadError
from ledger_kernel.logging_config import get_logger
from ledger_kernel.models import InvoiceModel, NoteModel, PartyModel, PaymentModel
from ledger_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.ledger_snapshot")


class LedgerSnapshotSelector(BaseSelector[PartyModel]):
    """
    Selector producing ``LedgerSnapshot`` values.

    Contract:
        ``load()`` reads every party, invoice, note and payment (optionally
        restricted to one party type) and converts them to frozen records.

    Non-goals:
        - Does NOT filter dangling records; the snapshot reports them.
        - Does NOT filter payments by status or direction; the engines do.
    """

    def _fetch(self, collection: str, model: Any, party_type: PartyType | None) -> tuple:
        stmt = select(model)
        if party_type is not None:
            stmt = stmt.where(model.party_type == party_type.value)
        stmt = stmt.order_by(model.created_at.desc(), model.id)
        try:
            rows = self.session.execute(stmt).scalars().all()
        except SQLAlchemyError as exc:
            logger.error(
                "snapshot_collection_load_failed",
                extra={"collection": collection, "error": str(exc)},
            )
            raise SnapshotLoadError(collection, str(exc)) from exc

        records = []
        for row in rows:
            try:
                records.append(row.to_record())
            except ValueError as exc:
                # Unknown enum value stored in a column; confined to this row.
                logger.warning(
                    "snapshot_row_skipped",
                    extra={"collection": collection, "record_id": row.id, "error": str(exc)},
                )
        return tuple(records)

    def load(
        self,
        party_type: PartyType | None = None,
        snapshot_id: str | None = None,
    ) -> LedgerSnapshot:
        """Read the ledger collections into an immutable snapshot.

        Args:
            party_type: Restrict every collection to this party type.
            snapshot_id: Optional label carried on the snapshot for logging.
        """
        t0 = time.monotonic()
        snapshot = LedgerSnapshot(
            parties=self._fetch("parties", PartyModel, party_type),
            invoices=self._fetch("invoices", InvoiceModel, party_type),
            notes=self._fetch("notes", NoteModel, party_type),
            payments=self._fetch("payments", PaymentModel, party_type),
            snapshot_id=snapshot_id,
        )
        duration_ms = round((time.monotonic() - t0) * 1000, 2)
        logger.info(
            "snapshot_loaded",
            extra={
                "party_type": party_type.value if party_type else None,
                "snapshot_id": snapshot_id,
                "parties": len(snapshot.parties),
                "invoices": len(snapshot.invoices),
                "notes": len(snapshot.notes),
                "payments": len(snapshot.payments),
                "duration_ms": duration_ms,
            },
        )
        return snapshot
