"""
Module: ledger_engines.ledger_report
Responsibility:
    Build the two statement views of a party ledger:
    - invoice history rows: an optional opening-balance row followed by one
      row per invoice (date ascending) with its settlement state and the
      detail rows of the payments attributed to it;
    - transaction timeline: opening balance, every invoice, every note
      (signed by type) and every settlement payment (negative), date
      descending, each carrying the running balance after it.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Rendering, printing and
    export belong to the caller; ``TransactionRow.as_export_row`` only fixes
    the row shape.

Invariants enforced:
    - The signed amounts of the timeline sum to the party balance.
    - balance_after is computed in chronological order (opening first,
      undated records next, then dated records by date and input order);
      rows are returned in exactly the reverse order.
    - Each settlement payment is attributed to at most one invoice row.

Usage:
    from ledger_engines.ledger_report import LedgerReportBuilder

    builder = LedgerReportBuilder()
    rows = builder.build_invoice_rows(opening, invoices, notes, payments)
    timeline = builder.build_timeline(opening, invoices, notes, payments)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from ledger_engines.adjustment import InvoiceAdjustmentResolver
from ledger_engines.payment_matching import (
    MatchBasis,
    PaymentAttribution,
    attribute_payments,
    invoice_iteration_order,
    settlement_payments,
)
from ledger_engines.settlement import InvoiceSettlementCalculator, InvoiceSettlementStatus
from ledger_engines.tracer import traced_engine
from ledger_kernel.domain.amounts import (
    DISPLAY_DECIMAL_PLACES,
    ZERO,
    non_negative,
    round_display,
)
from ledger_kernel.domain.records import Invoice, Note, Payment, PaymentDirection
from ledger_kernel.logging_config import get_logger

logger = get_logger("engines.ledger_report")

ENGINE_VERSION = "1.0"


class OpeningPosition(str, Enum):
    """How a non-zero opening balance is presented."""

    BALANCE_DUE = "Balance Due"
    ADVANCE = "Advance"


class TransactionKind(str, Enum):
    OPENING_BALANCE = "Opening Balance"
    INVOICE = "Invoice"
    DEBIT_NOTE = "Debit Note"
    CREDIT_NOTE = "Credit Note"
    PAYMENT_IN = "Payment In"
    PAYMENT_OUT = "Payment Out"


@dataclass(frozen=True)
class PaymentDetailRow:
    """One payment under an invoice row, with paid-to-date after it."""

    payment_id: str
    date: date | None
    amount: Decimal
    cumulative: Decimal
    basis: MatchBasis
    reference: str | None = None
    method: str | None = None
    bank_transfer_charge: Decimal = ZERO


@dataclass(frozen=True)
class InvoiceHistoryRow:
    """
    One row of the invoice history.

    The opening row has ``invoice_id`` None, ``opening_position`` set,
    ``adjusted_total`` and ``remaining`` equal to the signed opening balance
    and no status.
    """

    invoice_id: str | None
    number: str
    date: date | None
    nominal_total: Decimal
    debit_total: Decimal
    credit_total: Decimal
    adjusted_total: Decimal
    paid: Decimal
    remaining: Decimal
    status: InvoiceSettlementStatus | None
    payments: tuple[PaymentDetailRow, ...] = ()
    opening_position: OpeningPosition | None = None

    @property
    def is_opening(self) -> bool:
        return self.opening_position is not None

    @property
    def bank_transfer_charges(self) -> Decimal:
        total = ZERO
        for row in self.payments:
            total += row.bank_transfer_charge
        return total


@dataclass(frozen=True)
class TransactionRow:
    """One statement line."""

    date: date | None
    kind: TransactionKind
    reference: str
    signed_amount: Decimal
    record_id: str | None = None
    balance_after: Decimal = ZERO

    def as_export_row(self, decimal_places: int = DISPLAY_DECIMAL_PLACES) -> dict[str, Any]:
        """Row shape handed to print/export collaborators."""
        return {
            "date": self.date.isoformat() if self.date else None,
            "kind": self.kind.value,
            "reference": self.reference,
            "signedAmount": round_display(self.signed_amount, decimal_places),
        }


def invoice_date(invoice: Invoice) -> date | None:
    """The date an invoice is shown under: issue date, else due date."""
    return invoice.statement_date


def opening_position(opening: Decimal) -> OpeningPosition | None:
    if opening > ZERO:
        return OpeningPosition.BALANCE_DUE
    if opening < ZERO:
        return OpeningPosition.ADVANCE
    return None


class LedgerReportBuilder:
    """
    Build invoice history rows and the transaction timeline.

    Contract:
        Pure functions of the supplied party records.
    Guarantees:
        - Identical inputs produce identical rows.
    Non-goals:
        - Does not format amounts beyond ``as_export_row``.
    """

    def __init__(self) -> None:
        self._resolver = InvoiceAdjustmentResolver()
        self._calculator = InvoiceSettlementCalculator()

    @traced_engine(
        "ledger_report.invoice_rows",
        ENGINE_VERSION,
        fingerprint_fields=("opening", "invoices", "notes", "payments"),
    )
    def build_invoice_rows(
        self,
        opening: Decimal,
        invoices: Sequence[Invoice],
        notes: Sequence[Note],
        payments: Sequence[Payment],
        attribution: PaymentAttribution | None = None,
    ) -> tuple[InvoiceHistoryRow, ...]:
        """Opening row (when non-zero) then invoices by date ascending."""
        if attribution is None:
            attribution = attribute_payments(invoices, payments)

        rows: list[InvoiceHistoryRow] = []
        position = opening_position(opening)
        if position is not None:
            rows.append(InvoiceHistoryRow(
                invoice_id=None,
                number=TransactionKind.OPENING_BALANCE.value,
                date=None,
                nominal_total=opening,
                debit_total=ZERO,
                credit_total=ZERO,
                adjusted_total=opening,
                paid=ZERO,
                remaining=opening,
                status=None,
                opening_position=position,
            ))

        for invoice in invoice_iteration_order(invoices):
            adjustment = self._resolver.resolve(invoice, notes)
            match = attribution.for_invoice(invoice.id)
            settlement = self._calculator.settle(adjustment.adjusted_total, match.total)
            details = tuple(
                PaymentDetailRow(
                    payment_id=m.payment.id,
                    date=m.payment.date,
                    amount=m.amount,
                    cumulative=m.cumulative,
                    basis=m.basis,
                    reference=m.payment.reference,
                    method=m.payment.method,
                    bank_transfer_charge=non_negative(m.payment.bank_transfer_charge),
                )
                for m in match.payments
            )
            rows.append(InvoiceHistoryRow(
                invoice_id=invoice.id,
                number=invoice.display_number,
                date=invoice_date(invoice),
                nominal_total=adjustment.nominal_total,
                debit_total=adjustment.debit_total,
                credit_total=adjustment.credit_total,
                adjusted_total=settlement.adjusted_total,
                paid=settlement.paid,
                remaining=settlement.remaining,
                status=settlement.status,
                payments=details,
            ))

        return tuple(rows)

    @traced_engine(
        "ledger_report.timeline",
        ENGINE_VERSION,
        fingerprint_fields=("opening", "invoices", "notes", "payments"),
    )
    def build_timeline(
        self,
        opening: Decimal,
        invoices: Sequence[Invoice],
        notes: Sequence[Note],
        payments: Sequence[Payment],
    ) -> tuple[TransactionRow, ...]:
        """Statement lines, newest first, each with its running balance."""
        entries: list[tuple[date | None, TransactionKind, str, Decimal, str]] = []

        for invoice in invoices:
            entries.append((
                invoice_date(invoice),
                TransactionKind.INVOICE,
                invoice.display_number,
                non_negative(invoice.total),
                invoice.id,
            ))
        for note in notes:
            amount = non_negative(note.amount)
            entries.append((
                note.date,
                TransactionKind.DEBIT_NOTE if note.is_debit else TransactionKind.CREDIT_NOTE,
                note.note_no or note.related_invoice_no or "",
                amount if note.is_debit else -amount,
                note.id,
            ))
        for payment in settlement_payments(payments):
            entries.append((
                payment.date,
                TransactionKind.PAYMENT_IN
                if payment.direction == PaymentDirection.IN
                else TransactionKind.PAYMENT_OUT,
                payment.reference or payment.method or "",
                -non_negative(payment.amount),
                payment.id,
            ))

        # Chronological: undated first, then by date; sort is stable.
        chronological = sorted(
            entries,
            key=lambda e: (e[0] is not None, e[0] or date.min),
        )

        rows: list[TransactionRow] = []
        running = ZERO
        if opening != ZERO:
            running = opening
            rows.append(TransactionRow(
                date=None,
                kind=TransactionKind.OPENING_BALANCE,
                reference=TransactionKind.OPENING_BALANCE.value,
                signed_amount=opening,
                balance_after=running,
            ))
        for entry_date, kind, reference, signed, record_id in chronological:
            running += signed
            rows.append(TransactionRow(
                date=entry_date,
                kind=kind,
                reference=reference,
                signed_amount=signed,
                record_id=record_id,
                balance_after=running,
            ))

        rows.reverse()
        return tuple(rows)
