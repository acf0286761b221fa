"""
Module: ledger_engines.summary
Responsibility:
    Produce the complete ``PartySummary`` for one party: balance roll-up,
    invoice history rows, transaction timeline and the non-fatal warnings
    raised by the party's records.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Orchestrates the
    adjustment, matching, settlement, balance and report engines over a
    ``PartyLedgerInput``.

Invariants enforced:
    - Negative record amounts are replaced by zero before any engine sees
      them, each with a NEGATIVE_AMOUNT_CLAMPED warning.  The opening
      balance is signed and never clamped.
    - Recomputing a summary from an unchanged input yields an equal value.
    - sum(timeline signed amounts) == balance.

Usage:
    from ledger_engines.summary import build_party_summary

    summary = build_party_summary(snapshot.for_party(party), as_of_date=today)
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal

from ledger_engines.ledger_report import (
    InvoiceHistoryRow,
    LedgerReportBuilder,
    TransactionRow,
)
from ledger_engines.party_balance import (
    DEFAULT_OVERDUE_HINTS,
    DEFAULT_PAID_HINTS,
    PartyBalanceAggregator,
)
from ledger_engines.payment_matching import attribute_payments
from ledger_engines.tracer import traced_engine
from ledger_kernel.domain.amounts import ZERO
from ledger_kernel.domain.dtos import RecordWarning, WarningCode
from ledger_kernel.domain.records import PartyType
from ledger_kernel.domain.snapshot import PartyLedgerInput
from ledger_kernel.logging_config import get_logger

logger = get_logger("engines.summary")

ENGINE_VERSION = "1.0"


@dataclass(frozen=True)
class PartySummary:
    """
    Everything a statement or dashboard shows for one party.

    Guarantees:
        - balance == outstanding - advance and min(outstanding, advance) == 0.
        - overdue_outstanding <= outstanding.
    """

    party_id: str
    party_type: PartyType
    party_name: str
    opening: Decimal
    total_invoiced: Decimal
    settled: Decimal
    debit_adjustments: Decimal
    credit_adjustments: Decimal
    balance: Decimal
    outstanding: Decimal
    advance: Decimal
    overdue_outstanding: Decimal
    is_active: bool
    invoice_rows: tuple[InvoiceHistoryRow, ...] = ()
    timeline_rows: tuple[TransactionRow, ...] = ()
    warnings: tuple[RecordWarning, ...] = ()


def _clamp(record, kind: str, field_name: str, warnings: list[RecordWarning]):
    value = getattr(record, field_name)
    if value >= ZERO:
        return record
    warnings.append(RecordWarning(
        code=WarningCode.NEGATIVE_AMOUNT_CLAMPED,
        message=f"{kind} {field_name} {value} clamped to 0",
        record_kind=kind,
        record_id=record.id,
        field=field_name,
        raw_value=value,
    ))
    return replace(record, **{field_name: ZERO})


def sanitize_ledger_input(
    ledger_input: PartyLedgerInput,
) -> tuple[PartyLedgerInput, tuple[RecordWarning, ...]]:
    """Clamp negative invoice, note and payment amounts to zero."""
    warnings: list[RecordWarning] = []
    invoices = tuple(_clamp(i, "invoice", "total", warnings) for i in ledger_input.invoices)
    notes = tuple(_clamp(n, "note", "amount", warnings) for n in ledger_input.notes)
    payments = tuple(
        _clamp(_clamp(p, "payment", "amount", warnings), "payment", "bank_transfer_charge", warnings)
        for p in ledger_input.payments
    )
    sanitized = replace(ledger_input, invoices=invoices, notes=notes, payments=payments)
    return sanitized, tuple(warnings)


@traced_engine(
    "party_summary",
    ENGINE_VERSION,
    fingerprint_fields=("ledger_input", "as_of_date"),
)
def build_party_summary(
    ledger_input: PartyLedgerInput,
    as_of_date: date,
    paid_status_hints: Sequence[str] = DEFAULT_PAID_HINTS,
    overdue_status_hints: Sequence[str] = DEFAULT_OVERDUE_HINTS,
) -> PartySummary:
    """Compute the full summary of one party as of ``as_of_date``."""
    t0 = time.monotonic()
    data, warnings = sanitize_ledger_input(ledger_input)
    party = data.party

    balance = PartyBalanceAggregator().aggregate(
        opening=party.opening_balance,
        invoices=data.invoices,
        notes=data.notes,
        payments=data.payments,
        as_of_date=as_of_date,
        paid_status_hints=paid_status_hints,
        overdue_status_hints=overdue_status_hints,
    )

    attribution = attribute_payments(data.invoices, data.payments)
    builder = LedgerReportBuilder()
    invoice_rows = builder.build_invoice_rows(
        party.opening_balance,
        data.invoices,
        data.notes,
        data.payments,
        attribution=attribution,
    )
    timeline_rows = builder.build_timeline(
        party.opening_balance,
        data.invoices,
        data.notes,
        data.payments,
    )

    summary = PartySummary(
        party_id=party.id,
        party_type=party.party_type,
        party_name=party.name,
        opening=balance.opening,
        total_invoiced=balance.total_invoiced,
        settled=balance.settled,
        debit_adjustments=balance.debit_adjustments,
        credit_adjustments=balance.credit_adjustments,
        balance=balance.balance,
        outstanding=balance.outstanding,
        advance=balance.advance,
        overdue_outstanding=balance.overdue_outstanding,
        is_active=balance.is_active,
        invoice_rows=invoice_rows,
        timeline_rows=timeline_rows,
        warnings=warnings + attribution.warnings,
    )

    duration_ms = round((time.monotonic() - t0) * 1000, 2)
    logger.info("party_summary_built", extra={
        "party_type": party.party_type.value,
        "party_id": party.id,
        "balance": str(summary.balance),
        "invoices": len(data.invoices),
        "notes": len(data.notes),
        "payments": len(data.payments),
        "warnings": len(summary.warnings),
        "duration_ms": duration_ms,
    })
    return summary
