"""
Module: ledger_engines.adjustment
Responsibility:
    Apply debit and credit notes to an invoice's nominal total to produce
    its adjusted total.  A note belongs to an invoice when its
    ``related_invoice_no`` equals, after trimming and lowercasing, the
    invoice's system number or manual number.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import ledger_kernel/domain and ledger_kernel/logging_config.

Invariants enforced:
    - adjusted_total = max(0, nominal + debit_sum - credit_sum); never
      negative, even when credits exceed the nominal total.
    - Matching is exact on the normalized key; notes with an empty
      ``related_invoice_no`` match no invoice.
    - Negative note amounts are clamped to zero before summing.

Failure modes:
    - None.  Notes that match no invoice are reported by
      ``unmatched_notes()``; they still count once at party level in
      ``ledger_engines.party_balance``.

Usage:
    from ledger_engines.adjustment import InvoiceAdjustmentResolver

    adjustment = InvoiceAdjustmentResolver().resolve(invoice, party_notes)
    adjustment.adjusted_total
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from ledger_engines.tracer import traced_engine
from ledger_kernel.domain.amounts import ZERO, non_negative
from ledger_kernel.domain.records import Invoice, Note, normalize_reference
from ledger_kernel.logging_config import get_logger

logger = get_logger("engines.adjustment")

ENGINE_VERSION = "1.0"


def note_matches_invoice(note: Note, invoice: Invoice) -> bool:
    """True when the note's related invoice number names this invoice."""
    key = normalize_reference(note.related_invoice_no)
    return bool(key) and key in invoice.match_keys


@dataclass(frozen=True)
class InvoiceAdjustment:
    """
    An invoice's nominal total together with the notes applied to it.

    Guarantees:
        - debit_total and credit_total are non-negative.
        - adjusted_total >= 0.
    """

    invoice_id: str
    nominal_total: Decimal
    debit_total: Decimal
    credit_total: Decimal
    adjusted_total: Decimal
    matched_note_ids: tuple[str, ...] = ()

    @property
    def net_adjustment(self) -> Decimal:
        return self.debit_total - self.credit_total


class InvoiceAdjustmentResolver:
    """
    Resolve note adjustments per invoice.

    Contract:
        Pure functions -- no I/O, no database access.
    Guarantees:
        - Identical inputs produce identical ``InvoiceAdjustment`` values.
        - Several notes may match one invoice; their amounts are summed
          per note type.
    Non-goals:
        - Does not decide which party a note belongs to; callers pass the
          notes of the invoice's party.
    """

    @traced_engine("adjustment", ENGINE_VERSION, fingerprint_fields=("invoice", "notes"))
    def resolve(self, invoice: Invoice, notes: Sequence[Note]) -> InvoiceAdjustment:
        """Apply every matching note to ``invoice``."""
        nominal = non_negative(invoice.total)
        debit_total = ZERO
        credit_total = ZERO
        matched: list[str] = []

        for note in notes:
            if not note_matches_invoice(note, invoice):
                continue
            amount = non_negative(note.amount)
            if note.is_debit:
                debit_total += amount
            else:
                credit_total += amount
            matched.append(note.id)

        adjusted = non_negative(nominal + debit_total - credit_total)

        if matched:
            logger.debug("invoice_adjusted", extra={
                "invoice_id": invoice.id,
                "nominal_total": str(nominal),
                "debit_total": str(debit_total),
                "credit_total": str(credit_total),
                "adjusted_total": str(adjusted),
                "matched_notes": len(matched),
            })

        return InvoiceAdjustment(
            invoice_id=invoice.id,
            nominal_total=nominal,
            debit_total=debit_total,
            credit_total=credit_total,
            adjusted_total=adjusted,
            matched_note_ids=tuple(matched),
        )

    def unmatched_notes(
        self,
        invoices: Sequence[Invoice],
        notes: Sequence[Note],
    ) -> tuple[Note, ...]:
        """Notes whose related invoice number matches none of ``invoices``."""
        return tuple(
            note for note in notes
            if not any(note_matches_invoice(note, invoice) for invoice in invoices)
        )
