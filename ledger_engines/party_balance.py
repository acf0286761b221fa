"""
Module: ledger_engines.party_balance
Responsibility:
    Roll a party's opening balance, invoices, notes and settlement payments
    into one signed balance, then split it into outstanding, advance and
    overdue figures.

Architecture position:
    Engines -- pure calculation layer, zero I/O, no clock access.  "Today"
    is the caller-supplied ``as_of_date``.

Invariants enforced:
    - balance = opening + total_invoiced + debit_adjustments
      - credit_adjustments - settled.
    - total_invoiced uses nominal invoice totals; every note is counted
      exactly once through debit/credit adjustments, matched or not.
    - settled is the raw, uncapped sum of settlement payments, so invoice
      overpayment turns into party-level advance.
    - outstanding = max(0, balance), advance = max(0, -balance); at most one
      is non-zero.
    - overdue_outstanding = min(outstanding, overdue_total) <= outstanding.
    - Negative invoice, note and payment amounts are clamped to zero.

Usage:
    from ledger_engines.party_balance import PartyBalanceAggregator

    balance = PartyBalanceAggregator().aggregate(
        opening=party.opening_balance,
        invoices=invoices,
        notes=notes,
        payments=payments,
        as_of_date=date(2024, 6, 30),
    )
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from ledger_engines.payment_matching import settlement_payments
from ledger_engines.tracer import traced_engine
from ledger_kernel.domain.amounts import ZERO, non_negative, sum_amounts
from ledger_kernel.domain.records import Invoice, Note, Payment
from ledger_kernel.logging_config import get_logger

logger = get_logger("engines.party_balance")

ENGINE_VERSION = "1.0"

DEFAULT_PAID_HINTS: tuple[str, ...] = ("paid",)
DEFAULT_OVERDUE_HINTS: tuple[str, ...] = ("overdue",)


def is_invoice_overdue(
    invoice: Invoice,
    as_of_date: date,
    paid_status_hints: Sequence[str] = DEFAULT_PAID_HINTS,
    overdue_status_hints: Sequence[str] = DEFAULT_OVERDUE_HINTS,
) -> bool:
    """An invoice is overdue when its status hint says so, or when it is
    not marked paid and its due date is before ``as_of_date``.

    Hints are compared trimmed and lowercased.
    """
    hint = invoice.status_hint
    if hint and hint in overdue_status_hints:
        return True
    if hint and hint in paid_status_hints:
        return False
    return invoice.due_date is not None and invoice.due_date < as_of_date


@dataclass(frozen=True)
class PartyBalance:
    """
    Party-level roll-up.

    Guarantees:
        - balance == outstanding - advance.
        - min(outstanding, advance) == 0.
        - overdue_outstanding <= outstanding.
    """

    opening: Decimal
    total_invoiced: Decimal
    debit_adjustments: Decimal
    credit_adjustments: Decimal
    settled: Decimal
    balance: Decimal
    outstanding: Decimal
    advance: Decimal
    overdue_total: Decimal
    overdue_outstanding: Decimal
    overdue_invoice_ids: tuple[str, ...] = ()

    @property
    def is_active(self) -> bool:
        """A party with any opening balance or activity."""
        return (
            self.opening != ZERO
            or self.total_invoiced > ZERO
            or self.settled > ZERO
            or self.debit_adjustments > ZERO
            or self.credit_adjustments > ZERO
        )


class PartyBalanceAggregator:
    """
    Compute a party's balance from its full record set.

    Contract:
        Pure functions -- all data passed as parameters.
    Guarantees:
        - Deterministic for identical inputs.
        - Payments that are not settlement payments (wrong direction, not
          Completed) are ignored, so callers may pass the party's full
          payment list.
    Non-goals:
        - Does not filter records by party; callers pass one party's data.
    """

    @traced_engine(
        "party_balance",
        ENGINE_VERSION,
        fingerprint_fields=("opening", "invoices", "notes", "payments", "as_of_date"),
    )
    def aggregate(
        self,
        opening: Decimal,
        invoices: Sequence[Invoice],
        notes: Sequence[Note],
        payments: Sequence[Payment],
        as_of_date: date,
        paid_status_hints: Sequence[str] = DEFAULT_PAID_HINTS,
        overdue_status_hints: Sequence[str] = DEFAULT_OVERDUE_HINTS,
    ) -> PartyBalance:
        total_invoiced = sum_amounts(non_negative(inv.total) for inv in invoices)
        debit_adj = sum_amounts(non_negative(n.amount) for n in notes if n.is_debit)
        credit_adj = sum_amounts(non_negative(n.amount) for n in notes if not n.is_debit)
        settled = sum_amounts(non_negative(p.amount) for p in settlement_payments(payments))

        balance = opening + total_invoiced + debit_adj - credit_adj - settled
        outstanding = non_negative(balance)
        advance = non_negative(-balance)

        overdue = [
            inv for inv in invoices
            if is_invoice_overdue(inv, as_of_date, paid_status_hints, overdue_status_hints)
        ]
        overdue_total = sum_amounts(non_negative(inv.total) for inv in overdue)
        overdue_outstanding = min(outstanding, overdue_total)

        logger.debug("party_balance_aggregated", extra={
            "opening": str(opening),
            "total_invoiced": str(total_invoiced),
            "debit_adjustments": str(debit_adj),
            "credit_adjustments": str(credit_adj),
            "settled": str(settled),
            "balance": str(balance),
            "overdue_invoices": len(overdue),
            "as_of_date": as_of_date.isoformat(),
        })

        return PartyBalance(
            opening=opening,
            total_invoiced=total_invoiced,
            debit_adjustments=debit_adj,
            credit_adjustments=credit_adj,
            settled=settled,
            balance=balance,
            outstanding=outstanding,
            advance=advance,
            overdue_total=overdue_total,
            overdue_outstanding=overdue_outstanding,
            overdue_invoice_ids=tuple(inv.id for inv in overdue),
        )
