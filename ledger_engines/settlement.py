"""
Module: ledger_engines.settlement
Responsibility:
    Derive paid, remaining and status for one invoice from its adjusted
    total and the raw sum of the payments matched to it.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - 0 <= paid <= adjusted_total; paid = min(adjusted_total, max(0, paid_raw)).
    - remaining = adjusted_total - paid.
    - Status precedence Paid > Partially Paid > Unpaid, decided by
      remaining: Paid iff remaining <= 0.  An invoice adjusted to zero is
      therefore Paid.
    - Overpayment is not carried at invoice level; it is exposed as
      ``overpaid`` and surfaces as party-level advance.

Usage:
    from ledger_engines.settlement import InvoiceSettlementCalculator

    settlement = InvoiceSettlementCalculator().settle(Decimal("10000"), Decimal("4000"))
    settlement.status  # InvoiceSettlementStatus.PARTIALLY_PAID
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from ledger_engines.tracer import traced_engine
from ledger_kernel.domain.amounts import ZERO, non_negative

ENGINE_VERSION = "1.0"


class InvoiceSettlementStatus(str, Enum):
    PAID = "Paid"
    PARTIALLY_PAID = "Partially Paid"
    UNPAID = "Unpaid"


def determine_status(adjusted_total: Decimal, paid: Decimal) -> InvoiceSettlementStatus:
    """Status from the capped paid amount."""
    if adjusted_total - paid <= ZERO:
        return InvoiceSettlementStatus.PAID
    if paid > ZERO:
        return InvoiceSettlementStatus.PARTIALLY_PAID
    return InvoiceSettlementStatus.UNPAID


@dataclass(frozen=True)
class InvoiceSettlement:
    """Settlement state of one invoice."""

    adjusted_total: Decimal
    paid_raw: Decimal
    paid: Decimal
    remaining: Decimal
    status: InvoiceSettlementStatus

    @property
    def overpaid(self) -> Decimal:
        """Matched payments beyond the adjusted total."""
        return non_negative(self.paid_raw - self.adjusted_total)

    @property
    def is_paid(self) -> bool:
        return self.status == InvoiceSettlementStatus.PAID


class InvoiceSettlementCalculator:
    """
    Compute invoice settlement from adjusted total and matched payments.

    Contract:
        Pure functions -- no I/O.
    Guarantees:
        - For a fixed adjusted_total, increasing paid_raw never moves the
          status backwards (Unpaid -> Partially Paid -> Paid).
    """

    @traced_engine("settlement", ENGINE_VERSION, fingerprint_fields=("adjusted_total", "paid_raw"))
    def settle(self, adjusted_total: Decimal, paid_raw: Decimal) -> InvoiceSettlement:
        adjusted = non_negative(adjusted_total)
        paid = min(adjusted, non_negative(paid_raw))
        return InvoiceSettlement(
            adjusted_total=adjusted,
            paid_raw=paid_raw,
            paid=paid,
            remaining=adjusted - paid,
            status=determine_status(adjusted, paid),
        )
