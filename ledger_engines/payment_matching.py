"""
Module: ledger_engines.payment_matching
Responsibility:
    Associate settlement payments with the invoices they settle.  There is
    no reliable foreign key between a payment and an invoice: a payment
    either carries the invoice id, or embeds the invoice number somewhere
    in its free-text reference.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Only settlement payments participate: status Completed and direction
      In for customers, Out for suppliers.
    - Match rule, first match wins: (1) ``payment.invoice_id == invoice.id``;
      (2) the normalized reference contains the normalized system number
      or manual number of an invoice of the same party.
    - ``match_payment_to_invoice`` is the single place that decides whether
      a payment settles an invoice.
    - Matched payments are ordered by date ascending (undated last, input
      order on ties) and carry a running cumulative sum.
    - ``attribute_payments`` assigns each payment to at most one invoice.

Failure modes:
    - None.  A reference that matches several invoices is attributed to
      the first one and reported with AMBIGUOUS_PAYMENT_MATCH.

Usage:
    from ledger_engines.payment_matching import PaymentMatcher

    match = PaymentMatcher().match(invoice, party_payments)
    match.total
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from ledger_engines.tracer import traced_engine
from ledger_kernel.domain.amounts import ZERO, non_negative
from ledger_kernel.domain.dtos import RecordWarning, WarningCode
from ledger_kernel.domain.records import Invoice, Payment, normalize_reference
from ledger_kernel.logging_config import get_logger

logger = get_logger("engines.payment_matching")

ENGINE_VERSION = "1.0"


class MatchBasis(str, Enum):
    """How a payment was tied to an invoice."""

    INVOICE_ID = "invoice_id"
    REFERENCE = "reference"


def settlement_payments(payments: Sequence[Payment]) -> tuple[Payment, ...]:
    """Keep Completed payments flowing in the party's settlement direction."""
    return tuple(p for p in payments if p.is_settlement)


def match_payment_to_invoice(payment: Payment, invoice: Invoice) -> MatchBasis | None:
    """Decide whether ``payment`` settles ``invoice``.

    Returns the basis of the match, or None.  The reference fallback only
    applies within the invoice's own party.
    """
    if payment.invoice_id and payment.invoice_id == invoice.id:
        return MatchBasis.INVOICE_ID
    if payment.party_key != invoice.party_key:
        return None
    reference = normalize_reference(payment.reference)
    if reference and any(key in reference for key in invoice.match_keys):
        return MatchBasis.REFERENCE
    return None


def _date_order_key(value: date | None) -> tuple[bool, date]:
    return (value is None, value or date.min)


@dataclass(frozen=True)
class MatchedPayment:
    """A payment matched to an invoice with the paid-to-date after it."""

    payment: Payment
    basis: MatchBasis
    cumulative: Decimal

    @property
    def amount(self) -> Decimal:
        return non_negative(self.payment.amount)


@dataclass(frozen=True)
class InvoicePaymentMatch:
    """
    The payments matched to one invoice.

    Guarantees:
        - payments are ordered by date ascending.
        - payments[-1].cumulative == total when any payment matched.
    """

    invoice_id: str
    payments: tuple[MatchedPayment, ...] = ()
    total: Decimal = ZERO

    @property
    def payment_ids(self) -> tuple[str, ...]:
        return tuple(m.payment.id for m in self.payments)


def _build_match(
    invoice: Invoice,
    matched: Sequence[tuple[Payment, MatchBasis]],
) -> InvoicePaymentMatch:
    ordered = sorted(matched, key=lambda pair: _date_order_key(pair[0].date))
    running = ZERO
    rows: list[MatchedPayment] = []
    for payment, basis in ordered:
        running += non_negative(payment.amount)
        rows.append(MatchedPayment(payment=payment, basis=basis, cumulative=running))
    return InvoicePaymentMatch(invoice_id=invoice.id, payments=tuple(rows), total=running)


class PaymentMatcher:
    """
    Per-invoice payment query.

    Contract:
        ``match()`` answers "which settlement payments reference this
        invoice?" independently for every invoice.
    Non-goals:
        - Does not resolve overlap between invoices.  When invoice numbers
          nest (INV-001 inside INV-0010) a payment can satisfy several
          per-invoice queries; use ``attribute_payments`` for an exclusive
          assignment.
    """

    @traced_engine("payment_matching", ENGINE_VERSION, fingerprint_fields=("invoice", "payments"))
    def match(self, invoice: Invoice, payments: Sequence[Payment]) -> InvoicePaymentMatch:
        matched: list[tuple[Payment, MatchBasis]] = []
        for payment in settlement_payments(payments):
            basis = match_payment_to_invoice(payment, invoice)
            if basis is not None:
                matched.append((payment, basis))
        return _build_match(invoice, matched)


@dataclass(frozen=True)
class PaymentAttribution:
    """
    Exclusive assignment of settlement payments to invoices.

    Guarantees:
        - Every settlement payment appears in at most one match.
        - matches follow the invoice iteration order used for attribution.
    """

    matches: tuple[InvoicePaymentMatch, ...] = ()
    unattributed: tuple[Payment, ...] = ()
    warnings: tuple[RecordWarning, ...] = ()

    def for_invoice(self, invoice_id: str) -> InvoicePaymentMatch:
        for match in self.matches:
            if match.invoice_id == invoice_id:
                return match
        return InvoicePaymentMatch(invoice_id=invoice_id)


def invoice_iteration_order(invoices: Sequence[Invoice]) -> tuple[Invoice, ...]:
    """Statement date ascending (undated last), then input order.

    Shared by attribution and the invoice history rows, so the first
    candidate for an ambiguous reference is also the first row shown.
    """
    return tuple(sorted(invoices, key=lambda inv: _date_order_key(inv.statement_date)))


@traced_engine("payment_attribution", ENGINE_VERSION, fingerprint_fields=("invoices", "payments"))
def attribute_payments(
    invoices: Sequence[Invoice],
    payments: Sequence[Payment],
) -> PaymentAttribution:
    """Assign each settlement payment to at most one invoice.

    Pass 1 assigns payments whose ``invoice_id`` names an invoice.  Pass 2
    assigns the rest by reference to the first matching invoice in
    iteration order.  Payments matching nothing stay unattributed; they
    still reduce the party balance.
    """
    ordered = invoice_iteration_order(invoices)
    by_id: dict[str, Invoice] = {}
    for invoice in ordered:
        by_id.setdefault(invoice.id, invoice)

    assigned: dict[str, list[tuple[Payment, MatchBasis]]] = {
        invoice.id: [] for invoice in ordered
    }
    unattributed: list[Payment] = []
    warnings: list[RecordWarning] = []

    remaining: list[Payment] = []
    for payment in settlement_payments(payments):
        if payment.invoice_id and payment.invoice_id in by_id:
            assigned[payment.invoice_id].append((payment, MatchBasis.INVOICE_ID))
        else:
            remaining.append(payment)

    for payment in remaining:
        candidates = [
            invoice for invoice in ordered
            if match_payment_to_invoice(payment, invoice) is not None
        ]
        if not candidates:
            unattributed.append(payment)
            continue
        chosen = candidates[0]
        assigned[chosen.id].append((payment, MatchBasis.REFERENCE))
        if len(candidates) > 1:
            numbers = [invoice.display_number for invoice in candidates]
            warning = RecordWarning(
                code=WarningCode.AMBIGUOUS_PAYMENT_MATCH,
                message=(
                    f"reference {payment.reference!r} matches invoices "
                    f"{', '.join(numbers)}; attributed to {chosen.display_number}"
                ),
                record_kind="payment",
                record_id=payment.id,
                field="reference",
                raw_value=payment.reference,
            )
            warnings.append(warning)
            logger.debug("ambiguous_payment_match", extra=warning.as_log_extra())

    matches = tuple(
        _build_match(invoice, assigned[invoice.id])
        for invoice in ordered
        if by_id[invoice.id] is invoice
    )
    return PaymentAttribution(
        matches=matches,
        unattributed=tuple(unattributed),
        warnings=tuple(warnings),
    )
