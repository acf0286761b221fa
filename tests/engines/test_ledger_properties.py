"""
Property-based tests for the ledger engines.

Generates random parties, invoices, notes and payments and verifies that
the reconciliation invariants hold for every combination:

- balance == outstanding - advance, and min(outstanding, advance) == 0
- invoice status only moves forward as matched payments grow
- adjusted invoice totals are never negative
- recomputing a summary yields an identical value
- overdue outstanding never exceeds outstanding
- timeline signed amounts sum to the balance
"""

from datetime import date
from decimal import Decimal

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from ledger_engines.adjustment import InvoiceAdjustmentResolver
from ledger_engines.settlement import InvoiceSettlementCalculator, InvoiceSettlementStatus
from ledger_engines.summary import build_party_summary
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
from ledger_kernel.domain.snapshot import PartyLedgerInput

AS_OF = date(2024, 6, 30)
NUMBERS = ("INV-001", "INV-002", "INV-0010", "INV-100")

PROPERTY_SETTINGS = settings(
    max_examples=150,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)

amounts = st.decimals(
    min_value=Decimal("0"),
    max_value=Decimal("1000000"),
    places=2,
    allow_nan=False,
    allow_infinity=False,
)
signed_amounts = st.decimals(
    min_value=Decimal("-1000000"),
    max_value=Decimal("1000000"),
    places=2,
    allow_nan=False,
    allow_infinity=False,
)
dates = st.one_of(
    st.none(),
    st.dates(min_value=date(2023, 1, 1), max_value=date(2024, 12, 31)),
)


@st.composite
def invoices(draw, party_type=PartyType.CUSTOMER):
    count = draw(st.integers(min_value=0, max_value=4))
    numbers = draw(st.lists(st.sampled_from(NUMBERS), min_size=count, max_size=count, unique=True))
    return [
        Invoice(
            id=f"inv-{i}",
            system_number=number,
            party_type=party_type,
            party_id="p-1",
            total=draw(amounts),
            issue_date=draw(dates),
            due_date=draw(dates),
            status=draw(st.sampled_from([None, "Unpaid", "Paid", "Overdue"])),
        )
        for i, number in enumerate(numbers)
    ]


@st.composite
def notes(draw, party_type=PartyType.CUSTOMER):
    count = draw(st.integers(min_value=0, max_value=4))
    return [
        Note(
            id=f"note-{i}",
            note_type=draw(st.sampled_from(list(NoteType))),
            note_no=f"N-{i}",
            party_type=party_type,
            party_id="p-1",
            amount=draw(amounts),
            date=draw(dates),
            related_invoice_no=draw(st.sampled_from((None, "INV-404") + NUMBERS)),
        )
        for i in range(count)
    ]


@st.composite
def payments(draw, party_type=PartyType.CUSTOMER):
    count = draw(st.integers(min_value=0, max_value=5))
    return [
        Payment(
            id=f"pay-{i}",
            direction=draw(st.sampled_from(list(PaymentDirection))),
            party_type=party_type,
            party_id="p-1",
            amount=draw(amounts),
            date=draw(dates),
            status=draw(st.sampled_from(list(PaymentStatus))),
            invoice_id=draw(st.sampled_from([None, "inv-0", "inv-1"])),
            reference=draw(st.sampled_from((None, "", "cash") + NUMBERS)),
        )
        for i in range(count)
    ]


@st.composite
def ledger_inputs(draw):
    party_type = draw(st.sampled_from([PartyType.CUSTOMER, PartyType.SUPPLIER]))
    party = Party(
        id="p-1",
        party_type=party_type,
        name="Party",
        opening_balance=draw(signed_amounts),
    )
    return PartyLedgerInput(
        party=party,
        invoices=tuple(draw(invoices(party_type))),
        notes=tuple(draw(notes(party_type))),
        payments=tuple(draw(payments(party_type))),
    )


_STATUS_RANK = {
    InvoiceSettlementStatus.UNPAID: 0,
    InvoiceSettlementStatus.PARTIALLY_PAID: 1,
    InvoiceSettlementStatus.PAID: 2,
}


class TestSummaryProperties:
    """Invariants over whole party summaries."""

    @PROPERTY_SETTINGS
    @given(ledger_input=ledger_inputs())
    def test_balance_decomposition(self, ledger_input):
        summary = build_party_summary(ledger_input, as_of_date=AS_OF)

        assert summary.balance == summary.outstanding - summary.advance
        assert min(summary.outstanding, summary.advance) == Decimal("0")

    @PROPERTY_SETTINGS
    @given(ledger_input=ledger_inputs())
    def test_overdue_never_exceeds_outstanding(self, ledger_input):
        summary = build_party_summary(ledger_input, as_of_date=AS_OF)

        assert Decimal("0") <= summary.overdue_outstanding <= summary.outstanding

    @PROPERTY_SETTINGS
    @given(ledger_input=ledger_inputs())
    def test_recomputation_identical(self, ledger_input):
        first = build_party_summary(ledger_input, as_of_date=AS_OF)
        second = build_party_summary(ledger_input, as_of_date=AS_OF)

        assert first == second
        assert repr(first) == repr(second)

    @PROPERTY_SETTINGS
    @given(ledger_input=ledger_inputs())
    def test_timeline_sums_to_balance(self, ledger_input):
        summary = build_party_summary(ledger_input, as_of_date=AS_OF)

        total = sum((row.signed_amount for row in summary.timeline_rows), Decimal("0"))
        assert total == summary.balance
        if summary.timeline_rows:
            assert summary.timeline_rows[0].balance_after == summary.balance

    @PROPERTY_SETTINGS
    @given(ledger_input=ledger_inputs())
    def test_invoice_rows_within_bounds(self, ledger_input):
        summary = build_party_summary(ledger_input, as_of_date=AS_OF)

        for row in summary.invoice_rows:
            if row.is_opening:
                continue
            assert Decimal("0") <= row.paid <= row.adjusted_total
            assert row.remaining == row.adjusted_total - row.paid


class TestInvoiceProperties:
    """Invariants of the per-invoice engines."""

    @PROPERTY_SETTINGS
    @given(adjusted=amounts, payments_made=st.lists(amounts, max_size=6))
    def test_status_never_moves_backward(self, adjusted, payments_made):
        calculator = InvoiceSettlementCalculator()
        paid_so_far = Decimal("0")
        rank = _STATUS_RANK[calculator.settle(adjusted, paid_so_far).status]

        for amount in payments_made:
            paid_so_far += amount
            next_rank = _STATUS_RANK[calculator.settle(adjusted, paid_so_far).status]
            assert next_rank >= rank
            rank = next_rank

    @PROPERTY_SETTINGS
    @given(total=amounts, note_list=notes())
    def test_adjusted_total_never_negative(self, total, note_list):
        invoice = Invoice(
            id="inv-x",
            system_number="INV-001",
            party_type=PartyType.CUSTOMER,
            party_id="p-1",
            total=total,
        )
        adjustment = InvoiceAdjustmentResolver().resolve(invoice, note_list)

        assert adjustment.adjusted_total >= Decimal("0")
