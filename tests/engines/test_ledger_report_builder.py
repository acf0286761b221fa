"""
Tests for the ledger report builder.

Covers:
- Invoice history rows: opening row, date order, settlement state,
  payment detail rows
- Transaction timeline: signs, order, running balance, export shape
"""

from datetime import date
from decimal import Decimal

from ledger_engines.ledger_report import (
    LedgerReportBuilder,
    OpeningPosition,
    TransactionKind,
)
from ledger_engines.payment_matching import MatchBasis
from ledger_engines.settlement import InvoiceSettlementStatus
from ledger_kernel.domain.records import (
    Invoice,
    Note,
    NoteType,
    PartyType,
    Payment,
    PaymentDirection,
    PaymentStatus,
)


def _invoice(invoice_id, number, total, issued=None, due=None, manual=None):
    return Invoice(
        id=invoice_id,
        system_number=number,
        manual_number=manual,
        party_type=PartyType.CUSTOMER,
        party_id="c-1",
        total=Decimal(total),
        issue_date=issued,
        due_date=due,
    )


def _payment(payment_id, amount, paid_on, reference=None, method=None, charge="0",
             status=PaymentStatus.COMPLETED):
    return Payment(
        id=payment_id,
        direction=PaymentDirection.IN,
        party_type=PartyType.CUSTOMER,
        party_id="c-1",
        amount=Decimal(amount),
        date=paid_on,
        status=status,
        reference=reference,
        method=method,
        bank_transfer_charge=Decimal(charge),
    )


INVOICE = _invoice("inv-1", "INV-001", "10000", issued=date(2024, 1, 10))
CREDIT_NOTE = Note(
    id="cn-1",
    note_type=NoteType.CREDIT,
    note_no="CN-1",
    party_type=PartyType.CUSTOMER,
    party_id="c-1",
    amount=Decimal("500"),
    date=date(2024, 1, 20),
    related_invoice_no="INV-001",
)
PAYMENT = _payment("p1", "4000", date(2024, 2, 1), reference="INV-001")


class TestInvoiceRows:
    """Tests for build_invoice_rows."""

    def setup_method(self):
        self.builder = LedgerReportBuilder()

    def test_opening_row_first_when_balance_due(self):
        rows = self.builder.build_invoice_rows(Decimal("1500"), [INVOICE], [], [])

        assert rows[0].is_opening
        assert rows[0].opening_position == OpeningPosition.BALANCE_DUE
        assert rows[0].remaining == Decimal("1500")
        assert rows[0].status is None
        assert rows[1].invoice_id == "inv-1"

    def test_opening_row_advance_when_negative(self):
        rows = self.builder.build_invoice_rows(Decimal("-800"), [], [], [])

        assert len(rows) == 1
        assert rows[0].opening_position == OpeningPosition.ADVANCE

    def test_no_opening_row_when_zero(self):
        rows = self.builder.build_invoice_rows(Decimal("0"), [INVOICE], [], [])

        assert [r.invoice_id for r in rows] == ["inv-1"]

    def test_invoices_date_ascending(self):
        invoices = [
            _invoice("inv-3", "INV-003", "100"),
            _invoice("inv-2", "INV-002", "100", issued=date(2024, 3, 1)),
            _invoice("inv-1", "INV-001", "100", due=date(2024, 2, 1)),
        ]
        rows = self.builder.build_invoice_rows(Decimal("0"), invoices, [], [])

        assert [r.invoice_id for r in rows] == ["inv-1", "inv-2", "inv-3"]
        assert rows[0].date == date(2024, 2, 1)

    def test_settlement_state_with_adjustment(self):
        rows = self.builder.build_invoice_rows(
            Decimal("0"), [INVOICE], [CREDIT_NOTE], [PAYMENT],
        )
        row = rows[0]

        assert row.nominal_total == Decimal("10000")
        assert row.credit_total == Decimal("500")
        assert row.adjusted_total == Decimal("9500")
        assert row.paid == Decimal("4000")
        assert row.remaining == Decimal("5500")
        assert row.status == InvoiceSettlementStatus.PARTIALLY_PAID

    def test_payment_detail_rows(self):
        payments = [
            _payment("p2", "1000", date(2024, 3, 1), reference="inv-001", method="UPI", charge="15"),
            PAYMENT,
        ]
        rows = self.builder.build_invoice_rows(Decimal("0"), [INVOICE], [], payments)
        details = rows[0].payments

        assert [d.payment_id for d in details] == ["p1", "p2"]
        assert [d.cumulative for d in details] == [Decimal("4000"), Decimal("5000")]
        assert details[1].bank_transfer_charge == Decimal("15")
        assert details[1].basis == MatchBasis.REFERENCE
        assert rows[0].bank_transfer_charges == Decimal("15")
        # charges are not netted against the payment
        assert rows[0].paid == Decimal("5000")

    def test_display_number_prefers_manual(self):
        invoice = _invoice("inv-1", "INV-001", "100", manual="BILL-9")
        rows = self.builder.build_invoice_rows(Decimal("0"), [invoice], [], [])

        assert rows[0].number == "BILL-9"


class TestTimeline:
    """Tests for build_timeline."""

    def setup_method(self):
        self.builder = LedgerReportBuilder()

    def test_rows_newest_first_with_running_balance(self):
        rows = self.builder.build_timeline(
            Decimal("1000"), [INVOICE], [CREDIT_NOTE], [PAYMENT],
        )

        assert [r.kind for r in rows] == [
            TransactionKind.PAYMENT_IN,
            TransactionKind.CREDIT_NOTE,
            TransactionKind.INVOICE,
            TransactionKind.OPENING_BALANCE,
        ]
        assert [r.signed_amount for r in rows] == [
            Decimal("-4000"), Decimal("-500"), Decimal("10000"), Decimal("1000"),
        ]
        assert [r.balance_after for r in rows] == [
            Decimal("6500"), Decimal("10500"), Decimal("11000"), Decimal("1000"),
        ]

    def test_signed_amounts_sum_to_balance(self):
        debit = Note(
            id="dn-1",
            note_type=NoteType.DEBIT,
            note_no="DN-1",
            party_type=PartyType.CUSTOMER,
            party_id="c-1",
            amount=Decimal("250"),
            date=date(2024, 4, 1),
        )
        rows = self.builder.build_timeline(
            Decimal("-300"), [INVOICE], [CREDIT_NOTE, debit], [PAYMENT],
        )

        total = sum((r.signed_amount for r in rows), Decimal("0"))
        assert total == Decimal("5450")
        assert rows[0].balance_after == total

    def test_only_settlement_payments_listed(self):
        pending = _payment("p9", "100", date(2024, 2, 2), status=PaymentStatus.PENDING)
        rows = self.builder.build_timeline(Decimal("0"), [], [], [PAYMENT, pending])

        assert [r.record_id for r in rows] == ["p1"]

    def test_references(self):
        unreferenced = _payment("p2", "10", date(2024, 5, 1), method="Cash")
        rows = self.builder.build_timeline(
            Decimal("0"), [INVOICE], [CREDIT_NOTE], [unreferenced],
        )
        by_id = {r.record_id: r for r in rows}

        assert by_id["inv-1"].reference == "INV-001"
        assert by_id["cn-1"].reference == "CN-1"
        assert by_id["p2"].reference == "Cash"

    def test_undated_rows_before_opening_at_end(self):
        undated = _invoice("inv-9", "INV-009", "50")
        rows = self.builder.build_timeline(Decimal("100"), [undated, INVOICE], [], [])

        assert [r.record_id for r in rows] == ["inv-1", "inv-9", None]
        assert rows[-1].kind == TransactionKind.OPENING_BALANCE

    def test_export_row_shape(self):
        rows = self.builder.build_timeline(Decimal("0"), [], [], [PAYMENT])
        exported = rows[0].as_export_row()

        assert exported == {
            "date": "2024-02-01",
            "kind": "Payment In",
            "reference": "INV-001",
            "signedAmount": Decimal("-4000.00"),
        }
        assert str(exported["signedAmount"]) == "-4000.00"

    def test_empty_ledger(self):
        assert self.builder.build_timeline(Decimal("0"), [], [], []) == ()


class TestRowOrderMatchesAttribution:

    def test_first_row_receives_ambiguous_payment(self):
        due_only = Invoice(
            id="inv-1",
            system_number="INV-001",
            party_type=PartyType.CUSTOMER,
            party_id="c-1",
            total=Decimal("1000"),
            due_date=date(2024, 1, 5),
        )
        later = Invoice(
            id="inv-2",
            system_number="INV-0010",
            party_type=PartyType.CUSTOMER,
            party_id="c-1",
            total=Decimal("1000"),
            issue_date=date(2024, 2, 1),
        )
        payment = Payment(
            id="p1",
            direction=PaymentDirection.IN,
            party_type=PartyType.CUSTOMER,
            party_id="c-1",
            amount=Decimal("400"),
            date=date(2024, 2, 5),
            reference="INV-0010",
        )

        rows = LedgerReportBuilder().build_invoice_rows(Decimal("0"), [later, due_only], [], [payment])

        assert [r.invoice_id for r in rows] == ["inv-1", "inv-2"]
        assert rows[0].paid == Decimal("400")
        assert rows[1].paid == Decimal("0")
