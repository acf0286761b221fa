"""
Tests for the invoice adjustment resolver.

Covers:
- Note matching on system and manual invoice numbers
- Debit/credit summing and the zero floor
- Unmatched notes
"""

from datetime import date
from decimal import Decimal

from ledger_engines.adjustment import InvoiceAdjustmentResolver, note_matches_invoice
from ledger_kernel.domain.records import Invoice, Note, NoteType, PartyType


def _invoice(total="10000", number="INV-001", manual=None, invoice_id="inv-1"):
    return Invoice(
        id=invoice_id,
        system_number=number,
        manual_number=manual,
        party_type=PartyType.CUSTOMER,
        party_id="c-1",
        total=Decimal(total),
        issue_date=date(2024, 1, 10),
    )


def _note(note_id, note_type, amount, related=None):
    return Note(
        id=note_id,
        note_type=note_type,
        note_no=f"N-{note_id}",
        party_type=PartyType.CUSTOMER,
        party_id="c-1",
        amount=Decimal(amount),
        date=date(2024, 1, 20),
        related_invoice_no=related,
    )


class TestNoteMatching:
    """Tests for note_matches_invoice."""

    def test_matches_system_number_case_insensitive(self):
        """Related number is trimmed and lowercased before comparing."""
        note = _note("n1", NoteType.CREDIT, "100", related="  inv-001 ")
        assert note_matches_invoice(note, _invoice())

    def test_matches_manual_number(self):
        note = _note("n1", NoteType.DEBIT, "100", related="M-77")
        assert note_matches_invoice(note, _invoice(manual="m-77"))

    def test_exact_match_only(self):
        """A related number that merely contains the invoice number does not match."""
        note = _note("n1", NoteType.CREDIT, "100", related="INV-0010")
        assert not note_matches_invoice(note, _invoice())

    def test_empty_related_number_never_matches(self):
        note = _note("n1", NoteType.CREDIT, "100", related="   ")
        assert not note_matches_invoice(note, _invoice(manual=""))


class TestInvoiceAdjustment:
    """Tests for InvoiceAdjustmentResolver.resolve."""

    def setup_method(self):
        self.resolver = InvoiceAdjustmentResolver()

    def test_no_notes_keeps_nominal_total(self):
        adjustment = self.resolver.resolve(_invoice(), [])

        assert adjustment.adjusted_total == Decimal("10000")
        assert adjustment.matched_note_ids == ()

    def test_debit_and_credit_applied(self):
        notes = [
            _note("n1", NoteType.CREDIT, "2500", related="INV-001"),
            _note("n2", NoteType.DEBIT, "500", related="m-77"),
            _note("n3", NoteType.CREDIT, "300", related="INV-999"),
        ]
        adjustment = self.resolver.resolve(_invoice(manual="M-77"), notes)

        assert adjustment.debit_total == Decimal("500")
        assert adjustment.credit_total == Decimal("2500")
        assert adjustment.adjusted_total == Decimal("8000")
        assert adjustment.net_adjustment == Decimal("-2000")
        assert adjustment.matched_note_ids == ("n1", "n2")

    def test_multiple_notes_of_same_type_are_summed(self):
        notes = [
            _note("n1", NoteType.CREDIT, "1000", related="INV-001"),
            _note("n2", NoteType.CREDIT, "1500", related="INV-001"),
        ]
        adjustment = self.resolver.resolve(_invoice(), notes)

        assert adjustment.credit_total == Decimal("2500")
        assert adjustment.adjusted_total == Decimal("7500")

    def test_full_credit_note_adjusts_to_zero(self):
        notes = [_note("n1", NoteType.CREDIT, "10000", related="INV-001")]
        adjustment = self.resolver.resolve(_invoice(), notes)

        assert adjustment.adjusted_total == Decimal("0")

    def test_credit_exceeding_total_floors_at_zero(self):
        notes = [_note("n1", NoteType.CREDIT, "12500", related="INV-001")]
        adjustment = self.resolver.resolve(_invoice(), notes)

        assert adjustment.adjusted_total == Decimal("0")
        assert adjustment.credit_total == Decimal("12500")

    def test_negative_note_amount_clamped(self):
        notes = [_note("n1", NoteType.CREDIT, "-400", related="INV-001")]
        adjustment = self.resolver.resolve(_invoice(), notes)

        assert adjustment.credit_total == Decimal("0")
        assert adjustment.adjusted_total == Decimal("10000")


class TestUnmatchedNotes:
    """Tests for InvoiceAdjustmentResolver.unmatched_notes."""

    def test_unmatched_notes_reported(self):
        invoices = [_invoice(), _invoice(number="INV-002", invoice_id="inv-2")]
        notes = [
            _note("n1", NoteType.CREDIT, "100", related="INV-002"),
            _note("n2", NoteType.DEBIT, "750", related="INV-404"),
            _note("n3", NoteType.DEBIT, "50"),
        ]
        unmatched = InvoiceAdjustmentResolver().unmatched_notes(invoices, notes)

        assert [n.id for n in unmatched] == ["n2", "n3"]
