"""
Module: ledger_kernel.models.note
Responsibility: ORM persistence for debit and credit notes.
Architecture position: Kernel > Models.

``related_invoice_no`` is a plain string correlated to an invoice's system or
manual number; there is deliberately no foreign key.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import TrackedBase
from ledger_kernel.domain.records import Note, NoteType, PartyType


class NoteModel(TrackedBase):
    """A debit or credit note row."""

    __tablename__ = "ledger_notes"

    __table_args__ = (
        Index("idx_ledger_note_party", "party_type", "party_id"),
    )

    note_type: Mapped[str] = mapped_column(String(10), nullable=False)

    note_no: Mapped[str] = mapped_column(String(100), nullable=False)

    party_type: Mapped[str] = mapped_column(String(20), nullable=False)

    party_id: Mapped[str] = mapped_column(String(64), nullable=False)

    amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))

    date: Mapped[dt.date | None] = mapped_column(nullable=True)

    related_invoice_no: Mapped[str | None] = mapped_column(String(100), nullable=True)

    reason: Mapped[str | None] = mapped_column(String(500), nullable=True)

    def to_record(self) -> Note:
        """Convert ORM model to frozen domain record."""
        return Note(
            id=self.id,
            note_type=NoteType(self.note_type),
            note_no=self.note_no,
            party_type=PartyType(self.party_type),
            party_id=self.party_id,
            amount=self.amount if self.amount is not None else Decimal("0"),
            date=self.date,
            related_invoice_no=self.related_invoice_no,
            reason=self.reason,
        )

    @classmethod
    def from_record(cls, record: Note) -> NoteModel:
        """Create ORM model from domain record."""
        return cls(
            id=record.id,
            note_type=record.note_type.value,
            note_no=record.note_no,
            party_type=record.party_type.value,
            party_id=record.party_id,
            amount=record.amount,
            date=record.date,
            related_invoice_no=record.related_invoice_no,
            reason=record.reason,
        )

    def __repr__(self) -> str:
        return f"<NoteModel {self.note_type} {self.note_no}>"
