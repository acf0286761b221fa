"""
Module: ledger_kernel.models.invoice
Responsibility: ORM persistence for sale and purchase invoices.
Architecture position: Kernel > Models.

Invoices carry their nominal total only; adjustments live in notes and are
applied by the engines, never written back here.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import TrackedBase
from ledger_kernel.domain.records import Invoice, PartyType


class InvoiceModel(TrackedBase):
    """A sale (customer) or purchase (supplier) invoice row."""

    __tablename__ = "ledger_invoices"

    __table_args__ = (
        Index("idx_ledger_invoice_party", "party_type", "party_id"),
    )

    system_number: Mapped[str] = mapped_column(String(100), nullable=False)

    manual_number: Mapped[str | None] = mapped_column(String(100), nullable=True)

    party_type: Mapped[str] = mapped_column(String(20), nullable=False)

    party_id: Mapped[str] = mapped_column(String(64), nullable=False)

    total: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))

    issue_date: Mapped[date | None] = mapped_column(nullable=True)

    due_date: Mapped[date | None] = mapped_column(nullable=True)

    # Free-text hint, e.g. "Overdue" or "Paid"
    status: Mapped[str | None] = mapped_column(String(50), nullable=True)

    def to_record(self) -> Invoice:
        """Convert ORM model to frozen domain record."""
        return Invoice(
            id=self.id,
            system_number=self.system_number,
            party_type=PartyType(self.party_type),
            party_id=self.party_id,
            total=self.total if self.total is not None else Decimal("0"),
            issue_date=self.issue_date,
            due_date=self.due_date,
            manual_number=self.manual_number,
            status=self.status,
        )

    @classmethod
    def from_record(cls, record: Invoice) -> InvoiceModel:
        """Create ORM model from domain record."""
        return cls(
            id=record.id,
            system_number=record.system_number,
            manual_number=record.manual_number,
            party_type=record.party_type.value,
            party_id=record.party_id,
            total=record.total,
            issue_date=record.issue_date,
            due_date=record.due_date,
            status=record.status,
        )

    def __repr__(self) -> str:
        return f"<InvoiceModel {self.system_number} {self.party_type}:{self.party_id}>"
