"""
Module: ledger_kernel.models.payment
Responsibility: ORM persistence for payments received and made.
Architecture position: Kernel > Models.

``invoice_id`` is optional and unconstrained: most payments reach their
invoice only through an invoice number embedded in ``reference``.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import TrackedBase
from ledger_kernel.domain.records import (
    PartyType,
    Payment,
    PaymentDirection,
    PaymentStatus,
)


class PaymentModel(TrackedBase):
    """A payment row (direction In or Out)."""

    __tablename__ = "ledger_payments"

    __table_args__ = (
        Index("idx_ledger_payment_party", "party_type", "party_id"),
        Index("idx_ledger_payment_status", "status"),
    )

    direction: Mapped[str] = mapped_column(String(10), nullable=False)

    party_type: Mapped[str] = mapped_column(String(20), nullable=False)

    party_id: Mapped[str] = mapped_column(String(64), nullable=False)

    amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))

    date: Mapped[dt.date | None] = mapped_column(nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=PaymentStatus.COMPLETED.value,
    )

    invoice_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    reference: Mapped[str | None] = mapped_column(String(255), nullable=True)

    method: Mapped[str | None] = mapped_column(String(20), nullable=True)

    bank_transfer_charge: Mapped[Decimal] = mapped_column(
        nullable=False,
        default=Decimal("0"),
    )

    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    def to_record(self) -> Payment:
        """Convert ORM model to frozen domain record."""
        return Payment(
            id=self.id,
            direction=PaymentDirection(self.direction),
            party_type=PartyType(self.party_type),
            party_id=self.party_id,
            amount=self.amount if self.amount is not None else Decimal("0"),
            date=self.date,
            status=PaymentStatus(self.status),
            invoice_id=self.invoice_id,
            reference=self.reference,
            method=self.method,
            bank_transfer_charge=self.bank_transfer_charge or Decimal("0"),
            notes=self.notes,
        )

    @classmethod
    def from_record(cls, record: Payment) -> PaymentModel:
        """Create ORM model from domain record."""
        return cls(
            id=record.id,
            direction=record.direction.value,
            party_type=record.party_type.value,
            party_id=record.party_id,
            amount=record.amount,
            date=record.date,
            status=record.status.value,
            invoice_id=record.invoice_id,
            reference=record.reference,
            method=record.method,
            bank_transfer_charge=record.bank_transfer_charge,
            notes=record.notes,
        )

    def __repr__(self) -> str:
        return (
            f"<PaymentModel {self.id} {self.direction} {self.amount} "
            f"{self.party_type}:{self.party_id} status={self.status}>"
        )
