"""
Module: ledger_kernel.models.party
Responsibility: ORM persistence for customers and suppliers.
Architecture position: Kernel > Models.  May import from db/base.py and the
    pure domain records it converts to.

Invariants enforced:
    - (party_type, id) identifies the party; transactions refer to it by the
      same pair.
    - opening_balance is signed and stored as Numeric(38, 9).
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import TrackedBase
from ledger_kernel.domain.records import Party, PartyType


class PartyModel(TrackedBase):
    """
    A customer or supplier account row.

    Contract:
        ``to_record()`` returns the frozen ``Party`` the engines consume;
        ``from_record()`` is its inverse.
    """

    __tablename__ = "ledger_parties"

    __table_args__ = (
        Index("idx_ledger_party_type", "party_type"),
    )

    party_type: Mapped[str] = mapped_column(String(20), nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    opening_balance: Mapped[Decimal] = mapped_column(
        nullable=False,
        default=Decimal("0"),
    )

    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    address: Mapped[str | None] = mapped_column(String(500), nullable=True)

    def to_record(self) -> Party:
        """Convert ORM model to frozen domain record."""
        return Party(
            id=self.id,
            party_type=PartyType(self.party_type),
            name=self.name or "",
            opening_balance=self.opening_balance or Decimal("0"),
        )

    @classmethod
    def from_record(cls, record: Party) -> PartyModel:
        """Create ORM model from domain record."""
        return cls(
            id=record.id,
            party_type=record.party_type.value,
            name=record.name,
            opening_balance=record.opening_balance,
        )

    def __repr__(self) -> str:
        return f"<PartyModel {self.party_type}:{self.id} {self.name!r}>"
