"""
Records -- Typed views of the four ledger collections.

Responsibility:
    Frozen dataclasses for Party, Invoice, Note and Payment as they are read
    from the external store, plus the small vocabulary shared by every
    engine: party types, note types, payment directions and statuses, the
    settlement direction rule, and invoice-number normalization.

Architecture position:
    Kernel > Domain -- pure data definitions with ZERO I/O.  Consumed by
    ``ledger_engines`` and produced by ``ledger_ingestion`` and the ORM
    models' ``to_record()`` converters.

Invariants enforced:
    * All records are ``frozen=True`` (immutable after construction).
    * All monetary fields are ``Decimal`` -- NEVER ``float``.
    * Invoice match keys are normalized (trimmed, lowercased) and never empty.

Non-goals:
    * Records do not validate amounts; negative or malformed values are
      clamped and reported by the engines and the ingestion layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from ledger_kernel.domain.amounts import ZERO


class PartyType(str, Enum):
    """Counterparty classification."""

    CUSTOMER = "customer"
    SUPPLIER = "supplier"
    OTHER = "other"  # free-text payee on a payment; never a ledger party


class NoteType(str, Enum):
    """Debit notes raise the balance, credit notes lower it."""

    DEBIT = "Debit"
    CREDIT = "Credit"


class PaymentDirection(str, Enum):
    IN = "In"
    OUT = "Out"


class PaymentStatus(str, Enum):
    COMPLETED = "Completed"
    PENDING = "Pending"
    FAILED = "Failed"


class PaymentMethod(str, Enum):
    CASH = "Cash"
    UPI = "UPI"
    BANK = "Bank"
    CARD = "Card"
    CHEQUE = "Cheque"


def settlement_direction(party_type: PartyType) -> PaymentDirection | None:
    """
    The payment direction that reduces a party's balance.

    Customers settle by paying us (In); we settle suppliers by paying them
    (Out).  ``other`` payees have no ledger and no settlement direction.
    """
    if party_type == PartyType.CUSTOMER:
        return PaymentDirection.IN
    if party_type == PartyType.SUPPLIER:
        return PaymentDirection.OUT
    return None


def normalize_reference(value: str | None) -> str:
    """Trim and lowercase a number or free-text reference."""
    return (value or "").strip().lower()


@dataclass(frozen=True)
class Party:
    """A customer or supplier account.

    ``opening_balance`` is signed: positive means the party owes us for a
    customer, and we owe the party for a supplier.
    """

    id: str
    party_type: PartyType
    name: str
    opening_balance: Decimal = ZERO

    @property
    def key(self) -> tuple[PartyType, str]:
        return (self.party_type, self.id)


@dataclass(frozen=True)
class Invoice:
    """A sale (customer) or purchase (supplier) invoice at its nominal total."""

    id: str
    system_number: str
    party_type: PartyType
    party_id: str
    total: Decimal
    issue_date: date | None = None
    due_date: date | None = None
    manual_number: str | None = None
    status: str | None = None  # free-text hint, e.g. "Overdue"

    @property
    def party_key(self) -> tuple[PartyType, str]:
        return (self.party_type, self.party_id)

    @property
    def display_number(self) -> str:
        return self.manual_number or self.system_number

    @property
    def statement_date(self) -> date | None:
        """The date the invoice is listed under: issue date, else due date."""
        return self.issue_date or self.due_date

    @property
    def match_keys(self) -> tuple[str, ...]:
        """Normalized system/manual numbers; empty numbers are dropped."""
        keys: list[str] = []
        for raw in (self.system_number, self.manual_number):
            key = normalize_reference(raw)
            if key and key not in keys:
                keys.append(key)
        return tuple(keys)

    @property
    def status_hint(self) -> str:
        return normalize_reference(self.status)


@dataclass(frozen=True)
class Note:
    """A debit or credit note, optionally tied to an invoice by number."""

    id: str
    note_type: NoteType
    note_no: str
    party_type: PartyType
    party_id: str
    amount: Decimal
    date: date | None = None
    related_invoice_no: str | None = None
    reason: str | None = None

    @property
    def party_key(self) -> tuple[PartyType, str]:
        return (self.party_type, self.party_id)

    @property
    def is_debit(self) -> bool:
        return self.note_type == NoteType.DEBIT

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.is_debit else -self.amount


@dataclass(frozen=True)
class Payment:
    """Money received from a customer or paid to a supplier.

    ``bank_transfer_charge`` is recorded alongside the payment but is never
    netted against ``amount``.
    """

    id: str
    direction: PaymentDirection
    party_type: PartyType
    party_id: str
    amount: Decimal
    date: date | None = None
    status: PaymentStatus = PaymentStatus.COMPLETED
    invoice_id: str | None = None
    reference: str | None = None
    method: str | None = None
    bank_transfer_charge: Decimal = ZERO
    notes: str | None = None

    @property
    def party_key(self) -> tuple[PartyType, str]:
        return (self.party_type, self.party_id)

    @property
    def is_completed(self) -> bool:
        return self.status == PaymentStatus.COMPLETED

    @property
    def is_settlement(self) -> bool:
        """Completed and flowing in the direction that settles the party."""
        return (
            self.is_completed
            and self.direction == settlement_direction(self.party_type)
        )
