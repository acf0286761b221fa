"""Pure domain layer of the ledger kernel: records, snapshots, amounts, clock."""

from ledger_kernel.domain.dtos import RecordWarning, WarningCode
from ledger_kernel.domain.records import (
    Invoice,
    Note,
    NoteType,
    Party,
    PartyType,
    Payment,
    PaymentDirection,
    PaymentMethod,
    PaymentStatus,
    normalize_reference,
    settlement_direction,
)
from ledger_kernel.domain.snapshot import LedgerSnapshot, PartyLedgerInput

__all__ = [
    "Invoice",
    "LedgerSnapshot",
    "Note",
    "NoteType",
    "Party",
    "PartyLedgerInput",
    "PartyType",
    "Payment",
    "PaymentDirection",
    "PaymentMethod",
    "PaymentStatus",
    "RecordWarning",
    "WarningCode",
    "normalize_reference",
    "settlement_direction",
]
