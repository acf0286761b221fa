"""ORM models for the ledger collections."""

from ledger_kernel.models.invoice import InvoiceModel
from ledger_kernel.models.note import NoteModel
from ledger_kernel.models.party import PartyModel
from ledger_kernel.models.payment import PaymentModel

__all__ = [
    "InvoiceModel",
    "NoteModel",
    "PartyModel",
    "PaymentModel",
]
