"""
DTOs -- Non-fatal anomaly reporting.

Responsibility:
    Defines ``RecordWarning``, the value returned (never raised) when a
    single record is malformed: a non-numeric amount, a negative amount, an
    unparseable date, a transaction whose party does not exist, or a payment
    reference that matches several invoices.  The offending record falls
    back to a zero/empty default and the rest of the ledger still computes.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class WarningCode(str, Enum):
    """Machine-readable codes for record anomalies."""

    MALFORMED_AMOUNT = "MALFORMED_AMOUNT"
    NEGATIVE_AMOUNT_CLAMPED = "NEGATIVE_AMOUNT_CLAMPED"
    MALFORMED_DATE = "MALFORMED_DATE"
    UNKNOWN_ENUM_VALUE = "UNKNOWN_ENUM_VALUE"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    DANGLING_PARTY = "DANGLING_PARTY"
    AMBIGUOUS_PAYMENT_MATCH = "AMBIGUOUS_PAYMENT_MATCH"


@dataclass(frozen=True)
class RecordWarning:
    """
    A single non-fatal anomaly attached to one record.

    Contract:
        Carries a machine-readable code, a human-readable message, and enough
        context (record kind, id, field, raw value) for the caller to show
        the problem next to the record.

    Non-goals:
        - Does NOT raise -- it IS the error representation.
    """

    code: WarningCode
    message: str
    record_kind: str
    record_id: str
    field: str | None = None
    raw_value: Any = None

    def as_log_extra(self) -> dict[str, Any]:
        """Flatten for structured logging."""
        return {
            "warning_code": self.code.value,
            "record_kind": self.record_kind,
            "record_id": self.record_id,
            "field": self.field,
            "raw_value": repr(self.raw_value) if self.raw_value is not None else None,
        }
