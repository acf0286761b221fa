"""
Module: ledger_engines.period_summary
Responsibility:
    Break a party's transaction timeline into twelve calendar months of one
    year: opening, increases, decreases, closing and transaction count per
    month.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  The year is always
    explicit; the engine never reads the clock.

Invariants enforced:
    - January's opening = opening balance + every transaction dated before
      the year.
    - Each month's opening equals the previous month's closing.
    - closing = opening + increases - decreases.
    - Transactions dated after the year, and undated transactions, are not
      counted.  Opening-balance rows in the timeline are ignored; the
      opening is passed explicitly.
"""

from __future__ import annotations

import calendar
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from ledger_engines.ledger_report import TransactionKind, TransactionRow
from ledger_engines.tracer import traced_engine
from ledger_kernel.domain.amounts import ZERO

ENGINE_VERSION = "1.0"


@dataclass(frozen=True)
class MonthSummary:
    month_key: str  # "2024-03"
    year: int
    month: int
    month_name: str
    opening: Decimal
    increases: Decimal
    decreases: Decimal
    closing: Decimal
    transaction_count: int


@traced_engine("period_summary", ENGINE_VERSION, fingerprint_fields=("opening", "timeline_rows", "year"))
def summarize_by_month(
    opening: Decimal,
    timeline_rows: Sequence[TransactionRow],
    year: int,
) -> tuple[MonthSummary, ...]:
    """Twelve month rows for ``year``, January first."""
    dated = [
        row for row in timeline_rows
        if row.kind != TransactionKind.OPENING_BALANCE and row.date is not None
    ]

    running = opening
    for row in dated:
        if row.date.year < year:
            running += row.signed_amount

    months: list[MonthSummary] = []
    for month in range(1, 13):
        in_month = [r for r in dated if r.date.year == year and r.date.month == month]
        increases = ZERO
        decreases = ZERO
        for row in in_month:
            if row.signed_amount >= ZERO:
                increases += row.signed_amount
            else:
                decreases -= row.signed_amount
        closing = running + increases - decreases
        months.append(MonthSummary(
            month_key=f"{year:04d}-{month:02d}",
            year=year,
            month=month,
            month_name=calendar.month_name[month],
            opening=running,
            increases=increases,
            decreases=decreases,
            closing=closing,
            transaction_count=len(in_month),
        ))
        running = closing

    return tuple(months)
