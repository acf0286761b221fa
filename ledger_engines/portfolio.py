"""
Module: ledger_engines.portfolio
Responsibility:
    Dashboard totals across many party summaries: how many parties are
    active, and the total outstanding, overdue and advance amounts.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from ledger_engines.summary import PartySummary
from ledger_kernel.domain.amounts import ZERO, sum_amounts


@dataclass(frozen=True)
class PortfolioTotals:
    party_count: int = 0
    active_count: int = 0
    total_outstanding: Decimal = ZERO
    overdue_outstanding: Decimal = ZERO
    total_advance: Decimal = ZERO


def summarize_portfolio(summaries: Sequence[PartySummary]) -> PortfolioTotals:
    """Aggregate party summaries into dashboard totals."""
    return PortfolioTotals(
        party_count=len(summaries),
        active_count=sum(1 for s in summaries if s.is_active),
        total_outstanding=sum_amounts(s.outstanding for s in summaries),
        overdue_outstanding=sum_amounts(s.overdue_outstanding for s in summaries),
        total_advance=sum_amounts(s.advance for s in summaries),
    )
