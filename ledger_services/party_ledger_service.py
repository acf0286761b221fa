"""
ledger_services.party_ledger_service -- Party statements and dashboard totals.

Responsibility:
    Wires a clock, ledger settings and a ``LedgerSnapshot`` into the pure
    engines: one party's summary, every party of a type, portfolio totals,
    monthly breakdowns and statement export rows.

Architecture position:
    Services -- orchestration over engines + kernel.  The only layer that
    reads the clock and the settings; engines receive "today" and the
    status hints as arguments.

Invariants enforced:
    - "Today" for overdue detection comes from the injected ``Clock``.
    - Records whose party is absent from the snapshot never reach a
      summary; they are logged once per run as DANGLING_PARTY warnings.
    - Every record warning is logged at WARNING level with the party bound
      in ``LogContext``.

Failure modes:
    - PartyNotFoundError: summary requested for a party not in the snapshot.
    - SnapshotLoadError: propagated from the selector in
      ``summarize_from_session``.

Usage:
    from ledger_services import PartyLedgerService

    service = PartyLedgerService(clock=DeterministicClock())
    summary = service.summarize_party(snapshot, PartyType.CUSTOMER, "c-1")
"""

from __future__ import annotations

import time
from typing import Any
from uuid import uuid4

from sqlalchemy.orm import Session

from ledger_config import LedgerSettings, get_active_settings
from ledger_engines.period_summary import MonthSummary, summarize_by_month
from ledger_engines.portfolio import PortfolioTotals, summarize_portfolio
from ledger_engines.summary import PartySummary, build_party_summary
from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.records import Party, PartyType
from ledger_kernel.domain.snapshot import LedgerSnapshot
from ledger_kernel.exceptions import PartyNotFoundError
from ledger_kernel.logging_config import LogContext, get_logger, set_log_level
from ledger_kernel.selectors.ledger_snapshot_selector import LedgerSnapshotSelector

logger = get_logger("services.party_ledger")


class PartyLedgerService:
    """
    Party ledger summaries over a snapshot.

    Contract:
        Read-only: nothing is written back to the snapshot or the store.
    Guarantees:
        - Two calls with the same snapshot and clock time return equal
          summaries.
    Non-goals:
        - Does not cache summaries between calls.
    """

    def __init__(
        self,
        settings: LedgerSettings | None = None,
        clock: Clock | None = None,
    ):
        self._settings = settings or get_active_settings()
        self._clock = clock or SystemClock()
        set_log_level(self._settings.log_level)

    @property
    def settings(self) -> LedgerSettings:
        return self._settings

    def _summarize(self, snapshot: LedgerSnapshot, party: Party) -> PartySummary:
        with LogContext.bind(party_type=party.party_type.value, party_id=party.id):
            summary = build_party_summary(
                snapshot.for_party(party),
                as_of_date=self._clock.today(),
                paid_status_hints=self._settings.paid_status_hints,
                overdue_status_hints=self._settings.overdue_status_hints,
            )
            for warning in summary.warnings:
                logger.warning("record_warning", extra=warning.as_log_extra())
        return summary

    def _log_dangling(self, snapshot: LedgerSnapshot, party_type: PartyType) -> None:
        for warning in snapshot.dangling_records(party_type):
            logger.warning("dangling_record_excluded", extra=warning.as_log_extra())

    def summarize_party(
        self,
        snapshot: LedgerSnapshot,
        party_type: PartyType,
        party_id: str,
    ) -> PartySummary:
        """Summary of one party.

        Raises:
            PartyNotFoundError: no such party in the snapshot.
        """
        party = snapshot.find_party(party_type, party_id)
        if party is None:
            logger.info("party_not_found", extra={
                "party_type": party_type.value,
                "party_id": party_id,
            })
            raise PartyNotFoundError(party_type.value, party_id)
        with LogContext.bind(snapshot_id=snapshot.snapshot_id):
            return self._summarize(snapshot, party)

    def summarize_parties(
        self,
        snapshot: LedgerSnapshot,
        party_type: PartyType,
    ) -> tuple[PartySummary, ...]:
        """Summaries for every named party of ``party_type``, by name."""
        t0 = time.monotonic()
        parties = sorted(
            (p for p in snapshot.parties_of(party_type) if p.name.strip()),
            key=lambda p: p.name.casefold(),
        )
        with LogContext.bind(correlation_id=str(uuid4()), snapshot_id=snapshot.snapshot_id):
            self._log_dangling(snapshot, party_type)
            summaries = tuple(self._summarize(snapshot, party) for party in parties)
            duration_ms = round((time.monotonic() - t0) * 1000, 2)
            logger.info("parties_summarized", extra={
                "party_type": party_type.value,
                "party_count": len(summaries),
                "duration_ms": duration_ms,
            })
        return summaries

    def portfolio(self, snapshot: LedgerSnapshot, party_type: PartyType) -> PortfolioTotals:
        """Dashboard totals across every named party of ``party_type``."""
        return summarize_portfolio(self.summarize_parties(snapshot, party_type))

    def monthly_summary(self, summary: PartySummary, year: int) -> tuple[MonthSummary, ...]:
        """Twelve-month breakdown of one party's timeline."""
        return summarize_by_month(summary.opening, summary.timeline_rows, year)

    def statement_rows(self, summary: PartySummary) -> list[dict[str, Any]]:
        """Timeline rows in export shape, rounded to the display precision."""
        places = self._settings.display_decimal_places
        return [row.as_export_row(places) for row in summary.timeline_rows]

    def summarize_from_session(
        self,
        session: Session,
        party_type: PartyType,
    ) -> tuple[PartySummary, ...]:
        """Load a snapshot through the selector and summarize every party."""
        snapshot = LedgerSnapshotSelector(session).load(party_type)
        return self.summarize_parties(snapshot, party_type)

