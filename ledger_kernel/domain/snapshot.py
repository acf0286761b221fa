"""
Snapshot -- Point-in-time view of the ledger collections.

Responsibility:
    Holds the four collections (parties, invoices, notes, payments) exactly
    as fetched from the store and slices them per party.  Every computation
    is a pure function of a snapshot; there is no ambient or cached state.

Architecture position:
    Kernel > Domain -- pure, zero I/O.

Invariants enforced:
    - Immutable: collections are tuples and the dataclass is frozen.
    - Record order is preserved exactly as supplied; engines rely on it for
      deterministic tie-breaks.
    - A transaction whose (party_type, party_id) names no party is never
      part of any ``PartyLedgerInput``; ``dangling_records()`` reports it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ledger_kernel.domain.dtos import RecordWarning, WarningCode
from ledger_kernel.domain.records import Invoice, Note, Party, PartyType, Payment


@dataclass(frozen=True)
class PartyLedgerInput:
    """Everything the engines need for one party."""

    party: Party
    invoices: tuple[Invoice, ...] = ()
    notes: tuple[Note, ...] = ()
    payments: tuple[Payment, ...] = ()


@dataclass(frozen=True)
class LedgerSnapshot:
    """Immutable snapshot of the four ledger collections."""

    parties: tuple[Party, ...] = ()
    invoices: tuple[Invoice, ...] = ()
    notes: tuple[Note, ...] = ()
    payments: tuple[Payment, ...] = ()
    snapshot_id: str | None = field(default=None, compare=False)

    def parties_of(self, party_type: PartyType) -> tuple[Party, ...]:
        return tuple(p for p in self.parties if p.party_type == party_type)

    def find_party(self, party_type: PartyType, party_id: str) -> Party | None:
        for party in self.parties:
            if party.party_type == party_type and party.id == party_id:
                return party
        return None

    def for_party(self, party: Party) -> PartyLedgerInput:
        key = party.key
        return PartyLedgerInput(
            party=party,
            invoices=tuple(i for i in self.invoices if i.party_key == key),
            notes=tuple(n for n in self.notes if n.party_key == key),
            payments=tuple(p for p in self.payments if p.party_key == key),
        )

    def dangling_records(
        self,
        party_type: PartyType | None = None,
    ) -> tuple[RecordWarning, ...]:
        """Warn about every transaction that references no known party.

        Restricted to ``party_type`` when given.  Payments to ``other``
        payees are not ledger transactions and are skipped silently.
        """
        known = {p.key for p in self.parties}
        warnings: list[RecordWarning] = []
        groups: tuple[tuple[str, tuple], ...] = (
            ("invoice", self.invoices),
            ("note", self.notes),
            ("payment", self.payments),
        )
        for kind, records in groups:
            for record in records:
                if record.party_type == PartyType.OTHER:
                    continue
                if party_type is not None and record.party_type != party_type:
                    continue
                if record.party_key not in known:
                    warnings.append(RecordWarning(
                        code=WarningCode.DANGLING_PARTY,
                        message=(
                            f"{kind} references unknown "
                            f"{record.party_type.value} {record.party_id!r}"
                        ),
                        record_kind=kind,
                        record_id=record.id,
                        field="party_id",
                        raw_value=record.party_id,
                    ))
        return tuple(warnings)
