"""
ledger_services -- orchestration over the ledger engines.

Services own the clock, the settings and the log context; the engines they
call stay pure.
"""

from ledger_services.party_ledger_service import PartyLedgerService

__all__ = ["PartyLedgerService"]
