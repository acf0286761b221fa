"""Read-only selectors over the ledger tables."""

from ledger_kernel.selectors.base import BaseSelector
from ledger_kernel.selectors.ledger_snapshot_selector import LedgerSnapshotSelector

__all__ = ["BaseSelector", "LedgerSnapshotSelector"]
