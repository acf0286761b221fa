"""
Ledger settings schema (``ledger_config.schema``).

Frozen dataclasses describing the parsed settings.  Parsing and validation
live in ``ledger_config.loader``; the only runtime entrypoint is
``ledger_config.get_active_settings()``.
"""

from __future__ import annotations

from dataclasses import dataclass

SETTINGS_KEYS: tuple[str, ...] = (
    "version",
    "currency",
    "display_decimal_places",
    "paid_status_hints",
    "overdue_status_hints",
    "log_level",
)


@dataclass(frozen=True)
class LedgerSettings:
    """
    Validated ledger settings.

    Guarantees:
        - Status hints are trimmed, lowercased and non-empty.
        - display_decimal_places is between 0 and 6.
        - checksum identifies the exact source data the settings came from.
    """

    version: int
    currency: str
    display_decimal_places: int
    paid_status_hints: tuple[str, ...]
    overdue_status_hints: tuple[str, ...]
    log_level: str
    checksum: str = ""
