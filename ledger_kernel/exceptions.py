"""
Typed Exception Hierarchy for the Ledger Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers catch by type, never by message text.  Every exception carries a
machine-readable ``code`` class attribute and stores its context as
attributes, so it survives logging and serialization intact.

The reconciliation engines never raise for bad record data: malformed
amounts, dangling party references and ambiguous payment references are
reported as ``RecordWarning`` values (see ``ledger_kernel.domain.dtos``).
The exceptions below cover the layers around the engines: configuration,
snapshot loading, and caller mistakes such as asking for an unknown party.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    LedgerError (base)
    |
    +-- ConfigurationError
    |   +-- ConfigValidationError
    |
    +-- PartyError
    |   +-- PartyNotFoundError
    |
    +-- SnapshotError
        +-- SnapshotLoadError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Configuration   | CONFIG_VALIDATION_FAILED    | Settings YAML missing keys / bad values
----------------|-----------------------------|-----------------------------------------
Party           | PARTY_NOT_FOUND             | Summary requested for unknown party
----------------|-----------------------------|-----------------------------------------
Snapshot        | SNAPSHOT_LOAD_FAILED        | Backing store could not be read
"""


class LedgerError(Exception):
    """
    Base exception for all ledger errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "LEDGER_ERROR"


# Configuration exceptions


class ConfigurationError(LedgerError):
    """Base exception for configuration errors."""

    code: str = "CONFIGURATION_ERROR"


class ConfigValidationError(ConfigurationError):
    """Ledger settings failed validation."""

    code: str = "CONFIG_VALIDATION_FAILED"

    def __init__(self, errors: list[str], source: str | None = None):
        self.errors = tuple(errors)
        self.source = source
        where = f" ({source})" if source else ""
        super().__init__(
            f"Ledger settings validation failed{where}:\n"
            + "\n".join(f"  - {e}" for e in self.errors)
        )


# Party exceptions


class PartyError(LedgerError):
    """Base exception for party lookups."""

    code: str = "PARTY_ERROR"


class PartyNotFoundError(PartyError):
    """The requested party is not present in the snapshot."""

    code: str = "PARTY_NOT_FOUND"

    def __init__(self, party_type: str, party_id: str):
        self.party_type = party_type
        self.party_id = party_id
        super().__init__(f"No {party_type} with id {party_id!r} in snapshot")


# Snapshot exceptions


class SnapshotError(LedgerError):
    """Base exception for snapshot loading."""

    code: str = "SNAPSHOT_ERROR"


class SnapshotLoadError(SnapshotError):
    """The backing store could not be read into a snapshot."""

    code: str = "SNAPSHOT_LOAD_FAILED"

    def __init__(self, collection: str, reason: str):
        self.collection = collection
        self.reason = reason
        super().__init__(f"Failed to load {collection}: {reason}")
