"""
Pytest fixtures for the party ledger test suite.

Provides:
- Structured logging configured once per session, LogContext cleared per test
- captured_logs: ledger_kernel log records as parsed JSON dicts
- In-memory SQLite engine and session for the persistence adapter
- Deterministic clock
"""

import json
import logging
from datetime import datetime, timezone
from io import StringIO

import pytest

from ledger_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from ledger_kernel.domain.clock import DeterministicClock
from ledger_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
import ledger_kernel.models  # noqa: F401  registers the tables


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture ledger_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            ...
            logs = captured_logs()
            assert any(r["message"] == "party_summary_built" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("ledger_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def sqlite_engine():
    """Fresh in-memory SQLite database with every ledger table."""
    engine = init_engine_from_url("sqlite:///:memory:")
    create_tables()
    yield engine
    drop_tables()
    reset_engine()


@pytest.fixture
def session(sqlite_engine):
    """Session bound to the in-memory database; rolled back after the test."""
    db_session = get_session()
    yield db_session
    db_session.rollback()
    db_session.close()


# =============================================================================
# Clock
# =============================================================================


@pytest.fixture
def deterministic_clock():
    """Clock fixed at 2024-06-30 12:00 UTC."""
    return DeterministicClock(datetime(2024, 6, 30, 12, 0, 0, tzinfo=timezone.utc))
