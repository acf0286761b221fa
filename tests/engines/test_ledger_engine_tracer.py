"""Tests for the engine tracer."""

import logging
from datetime import date
from decimal import Decimal

import ledger_engines.tracer as tracer
from ledger_engines.tracer import compute_input_fingerprint, traced_engine
from ledger_kernel.domain.records import Party, PartyType


@traced_engine("sample", "9.9", fingerprint_fields=("amount", "party"))
def _sample(amount, party=None, as_of=None):
    return amount * 2


class TestFingerprint:

    def test_deterministic(self):
        party = Party(id="c-1", party_type=PartyType.CUSTOMER, name="A")
        args = {"amount": Decimal("1.50"), "party": party}

        assert compute_input_fingerprint(("amount", "party"), args) == \
            compute_input_fingerprint(("amount", "party"), dict(args))
        assert len(compute_input_fingerprint(("amount",), args)) == 16

    def test_differs_on_input(self):
        first = compute_input_fingerprint(("amount",), {"amount": Decimal("1")})
        second = compute_input_fingerprint(("amount",), {"amount": Decimal("2")})

        assert first != second

    def test_missing_field_is_null(self):
        assert compute_input_fingerprint(("x",), {}) == compute_input_fingerprint(("x",), {"x": None})


class TestTracedEngine:

    def test_result_passed_through(self):
        assert _sample(Decimal("2")) == Decimal("4")

    def test_trace_emitted_for_positional_and_keyword_calls(self, captured_logs):
        _sample(Decimal("2"), as_of=date(2024, 1, 1))
        _sample(amount=Decimal("2"))

        traces = [r for r in captured_logs() if r["message"] == "LEDGER_ENGINE_TRACE"]
        assert len(traces) == 2
        assert traces[0]["engine_name"] == "sample"
        assert traces[0]["engine_version"] == "9.9"
        assert traces[0]["input_fingerprint"] == traces[1]["input_fingerprint"]
        assert "duration_ms" in traces[0]


class TestTraceLevelGate:
    """Fingerprints are only computed when the trace will be logged."""

    def setup_method(self):
        self.root = logging.getLogger("ledger_kernel")
        self.previous_level = self.root.level

    def teardown_method(self):
        self.root.setLevel(self.previous_level)

    def _count_fingerprints(self, monkeypatch):
        calls = []

        def counting(fields, arguments):
            calls.append(fields)
            return compute_input_fingerprint(fields, arguments)

        monkeypatch.setattr(tracer, "compute_input_fingerprint", counting)
        return calls

    def test_no_fingerprint_at_info(self, monkeypatch):
        calls = self._count_fingerprints(monkeypatch)
        self.root.setLevel(logging.INFO)

        assert _sample(Decimal("3")) == Decimal("6")
        assert calls == []

    def test_fingerprint_at_debug(self, monkeypatch):
        calls = self._count_fingerprints(monkeypatch)
        self.root.setLevel(logging.DEBUG)

        _sample(Decimal("3"))

        assert calls == [("amount", "party")]
