"""
Tests for ledger settings loading and validation.

Covers the packaged defaults, overlay files, validation errors and the
LEDGER_CONFIG_TRACE audit log.
"""

import pytest
import yaml

from ledger_config import DEFAULT_SETTINGS_PATH, get_active_settings
from ledger_config.loader import compute_checksum, load_yaml_file, parse_settings
from ledger_kernel.exceptions import ConfigValidationError


def _valid_data(**overrides):
    data = {
        "version": 1,
        "currency": "INR",
        "display_decimal_places": 2,
        "paid_status_hints": ["paid"],
        "overdue_status_hints": ["overdue"],
        "log_level": "INFO",
    }
    data.update(overrides)
    return data


def _write_yaml(path, data):
    path.write_text(yaml.safe_dump(data))
    return path


class TestDefaults:

    def test_packaged_defaults_load(self):
        settings = get_active_settings()

        assert settings.version == 1
        assert settings.currency == "INR"
        assert settings.display_decimal_places == 2
        assert settings.paid_status_hints == ("paid",)
        assert settings.overdue_status_hints == ("overdue",)
        assert settings.log_level == "INFO"
        assert len(settings.checksum) == 64

    def test_checksum_matches_source_data(self):
        settings = get_active_settings()

        assert settings.checksum == compute_checksum(load_yaml_file(DEFAULT_SETTINGS_PATH))

    def test_config_trace_logged(self, captured_logs):
        get_active_settings()

        traces = [r for r in captured_logs() if r["message"] == "LEDGER_CONFIG_TRACE"]
        assert len(traces) == 1
        assert traces[0]["source"] == str(DEFAULT_SETTINGS_PATH)
        assert traces[0]["version"] == 1


class TestOverlay:

    def test_file_overrides_defaults(self, tmp_path):
        path = _write_yaml(tmp_path / "ledger.yaml", {
            "display_decimal_places": 0,
            "paid_status_hints": ["Paid", " settled "],
        })

        settings = get_active_settings(path)

        assert settings.display_decimal_places == 0
        assert settings.paid_status_hints == ("paid", "settled")
        assert settings.currency == "INR"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_settings(tmp_path / "absent.yaml")

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigValidationError) as exc_info:
            get_active_settings(path)
        assert exc_info.value.source == str(path)

    def test_empty_file_keeps_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert get_active_settings(path).display_decimal_places == 2


class TestValidation:

    def test_valid_data(self):
        settings = parse_settings(_valid_data(currency=" usd ", log_level="debug"))

        assert settings.currency == "USD"
        assert settings.log_level == "DEBUG"

    def test_missing_key(self):
        data = _valid_data()
        del data["currency"]

        with pytest.raises(ConfigValidationError) as exc_info:
            parse_settings(data)
        assert "missing required key: currency" in exc_info.value.errors

    def test_unknown_key(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            parse_settings(_valid_data(rounding="bankers"))
        assert "unknown key: rounding" in exc_info.value.errors

    @pytest.mark.parametrize("overrides", [
        {"version": 0},
        {"version": True},
        {"currency": "RUPEE"},
        {"display_decimal_places": 9},
        {"display_decimal_places": "2"},
        {"paid_status_hints": "paid"},
        {"overdue_status_hints": [""]},
        {"log_level": "LOUD"},
    ])
    def test_invalid_values(self, overrides):
        with pytest.raises(ConfigValidationError):
            parse_settings(_valid_data(**overrides))

    def test_overlapping_hints(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            parse_settings(_valid_data(overdue_status_hints=["Paid"]))
        assert any("both paid and overdue" in e for e in exc_info.value.errors)

    def test_all_errors_reported_together(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            parse_settings(_valid_data(version=-1, currency="X"), source="inline")
        assert len(exc_info.value.errors) == 2
        assert exc_info.value.code == "CONFIG_VALIDATION_FAILED"
        assert "(inline)" in str(exc_info.value)
