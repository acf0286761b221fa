"""
Settings loader (``ledger_config.loader``).

Responsibility
--------------
Loads the settings YAML and parses it into a frozen ``LedgerSettings``.
This is build/test tooling; runtime callers go through
``ledger_config.get_active_settings()``.

Invariants enforced
-------------------
* Every key in ``SETTINGS_KEYS`` must be present; unknown keys are rejected.
* All validation problems are collected and raised together as one
  ``ConfigValidationError``.
* ``compute_checksum`` is a deterministic SHA-256 of the canonical JSON.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Invalid or missing values  -> ``ConfigValidationError``.
"""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Any

import yaml

from ledger_config.schema import SETTINGS_KEYS, LedgerSettings
from ledger_kernel.exceptions import ConfigValidationError

MAX_DECIMAL_PLACES = 6


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; an empty file yields an empty dict."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigValidationError(
            [f"top-level YAML value must be a mapping, got {type(data).__name__}"],
            source=str(path),
        )
    return data


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def _parse_hints(key: str, value: Any, errors: list[str]) -> tuple[str, ...]:
    if not isinstance(value, list):
        errors.append(f"{key}: expected a list of strings, got {value!r}")
        return ()
    hints: list[str] = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            errors.append(f"{key}: hints must be non-empty strings, got {item!r}")
            continue
        hints.append(item.strip().lower())
    return tuple(hints)


def parse_settings(data: dict[str, Any], source: str | None = None) -> LedgerSettings:
    """
    Validate a settings mapping and build ``LedgerSettings``.

    Raises:
        ConfigValidationError: listing every problem found.
    """
    errors: list[str] = []

    missing = [key for key in SETTINGS_KEYS if key not in data]
    errors.extend(f"missing required key: {key}" for key in missing)
    unknown = sorted(set(data) - set(SETTINGS_KEYS))
    errors.extend(f"unknown key: {key}" for key in unknown)
    if missing:
        raise ConfigValidationError(errors, source=source)

    version = data["version"]
    if not isinstance(version, int) or isinstance(version, bool) or version < 1:
        errors.append(f"version: expected a positive integer, got {version!r}")

    currency = data["currency"]
    if not isinstance(currency, str) or len(currency.strip()) != 3:
        errors.append(f"currency: expected a 3-letter code, got {currency!r}")

    places = data["display_decimal_places"]
    if (
        not isinstance(places, int)
        or isinstance(places, bool)
        or not 0 <= places <= MAX_DECIMAL_PLACES
    ):
        errors.append(
            f"display_decimal_places: expected an integer between 0 and "
            f"{MAX_DECIMAL_PLACES}, got {places!r}"
        )

    paid_hints = _parse_hints("paid_status_hints", data["paid_status_hints"], errors)
    overdue_hints = _parse_hints("overdue_status_hints", data["overdue_status_hints"], errors)
    overlap = sorted(set(paid_hints) & set(overdue_hints))
    if overlap:
        errors.append(f"status hints listed as both paid and overdue: {overlap}")

    log_level = data["log_level"]
    if not isinstance(log_level, str) or not isinstance(
        logging.getLevelName(log_level.upper()), int
    ):
        errors.append(f"log_level: unknown level {log_level!r}")

    if errors:
        raise ConfigValidationError(errors, source=source)

    return LedgerSettings(
        version=version,
        currency=currency.strip().upper(),
        display_decimal_places=places,
        paid_status_hints=paid_hints,
        overdue_status_hints=overdue_hints,
        log_level=log_level.upper(),
        checksum=compute_checksum(data),
    )


def load_settings(path: Path, base: dict[str, Any] | None = None) -> LedgerSettings:
    """
    Load settings from ``path``, overlaid on ``base`` when given.

    Keys present in the file replace the same keys of ``base``.
    """
    data = dict(base or {})
    data.update(load_yaml_file(path))
    return parse_settings(data, source=str(path))
