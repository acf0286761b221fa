"""
ledger_config -- single public entrypoint for ledger settings.

Responsibility:
    Provides the ONLY way to obtain settings at runtime through
    ``get_active_settings()``.  Other packages never read settings files
    directly.

Architecture position:
    Configuration -- sits above ``ledger_kernel`` and below
    ``ledger_services``.  The kernel and the engines MUST NEVER import from
    ``ledger_config``; the service passes the values they need as
    arguments.

Failure modes:
    - ``FileNotFoundError`` -- the requested settings file does not exist.
    - ``ConfigValidationError`` -- missing keys or invalid values.

Audit relevance:
    Every successful call emits a ``LEDGER_CONFIG_TRACE`` log entry with the
    source path, version and checksum of the settings in force.
"""

from __future__ import annotations

from pathlib import Path

from ledger_config.loader import (
    compute_checksum,
    load_settings,
    load_yaml_file,
    parse_settings,
)
from ledger_config.schema import LedgerSettings
from ledger_kernel.logging_config import get_logger

_logger = get_logger("config")

DEFAULT_SETTINGS_PATH = Path(__file__).parent / "defaults.yaml"


def get_active_settings(config_path: Path | str | None = None) -> LedgerSettings:
    """The ONLY public settings entrypoint.

    Loads the packaged defaults and, when ``config_path`` is given, overlays
    that file on top of them.

    Non-goals:
        Settings are not cached; callers hold the returned value.
    """
    defaults = load_yaml_file(DEFAULT_SETTINGS_PATH)
    if config_path is None:
        source = str(DEFAULT_SETTINGS_PATH)
        settings = parse_settings(defaults, source=source)
    else:
        source = str(config_path)
        settings = load_settings(Path(config_path), base=defaults)

    _logger.info(
        "LEDGER_CONFIG_TRACE",
        extra={
            "trace_type": "LEDGER_CONFIG_TRACE",
            "source": source,
            "version": settings.version,
            "checksum": settings.checksum,
            "currency": settings.currency,
            "display_decimal_places": settings.display_decimal_places,
        },
    )
    return settings


__all__ = [
    "DEFAULT_SETTINGS_PATH",
    "LedgerSettings",
    "compute_checksum",
    "get_active_settings",
    "load_settings",
    "parse_settings",
]
