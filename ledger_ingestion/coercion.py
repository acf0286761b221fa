"""
Field coercion for raw document-store values (``ledger_ingestion.coercion``).

Documents arrive with numbers stored as numbers or strings, dates as ISO
strings or exported timestamps, and enums as free text.  Each coercer is a
pure function returning a ``CoercionResult``: the value to use, plus a
``RecordWarning`` when the raw value was unusable.  A bad field never fails
the record; it falls back to zero, None or the default, the way the
document screens always read ``parseFloat(x) || 0``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from ledger_kernel.domain.amounts import ZERO
from ledger_kernel.domain.dtos import RecordWarning, WarningCode

# Leading numeric prefix, as a lenient float parser would accept it.
_NUMERIC_PREFIX = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")

_DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y", "%Y/%m/%d")


@dataclass(frozen=True)
class CoercionResult:
    """Coerced value with the warning raised while coercing, if any."""

    value: Any = None
    warning: RecordWarning | None = None

    @property
    def success(self) -> bool:
        return self.warning is None


def _warning(
    code: WarningCode,
    message: str,
    record_kind: str,
    record_id: str,
    field: str,
    raw: Any,
) -> RecordWarning:
    return RecordWarning(
        code=code,
        message=message,
        record_kind=record_kind,
        record_id=record_id,
        field=field,
        raw_value=raw,
    )


def coerce_amount(raw: Any, record_kind: str, record_id: str, field: str) -> CoercionResult:
    """Coerce a monetary field to Decimal.

    Missing values are zero without a warning.  Strings may carry thousands
    separators.  A string with trailing garbage keeps its numeric prefix
    and is reported; anything else unusable becomes zero and is reported.
    """
    if raw is None:
        return CoercionResult(value=ZERO)
    if isinstance(raw, bool):
        return CoercionResult(value=ZERO, warning=_warning(
            WarningCode.MALFORMED_AMOUNT, f"{field} is a boolean", record_kind, record_id, field, raw,
        ))
    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, int):
        value = Decimal(raw)
    elif isinstance(raw, float):
        value = Decimal(repr(raw))
    elif isinstance(raw, str):
        text = raw.strip().replace(",", "")
        if not text:
            return CoercionResult(value=ZERO)
        try:
            value = Decimal(text)
        except InvalidOperation:
            prefix = _NUMERIC_PREFIX.match(text)
            fallback = Decimal(prefix.group(0)) if prefix else ZERO
            return CoercionResult(value=fallback, warning=_warning(
                WarningCode.MALFORMED_AMOUNT,
                f"{field} {raw!r} is not a number; using {fallback}",
                record_kind, record_id, field, raw,
            ))
    else:
        return CoercionResult(value=ZERO, warning=_warning(
            WarningCode.MALFORMED_AMOUNT,
            f"{field} has unsupported type {type(raw).__name__}",
            record_kind, record_id, field, raw,
        ))

    if not value.is_finite():
        return CoercionResult(value=ZERO, warning=_warning(
            WarningCode.MALFORMED_AMOUNT, f"{field} {raw!r} is not finite",
            record_kind, record_id, field, raw,
        ))
    return CoercionResult(value=value)


def coerce_date(raw: Any, record_kind: str, record_id: str, field: str) -> CoercionResult:
    """Coerce a date field.

    Accepts date/datetime objects, ISO dates or datetimes, day-first
    dates, and exported timestamps ``{"seconds": ...}``.  Missing values
    are None without a warning.
    """
    if raw is None:
        return CoercionResult(value=None)
    if isinstance(raw, datetime):
        return CoercionResult(value=raw.date())
    if isinstance(raw, date):
        return CoercionResult(value=raw)
    if isinstance(raw, dict) and "seconds" in raw:
        try:
            stamp = datetime.fromtimestamp(int(raw["seconds"]), tz=UTC)
        except (TypeError, ValueError, OverflowError, OSError):
            pass
        else:
            return CoercionResult(value=stamp.date())
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            return CoercionResult(value=None)
        try:
            return CoercionResult(value=datetime.fromisoformat(text.replace("Z", "+00:00")).date())
        except ValueError:
            pass
        for fmt in _DATE_FORMATS:
            try:
                return CoercionResult(value=datetime.strptime(text, fmt).date())
            except ValueError:
                continue

    return CoercionResult(value=None, warning=_warning(
        WarningCode.MALFORMED_DATE, f"{field} {raw!r} is not a date",
        record_kind, record_id, field, raw,
    ))


def coerce_text(raw: Any) -> str | None:
    """Trimmed string, or None when empty."""
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None


def coerce_enum(
    raw: Any,
    enum_cls: type[Enum],
    default: Enum,
    record_kind: str,
    record_id: str,
    field: str,
) -> CoercionResult:
    """Case-insensitive enum lookup by value; unknown values use ``default``."""
    text = coerce_text(raw)
    if text is None:
        return CoercionResult(value=default)
    for member in enum_cls:
        if str(member.value).lower() == text.lower():
            return CoercionResult(value=member)
    return CoercionResult(value=default, warning=_warning(
        WarningCode.UNKNOWN_ENUM_VALUE,
        f"{field} {raw!r} is not a known {enum_cls.__name__}; using {default.value}",
        record_kind, record_id, field, raw,
    ))
