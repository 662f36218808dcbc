"""Wire value coercion.

Options usually arrive as query-string text, so every typed value goes
through one of these helpers. Each raises ``ValueError`` on bad input;
callers turn that into :class:`InvalidOptionError` with the option name.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import Any

from pagination_service.core.pagination.oracle import ColumnType

_TRUE = "true"
_FALSE = "false"


def is_blank(value: Any) -> bool:
    """None, empty/whitespace strings and empty containers count as absent."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return not value
    return False


def to_bool(value: Any) -> bool:
    """Coerce ``True``/``False`` or ``"true"``/``"false"`` (any case)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == _TRUE:
            return True
        if lowered == _FALSE:
            return False
    msg = f"not a boolean: {value!r}"
    raise ValueError(msg)


def to_int(value: Any) -> int:
    """Coerce integers, integral floats and base-10 integer strings."""
    if isinstance(value, bool):
        msg = f"not an integer: {value!r}"
        raise ValueError(msg)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        msg = f"not an integer: {value!r}"
        raise ValueError(msg)
    if isinstance(value, str):
        return int(value.strip(), 10)
    msg = f"not an integer: {value!r}"
    raise ValueError(msg)


def to_float(value: Any) -> float:
    if isinstance(value, bool):
        msg = f"not a number: {value!r}"
        raise ValueError(msg)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        return float(value.strip())
    msg = f"not a number: {value!r}"
    raise ValueError(msg)


def to_datetime(value: Any) -> datetime:
    """Parse ISO-8601 text into an aware UTC-normalized datetime.

    A trailing ``Z`` is accepted. Naive input is taken as UTC; dates
    become midnight UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        msg = f"not a datetime: {value!r}"
        raise ValueError(msg)

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def coerce_for_column(value: Any, column_type: ColumnType) -> Any:
    """Coerce one right-hand value to the Python type of a column."""
    if column_type is ColumnType.INTEGER:
        return to_int(value)
    if column_type is ColumnType.FLOAT:
        return to_float(value)
    if column_type is ColumnType.DATETIME:
        return to_datetime(value)
    if column_type is ColumnType.BOOLEAN:
        return to_bool(value)
    if column_type is ColumnType.STRING and not isinstance(value, str):
        return str(value)
    return value


__all__ = [
    "coerce_for_column",
    "is_blank",
    "to_bool",
    "to_datetime",
    "to_float",
    "to_int",
]
