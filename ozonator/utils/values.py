"""
Value coercion helpers shared by the sort engine and the formatters.

Pure functions: no state, no I/O.
"""
from __future__ import annotations

import datetime
import json
from collections.abc import Mapping
from decimal import Decimal
from typing import Any


def is_empty_value(value: Any) -> bool:
    """
    Check whether a cell value counts as "empty".

    Only ``None`` and the empty string are empty; ``0``, ``False`` and
    whitespace are real values.
    """
    return value is None or (isinstance(value, str) and value == "")


def to_text(value: Any) -> str:
    """
    Convert any cell value to its plain text form.

    Args:
        value: Raw field value

    Returns:
        ``""`` for None, the string itself for strings, ``"true"``/``"false"``
        for booleans, numbers without a spurious ``.0``, ISO text for dates
        and compact JSON for mappings and sequences.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, (int, Decimal)):
        return str(value)
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, (Mapping, list, tuple)):
        try:
            return json.dumps(
                value, ensure_ascii=False, separators=(",", ":"), default=str
            )
        except (TypeError, ValueError):
            return str(value)
    return str(value)


def get_field(row: Any, key: str) -> Any:
    """Read ``key`` from a mapping row or an attribute of an object row."""
    if isinstance(row, Mapping):
        return row.get(key)
    return getattr(row, key, None)
