"""
Date and time utilities for grid cells.

Classifies raw values as date-only, time-only, full timestamp or plain
text, and renders them in the Russian grid format:

- timestamp: ``05.03.24 14:30:00``
- date only: ``05.03.24.`` (trailing period tells it apart)
- time only: ``14:30:00``

Nothing here raises on bad input; unparseable values come back as their
original text.
"""
from __future__ import annotations

import datetime
import json
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from email.utils import parsedate_to_datetime
from typing import Any

from ozonator.constants import (
    DATE_INPUT_FORMAT,
    DATE_ONLY_PATTERN,
    DATE_RU_FORMAT,
    DATETIME_RU_FORMAT,
    TEMPORAL_COLUMN_SUFFIXES,
    TEMPORAL_COLUMN_TOKENS,
    ISO_DATETIME_PATTERN,
    TIME_ONLY_PATTERN,
    TIME_RU_FORMAT,
    TIMESTAMP_PREFIX_PATTERN,
)
from ozonator.enums import DateOnlyBoundary
from ozonator.schemas.grid_schemas import DateRangeDTO
from ozonator.utils.logger import get_logger
from ozonator.utils.settings import get_default_date_range_days
from ozonator.utils.timezone import moscow_today, to_display_time
from ozonator.utils.values import is_empty_value, to_text

logger = get_logger("Dates")

DATE_ONLY_RE = re.compile(DATE_ONLY_PATTERN)
TIME_ONLY_RE = re.compile(TIME_ONLY_PATTERN)
TIMESTAMP_PREFIX_RE = re.compile(TIMESTAMP_PREFIX_PATTERN, re.ASCII)
ISO_DATETIME_RE = re.compile(ISO_DATETIME_PATTERN)


@dataclass(frozen=True)
class TemporalColumnPolicy:
    """
    Naming contract that marks a column id as temporal.

    A column is temporal when its normalized id ends with one of
    ``suffixes`` or contains one of ``tokens`` delimited by ``_`` or the
    start/end of the id. ``"delivery_date"`` and ``"created_at"`` match,
    ``"update"`` and ``"timeline"`` do not.
    """
    suffixes: tuple[str, ...] = TEMPORAL_COLUMN_SUFFIXES
    tokens: tuple[str, ...] = TEMPORAL_COLUMN_TOKENS

    def matches(self, column_id: Any) -> bool:
        normalized = to_text(column_id).strip().lower()
        if not normalized:
            return False
        if any(suffix and normalized.endswith(suffix) for suffix in self.suffixes):
            return True
        tokens = [re.escape(token) for token in self.tokens if token]
        if not tokens:
            return False
        token_re = rf"(?:^|_)(?:{'|'.join(tokens)})(?:_|$)"
        return re.search(token_re, normalized) is not None


DEFAULT_TEMPORAL_POLICY = TemporalColumnPolicy()


def is_temporal_column_id(
    column_id: Any,
    policy: TemporalColumnPolicy = DEFAULT_TEMPORAL_POLICY,
) -> bool:
    """
    Check whether a column id follows the temporal naming contract.

    Args:
        column_id: Column identifier (any value, stringified)
        policy: Suffix/token lists to match against

    Returns:
        True for ids like ``created_at`` or ``shipment_date``
    """
    return policy.matches(column_id)


def looks_like_temporal_text(value: str) -> bool:
    """True for date-only, time-only or timestamp-shaped strings."""
    trimmed = value.strip()
    if not trimmed:
        return False
    if DATE_ONLY_RE.fullmatch(trimmed):
        return True
    if TIME_ONLY_RE.fullmatch(trimmed):
        return True
    return TIMESTAMP_PREFIX_RE.match(trimmed) is not None


def _apply_boundary(
    day: datetime.date,
    boundary: DateOnlyBoundary | str,
) -> datetime.datetime:
    if boundary == DateOnlyBoundary.END_OF_DAY:
        return datetime.datetime.combine(day, datetime.time(23, 59, 59, 999000))
    return datetime.datetime.combine(day, datetime.time())


def parse_date_only_local(
    value: str,
    boundary: DateOnlyBoundary | str = DateOnlyBoundary.KEEP,
) -> datetime.datetime | None:
    """
    Parse a bare ``YYYY-MM-DD`` string as a local calendar date.

    Args:
        value: The date string
        boundary: ``END_OF_DAY`` gives 23:59:59.999, otherwise midnight

    Returns:
        Naive local datetime, or None if the text is not a valid date
    """
    match = DATE_ONLY_RE.fullmatch(value.strip())
    if not match:
        return None
    try:
        day = datetime.date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None
    return _apply_boundary(day, boundary)


def _normalize_iso_text(value: str) -> str | None:
    """
    Canonical ``YYYY-MM-DDTHH:MM:SS[.ffffff][+HH:MM]`` form of an ISO-8601
    timestamp, or None when the text is not one.

    ``datetime.fromisoformat`` accepts more shapes on newer interpreters;
    feeding it only this form keeps parsing the same on every version.
    """
    match = ISO_DATETIME_RE.fullmatch(value)
    if not match:
        return None
    day, clock, seconds, fraction, utc, sign, offset_hours, offset_minutes = match.groups()
    text = f"{day}T{clock}:{seconds or '00'}"
    if fraction:
        text += "." + fraction[:6].ljust(6, "0")
    if utc:
        text += "+00:00"
    elif sign:
        text += f"{sign}{offset_hours}:{offset_minutes or '00'}"
    return text


def _parse_datetime_text(value: str) -> datetime.datetime | None:
    candidate = value.strip()
    if not candidate:
        return None
    iso_text = _normalize_iso_text(candidate)
    if iso_text is not None:
        try:
            return datetime.datetime.fromisoformat(iso_text)
        except ValueError:
            return None
    # RFC 2822, e.g. "Tue, 05 Mar 2024 14:30:00 GMT"
    try:
        return parsedate_to_datetime(candidate)
    except (TypeError, ValueError, IndexError, OverflowError):
        return None


def _from_epoch_ms(value: float | int | Decimal) -> datetime.datetime | None:
    try:
        seconds = float(value) / 1000
        return datetime.datetime.fromtimestamp(seconds, tz=datetime.timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def _coerce_datetime(
    value: Any,
    boundary: DateOnlyBoundary | str = DateOnlyBoundary.KEEP,
) -> datetime.datetime | None:
    if is_empty_value(value):
        return None
    if isinstance(value, datetime.datetime):
        return value
    if isinstance(value, datetime.date):
        return _apply_boundary(value, boundary)
    if isinstance(value, str):
        return parse_date_only_local(value, boundary) or _parse_datetime_text(value)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        return _from_epoch_ms(value)
    return None


def to_datetime(
    value: Any,
    boundary: DateOnlyBoundary | str = DateOnlyBoundary.KEEP,
) -> datetime.datetime | None:
    """
    Coerce a raw value to a naive wall-clock datetime.

    ``datetime`` values pass through (aware ones are shifted to the display
    zone), ``date`` values and date-only strings become local dates at the
    requested boundary, other strings go through ISO-8601 / RFC 2822
    parsing and numbers are epoch milliseconds.

    Returns:
        Naive datetime or None when the value is not a point in time
    """
    parsed = _coerce_datetime(value, boundary)
    if parsed is None:
        return None
    try:
        return to_display_time(parsed)
    except (OverflowError, OSError, ValueError):
        return None


def to_sort_timestamp(value: Any) -> float | None:
    """
    Epoch milliseconds of a temporal value, for ordering.

    Naive values are read as local time. Returns None for empty or
    unparseable input.
    """
    parsed = _coerce_datetime(value)
    if parsed is None:
        return None
    try:
        return parsed.timestamp() * 1000
    except (OverflowError, OSError, ValueError):
        return None


def _format_time_text(value: str) -> str:
    match = TIME_ONLY_RE.fullmatch(value.strip())
    if not match:
        return value
    hours, minutes, seconds = match.group(1), match.group(2), match.group(3) or "00"
    return f"{hours}:{minutes}:{seconds}"


def format_datetime_ru(
    value: Any,
    date_only_boundary: DateOnlyBoundary | str = DateOnlyBoundary.KEEP,
) -> str:
    """
    Render a value as ``DD.MM.YY HH:MM:SS``.

    Args:
        value: datetime, date, ISO/RFC 2822 string or epoch milliseconds
        date_only_boundary: How a bare date becomes a point in time

    Returns:
        Formatted string, ``""`` for empty input, or the original value as
        text when it cannot be parsed
    """
    if is_empty_value(value):
        return ""
    parsed = to_datetime(value, date_only_boundary)
    if parsed is None:
        logger.debug("Unparseable timestamp %r, rendered as text", value)
        return to_text(value)
    return parsed.strftime(DATETIME_RU_FORMAT)


def format_temporal_value_ru(
    value: Any,
    column_id: Any = None,
    policy: TemporalColumnPolicy = DEFAULT_TEMPORAL_POLICY,
) -> str:
    """
    Render a grid value according to its temporal shape.

    - time-only text or ``time`` values -> ``HH:MM:SS``
    - date-only text or ``date`` values -> ``DD.MM.YY.``
    - free text outside temporal columns is returned unchanged
    - anything else goes through :func:`format_datetime_ru`

    Args:
        value: Raw cell value
        column_id: Column the value belongs to, used as a fallback hint
        policy: Temporal column naming contract

    Returns:
        Display text; ``""`` only for empty input
    """
    if is_empty_value(value):
        return ""

    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return ""
        if TIME_ONLY_RE.fullmatch(raw):
            return _format_time_text(raw)
        if DATE_ONLY_RE.fullmatch(raw):
            parsed_date = parse_date_only_local(raw)
            return parsed_date.strftime(DATE_RU_FORMAT) if parsed_date else raw
        if not looks_like_temporal_text(raw) and not policy.matches(column_id):
            return value
    elif isinstance(value, datetime.time):
        return value.strftime(TIME_RU_FORMAT)
    elif isinstance(value, datetime.date) and not isinstance(value, datetime.datetime):
        return value.strftime(DATE_RU_FORMAT)
    elif not isinstance(value, datetime.datetime) and not policy.matches(column_id):
        return to_text(value)

    parsed = to_datetime(value)
    if parsed is None:
        logger.debug("Unparseable value %r in column %r, rendered as text", value, column_id)
        return to_text(value)
    return parsed.strftime(DATETIME_RU_FORMAT)


def format_temporal_cell_ru(
    column_id: Any,
    value: Any,
    policy: TemporalColumnPolicy = DEFAULT_TEMPORAL_POLICY,
) -> str:
    """
    Text of a grid cell.

    Only columns named as temporal get date formatting; in other columns
    date-looking text is shown as is.
    """
    if not policy.matches(column_id):
        if is_empty_value(value):
            return ""
        return to_text(value)
    return format_temporal_value_ru(value, column_id=column_id, policy=policy)


def sanitize_date_input(value: Any) -> str:
    """Return a trimmed ``YYYY-MM-DD`` string, or ``""`` for anything else."""
    raw = value.strip() if isinstance(value, str) else ""
    return raw if DATE_ONLY_RE.fullmatch(raw) else ""


def _coerce_days(days: Any, default: int) -> int:
    try:
        number = float(days)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number) or number == 0:
        number = default
    return max(1, int(number))


def get_default_date_range(
    days: Any = None,
    today: datetime.date | None = None,
) -> DateRangeDTO:
    """
    Default report period: the last ``days`` days, today included.

    Args:
        days: Window length (default: OZONATOR_DATE_RANGE_DAYS)
        today: Reference date (default: today in Moscow)

    Returns:
        DateRangeDTO with ISO dates
    """
    default_days = get_default_date_range_days()
    safe_days = _coerce_days(days, default_days) if days is not None else default_days
    end = today or moscow_today()
    start = end - datetime.timedelta(days=safe_days - 1)
    return DateRangeDTO(
        date_from=start.strftime(DATE_INPUT_FORMAT),
        date_to=end.strftime(DATE_INPUT_FORMAT),
    )


def parse_date_range(payload: Any) -> DateRangeDTO | None:
    """
    Validate a stored ``{"from": ..., "to": ...}`` range.

    Args:
        payload: Mapping or its JSON text

    Returns:
        DateRangeDTO with invalid ends blanked, or None when neither end is
        a valid date
    """
    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except ValueError:
            return None
    if not isinstance(payload, Mapping):
        return None
    date_from = sanitize_date_input(payload.get("from"))
    date_to = sanitize_date_input(payload.get("to"))
    if not date_from and not date_to:
        return None
    return DateRangeDTO(date_from=date_from, date_to=date_to)


def date_range_with_default(payload: Any, days: Any = None) -> DateRangeDTO:
    """Stored range when valid, otherwise the default one."""
    return parse_date_range(payload) or get_default_date_range(days)
