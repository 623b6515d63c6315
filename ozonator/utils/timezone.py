from __future__ import annotations

import datetime
from functools import lru_cache

try:
    from zoneinfo import ZoneInfo
except ImportError:  # pragma: no cover
    ZoneInfo = None  # type: ignore

from ozonator.constants import MOSCOW_TIME_ZONE, MOSCOW_UTC_OFFSET_HOURS
from ozonator.utils.logger import get_logger
from ozonator.utils.settings import get_display_timezone_name

logger = get_logger("Timezone")

MOSCOW_FIXED_TZ = datetime.timezone(
    datetime.timedelta(hours=MOSCOW_UTC_OFFSET_HOURS), name="MSK"
)


def is_valid_timezone(timezone: str | None) -> bool:
    tz_key = (timezone or "").strip()
    if not tz_key:
        return True
    if ZoneInfo is None:
        return True
    try:
        ZoneInfo(tz_key)
        return True
    except (KeyError, ValueError):
        return False


def resolve_timezone(timezone: str | None) -> datetime.tzinfo | None:
    """Zone for an IANA key, or None (system local) when empty/unknown."""
    tz_key = (timezone or "").strip()
    if not tz_key or ZoneInfo is None:
        return None
    try:
        return ZoneInfo(tz_key)
    except (KeyError, ValueError):
        return None


@lru_cache(maxsize=16)
def _display_timezone_for(name: str) -> datetime.tzinfo | None:
    # Cached per name: an unknown zone is reported once, not once per cell
    if not is_valid_timezone(name):
        logger.warning("Unknown OZONATOR_DISPLAY_TZ=%r, using system local time", name)
        return None
    return resolve_timezone(name)


def display_timezone() -> datetime.tzinfo | None:
    return _display_timezone_for(get_display_timezone_name())


def to_display_time(value: datetime.datetime) -> datetime.datetime:
    """
    Naive wall-clock time for rendering.

    Naive values are already local and are returned untouched; aware values
    are converted to the configured display zone (system local when unset).
    """
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        return value
    return value.astimezone(display_timezone()).replace(tzinfo=None)


def moscow_now() -> datetime.datetime:
    tz = resolve_timezone(MOSCOW_TIME_ZONE) or MOSCOW_FIXED_TZ
    return datetime.datetime.now(tz)


def moscow_today() -> datetime.date:
    return moscow_now().date()
