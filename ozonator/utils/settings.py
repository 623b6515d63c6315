"""
Environment-driven settings for the grid presentation layer.

Values are read from the process environment (a local ``.env`` file is
loaded first). Every reader is tolerant: an invalid value is logged and
replaced by its default, so misconfiguration never breaks rendering.
"""
from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

from ozonator.constants import DEFAULT_UI_DATE_RANGE_DAYS

load_dotenv()

logger = logging.getLogger("Settings")

_TRUTHY = {"1", "true", "yes", "on"}


def get_environment() -> str:
    """Current runtime environment: ``"prod"`` or ``"dev"``."""
    env = (os.getenv("ENV") or "dev").strip().lower()
    if env in {"prod", "production"}:
        return "prod"
    return "dev"


def is_file_logging_enabled() -> bool:
    value = (os.getenv("LOG_TO_FILE") or "").strip().lower()
    return value in _TRUTHY


def get_display_timezone_name() -> str:
    """IANA zone used to show aware timestamps; empty means system local."""
    return (os.getenv("OZONATOR_DISPLAY_TZ") or "").strip()


def _read_float(var_name: str, default: float) -> float:
    raw = (os.getenv(var_name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using %s", var_name, raw, default)
        return default
    if value <= 0:
        logger.warning("Non-positive %s=%r, using %s", var_name, raw, default)
        return default
    return value


def get_default_date_range_days() -> int:
    raw = (os.getenv("OZONATOR_DATE_RANGE_DAYS") or "").strip()
    if not raw:
        return DEFAULT_UI_DATE_RANGE_DAYS
    try:
        days = int(raw)
    except ValueError:
        logger.warning(
            "Invalid OZONATOR_DATE_RANGE_DAYS=%r, using %s",
            raw,
            DEFAULT_UI_DATE_RANGE_DAYS,
        )
        return DEFAULT_UI_DATE_RANGE_DAYS
    return max(1, days)


def get_slow_operation_threshold() -> float:
    return _read_float("SLOW_GRID_OP_THRESHOLD", 0.5)


def get_critical_operation_threshold() -> float:
    return _read_float("CRITICAL_GRID_OP_THRESHOLD", 2.0)


def get_log_level_override() -> int | None:
    """Level from ``LOG_LEVEL`` (e.g. ``DEBUG``), None when unset or unknown."""
    raw = (os.getenv("LOG_LEVEL") or "").strip().upper()
    if not raw:
        return None
    level = logging.getLevelName(raw)
    if not isinstance(level, int):
        logger.warning("Unknown LOG_LEVEL=%r, using environment default", raw)
        return None
    return level
