"""
Centralized constants for the grid presentation layer.

Keeps the magic values of the data grid (patterns, limits, labels and
column defaults) in one place so they are easy to audit and change.
"""
from __future__ import annotations

# =============================================================================
# TEMPORAL SHAPES
# =============================================================================

# Bare calendar date as sent by the data layer
DATE_ONLY_PATTERN: str = r"^([0-9]{4})-([0-9]{2})-([0-9]{2})$"

# 24-hour clock time, optional seconds and fraction ("." or ",")
TIME_ONLY_PATTERN: str = r"^([01][0-9]|2[0-3]):([0-5][0-9])(?::([0-5][0-9])(?:[.,][0-9]+)?)?$"

# Date followed by a time separator (ISO "T" or whitespace)
TIMESTAMP_PREFIX_PATTERN: str = r"^[0-9]{4}-[0-9]{2}-[0-9]{2}[T\s]"

# Full ISO-8601 timestamp: date, clock time, optional fraction and offset
ISO_DATETIME_PATTERN: str = (
    r"^([0-9]{4}-[0-9]{2}-[0-9]{2})[Tt ]([0-9]{2}:[0-9]{2})(?::([0-9]{2})(?:[.,]([0-9]+))?)?"
    r"(?:([Zz])|([+-])([0-9]{2}):?([0-9]{2})?)?$"
)


# =============================================================================
# TEMPORAL COLUMN NAMING CONTRACT
# =============================================================================

# Column ids ending with one of these are temporal ("created_at")
TEMPORAL_COLUMN_SUFFIXES: tuple[str, ...] = ("_at",)

# Column ids containing one of these as an "_"-delimited token are temporal
# ("shipment_date", "date_from", "time")
TEMPORAL_COLUMN_TOKENS: tuple[str, ...] = ("date", "time")


# =============================================================================
# DISPLAY FORMATS
# =============================================================================

# Full timestamp: 05.03.24 14:30:00
DATETIME_RU_FORMAT: str = "%d.%m.%y %H:%M:%S"

# Pure date, trailing period distinguishes it from timestamps: 05.03.24.
DATE_RU_FORMAT: str = "%d.%m.%y."

# Time of day: 14:30:00
TIME_RU_FORMAT: str = "%H:%M:%S"

# Value of <input type="date">
DATE_INPUT_FORMAT: str = "%Y-%m-%d"


# =============================================================================
# DATE RANGE FILTER
# =============================================================================

# Days covered by the default report date range
DEFAULT_UI_DATE_RANGE_DAYS: int = 30

# Marketplace calendar used for "today"
MOSCOW_TIME_ZONE: str = "Europe/Moscow"

# Moscow has stayed on UTC+3 without DST since 2014
MOSCOW_UTC_OFFSET_HOURS: int = 3


# =============================================================================
# SORT BUTTON LABELS
# =============================================================================

SORT_TITLE_ASC: str = "Сортировка от А до Я"
SORT_TITLE_DESC: str = "Сортировка от Я до А"


# =============================================================================
# GRID COLUMN LAYOUT
# =============================================================================

# Minimum column width in pixels
COLUMN_MIN_WIDTH: int = 60

# Maximum column width in pixels
COLUMN_MAX_WIDTH: int = 2000

# Width used when a persisted layout carries no usable width
COLUMN_FALLBACK_WIDTH: int = 120

# Maximum number of entries accepted from a persisted layout
PERSISTED_COLUMNS_LIMIT: int = 200


# =============================================================================
# GRID CELL TEXTS
# =============================================================================

VISIBLE_TEXT: str = "Виден"
HIDDEN_TEXT: str = "Скрыт"
NO_NAME_TEXT: str = "Без названия"
NO_BRAND_TEXT: str = "Не указан"
NO_REASON_TEXT: str = "-"
OTHER_REASON_TEXT: str = "Другая причина скрытия"
WAREHOUSE_ID_TEMPLATE: str = "Склад #{warehouse_id}"

# Hide-reason codes reported by the marketplace
VISIBILITY_REASON_MAP_RU: dict[str, str] = {
    "double_without_merger_offer": "Дубль товара",
    "image_absent_with_shipment": "Нет фото в карточке товара",
    "image_absent": "Нет фото в карточке товара",
    "no_stock": "Нет остатков",
    "empty_stock": "Нет остатков",
    "archived": "Товар в архиве",
    "disabled_by_seller": "Скрыт продавцом",
    "blocked": "Заблокирован",
    "banned": "Заблокирован",
}

# Verbose Russian reasons shortened for the grid
VISIBILITY_REASON_ALIASES_RU: dict[str, str] = {
    "Нет изображения при наличии отгрузок": "Нет фото в карточке товара",
    "Дубль товара без объединения карточек": "Дубль товара",
}


# =============================================================================
# SALES SHIPMENT STATUS MARKERS
# =============================================================================

# Goods actually shipped
SALES_SHIPMENT_FACT_TEXT: tuple[str, ...] = (
    "отгружен",
    "отправлен продавцом",
    "передан в доставку",
    "передан в службу доставки",
    "забирает курьер",
    "в пути",
    "доставляется",
    "доставлен",
    "доставлен покупателю",
    "получен покупателем",
    "возвращается",
    "возвращён",
    "возвращен",
    "возврат",
)

# Clock skew tolerated before a shipment date counts as "future" (ms)
SHIPMENT_FUTURE_TOLERANCE_MS: int = 60_000

