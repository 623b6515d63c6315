"""
Product grid service.

Pure helpers behind the products / sales / returns / stocks grid:
default column sets, saved layout merging, cell texts, default ordering
and the quick-search filter. Rows are plain mappings as returned by the
data layer; none of these functions modify them.
"""
from __future__ import annotations

import datetime
import json
import re
import time
from collections.abc import Mapping
from dataclasses import dataclass, replace
from functools import cmp_to_key
from typing import Any, Callable, Iterable, Sequence

from pydantic import ValidationError

from ozonator.constants import (
    HIDDEN_TEXT,
    NO_BRAND_TEXT,
    NO_NAME_TEXT,
    NO_REASON_TEXT,
    OTHER_REASON_TEXT,
    PERSISTED_COLUMNS_LIMIT,
    SALES_SHIPMENT_FACT_TEXT,
    SHIPMENT_FUTURE_TOLERANCE_MS,
    VISIBILITY_REASON_ALIASES_RU,
    VISIBILITY_REASON_MAP_RU,
    VISIBLE_TEXT,
    WAREHOUSE_ID_TEMPLATE,
)
from ozonator.enums import DataSet, HiddenBucket
from ozonator.schemas.grid_schemas import PersistedColumnLayoutDTO
from ozonator.utils.collation import compare_text_ru
from ozonator.utils.dates import format_temporal_cell_ru, to_sort_timestamp
from ozonator.utils.logger import get_logger
from ozonator.utils.performance import timed_operation
from ozonator.utils.table_sort import SortableColumn
from ozonator.utils.values import get_field, is_empty_value, to_text

logger = get_logger("ProductsGrid")

_REASON_CODE_RE = re.compile(r"[a-z0-9_]+", re.IGNORECASE | re.ASCII)
_LETTER_RE = re.compile(r"[A-Za-zА-ЯЁа-яё]")
_CYRILLIC_RE = re.compile(r"[А-ЯЁа-яё]")


@dataclass(frozen=True)
class ColumnDef(SortableColumn):
    """A grid column with its header title and layout."""
    title: str = ""
    width: int = 120
    visible: bool = True
    hidden_bucket: HiddenBucket = HiddenBucket.MAIN


def _main_col(
    col_id: str,
    title: str,
    width: int,
    visible: bool = True,
    get_sort_value: Callable[[Any], Any] | None = None,
) -> ColumnDef:
    return ColumnDef(
        id=col_id,
        sortable=True,
        get_sort_value=get_sort_value,
        title=title,
        width=width,
        visible=visible,
        hidden_bucket=HiddenBucket.MAIN,
    )


def _stripped(row: Any, key: str) -> str:
    return to_text(get_field(row, key)).strip()


def _first_present(row: Any, *keys: str) -> Any:
    for key in keys:
        value = get_field(row, key)
        if value is not None:
            return value
    return ""


# =============================================================================
# CELL TEXTS
# =============================================================================

def visibility_text(row: Any) -> str:
    """``Виден`` / ``Скрыт`` from ``is_visible``, then from ``hidden_reasons``."""
    value = get_field(row, "is_visible")
    if value is True or (not isinstance(value, bool) and value == 1):
        return VISIBLE_TEXT
    if value is False or (not isinstance(value, bool) and value == 0):
        return HIDDEN_TEXT
    if _stripped(row, "hidden_reasons"):
        return HIDDEN_TEXT
    return VISIBLE_TEXT


def _map_reason(part: str) -> str:
    key = part.strip()
    if not key:
        return ""
    if key in VISIBILITY_REASON_ALIASES_RU:
        return VISIBILITY_REASON_ALIASES_RU[key]
    if key in VISIBILITY_REASON_MAP_RU:
        return VISIBILITY_REASON_MAP_RU[key]
    if _REASON_CODE_RE.fullmatch(key):
        return OTHER_REASON_TEXT
    return key


def _collect_reasons(value: Any, out: list[str]) -> None:
    if value is None:
        return
    if isinstance(value, (list, tuple)):
        for item in value:
            _collect_reasons(item, out)
        return
    if isinstance(value, Mapping):
        candidate = next(
            (value[k] for k in ("reason", "code", "value", "name") if value.get(k) is not None),
            None,
        )
        if candidate is not None:
            _collect_reasons(to_text(candidate), out)
        return
    for part in to_text(value).split(","):
        mapped = _map_reason(part)
        if mapped:
            out.append(mapped)


def visibility_reason_text(value: Any) -> str:
    """
    Russian text of the hide reasons reported for a product.

    Accepts a code, a comma-separated list, or a JSON payload (lists and
    objects with ``reason`` / ``code`` / ``value`` / ``name``). Unknown
    machine codes collapse to a generic label; duplicates are dropped.

    Returns:
        Comma-separated labels, or ``-`` when there is nothing to show
    """
    if is_empty_value(value):
        return NO_REASON_TEXT

    raw = value
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return NO_REASON_TEXT
        try:
            raw = json.loads(text)
        except ValueError:
            raw = text

    out: list[str] = []
    _collect_reasons(raw, out)
    unique = list(dict.fromkeys(out))
    return ", ".join(unique) if unique else NO_REASON_TEXT


def cell_text(row: Any, col_id: str) -> str:
    """Display text of one grid cell."""
    if col_id == "archived":
        return ""
    if col_id == "is_visible":
        return visibility_text(row)
    if col_id == "hidden_reasons":
        return visibility_reason_text(get_field(row, col_id))
    if col_id == "name":
        return _stripped(row, "name") or NO_NAME_TEXT
    if col_id == "brand":
        return _stripped(row, "brand") or NO_BRAND_TEXT
    return format_temporal_cell_ru(col_id, get_field(row, col_id))


@timed_operation("filter_rows")
def filter_rows(
    rows: Iterable[Any],
    columns: Sequence[ColumnDef],
    query: Any,
) -> list:
    """
    Quick search: rows whose visible cell texts contain ``query``.

    The match is a case-insensitive substring over the texts of the visible
    columns joined together; an empty query keeps every row.
    """
    needle = to_text(query).strip().lower()
    if not needle:
        return list(rows)
    visible_ids = [str(col.id) for col in columns if col.visible]
    matched = []
    for row in rows:
        haystack = " ".join(cell_text(row, col_id) for col_id in visible_ids).lower()
        if needle in haystack:
            matched.append(row)
    return matched


# =============================================================================
# COLUMN SETS
# =============================================================================

def _timestamp_sort_value(field: str) -> Callable[[Any], Any]:
    def _get(row: Any) -> Any:
        stamp = to_sort_timestamp(get_field(row, field))
        return "" if stamp is None else stamp
    return _get


def _photo_sort_value(row: Any) -> int:
    return 1 if _stripped(row, "photo_url") else 0


def _warehouse_sort_value(row: Any) -> str:
    name = _stripped(row, "warehouse_name")
    if name:
        return name
    warehouse_id = _stripped(row, "warehouse_id")
    return WAREHOUSE_ID_TEMPLATE.format(warehouse_id=warehouse_id) if warehouse_id else ""


def build_default_columns(dataset: DataSet | str) -> list[ColumnDef]:
    """
    Default column set of a dataset grid.

    Args:
        dataset: products, sales, returns or stocks

    Returns:
        Ordered list of ColumnDef, all in the main bucket
    """
    columns = [
        _main_col("offer_id", "Артикул", 160),
        _main_col("product_id", "ID", 110),
        _main_col("ozon_sku", "SKU Ozon", 150,
                  get_sort_value=lambda row: _first_present(row, "ozon_sku", "sku")),
        _main_col("seller_sku", "SKU продавца", 180,
                  get_sort_value=lambda row: _first_present(row, "seller_sku", "offer_id")),
        _main_col("fbo_sku", "SKU FBO", 150),
        _main_col("fbs_sku", "SKU FBS", 150),
        _main_col("photo_url", "Фото", 74, get_sort_value=_photo_sort_value),
        _main_col("name", "Наименование", 320),
        _main_col("brand", "Бренд", 180),
        _main_col("sku", "SKU", 140),
        _main_col("barcode", "Штрихкод", 170),
        _main_col("type", "Категория", 280),
        _main_col("is_visible", "Видимость", 140, get_sort_value=visibility_text),
        _main_col("hidden_reasons", "Причина скрытия", 320,
                  get_sort_value=lambda row: visibility_reason_text(get_field(row, "hidden_reasons"))),
        _main_col("created_at", "Создан", 180, get_sort_value=_timestamp_sort_value("created_at")),
    ]

    if dataset == DataSet.SALES:
        columns.extend([
            _main_col("in_process_at", "Принят в обработку", 180,
                      get_sort_value=_timestamp_sort_value("in_process_at")),
            _main_col("posting_number", "Номер отправления", 220),
            _main_col("related_postings", "Связанные отправления", 300),
            _main_col("delivery_model", "Метод доставки", 150),
            _main_col("shipment_date", "Дата отгрузки", 180,
                      get_sort_value=_timestamp_sort_value("shipment_date")),
            _main_col("status", "Статус", 180),
            _main_col("status_details", "Детали статуса", 260),
            _main_col("carrier_status_details", "Детали перевозчика по статусу", 320),
            _main_col("delivery_date", "Дата доставки", 180,
                      get_sort_value=_timestamp_sort_value("delivery_date")),
            _main_col("delivery_cluster", "Кластер доставки", 180),
        ])

    if dataset == DataSet.STOCKS:
        columns.extend([
            _main_col("warehouse_name", "Склад", 180, get_sort_value=_warehouse_sort_value),
            _main_col("placement_zone", "Зона размещения", 220,
                      get_sort_value=lambda row: _stripped(row, "placement_zone")),
        ])

    if dataset == DataSet.PRODUCTS:
        columns.append(
            _main_col("updated_at", "Обновлён", 180, visible=False,
                      get_sort_value=_timestamp_sort_value("updated_at"))
        )

    return columns


def normalize_persisted_columns(value: Any) -> list[PersistedColumnLayoutDTO]:
    """
    Validate a saved column layout.

    Broken entries and repeated ids are skipped; at most
    PERSISTED_COLUMNS_LIMIT entries are kept.
    """
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            logger.warning("Saved column layout is not valid JSON, using defaults")
            return []
    if not isinstance(value, (list, tuple)):
        return []

    out: list[PersistedColumnLayoutDTO] = []
    seen: set[str] = set()
    for raw in value:
        if not isinstance(raw, Mapping):
            continue
        try:
            entry = PersistedColumnLayoutDTO.model_validate(dict(raw))
        except ValidationError:
            continue
        if entry.id in seen:
            continue
        out.append(entry)
        seen.add(entry.id)
        if len(out) >= PERSISTED_COLUMNS_LIMIT:
            break
    return out


def merge_columns_with_defaults(dataset: DataSet | str, persisted: Any) -> list[ColumnDef]:
    """
    Apply a saved layout on top of the dataset defaults.

    Saved order, widths, visibility and buckets win; ids unknown to the
    dataset are dropped and default columns missing from the layout are
    appended in their default order.
    """
    defaults = build_default_columns(dataset)
    layout = normalize_persisted_columns(persisted)
    if not layout:
        return defaults

    defaults_by_id = {str(col.id): col for col in defaults}
    out: list[ColumnDef] = []
    used: set[str] = set()
    for entry in layout:
        default = defaults_by_id.get(entry.id)
        if default is None:
            continue
        out.append(replace(
            default,
            width=entry.w,
            visible=entry.visible,
            hidden_bucket=entry.hidden_bucket,
        ))
        used.add(entry.id)

    out.extend(col for col in defaults if str(col.id) not in used)
    return out


def serialize_column_layout(columns: Iterable[ColumnDef]) -> list[dict]:
    """Layout payload to persist: id, width, visibility and bucket only."""
    return [
        PersistedColumnLayoutDTO(
            id=str(col.id),
            w=col.width,
            visible=col.visible,
            hidden_bucket=col.hidden_bucket,
        ).to_dict()
        for col in columns
    ]


# =============================================================================
# DEFAULT ORDER
# =============================================================================

def _offer_id_sort_bucket(value: Any) -> int:
    text = to_text(value).strip()
    if not text:
        return 2
    letter = _LETTER_RE.search(text)
    first = letter.group() if letter else text[0]
    return 0 if _CYRILLIC_RE.fullmatch(first) else 1


def compare_offer_ids_ru_first(left: Any, right: Any) -> int:
    """Offer ids starting with a Cyrillic letter first, blanks last."""
    left_text = to_text(left).strip()
    right_text = to_text(right).strip()
    if not left_text or not right_text:
        if not left_text and not right_text:
            return 0
        return 1 if not left_text else -1

    bucket_diff = _offer_id_sort_bucket(left_text) - _offer_id_sort_bucket(right_text)
    if bucket_diff:
        return bucket_diff
    return compare_text_ru(left_text, right_text)


def _compare_newest_first(left: float | None, right: float | None) -> int:
    if left is None or right is None:
        if left is None and right is None:
            return 0
        return 1 if left is None else -1
    return (right > left) - (right < left)


def _compare_default(dataset: DataSet | str, left: Any, right: Any) -> int:
    if dataset == DataSet.SALES:
        return _compare_newest_first(
            to_sort_timestamp(get_field(left, "in_process_at")),
            to_sort_timestamp(get_field(right, "in_process_at")),
        )
    if dataset in (DataSet.PRODUCTS, DataSet.STOCKS):
        return compare_offer_ids_ru_first(get_field(left, "offer_id"), get_field(right, "offer_id"))
    return 0


@timed_operation("sort_rows_for_default_view")
def sort_rows_for_default_view(dataset: DataSet | str, rows: Iterable[Any]) -> list:
    """
    Order rows the way a dataset grid opens before the user sorts.

    Sales: newest ``in_process_at`` first. Products and stocks: offer ids,
    Cyrillic ones first. Returns keep the data layer order.
    """
    ordered = list(rows)
    if len(ordered) < 2 or dataset == DataSet.RETURNS:
        return ordered

    entries = list(enumerate(ordered))

    def _compare(left, right) -> int:
        compared = _compare_default(dataset, left[1], right[1])
        return compared or (left[0] - right[0])

    entries.sort(key=cmp_to_key(_compare))
    return [row for _, row in entries]


# =============================================================================
# SALES ROWS
# =============================================================================

def _has_confirmed_shipment_signal(row: Any) -> bool:
    if to_sort_timestamp(get_field(row, "delivery_date")) is not None:
        return True

    status_text = " | ".join(
        text
        for text in (
            _stripped(row, key).lower()
            for key in ("status", "status_details", "carrier_status_details")
        )
        if text
    )
    if not status_text:
        return False
    return any(marker in status_text for marker in SALES_SHIPMENT_FACT_TEXT)


def _normalize_shipment_date(row: Any, now_ms: float) -> str:
    raw = _stripped(row, "shipment_date")
    if not raw:
        return ""
    shipment_ms = to_sort_timestamp(raw)
    if shipment_ms is None:
        return ""
    if shipment_ms > now_ms + SHIPMENT_FUTURE_TOLERANCE_MS:
        return ""
    if not _has_confirmed_shipment_signal(row):
        return ""
    return raw


def sanitize_sales_rows(
    rows: Sequence[Mapping[str, Any]],
    now: datetime.datetime | None = None,
) -> list:
    """
    Hide shipment dates that are only planned.

    The marketplace fills ``shipment_date`` ahead of time; the grid shows it
    only once it is in the past and the posting has a delivery date or a
    shipped status. Changed rows are returned as new dicts, the rest as is.

    Args:
        rows: Sales rows
        now: Reference time (default: current time)
    """
    if not rows:
        return list(rows)
    now_ms = now.timestamp() * 1000 if now is not None else time.time() * 1000

    out = []
    for row in rows:
        next_shipment_date = _normalize_shipment_date(row, now_ms)
        if next_shipment_date == _stripped(row, "shipment_date"):
            out.append(row)
        else:
            out.append({**row, "shipment_date": next_shipment_date})
    return out
