"""
Single-column sort engine for data grids.

The active sort is an immutable ``TableSortState`` (or ``None`` for "no
sort") that the caller passes back in on every call; nothing here keeps
state between calls.

Comparison is a closed set of rules over ``SortValueKind``:

- EMPTY (None / "") always goes last, whatever the direction
- NUMBER vs NUMBER compares numerically
- BOOLEAN vs BOOLEAN puts False before True
- anything else compares as text with Russian numeric-aware collation

Equal values keep their input order.
"""
from __future__ import annotations

import numbers
from dataclasses import dataclass
from decimal import Decimal
from functools import cmp_to_key
from typing import Any, Callable, Iterable, NamedTuple, Sequence

from ozonator.constants import SORT_TITLE_ASC, SORT_TITLE_DESC
from ozonator.enums import SortDirection, SortValueKind
from ozonator.utils.collation import CollationKey, ru_collation_key
from ozonator.utils.logger import get_logger
from ozonator.utils.performance import timed_operation
from ozonator.utils.values import get_field, is_empty_value, to_text

logger = get_logger("TableSort")


@dataclass(frozen=True)
class TableSortState:
    """The active sort directive: one column and a direction."""
    col_id: str
    direction: SortDirection = SortDirection.ASC


@dataclass(frozen=True)
class SortableColumn:
    """
    A grid column as seen by the sort engine.

    ``get_sort_value`` pulls the comparison value out of a row when the
    column id is not a plain field of the row.
    """
    id: str
    sortable: bool = True
    get_sort_value: Callable[[Any], Any] | None = None


class _SortCell(NamedTuple):
    kind: SortValueKind
    value: Any
    text_key: CollationKey


def toggle_sort(
    current: TableSortState | None,
    col_id: str,
    sortable: bool = True,
) -> TableSortState | None:
    """
    Next sort directive after the user picks ``col_id``.

    Args:
        current: Active directive or None
        col_id: Column the user interacted with
        sortable: Whether that column may be sorted at all

    Returns:
        ``current`` untouched for an unsortable column, the flipped
        directive for the same column, or ascending for a new column.
    """
    if not sortable:
        return current
    if current is not None and current.col_id == col_id:
        flipped = (
            SortDirection.DESC
            if current.direction == SortDirection.ASC
            else SortDirection.ASC
        )
        return TableSortState(col_id=col_id, direction=flipped)
    return TableSortState(col_id=col_id, direction=SortDirection.ASC)


def get_sort_button_title(is_sorted: bool, direction: SortDirection | str | None = None) -> str:
    """Tooltip of a header sort button, describing what the next click does."""
    if is_sorted and direction == SortDirection.ASC:
        return SORT_TITLE_DESC
    return SORT_TITLE_ASC


def classify_sort_value(value: Any) -> SortValueKind:
    if is_empty_value(value):
        return SortValueKind.EMPTY
    # bool is an int subclass, check it first
    if isinstance(value, bool):
        return SortValueKind.BOOLEAN
    if isinstance(value, Decimal):
        return SortValueKind.TEXT if value.is_nan() else SortValueKind.NUMBER
    if isinstance(value, numbers.Real):
        # NaN is unordered against every number, compare it as text
        return SortValueKind.TEXT if value != value else SortValueKind.NUMBER
    return SortValueKind.TEXT


def _three_way(left: Any, right: Any) -> int:
    return (left > right) - (left < right)


def _prepare_cell(value: Any) -> _SortCell:
    kind = classify_sort_value(value)
    if kind is SortValueKind.EMPTY:
        return _SortCell(kind, value, ())
    return _SortCell(kind, value, ru_collation_key(to_text(value)))


def _compare_cells(left: _SortCell, right: _SortCell, direction: SortDirection | str) -> int:
    left_empty = left.kind is SortValueKind.EMPTY
    right_empty = right.kind is SortValueKind.EMPTY
    if left_empty or right_empty:
        if left_empty and right_empty:
            return 0
        return 1 if left_empty else -1

    if left.kind is SortValueKind.NUMBER and right.kind is SortValueKind.NUMBER:
        try:
            result = _three_way(left.value, right.value)
        except (TypeError, ArithmeticError):
            result = _three_way(left.text_key, right.text_key)
    elif left.kind is SortValueKind.BOOLEAN and right.kind is SortValueKind.BOOLEAN:
        result = int(left.value) - int(right.value)
    else:
        result = _three_way(left.text_key, right.text_key)

    return -result if direction == SortDirection.DESC else result


def compare_sort_values(left: Any, right: Any, direction: SortDirection | str = SortDirection.ASC) -> int:
    """
    Compare two raw sort values under ``direction``.

    Returns:
        Negative, zero or positive like a classic ``cmp``. Empty values are
        greater than any non-empty value in both directions.
    """
    return _compare_cells(_prepare_cell(left), _prepare_cell(right), direction)


def get_column_sort_value(row: Any, column: SortableColumn) -> Any:
    if callable(column.get_sort_value):
        return column.get_sort_value(row)
    value = get_field(row, str(column.id))
    return "" if value is None else value


def find_sort_column(
    columns: Iterable[SortableColumn],
    sort_state: TableSortState | None,
) -> SortableColumn | None:
    """The sortable column the directive points at, or None if it is inert."""
    if sort_state is None:
        return None
    column = next(
        (col for col in columns if str(col.id) == str(sort_state.col_id)),
        None,
    )
    if column is None or column.sortable is False:
        return None
    return column


@timed_operation("sort_rows")
def sort_rows(
    rows: Iterable[Any],
    columns: Sequence[SortableColumn],
    sort_state: TableSortState | None,
) -> list:
    """
    Return a new list with ``rows`` ordered by ``sort_state``.

    Args:
        rows: Row records (mappings or objects); never modified
        columns: Column descriptors of the grid
        sort_state: Active directive, or None to keep the input order

    Returns:
        A new list. Input order is kept when there is no directive or it
        references an unknown or unsortable column.
    """
    ordered = list(rows)
    column = find_sort_column(columns, sort_state)
    if column is None:
        if sort_state is not None:
            logger.debug("Sort on column %r ignored: unknown or unsortable", sort_state.col_id)
        return ordered

    direction = sort_state.direction
    entries = [
        (index, row, _prepare_cell(get_column_sort_value(row, column)))
        for index, row in enumerate(ordered)
    ]

    def _compare(left, right) -> int:
        compared = _compare_cells(left[2], right[2], direction)
        return compared or (left[0] - right[0])

    entries.sort(key=cmp_to_key(_compare))
    return [row for _, row, _ in entries]
