"""
Utility modules for the Ozonator grid.

Pure functions behind grid sorting and temporal formatting.
"""
from ozonator.utils.values import (
    is_empty_value,
    to_text,
    get_field,
)
from ozonator.utils.collation import (
    ru_collation_key,
    compare_text_ru,
)
from ozonator.utils.table_sort import (
    TableSortState,
    SortableColumn,
    toggle_sort,
    sort_rows,
    compare_sort_values,
    get_sort_button_title,
)
from ozonator.utils.dates import (
    TemporalColumnPolicy,
    is_temporal_column_id,
    format_datetime_ru,
    format_temporal_value_ru,
    format_temporal_cell_ru,
    to_sort_timestamp,
    sanitize_date_input,
    get_default_date_range,
)

__all__ = [
    # values
    "is_empty_value",
    "to_text",
    "get_field",
    # collation
    "ru_collation_key",
    "compare_text_ru",
    # table_sort
    "TableSortState",
    "SortableColumn",
    "toggle_sort",
    "sort_rows",
    "compare_sort_values",
    "get_sort_button_title",
    # dates
    "TemporalColumnPolicy",
    "is_temporal_column_id",
    "format_datetime_ru",
    "format_temporal_value_ru",
    "format_temporal_cell_ru",
    "to_sort_timestamp",
    "sanitize_date_input",
    "get_default_date_range",
]
