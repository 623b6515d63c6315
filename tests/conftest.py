import pytest

from ozonator.utils.table_sort import SortableColumn


@pytest.fixture(autouse=True)
def display_tz_utc(monkeypatch):
    # Aware timestamps render in a fixed zone regardless of the host
    monkeypatch.setenv("OZONATOR_DISPLAY_TZ", "UTC")


@pytest.fixture
def product_rows():
    return [
        {"offer_id": "A-1", "name": "Item 10", "price": 300, "in_stock": True},
        {"offer_id": "A-2", "name": "Item 2", "price": None, "in_stock": False},
        {"offer_id": "A-3", "name": "Item 1", "price": 100, "in_stock": True},
        {"offer_id": "A-4", "name": "", "price": 100},
        {"offer_id": "A-5", "name": "item 2", "price": 50, "in_stock": False},
    ]


@pytest.fixture
def product_columns():
    return [
        SortableColumn(id="offer_id"),
        SortableColumn(id="name"),
        SortableColumn(id="price"),
        SortableColumn(id="in_stock"),
        SortableColumn(id="photo", sortable=False),
        SortableColumn(
            id="name_length",
            get_sort_value=lambda row: len(row.get("name") or ""),
        ),
    ]


@pytest.fixture
def sales_row():
    def _factory(**overrides):
        row = {
            "offer_id": "Кружка-01",
            "posting_number": "0123-0001-1",
            "in_process_at": "2024-03-05T10:00:00Z",
            "shipment_date": "2024-03-06T09:00:00Z",
            "delivery_date": None,
            "status": "Доставляется",
            "status_details": "",
            "carrier_status_details": None,
        }
        row.update(overrides)
        return row

    return _factory
