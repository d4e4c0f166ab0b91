from datetime import datetime

from backoffice_tables.domain.models.entity import BaseEntity
from backoffice_tables.domain.models.records import Receipt, ReceiptStatus
from backoffice_tables.ui.columns import (
    EMPTY_VALUE,
    badge_column,
    count_column,
    date_column,
    money_column,
    normalize_value,
    sort_accessors,
    sortable_keys,
    text_column,
    two_line_column,
)


def test_missing_values_render_as_dash() -> None:
    assert normalize_value(None) == EMPTY_VALUE
    assert normalize_value("   ") == EMPTY_VALUE
    assert normalize_value(ReceiptStatus.PAID) == "paid"
    assert text_column("notes", "Notes").render(BaseEntity(id="1")) == EMPTY_VALUE


def test_money_badge_and_date_columns() -> None:
    receipt = Receipt(id="r1", number="R-1", status="overdue", total=1250.5, date=datetime(2024, 3, 9, 14, 30))

    assert money_column("total", "Total").render(receipt) == "R$ 1,250.50"
    assert badge_column("status", "Status", {"overdue": "Overdue"}).render(receipt) == "Overdue"
    assert badge_column("status", "Status", {}).render(receipt) == "overdue"
    assert date_column("date", "Date").render(receipt) == "2024-03-09"
    assert date_column("due_date", "Due").render(receipt) == EMPTY_VALUE


def test_two_line_and_count_columns() -> None:
    entity = BaseEntity(id="1", name="Ana", phone=None, attachments=[{"url": "a"}, {"url": "b"}])

    contact = two_line_column("name", "Contact", primary=lambda e: e.name, secondary=lambda e: e.phone)
    assert contact.render(entity) == "Ana\n-"
    assert contact.value(entity) == "Ana"

    files = count_column("attachments", "Attachments", noun="file")
    assert files.render(entity) == "2 files"
    assert files.render(BaseEntity(id="2", attachments=[])) == EMPTY_VALUE


def test_only_sortable_columns_expose_accessors() -> None:
    columns = [text_column("name", "Name"), text_column("address", "Address", sortable=False)]

    assert set(sort_accessors(columns)) == {"name"}
    assert sortable_keys(columns) == {"name"}
