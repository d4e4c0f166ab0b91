from __future__ import annotations

from typing import Any

from backoffice_tables.domain.models.entity import FilterOption
from backoffice_tables.domain.models.records import Receipt
from backoffice_tables.infrastructure.http.api_client import BackofficeApiClient
from backoffice_tables.ui.columns import ColumnDef, badge_column, date_column, money_column, text_column, two_line_column
from backoffice_tables.ui.data_table import DataTable
from backoffice_tables.ui.views.preset import build_table

RECEIPT_STATUS_LABELS = {
    "draft": "Draft",
    "issued": "Issued",
    "paid": "Paid",
    "overdue": "Overdue",
    "cancelled": "Cancelled",
}


def receipt_columns() -> list[ColumnDef]:
    return [
        text_column("number", "Number"),
        two_line_column(
            "client",
            "Client",
            primary=lambda r: r.client.name if r.client else None,
            secondary=lambda r: r.client.email if r.client else None,
        ),
        badge_column("status", "Status", RECEIPT_STATUS_LABELS),
        money_column("total", "Total"),
        date_column("date", "Date"),
        date_column("due_date", "Due date"),
    ]


def receipts_table(api: BackofficeApiClient | None = None, **options: Any) -> DataTable:
    return build_table(
        resource="receipts",
        model=Receipt,
        columns=receipt_columns(),
        search_keys=("number", "notes"),
        filter_options=[FilterOption(value=value, label=label) for value, label in RECEIPT_STATUS_LABELS.items()],
        filter_field="status",
        title="Receipts",
        new_item_label="New receipt",
        empty_state_message="No receipts registered yet.",
        filtered_empty_state_message="No receipts found.",
        supports_server_search=True,
        api=api,
        **options,
    )
