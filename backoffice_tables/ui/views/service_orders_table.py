from __future__ import annotations

from typing import Any

from backoffice_tables.domain.models.entity import FilterOption
from backoffice_tables.domain.models.records import ServiceOrder
from backoffice_tables.infrastructure.http.api_client import BackofficeApiClient
from backoffice_tables.ui.columns import ColumnDef, badge_column, count_column, date_column, text_column, two_line_column
from backoffice_tables.ui.data_table import DataTable
from backoffice_tables.ui.views.preset import build_table

SERVICE_ORDER_STATUS_LABELS = {
    "pending": "Pending",
    "in_progress": "In progress",
    "completed": "Completed",
    "cancelled": "Cancelled",
}


def service_order_columns() -> list[ColumnDef]:
    return [
        two_line_column("number", "Number", primary=lambda o: o.number, secondary=lambda o: o.technical_notes),
        text_column("client", "Client", accessor=lambda o: o.client.name if o.client else None),
        badge_column("status", "Status", SERVICE_ORDER_STATUS_LABELS),
        date_column("scheduled_date", "Scheduled"),
        text_column("description", "Description", sortable=False),
        count_column("attachments", "Attachments", noun="file"),
    ]


def service_orders_table(api: BackofficeApiClient | None = None, **options: Any) -> DataTable:
    return build_table(
        resource="service-orders",
        model=ServiceOrder,
        columns=service_order_columns(),
        search_keys=("number", "description", "technical_notes"),
        filter_options=[
            FilterOption(value=value, label=label) for value, label in SERVICE_ORDER_STATUS_LABELS.items()
        ],
        filter_field="status",
        title="Service orders",
        new_item_label="New service order",
        empty_state_message="No service orders registered yet.",
        filtered_empty_state_message="No service orders found.",
        supports_server_search=False,
        api=api,
        **options,
    )
