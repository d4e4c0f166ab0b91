from __future__ import annotations

from typing import Any

from backoffice_tables.domain.models.entity import FilterOption
from backoffice_tables.domain.models.records import Client
from backoffice_tables.infrastructure.http.api_client import BackofficeApiClient
from backoffice_tables.ui.columns import ColumnDef, badge_column, date_column, text_column, two_line_column
from backoffice_tables.ui.data_table import DataTable
from backoffice_tables.ui.views.preset import build_table

CLIENT_SOURCE_LABELS = {
    "manual": "Manual",
    "smart-link": "Smart link",
}


def client_columns() -> list[ColumnDef]:
    return [
        text_column("name", "Name"),
        two_line_column("email", "Contact", primary=lambda c: c.email, secondary=lambda c: c.phone),
        text_column("address", "Address", sortable=False),
        badge_column("source", "Source", CLIENT_SOURCE_LABELS),
        date_column("created_at", "Created"),
    ]


def clients_table(api: BackofficeApiClient | None = None, **options: Any) -> DataTable:
    return build_table(
        resource="clients",
        model=Client,
        columns=client_columns(),
        search_keys=("name", "email", "phone"),
        filter_options=[FilterOption(value=value, label=label) for value, label in CLIENT_SOURCE_LABELS.items()],
        filter_field="source",
        title="Clients",
        new_item_label="New client",
        empty_state_message="No clients registered yet.",
        filtered_empty_state_message="No clients found.",
        supports_server_search=True,
        api=api,
        **options,
    )
