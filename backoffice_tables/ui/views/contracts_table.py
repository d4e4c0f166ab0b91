from __future__ import annotations

from typing import Any

from backoffice_tables.domain.models.entity import FilterOption
from backoffice_tables.domain.models.records import Contract
from backoffice_tables.infrastructure.http.api_client import BackofficeApiClient
from backoffice_tables.ui.columns import ColumnDef, badge_column, date_column, text_column, two_line_column
from backoffice_tables.ui.data_table import DataTable
from backoffice_tables.ui.views.preset import build_table

CONTRACT_STATUS_LABELS = {
    "pending": "Pending",
    "signed": "Signed",
    "expired": "Expired",
    "cancelled": "Cancelled",
}


def contract_columns() -> list[ColumnDef]:
    return [
        two_line_column("title", "Title", primary=lambda c: c.title, secondary=lambda c: c.description),
        two_line_column(
            "client",
            "Client",
            primary=lambda c: c.client.name if c.client else None,
            secondary=lambda c: (c.client.email or c.client.phone) if c.client else None,
        ),
        badge_column("status", "Status", CONTRACT_STATUS_LABELS),
        text_column("document_url", "Document", sortable=False),
        date_column("signed_at", "Signed At"),
        date_column("expires_at", "Expires At"),
        date_column("created_at", "Created"),
    ]


def contracts_table(api: BackofficeApiClient | None = None, **options: Any) -> DataTable:
    return build_table(
        resource="contracts",
        model=Contract,
        columns=contract_columns(),
        search_keys=("title", "description"),
        filter_options=[FilterOption(value=value, label=label) for value, label in CONTRACT_STATUS_LABELS.items()],
        filter_field="status",
        title="Contracts",
        new_item_label="New contract",
        empty_state_message="No contracts registered yet.",
        filtered_empty_state_message="No contracts found.",
        supports_server_search=False,
        api=api,
        **options,
    )
