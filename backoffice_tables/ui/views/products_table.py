from __future__ import annotations

from typing import Any

from backoffice_tables.domain.models.entity import FilterOption
from backoffice_tables.domain.models.records import Product
from backoffice_tables.infrastructure.http.api_client import BackofficeApiClient
from backoffice_tables.ui.columns import ColumnDef, badge_column, money_column, text_column, two_line_column
from backoffice_tables.ui.data_table import DataTable
from backoffice_tables.ui.views.preset import build_table

PRODUCT_TYPE_LABELS = {
    "equipment": "Equipment",
    "service": "Service",
}


def product_columns() -> list[ColumnDef]:
    return [
        two_line_column("name", "Name", primary=lambda p: p.name, secondary=lambda p: p.description),
        money_column("price", "Price"),
        text_column("category", "Category"),
        text_column("application", "Application"),
        badge_column("type", "Type", PRODUCT_TYPE_LABELS),
    ]


def products_table(api: BackofficeApiClient | None = None, **options: Any) -> DataTable:
    return build_table(
        resource="products",
        model=Product,
        columns=product_columns(),
        search_keys=("name", "description", "category", "application"),
        filter_options=[FilterOption(value=value, label=label) for value, label in PRODUCT_TYPE_LABELS.items()],
        filter_field="type",
        title="Products",
        new_item_label="New product",
        empty_state_message="No products registered yet.",
        filtered_empty_state_message="No products found.",
        supports_server_search=True,
        api=api,
        **options,
    )
