from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from backoffice_tables.application.filtering import SearchKey
from backoffice_tables.domain.models.entity import BaseEntity, FilterOption
from backoffice_tables.infrastructure.http.api_client import BackofficeApiClient
from backoffice_tables.ui.columns import ColumnDef
from backoffice_tables.ui.data_table import DataTable


def build_table(
    *,
    resource: str,
    model: type[BaseEntity],
    columns: Sequence[ColumnDef],
    search_keys: Sequence[SearchKey],
    filter_options: Sequence[FilterOption],
    filter_field: str,
    title: str,
    new_item_label: str,
    empty_state_message: str,
    filtered_empty_state_message: str,
    supports_server_search: bool,
    api: BackofficeApiClient | None = None,
    **options: Any,
) -> DataTable:
    """Wire a module table; an ``api`` client supplies the search and bulk delete delegates.

    Explicit ``server_search`` / ``bulk_delete`` options win over the api delegates.
    """
    if api is not None:
        if supports_server_search:
            options.setdefault("server_search", api.search_delegate(resource, model))
        options.setdefault("bulk_delete", api.bulk_delete_delegate(resource))
        options.setdefault("config", api.config)
    return DataTable(
        columns=columns,
        entity_model=model,
        module=resource,
        title=title,
        new_item_label=new_item_label,
        empty_state_message=empty_state_message,
        filtered_empty_state_message=filtered_empty_state_message,
        search_keys=search_keys,
        filter_options=filter_options,
        filter_field=filter_field,
        **options,
    )
