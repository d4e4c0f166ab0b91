from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from backoffice_tables.application.filtering import FilterSpec, filter_entities
from backoffice_tables.application.pagination import PageInfo, PaginationState, page_info, paginate
from backoffice_tables.application.selection import Selection
from backoffice_tables.application.sorting import SortSpec, sort_entities
from backoffice_tables.domain.models.entity import ALL_FILTER, BaseEntity


class ServerSearchStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class BulkDeletePhase(str, Enum):
    IDLE = "idle"
    CONFIRM_PENDING = "confirm_pending"
    CANCELLED = "cancelled"
    CONFIRMED = "confirmed"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class EmptyState(str, Enum):
    NONE = "none"
    NO_SEARCH_RESULTS = "no_search_results"
    FILTERED_EMPTY = "filtered_empty"
    EMPTY = "empty"


@dataclass(frozen=True)
class TableSpec:
    filter: FilterSpec = field(default_factory=FilterSpec)
    sort_accessors: Mapping[str, Callable[[BaseEntity], Any]] = field(default_factory=dict)
    sortable_columns: frozenset[str] | None = None
    server_search_enabled: bool = False

    def can_sort(self, column: str) -> bool:
        return self.sortable_columns is None or column in self.sortable_columns


@dataclass(frozen=True)
class ServerSearchState:
    status: ServerSearchStatus = ServerSearchStatus.IDLE
    issued_seq: int = 0
    query: str = ""
    results: tuple[BaseEntity, ...] | None = None
    error: str | None = None


@dataclass(frozen=True)
class TableState:
    spec: TableSpec = field(default_factory=TableSpec)
    data: tuple[BaseEntity, ...] = ()
    total_count: int | None = None
    search_text: str = ""
    debounced_search: str = ""
    filter_value: str = ALL_FILTER
    sort: SortSpec | None = None
    pagination: PaginationState = field(default_factory=PaginationState)
    selection: Selection = field(default_factory=Selection)
    server_search: ServerSearchState = field(default_factory=ServerSearchState)
    bulk_delete: BulkDeletePhase = BulkDeletePhase.IDLE


@dataclass(frozen=True)
class TableView:
    filtered: list[BaseEntity]
    page_rows: list[BaseEntity]
    page: PageInfo
    selected_ids: frozenset[str]
    source: str
    searching: bool
    empty_state: EmptyState


def base_collection(state: TableState) -> tuple[tuple[BaseEntity, ...], str]:
    search = state.server_search
    if state.spec.server_search_enabled and state.debounced_search.strip():
        if search.status is not ServerSearchStatus.LOADING and search.results is not None:
            return search.results, "server"
    return state.data, "local"


def resolve_empty_state(state: TableState, has_rows: bool) -> EmptyState:
    if has_rows:
        return EmptyState.NONE
    if state.search_text:
        return EmptyState.NO_SEARCH_RESULTS
    if state.filter_value != ALL_FILTER:
        return EmptyState.FILTERED_EMPTY
    return EmptyState.EMPTY


def derive_view(state: TableState) -> TableView:
    base, source = base_collection(state)
    filtered = filter_entities(
        base,
        query=state.search_text,
        filter_value=state.filter_value,
        spec=state.spec.filter,
        local_search=not state.spec.server_search_enabled,
    )
    accessor = state.spec.sort_accessors.get(state.sort.column) if state.sort else None
    ordered = sort_entities(filtered, state.sort, accessor)
    rows = paginate(ordered, state.pagination, state.total_count)
    return TableView(
        filtered=ordered,
        page_rows=rows,
        page=page_info(state.pagination, len(ordered), state.total_count),
        selected_ids=state.selection.selected_ids(ordered),
        source=source,
        searching=state.server_search.status is ServerSearchStatus.LOADING,
        empty_state=resolve_empty_state(state, bool(rows)),
    )
