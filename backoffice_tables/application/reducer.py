from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import Enum

from backoffice_tables.application.pagination import (
    change_page_size,
    first_page,
    goto_page,
    last_page,
    next_page,
    prev_page,
)
from backoffice_tables.application.selection import Selection
from backoffice_tables.application.sorting import toggle_sort
from backoffice_tables.application.state.table_state import (
    BulkDeletePhase,
    ServerSearchState,
    ServerSearchStatus,
    TableState,
    derive_view,
)
from backoffice_tables.domain.models.entity import BaseEntity


class NavigationTarget(str, Enum):
    FIRST = "first"
    PREVIOUS = "previous"
    NEXT = "next"
    LAST = "last"


@dataclass(frozen=True)
class DataReplaced:
    entities: tuple[BaseEntity, ...]
    total_count: int | None = None


@dataclass(frozen=True)
class SearchChanged:
    text: str


@dataclass(frozen=True)
class SearchDebounced:
    text: str


@dataclass(frozen=True)
class ServerSearchIssued:
    query: str


@dataclass(frozen=True)
class ServerSearchResolved:
    seq: int
    results: tuple[BaseEntity, ...]


@dataclass(frozen=True)
class ServerSearchFailed:
    seq: int
    error: str


@dataclass(frozen=True)
class FilterChanged:
    value: str


@dataclass(frozen=True)
class SortToggled:
    column: str


@dataclass(frozen=True)
class PageChanged:
    page_index: int


@dataclass(frozen=True)
class PageSizeChanged:
    page_size: int


@dataclass(frozen=True)
class Navigated:
    target: NavigationTarget


@dataclass(frozen=True)
class ExternalPaginationSynced:
    page_index: int | None = None
    page_size: int | None = None


@dataclass(frozen=True)
class RowToggled:
    index: int


@dataclass(frozen=True)
class AllToggled:
    indices: tuple[int, ...] | None = None


@dataclass(frozen=True)
class SelectionCleared:
    pass


@dataclass(frozen=True)
class BulkDeletePhaseChanged:
    phase: BulkDeletePhase


TableEvent = (
    DataReplaced
    | SearchChanged
    | SearchDebounced
    | ServerSearchIssued
    | ServerSearchResolved
    | ServerSearchFailed
    | FilterChanged
    | SortToggled
    | PageChanged
    | PageSizeChanged
    | Navigated
    | ExternalPaginationSynced
    | RowToggled
    | AllToggled
    | SelectionCleared
    | BulkDeletePhaseChanged
)


def reduce(state: TableState, event: TableEvent) -> TableState:
    if isinstance(event, DataReplaced):
        return _replace_data(state, event.entities, event.total_count)

    if isinstance(event, SearchChanged):
        if event.text == state.search_text:
            return state
        debounced = state.debounced_search if state.spec.server_search_enabled else event.text
        return replace(
            state,
            search_text=event.text,
            debounced_search=debounced,
            pagination=goto_page(state.pagination, 0),
            selection=Selection(),
        )

    if isinstance(event, SearchDebounced):
        if event.text.strip():
            return replace(state, debounced_search=event.text)
        # an emptied query supersedes whatever search is still in flight
        return replace(
            state,
            debounced_search=event.text,
            server_search=ServerSearchState(issued_seq=state.server_search.issued_seq + 1),
        )

    if isinstance(event, ServerSearchIssued):
        return replace(
            state,
            server_search=replace(
                state.server_search,
                status=ServerSearchStatus.LOADING,
                issued_seq=state.server_search.issued_seq + 1,
                query=event.query,
                error=None,
            ),
        )

    if isinstance(event, ServerSearchResolved):
        if event.seq != state.server_search.issued_seq:
            return state
        return replace(
            state,
            server_search=replace(
                state.server_search,
                status=ServerSearchStatus.READY,
                results=tuple(event.results),
                error=None,
            ),
        )

    if isinstance(event, ServerSearchFailed):
        if event.seq != state.server_search.issued_seq:
            return state
        return replace(
            state,
            server_search=replace(state.server_search, status=ServerSearchStatus.FAILED, error=event.error),
        )

    if isinstance(event, FilterChanged):
        if event.value == state.filter_value:
            return state
        return replace(
            state,
            filter_value=event.value,
            pagination=goto_page(state.pagination, 0),
            selection=Selection(),
        )

    if isinstance(event, SortToggled):
        if not state.spec.can_sort(event.column):
            return state
        return replace(state, sort=toggle_sort(state.sort, event.column))

    if isinstance(event, PageChanged):
        return replace(state, pagination=goto_page(state.pagination, event.page_index))

    if isinstance(event, PageSizeChanged):
        return replace(state, pagination=change_page_size(event.page_size))

    if isinstance(event, Navigated):
        info = derive_view(state).page
        move = {
            NavigationTarget.FIRST: first_page,
            NavigationTarget.PREVIOUS: prev_page,
            NavigationTarget.NEXT: next_page,
            NavigationTarget.LAST: last_page,
        }[event.target]
        return replace(state, pagination=move(state.pagination, info))

    if isinstance(event, ExternalPaginationSynced):
        return _sync_external_pagination(state, event)

    if isinstance(event, RowToggled):
        rows = derive_view(state).page_rows
        return replace(state, selection=state.selection.toggle_row(event.index, rows))

    if isinstance(event, AllToggled):
        rows = derive_view(state).page_rows
        indices: Sequence[int] = event.indices if event.indices is not None else range(len(rows))
        return replace(state, selection=state.selection.toggle_all(indices, rows))

    if isinstance(event, SelectionCleared):
        return replace(state, selection=state.selection.clear())

    if isinstance(event, BulkDeletePhaseChanged):
        return replace(state, bulk_delete=event.phase)

    raise TypeError(f"Unsupported table event: {event!r}")


def _replace_data(state: TableState, entities: tuple[BaseEntity, ...], total_count: int | None) -> TableState:
    if total_count is not None and total_count < 0:
        raise ValueError(f"total_count must be >= 0, got {total_count}")
    data = tuple(entities)
    known = data + (state.server_search.results or ())
    return replace(state, data=data, total_count=total_count, selection=state.selection.prune(known))


def _sync_external_pagination(state: TableState, event: ExternalPaginationSynced) -> TableState:
    current = state.pagination
    size_changed = event.page_size is not None and event.page_size != current.page_size
    index_changed = event.page_index is not None and event.page_index != current.page_index
    if not (size_changed or index_changed):
        return state
    pagination = replace(
        current,
        page_index=event.page_index if event.page_index is not None else current.page_index,
        page_size=event.page_size if event.page_size is not None else current.page_size,
    )
    return replace(state, pagination=pagination)
