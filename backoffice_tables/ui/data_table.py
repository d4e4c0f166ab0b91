from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import Any

from backoffice_tables.application.bulk_delete import (
    BulkDeleteCoordinator,
    BulkDeleteOutcome,
    BulkDeleteOutcomeKind,
    ConfirmCallback,
)
from backoffice_tables.application.debounce import Debouncer, Sleeper
from backoffice_tables.application.filtering import FilterPredicate, FilterSpec, SearchKey
from backoffice_tables.application.pagination import PaginationState
from backoffice_tables.application.reducer import (
    AllToggled,
    BulkDeletePhaseChanged,
    DataReplaced,
    ExternalPaginationSynced,
    FilterChanged,
    NavigationTarget,
    Navigated,
    PageChanged,
    PageSizeChanged,
    RowToggled,
    SearchChanged,
    SearchDebounced,
    SelectionCleared,
    ServerSearchFailed,
    ServerSearchIssued,
    ServerSearchResolved,
    SortToggled,
    TableEvent,
    reduce,
)
from backoffice_tables.application.state.table_state import (
    BulkDeletePhase,
    EmptyState,
    TableSpec,
    TableState,
    TableView,
    derive_view,
)
from backoffice_tables.config import PAGE_SIZE_OPTIONS, TableConfig
from backoffice_tables.domain.models.entity import ALL_FILTER, BaseEntity, FilterOption, parse_entities
from backoffice_tables.domain.policies.row_presentation import resolve_row_presentation, row_action_availability
from backoffice_tables.exceptions import ConfigError
from backoffice_tables.infrastructure.errors.error_mapper import ErrorMapper
from backoffice_tables.infrastructure.logging.logger import get_logger, log_table_event
from backoffice_tables.ui.columns import ColumnDef, sort_accessors, sortable_keys
from backoffice_tables.ui.components.notification_center import NotificationCenter

ServerSearch = Callable[[str], Awaitable[Sequence[Any]]]
BulkDelete = Callable[[list[str]], Any]


class DataTable:
    """Stateful adapter around the pure table reducer.

    Owns one ``TableState`` plus the async collaborators (search debouncer, in-flight
    server searches, bulk delete coordinator) and forwards user intents to the caller's
    callbacks. ``render`` returns a plain view model for whatever draws the table.

    With ``server_search`` configured the adapter must be driven from a running event loop,
    since typing schedules the debounce timer on it.
    """

    def __init__(
        self,
        *,
        columns: Sequence[ColumnDef],
        data: Iterable[Any] = (),
        entity_model: type[BaseEntity] = BaseEntity,
        module: str = "table",
        title: str = "",
        new_item_label: str = "New",
        empty_state_message: str = "No records registered yet.",
        filtered_empty_state_message: str = "No records match the current search or filter.",
        no_search_results_message: str | None = None,
        search_keys: Sequence[SearchKey] = (),
        disable_search: bool = False,
        filter_options: Sequence[FilterOption] = (),
        filter_predicate: FilterPredicate | None = None,
        filter_field: str | None = None,
        all_filter_label: str = "All",
        default_filter_value: str | None = None,
        server_search: ServerSearch | None = None,
        bulk_delete: BulkDelete | None = None,
        confirm: ConfirmCallback | None = None,
        total_count: int | None = None,
        current_page: int | None = None,
        current_page_size: int | None = None,
        on_new_item: Callable[[], None] | None = None,
        on_edit_item: Callable[[BaseEntity], None] | None = None,
        on_page_change: Callable[[int], None] | None = None,
        on_page_size_change: Callable[[int], None] | None = None,
        on_filter_change: Callable[[str], None] | None = None,
        is_loading: bool = False,
        is_mutating: bool = False,
        config: TableConfig | None = None,
        sleeper: Sleeper | None = None,
        notifications: NotificationCenter | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        if bulk_delete is not None and confirm is None:
            raise ConfigError("bulk_delete requires a confirm callback")
        config = config or TableConfig()
        config.validate()

        self.columns = list(columns)
        self.entity_model = entity_model
        self.module = module
        self.title = title
        self.new_item_label = new_item_label
        self.empty_state_message = empty_state_message
        self.filtered_empty_state_message = filtered_empty_state_message
        self.no_search_results_message = no_search_results_message
        self.disable_search = disable_search
        self.filter_options = list(filter_options)
        self.all_filter_label = all_filter_label
        self.on_new_item = on_new_item
        self.on_edit_item = on_edit_item
        self.on_page_change = on_page_change
        self.on_page_size_change = on_page_size_change
        self.on_filter_change = on_filter_change
        self.is_loading = is_loading
        self.is_mutating = is_mutating
        self.notifications = notifications or NotificationCenter()
        self.logger = logger or get_logger("backoffice_tables.data_table")

        self._server_search = server_search
        self._bulk_delete = bulk_delete
        self._closed = False
        self._search_tasks: set[asyncio.Task[None]] = set()
        self._debouncer = Debouncer(self._on_search_debounced, wait_ms=config.search_debounce_ms, sleeper=sleeper)
        self._coordinator = BulkDeleteCoordinator(
            confirm=confirm or _never_confirm,
            notifications=self.notifications,
            on_clear_selection=lambda: self.dispatch(SelectionCleared()),
            on_phase_change=lambda phase: self.dispatch(BulkDeletePhaseChanged(phase)),
            module=module,
            logger=self.logger,
        )

        spec = TableSpec(
            filter=FilterSpec(search_keys=tuple(search_keys), predicate=filter_predicate, filter_field=filter_field),
            sort_accessors=sort_accessors(self.columns),
            sortable_columns=sortable_keys(self.columns),
            server_search_enabled=server_search is not None,
        )
        self.state = TableState(
            spec=spec,
            data=tuple(parse_entities(data, entity_model)),
            total_count=total_count,
            filter_value=default_filter_value or ALL_FILTER,
            pagination=PaginationState(
                page_index=current_page or 0,
                page_size=current_page_size or config.default_page_size,
            ),
        )

    def dispatch(self, event: TableEvent) -> TableState:
        self.state = reduce(self.state, event)
        return self.state

    def view(self) -> TableView:
        return derive_view(self.state)

    @property
    def mutating(self) -> bool:
        return self.is_mutating or self._coordinator.busy

    # data

    def replace_data(self, data: Iterable[Any], total_count: int | None = None) -> None:
        entities = tuple(parse_entities(data, self.entity_model))
        self.dispatch(DataReplaced(entities=entities, total_count=total_count))

    def sync_external_pagination(self, page_index: int | None = None, page_size: int | None = None) -> None:
        self.dispatch(ExternalPaginationSynced(page_index=page_index, page_size=page_size))

    # search and filter

    def set_search_text(self, text: str) -> None:
        if self.disable_search:
            return
        previous = self.state.search_text
        self._move_page(SearchChanged(text))
        if self._server_search is None or text == previous:
            return
        self._debouncer.push(text)

    def set_filter(self, value: str) -> None:
        if value == self.state.filter_value:
            return
        self._move_page(FilterChanged(value))
        log_table_event(self.logger, self.module, "filter", "changed", detail=value)
        if self.on_filter_change is not None:
            self.on_filter_change(value)

    def _on_search_debounced(self, text: str) -> None:
        self.dispatch(SearchDebounced(text))
        if self._closed or self._server_search is None or not text.strip():
            return
        self.dispatch(ServerSearchIssued(text))
        seq = self.state.server_search.issued_seq
        log_table_event(
            self.logger,
            self.module,
            "server_search",
            "issued",
            detail=f"seq={seq} query_length={len(text)}",
        )
        task = asyncio.get_running_loop().create_task(self._run_search(seq, text))
        self._search_tasks.add(task)
        task.add_done_callback(self._search_tasks.discard)

    async def _run_search(self, seq: int, query: str) -> None:
        try:
            raw = await self._server_search(query)
            results = tuple(parse_entities(raw or (), self.entity_model))
        except Exception as error:
            if self._is_stale(seq):
                log_table_event(self.logger, self.module, "server_search", "stale", detail=f"seq={seq}", level=logging.DEBUG)
                return
            payload = ErrorMapper.to_payload(error)
            self.dispatch(ServerSearchFailed(seq=seq, error=payload["reason"]))
            self.notifications.toast(
                level="warning",
                title="Search failed",
                message=f"{payload['message']} Showing the last available results.",
                trace_id=payload["trace_id"],
                details={"code": payload["code"], "suggestion": payload["suggestion"]},
            )
            log_table_event(
                self.logger,
                self.module,
                "server_search",
                "failure",
                trace_id=payload["trace_id"],
                detail=payload["code"],
                level=logging.WARNING,
            )
            return

        if self._is_stale(seq):
            log_table_event(self.logger, self.module, "server_search", "stale", detail=f"seq={seq}", level=logging.DEBUG)
            return
        self.dispatch(ServerSearchResolved(seq=seq, results=results))
        log_table_event(self.logger, self.module, "server_search", "success", count=len(results))

    def _is_stale(self, seq: int) -> bool:
        return self._closed or seq != self.state.server_search.issued_seq

    # sorting and pagination

    def toggle_sort(self, column: str) -> None:
        self.dispatch(SortToggled(column))

    def go_to_page(self, page_index: int) -> None:
        self._move_page(PageChanged(page_index))

    def navigate(self, target: NavigationTarget) -> None:
        self._move_page(Navigated(NavigationTarget(target)))

    def _move_page(self, event: TableEvent) -> None:
        previous = self.state.pagination.page_index
        self.dispatch(event)
        current = self.state.pagination.page_index
        if current != previous and self.on_page_change is not None:
            self.on_page_change(current)

    def set_page_size(self, page_size: int) -> None:
        self.dispatch(PageSizeChanged(page_size))
        if self.on_page_size_change is not None:
            self.on_page_size_change(page_size)

    # selection

    def toggle_row(self, index: int) -> None:
        self.dispatch(RowToggled(index))

    def toggle_all(self, indices: Sequence[int] | None = None) -> None:
        self.dispatch(AllToggled(tuple(indices) if indices is not None else None))

    def clear_selection(self) -> None:
        self.dispatch(SelectionCleared())

    def selected_ids(self) -> list[str]:
        return self.state.selection.ordered_ids(self.view().filtered)

    # row and toolbar actions

    def click_row(self, index: int) -> bool:
        rows = self.view().page_rows
        if not 0 <= index < len(rows):
            return False
        entity = rows[index]
        if not resolve_row_presentation(entity).clickable or self.on_edit_item is None:
            return False
        self.on_edit_item(entity)
        return True

    def new_item(self) -> bool:
        if self.mutating or self.on_new_item is None:
            return False
        self.on_new_item()
        return True

    async def bulk_delete(self) -> BulkDeleteOutcome:
        if self._bulk_delete is None:
            return BulkDeleteOutcome(BulkDeleteOutcomeKind.SKIPPED)
        return await self._coordinator.execute(self.selected_ids(), self._bulk_delete)

    async def delete_row(self, entity_id: str) -> BulkDeleteOutcome:
        if self._bulk_delete is None:
            return BulkDeleteOutcome(BulkDeleteOutcomeKind.SKIPPED)
        bulk_delete = self._bulk_delete
        return await self._coordinator.execute_one(entity_id, lambda target: bulk_delete([target]))

    # lifecycle

    async def wait_idle(self) -> None:
        await self._debouncer.wait()
        while self._search_tasks:
            await asyncio.gather(*list(self._search_tasks))

    def close(self) -> None:
        self._closed = True
        self._debouncer.cancel()

    # rendering

    def empty_state_text(self, kind: EmptyState) -> str | None:
        if kind is EmptyState.NONE:
            return None
        if kind is EmptyState.EMPTY:
            return self.empty_state_message
        if kind is EmptyState.NO_SEARCH_RESULTS and self.no_search_results_message is not None:
            return self.no_search_results_message
        return self.filtered_empty_state_message

    def render(self) -> dict[str, Any]:
        view = self.view()
        state = self.state
        rows = []
        mutating = self.mutating
        for entity in view.page_rows:
            presentation = resolve_row_presentation(entity)
            actions = row_action_availability(entity, is_mutating=mutating)
            rows.append(
                {
                    "id": entity.id,
                    "cells": {column.key: column.render(entity) for column in self.columns},
                    "style": presentation.style_tag.value,
                    "clickable": presentation.clickable,
                    "deleting": presentation.deleting,
                    "selected": state.selection.is_selected(entity),
                    "actions": {
                        "edit": actions.can_edit and self.on_edit_item is not None,
                        "delete": actions.can_delete and self._bulk_delete is not None,
                        "select": actions.can_select,
                    },
                }
            )

        selected = self.selected_ids()
        show_empty = not self.is_loading and not view.searching
        return {
            "title": self.title,
            "source": view.source,
            "new_item": {"label": self.new_item_label, "enabled": self.on_new_item is not None and not self.mutating},
            "search": {
                "enabled": not self.disable_search,
                "text": state.search_text,
                "searching": view.searching,
                "server": self._server_search is not None,
            },
            "filter": {
                "value": state.filter_value,
                "options": [{"value": ALL_FILTER, "label": self.all_filter_label}]
                + [{"value": option.value, "label": option.label} for option in self.filter_options],
            },
            "columns": [
                {
                    "key": column.key,
                    "label": column.label,
                    "sortable": column.sortable,
                    "sort": state.sort.direction.value if state.sort and state.sort.column == column.key else None,
                }
                for column in self.columns
            ],
            "rows": rows,
            "selection": {
                "count": len(selected),
                "all_selected": state.selection.all_selected(view.page_rows),
                "some_selected": state.selection.some_selected(view.page_rows),
            },
            "bulk_delete": {
                "available": self._bulk_delete is not None,
                "enabled": self._bulk_delete is not None and self._coordinator.trigger_enabled(selected),
                "phase": state.bulk_delete.value,
                "in_flight": state.bulk_delete is BulkDeletePhase.IN_FLIGHT,
            },
            "pagination": {**view.page.render(), "page_size_options": list(PAGE_SIZE_OPTIONS)},
            "empty_state": {"kind": view.empty_state.value, "message": self.empty_state_text(view.empty_state)}
            if show_empty and view.empty_state is not EmptyState.NONE
            else None,
            "loading": {"table": self.is_loading, "search": view.searching, "mutating": mutating},
        }


def _never_confirm(_ids: Sequence[str]) -> bool:
    return False
