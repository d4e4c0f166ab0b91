import asyncio

import pytest

from backoffice_tables.application.bulk_delete import BulkDeleteOutcomeKind
from backoffice_tables.application.reducer import NavigationTarget
from backoffice_tables.application.state.table_state import ServerSearchStatus
from backoffice_tables.config import TableConfig
from backoffice_tables.domain.models.entity import BaseEntity, FilterOption
from backoffice_tables.exceptions import APIError, ConfigError
from backoffice_tables.ui.columns import text_column
from backoffice_tables.ui.data_table import DataTable


async def _instant(_seconds: float) -> None:
    return None


async def _drain() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


def _rows(count: int, **extra) -> list[dict]:
    return [{"id": f"e{index}", "name": f"Record {index:02d}", "status": "open", **extra} for index in range(1, count + 1)]


class _SearchStub:
    """Server search whose answers are released by the test, one future per query."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self._futures: dict[str, asyncio.Future] = {}

    def _future(self, query: str) -> asyncio.Future:
        return self._futures.setdefault(query, asyncio.get_running_loop().create_future())

    async def __call__(self, query: str):
        self.calls.append(query)
        return await self._future(query)

    def resolve(self, query: str, rows: list[dict]) -> None:
        self._future(query).set_result(rows)

    def fail(self, query: str, error: Exception) -> None:
        self._future(query).set_exception(error)


class _DeleteStub:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[list[str]] = []

    async def __call__(self, ids: list[str]) -> None:
        self.calls.append(ids)
        if self.error is not None:
            raise self.error


def _table(**overrides) -> DataTable:
    options = {
        "columns": [text_column("name", "Name"), text_column("status", "Status")],
        "data": _rows(25),
        "search_keys": ("name",),
        "filter_options": [FilterOption(value="open", label="Open"), FilterOption(value="closed", label="Closed")],
        "filter_field": "status",
        "sleeper": _instant,
    }
    options.update(overrides)
    return DataTable(**options)


@pytest.mark.asyncio
async def test_typing_burst_issues_one_server_search_with_last_query() -> None:
    search = _SearchStub()
    table = _table(server_search=search)

    search.resolve("abc", [{"id": "s1", "name": "Server hit"}])
    for text in ("a", "ab", "abc"):
        table.set_search_text(text)
    await table.wait_idle()

    assert search.calls == ["abc"]
    assert [row["id"] for row in table.render()["rows"]] == ["s1"]
    assert table.render()["source"] == "server"


@pytest.mark.asyncio
async def test_stale_search_response_is_discarded() -> None:
    search = _SearchStub()
    table = _table(server_search=search)

    table.set_search_text("old")
    await _drain()
    table.set_search_text("new")
    await _drain()
    search.resolve("new", [{"id": "n1", "name": "New"}])
    await _drain()
    search.resolve("old", [{"id": "o1", "name": "Old"}])
    await table.wait_idle()

    assert search.calls == ["old", "new"]
    assert [row["id"] for row in table.render()["rows"]] == ["n1"]
    assert table.state.server_search.query == "new"


@pytest.mark.asyncio
async def test_local_rows_stay_visible_while_search_is_loading() -> None:
    search = _SearchStub()
    table = _table(server_search=search, data=_rows(3))

    table.set_search_text("zzz")
    await _drain()
    rendered = table.render()

    assert rendered["loading"]["search"] is True
    assert rendered["source"] == "local"
    assert len(rendered["rows"]) == 3
    assert rendered["empty_state"] is None

    search.resolve("zzz", [])
    await table.wait_idle()
    assert table.render()["empty_state"]["kind"] == "no_search_results"


@pytest.mark.asyncio
async def test_failed_search_keeps_last_results_and_warns() -> None:
    search = _SearchStub()
    table = _table(server_search=search)

    search.resolve("ab", [{"id": "s1", "name": "Hit"}])
    table.set_search_text("ab")
    await table.wait_idle()

    search.fail("abc", APIError(code="HTTP_ERROR", message="Failed to search clients", status_code=500))
    table.set_search_text("abc")
    await table.wait_idle()

    assert table.state.server_search.status is ServerSearchStatus.FAILED
    assert [row["id"] for row in table.render()["rows"]] == ["s1"]
    toast = table.notifications.latest()
    assert toast["level"] == "warning"
    assert toast["title"] == "Search failed"
    assert toast["details"]["code"] == "INTERNAL_ERROR"


@pytest.mark.asyncio
async def test_close_cancels_pending_debounce() -> None:
    search = _SearchStub()
    table = _table(server_search=search)

    table.set_search_text("draft")
    table.close()
    await _drain()

    assert search.calls == []


@pytest.mark.asyncio
async def test_bulk_delete_clears_selection_only_on_success() -> None:
    delete = _DeleteStub()
    table = _table(bulk_delete=delete, confirm=lambda ids: True)
    table.toggle_row(0)
    table.toggle_row(2)

    outcome = await table.bulk_delete()

    assert outcome.outcome is BulkDeleteOutcomeKind.SUCCESS
    assert delete.calls == [["e1", "e3"]]
    assert table.selected_ids() == []
    assert table.render()["bulk_delete"]["phase"] == "idle"

    failing = _DeleteStub(error=APIError(code="HTTP_ERROR", message="Failed to delete", status_code=500))
    broken = _table(bulk_delete=failing, confirm=lambda ids: True)
    broken.toggle_row(1)

    failed = await broken.bulk_delete()

    assert failed.outcome is BulkDeleteOutcomeKind.FAILURE
    assert broken.selected_ids() == ["e2"]
    assert broken.notifications.latest()["level"] == "error"


@pytest.mark.asyncio
async def test_declined_bulk_delete_never_calls_the_api() -> None:
    delete = _DeleteStub()
    table = _table(bulk_delete=delete, confirm=lambda ids: False)
    table.toggle_all()

    outcome = await table.bulk_delete()

    assert outcome.outcome is BulkDeleteOutcomeKind.CANCELLED
    assert delete.calls == []
    assert len(table.selected_ids()) == 10


@pytest.mark.asyncio
async def test_single_row_delete_goes_through_confirmation() -> None:
    delete = _DeleteStub()
    confirmed: list[list[str]] = []
    table = _table(bulk_delete=delete, confirm=lambda ids: confirmed.append(list(ids)) or True)

    outcome = await table.delete_row("e5")

    assert outcome.outcome is BulkDeleteOutcomeKind.SUCCESS
    assert confirmed == [["e5"]]
    assert delete.calls == [["e5"]]


def test_bulk_delete_requires_a_confirm_callback() -> None:
    with pytest.raises(ConfigError):
        _table(bulk_delete=_DeleteStub())


def test_click_on_deleting_row_does_not_edit() -> None:
    edited: list[BaseEntity] = []
    data = [
        {"id": "a", "name": "Alpha", "status": "open", "isOptimistic": True, "optimisticOperation": "delete"},
        {"id": "b", "name": "Beta", "status": "open"},
    ]
    table = _table(data=data, on_edit_item=edited.append)

    rows = table.render()["rows"]
    assert (rows[0]["style"], rows[0]["clickable"], rows[0]["deleting"]) == ("deleting", False, True)
    assert rows[0]["actions"] == {"edit": False, "delete": False, "select": True}
    assert rows[1]["actions"]["edit"] is True

    assert table.click_row(0) is False
    assert table.click_row(1) is True
    assert table.click_row(9) is False
    assert [entity.id for entity in edited] == ["b"]


def test_selection_survives_sort_and_clears_on_search() -> None:
    table = _table(data=_rows(5))
    table.toggle_row(0)

    table.toggle_sort("name")
    table.toggle_sort("name")

    rendered = table.render()
    assert rendered["columns"][0]["sort"] == "desc"
    assert rendered["rows"][-1]["id"] == "e1"
    assert rendered["rows"][-1]["selected"] is True

    table.set_search_text("Record 0")
    assert table.selected_ids() == []


def test_pagination_callbacks_fire_only_on_real_moves() -> None:
    pages: list[int] = []
    sizes: list[int] = []
    table = _table(on_page_change=pages.append, on_page_size_change=sizes.append)

    table.navigate(NavigationTarget.PREVIOUS)
    table.navigate(NavigationTarget.LAST)
    table.navigate(NavigationTarget.NEXT)
    table.go_to_page(1)

    assert pages == [2, 1]
    assert [row["id"] for row in table.render()["rows"]][0] == "e11"

    table.set_page_size(20)
    assert sizes == [20]
    assert table.state.pagination.page_index == 0
    assert table.render()["pagination"]["page_count"] == 2


def test_last_page_of_twenty_five_rows() -> None:
    table = _table()

    table.navigate(NavigationTarget.LAST)
    rendered = table.render()

    assert [row["id"] for row in rendered["rows"]] == ["e21", "e22", "e23", "e24", "e25"]
    assert rendered["pagination"]["page_count"] == 3
    assert rendered["pagination"]["can_next"] is False


def test_filter_change_notifies_and_resolves_empty_state() -> None:
    filters: list[str] = []
    table = _table(on_filter_change=filters.append, filtered_empty_state_message="Nothing here")

    table.set_filter("closed")
    table.set_filter("closed")
    rendered = table.render()

    assert filters == ["closed"]
    assert rendered["rows"] == []
    assert rendered["empty_state"] == {"kind": "filtered_empty", "message": "Nothing here"}
    assert [option["value"] for option in rendered["filter"]["options"]] == ["all", "open", "closed"]

    table.set_filter("all")
    assert filters == ["closed", "all"]


def test_empty_table_message_and_new_item_affordance() -> None:
    created: list[bool] = []
    table = _table(data=[], on_new_item=lambda: created.append(True), empty_state_message="No clients yet")

    rendered = table.render()
    assert rendered["empty_state"] == {"kind": "empty", "message": "No clients yet"}
    assert rendered["new_item"]["enabled"] is True
    assert table.new_item() is True

    table.is_mutating = True
    assert table.render()["new_item"]["enabled"] is False
    assert table.new_item() is False
    assert created == [True]


def test_server_pagination_uses_authoritative_total() -> None:
    table = _table(data=_rows(10), total_count=95, current_page=3, config=TableConfig(default_page_size=10))

    rendered = table.render()

    assert rendered["pagination"]["page_count"] == 10
    assert rendered["pagination"]["server_side"] is True
    assert len(rendered["rows"]) == 10

    table.replace_data(_rows(5), total_count=5)
    table.sync_external_pagination(page_index=0)
    assert table.render()["pagination"]["page_count"] == 1


def test_search_and_filter_reset_reports_page_zero_to_the_owner() -> None:
    pages: list[int] = []
    table = _table(data=_rows(10), total_count=100, current_page=3, on_page_change=pages.append)

    table.set_search_text("Record")
    assert table.state.pagination.page_index == 0
    assert pages == [0]

    table.set_search_text("Record 0")
    assert pages == [0]

    table.go_to_page(4)
    table.set_filter("closed")
    assert pages == [0, 4, 0]
    assert table.render()["pagination"]["page_index"] == 0


def test_default_filter_value_applies_from_the_start() -> None:
    filters: list[str] = []
    table = _table(default_filter_value="closed", on_filter_change=filters.append)

    rendered = table.render()
    assert rendered["filter"]["value"] == "closed"
    assert rendered["rows"] == []
    assert rendered["empty_state"]["kind"] == "filtered_empty"

    table.set_filter("open")
    assert filters == ["open"]
    assert len(table.render()["rows"]) == 10


def test_no_search_results_message_is_used_for_empty_searches() -> None:
    table = _table(no_search_results_message="No matching records", filtered_empty_state_message="Nothing here")

    table.set_search_text("zzz")
    assert table.render()["empty_state"] == {"kind": "no_search_results", "message": "No matching records"}

    fallback = _table(filtered_empty_state_message="Nothing here")
    fallback.set_search_text("zzz")
    assert fallback.render()["empty_state"]["message"] == "Nothing here"


def test_disabled_search_ignores_typing() -> None:
    table = _table(disable_search=True)

    table.set_search_text("Record 01")
    rendered = table.render()

    assert rendered["search"]["enabled"] is False
    assert rendered["search"]["text"] == ""
    assert len(rendered["rows"]) == 10


def test_server_search_needs_a_running_event_loop() -> None:
    table = _table(server_search=_SearchStub())

    with pytest.raises(RuntimeError):
        table.set_search_text("abc")
