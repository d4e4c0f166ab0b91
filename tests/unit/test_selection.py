from backoffice_tables.application.selection import Selection
from backoffice_tables.domain.models.entity import BaseEntity


def _rows(*ids: str) -> list[BaseEntity]:
    return [BaseEntity(id=entity_id) for entity_id in ids]


def test_toggle_row_selects_and_deselects_by_id() -> None:
    rows = _rows("a", "b", "c")

    selection = Selection().toggle_row(1, rows)
    assert selection.ids == {"b"}

    assert selection.toggle_row(1, rows).ids == frozenset()


def test_out_of_range_positions_are_ignored() -> None:
    rows = _rows("a")
    selection = Selection().toggle_row(0, rows)

    assert selection.toggle_row(5, rows) is selection
    assert selection.toggle_row(-1, rows) is selection
    assert selection.toggle_all([7, 8], rows) is selection


def test_toggle_all_only_covers_given_rows() -> None:
    rows = _rows("a", "b", "c")
    selection = Selection(frozenset({"z"}))

    selected = selection.toggle_all(range(len(rows)), rows)
    assert selected.ids == {"a", "b", "c", "z"}
    assert selected.all_selected(rows) is True

    cleared = selected.toggle_all(range(len(rows)), rows)
    assert cleared.ids == {"z"}


def test_selected_ids_resolve_against_filtered_rows() -> None:
    selection = Selection(frozenset({"a", "c", "gone"}))
    filtered = _rows("c", "b", "a")

    assert selection.selected_ids(filtered) == {"a", "c"}
    assert selection.ordered_ids(filtered) == ["c", "a"]
    assert selection.some_selected(filtered) is True


def test_prune_drops_ids_missing_from_reload() -> None:
    selection = Selection(frozenset({"a", "b"}))

    assert selection.prune(_rows("a", "c")).ids == {"a"}
    assert selection.prune(_rows("a", "b")) is selection
    assert selection.clear().ids == frozenset()
