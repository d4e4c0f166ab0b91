from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from backoffice_tables.domain.models.entity import BaseEntity


@dataclass(frozen=True)
class Selection:
    """Row selection keyed by entity id.

    Positions are only used to resolve which entity the user pointed at, against the rows
    visible at that moment. Stale or out-of-range positions are ignored.
    """

    ids: frozenset[str] = field(default_factory=frozenset)

    def toggle_row(self, index: int, visible_rows: Sequence[BaseEntity]) -> "Selection":
        if not 0 <= index < len(visible_rows):
            return self
        entity_id = visible_rows[index].id
        if entity_id in self.ids:
            return Selection(self.ids - {entity_id})
        return Selection(self.ids | {entity_id})

    def toggle_all(self, indices: Iterable[int], visible_rows: Sequence[BaseEntity]) -> "Selection":
        target = {visible_rows[index].id for index in indices if 0 <= index < len(visible_rows)}
        if not target:
            return self
        if target <= self.ids:
            return Selection(self.ids - target)
        return Selection(self.ids | target)

    def clear(self) -> "Selection":
        return Selection()

    def prune(self, entities: Iterable[BaseEntity]) -> "Selection":
        present = {entity.id for entity in entities}
        kept = self.ids & present
        return self if kept == self.ids else Selection(frozenset(kept))

    def selected_ids(self, filtered_rows: Sequence[BaseEntity]) -> frozenset[str]:
        return frozenset(entity.id for entity in filtered_rows if entity.id in self.ids)

    def ordered_ids(self, filtered_rows: Sequence[BaseEntity]) -> list[str]:
        return [entity.id for entity in filtered_rows if entity.id in self.ids]

    def is_selected(self, entity: BaseEntity) -> bool:
        return entity.id in self.ids

    def all_selected(self, rows: Sequence[BaseEntity]) -> bool:
        return bool(rows) and all(entity.id in self.ids for entity in rows)

    def some_selected(self, rows: Sequence[BaseEntity]) -> bool:
        return any(entity.id in self.ids for entity in rows) and not self.all_selected(rows)
