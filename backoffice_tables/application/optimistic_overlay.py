from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Generic

from backoffice_tables.domain.models.entity import EntityT, PendingOperation

Snapshot = tuple


class OptimisticOverlay(Generic[EntityT]):
    """Local, not yet confirmed edits layered over the last server snapshot.

    Every ``apply_*`` returns the snapshot taken just before the change so a failed
    mutation can be rolled back with ``rollback``.
    """

    def __init__(self, entities: Iterable[EntityT] = ()) -> None:
        self._entities: tuple[EntityT, ...] = tuple(entities)

    @property
    def entities(self) -> tuple[EntityT, ...]:
        return self._entities

    def snapshot(self) -> Snapshot:
        return self._entities

    def apply_create(self, entity: EntityT) -> Snapshot:
        previous = self._entities
        created = entity.model_copy(
            update={"is_optimistic": True, "pending_operation": PendingOperation.CREATE}
        )
        self._entities = previous + (created,)
        return previous

    def apply_update(self, entity_id: str, changes: Mapping[str, Any]) -> Snapshot:
        previous = self._entities
        self._entities = tuple(
            entity.model_copy(update={**changes, "is_optimistic": True, "pending_operation": PendingOperation.UPDATE})
            if entity.id == entity_id
            else entity
            for entity in previous
        )
        return previous

    def apply_delete(self, ids: Iterable[str]) -> Snapshot:
        previous = self._entities
        targets = set(ids)
        self._entities = tuple(
            entity.model_copy(update={"is_optimistic": True, "pending_operation": PendingOperation.DELETE})
            if entity.id in targets
            else entity
            for entity in previous
        )
        return previous

    def confirm_delete(self, ids: Iterable[str]) -> None:
        targets = set(ids)
        self._entities = tuple(entity for entity in self._entities if entity.id not in targets)

    def rollback(self, snapshot: Snapshot) -> None:
        self._entities = tuple(snapshot)

    def settle(self, entities: Iterable[EntityT]) -> None:
        self._entities = tuple(entities)
