from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from backoffice_tables.domain.models.entity import BaseEntity, PendingOperation


class RowStyle(str, Enum):
    NONE = "none"
    CREATED = "created"
    UPDATED = "updated"
    DELETING = "deleting"
    PENDING = "pending"


@dataclass(frozen=True)
class RowPresentation:
    style_tag: RowStyle
    clickable: bool

    @property
    def deleting(self) -> bool:
        return self.style_tag is RowStyle.DELETING


@dataclass(frozen=True)
class RowActionAvailability:
    can_select: bool
    can_edit: bool
    can_delete: bool


_OPTIMISTIC_STYLES = {
    PendingOperation.CREATE: RowPresentation(RowStyle.CREATED, clickable=True),
    PendingOperation.UPDATE: RowPresentation(RowStyle.UPDATED, clickable=True),
    PendingOperation.DELETE: RowPresentation(RowStyle.DELETING, clickable=False),
}


def resolve_row_presentation(entity: BaseEntity) -> RowPresentation:
    if entity.is_optimistic is not True:
        return RowPresentation(RowStyle.NONE, clickable=True)
    return _OPTIMISTIC_STYLES.get(entity.pending_operation, RowPresentation(RowStyle.PENDING, clickable=False))


def row_action_availability(entity: BaseEntity, *, is_mutating: bool) -> RowActionAvailability:
    presentation = resolve_row_presentation(entity)
    interactive = presentation.clickable and not is_mutating
    return RowActionAvailability(
        can_select=True,
        can_edit=interactive,
        can_delete=interactive and presentation.style_tag is RowStyle.NONE,
    )
