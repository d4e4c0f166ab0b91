from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from numbers import Number
from typing import Any

from backoffice_tables.domain.models.entity import BaseEntity


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortSpec:
    column: str
    direction: SortDirection = SortDirection.ASC


def toggle_sort(current: SortSpec | None, column: str) -> SortSpec | None:
    if current is None or current.column != column:
        return SortSpec(column=column, direction=SortDirection.ASC)
    if current.direction is SortDirection.ASC:
        return SortSpec(column=column, direction=SortDirection.DESC)
    return None


def _sort_key(value: Any) -> tuple[int, Any]:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return (0, int(value))
    if isinstance(value, Number):
        return (0, value)
    if isinstance(value, datetime):
        return (1, value.timestamp())
    if isinstance(value, date):
        return (1, value.toordinal())
    if isinstance(value, (list, tuple, set, dict)):
        return (0, len(value))
    return (2, str(value).casefold())


def sort_entities(
    entities: Sequence[BaseEntity],
    sort: SortSpec | None,
    accessor: Callable[[BaseEntity], Any] | None = None,
) -> list[BaseEntity]:
    if sort is None:
        return list(entities)

    read = accessor or (lambda entity: getattr(entity, sort.column, None))
    present: list[tuple[Any, BaseEntity]] = []
    missing: list[BaseEntity] = []
    for entity in entities:
        value = read(entity)
        if value is None or value == "":
            missing.append(entity)
        else:
            present.append((_sort_key(value), entity))

    # sorted() keeps ties in input order even with reverse=True
    ordered = sorted(present, key=lambda pair: pair[0], reverse=sort.direction is SortDirection.DESC)
    return [entity for _, entity in ordered] + missing
