from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from numbers import Number
from typing import Any

from backoffice_tables.domain.models.entity import ALL_FILTER, BaseEntity

SearchKey = str | Callable[[BaseEntity], Any]
FilterPredicate = Callable[[BaseEntity, str], bool]


@dataclass(frozen=True)
class FilterSpec:
    """How a table narrows its collection.

    ``search_keys`` are attribute names or accessors. An empty tuple makes local search a
    no-op, every entity matches any query. ``predicate`` wins over ``filter_field`` when both
    are given; with neither, a non-"all" filter value matches nothing.
    """

    search_keys: tuple[SearchKey, ...] = ()
    predicate: FilterPredicate | None = None
    filter_field: str | None = None


def read_field(entity: BaseEntity, key: SearchKey) -> Any:
    if callable(key):
        return key(entity)
    return getattr(entity, key, None)


def value_matches(value: Any, query: str) -> bool:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, str):
        return query.lower() in value.lower()
    if isinstance(value, Number) and not isinstance(value, bool):
        return query in str(value)
    return False


def matches_search(entity: BaseEntity, query: str, search_keys: Sequence[SearchKey]) -> bool:
    if not query or not search_keys:
        return True
    return any(value_matches(read_field(entity, key), query) for key in search_keys)


def matches_filter(entity: BaseEntity, filter_value: str, spec: FilterSpec) -> bool:
    if filter_value == ALL_FILTER:
        return True
    if spec.predicate is not None:
        return bool(spec.predicate(entity, filter_value))
    if spec.filter_field is not None:
        value = getattr(entity, spec.filter_field, None)
        if isinstance(value, Enum):
            value = value.value
        return value == filter_value
    return False


def filter_entities(
    entities: Sequence[BaseEntity],
    *,
    query: str,
    filter_value: str,
    spec: FilterSpec,
    local_search: bool = True,
) -> list[BaseEntity]:
    keys = spec.search_keys if local_search else ()
    return [
        entity
        for entity in entities
        if matches_search(entity, query, keys) and matches_filter(entity, filter_value, spec)
    ]
