from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

from backoffice_tables.domain.models.entity import BaseEntity

EMPTY_VALUE = "-"

Accessor = Callable[[BaseEntity], Any]
Formatter = Callable[[Any], str]


@dataclass(frozen=True)
class ColumnDef:
    key: str
    label: str
    accessor: Accessor | None = None
    formatter: Formatter | None = None
    sortable: bool = True
    cell: Callable[[BaseEntity], str] | None = None

    def value(self, entity: BaseEntity) -> Any:
        if self.accessor is not None:
            return self.accessor(entity)
        return getattr(entity, self.key, None)

    def render(self, entity: BaseEntity) -> str:
        if self.cell is not None:
            return self.cell(entity)
        value = self.value(entity)
        if self.formatter is not None:
            return self.formatter(value)
        return normalize_value(value)


def normalize_value(value: Any) -> str:
    if value is None:
        return EMPTY_VALUE
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, str):
        clean = value.strip()
        return clean or EMPTY_VALUE
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def sort_accessors(columns: Sequence[ColumnDef]) -> dict[str, Accessor]:
    return {column.key: column.value for column in columns if column.sortable}


def sortable_keys(columns: Sequence[ColumnDef]) -> frozenset[str]:
    return frozenset(column.key for column in columns if column.sortable)


def text_column(key: str, label: str, accessor: Accessor | None = None, sortable: bool = True) -> ColumnDef:
    return ColumnDef(key=key, label=label, accessor=accessor, sortable=sortable)


def date_column(key: str, label: str, accessor: Accessor | None = None, fmt: str = "%Y-%m-%d") -> ColumnDef:
    def _format(value: Any) -> str:
        if isinstance(value, (datetime, date)):
            return value.strftime(fmt)
        return normalize_value(value)

    return ColumnDef(key=key, label=label, accessor=accessor, formatter=_format)


def badge_column(key: str, label: str, labels: Mapping[str, str], accessor: Accessor | None = None) -> ColumnDef:
    """Status-like column; known values render with their display label, others as-is."""

    def _format(value: Any) -> str:
        raw = value.value if isinstance(value, Enum) else value
        if raw is None or raw == "":
            return EMPTY_VALUE
        return labels.get(str(raw), str(raw))

    return ColumnDef(key=key, label=label, accessor=accessor, formatter=_format)


def two_line_column(
    key: str,
    label: str,
    primary: Accessor,
    secondary: Callable[[BaseEntity], Any],
    sortable: bool = True,
) -> ColumnDef:
    """Primary value on the first line, secondary detail (or "-") on the second.

    Sorting uses the primary value.
    """

    def _format(entity: BaseEntity) -> str:
        return f"{normalize_value(primary(entity))}\n{normalize_value(secondary(entity))}"

    return ColumnDef(key=key, label=label, accessor=primary, sortable=sortable, cell=_format)


def count_column(key: str, label: str, noun: str, accessor: Accessor | None = None) -> ColumnDef:
    def _format(value: Any) -> str:
        if not value:
            return EMPTY_VALUE
        total = len(value) if hasattr(value, "__len__") else int(value)
        return f"{total} {noun}" if total == 1 else f"{total} {noun}s"

    return ColumnDef(key=key, label=label, accessor=accessor, formatter=_format)


def money_column(key: str, label: str, currency: str = "R$", accessor: Accessor | None = None) -> ColumnDef:
    def _format(value: Any) -> str:
        if value is None or value == "":
            return EMPTY_VALUE
        return f"{currency} {float(value):,.2f}"

    return ColumnDef(key=key, label=label, accessor=accessor, formatter=_format)
