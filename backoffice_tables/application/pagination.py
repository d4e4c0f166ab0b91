from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import TypeVar

RowT = TypeVar("RowT")


@dataclass(frozen=True)
class PaginationState:
    page_index: int = 0
    page_size: int = 10

    def __post_init__(self) -> None:
        if self.page_index < 0:
            raise ValueError(f"page_index must be >= 0, got {self.page_index}")
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")


@dataclass(frozen=True)
class PageInfo:
    page_index: int
    page_size: int
    page_count: int
    total_rows: int
    server_side: bool

    @property
    def can_previous(self) -> bool:
        return self.page_index > 0

    @property
    def can_next(self) -> bool:
        return self.page_index < self.page_count - 1

    def render(self) -> dict[str, object]:
        return {
            "page_index": self.page_index,
            "page_number": self.page_index + 1,
            "page_size": self.page_size,
            "page_count": self.page_count,
            "total": self.total_rows,
            "can_previous": self.can_previous,
            "can_next": self.can_next,
            "server_side": self.server_side,
        }


def page_count(total_rows: int, page_size: int) -> int:
    return math.ceil(max(total_rows, 0) / page_size)


def page_info(state: PaginationState, filtered_rows: int, total_count: int | None = None) -> PageInfo:
    total = total_count if total_count is not None else filtered_rows
    return PageInfo(
        page_index=state.page_index,
        page_size=state.page_size,
        page_count=page_count(total, state.page_size),
        total_rows=total,
        server_side=total_count is not None,
    )


def paginate(rows: Sequence[RowT], state: PaginationState, total_count: int | None = None) -> list[RowT]:
    if total_count is not None:
        # the caller already fetched exactly this page
        return list(rows)
    start = state.page_index * state.page_size
    return list(rows[start : start + state.page_size])


def change_page_size(page_size: int) -> PaginationState:
    return PaginationState(page_index=0, page_size=page_size)


def goto_page(state: PaginationState, page_index: int) -> PaginationState:
    return replace(state, page_index=max(0, page_index))


def first_page(state: PaginationState, info: PageInfo) -> PaginationState:
    if not info.can_previous:
        return state
    return replace(state, page_index=0)


def prev_page(state: PaginationState, info: PageInfo) -> PaginationState:
    if not info.can_previous:
        return state
    return replace(state, page_index=state.page_index - 1)


def next_page(state: PaginationState, info: PageInfo) -> PaginationState:
    if not info.can_next:
        return state
    return replace(state, page_index=state.page_index + 1)


def last_page(state: PaginationState, info: PageInfo) -> PaginationState:
    if not info.can_next:
        return state
    return replace(state, page_index=info.page_count - 1)
