"""Pagination - pure helpers for offset and keyset (cursor) pages.

Invariants:
    - Services fetch size + 1 rows; the extra row only signals "not last"
    - A page never contains more than `size` items
    - cursor_id of None or 0 means "start from the newest row"
"""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of results plus the metadata clients paginate with."""
    content: list[T] = field(default_factory=list)
    total_elements: int = 0
    last: bool = True


def clamp_size(size: int | None, default: int, maximum: int = 100) -> int:
    if not size or size < 1:
        return default
    return min(size, maximum)


def has_cursor(cursor_id: int | None) -> bool:
    return cursor_id is not None and cursor_id > 0


def slice_page(rows: list[T], size: int, total_elements: int) -> Page[T]:
    """Build a Page from at most size + 1 fetched rows."""
    return Page(
        content=list(rows[:size]),
        total_elements=total_elements,
        last=len(rows) <= size,
    )
