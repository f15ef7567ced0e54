"""Fixed-size result pages.

Page indexes are not clamped: asking for a page past the end (or a negative
one) returns an empty page rather than the last valid one.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def _check_page_size(page_size: int) -> None:
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")


def paginate(items: Sequence[T], page_size: int, page_index: int) -> list[T]:
    """Return page ``page_index`` (0-based) of ``items``.

    Raises:
        ValueError: If ``page_size`` is smaller than 1.
    """
    _check_page_size(page_size)
    if page_index < 0:
        return []
    start = page_index * page_size
    return list(items[start : start + page_size])


def page_count(total: int, page_size: int) -> int:
    """Number of non-empty pages for ``total`` items."""
    _check_page_size(page_size)
    return math.ceil(total / page_size) if total > 0 else 0
