import math
from typing import Sequence, TypeVar

T = TypeVar("T")


def total_pages(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if total > 0 else 0


def clamp_page(page: int, total: int, page_size: int) -> int:
    """Clamp a requested page into [1, total_pages] (1 when there is nothing to show)."""
    return max(1, min(page, total_pages(total, page_size) or 1))


def paginate(items: Sequence[T], page: int, page_size: int) -> tuple[list[T], int]:
    """Slice an already filtered and sorted sequence, returning (items, total).

    ``page`` is 1-based and expected to be clamped by the caller.
    """
    total = len(items)
    start = (page - 1) * page_size
    return list(items[start:start + page_size]), total
