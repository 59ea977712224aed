"""Paging parameter normalization."""

from typing import Tuple

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 20


def normalize_page(page: int, limit: int) -> Tuple[int, int]:
    """Clamp page to at least 1 and limit to 1..MAX_PAGE_SIZE."""
    return max(page, 1), min(max(limit, 1), MAX_PAGE_SIZE)
