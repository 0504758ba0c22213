"""Offset pagination over in-memory result lists.

Listings are filtered and sorted in full before slicing, so the totals are
exact for the moment of the request and nothing more.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any, TypeVar

from skillswap.config import get_settings

T = TypeVar("T")


def clamp_limit(limit: int | None) -> int:
    """Apply the configured default and ceiling to a requested page size."""
    settings = get_settings()
    if limit is None:
        return settings.default_page_size
    return max(1, min(limit, settings.max_page_size))


def paginate(items: Sequence[T], page: int, limit: int, total_key: str) -> tuple[list[T], dict[str, Any]]:
    """
    Slice one page out of ``items``.

    Args:
        items: The full, already sorted result list.
        page: 1-based page number.
        limit: Page size.
        total_key: Name of the total field in the pagination block,
            e.g. ``total_users``.

    Returns:
        Tuple of (page items, pagination dict).
    """
    page = max(page, 1)
    total = len(items)
    total_pages = math.ceil(total / limit) if total else 0
    start = (page - 1) * limit
    return list(items[start : start + limit]), {
        "current_page": page,
        "total_pages": total_pages,
        total_key: total,
        "has_next": page < total_pages,
        "has_prev": page > 1,
    }
