# app/utils/pagination.py
import math
from typing import NamedTuple


class Pagination(NamedTuple):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next: bool
    has_prev: bool


def paginate(total: int, page: int, limit: int) -> Pagination:
    """Page metadata for `total` items split into pages of `limit` (page is 1-based)"""
    if limit < 1:
        raise ValueError("limit must be positive")

    total_pages = math.ceil(total / limit)
    return Pagination(
        current_page=page,
        total_pages=total_pages,
        total_items=total,
        items_per_page=limit,
        has_next=page < total_pages,
        has_prev=page > 1,
    )
