"""Pagination — page/limit normalization and response metadata.

Invariants:
    - page >= 1; 1 <= limit <= MAX_LIMIT
    - Non-numeric input falls back to defaults instead of failing the request
    - hasNextPage iff page < totalPages; hasPrevPage iff page > 1
"""

import math
from dataclasses import dataclass

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 50


@dataclass(frozen=True)
class PageWindow:
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def _parse_int(raw: str | int | None, default: int) -> int:
    if raw is None:
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def build_page_window(page: str | int | None, limit: str | int | None) -> PageWindow:
    page_num = max(1, _parse_int(page, DEFAULT_PAGE))
    limit_num = min(MAX_LIMIT, max(1, _parse_int(limit, DEFAULT_LIMIT)))
    return PageWindow(page=page_num, limit=limit_num)


def pagination_meta(total: int, window: PageWindow) -> dict:
    total_pages = math.ceil(total / window.limit)
    return {
        "total": total,
        "page": window.page,
        "limit": window.limit,
        "totalPages": total_pages,
        "hasNextPage": window.page < total_pages,
        "hasPrevPage": window.page > 1,
    }
