"""Pagination over repository querysets for the list endpoints."""

import math
from dataclasses import dataclass, field

DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 100

# Upper bound when a result set has to be filtered in memory before paging
SCAN_LIMIT = 1000


@dataclass(frozen=True)
class Page:
    items: list = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def _clamp(page, limit) -> tuple[int, int]:
    page = max(int(page or 1), 1)
    limit = min(max(int(limit or DEFAULT_PAGE_SIZE), 1), MAX_PAGE_SIZE)
    return page, limit


def paginate(queryset, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> Page:
    """Slice a Protean queryset into one page.

    `page` is 1-based; out-of-range values are clamped rather than rejected.
    """
    page, limit = _clamp(page, limit)
    result = queryset.limit(limit).offset((page - 1) * limit).all()
    return Page(items=list(result.items), total=result.total, page=page, limit=limit)


def paginate_items(items: list, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> Page:
    """Same as `paginate` for results that had to be filtered in memory."""
    page, limit = _clamp(page, limit)
    start = (page - 1) * limit
    return Page(items=list(items[start : start + limit]), total=len(items), page=page, limit=limit)
