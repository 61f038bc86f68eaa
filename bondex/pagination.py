from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _positive_int(raw, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def page_request(params, *, default_limit: int = 10, max_limit: int = 100) -> PageRequest:
    page = _positive_int(params.get("page"), 1)
    limit = min(_positive_int(params.get("limit"), default_limit), max_limit)
    return PageRequest(page=page, limit=limit)


def paginate(queryset, request: PageRequest, *, total_key: str = "totalItems"):
    """Slice a queryset and return ``(items, pagination_meta)``."""
    total = queryset.count()
    items = list(queryset[request.offset : request.offset + request.limit])
    total_pages = math.ceil(total / request.limit) if total else 0
    meta = {
        "currentPage": request.page,
        "totalPages": total_pages,
        total_key: total,
        "limit": request.limit,
        "hasNextPage": request.page < total_pages,
        "hasPrevPage": request.page > 1,
    }
    return items, meta
