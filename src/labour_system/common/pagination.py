from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, TypeVar

from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT

T = TypeVar("T")


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


@dataclass(frozen=True)
class PageRequest:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_PAGE_LIMIT

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_params(cls, params: Optional[Mapping[str, Any]]) -> "PageRequest":
        """Lenient parsing: anything that is not a positive integer falls back to the default."""
        params = params or {}
        limit = params.get("limit")
        if limit is None:
            limit = params.get("pageSize")
        return cls(
            page=_positive_int(params.get("page"), DEFAULT_PAGE),
            limit=_positive_int(limit, DEFAULT_PAGE_LIMIT),
        )


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T]
    total: int
    request: PageRequest

    def meta(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "totalPages": math.ceil(self.total / self.request.limit),
            "currentPage": self.request.page,
            "pageSize": len(self.items),
        }

    def map(self, fn: Callable[[T], Any]) -> "Page[Any]":
        return Page(items=[fn(item) for item in self.items], total=self.total, request=self.request)

    def with_items(self, items: List[Any]) -> "Page[Any]":
        return Page(items=items, total=self.total, request=self.request)
