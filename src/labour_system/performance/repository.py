from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

from ..common.filters import Predicate
from ..common.pagination import Page, PageRequest
from .model import PerformanceRecord


class PerformanceRepository(Protocol):
    def get_by_id(self, entity_id: str) -> Optional[PerformanceRecord]:
        ...

    def find_one(self, predicate: Predicate) -> Optional[PerformanceRecord]:
        ...

    def create(self, values: Mapping[str, Any]) -> str:
        ...

    def update(self, entity_id: str, changes: Mapping[str, Any], *, guard: Optional[Predicate] = None) -> Optional[PerformanceRecord]:
        ...

    def delete(self, entity_id: str, *, guard: Optional[Predicate] = None) -> bool:
        ...

    def list_page(self, predicate: Predicate, page: PageRequest) -> Page:
        ...
