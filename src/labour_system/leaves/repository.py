from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

from ..common.filters import Predicate
from ..common.pagination import Page, PageRequest
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def get_by_id(self, entity_id: str) -> Optional[LeaveRequest]:
        ...

    def create(self, values: Mapping[str, Any]) -> str:
        ...

    def update(self, entity_id: str, changes: Mapping[str, Any], *, guard: Optional[Predicate] = None) -> Optional[LeaveRequest]:
        """Conditional when `guard` is given: None if the stored request no longer matches."""
        ...

    def delete(self, entity_id: str, *, guard: Optional[Predicate] = None) -> bool:
        ...

    def list_page(self, predicate: Predicate, page: PageRequest) -> Page:
        ...
