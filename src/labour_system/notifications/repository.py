from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

from ..common.filters import Predicate
from ..common.pagination import Page, PageRequest
from .model import Notification


class NotificationRepository(Protocol):
    def get_by_id(self, entity_id: str) -> Optional[Notification]:
        ...

    def create(self, values: Mapping[str, Any]) -> str:
        ...

    def update(self, entity_id: str, changes: Mapping[str, Any], *, guard: Optional[Predicate] = None) -> Optional[Notification]:
        ...

    def list_page(self, predicate: Predicate, page: PageRequest) -> Page:
        ...
