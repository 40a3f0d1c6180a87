from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Protocol, Sequence

from ..common.filters import Predicate
from ..common.pagination import Page, PageRequest
from .model import User


class UserRepository(Protocol):
    def get_by_id(self, entity_id: str) -> Optional[User]:
        ...

    def get_by_username(self, username: str) -> Optional[User]:
        ...

    def get_by_email(self, email: str) -> Optional[User]:
        ...

    def create(self, values: Mapping[str, Any]) -> str:
        ...

    def update(self, entity_id: str, changes: Mapping[str, Any], *, guard: Optional[Predicate] = None) -> Optional[User]:
        ...

    def delete(self, entity_id: str, *, guard: Optional[Predicate] = None) -> bool:
        ...

    def list_page(self, predicate: Predicate, page: PageRequest) -> Page:
        ...

    def get_summaries(self, ids: Sequence[str]) -> Dict[str, Dict[str, Any]]:
        ...
