from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from ..common.filters import Predicate
from ..common.pagination import Page, PageRequest
from .model import Project


class ProjectRepository(Protocol):
    def get_by_id(self, entity_id: str) -> Optional[Project]:
        ...

    def create(self, values: Mapping[str, Any]) -> str:
        ...

    def update(self, entity_id: str, changes: Mapping[str, Any], *, guard: Optional[Predicate] = None) -> Optional[Project]:
        ...

    def delete(self, entity_id: str, *, guard: Optional[Predicate] = None) -> bool:
        ...

    def exists(self, predicate: Predicate) -> bool:
        ...

    def count(self, predicate: Predicate) -> int:
        ...

    def list_page(self, predicate: Predicate, page: PageRequest) -> Page:
        ...

    def list_all(self, predicate: Predicate, *, limit: int = 0, sort: Optional[List[Tuple[str, int]]] = None) -> List[Project]:
        ...

    def get_summaries(self, ids: Sequence[str]) -> Dict[str, Dict[str, Any]]:
        ...
