from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from ..common.filters import Predicate
from ..common.pagination import Page, PageRequest
from .model import Labourer


class LabourerRepository(Protocol):
    def get_by_id(self, entity_id: str) -> Optional[Labourer]:
        ...

    def create(self, values: Mapping[str, Any]) -> str:
        ...

    def update(self, entity_id: str, changes: Mapping[str, Any], *, guard: Optional[Predicate] = None) -> Optional[Labourer]:
        ...

    def delete(self, entity_id: str, *, guard: Optional[Predicate] = None) -> bool:
        ...

    def exists(self, predicate: Predicate) -> bool:
        ...

    def count(self, predicate: Predicate) -> int:
        ...

    def list_page(self, predicate: Predicate, page: PageRequest) -> Page:
        ...

    def list_all(self, predicate: Predicate, *, limit: int = 0, sort: Optional[List[Tuple[str, int]]] = None) -> List[Labourer]:
        ...

    def get_summaries(self, ids: Sequence[str]) -> Dict[str, Dict[str, Any]]:
        ...
