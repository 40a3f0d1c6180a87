from __future__ import annotations

from typing import Any, List, Mapping, Optional, Protocol, Tuple

from ..common.filters import Predicate
from ..common.pagination import Page, PageRequest
from ..database.mongo_base import InsertReport
from .model import Salary


class SalaryRepository(Protocol):
    def get_by_id(self, entity_id: str) -> Optional[Salary]:
        ...

    def find_one(self, predicate: Predicate) -> Optional[Salary]:
        ...

    def create(self, values: Mapping[str, Any]) -> str:
        ...

    def insert_many(self, rows: List[Mapping[str, Any]]) -> InsertReport:
        ...

    def update(self, entity_id: str, changes: Mapping[str, Any], *, guard: Optional[Predicate] = None) -> Optional[Salary]:
        ...

    def delete(self, entity_id: str, *, guard: Optional[Predicate] = None) -> bool:
        ...

    def list_page(self, predicate: Predicate, page: PageRequest) -> Page:
        ...

    def list_all(self, predicate: Predicate, *, limit: int = 0, sort: Optional[List[Tuple[str, int]]] = None) -> List[Salary]:
        ...
