"""Query criteria built from request parameters.

A `Predicate` is a plain list of criteria. Repositories compile it to a Mongo
filter document, while in-memory repositories evaluate it directly, so both
read the same rules.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

from bson import ObjectId

from ..core.enums import ValueEnum
from .datetime_utils import day_bounds, parse_datetime
from .validators import require_enum, require_identifier

EQ = "eq"
NE = "ne"
IN = "in"
REGEX = "regex"
GTE = "gte"
LTE = "lte"


@dataclass(frozen=True)
class Criterion:
    field: str
    op: str
    value: Any
    identifier: bool = False

    def storage_value(self) -> Any:
        if not self.identifier:
            return self.value
        if self.op == IN:
            return [ObjectId(v) for v in self.value]
        return ObjectId(self.value)

    def matches(self, document: Mapping[str, Any]) -> bool:
        actual = document.get(self.field)
        if self.op == EQ:
            # array fields match on membership, as in Mongo
            if isinstance(actual, list):
                return self.value in actual
            return actual == self.value
        if self.op == NE:
            return actual != self.value
        if self.op == IN:
            return actual in self.value
        if self.op == REGEX:
            return isinstance(actual, str) and re.search(self.value, actual, re.IGNORECASE) is not None
        if actual is None:
            return False
        if self.op == GTE:
            return actual >= self.value
        if self.op == LTE:
            return actual <= self.value
        raise ValueError(f"Unsupported operator: {self.op}")


@dataclass(frozen=True)
class Predicate:
    criteria: Tuple[Criterion, ...] = ()

    def and_(self, *criteria: Criterion) -> "Predicate":
        return Predicate(self.criteria + tuple(criteria))

    def to_mongo(self) -> Dict[str, Any]:
        by_field: Dict[str, Dict[str, Any]] = {}
        # repeated operators on one field are ANDed through $and
        extra: List[Dict[str, Any]] = []
        for c in self.criteria:
            if c.op == REGEX:
                op = {"$regex": c.value, "$options": "i"}
            else:
                op = {f"${c.op}": c.storage_value()}
            ops = by_field.setdefault(c.field, {})
            if set(op) & set(ops):
                extra.append({c.field: op})
            else:
                ops.update(op)

        query: Dict[str, Any] = {}
        for field, ops in by_field.items():
            query[field] = ops["$eq"] if list(ops) == ["$eq"] else ops
        if extra:
            query["$and"] = extra
        return query

    def matches(self, document: Mapping[str, Any]) -> bool:
        return all(c.matches(document) for c in self.criteria)


class FilterBuilder:
    """Collects criteria from optional query parameters.

    Absent or blank parameters add nothing. Malformed identifiers, enum values
    and dates raise instead of being skipped, so a typo never widens a query.
    """

    def __init__(self, params: Optional[Mapping[str, Any]] = None):
        self._params = params or {}
        self._criteria: List[Criterion] = []

    def _raw(self, param: str) -> Optional[Any]:
        value = self._params.get(param)
        if isinstance(value, str):
            value = value.strip()
        if value is None or value == "":
            return None
        return value

    def _date(self, param: str) -> Optional[datetime]:
        value = self._raw(param)
        return None if value is None else parse_datetime(value, param)

    def where(self, field: str, value: Any, *, identifier: bool = False) -> "FilterBuilder":
        self._criteria.append(Criterion(field, EQ, value, identifier))
        return self

    def where_not(self, field: str, value: Any) -> "FilterBuilder":
        self._criteria.append(Criterion(field, NE, value))
        return self

    def where_in(self, field: str, values: List[Any], *, identifier: bool = False) -> "FilterBuilder":
        self._criteria.append(Criterion(field, IN, list(values), identifier))
        return self

    def identifier(self, param: str, field: str) -> "FilterBuilder":
        value = self._raw(param)
        if value is not None:
            self.where(field, require_identifier(value, param), identifier=True)
        return self

    def identifiers(self, param: str, field: str) -> "FilterBuilder":
        """Comma separated identifiers matched with $in."""
        value = self._raw(param)
        if value is None:
            return self
        ids = [require_identifier(v.strip(), param) for v in str(value).split(",") if v.strip()]
        if ids:
            self.where_in(field, ids, identifier=True)
        return self

    def enum(self, param: str, enum_cls: Type[ValueEnum], field: str) -> "FilterBuilder":
        value = self._raw(param)
        if value is not None:
            self.where(field, require_enum(value, enum_cls, param).value)
        return self

    def contains(self, param: str, field: str) -> "FilterBuilder":
        value = self._raw(param)
        if value is not None:
            self._criteria.append(Criterion(field, REGEX, re.escape(str(value))))
        return self

    def exact(self, param: str, field: str) -> "FilterBuilder":
        value = self._raw(param)
        if value is not None:
            self.where(field, value)
        return self

    def since(self, param: str, field: str) -> "FilterBuilder":
        value = self._date(param)
        if value is not None:
            self._criteria.append(Criterion(field, GTE, value))
        return self

    def until(self, param: str, field: str) -> "FilterBuilder":
        value = self._date(param)
        if value is not None:
            self._criteria.append(Criterion(field, LTE, value))
        return self

    def between(self, field: str, start: datetime, end: datetime) -> "FilterBuilder":
        """Fixed inclusive bounds, not taken from the request."""
        self._criteria.append(Criterion(field, GTE, start))
        self._criteria.append(Criterion(field, LTE, end))
        return self

    def date_range(self, start_param: str, end_param: str, field: str) -> "FilterBuilder":
        return self.since(start_param, field).until(end_param, field)

    def overlap(self, start_param: str, end_param: str, *, start_field: str, end_field: str) -> "FilterBuilder":
        """Match records whose [start_field, end_field] interval touches the window."""
        start = self._date(start_param)
        end = self._date(end_param)
        if start is not None:
            self._criteria.append(Criterion(end_field, GTE, start))
        if end is not None:
            self._criteria.append(Criterion(start_field, LTE, end))
        return self

    def on_day(self, param: str, field: str) -> "FilterBuilder":
        value = self._date(param)
        if value is not None:
            self.between(field, *day_bounds(value))
        return self

    def build(self) -> Predicate:
        return Predicate(tuple(self._criteria))
