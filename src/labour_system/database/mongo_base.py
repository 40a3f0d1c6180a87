from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import BulkWriteError, DuplicateKeyError

from ..common.datetime_utils import now_utc
from ..common.filters import Predicate
from ..common.pagination import Page, PageRequest
from ..core.exceptions import ConflictError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

DUPLICATE_KEY_CODE = 11000


def to_object_id(value: str) -> ObjectId:
    return ObjectId(value)


def _stringify(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, list):
        return [str(v) if isinstance(v, ObjectId) else v for v in value]
    return value


def _objectify(value: Any) -> Any:
    if isinstance(value, str):
        return ObjectId(value)
    if isinstance(value, (list, tuple)):
        return [ObjectId(v) if isinstance(v, str) else v for v in value]
    return value


def from_document(doc: Mapping[str, Any], references: Sequence[str]) -> Dict[str, Any]:
    """Mongo document -> plain dict with string ids (`_id` becomes `id`)."""
    out = dict(doc)
    out["id"] = str(out.pop("_id"))
    for ref in references:
        if ref in out:
            out[ref] = _stringify(out[ref])
    return out


def to_document(values: Mapping[str, Any], references: Sequence[str]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, value in values.items():
        if isinstance(value, Enum):
            value = value.value
        if key in references:
            value = _objectify(value)
        out[key] = value
    return out


@dataclass(frozen=True)
class InsertReport:
    """Outcome of an unordered batch insert.

    `failures` holds (position in the submitted batch, message) pairs.
    """

    inserted_ids: List[str] = field(default_factory=list)
    failures: List[Tuple[int, str]] = field(default_factory=list)


def describe_write_error(error: Mapping[str, Any]) -> str:
    if error.get("code") == DUPLICATE_KEY_CODE:
        return "Duplicate record"
    return str(error.get("errmsg") or "Write failed")


def insert_unordered(collection: Collection, documents: List[Dict[str, Any]]) -> InsertReport:
    """Insert every document that can be inserted; report the rest."""
    if not documents:
        return InsertReport()
    try:
        collection.insert_many(documents, ordered=False)
        return InsertReport(inserted_ids=[str(d["_id"]) for d in documents])
    except BulkWriteError as exc:
        write_errors = exc.details.get("writeErrors", [])
        failures = [(int(e["index"]), describe_write_error(e)) for e in write_errors]
        failed = {pos for pos, _ in failures}
        inserted = [str(d["_id"]) for pos, d in enumerate(documents) if pos not in failed and "_id" in d]
        logger.warning("%s: batch insert partially failed (%d of %d)", collection.name, len(failures), len(documents))
        return InsertReport(inserted_ids=inserted, failures=failures)


class MongoRepository:
    """Shared CRUD plumbing for one collection.

    Subclasses set `collection_name`, `references` (fields holding object ids),
    `sort` and implement `_model`.
    """

    collection_name: str = ""
    references: Tuple[str, ...] = ()
    sort: List[Tuple[str, int]] = [("created_at", DESCENDING)]
    duplicate_message: str = "Record already exists"

    def __init__(self, conn: DatabaseConnection):
        self._conn = conn

    @property
    def collection(self) -> Collection:
        return self._conn.database[self.collection_name]

    def _model(self, doc: Dict[str, Any]) -> Any:
        raise NotImplementedError

    def _load(self, doc: Optional[Mapping[str, Any]]) -> Any:
        if not doc:
            return None
        return self._model(from_document(doc, self.references))

    def _prepare(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        return to_document(values, self.references)

    def create(self, values: Mapping[str, Any]) -> str:
        now = now_utc()
        doc = self._prepare(values)
        doc.setdefault("created_at", now)
        doc.setdefault("updated_at", now)
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError(self.duplicate_message)
        return str(result.inserted_id)

    def insert_many(self, rows: List[Mapping[str, Any]]) -> InsertReport:
        now = now_utc()
        documents = []
        for row in rows:
            doc = self._prepare(row)
            doc.setdefault("created_at", now)
            doc.setdefault("updated_at", now)
            documents.append(doc)
        return insert_unordered(self.collection, documents)

    def get_by_id(self, entity_id: str) -> Any:
        return self._load(self.collection.find_one({"_id": to_object_id(entity_id)}))

    def find_one(self, predicate: Predicate) -> Any:
        return self._load(self.collection.find_one(predicate.to_mongo()))

    def exists(self, predicate: Predicate) -> bool:
        return self.collection.count_documents(predicate.to_mongo(), limit=1) > 0

    def update(self, entity_id: str, changes: Mapping[str, Any], *, guard: Optional[Predicate] = None) -> Any:
        """Apply `changes` and return the updated model.

        With `guard`, the update only happens when the stored document also
        matches it (conditional state transitions). None means no match.
        """
        query: Dict[str, Any] = {"_id": to_object_id(entity_id)}
        if guard is not None:
            query.update(guard.to_mongo())
        values = self._prepare(changes)
        values["updated_at"] = now_utc()
        try:
            doc = self.collection.find_one_and_update(
                query,
                {"$set": values},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise ConflictError(self.duplicate_message)
        return self._load(doc)

    def delete(self, entity_id: str, *, guard: Optional[Predicate] = None) -> bool:
        query: Dict[str, Any] = {"_id": to_object_id(entity_id)}
        if guard is not None:
            query.update(guard.to_mongo())
        return self.collection.delete_one(query).deleted_count == 1

    def list_page(self, predicate: Predicate, page: PageRequest) -> Page:
        query = predicate.to_mongo()
        total = self.collection.count_documents(query)
        cursor = self.collection.find(query).sort(self.sort).skip(page.skip).limit(page.limit)
        return Page(items=[self._load(d) for d in cursor], total=total, request=page)

    def list_all(self, predicate: Predicate, *, limit: int = 0, sort: Optional[List[Tuple[str, int]]] = None) -> List[Any]:
        cursor = self.collection.find(predicate.to_mongo()).sort(sort or self.sort)
        if limit:
            cursor = cursor.limit(limit)
        return [self._load(d) for d in cursor]

    def count(self, predicate: Predicate) -> int:
        return self.collection.count_documents(predicate.to_mongo())

    def count_by(self, predicate: Predicate, group_field: str) -> Dict[str, int]:
        pipeline = [
            {"$match": predicate.to_mongo()},
            {"$group": {"_id": f"${group_field}", "count": {"$sum": 1}}},
        ]
        return {str(row["_id"]): int(row["count"]) for row in self.collection.aggregate(pipeline)}

    def get_summaries(self, ids: Sequence[str]) -> Dict[str, Dict[str, Any]]:
        if not ids:
            return {}
        cursor = self.collection.find({"_id": {"$in": [to_object_id(i) for i in ids]}})
        models = [self._load(d) for d in cursor]
        return {m.id: m.summary() for m in models}
