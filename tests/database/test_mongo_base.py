from types import SimpleNamespace

import pytest
from bson import ObjectId
from pymongo.errors import BulkWriteError, DuplicateKeyError

from labour_system.common.filters import FilterBuilder
from labour_system.core.enums import LeaveStatus
from labour_system.core.exceptions import ConflictError
from labour_system.database.mongo_base import MongoRepository, describe_write_error

LABOURER = "65a1b2c3d4e5f60718293a4b"
RECORD = "65a1b2c3d4e5f60718293a4d"


class StubCollection:
    """Records what the repository sends and replays canned results."""

    name = "leaves"

    def __init__(self):
        self.calls = []
        self.write_errors = []
        self.raise_duplicate = False
        self.updated = None
        self.groups = []

    def insert_one(self, doc):
        self.calls.append(("insert_one", doc))
        if self.raise_duplicate:
            raise DuplicateKeyError("E11000 duplicate key error", code=11000)
        return SimpleNamespace(inserted_id=ObjectId(RECORD))

    def insert_many(self, docs, ordered=True):
        self.calls.append(("insert_many", docs, ordered))
        for doc in docs:
            doc["_id"] = ObjectId()
        if self.write_errors:
            raise BulkWriteError({"writeErrors": self.write_errors, "nInserted": len(docs) - len(self.write_errors)})

    def find_one_and_update(self, query, update, return_document=None):
        self.calls.append(("find_one_and_update", query, update))
        if self.raise_duplicate:
            raise DuplicateKeyError("E11000 duplicate key error", code=11000)
        return self.updated

    def aggregate(self, pipeline):
        self.calls.append(("aggregate", pipeline))
        return iter(self.groups)


class LeaveDocs(MongoRepository):
    collection_name = "leaves"
    references = ("labourer_id",)
    duplicate_message = "Leave request already exists"

    def _model(self, doc):
        return doc


@pytest.fixture
def collection():
    return StubCollection()


@pytest.fixture
def repo(collection):
    return LeaveDocs(SimpleNamespace(database={"leaves": collection}))


def test_create_stores_object_ids_and_enum_values(repo, collection):
    new_id = repo.create({"labourer_id": LABOURER, "status": LeaveStatus.PENDING})

    assert new_id == RECORD
    _, doc = collection.calls[0]
    assert doc["labourer_id"] == ObjectId(LABOURER)
    assert doc["status"] == "pending"
    assert doc["created_at"] == doc["updated_at"]


def test_duplicate_key_on_create_and_update_is_a_conflict(repo, collection):
    collection.raise_duplicate = True

    with pytest.raises(ConflictError) as exc:
        repo.create({"labourer_id": LABOURER})
    assert exc.value.message == "Leave request already exists"
    with pytest.raises(ConflictError):
        repo.update(RECORD, {"status": LeaveStatus.APPROVED})


def test_guarded_update_adds_guard_to_the_query(repo, collection):
    pending = FilterBuilder().where("status", LeaveStatus.PENDING.value).build()

    assert repo.update(RECORD, {"status": LeaveStatus.APPROVED}, guard=pending) is None

    _, query, update = collection.calls[0]
    assert query == {"_id": ObjectId(RECORD), "status": "pending"}
    assert update["$set"]["status"] == "approved"
    assert "updated_at" in update["$set"]


def test_update_returns_loaded_document_with_string_ids(repo, collection):
    collection.updated = {"_id": ObjectId(RECORD), "labourer_id": ObjectId(LABOURER), "status": "approved"}

    loaded = repo.update(RECORD, {"status": LeaveStatus.APPROVED})

    assert loaded == {"id": RECORD, "labourer_id": LABOURER, "status": "approved"}


def test_insert_many_reports_failed_positions_and_keeps_the_rest(repo, collection):
    collection.write_errors = [{"index": 1, "code": 11000, "errmsg": "E11000 duplicate key error"}]
    rows = [{"labourer_id": LABOURER, "n": n} for n in range(3)]

    report = repo.insert_many(rows)

    _, docs, ordered = collection.calls[0]
    assert ordered is False
    assert report.inserted_ids == [str(docs[0]["_id"]), str(docs[2]["_id"])]
    assert report.failures == [(1, "Duplicate record")]


def test_insert_many_without_errors_and_empty_batch(repo, collection):
    report = repo.insert_many([{"labourer_id": LABOURER}, {"labourer_id": LABOURER}])
    assert len(report.inserted_ids) == 2
    assert report.failures == []

    assert repo.insert_many([]).inserted_ids == []


def test_non_duplicate_write_errors_keep_the_server_message():
    assert describe_write_error({"code": 121, "errmsg": "Document failed validation"}) == "Document failed validation"
    assert describe_write_error({"code": 2}) == "Write failed"


def test_count_by_groups_on_string_keys(repo, collection):
    collection.groups = [{"_id": ObjectId(LABOURER), "count": 3}]
    present = FilterBuilder().where("status", "present").build()

    assert repo.count_by(present, "labourer_id") == {LABOURER: 3}

    _, pipeline = collection.calls[0]
    assert pipeline[0] == {"$match": {"status": "present"}}
    assert pipeline[1]["$group"]["_id"] == "$labourer_id"
