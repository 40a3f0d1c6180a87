from __future__ import annotations

from pymongo import DESCENDING

from ..database.mongo_base import MongoRepository
from .model import LeaveRequest
from .repository import LeaveRepository


class MongoLeaveRepository(MongoRepository, LeaveRepository):
    collection_name = "leaves"
    references = ("labourer_id", "reviewed_by")
    sort = [("from_date", DESCENDING)]

    def _model(self, doc) -> LeaveRequest:
        return LeaveRequest.from_document(doc)
