from __future__ import annotations

from pymongo import DESCENDING

from ..database.mongo_base import MongoRepository
from .model import PerformanceRecord
from .repository import PerformanceRepository


class MongoPerformanceRepository(MongoRepository, PerformanceRepository):
    collection_name = "performance"
    references = ("labourer_id", "project_id")
    sort = [("date", DESCENDING)]
    duplicate_message = "Performance record for this labourer, project, and date already exists"

    def _model(self, doc) -> PerformanceRecord:
        return PerformanceRecord.from_document(doc)
