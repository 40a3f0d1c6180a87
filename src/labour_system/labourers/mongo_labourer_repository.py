from __future__ import annotations

from pymongo import DESCENDING

from ..database.mongo_base import MongoRepository
from .model import Labourer
from .repository import LabourerRepository


class MongoLabourerRepository(MongoRepository, LabourerRepository):
    collection_name = "labourers"
    references = ("user_id", "assigned_project_id")
    sort = [("created_at", DESCENDING)]
    duplicate_message = "A labourer profile already exists for this user"

    def _model(self, doc) -> Labourer:
        return Labourer.from_document(doc)
