from __future__ import annotations

from pymongo import DESCENDING

from ..database.mongo_base import MongoRepository
from .model import Project
from .repository import ProjectRepository


class MongoProjectRepository(MongoRepository, ProjectRepository):
    collection_name = "projects"
    references = ("manager_id", "assigned_labourers")
    sort = [("created_at", DESCENDING)]

    def _model(self, doc) -> Project:
        return Project.from_document(doc)
