from __future__ import annotations

from pymongo import DESCENDING

from ..database.mongo_base import MongoRepository
from .model import Salary
from .repository import SalaryRepository


class MongoSalaryRepository(MongoRepository, SalaryRepository):
    collection_name = "salaries"
    references = ("labourer_id",)
    sort = [("start_period", DESCENDING), ("end_period", DESCENDING)]
    duplicate_message = "Salary record for this labourer and period already exists"

    def _model(self, doc) -> Salary:
        return Salary.from_document(doc)
