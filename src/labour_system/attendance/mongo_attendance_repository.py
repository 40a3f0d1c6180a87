from __future__ import annotations

from pymongo import DESCENDING

from ..database.mongo_base import MongoRepository
from .model import Attendance
from .repository import AttendanceRepository


class MongoAttendanceRepository(MongoRepository, AttendanceRepository):
    collection_name = "attendance"
    references = ("labourer_id", "project_id", "marked_by")
    sort = [("date", DESCENDING), ("created_at", DESCENDING)]
    duplicate_message = "Attendance already marked for this labourer, project, date, and shift"

    def _model(self, doc) -> Attendance:
        return Attendance.from_document(doc)
