from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from ..common.datetime_utils import isoformat
from ..core.enums import AttendanceStatus, Shift


@dataclass(frozen=True)
class Attendance:
    id: str
    labourer_id: str
    project_id: str
    date: datetime
    shift: Shift
    status: AttendanceStatus
    marked_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Attendance":
        return cls(
            id=doc["id"],
            labourer_id=doc["labourer_id"],
            project_id=doc["project_id"],
            date=doc["date"],
            shift=Shift(doc["shift"]),
            status=AttendanceStatus(doc["status"]),
            marked_by=doc.get("marked_by"),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "labourerId": self.labourer_id,
            "projectId": self.project_id,
            "date": isoformat(self.date),
            "shift": self.shift.value,
            "status": self.status.value,
            "markedBy": self.marked_by,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }


@dataclass(frozen=True)
class FailedEntry:
    """One rejected bulk entry, reported by its position in the request."""

    index: int
    error: str
    record: Any

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "error": self.error, "record": self.record}


@dataclass(frozen=True)
class BulkReport:
    inserted_count: int
    failed: List[FailedEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "insertedCount": self.inserted_count,
            "failedCount": len(self.failed),
            "failedRecords": [f.to_dict() for f in self.failed],
        }
