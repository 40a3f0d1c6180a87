from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from ..common.datetime_utils import isoformat


@dataclass(frozen=True)
class PerformanceRecord:
    id: str
    labourer_id: str
    project_id: str
    date: datetime
    performance_score: float
    remarks: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "PerformanceRecord":
        return cls(
            id=doc["id"],
            labourer_id=doc["labourer_id"],
            project_id=doc["project_id"],
            date=doc["date"],
            performance_score=doc["performance_score"],
            remarks=doc.get("remarks", ""),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "labourerId": self.labourer_id,
            "projectId": self.project_id,
            "date": isoformat(self.date),
            "performanceScore": self.performance_score,
            "remarks": self.remarks,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
