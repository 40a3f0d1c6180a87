from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from ..common.datetime_utils import isoformat
from ..core.enums import ProjectStatus


@dataclass(frozen=True)
class Project:
    id: str
    name: str
    description: str
    location: str
    status: ProjectStatus
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    manager_id: Optional[str] = None
    assigned_labourers: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Project":
        return cls(
            id=doc["id"],
            name=doc["name"],
            description=doc.get("description", ""),
            location=doc.get("location", ""),
            status=ProjectStatus(doc.get("status", ProjectStatus.PENDING.value)),
            start_date=doc.get("start_date"),
            end_date=doc.get("end_date"),
            manager_id=doc.get("manager_id"),
            assigned_labourers=list(doc.get("assigned_labourers") or []),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "location": self.location,
            "status": self.status.value,
            "startDate": isoformat(self.start_date),
            "endDate": isoformat(self.end_date),
            "managerId": self.manager_id,
            "assignedLabourers": list(self.assigned_labourers),
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }

    def summary(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "location": self.location}
