from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from ..common.datetime_utils import isoformat
from ..core.enums import Gender, LabourerStatus


@dataclass(frozen=True)
class Labourer:
    id: str
    full_name: str
    age: int
    gender: Gender
    contact_number: str
    address: str
    skill_type: str
    status: LabourerStatus
    user_id: Optional[str] = None
    assigned_project_id: Optional[str] = None
    joining_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Labourer":
        return cls(
            id=doc["id"],
            full_name=doc["full_name"],
            age=int(doc.get("age", 0)),
            gender=Gender(doc["gender"]),
            contact_number=doc.get("contact_number", ""),
            address=doc.get("address", ""),
            skill_type=doc.get("skill_type", ""),
            status=LabourerStatus(doc.get("status", LabourerStatus.INACTIVE.value)),
            user_id=doc.get("user_id"),
            assigned_project_id=doc.get("assigned_project_id"),
            joining_date=doc.get("joining_date"),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "fullName": self.full_name,
            "age": self.age,
            "gender": self.gender.value,
            "contactNumber": self.contact_number,
            "address": self.address,
            "assignedProjectId": self.assigned_project_id,
            "joiningDate": isoformat(self.joining_date),
            "skillType": self.skill_type,
            "status": self.status.value,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }

    def summary(self) -> Dict[str, Any]:
        return {"id": self.id, "fullName": self.full_name, "contactNumber": self.contact_number}
