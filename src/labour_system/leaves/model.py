from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from ..common.datetime_utils import isoformat
from ..core.enums import LeaveStatus


@dataclass(frozen=True)
class LeaveRequest:
    id: str
    labourer_id: str
    from_date: datetime
    to_date: datetime
    reason: str
    status: LeaveStatus
    applied_on: datetime
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    remarks: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "LeaveRequest":
        return cls(
            id=doc["id"],
            labourer_id=doc["labourer_id"],
            from_date=doc["from_date"],
            to_date=doc["to_date"],
            reason=doc.get("reason", ""),
            status=LeaveStatus(doc.get("status", LeaveStatus.PENDING.value)),
            applied_on=doc.get("applied_on") or doc.get("created_at"),
            reviewed_by=doc.get("reviewed_by"),
            reviewed_at=doc.get("reviewed_at"),
            remarks=doc.get("remarks"),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "labourerId": self.labourer_id,
            "fromDate": isoformat(self.from_date),
            "toDate": isoformat(self.to_date),
            "reason": self.reason,
            "status": self.status.value,
            "appliedOn": isoformat(self.applied_on),
            "reviewedBy": self.reviewed_by,
            "reviewedAt": isoformat(self.reviewed_at),
            "remarks": self.remarks,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
