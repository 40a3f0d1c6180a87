from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from ..common.datetime_utils import isoformat
from ..core.enums import Lifecycle, NotificationStatus, NotificationType


@dataclass(frozen=True)
class Notification:
    id: str
    user_id: str
    message: str
    type: NotificationType
    status: NotificationStatus
    lifecycle: Lifecycle = Lifecycle.ACTIVE
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_deleted(self) -> bool:
        return self.lifecycle == Lifecycle.DELETED

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Notification":
        return cls(
            id=doc["id"],
            user_id=doc["user_id"],
            message=doc.get("message", ""),
            type=NotificationType(doc["type"]),
            status=NotificationStatus(doc["status"]),
            lifecycle=Lifecycle(doc.get("lifecycle", Lifecycle.ACTIVE.value)),
            deleted_at=doc.get("deleted_at"),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "message": self.message,
            "type": self.type.value,
            "status": self.status.value,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
