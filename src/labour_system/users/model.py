from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from ..common.datetime_utils import isoformat
from ..core.enums import Role


@dataclass(frozen=True)
class User:
    id: str
    name: str
    username: str
    email: str
    password_hash: str
    phone: str
    role: Role
    refresh_token: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "User":
        return cls(
            id=doc["id"],
            name=doc.get("name", ""),
            username=doc["username"],
            email=doc.get("email", ""),
            password_hash=doc.get("password_hash", ""),
            phone=doc.get("phone", ""),
            role=Role(doc.get("role", Role.LABOURER.value)),
            refresh_token=doc.get("refresh_token"),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        # password hash and refresh token never leave the service
        return {
            "id": self.id,
            "name": self.name,
            "username": self.username,
            "email": self.email,
            "phone": self.phone,
            "role": self.role.value,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }

    def summary(self) -> Dict[str, Any]:
        return {"id": self.id, "username": self.username, "email": self.email}


@dataclass(frozen=True)
class CurrentUser:
    """Authenticated caller resolved from an access token."""

    user_id: str
    role: Role
    username: str = ""


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
