from __future__ import annotations

from enum import Enum
from typing import List


class ValueEnum(str, Enum):
    """String enum with helpers for request parsing."""

    @classmethod
    def values(cls) -> List[str]:
        return [m.value for m in cls]


class Role(ValueEnum):
    """User roles used for authorization."""

    ADMIN = "admin"
    MANAGER = "manager"
    LABOURER = "labourer"


class Gender(ValueEnum):
    MALE = "male"
    FEMALE = "female"
    OTHERS = "others"


class LabourerStatus(ValueEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class ProjectStatus(ValueEnum):
    ACTIVE = "active"
    COMPLETED = "completed"
    PENDING = "pending"
    CANCELLED = "cancelled"
    ARCHIVED = "archived"


class Shift(ValueEnum):
    MORNING = "morning"
    EVENING = "evening"
    NIGHT = "night"


class AttendanceStatus(ValueEnum):
    """Attendance marks stored per labourer, project, date and shift."""

    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half-day"


class LeaveStatus(ValueEnum):
    """Leave approval flow: pending -> approved | rejected."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class SalaryStatus(ValueEnum):
    PENDING = "pending"
    PAID = "paid"


class NotificationType(ValueEnum):
    EMAIL = "email"
    SMS = "sms"


class NotificationStatus(ValueEnum):
    SENT = "sent"
    FAILED = "failed"
    READ = "read"


class Lifecycle(ValueEnum):
    """Soft-delete state. Deleted documents are hidden from listings."""

    ACTIVE = "active"
    DELETED = "deleted"
