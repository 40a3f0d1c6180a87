from __future__ import annotations

import logging
from typing import Any, Dict, Mapping

from ..common.datetime_utils import now_utc
from ..common.filters import FilterBuilder
from ..common.pagination import Page, PageRequest
from ..common.validators import require_enum, require_found, require_identifier, require_non_empty
from ..core.enums import Lifecycle, NotificationStatus, NotificationType, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..users.model import CurrentUser
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)

# "read" is only reachable through a status update.
CREATE_STATUSES = (NotificationStatus.SENT, NotificationStatus.FAILED)

NOT_DELETED = FilterBuilder().where_not("lifecycle", Lifecycle.DELETED.value).build()


class NotificationService:
    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def _require(self, notification_id: Any) -> Notification:
        notification_id = require_identifier(notification_id, "notification ID")
        notification = self._notifications.get_by_id(notification_id)
        if notification is not None and notification.is_deleted:
            notification = None
        return require_found(notification, "Notification not found")

    def create(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        if any(payload.get(key) in (None, "") for key in ("userId", "message", "type", "status")):
            raise ValidationError("userId, message, type, and status are required")
        status = require_enum(payload["status"], NotificationStatus, "status")
        if status not in CREATE_STATUSES:
            raise ValidationError("status must be one of: " + ", ".join(s.value for s in CREATE_STATUSES))

        notification_id = self._notifications.create(
            {
                "user_id": require_identifier(payload["userId"], "userId"),
                "message": require_non_empty(payload["message"], "message"),
                "type": require_enum(payload["type"], NotificationType, "type"),
                "status": status,
                "lifecycle": Lifecycle.ACTIVE,
                "deleted_at": None,
            }
        )
        logger.info("notification %s created (%s)", notification_id, status.value)
        return self.get(notification_id)

    def get(self, notification_id: Any) -> Dict[str, Any]:
        return self._require(notification_id).to_dict()

    def list(self, params: Mapping[str, Any]) -> Page:
        builder = FilterBuilder(params)
        if params.get("userId"):
            builder.identifier("userId", "user_id")
        else:
            builder.identifiers("userIds", "user_id")
        predicate = (
            builder.enum("type", NotificationType, "type")
            .enum("status", NotificationStatus, "status")
            .date_range("startDate", "endDate", "created_at")
            .where_not("lifecycle", Lifecycle.DELETED.value)
            .build()
        )
        page = self._notifications.list_page(predicate, PageRequest.from_params(params))
        return page.map(lambda n: n.to_dict())

    def update_status(self, notification_id: Any, status: Any) -> Dict[str, Any]:
        notification = self._require(notification_id)
        if status in (None, ""):
            raise ValidationError("status is required and must be one of: " + ", ".join(NotificationStatus.values()))
        new_status = require_enum(status, NotificationStatus, "status")
        self._notifications.update(notification.id, {"status": new_status})
        return self.get(notification.id)

    def delete(self, notification_id: Any, *, current: CurrentUser) -> None:
        """Soft delete; allowed for the recipient and for admins."""
        notification = self._require(notification_id)
        if notification.user_id != current.user_id and current.role != Role.ADMIN:
            raise AuthorizationError("Not authorized to delete this notification")
        self._notifications.update(
            notification.id,
            {"lifecycle": Lifecycle.DELETED, "deleted_at": now_utc()},
            guard=NOT_DELETED,
        )
        logger.info("notification %s deleted by %s", notification.id, current.user_id)
