from __future__ import annotations

from ..database.mongo_base import MongoRepository
from .model import Notification
from .repository import NotificationRepository


class MongoNotificationRepository(MongoRepository, NotificationRepository):
    collection_name = "notifications"
    references = ("user_id",)

    def _model(self, doc) -> Notification:
        return Notification.from_document(doc)
