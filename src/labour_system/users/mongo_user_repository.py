from __future__ import annotations

from typing import Optional

from pymongo import DESCENDING

from ..common.filters import FilterBuilder
from ..database.mongo_base import MongoRepository
from .model import User
from .repository import UserRepository


class MongoUserRepository(MongoRepository, UserRepository):
    collection_name = "users"
    sort = [("created_at", DESCENDING)]
    duplicate_message = "Username or email already exists"

    def _model(self, doc) -> User:
        return User.from_document(doc)

    def get_by_username(self, username: str) -> Optional[User]:
        return self.find_one(FilterBuilder().where("username", username.lower()).build())

    def get_by_email(self, email: str) -> Optional[User]:
        return self.find_one(FilterBuilder().where("email", email.lower()).build())
