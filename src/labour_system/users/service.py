from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.filters import FilterBuilder
from ..common.pagination import Page, PageRequest
from ..common.validators import (
    optional_text,
    require_enum,
    require_identifier,
    require_min_length,
    require_non_empty,
)
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from .model import CurrentUser, TokenPair, User
from .repository import UserRepository
from .tokens import ACCESS, REFRESH, TokenService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    user: User
    tokens: TokenPair

    def to_dict(self) -> dict:
        return {
            "user": self.user.to_dict(),
            "accessToken": self.tokens.access_token,
            "refreshToken": self.tokens.refresh_token,
            "userId": self.user.id,
            "role": self.user.role.value,
        }


def _password_matches(password_hash: str, password: Any) -> bool:
    if not isinstance(password, str):
        return False
    try:
        return check_password_hash(password_hash, password)
    except (TypeError, ValueError):
        # placeholder or corrupted hashes
        return False


def _require_email(value: Any) -> str:
    email = require_non_empty(value, "email").lower()
    local, _, domain = email.partition("@")
    if not local or "." not in domain:
        raise ValidationError("email is invalid")
    return email


class AuthService:
    """Use cases: register, login, token verification and rotation."""

    def __init__(self, users: UserRepository, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    def _issue(self, user: User) -> AuthResult:
        tokens = self._tokens.issue(user)
        self._users.update(user.id, {"refresh_token": tokens.refresh_token})
        return AuthResult(user=user, tokens=tokens)

    def register(self, payload: Mapping[str, Any]) -> AuthResult:
        name = require_non_empty(payload.get("name"), "name")
        username = require_non_empty(payload.get("username"), "username").lower()
        email = _require_email(payload.get("email"))
        password = require_min_length(payload.get("password"), "password", MIN_PASSWORD_LENGTH)
        phone = require_non_empty(payload.get("phone"), "phone")
        role = Role.LABOURER
        if payload.get("role"):
            role = require_enum(payload.get("role"), Role, "role")
        if role == Role.ADMIN:
            raise ValidationError("Admin accounts cannot be self-registered")

        if self._users.get_by_username(username) or self._users.get_by_email(email):
            raise ConflictError("User with email or username already exists")

        user_id = self._users.create(
            {
                "name": name,
                "username": username,
                "email": email,
                "password_hash": generate_password_hash(password),
                "phone": phone,
                "role": role,
                "refresh_token": None,
            }
        )
        user = self._users.get_by_id(user_id)
        logger.info("registered user %s (%s)", username, role.value)
        return self._issue(user)

    def authenticate(self, identifier: Any, password: Any) -> AuthResult:
        """Login with username or email."""
        login = require_non_empty(identifier, "username or email").lower()
        user = self._users.get_by_username(login) or self._users.get_by_email(login)
        if not user or not _password_matches(user.password_hash, password):
            logger.warning("failed login for %s", login)
            raise AuthenticationError("Invalid user credentials")
        logger.info("user %s logged in", user.username)
        return self._issue(user)

    def verify(self, token: str) -> CurrentUser:
        payload = self._tokens.decode(token, ACCESS)
        user = self._users.get_by_id(str(payload["sub"]))
        if not user:
            raise AuthenticationError("Invalid access token")
        return CurrentUser(user_id=user.id, role=user.role, username=user.username)

    def refresh(self, refresh_token: Any) -> AuthResult:
        if not isinstance(refresh_token, str) or not refresh_token:
            raise AuthenticationError("Unauthorized request")
        payload = self._tokens.decode(refresh_token, REFRESH)
        user = self._users.get_by_id(str(payload["sub"]))
        if not user:
            raise AuthenticationError("Invalid refresh token")
        if user.refresh_token != refresh_token:
            raise AuthenticationError("Refresh token is expired or used")
        return self._issue(user)

    def logout(self, user_id: str) -> None:
        self._users.update(user_id, {"refresh_token": None})
        logger.info("user %s logged out", user_id)

    @staticmethod
    def authorize(user: CurrentUser, roles: Iterable[Role]) -> None:
        roles = tuple(roles)
        if roles and user.role not in roles:
            raise AuthorizationError("You do not have permission to perform this action")


class UserService:
    """Use cases: profile management and admin user management."""

    def __init__(self, users: UserRepository):
        self._users = users

    def get(self, user_id: str) -> User:
        user = self._users.get_by_id(require_identifier(user_id, "userId"))
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_profile(self, *, user_id: str, payload: Mapping[str, Any]) -> User:
        user = self.get(user_id)
        changes = {}
        name = optional_text(payload.get("name"), "name")
        if name:
            changes["name"] = name
        phone = optional_text(payload.get("phone"), "phone")
        if phone:
            changes["phone"] = phone
        username = optional_text(payload.get("username"), "username")
        if username and username.lower() != user.username:
            if self._users.get_by_username(username):
                raise ConflictError("Username already taken")
            changes["username"] = username.lower()
        if not changes:
            raise ValidationError("Nothing to update")
        return self._users.update(user.id, changes)

    def change_password(self, *, user_id: str, old_password: Any, new_password: Any) -> None:
        user = self.get(user_id)
        if not _password_matches(user.password_hash, old_password):
            raise ValidationError("Invalid old password")
        new_password = require_min_length(new_password, "newPassword", MIN_PASSWORD_LENGTH)
        self._users.update(user.id, {"password_hash": generate_password_hash(new_password)})
        logger.info("user %s changed password", user.username)

    def list_users(self, params: Mapping[str, Any]) -> Page:
        predicate = FilterBuilder(params).enum("role", Role, "role").contains("username", "username").build()
        return self._users.list_page(predicate, PageRequest.from_params(params)).map(User.to_dict)

    def update_role(self, *, user_id: Any, new_role: Any) -> User:
        user_id = require_identifier(user_id, "userId")
        role = require_enum(new_role, Role, "newRole")
        updated = self._users.update(user_id, {"role": role})
        if not updated:
            raise NotFoundError("User not found")
        logger.info("user %s role changed to %s", updated.username, role.value)
        return updated

    def delete_user(self, *, current: CurrentUser, user_id: Any) -> None:
        user_id = require_identifier(user_id, "userId")
        if user_id == current.user_id:
            raise ValidationError("You cannot delete your own account")
        if not self._users.delete(user_id):
            raise NotFoundError("User not found")
        logger.info("user %s deleted by %s", user_id, current.username)

