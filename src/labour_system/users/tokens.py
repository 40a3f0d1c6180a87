from __future__ import annotations

import logging
import uuid
from datetime import timedelta
from typing import Any, Dict

import jwt

from ..common.datetime_utils import now_utc
from ..core.exceptions import AuthenticationError
from .model import TokenPair, User

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ACCESS = "access"
REFRESH = "refresh"


class TokenService:
    """Issues and verifies HS256 access/refresh tokens."""

    def __init__(self, secret: str, *, access_minutes: int, refresh_days: int):
        self._secret = secret
        self._access_ttl = timedelta(minutes=access_minutes)
        self._refresh_ttl = timedelta(days=refresh_days)

    def _encode(self, user: User, token_type: str, ttl: timedelta) -> str:
        now = now_utc()
        payload = {
            "sub": user.id,
            "role": user.role.value,
            "username": user.username,
            "type": token_type,
            "iat": now,
            "exp": now + ttl,
            # distinct tokens even when issued within the same second
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def issue(self, user: User) -> TokenPair:
        return TokenPair(
            access_token=self._encode(user, ACCESS, self._access_ttl),
            refresh_token=self._encode(user, REFRESH, self._refresh_ttl),
        )

    def decode(self, token: str, expected_type: str) -> Dict[str, Any]:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token expired")
        except jwt.InvalidTokenError as exc:
            logger.info("rejected token: %s", exc)
            raise AuthenticationError("Invalid token")
        if payload.get("type") != expected_type or not payload.get("sub"):
            raise AuthenticationError("Invalid token")
        return payload
