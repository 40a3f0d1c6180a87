from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import g, request

from ..core.constants import ACCESS_TOKEN_COOKIE
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .model import CurrentUser
from .service import AuthService


def bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        token = header[len("Bearer "):].strip()
        if token:
            return token
    return request.cookies.get(ACCESS_TOKEN_COOKIE) or None


def auth_required(auth: AuthService, *roles: Role):
    """Require a valid access token and, when given, one of `roles`.

    The resolved caller is available as `flask.g.current_user`.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            token = bearer_token()
            if not token:
                raise AuthenticationError("Unauthorized request")
            user = auth.verify(token)
            AuthService.authorize(user, roles)
            g.current_user = user
            return view(*args, **kwargs)

        return wrapper

    return decorator


def current_user() -> CurrentUser:
    return g.current_user
