from __future__ import annotations

from flask import Flask, current_app, jsonify, request

from ..common.web import json_body, ok, paged, query_params
from ..container import Container
from ..core.constants import ACCESS_TOKEN_COOKIE, API_PREFIX, REFRESH_TOKEN_COOKIE
from ..core.enums import Role
from .guards import auth_required, current_user
from .service import AuthResult

PREFIX = f"{API_PREFIX}/users"


def _with_auth_cookies(response, result: AuthResult):
    secure = bool(current_app.config.get("COOKIE_SECURE", False))
    response.set_cookie(ACCESS_TOKEN_COOKIE, result.tokens.access_token, httponly=True, secure=secure, samesite="Lax")
    response.set_cookie(REFRESH_TOKEN_COOKIE, result.tokens.refresh_token, httponly=True, secure=secure, samesite="Lax")
    return response


def register(app: Flask, container: Container) -> None:
    login_required = auth_required(container.auth_service)
    admin_required = auth_required(container.auth_service, Role.ADMIN)

    @app.route(f"{PREFIX}/register", methods=["POST"], endpoint="users_register")
    def register_user():
        result = container.auth_service.register(json_body())
        response = jsonify({"success": True, "message": "User registered successfully", "data": result.to_dict()})
        response.status_code = 201
        return _with_auth_cookies(response, result)

    @app.route(f"{PREFIX}/login", methods=["POST"], endpoint="users_login")
    def login():
        body = json_body()
        identifier = body.get("username") or body.get("email")
        result = container.auth_service.authenticate(identifier, body.get("password"))
        response = jsonify({"success": True, "message": "User logged in successfully", "data": result.to_dict()})
        return _with_auth_cookies(response, result)

    @app.route(f"{PREFIX}/logout", methods=["POST"], endpoint="users_logout")
    @login_required
    def logout():
        container.auth_service.logout(current_user().user_id)
        response = jsonify({"success": True, "message": "User logged out"})
        response.delete_cookie(ACCESS_TOKEN_COOKIE)
        response.delete_cookie(REFRESH_TOKEN_COOKIE)
        return response

    @app.route(f"{PREFIX}/refresh-token", methods=["POST"], endpoint="users_refresh_token")
    def refresh_token():
        token = request.cookies.get(REFRESH_TOKEN_COOKIE) or json_body().get("refreshToken")
        result = container.auth_service.refresh(token)
        response = jsonify({"success": True, "message": "Access token refreshed", "data": result.to_dict()})
        return _with_auth_cookies(response, result)

    @app.route(f"{PREFIX}/me", methods=["GET"], endpoint="users_me")
    @login_required
    def me():
        return ok(container.user_service.get(current_user().user_id).to_dict())

    @app.route(f"{PREFIX}/me", methods=["PATCH"], endpoint="users_update_me")
    @login_required
    def update_me():
        user = container.user_service.update_profile(user_id=current_user().user_id, payload=json_body())
        return ok(user.to_dict(), message="Profile updated")

    @app.route(f"{PREFIX}/change-password", methods=["POST"], endpoint="users_change_password")
    @login_required
    def change_password():
        body = json_body()
        container.user_service.change_password(
            user_id=current_user().user_id,
            old_password=body.get("oldPassword"),
            new_password=body.get("newPassword"),
        )
        return ok(message="Password changed successfully")

    @app.route(f"{PREFIX}", methods=["GET"], endpoint="users_list")
    @admin_required
    def list_users():
        return paged(container.user_service.list_users(query_params()))

    @app.route(f"{PREFIX}/role", methods=["PATCH"], endpoint="users_update_role")
    @admin_required
    def update_role():
        body = json_body()
        user = container.user_service.update_role(user_id=body.get("userId"), new_role=body.get("newRole"))
        return ok(user.to_dict(), message="User role updated")

    @app.route(f"{PREFIX}/<user_id>", methods=["DELETE"], endpoint="users_delete")
    @admin_required
    def delete_user(user_id: str):
        container.user_service.delete_user(current=current_user(), user_id=user_id)
        return ok(message="User deleted")
