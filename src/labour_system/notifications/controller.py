from __future__ import annotations

from flask import Flask

from ..common.web import json_body, ok, paged, query_params
from ..container import Container
from ..core.constants import API_PREFIX
from ..core.enums import Role
from ..users.guards import auth_required, current_user

PREFIX = f"{API_PREFIX}/notifications"


def register(app: Flask, container: Container) -> None:
    login_required = auth_required(container.auth_service)
    staff_required = auth_required(container.auth_service, Role.ADMIN, Role.MANAGER)
    service = container.notification_service

    @app.route(PREFIX, methods=["POST"], endpoint="notifications_create")
    @staff_required
    def create_notification():
        return ok(service.create(json_body()), message="Notification created", status=201)

    @app.route(PREFIX, methods=["GET"], endpoint="notifications_list")
    @login_required
    def list_notifications():
        return paged(service.list(query_params()))

    @app.route(f"{PREFIX}/<notification_id>", methods=["GET"], endpoint="notifications_get")
    @login_required
    def get_notification(notification_id: str):
        return ok(service.get(notification_id))

    @app.route(f"{PREFIX}/<notification_id>/status", methods=["PATCH"], endpoint="notifications_status")
    @login_required
    def update_notification_status(notification_id: str):
        return ok(service.update_status(notification_id, json_body().get("status")), message="Notification status updated")

    @app.route(f"{PREFIX}/<notification_id>", methods=["DELETE"], endpoint="notifications_delete")
    @login_required
    def delete_notification(notification_id: str):
        service.delete(notification_id, current=current_user())
        return ok(message="Notification deleted successfully")
