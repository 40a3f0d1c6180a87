from __future__ import annotations

from flask import Flask

from ..common.web import json_body, ok, paged, query_params
from ..container import Container
from ..core.constants import API_PREFIX
from ..core.enums import Role
from ..users.guards import auth_required, current_user

PREFIX = f"{API_PREFIX}/leave"


def register(app: Flask, container: Container) -> None:
    login_required = auth_required(container.auth_service)
    labourer_required = auth_required(container.auth_service, Role.LABOURER)
    staff_required = auth_required(container.auth_service, Role.ADMIN, Role.MANAGER)
    service = container.leave_service

    @app.route(f"{PREFIX}/apply", methods=["POST"], endpoint="leave_apply")
    @labourer_required
    def apply_for_leave():
        return ok(service.apply(json_body(), current=current_user()), message="Leave request submitted", status=201)

    @app.route(PREFIX, methods=["GET"], endpoint="leave_list")
    @staff_required
    def list_leave_requests():
        return paged(service.list(query_params()))

    @app.route(f"{PREFIX}/labourer/<labourer_id>", methods=["GET"], endpoint="leave_by_labourer")
    @login_required
    def leave_by_labourer(labourer_id: str):
        return paged(service.list_by_labourer(labourer_id, query_params()))

    @app.route(f"{PREFIX}/<leave_id>", methods=["GET"], endpoint="leave_get")
    @login_required
    def get_leave(leave_id: str):
        return ok(service.get(leave_id))

    @app.route(f"{PREFIX}/<leave_id>/approve", methods=["PATCH"], endpoint="leave_approve")
    @staff_required
    def approve_leave(leave_id: str):
        leave = service.approve(
            leave_id,
            reviewer_id=current_user().user_id,
            reviewed_by=json_body().get("reviewedBy"),
        )
        return ok(leave, message="Leave request approved")

    @app.route(f"{PREFIX}/<leave_id>/reject", methods=["PATCH"], endpoint="leave_reject")
    @staff_required
    def reject_leave(leave_id: str):
        leave = service.reject(
            leave_id,
            reviewer_id=current_user().user_id,
            reviewed_by=json_body().get("reviewedBy"),
        )
        return ok(leave, message="Leave request rejected")

    @app.route(f"{PREFIX}/<leave_id>/cancel", methods=["DELETE"], endpoint="leave_cancel")
    @labourer_required
    def cancel_leave(leave_id: str):
        service.cancel(leave_id, current=current_user())
        return ok(message="Leave request cancelled successfully")

    @app.route(f"{PREFIX}/<leave_id>/remark", methods=["PUT"], endpoint="leave_remark")
    @staff_required
    def add_remark(leave_id: str):
        return ok(service.add_remark(leave_id, json_body().get("remark")), message="Remark added")
