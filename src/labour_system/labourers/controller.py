from __future__ import annotations

from flask import Flask

from ..common.web import json_body, ok, paged, query_params
from ..container import Container
from ..core.constants import API_PREFIX
from ..core.enums import Role
from ..users.guards import auth_required

PREFIX = f"{API_PREFIX}/labourers"


def register(app: Flask, container: Container) -> None:
    login_required = auth_required(container.auth_service)
    staff_required = auth_required(container.auth_service, Role.ADMIN, Role.MANAGER)
    admin_required = auth_required(container.auth_service, Role.ADMIN)
    service = container.labourer_service

    @app.route(PREFIX, methods=["POST"], endpoint="labourers_create")
    @staff_required
    def create_labourer():
        return ok(service.create(json_body()), message="Labourer created successfully", status=201)

    @app.route(PREFIX, methods=["GET"], endpoint="labourers_list")
    @login_required
    def list_labourers():
        return paged(service.list(query_params()))

    @app.route(f"{PREFIX}/search", methods=["GET"], endpoint="labourers_search")
    @login_required
    def search_labourers():
        return paged(service.search(query_params()))

    @app.route(f"{PREFIX}/project/<project_id>", methods=["GET"], endpoint="labourers_by_project")
    @login_required
    def labourers_by_project(project_id: str):
        labourers = service.list_by_project(project_id)
        return ok(labourers, count=len(labourers))

    @app.route(f"{PREFIX}/<labourer_id>", methods=["GET"], endpoint="labourers_get")
    @login_required
    def get_labourer(labourer_id: str):
        return ok(service.get(labourer_id))

    @app.route(f"{PREFIX}/<labourer_id>", methods=["PUT"], endpoint="labourers_update")
    @staff_required
    def update_labourer(labourer_id: str):
        return ok(service.update(labourer_id, json_body()), message="Labourer updated successfully")

    @app.route(f"{PREFIX}/<labourer_id>/status", methods=["PATCH"], endpoint="labourers_status")
    @staff_required
    def change_labourer_status(labourer_id: str):
        return ok(service.change_status(labourer_id, json_body().get("status")), message="Labourer status updated")

    @app.route(f"{PREFIX}/<labourer_id>/assign-project", methods=["PATCH"], endpoint="labourers_assign_project")
    @staff_required
    def assign_project(labourer_id: str):
        labourer = service.assign_project(labourer_id, json_body().get("projectId"))
        return ok(labourer, message="Project assignment updated")

    @app.route(f"{PREFIX}/<labourer_id>", methods=["DELETE"], endpoint="labourers_delete")
    @admin_required
    def delete_labourer(labourer_id: str):
        service.delete(labourer_id)
        return ok(message="Labourer deleted successfully")

    @app.route(f"{PREFIX}/<labourer_id>/attendance-summary", methods=["GET"], endpoint="labourers_attendance_summary")
    @login_required
    def labourer_attendance_summary(labourer_id: str):
        return ok(service.attendance_summary(labourer_id, query_params()))
