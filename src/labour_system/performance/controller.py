from __future__ import annotations

from flask import Flask

from ..common.web import json_body, ok, paged, query_params
from ..container import Container
from ..core.constants import API_PREFIX
from ..core.enums import Role
from ..users.guards import auth_required

PREFIX = f"{API_PREFIX}/performance"


def register(app: Flask, container: Container) -> None:
    login_required = auth_required(container.auth_service)
    staff_required = auth_required(container.auth_service, Role.ADMIN, Role.MANAGER)
    admin_required = auth_required(container.auth_service, Role.ADMIN)
    service = container.performance_service

    @app.route(PREFIX, methods=["POST"], endpoint="performance_create")
    @staff_required
    def create_performance_record():
        return ok(service.create(json_body()), message="Performance record created", status=201)

    @app.route(PREFIX, methods=["GET"], endpoint="performance_list")
    @login_required
    def list_performance_records():
        return paged(service.list(query_params()))

    @app.route(f"{PREFIX}/labourer/<labourer_id>", methods=["GET"], endpoint="performance_by_labourer")
    @login_required
    def performance_by_labourer(labourer_id: str):
        return paged(service.list_by_labourer(labourer_id, query_params()))

    @app.route(f"{PREFIX}/project/<project_id>", methods=["GET"], endpoint="performance_by_project")
    @login_required
    def performance_by_project(project_id: str):
        return paged(service.list_by_project(project_id, query_params()))

    @app.route(f"{PREFIX}/<record_id>", methods=["GET"], endpoint="performance_get")
    @login_required
    def get_performance_record(record_id: str):
        return ok(service.get(record_id))

    @app.route(f"{PREFIX}/<record_id>", methods=["PUT"], endpoint="performance_update")
    @staff_required
    def update_performance_record(record_id: str):
        return ok(service.update(record_id, json_body()), message="Performance record updated")

    @app.route(f"{PREFIX}/<record_id>", methods=["DELETE"], endpoint="performance_delete")
    @admin_required
    def delete_performance_record(record_id: str):
        service.delete(record_id)
        return ok(message="Performance record deleted successfully")
