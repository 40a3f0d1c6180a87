from __future__ import annotations

from flask import Flask

from ..common.web import json_body, ok, paged, query_params
from ..container import Container
from ..core.constants import API_PREFIX
from ..core.enums import Role
from ..users.guards import auth_required

PREFIX = f"{API_PREFIX}/projects"


def register(app: Flask, container: Container) -> None:
    login_required = auth_required(container.auth_service)
    staff_required = auth_required(container.auth_service, Role.ADMIN, Role.MANAGER)
    admin_required = auth_required(container.auth_service, Role.ADMIN)
    service = container.project_service

    @app.route(PREFIX, methods=["POST"], endpoint="projects_create")
    @staff_required
    def create_project():
        return ok(service.create(json_body()), message="Project created successfully", status=201)

    @app.route(PREFIX, methods=["GET"], endpoint="projects_list")
    @login_required
    def list_projects():
        return paged(service.list(query_params()))

    @app.route(f"{PREFIX}/search", methods=["GET"], endpoint="projects_search")
    @login_required
    def search_projects():
        return paged(service.search(query_params()))

    @app.route(f"{PREFIX}/manager/<manager_id>", methods=["GET"], endpoint="projects_by_manager")
    @login_required
    def projects_by_manager(manager_id: str):
        return paged(service.list_by_manager(manager_id, query_params()))

    @app.route(f"{PREFIX}/labourer/<labourer_id>", methods=["GET"], endpoint="projects_by_labourer")
    @login_required
    def projects_by_labourer(labourer_id: str):
        return paged(service.list_by_labourer(labourer_id, query_params()))

    @app.route(f"{PREFIX}/<project_id>", methods=["GET"], endpoint="projects_get")
    @login_required
    def get_project(project_id: str):
        return ok(service.get(project_id))

    @app.route(f"{PREFIX}/<project_id>", methods=["PUT"], endpoint="projects_update")
    @staff_required
    def update_project(project_id: str):
        return ok(service.update(project_id, json_body()), message="Project updated successfully")

    @app.route(f"{PREFIX}/<project_id>/labourers", methods=["PATCH"], endpoint="projects_assign_labourers")
    @staff_required
    def assign_labourers(project_id: str):
        project = service.assign_labourers(project_id, json_body().get("assignedLabourers"))
        return ok(project, message="Labourers assigned successfully")

    @app.route(f"{PREFIX}/<project_id>/manager", methods=["PATCH"], endpoint="projects_change_manager")
    @staff_required
    def change_manager(project_id: str):
        return ok(service.change_manager(project_id, json_body().get("managerId")), message="Project manager updated")

    @app.route(f"{PREFIX}/<project_id>/status", methods=["PATCH"], endpoint="projects_status")
    @staff_required
    def change_project_status(project_id: str):
        return ok(service.change_status(project_id, json_body().get("status")), message="Project status updated")

    @app.route(f"{PREFIX}/<project_id>", methods=["DELETE"], endpoint="projects_delete")
    @admin_required
    def delete_project(project_id: str):
        outcome = service.delete_or_archive(project_id, json_body().get("action"))
        return ok(message=f"Project {outcome} successfully")
