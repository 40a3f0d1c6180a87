from __future__ import annotations

from flask import Flask, redirect

from ..common.web import json_body, ok, paged, query_params
from ..container import Container
from ..core.constants import API_PREFIX
from ..core.enums import Role
from ..users.guards import auth_required

PREFIX = f"{API_PREFIX}/salary"


def register(app: Flask, container: Container) -> None:
    login_required = auth_required(container.auth_service)
    staff_required = auth_required(container.auth_service, Role.ADMIN, Role.MANAGER)
    admin_required = auth_required(container.auth_service, Role.ADMIN)
    service = container.salary_service

    @app.route(PREFIX, methods=["POST"], endpoint="salary_create")
    @staff_required
    def create_salary_record():
        return ok(service.create(json_body()), message="Salary record created", status=201)

    @app.route(PREFIX, methods=["GET"], endpoint="salary_list")
    @login_required
    def list_salary_records():
        return paged(service.list(query_params()))

    @app.route(f"{PREFIX}/generate", methods=["POST"], endpoint="salary_generate")
    @staff_required
    def generate_salaries():
        result = service.generate(json_body())
        return ok(message=result.message, status=result.status_code, **result.to_dict())

    @app.route(f"{PREFIX}/summary/labourer/<labourer_id>", methods=["GET"], endpoint="salary_summary_labourer")
    @login_required
    def salary_summary_by_labourer(labourer_id: str):
        return ok(service.labourer_summary(labourer_id, query_params()))

    @app.route(f"{PREFIX}/summary/period", methods=["GET"], endpoint="salary_summary_period")
    @staff_required
    def salary_summary_by_period():
        return ok(service.period_summary(query_params()))

    @app.route(f"{PREFIX}/labourer/<labourer_id>/payslips", methods=["GET"], endpoint="salary_payslips")
    @login_required
    def payslips_for_labourer(labourer_id: str):
        return paged(service.payslips_by_labourer(labourer_id, query_params()))

    @app.route(f"{PREFIX}/<salary_id>", methods=["GET"], endpoint="salary_get")
    @login_required
    def get_salary_record(salary_id: str):
        return ok(service.get(salary_id))

    @app.route(f"{PREFIX}/<salary_id>", methods=["PUT"], endpoint="salary_update")
    @staff_required
    def update_salary_record(salary_id: str):
        return ok(service.update(salary_id, json_body()), message="Salary record updated")

    @app.route(f"{PREFIX}/<salary_id>", methods=["DELETE"], endpoint="salary_delete")
    @admin_required
    def delete_salary_record(salary_id: str):
        service.delete(salary_id)
        return ok(message="Salary record deleted successfully")

    @app.route(f"{PREFIX}/<salary_id>/mark-paid", methods=["PATCH"], endpoint="salary_mark_paid")
    @staff_required
    def mark_salary_paid(salary_id: str):
        return ok(service.mark_paid(salary_id, json_body().get("paymentDate")), message="Salary marked as paid")

    @app.route(f"{PREFIX}/<salary_id>/payslip-url", methods=["PUT"], endpoint="salary_payslip_url")
    @staff_required
    def set_payslip_url(salary_id: str):
        return ok(service.update_payslip_url(salary_id, json_body().get("payslipUrl")), message="Payslip URL updated")

    @app.route(f"{PREFIX}/<salary_id>/download-payslip", methods=["GET"], endpoint="salary_download_payslip")
    @login_required
    def download_payslip(salary_id: str):
        return redirect(service.payslip_url(salary_id), code=302)
