from __future__ import annotations

import csv
import io

from flask import Flask

from ..common.datetime_utils import now_utc
from ..common.web import json_body, ok, paged, query_params
from ..container import Container
from ..core.constants import API_PREFIX
from ..core.enums import Role
from ..users.guards import auth_required, current_user
from .service import EXPORT_COLUMNS

PREFIX = f"{API_PREFIX}/attendance"


def register(app: Flask, container: Container) -> None:
    login_required = auth_required(container.auth_service)
    staff_required = auth_required(container.auth_service, Role.ADMIN, Role.MANAGER)
    admin_required = auth_required(container.auth_service, Role.ADMIN)
    service = container.attendance_service

    def _write_csv(*, rows, filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=EXPORT_COLUMNS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route(PREFIX, methods=["POST"], endpoint="attendance_mark")
    @staff_required
    def mark_attendance():
        record = service.mark(json_body(), marked_by=current_user().user_id)
        return ok(record, message="Attendance marked", status=201)

    @app.route(f"{PREFIX}/bulk", methods=["POST"], endpoint="attendance_bulk")
    @staff_required
    def bulk_add_attendance():
        report = service.bulk_add(json_body().get("attendanceRecords"), marked_by=current_user().user_id)
        return ok(message="Bulk attendance insert complete", status=201, **report.to_dict())

    @app.route(f"{PREFIX}/download", methods=["GET"], endpoint="attendance_download")
    @staff_required
    def download_attendance():
        rows = service.export_rows(query_params())
        filename = f"attendance_export_{now_utc().strftime('%Y%m%d%H%M%S')}.csv"
        return _write_csv(rows=rows, filename=filename)

    @app.route(f"{PREFIX}/dashboard/stats", methods=["GET"], endpoint="attendance_dashboard")
    @staff_required
    def dashboard_stats():
        return ok(service.dashboard_stats())

    @app.route(f"{PREFIX}/date", methods=["GET"], endpoint="attendance_by_date")
    @login_required
    def attendance_by_date():
        return paged(service.list_by_date(query_params()))

    @app.route(f"{PREFIX}/labourer/<labourer_id>", methods=["GET"], endpoint="attendance_by_labourer")
    @login_required
    def attendance_by_labourer(labourer_id: str):
        return paged(service.list_by_labourer(labourer_id, query_params()))

    @app.route(f"{PREFIX}/project/<project_id>", methods=["GET"], endpoint="attendance_by_project")
    @login_required
    def attendance_by_project(project_id: str):
        return paged(service.list_by_project(project_id, query_params()))

    @app.route(f"{PREFIX}/labourer/<labourer_id>/summary", methods=["GET"], endpoint="attendance_labourer_summary")
    @login_required
    def labourer_summary(labourer_id: str):
        return ok(service.labourer_summary(labourer_id, query_params()))

    @app.route(f"{PREFIX}/project/<project_id>/summary", methods=["GET"], endpoint="attendance_project_summary")
    @login_required
    def project_summary(project_id: str):
        return ok(service.project_summary(project_id, query_params()))

    @app.route(f"{PREFIX}/<attendance_id>", methods=["GET"], endpoint="attendance_get")
    @login_required
    def get_attendance(attendance_id: str):
        return ok(service.get(attendance_id))

    @app.route(f"{PREFIX}/<attendance_id>", methods=["PUT"], endpoint="attendance_update")
    @staff_required
    def update_attendance(attendance_id: str):
        return ok(service.update(attendance_id, json_body()), message="Attendance updated")

    @app.route(f"{PREFIX}/<attendance_id>", methods=["DELETE"], endpoint="attendance_delete")
    @admin_required
    def delete_attendance(attendance_id: str):
        service.delete(attendance_id)
        return ok(message="Attendance record deleted")
