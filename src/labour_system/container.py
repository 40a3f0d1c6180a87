from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .attendance.mongo_attendance_repository import MongoAttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_ACCESS_TOKEN_MINUTES, DEFAULT_EXPORT_MAX_RECORDS, DEFAULT_REFRESH_TOKEN_DAYS
from .database.connection import DatabaseConnection, MongoConfig
from .labourers.mongo_labourer_repository import MongoLabourerRepository
from .labourers.service import LabourerService
from .leaves.mongo_leave_repository import MongoLeaveRepository
from .leaves.service import LeaveService
from .notifications.mongo_notification_repository import MongoNotificationRepository
from .notifications.service import NotificationService
from .payroll.mongo_salary_repository import MongoSalaryRepository
from .payroll.service import SalaryService
from .performance.mongo_performance_repository import MongoPerformanceRepository
from .performance.service import PerformanceService
from .projects.mongo_project_repository import MongoProjectRepository
from .projects.service import ProjectService
from .users.mongo_user_repository import MongoUserRepository
from .users.service import AuthService, UserService
from .users.tokens import TokenService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users_repo: MongoUserRepository
    labourers_repo: MongoLabourerRepository
    projects_repo: MongoProjectRepository
    attendance_repo: MongoAttendanceRepository
    leaves_repo: MongoLeaveRepository
    performance_repo: MongoPerformanceRepository
    salaries_repo: MongoSalaryRepository
    notifications_repo: MongoNotificationRepository

    tokens: TokenService
    auth_service: AuthService
    user_service: UserService
    labourer_service: LabourerService
    project_service: ProjectService
    attendance_service: AttendanceService
    leave_service: LeaveService
    performance_service: PerformanceService
    salary_service: SalaryService
    notification_service: NotificationService


def build_services(
    *,
    conn: Any,
    users_repo: Any,
    labourers_repo: Any,
    projects_repo: Any,
    attendance_repo: Any,
    leaves_repo: Any,
    performance_repo: Any,
    salaries_repo: Any,
    notifications_repo: Any,
    tokens: TokenService,
    export_max_records: int = DEFAULT_EXPORT_MAX_RECORDS,
) -> Container:
    """Wire services over already constructed repositories."""
    return Container(
        conn=conn,
        users_repo=users_repo,
        labourers_repo=labourers_repo,
        projects_repo=projects_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        performance_repo=performance_repo,
        salaries_repo=salaries_repo,
        notifications_repo=notifications_repo,
        tokens=tokens,
        auth_service=AuthService(users_repo, tokens),
        user_service=UserService(users_repo),
        labourer_service=LabourerService(labourers_repo, projects_repo, users_repo, attendance_repo),
        project_service=ProjectService(projects_repo, labourers_repo, users_repo),
        attendance_service=AttendanceService(
            attendance_repo,
            labourers_repo,
            projects_repo,
            users_repo,
            export_max_records=export_max_records,
        ),
        leave_service=LeaveService(leaves_repo, labourers_repo, users_repo),
        performance_service=PerformanceService(performance_repo, labourers_repo, projects_repo),
        salary_service=SalaryService(salaries_repo, attendance_repo, labourers_repo),
        notification_service=NotificationService(notifications_repo),
    )


def build_container(*, mongo_config: Mapping[str, Any], settings: Any) -> Container:
    config = MongoConfig(
        uri=str(mongo_config["uri"]),
        database=str(mongo_config["database"]),
        server_selection_timeout_ms=int(mongo_config.get("server_selection_timeout_ms", 5000)),
    )
    conn = DatabaseConnection.get_instance(config)

    tokens = TokenService(
        str(getattr(settings, "JWT_SECRET")),
        access_minutes=int(getattr(settings, "ACCESS_TOKEN_MINUTES", DEFAULT_ACCESS_TOKEN_MINUTES)),
        refresh_days=int(getattr(settings, "REFRESH_TOKEN_DAYS", DEFAULT_REFRESH_TOKEN_DAYS)),
    )

    return build_services(
        conn=conn,
        users_repo=MongoUserRepository(conn),
        labourers_repo=MongoLabourerRepository(conn),
        projects_repo=MongoProjectRepository(conn),
        attendance_repo=MongoAttendanceRepository(conn),
        leaves_repo=MongoLeaveRepository(conn),
        performance_repo=MongoPerformanceRepository(conn),
        salaries_repo=MongoSalaryRepository(conn),
        notifications_repo=MongoNotificationRepository(conn),
        tokens=tokens,
        export_max_records=int(getattr(settings, "EXPORT_MAX_RECORDS", DEFAULT_EXPORT_MAX_RECORDS)),
    )
