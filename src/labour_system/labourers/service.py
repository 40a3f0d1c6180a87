from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from pymongo import ASCENDING

from ..common.filters import FilterBuilder
from ..common.pagination import Page, PageRequest
from ..common.references import expand
from ..common.summary import attendance_summary
from ..common.validators import (
    optional_date,
    optional_identifier,
    require_digits,
    require_enum,
    require_found,
    require_identifier,
    require_non_empty,
    require_positive_int,
)
from ..core.enums import Gender, LabourerStatus
from ..core.exceptions import ConflictError, ValidationError
from ..attendance.repository import AttendanceRepository
from ..projects.repository import ProjectRepository
from ..users.repository import UserRepository
from .model import Labourer
from .repository import LabourerRepository

logger = logging.getLogger(__name__)

# request key -> (storage field, parser)
_FIELDS = {
    "fullName": ("full_name", lambda v: require_non_empty(v, "fullName")),
    "age": ("age", lambda v: require_positive_int(v, "age")),
    "gender": ("gender", lambda v: require_enum(v, Gender, "gender")),
    "contactNumber": ("contact_number", lambda v: require_digits(v, "contactNumber")),
    "address": ("address", lambda v: require_non_empty(v, "address")),
    "skillType": ("skill_type", lambda v: require_non_empty(v, "skillType")),
    "status": ("status", lambda v: require_enum(v, LabourerStatus, "status")),
    "joiningDate": ("joining_date", lambda v: optional_date(v, "joiningDate")),
}
_REQUIRED = ("fullName", "age", "gender", "contactNumber", "address", "skillType")


class LabourerService:
    """Use cases: labourer profiles, project assignment and attendance summary."""

    def __init__(
        self,
        labourers: LabourerRepository,
        projects: ProjectRepository,
        users: UserRepository,
        attendance: AttendanceRepository,
    ):
        self._labourers = labourers
        self._projects = projects
        self._users = users
        self._attendance = attendance

    def _expand(self, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        expand(items, key="userId", target="user", source=self._users)
        expand(items, key="assignedProjectId", target="assignedProject", source=self._projects)
        return items

    def _require(self, labourer_id: Any) -> Labourer:
        labourer_id = require_identifier(labourer_id, "labourer ID")
        return require_found(self._labourers.get_by_id(labourer_id), "Labourer not found")

    def _check_project(self, project_id: Optional[str]) -> None:
        if project_id:
            require_found(self._projects.get_by_id(project_id), "Project not found")

    def _check_user(self, user_id: Optional[str]) -> None:
        if not user_id:
            return
        require_found(self._users.get_by_id(user_id), "User not found")
        if self._labourers.exists(FilterBuilder().where("user_id", user_id, identifier=True).build()):
            raise ConflictError("A labourer profile already exists for this user")

    def create(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        values: Dict[str, Any] = {"status": LabourerStatus.INACTIVE}
        for key in _REQUIRED:
            if payload.get(key) is None:
                raise ValidationError(f"{key} is required")
        for key, (field, parse) in _FIELDS.items():
            if payload.get(key) is not None:
                values[field] = parse(payload[key])

        user_id = optional_identifier(payload.get("userId"), "userId")
        project_id = optional_identifier(payload.get("assignedProjectId"), "assignedProjectId")
        self._check_user(user_id)
        self._check_project(project_id)
        values["user_id"] = user_id
        values["assigned_project_id"] = project_id

        labourer_id = self._labourers.create(values)
        logger.info("labourer %s created", labourer_id)
        return self.get(labourer_id)

    def get(self, labourer_id: Any) -> Dict[str, Any]:
        return self._expand([self._require(labourer_id).to_dict()])[0]

    def update(self, labourer_id: Any, payload: Mapping[str, Any]) -> Dict[str, Any]:
        labourer = self._require(labourer_id)
        changes: Dict[str, Any] = {}
        for key, (field, parse) in _FIELDS.items():
            if key in payload:
                changes[field] = parse(payload[key])
        if "assignedProjectId" in payload:
            project_id = optional_identifier(payload.get("assignedProjectId"), "assignedProjectId")
            self._check_project(project_id)
            changes["assigned_project_id"] = project_id
        if "userId" in payload:
            user_id = optional_identifier(payload.get("userId"), "userId")
            if user_id != labourer.user_id:
                self._check_user(user_id)
            changes["user_id"] = user_id
        if not changes:
            raise ValidationError("No valid fields provided for update")
        self._labourers.update(labourer.id, changes)
        logger.info("labourer %s updated (%s)", labourer.id, ", ".join(sorted(changes)))
        return self.get(labourer.id)

    def delete(self, labourer_id: Any) -> None:
        labourer = self._require(labourer_id)
        self._labourers.delete(labourer.id)
        logger.info("labourer %s deleted", labourer.id)

    def list(self, params: Mapping[str, Any]) -> Page:
        predicate = (
            FilterBuilder(params)
            .identifier("assignedProjectId", "assigned_project_id")
            .enum("status", LabourerStatus, "status")
            .exact("skillType", "skill_type")
            .enum("gender", Gender, "gender")
            .contains("fullName", "full_name")
            .build()
        )
        page = self._labourers.list_page(predicate, PageRequest.from_params(params))
        return page.with_items(self._expand([l.to_dict() for l in page.items]))

    def search(self, params: Mapping[str, Any]) -> Page:
        predicate = (
            FilterBuilder(params)
            .contains("fullName", "full_name")
            .contains("skillType", "skill_type")
            .contains("contactNumber", "contact_number")
            .build()
        )
        page = self._labourers.list_page(predicate, PageRequest.from_params(params))
        return page.with_items(self._expand([l.to_dict() for l in page.items]))

    def assign_project(self, labourer_id: Any, project_id: Any) -> Dict[str, Any]:
        """Assign to a project, or unassign when project_id is null."""
        labourer = self._require(labourer_id)
        project_id = optional_identifier(project_id, "projectId")
        self._check_project(project_id)
        self._labourers.update(labourer.id, {"assigned_project_id": project_id})
        logger.info("labourer %s assigned to project %s", labourer.id, project_id)
        return self.get(labourer.id)

    def change_status(self, labourer_id: Any, status: Any) -> Dict[str, Any]:
        labourer = self._require(labourer_id)
        new_status = require_enum(status, LabourerStatus, "status")
        self._labourers.update(labourer.id, {"status": new_status})
        return self.get(labourer.id)

    def list_by_project(self, project_id: Any) -> List[Dict[str, Any]]:
        project_id = require_identifier(project_id, "project ID")
        predicate = FilterBuilder().where("assigned_project_id", project_id, identifier=True).build()
        labourers = self._labourers.list_all(predicate, sort=[("full_name", ASCENDING)])
        return [l.to_dict() for l in labourers]

    def attendance_summary(self, labourer_id: Any, params: Mapping[str, Any]) -> Dict[str, Any]:
        labourer = self._require(labourer_id)
        predicate = (
            FilterBuilder(params)
            .where("labourer_id", labourer.id, identifier=True)
            .date_range("startDate", "endDate", "date")
            .build()
        )
        counts = self._attendance.count_by(predicate, "status")
        return {"labourer": labourer.summary(), "summary": attendance_summary(counts)}
