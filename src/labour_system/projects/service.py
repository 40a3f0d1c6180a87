from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from ..common.filters import FilterBuilder
from ..common.pagination import Page, PageRequest
from ..common.references import expand, expand_many, unique
from ..common.validators import (
    optional_date,
    optional_identifier,
    require_enum,
    require_found,
    require_identifier,
    require_non_empty,
)
from ..core.enums import ProjectStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..labourers.repository import LabourerRepository
from ..users.repository import UserRepository
from .model import Project
from .repository import ProjectRepository

logger = logging.getLogger(__name__)

_TEXT_FIELDS = {"name": "name", "description": "description", "location": "location"}


def _check_period(start: Optional[datetime], end: Optional[datetime]) -> None:
    if start and end and start > end:
        raise ValidationError("startDate cannot be after endDate")


class ProjectService:
    """Use cases: projects, their manager and labourer assignments."""

    def __init__(self, projects: ProjectRepository, labourers: LabourerRepository, users: UserRepository):
        self._projects = projects
        self._labourers = labourers
        self._users = users

    def _expand(self, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        expand(items, key="managerId", target="manager", source=self._users)
        expand_many(items, key="assignedLabourers", target="labourers", source=self._labourers)
        return items

    def _require(self, project_id: Any) -> Project:
        project_id = require_identifier(project_id, "project ID")
        return require_found(self._projects.get_by_id(project_id), "Project not found")

    def _check_manager(self, manager_id: Optional[str]) -> None:
        if manager_id:
            require_found(self._users.get_by_id(manager_id), "Manager not found")

    def _labourer_ids(self, value: Any) -> List[str]:
        if not isinstance(value, list):
            raise ValidationError("assignedLabourers must be an array")
        ids = unique(require_identifier(v, f"labourer ID: {v}") for v in value)
        found = self._labourers.get_summaries(ids)
        missing = [i for i in ids if i not in found]
        if missing:
            raise NotFoundError(f"Labourer not found: {', '.join(missing)}")
        return ids

    def create(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        values: Dict[str, Any] = {field: require_non_empty(payload.get(key), key) for key, field in _TEXT_FIELDS.items()}
        values["start_date"] = optional_date(payload.get("startDate"), "startDate")
        values["end_date"] = optional_date(payload.get("endDate"), "endDate")
        _check_period(values["start_date"], values["end_date"])
        values["status"] = ProjectStatus.PENDING
        if payload.get("status"):
            values["status"] = require_enum(payload.get("status"), ProjectStatus, "status")
        values["manager_id"] = optional_identifier(payload.get("managerId"), "managerId")
        self._check_manager(values["manager_id"])
        values["assigned_labourers"] = self._labourer_ids(payload.get("assignedLabourers") or [])

        project_id = self._projects.create(values)
        logger.info("project %s created", project_id)
        return self.get(project_id)

    def get(self, project_id: Any) -> Dict[str, Any]:
        return self._expand([self._require(project_id).to_dict()])[0]

    def update(self, project_id: Any, payload: Mapping[str, Any]) -> Dict[str, Any]:
        project = self._require(project_id)
        changes: Dict[str, Any] = {}
        for key, field in _TEXT_FIELDS.items():
            if key in payload:
                changes[field] = require_non_empty(payload[key], key)
        if "startDate" in payload:
            changes["start_date"] = optional_date(payload["startDate"], "startDate")
        if "endDate" in payload:
            changes["end_date"] = optional_date(payload["endDate"], "endDate")
        if "status" in payload:
            changes["status"] = require_enum(payload["status"], ProjectStatus, "status")
        if "managerId" in payload:
            changes["manager_id"] = optional_identifier(payload["managerId"], "managerId")
            self._check_manager(changes["manager_id"])
        if "assignedLabourers" in payload:
            changes["assigned_labourers"] = self._labourer_ids(payload["assignedLabourers"])
        if not changes:
            raise ValidationError("No valid fields provided for update")
        _check_period(changes.get("start_date", project.start_date), changes.get("end_date", project.end_date))

        self._projects.update(project.id, changes)
        logger.info("project %s updated (%s)", project.id, ", ".join(sorted(changes)))
        return self.get(project.id)

    def list(self, params: Mapping[str, Any]) -> Page:
        predicate = (
            FilterBuilder(params)
            .enum("status", ProjectStatus, "status")
            .identifier("managerId", "manager_id")
            .since("startDate", "start_date")
            .until("endDate", "end_date")
            .contains("name", "name")
            .contains("location", "location")
            .build()
        )
        page = self._projects.list_page(predicate, PageRequest.from_params(params))
        return page.with_items(self._expand([p.to_dict() for p in page.items]))

    def search(self, params: Mapping[str, Any]) -> Page:
        predicate = (
            FilterBuilder(params)
            .contains("name", "name")
            .contains("description", "description")
            .contains("location", "location")
            .enum("status", ProjectStatus, "status")
            .identifier("managerId", "manager_id")
            .date_range("startDate", "endDate", "start_date")
            .build()
        )
        page = self._projects.list_page(predicate, PageRequest.from_params(params))
        return page.with_items(self._expand([p.to_dict() for p in page.items]))

    def assign_labourers(self, project_id: Any, labourer_ids: Any) -> Dict[str, Any]:
        """Replace the assigned labourer list."""
        project = self._require(project_id)
        ids = self._labourer_ids(labourer_ids)
        self._projects.update(project.id, {"assigned_labourers": ids})
        logger.info("project %s now has %d labourers", project.id, len(ids))
        return self.get(project.id)

    def change_manager(self, project_id: Any, manager_id: Any) -> Dict[str, Any]:
        project = self._require(project_id)
        manager_id = optional_identifier(manager_id, "managerId")
        self._check_manager(manager_id)
        self._projects.update(project.id, {"manager_id": manager_id})
        return self.get(project.id)

    def change_status(self, project_id: Any, status: Any) -> Dict[str, Any]:
        project = self._require(project_id)
        self._projects.update(project.id, {"status": require_enum(status, ProjectStatus, "status")})
        return self.get(project.id)

    def delete_or_archive(self, project_id: Any, action: Any = None) -> str:
        """Delete the project, or archive it when action == "archive"."""
        project = self._require(project_id)
        if action == "archive":
            self._projects.update(project.id, {"status": ProjectStatus.ARCHIVED})
            logger.info("project %s archived", project.id)
            return "archived"
        if action not in (None, "", "delete"):
            raise ValidationError("action must be one of: delete, archive")
        self._projects.delete(project.id)
        logger.info("project %s deleted", project.id)
        return "deleted"

    def list_by_manager(self, manager_id: Any, params: Mapping[str, Any]) -> Page:
        manager_id = require_identifier(manager_id, "manager ID")
        predicate = FilterBuilder().where("manager_id", manager_id, identifier=True).build()
        page = self._projects.list_page(predicate, PageRequest.from_params(params))
        return page.with_items(self._expand([p.to_dict() for p in page.items]))

    def list_by_labourer(self, labourer_id: Any, params: Mapping[str, Any]) -> Page:
        labourer_id = require_identifier(labourer_id, "labourer ID")
        predicate = FilterBuilder().where("assigned_labourers", labourer_id, identifier=True).build()
        page = self._projects.list_page(predicate, PageRequest.from_params(params))
        return page.with_items(self._expand([p.to_dict() for p in page.items]))
