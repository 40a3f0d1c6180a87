from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping

from ..common.filters import FilterBuilder, Predicate
from ..common.pagination import Page, PageRequest
from ..common.references import expand
from ..common.validators import (
    require_date,
    require_found,
    require_identifier,
    require_non_empty,
    require_number,
)
from ..core.constants import MAX_PERFORMANCE_SCORE, MAX_REMARKS_LENGTH
from ..core.exceptions import ConflictError, ValidationError
from ..labourers.repository import LabourerRepository
from ..projects.repository import ProjectRepository
from .model import PerformanceRecord
from .repository import PerformanceRepository

logger = logging.getLogger(__name__)

_PARSERS = {
    "labourerId": ("labourer_id", lambda v: require_identifier(v, "labourerId")),
    "projectId": ("project_id", lambda v: require_identifier(v, "projectId")),
    "date": ("date", lambda v: require_date(v, "date")),
    "performanceScore": (
        "performance_score",
        lambda v: require_number(v, "performanceScore", minimum=0, maximum=MAX_PERFORMANCE_SCORE),
    ),
    "remarks": ("remarks", lambda v: require_non_empty(v, "remarks", max_len=MAX_REMARKS_LENGTH)),
}


def _key(labourer_id: str, project_id: str, date: datetime) -> Predicate:
    return (
        FilterBuilder()
        .where("labourer_id", labourer_id, identifier=True)
        .where("project_id", project_id, identifier=True)
        .where("date", date)
        .build()
    )


class PerformanceService:
    def __init__(self, performance: PerformanceRepository, labourers: LabourerRepository, projects: ProjectRepository):
        self._performance = performance
        self._labourers = labourers
        self._projects = projects

    def _expand(self, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        expand(items, key="labourerId", target="labourer", source=self._labourers)
        expand(items, key="projectId", target="project", source=self._projects)
        return items

    def _require(self, record_id: Any) -> PerformanceRecord:
        record_id = require_identifier(record_id, "performance record ID")
        return require_found(self._performance.get_by_id(record_id), "Performance record not found")

    def create(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        if any(payload.get(key) in (None, "") for key in _PARSERS):
            raise ValidationError("labourerId, projectId, date, performanceScore, and remarks are required")
        values = {field: parse(payload[key]) for key, (field, parse) in _PARSERS.items()}
        if self._performance.find_one(_key(values["labourer_id"], values["project_id"], values["date"])):
            raise ConflictError("Performance record for this labourer, project, and date already exists")

        record_id = self._performance.create(values)
        logger.info("performance %s recorded (score=%s)", record_id, values["performance_score"])
        return self.get(record_id)

    def get(self, record_id: Any) -> Dict[str, Any]:
        return self._expand([self._require(record_id).to_dict()])[0]

    def update(self, record_id: Any, payload: Mapping[str, Any]) -> Dict[str, Any]:
        current = self._require(record_id)
        changes = {field: parse(payload[key]) for key, (field, parse) in _PARSERS.items() if key in payload}
        if not changes:
            raise ValidationError("No valid fields provided for update")

        if {"labourer_id", "project_id", "date"} & set(changes):
            other = self._performance.find_one(
                _key(
                    changes.get("labourer_id", current.labourer_id),
                    changes.get("project_id", current.project_id),
                    changes.get("date", current.date),
                )
            )
            if other and other.id != current.id:
                raise ConflictError("Another performance record exists for the same labourer, project, and date")

        self._performance.update(current.id, changes)
        logger.info("performance %s updated (%s)", current.id, ", ".join(sorted(changes)))
        return self.get(current.id)

    def delete(self, record_id: Any) -> None:
        record = self._require(record_id)
        self._performance.delete(record.id)
        logger.info("performance %s deleted", record.id)

    def _page(self, predicate: Predicate, params: Mapping[str, Any]) -> Page:
        page = self._performance.list_page(predicate, PageRequest.from_params(params))
        return page.with_items(self._expand([r.to_dict() for r in page.items]))

    def list(self, params: Mapping[str, Any]) -> Page:
        predicate = (
            FilterBuilder(params)
            .identifier("labourerId", "labourer_id")
            .identifier("projectId", "project_id")
            .date_range("startDate", "endDate", "date")
            .build()
        )
        return self._page(predicate, params)

    def list_by_labourer(self, labourer_id: Any, params: Mapping[str, Any]) -> Page:
        labourer_id = require_identifier(labourer_id, "labourer ID")
        predicate = (
            FilterBuilder(params)
            .where("labourer_id", labourer_id, identifier=True)
            .identifier("projectId", "project_id")
            .date_range("startDate", "endDate", "date")
            .build()
        )
        return self._page(predicate, params)

    def list_by_project(self, project_id: Any, params: Mapping[str, Any]) -> Page:
        project_id = require_identifier(project_id, "project ID")
        predicate = (
            FilterBuilder(params)
            .where("project_id", project_id, identifier=True)
            .identifier("labourerId", "labourer_id")
            .date_range("startDate", "endDate", "date")
            .build()
        )
        return self._page(predicate, params)
