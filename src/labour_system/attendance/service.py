from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..common.datetime_utils import day_bounds, days_back, now_utc
from ..common.filters import FilterBuilder, Predicate
from ..common.pagination import Page, PageRequest
from ..common.references import expand
from ..common.summary import attendance_summary
from ..common.validators import (
    is_valid_identifier,
    optional_identifier,
    require_date,
    require_enum,
    require_found,
    require_identifier,
)
from ..core.constants import DASHBOARD_TREND_DAYS, DEFAULT_EXPORT_MAX_RECORDS
from ..core.enums import AttendanceStatus, LabourerStatus, Shift
from ..core.exceptions import ConflictError, ValidationError
from ..labourers.repository import LabourerRepository
from ..projects.repository import ProjectRepository
from ..users.repository import UserRepository
from .model import Attendance, BulkReport, FailedEntry
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "Attendance already marked for this labourer, project, date, and shift"

EXPORT_COLUMNS = [
    "Date",
    "Shift",
    "Status",
    "LabourerName",
    "LabourerContact",
    "ProjectName",
    "ProjectLocation",
    "MarkedBy",
    "MarkedByEmail",
    "RecordId",
]


@dataclass(frozen=True)
class NewAttendance:
    labourer_id: str
    project_id: str
    date: datetime
    shift: Shift
    status: AttendanceStatus
    marked_by: Optional[str]

    def values(self) -> Dict[str, Any]:
        return {
            "labourer_id": self.labourer_id,
            "project_id": self.project_id,
            "date": self.date,
            "shift": self.shift,
            "status": self.status,
            "marked_by": self.marked_by,
        }


def _parses(parse: Callable[..., Any], *args: Any) -> bool:
    try:
        parse(*args)
    except ValidationError:
        return False
    return True


def validate_entry(entry: Any, *, default_marker: Optional[str] = None) -> NewAttendance:
    """Validate one bulk entry; the first failing rule is reported."""
    if not isinstance(entry, dict):
        raise ValidationError("Entry must be an object")
    marked_by = entry.get("markedBy")
    checks = [
        ("Missing/invalid labourerId", is_valid_identifier(entry.get("labourerId"))),
        ("Missing/invalid projectId", is_valid_identifier(entry.get("projectId"))),
        ("Missing/invalid date", _parses(require_date, entry.get("date"), "date")),
        ("Missing/invalid shift", _parses(require_enum, entry.get("shift"), Shift, "shift")),
        ("Missing/invalid status", _parses(require_enum, entry.get("status"), AttendanceStatus, "status")),
        ("Invalid markedBy", marked_by in (None, "") or is_valid_identifier(marked_by)),
    ]
    for message, passed in checks:
        if not passed:
            raise ValidationError(message)
    return NewAttendance(
        labourer_id=entry["labourerId"].lower(),
        project_id=entry["projectId"].lower(),
        date=require_date(entry["date"], "date"),
        shift=require_enum(entry["shift"], Shift, "shift"),
        status=require_enum(entry["status"], AttendanceStatus, "status"),
        marked_by=marked_by.lower() if marked_by else default_marker,
    )


def _key(labourer_id: str, project_id: str, date: datetime, shift: Shift) -> Predicate:
    return (
        FilterBuilder()
        .where("labourer_id", labourer_id, identifier=True)
        .where("project_id", project_id, identifier=True)
        .where("date", date)
        .where("shift", shift.value)
        .build()
    )


class AttendanceService:
    """Use cases: marking attendance, listings, summaries, bulk ingest and export."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        labourers: LabourerRepository,
        projects: ProjectRepository,
        users: UserRepository,
        *,
        export_max_records: int = DEFAULT_EXPORT_MAX_RECORDS,
    ):
        self._attendance = attendance
        self._labourers = labourers
        self._projects = projects
        self._users = users
        self._export_max_records = export_max_records

    def _expand(self, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        expand(items, key="labourerId", target="labourer", source=self._labourers)
        expand(items, key="projectId", target="project", source=self._projects)
        expand(items, key="markedBy", target="marker", source=self._users)
        return items

    def _require(self, attendance_id: Any) -> Attendance:
        attendance_id = require_identifier(attendance_id, "attendance ID")
        return require_found(self._attendance.get_by_id(attendance_id), "Attendance record not found")

    def _page(self, predicate: Predicate, params: Mapping[str, Any]) -> Page:
        page = self._attendance.list_page(predicate, PageRequest.from_params(params))
        return page.with_items(self._expand([a.to_dict() for a in page.items]))

    def mark(self, payload: Mapping[str, Any], *, marked_by: Optional[str] = None) -> Dict[str, Any]:
        for key in ("labourerId", "projectId", "date", "shift", "status"):
            if payload.get(key) in (None, ""):
                raise ValidationError("All fields (labourerId, projectId, date, shift, status) are required")
        record = NewAttendance(
            labourer_id=require_identifier(payload["labourerId"], "labourerId"),
            project_id=require_identifier(payload["projectId"], "projectId"),
            date=require_date(payload["date"], "date"),
            shift=require_enum(payload["shift"], Shift, "shift"),
            status=require_enum(payload["status"], AttendanceStatus, "status"),
            marked_by=optional_identifier(payload.get("markedBy"), "markedBy user ID") or marked_by,
        )
        if self._attendance.find_one(_key(record.labourer_id, record.project_id, record.date, record.shift)):
            raise ConflictError(DUPLICATE_MESSAGE)

        attendance_id = self._attendance.create(record.values())
        logger.info(
            "attendance %s marked: labourer=%s project=%s shift=%s status=%s",
            attendance_id,
            record.labourer_id,
            record.project_id,
            record.shift.value,
            record.status.value,
        )
        return self.get(attendance_id)

    def get(self, attendance_id: Any) -> Dict[str, Any]:
        return self._expand([self._require(attendance_id).to_dict()])[0]

    def update(self, attendance_id: Any, payload: Mapping[str, Any]) -> Dict[str, Any]:
        current = self._require(attendance_id)
        changes: Dict[str, Any] = {}
        if payload.get("labourerId") is not None:
            changes["labourer_id"] = require_identifier(payload["labourerId"], "labourerId")
        if payload.get("projectId") is not None:
            changes["project_id"] = require_identifier(payload["projectId"], "projectId")
        if payload.get("date") is not None:
            changes["date"] = require_date(payload["date"], "date")
        if payload.get("shift") is not None:
            changes["shift"] = require_enum(payload["shift"], Shift, "shift")
        if payload.get("status") is not None:
            changes["status"] = require_enum(payload["status"], AttendanceStatus, "status")
        if payload.get("markedBy") is not None:
            changes["marked_by"] = require_identifier(payload["markedBy"], "markedBy user ID")
        if not changes:
            raise ValidationError("No valid fields provided for update")

        if {"labourer_id", "project_id", "date", "shift"} & set(changes):
            key = _key(
                changes.get("labourer_id", current.labourer_id),
                changes.get("project_id", current.project_id),
                changes.get("date", current.date),
                changes.get("shift", current.shift),
            )
            other = self._attendance.find_one(key)
            if other and other.id != current.id:
                raise ConflictError("Another attendance record exists for this labourer, project, date, and shift")

        self._attendance.update(current.id, changes)
        logger.info("attendance %s updated (%s)", current.id, ", ".join(sorted(changes)))
        return self.get(current.id)

    def delete(self, attendance_id: Any) -> None:
        record = self._require(attendance_id)
        self._attendance.delete(record.id)
        logger.info("attendance %s deleted", record.id)

    def _filters(self, params: Mapping[str, Any]) -> FilterBuilder:
        return (
            FilterBuilder(params)
            .enum("status", AttendanceStatus, "status")
            .enum("shift", Shift, "shift")
            .identifier("markedBy", "marked_by")
        )

    def list_by_labourer(self, labourer_id: Any, params: Mapping[str, Any]) -> Page:
        labourer_id = require_identifier(labourer_id, "labourer ID")
        predicate = (
            self._filters(params)
            .where("labourer_id", labourer_id, identifier=True)
            .identifier("projectId", "project_id")
            .date_range("startDate", "endDate", "date")
            .build()
        )
        return self._page(predicate, params)

    def list_by_project(self, project_id: Any, params: Mapping[str, Any]) -> Page:
        project_id = require_identifier(project_id, "project ID")
        predicate = (
            self._filters(params)
            .where("project_id", project_id, identifier=True)
            .identifier("labourerId", "labourer_id")
            .date_range("startDate", "endDate", "date")
            .build()
        )
        return self._page(predicate, params)

    def list_by_date(self, params: Mapping[str, Any]) -> Page:
        if not params.get("date"):
            raise ValidationError("Date query parameter is required")
        predicate = (
            self._filters(params)
            .on_day("date", "date")
            .identifier("labourerId", "labourer_id")
            .identifier("projectId", "project_id")
            .build()
        )
        return self._page(predicate, params)

    def labourer_summary(self, labourer_id: Any, params: Mapping[str, Any]) -> Dict[str, int]:
        labourer_id = require_identifier(labourer_id, "labourer ID")
        predicate = (
            FilterBuilder(params)
            .where("labourer_id", labourer_id, identifier=True)
            .identifier("projectId", "project_id")
            .date_range("startDate", "endDate", "date")
            .build()
        )
        return attendance_summary(self._attendance.count_by(predicate, "status"))

    def project_summary(self, project_id: Any, params: Mapping[str, Any]) -> Dict[str, int]:
        project_id = require_identifier(project_id, "project ID")
        predicate = (
            FilterBuilder(params)
            .where("project_id", project_id, identifier=True)
            .identifier("labourerId", "labourer_id")
            .date_range("startDate", "endDate", "date")
            .build()
        )
        return attendance_summary(self._attendance.count_by(predicate, "status"))

    def bulk_add(self, entries: Any, *, marked_by: Optional[str] = None) -> BulkReport:
        """Insert every valid entry; report the rest with their request index."""
        if not isinstance(entries, list) or not entries:
            raise ValidationError("attendanceRecords must be a non-empty array")

        valid: List[NewAttendance] = []
        positions: List[int] = []
        failed: List[FailedEntry] = []
        for index, entry in enumerate(entries):
            try:
                valid.append(validate_entry(entry, default_marker=marked_by))
                positions.append(index)
            except ValidationError as exc:
                failed.append(FailedEntry(index=index, error=exc.message, record=entry))

        if not valid:
            raise ValidationError(
                f"No valid attendance records to add. {len(failed)} failed validation.",
                errors=[f.to_dict() for f in failed],
            )

        report = self._attendance.insert_many([v.values() for v in valid])
        for batch_pos, message in report.failures:
            index = positions[batch_pos]
            failed.append(FailedEntry(index=index, error=message, record=entries[index]))
        failed.sort(key=lambda f: f.index)

        logger.info("bulk attendance: inserted=%d failed=%d", len(report.inserted_ids), len(failed))
        return BulkReport(inserted_count=len(report.inserted_ids), failed=failed)

    def export_rows(self, params: Mapping[str, Any]) -> List[Dict[str, Any]]:
        """Flattened rows for CSV download, newest first, capped."""
        predicate = (
            self._filters(params)
            .identifier("labourerId", "labourer_id")
            .identifier("projectId", "project_id")
            .date_range("startDate", "endDate", "date")
            .build()
        )
        records = self._attendance.list_all(predicate, limit=self._export_max_records)
        items = self._expand([r.to_dict() for r in records])
        rows = []
        for rec, item in zip(records, items):
            labourer = item["labourer"] or {}
            project = item["project"] or {}
            marker = item["marker"] or {}
            rows.append(
                {
                    "Date": rec.date.strftime("%Y-%m-%d"),
                    "Shift": rec.shift.value,
                    "Status": rec.status.value,
                    "LabourerName": labourer.get("fullName", ""),
                    "LabourerContact": labourer.get("contactNumber", ""),
                    "ProjectName": project.get("name", ""),
                    "ProjectLocation": project.get("location", ""),
                    "MarkedBy": marker.get("username", ""),
                    "MarkedByEmail": marker.get("email", ""),
                    "RecordId": rec.id,
                }
            )
        return rows

    def dashboard_stats(self, today: Optional[datetime] = None) -> Dict[str, Any]:
        today = today or now_utc()
        total_labourers = self._labourers.count(
            FilterBuilder().where("status", LabourerStatus.ACTIVE.value).build()
        )

        day = FilterBuilder().between("date", *day_bounds(today)).build()
        counts = attendance_summary(self._attendance.count_by(day, "status"))
        percent = (counts["present"] / total_labourers) * 100 if total_labourers else 0

        trend = []
        for offset in range(DASHBOARD_TREND_DAYS - 1, -1, -1):
            start = days_back(today, offset)
            predicate = (
                FilterBuilder()
                .between("date", *day_bounds(start))
                .where("status", AttendanceStatus.PRESENT.value)
                .build()
            )
            trend.append({"date": start.strftime("%Y-%m-%d"), "present": self._attendance.count(predicate)})

        return {
            "totalLabourers": total_labourers,
            "present": counts["present"],
            "absent": counts["absent"],
            "halfDay": counts["halfDay"],
            "attendancePercent": round(percent, 2),
            "last7Days": trend,
        }

