from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import isoformat, now_utc
from ..common.filters import FilterBuilder, Predicate
from ..common.pagination import Page, PageRequest
from ..common.references import expand
from ..common.summary import salary_totals
from ..common.validators import (
    optional_date,
    require_date,
    require_enum,
    require_found,
    require_identifier,
    require_number,
)
from ..core.constants import MSG_NO_ATTENDANCE_FOR_PERIOD, MSG_SALARY_ALREADY_GENERATED
from ..core.enums import AttendanceStatus, SalaryStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..labourers.repository import LabourerRepository
from .calculator.base import SalaryCalculator
from .calculator.standard_calculator import DailyWageCalculator
from .model import GenerationResult, Salary
from .repository import SalaryRepository

logger = logging.getLogger(__name__)

NO_ATTENDANCE = "no_attendance"
ALREADY_GENERATED = "already_generated"
GENERATED = "generated"

_REQUIRED = ("labourerId", "startPeriod", "endPeriod", "totalDaysPresent", "dailyWage", "totalSalary", "status")

_PARSERS = {
    "labourerId": ("labourer_id", lambda v: require_identifier(v, "labourerId")),
    "startPeriod": ("start_period", lambda v: require_date(v, "startPeriod")),
    "endPeriod": ("end_period", lambda v: require_date(v, "endPeriod")),
    "totalDaysPresent": ("total_days_present", lambda v: require_number(v, "totalDaysPresent", minimum=0)),
    "dailyWage": ("daily_wage", lambda v: require_number(v, "dailyWage", minimum=0)),
    "totalSalary": ("total_salary", lambda v: require_number(v, "totalSalary", minimum=0)),
    "status": ("status", lambda v: require_enum(v, SalaryStatus, "status")),
    "payslipUrl": ("payslip_url", lambda v: "" if v is None else str(v).strip()),
    "paymentDate": ("payment_date", lambda v: optional_date(v, "paymentDate")),
}


def _check_period(start: datetime, end: datetime) -> None:
    if start > end:
        raise ValidationError("startPeriod cannot be after endPeriod")


def _key(labourer_id: str, start: datetime, end: datetime) -> Predicate:
    return (
        FilterBuilder()
        .where("labourer_id", labourer_id, identifier=True)
        .where("start_period", start)
        .where("end_period", end)
        .build()
    )


class SalaryService:
    """Salary records, payslips and attendance-driven salary generation."""

    def __init__(
        self,
        salaries: SalaryRepository,
        attendance: AttendanceRepository,
        labourers: LabourerRepository,
        *,
        calculator: Optional[SalaryCalculator] = None,
    ):
        self._salaries = salaries
        self._attendance = attendance
        self._labourers = labourers
        self._calculator = calculator or DailyWageCalculator()

    def _expand(self, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return expand(items, key="labourerId", target="labourer", source=self._labourers)

    def _require(self, salary_id: Any) -> Salary:
        salary_id = require_identifier(salary_id, "salary record ID")
        return require_found(self._salaries.get_by_id(salary_id), "Salary record not found")

    def _check_unique(self, labourer_id: str, start: datetime, end: datetime, *, exclude: Optional[str] = None) -> None:
        other = self._salaries.find_one(_key(labourer_id, start, end))
        if other and other.id != exclude:
            raise ConflictError("Salary record for this labourer and period already exists")

    def create(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        if any(payload.get(key) in (None, "") for key in _REQUIRED):
            raise ValidationError("All required salary fields must be provided")
        values = {field: parse(payload.get(key)) for key, (field, parse) in _PARSERS.items()}
        _check_period(values["start_period"], values["end_period"])
        self._check_unique(values["labourer_id"], values["start_period"], values["end_period"])

        salary_id = self._salaries.create(values)
        logger.info("salary %s created for labourer %s", salary_id, values["labourer_id"])
        return self.get(salary_id)

    def get(self, salary_id: Any) -> Dict[str, Any]:
        return self._expand([self._require(salary_id).to_dict()])[0]

    def update(self, salary_id: Any, payload: Mapping[str, Any]) -> Dict[str, Any]:
        current = self._require(salary_id)
        changes = {field: parse(payload[key]) for key, (field, parse) in _PARSERS.items() if key in payload}
        if not changes:
            raise ValidationError("No valid fields provided for update")

        labourer_id = changes.get("labourer_id", current.labourer_id)
        start = changes.get("start_period", current.start_period)
        end = changes.get("end_period", current.end_period)
        _check_period(start, end)
        if {"labourer_id", "start_period", "end_period"} & set(changes):
            self._check_unique(labourer_id, start, end, exclude=current.id)

        self._salaries.update(current.id, changes)
        logger.info("salary %s updated (%s)", current.id, ", ".join(sorted(changes)))
        return self.get(current.id)

    def mark_paid(self, salary_id: Any, payment_date: Any = None) -> Dict[str, Any]:
        salary = self._require(salary_id)
        paid_on = optional_date(payment_date, "paymentDate") or now_utc()
        self._salaries.update(salary.id, {"status": SalaryStatus.PAID, "payment_date": paid_on})
        logger.info("salary %s marked paid", salary.id)
        return self.get(salary.id)

    def delete(self, salary_id: Any) -> None:
        salary = self._require(salary_id)
        self._salaries.delete(salary.id)
        logger.info("salary %s deleted", salary.id)

    def update_payslip_url(self, salary_id: Any, payslip_url: Any) -> Dict[str, Any]:
        salary = self._require(salary_id)
        if not isinstance(payslip_url, str) or not payslip_url.strip():
            raise ValidationError("payslipUrl must be a non-empty string")
        self._salaries.update(salary.id, {"payslip_url": payslip_url.strip()})
        return self.get(salary.id)

    def payslip_url(self, salary_id: Any) -> str:
        salary = self._require(salary_id)
        if not salary.payslip_url:
            raise NotFoundError("Payslip URL not set for this salary record")
        return salary.payslip_url

    def _page(self, predicate: Predicate, params: Mapping[str, Any]) -> Page:
        page = self._salaries.list_page(predicate, PageRequest.from_params(params))
        return page.with_items(self._expand([s.to_dict() for s in page.items]))

    def list(self, params: Mapping[str, Any]) -> Page:
        predicate = (
            FilterBuilder(params)
            .identifier("labourerId", "labourer_id")
            .enum("status", SalaryStatus, "status")
            .overlap("startPeriod", "endPeriod", start_field="start_period", end_field="end_period")
            .on_day("paymentDate", "payment_date")
            .build()
        )
        return self._page(predicate, params)

    def payslips_by_labourer(self, labourer_id: Any, params: Mapping[str, Any]) -> Page:
        labourer_id = require_identifier(labourer_id, "labourer ID")
        predicate = (
            FilterBuilder(params)
            .where("labourer_id", labourer_id, identifier=True)
            .enum("status", SalaryStatus, "status")
            .overlap("startPeriod", "endPeriod", start_field="start_period", end_field="end_period")
            .build()
        )
        return self._page(predicate, params)

    def _period_filter(self, params: Mapping[str, Any]) -> FilterBuilder:
        return FilterBuilder(params).overlap("startPeriod", "endPeriod", start_field="start_period", end_field="end_period")

    def labourer_summary(self, labourer_id: Any, params: Mapping[str, Any]) -> Dict[str, Any]:
        labourer_id = require_identifier(labourer_id, "labourer ID")
        predicate = self._period_filter(params).where("labourer_id", labourer_id, identifier=True).build()
        return {
            "labourerId": labourer_id,
            "summary": salary_totals(self._salaries.list_all(predicate)),
            "startPeriod": params.get("startPeriod") or None,
            "endPeriod": params.get("endPeriod") or None,
        }

    def period_summary(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        predicate = self._period_filter(params).build()
        return {
            "summary": salary_totals(self._salaries.list_all(predicate)),
            "startPeriod": params.get("startPeriod") or None,
            "endPeriod": params.get("endPeriod") or None,
        }

    def generate(self, payload: Mapping[str, Any]) -> GenerationResult:
        """Create pending salary records from present days in [startPeriod, endPeriod].

        Labourers that already have a record for the exact period are skipped.
        The batch is inserted unordered; rows the store rejects are reported
        in `failed` and not retried.
        """
        if payload.get("startPeriod") in (None, "") or payload.get("endPeriod") in (None, "") or payload.get("dailyWage") is None:
            raise ValidationError("startPeriod, endPeriod, and dailyWage are required")
        start = require_date(payload["startPeriod"], "startPeriod")
        end = require_date(payload["endPeriod"], "endPeriod")
        _check_period(start, end)
        daily_wage = require_number(payload["dailyWage"], "dailyWage", minimum=0)

        present = (
            FilterBuilder()
            .between("date", start, end)
            .where("status", AttendanceStatus.PRESENT.value)
            .build()
        )
        days_by_labourer = self._attendance.count_by(present, "labourer_id")
        if not days_by_labourer:
            return GenerationResult(outcome=NO_ATTENDANCE, message=MSG_NO_ATTENDANCE_FOR_PERIOD)

        labourer_ids = sorted(days_by_labourer)
        existing = (
            FilterBuilder()
            .where_in("labourer_id", labourer_ids, identifier=True)
            .where("start_period", start)
            .where("end_period", end)
            .build()
        )
        already = {s.labourer_id for s in self._salaries.list_all(existing)}

        rows = [
            {
                "labourer_id": labourer_id,
                "start_period": start,
                "end_period": end,
                "total_days_present": days_by_labourer[labourer_id],
                "daily_wage": daily_wage,
                "total_salary": self._calculator.total_salary(
                    days_present=days_by_labourer[labourer_id], daily_wage=daily_wage
                ),
                "status": SalaryStatus.PENDING,
                "payslip_url": "",
            }
            for labourer_id in labourer_ids
            if labourer_id not in already
        ]
        if not rows:
            return GenerationResult(outcome=ALREADY_GENERATED, message=MSG_SALARY_ALREADY_GENERATED)

        report = self._salaries.insert_many(rows)
        created = self._expand([self._salaries.get_by_id(i).to_dict() for i in report.inserted_ids])
        failed = [
            {"index": pos, "labourerId": rows[pos]["labourer_id"], "error": message}
            for pos, message in report.failures
        ]
        logger.info(
            "salary generation %s..%s: %d created, %d failed",
            isoformat(start),
            isoformat(end),
            len(created),
            len(failed),
        )
        return GenerationResult(
            outcome=GENERATED,
            message=f"Generated salary records for {len(created)} labourers",
            created=created,
            failed=failed,
        )
