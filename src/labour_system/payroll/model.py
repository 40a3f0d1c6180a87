from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from ..common.datetime_utils import isoformat
from ..core.enums import SalaryStatus


@dataclass(frozen=True)
class Salary:
    id: str
    labourer_id: str
    start_period: datetime
    end_period: datetime
    total_days_present: int
    daily_wage: float
    total_salary: float
    status: SalaryStatus
    payslip_url: str = ""
    payment_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Salary":
        return cls(
            id=doc["id"],
            labourer_id=doc["labourer_id"],
            start_period=doc["start_period"],
            end_period=doc["end_period"],
            total_days_present=doc.get("total_days_present", 0),
            daily_wage=doc.get("daily_wage", 0),
            total_salary=doc.get("total_salary", 0),
            status=SalaryStatus(doc.get("status", SalaryStatus.PENDING.value)),
            payslip_url=doc.get("payslip_url") or "",
            payment_date=doc.get("payment_date"),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "labourerId": self.labourer_id,
            "startPeriod": isoformat(self.start_period),
            "endPeriod": isoformat(self.end_period),
            "totalDaysPresent": self.total_days_present,
            "dailyWage": self.daily_wage,
            "totalSalary": self.total_salary,
            "status": self.status.value,
            "payslipUrl": self.payslip_url,
            "paymentDate": isoformat(self.payment_date),
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one salary generation run.

    `outcome` is one of "no_attendance", "already_generated" or "generated".
    """

    outcome: str
    message: str
    created: List[Dict[str, Any]] = field(default_factory=list)
    failed: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def status_code(self) -> int:
        return 201 if self.created else 200

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"outcome": self.outcome, "generatedSalaries": self.created}
        if self.failed:
            out["failedRecords"] = self.failed
        return out
