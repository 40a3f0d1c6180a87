from dataclasses import dataclass

from labour_system.common.summary import attendance_summary, salary_totals


def test_attendance_summary_defaults_missing_statuses():
    assert attendance_summary({"present": 2, "absent": 1, "half-day": 1}) == {
        "present": 2,
        "absent": 1,
        "halfDay": 1,
        "totalRecords": 4,
    }
    assert attendance_summary({}) == {"present": 0, "absent": 0, "halfDay": 0, "totalRecords": 0}


def test_attendance_summary_ignores_unknown_statuses():
    summary = attendance_summary({"present": 3, "late": 5})
    assert summary["totalRecords"] == 3


@dataclass
class _Row:
    status: str
    total_salary: float
    total_days_present: int


def test_salary_totals_split_by_status():
    rows = [_Row("paid", 300, 3), _Row("pending", 150, 1.5), _Row("pending", 100, 1)]
    assert salary_totals(rows) == {
        "totalPaid": 300,
        "totalPending": 250,
        "recordsCount": 3,
        "totalDaysPresent": 5.5,
    }
    assert salary_totals([]) == {"totalPaid": 0, "totalPending": 0, "recordsCount": 0, "totalDaysPresent": 0}
