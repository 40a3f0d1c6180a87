from datetime import datetime

import pytest

from labour_system.core.exceptions import ConflictError, NotFoundError, ValidationError
from labour_system.payroll.service import ALREADY_GENERATED, GENERATED, NO_ATTENDANCE

PERIOD = {"startPeriod": "2024-01-01", "endPeriod": "2024-01-31"}


def _attend(container, labourer_id, project_id, days, status="present"):
    for day in days:
        container.attendance_service.mark(
            {"labourerId": labourer_id, "projectId": project_id, "date": day, "shift": "morning", "status": status}
        )


def test_generate_from_present_days(container, labourer_id, project_id):
    _attend(container, labourer_id, project_id, ["2024-01-02", "2024-01-03", "2024-01-04"])
    _attend(container, labourer_id, project_id, ["2024-01-05"], status="absent")
    _attend(container, labourer_id, project_id, ["2024-02-01"])

    result = container.salary_service.generate({**PERIOD, "dailyWage": 100})

    assert result.outcome == GENERATED
    assert result.status_code == 201
    assert result.message == "Generated salary records for 1 labourers"
    [salary] = result.created
    assert salary["labourerId"] == labourer_id
    assert salary["totalDaysPresent"] == 3
    assert salary["totalSalary"] == 300
    assert salary["status"] == "pending"
    assert salary["payslipUrl"] == ""


def test_generate_twice_reports_already_generated(container, labourer_id, project_id):
    _attend(container, labourer_id, project_id, ["2024-01-02"])
    container.salary_service.generate({**PERIOD, "dailyWage": 100})

    again = container.salary_service.generate({**PERIOD, "dailyWage": 100})
    assert again.outcome == ALREADY_GENERATED
    assert again.status_code == 200
    assert again.created == []
    assert len(container.salaries_repo.docs) == 1


def test_generate_without_attendance(container):
    result = container.salary_service.generate({**PERIOD, "dailyWage": 100})
    assert result.outcome == NO_ATTENDANCE
    assert result.to_dict()["generatedSalaries"] == []


@pytest.mark.parametrize(
    "payload",
    [
        {"startPeriod": "2024-01-01", "dailyWage": 100},
        {"startPeriod": "2024-02-01", "endPeriod": "2024-01-01", "dailyWage": 100},
        {**PERIOD, "dailyWage": -5},
        {**PERIOD, "dailyWage": "100"},
    ],
)
def test_generate_validation(container, payload):
    with pytest.raises(ValidationError):
        container.salary_service.generate(payload)


def _salary(labourer_id, **overrides):
    payload = {
        "labourerId": labourer_id,
        **PERIOD,
        "totalDaysPresent": 20,
        "dailyWage": 500,
        "totalSalary": 10000,
        "status": "pending",
    }
    payload.update(overrides)
    return payload


def test_create_rejects_duplicate_period(container, labourer_id):
    container.salary_service.create(_salary(labourer_id))
    with pytest.raises(ConflictError):
        container.salary_service.create(_salary(labourer_id, status="paid"))


def test_mark_paid_and_payslip(container, labourer_id):
    salary = container.salary_service.create(_salary(labourer_id))

    paid = container.salary_service.mark_paid(salary["id"], "2024-02-05")
    assert paid["status"] == "paid"
    assert paid["paymentDate"] == "2024-02-05T00:00:00.000Z"

    with pytest.raises(NotFoundError):
        container.salary_service.payslip_url(salary["id"])
    container.salary_service.update_payslip_url(salary["id"], "https://files.example.com/slip.pdf")
    assert container.salary_service.payslip_url(salary["id"]) == "https://files.example.com/slip.pdf"

    by_day = container.salary_service.list({"paymentDate": "2024-02-05"})
    assert by_day.total == 1


def test_summaries_use_period_overlap(container, labourer_id):
    january = container.salary_service.create(_salary(labourer_id))
    container.salary_service.mark_paid(january["id"])
    container.salary_service.create(
        _salary(labourer_id, startPeriod="2024-02-01", endPeriod="2024-02-29", totalDaysPresent=10, totalSalary=5000)
    )

    summary = container.salary_service.labourer_summary(labourer_id, {})
    assert summary["summary"] == {"totalPaid": 10000, "totalPending": 5000, "recordsCount": 2, "totalDaysPresent": 30}

    mid_feb = container.salary_service.period_summary({"startPeriod": "2024-02-10", "endPeriod": "2024-02-20"})
    assert mid_feb["summary"]["recordsCount"] == 1
    assert mid_feb["summary"]["totalPending"] == 5000
    assert mid_feb["startPeriod"] == "2024-02-10"
