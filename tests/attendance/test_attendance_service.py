from datetime import datetime

import pytest

from labour_system.core.exceptions import ConflictError, ValidationError


def _mark(container, labourer_id, project_id, day, status="present", shift="morning"):
    return container.attendance_service.mark(
        {"labourerId": labourer_id, "projectId": project_id, "date": day, "shift": shift, "status": status}
    )


def test_mark_expands_references(container, labourer_id, project_id, manager_id):
    record = container.attendance_service.mark(
        {"labourerId": labourer_id, "projectId": project_id, "date": "2024-01-01", "shift": "morning", "status": "present"},
        marked_by=manager_id,
    )
    assert record["date"] == "2024-01-01T00:00:00.000Z"
    assert record["labourer"]["fullName"] == "Ravi Kumar"
    assert record["project"]["name"] == "Riverside Tower"
    assert record["marker"]["username"] == "manager"


def test_duplicate_mark_is_a_conflict(container, labourer_id, project_id):
    _mark(container, labourer_id, project_id, "2024-01-01")
    with pytest.raises(ConflictError) as exc:
        _mark(container, labourer_id, project_id, "2024-01-01", status="absent")
    assert "already marked" in exc.value.message

    # a different shift on the same day is a separate record
    _mark(container, labourer_id, project_id, "2024-01-01", shift="night")


def test_update_checks_uniqueness_against_other_records(container, labourer_id, project_id):
    _mark(container, labourer_id, project_id, "2024-01-01")
    second = _mark(container, labourer_id, project_id, "2024-01-02")

    with pytest.raises(ConflictError):
        container.attendance_service.update(second["id"], {"date": "2024-01-01"})

    updated = container.attendance_service.update(second["id"], {"status": "half-day"})
    assert updated["status"] == "half-day"


def test_labourer_summary(container, labourer_id, project_id):
    _mark(container, labourer_id, project_id, "2024-01-01", "present")
    _mark(container, labourer_id, project_id, "2024-01-02", "present")
    _mark(container, labourer_id, project_id, "2024-01-03", "absent")
    _mark(container, labourer_id, project_id, "2024-01-04", "half-day")

    summary = container.attendance_service.labourer_summary(labourer_id, {})
    assert summary == {"present": 2, "absent": 1, "halfDay": 1, "totalRecords": 4}

    january_first_two = container.attendance_service.labourer_summary(
        labourer_id, {"startDate": "2024-01-01", "endDate": "2024-01-02"}
    )
    assert january_first_two["totalRecords"] == 2


def test_list_by_date_requires_date(container, labourer_id, project_id):
    _mark(container, labourer_id, project_id, "2024-01-01T08:00:00Z")
    _mark(container, labourer_id, project_id, "2024-01-02")

    with pytest.raises(ValidationError):
        container.attendance_service.list_by_date({})

    page = container.attendance_service.list_by_date({"date": "2024-01-01"})
    assert page.total == 1
    assert page.meta()["currentPage"] == 1


def test_export_rows_are_flattened(container, labourer_id, project_id, manager_id):
    container.attendance_service.mark(
        {"labourerId": labourer_id, "projectId": project_id, "date": "2024-01-05", "shift": "evening", "status": "absent"},
        marked_by=manager_id,
    )
    rows = container.attendance_service.export_rows({})
    assert len(rows) == 1
    row = rows[0]
    assert row["Date"] == "2024-01-05"
    assert row["Shift"] == "evening"
    assert row["LabourerName"] == "Ravi Kumar"
    assert row["ProjectLocation"] == "Pune"
    assert row["MarkedByEmail"] == "manager@example.com"


def test_dashboard_stats(container, labourer_id, project_id):
    today = datetime(2024, 1, 10, 15, 0)
    _mark(container, labourer_id, project_id, "2024-01-10")
    _mark(container, labourer_id, project_id, "2024-01-09")

    stats = container.attendance_service.dashboard_stats(today)
    assert stats["totalLabourers"] == 1
    assert stats["present"] == 1
    assert stats["attendancePercent"] == 100.0
    assert [d["date"] for d in stats["last7Days"]][-2:] == ["2024-01-09", "2024-01-10"]
    assert [d["present"] for d in stats["last7Days"]] == [0, 0, 0, 0, 0, 1, 1]
