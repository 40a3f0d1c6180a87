import pytest

from labour_system.core.exceptions import ConflictError, ValidationError


def _payload(labourer_id, project_id, **overrides):
    payload = {
        "labourerId": labourer_id,
        "projectId": project_id,
        "date": "2024-05-01",
        "performanceScore": 82,
        "remarks": "  Steady work  ",
    }
    payload.update(overrides)
    return payload


def test_create_trims_remarks_and_expands(container, labourer_id, project_id):
    record = container.performance_service.create(_payload(labourer_id, project_id))
    assert record["performanceScore"] == 82
    assert record["remarks"] == "Steady work"
    assert record["labourer"]["fullName"] == "Ravi Kumar"
    assert record["project"]["name"] == "Riverside Tower"


@pytest.mark.parametrize(
    "overrides",
    [
        {"performanceScore": 101},
        {"performanceScore": -1},
        {"performanceScore": "90"},
        {"remarks": "x" * 1001},
        {"remarks": None},
    ],
)
def test_create_validation(container, labourer_id, project_id, overrides):
    with pytest.raises(ValidationError):
        container.performance_service.create(_payload(labourer_id, project_id, **overrides))


def test_one_record_per_labourer_project_and_date(container, labourer_id, project_id):
    first = container.performance_service.create(_payload(labourer_id, project_id))
    with pytest.raises(ConflictError):
        container.performance_service.create(_payload(labourer_id, project_id, performanceScore=50))

    second = container.performance_service.create(_payload(labourer_id, project_id, date="2024-05-02"))
    with pytest.raises(ConflictError) as exc:
        container.performance_service.update(second["id"], {"date": "2024-05-01"})
    assert exc.value.message.startswith("Another performance record")

    updated = container.performance_service.update(first["id"], {"performanceScore": 90})
    assert updated["performanceScore"] == 90


def test_lists_filter_by_project_and_date(container, labourer_id, project_id):
    container.performance_service.create(_payload(labourer_id, project_id))
    container.performance_service.create(_payload(labourer_id, project_id, date="2024-06-01"))

    page = container.performance_service.list_by_labourer(labourer_id, {"startDate": "2024-05-15"})
    assert page.total == 1
    assert page.items[0]["date"].startswith("2024-06-01")

    by_project = container.performance_service.list_by_project(project_id, {})
    assert [r["date"][:10] for r in by_project.items] == ["2024-06-01", "2024-05-01"]
