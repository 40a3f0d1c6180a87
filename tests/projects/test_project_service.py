import pytest

from labour_system.core.exceptions import NotFoundError, ValidationError

MISSING = "65a1b2c3d4e5f60718293a4f"


def test_create_defaults_to_pending(container, manager_id):
    project = container.project_service.create(
        {
            "name": "Canal Bridge",
            "description": "Footbridge",
            "location": "Nashik",
            "startDate": "2024-01-01",
            "endDate": "2024-06-30",
            "managerId": manager_id,
        }
    )
    assert project["status"] == "pending"
    assert project["manager"]["username"] == "manager"
    assert project["labourers"] == []


def test_period_must_be_ordered(container, project_id):
    with pytest.raises(ValidationError):
        container.project_service.create(
            {"name": "X", "description": "Y", "location": "Z", "startDate": "2024-05-01", "endDate": "2024-04-01"}
        )
    container.project_service.update(project_id, {"endDate": "2024-04-01"})
    with pytest.raises(ValidationError):
        container.project_service.update(project_id, {"startDate": "2024-05-01"})


def test_assign_labourers_replaces_list(container, project_id, labourer_id):
    project = container.project_service.assign_labourers(project_id, [labourer_id, labourer_id])
    assert project["assignedLabourers"] == [labourer_id]
    assert project["labourers"][0]["fullName"] == "Ravi Kumar"

    with pytest.raises(NotFoundError):
        container.project_service.assign_labourers(project_id, [MISSING])
    with pytest.raises(ValidationError):
        container.project_service.assign_labourers(project_id, "not-a-list")

    mine = container.project_service.list_by_labourer(labourer_id, {})
    assert [p["id"] for p in mine.items] == [project_id]


def test_delete_or_archive(container, project_id):
    assert container.project_service.delete_or_archive(project_id, "archive") == "archived"
    assert container.project_service.get(project_id)["status"] == "archived"

    with pytest.raises(ValidationError):
        container.project_service.delete_or_archive(project_id, "shred")

    assert container.project_service.delete_or_archive(project_id) == "deleted"
    with pytest.raises(NotFoundError):
        container.project_service.get(project_id)


def test_list_filters_by_status_and_location(container, project_id):
    container.project_service.create({"name": "Depot", "description": "Store", "location": "Mumbai"})

    assert container.project_service.list({"status": "active"}).total == 1
    found = container.project_service.list({"location": "mum"})
    assert [p["name"] for p in found.items] == ["Depot"]
