from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from fakes import make_container


@pytest.fixture
def container():
    return make_container()


def _staff(container, username: str, role: str) -> str:
    return container.users_repo.create(
        {
            "name": username.title(),
            "username": username,
            "email": f"{username}@example.com",
            "password_hash": generate_password_hash(f"{username}123"),
            "phone": "9876543210",
            "role": role,
            "refresh_token": None,
        }
    )


@pytest.fixture
def admin_id(container) -> str:
    return _staff(container, "admin", "admin")


@pytest.fixture
def manager_id(container) -> str:
    return _staff(container, "manager", "manager")


@pytest.fixture
def labourer_id(container) -> str:
    return container.labourers_repo.create(
        {
            "full_name": "Ravi Kumar",
            "age": 32,
            "gender": "male",
            "contact_number": "9876500001",
            "address": "12 Market Road",
            "skill_type": "mason",
            "status": "active",
            "user_id": None,
            "assigned_project_id": None,
        }
    )


@pytest.fixture
def project_id(container) -> str:
    return container.projects_repo.create(
        {
            "name": "Riverside Tower",
            "description": "Residential block",
            "location": "Pune",
            "status": "active",
            "manager_id": None,
            "assigned_labourers": [],
        }
    )
