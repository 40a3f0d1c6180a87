import pytest

from labour_system.core.enums import Role
from labour_system.core.exceptions import NotFoundError, ValidationError
from labour_system.users.model import CurrentUser


def test_change_password_checks_old_password(container, manager_id):
    service = container.user_service
    with pytest.raises(ValidationError):
        service.change_password(user_id=manager_id, old_password="nope", new_password="brandnew")

    service.change_password(user_id=manager_id, old_password="manager123", new_password="brandnew")
    assert container.auth_service.authenticate("manager", "brandnew").user.id == manager_id


def test_update_role_and_list_filter(container, admin_id, manager_id):
    updated = container.user_service.update_role(user_id=manager_id, new_role="admin")
    assert updated.role == Role.ADMIN

    page = container.user_service.list_users({"role": "admin"})
    assert page.total == 2
    assert {u["username"] for u in page.items} == {"admin", "manager"}


def test_admin_cannot_delete_self(container, admin_id, manager_id):
    admin = CurrentUser(user_id=admin_id, role=Role.ADMIN, username="admin")
    with pytest.raises(ValidationError):
        container.user_service.delete_user(current=admin, user_id=admin_id)

    container.user_service.delete_user(current=admin, user_id=manager_id)
    with pytest.raises(NotFoundError):
        container.user_service.get(manager_id)
