import pytest

from labour_system.core.enums import Role
from labour_system.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from labour_system.users.model import CurrentUser

MISSING = "65a1b2c3d4e5f60718293a4f"


def _labourer_account(container, username):
    return container.users_repo.create(
        {
            "name": username.title(),
            "username": username,
            "email": f"{username}@example.com",
            "password_hash": "x",
            "phone": "9000000000",
            "role": "labourer",
            "refresh_token": None,
        }
    )


@pytest.fixture
def owner(container, labourer_id):
    user_id = _labourer_account(container, "ravi")
    container.labourers_repo.update(labourer_id, {"user_id": user_id})
    return CurrentUser(user_id=user_id, role=Role.LABOURER, username="ravi")


def _apply(container, current, labourer_id, **overrides):
    payload = {"labourerId": labourer_id, "fromDate": "2024-03-04", "toDate": "2024-03-06", "reason": "Family function"}
    payload.update(overrides)
    return container.leave_service.apply(payload, current=current)


def test_apply_starts_pending(container, owner, labourer_id):
    leave = _apply(container, owner, labourer_id)
    assert leave["status"] == "pending"
    assert leave["reviewedBy"] is None
    assert leave["labourer"]["fullName"] == "Ravi Kumar"


def test_apply_validation(container, owner, labourer_id):
    with pytest.raises(ValidationError):
        _apply(container, owner, labourer_id, toDate="2024-03-01")
    with pytest.raises(ValidationError):
        _apply(container, owner, labourer_id, reason="x" * 501)
    with pytest.raises(NotFoundError):
        _apply(container, owner, MISSING)


def test_approve_records_reviewer(container, owner, labourer_id, manager_id):
    leave = _apply(container, owner, labourer_id)
    approved = container.leave_service.approve(leave["id"], reviewer_id=manager_id)

    assert approved["status"] == "approved"
    assert approved["reviewedBy"] == manager_id
    assert approved["reviewer"]["username"] == "manager"
    assert approved["reviewedAt"] is not None


def test_only_pending_requests_can_be_reviewed_or_cancelled(container, owner, labourer_id, manager_id):
    leave = _apply(container, owner, labourer_id)
    container.leave_service.reject(leave["id"], reviewer_id=manager_id)

    with pytest.raises(ConflictError) as exc:
        container.leave_service.approve(leave["id"], reviewer_id=manager_id)
    assert exc.value.message == "Cannot approve a leave request with status 'rejected'"
    with pytest.raises(ConflictError):
        container.leave_service.cancel(leave["id"], current=owner)


def test_cancel_removes_pending_request(container, owner, labourer_id):
    leave = _apply(container, owner, labourer_id)
    container.leave_service.cancel(leave["id"], current=owner)
    with pytest.raises(NotFoundError):
        container.leave_service.get(leave["id"])


def test_list_by_labourer_uses_overlap(container, owner, labourer_id):
    _apply(container, owner, labourer_id)
    _apply(container, owner, labourer_id, fromDate="2024-04-10", toDate="2024-04-12")

    march = container.leave_service.list_by_labourer(labourer_id, {"fromDate": "2024-03-05", "toDate": "2024-03-31"})
    assert march.total == 1
    assert march.items[0]["fromDate"] == "2024-03-04T00:00:00.000Z"

    everything = container.leave_service.list_by_labourer(labourer_id, {})
    assert [l["fromDate"][:10] for l in everything.items] == ["2024-04-10", "2024-03-04"]


def test_add_remark(container, owner, labourer_id):
    leave = _apply(container, owner, labourer_id)
    assert container.leave_service.add_remark(leave["id"], "  ok  ")["remarks"] == "ok"
    with pytest.raises(ValidationError):
        container.leave_service.add_remark(leave["id"], " ")


def test_labourer_cannot_apply_or_cancel_for_another_profile(container, owner, labourer_id):
    stranger = CurrentUser(user_id=_labourer_account(container, "stranger"), role=Role.LABOURER, username="stranger")
    payload = {"labourerId": labourer_id, "fromDate": "2024-03-04", "toDate": "2024-03-06", "reason": "Family function"}

    with pytest.raises(AuthorizationError):
        container.leave_service.apply(payload, current=stranger)

    leave = _apply(container, owner, labourer_id)
    with pytest.raises(AuthorizationError):
        container.leave_service.cancel(leave["id"], current=stranger)
    assert container.leave_service.get(leave["id"])["status"] == "pending"


def test_admin_may_cancel_any_pending_request(container, owner, labourer_id, admin_id):
    leave = _apply(container, owner, labourer_id)
    container.leave_service.cancel(leave["id"], current=CurrentUser(user_id=admin_id, role=Role.ADMIN))
    with pytest.raises(NotFoundError):
        container.leave_service.get(leave["id"])
