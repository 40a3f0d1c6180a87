import pytest

from labour_system.main import create_app

API = "/api/v1"


@pytest.fixture
def client(container):
    app = create_app("config.testing", container=container)
    return app.test_client()


def _login(client, username, password):
    response = client.post(f"{API}/users/login", json={"username": username, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.get_json()['data']['accessToken']}"}


@pytest.fixture
def admin(client, admin_id):
    return _login(client, "admin", "admin123")


def test_health(client):
    response = client.get(f"{API}/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_protected_routes_require_a_token(client):
    response = client.get(f"{API}/labourers")
    assert response.status_code == 401
    assert response.get_json() == {"success": False, "message": "Unauthorized request"}


def test_register_sets_cookies_and_labourers_are_forbidden_from_staff_routes(client):
    response = client.post(
        f"{API}/users/register",
        json={"name": "Lab One", "username": "lab1", "email": "lab1@example.com", "password": "secret1", "phone": "9000000001"},
    )
    assert response.status_code == 201
    assert "accessToken=" in " ".join(response.headers.getlist("Set-Cookie"))

    headers = _login(client, "lab1", "secret1")
    assert client.get(f"{API}/attendance/dashboard/stats", headers=headers).status_code == 403


def test_invalid_identifier_is_a_bad_request(client, admin):
    response = client.get(f"{API}/labourers/not-an-id", headers=admin)
    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_unknown_route_returns_json_404(client):
    response = client.get(f"{API}/nowhere")
    assert response.status_code == 404
    assert response.get_json()["success"] is False


def test_paged_listing_has_meta(client, admin, labourer_id):
    response = client.get(f"{API}/labourers?page=1&limit=10", headers=admin)
    body = response.get_json()
    assert response.status_code == 200
    assert body["meta"] == {"total": 1, "totalPages": 1, "currentPage": 1, "pageSize": 1}
    assert body["data"][0]["id"] == labourer_id


def test_bulk_attendance_then_csv_export(client, admin, labourer_id, project_id):
    entries = [
        {"labourerId": labourer_id, "projectId": project_id, "date": "2024-01-02", "shift": "morning", "status": "present"},
        {"labourerId": labourer_id, "projectId": project_id, "date": "2024-01-03", "shift": "dusk", "status": "present"},
    ]
    response = client.post(f"{API}/attendance/bulk", json={"attendanceRecords": entries}, headers=admin)
    body = response.get_json()
    assert response.status_code == 201
    assert body["insertedCount"] == 1
    assert body["failedRecords"][0]["index"] == 1

    export = client.get(f"{API}/attendance/download", headers=admin)
    assert export.status_code == 200
    assert export.mimetype == "text/csv"
    assert export.headers["Content-Disposition"].startswith("attachment; filename=attendance_export_")
    lines = export.data.decode("utf-8-sig").splitlines()
    assert lines[0].startswith("Date,Shift,Status,LabourerName")
    assert lines[1].startswith("2024-01-02,morning,present,Ravi Kumar")


def test_duplicate_attendance_is_409(client, admin, labourer_id, project_id):
    payload = {"labourerId": labourer_id, "projectId": project_id, "date": "2024-01-02", "shift": "night", "status": "present"}
    assert client.post(f"{API}/attendance", json=payload, headers=admin).status_code == 201
    assert client.post(f"{API}/attendance", json=payload, headers=admin).status_code == 409


def test_salary_generation_and_payslip_download(client, admin, labourer_id, project_id):
    payload = {"labourerId": labourer_id, "projectId": project_id, "date": "2024-01-02", "shift": "morning", "status": "present"}
    client.post(f"{API}/attendance", json=payload, headers=admin)

    period = {"startPeriod": "2024-01-01", "endPeriod": "2024-01-31", "dailyWage": 250}
    first = client.post(f"{API}/salary/generate", json=period, headers=admin)
    assert first.status_code == 201
    salary = first.get_json()["generatedSalaries"][0]
    assert salary["totalSalary"] == 250

    second = client.post(f"{API}/salary/generate", json=period, headers=admin)
    assert second.status_code == 200
    assert second.get_json()["message"] == "Salary records for this period already generated for all labourers."

    missing = client.get(f"{API}/salary/{salary['id']}/download-payslip", headers=admin)
    assert missing.status_code == 404

    client.put(f"{API}/salary/{salary['id']}/payslip-url", json={"payslipUrl": "https://files.example.com/1.pdf"}, headers=admin)
    download = client.get(f"{API}/salary/{salary['id']}/download-payslip", headers=admin)
    assert download.status_code == 302
    assert download.headers["Location"] == "https://files.example.com/1.pdf"


def test_leave_review_conflict(client, admin, labourer_id):
    lab = client.post(
        f"{API}/users/register",
        json={"name": "Lab Two", "username": "lab2", "email": "lab2@example.com", "password": "secret2", "phone": "9000000002"},
    )
    assert lab.status_code == 201
    linked = client.put(f"{API}/labourers/{labourer_id}", json={"userId": lab.get_json()["data"]["userId"]}, headers=admin)
    assert linked.status_code == 200
    labourer = _login(client, "lab2", "secret2")

    applied = client.post(
        f"{API}/leave/apply",
        json={"labourerId": labourer_id, "fromDate": "2024-03-01", "toDate": "2024-03-02", "reason": "Fever"},
        headers=labourer,
    )
    assert applied.status_code == 201
    leave_id = applied.get_json()["data"]["id"]

    assert client.patch(f"{API}/leave/{leave_id}/approve", json={}, headers=admin).status_code == 200
    again = client.patch(f"{API}/leave/{leave_id}/reject", json={}, headers=admin)
    assert again.status_code == 409


def test_labourer_cannot_file_or_cancel_leave_for_another_profile(client, admin, labourer_id):
    owner = client.post(
        f"{API}/users/register",
        json={"name": "Lab Three", "username": "lab3", "email": "lab3@example.com", "password": "secret3", "phone": "9000000003"},
    )
    client.put(f"{API}/labourers/{labourer_id}", json={"userId": owner.get_json()["data"]["userId"]}, headers=admin)
    client.post(
        f"{API}/users/register",
        json={"name": "Stranger", "username": "stranger", "email": "stranger@example.com", "password": "secret4", "phone": "9000000004"},
    )
    stranger = _login(client, "stranger", "secret4")
    payload = {"labourerId": labourer_id, "fromDate": "2024-03-01", "toDate": "2024-03-02", "reason": "Fever"}

    foreign = client.post(f"{API}/leave/apply", json=payload, headers=stranger)
    assert foreign.status_code == 403
    assert foreign.get_json()["success"] is False

    applied = client.post(f"{API}/leave/apply", json=payload, headers=_login(client, "lab3", "secret3"))
    assert applied.status_code == 201
    leave_id = applied.get_json()["data"]["id"]
    assert client.delete(f"{API}/leave/{leave_id}/cancel", headers=stranger).status_code == 403
    assert client.get(f"{API}/leave/{leave_id}", headers=admin).get_json()["data"]["status"] == "pending"
