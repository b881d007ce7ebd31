from __future__ import annotations

from attendsys.core.enums import Role


def test_health_is_public(client):
    resp = client.get("/api/health")

    assert resp.status_code == 200
    assert resp.get_json()["status"] == "ok"


def test_missing_bearer_token_is_401(client):
    resp = client.get("/api/attendance")

    assert resp.status_code == 401
    assert resp.get_json()["error"] == "unauthenticated"


def test_login_and_me(client, seed):
    seed.profile(Role.ADMIN, email="root@example.com", password="rootpass")

    resp = client.post("/api/auth/login", json={"email": "root@example.com", "password": "rootpass"})
    assert resp.status_code == 200
    token = resp.get_json()["token"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.get_json()["user"]["role"] == "admin"


def test_bad_login_is_401(client):
    resp = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "nothing"})

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid credentials"


def test_check_in_twice_returns_conflict_with_record(client, world, auth_header):
    headers = auth_header(world.worker_profile)

    first = client.post("/api/attendance/checkin", json={}, headers=headers)
    assert first.status_code == 201
    record = first.get_json()["record"]
    assert record["employee_id"] == world.self_emp.id
    assert record["check_out"] is None

    second = client.post("/api/attendance/checkin", json={}, headers=headers)
    assert second.status_code == 409
    body = second.get_json()
    assert body["error"] == "conflict"
    assert body["record"]["id"] == record["id"]

    out = client.post("/api/attendance/checkout", headers=headers)
    assert out.status_code == 200
    assert out.get_json()["record"]["check_out"].endswith("Z")


def test_employee_role_on_manager_endpoint_reports_roles(client, world, auth_header):
    resp = client.get("/api/attendance/summary", headers=auth_header(world.worker_profile))

    assert resp.status_code == 403
    body = resp.get_json()
    assert body["required_roles"] == ["admin", "manager"]
    assert body["your_role"] == "employee"


def test_summary_for_manager(client, world, container, auth_header):
    manager = container.profiles_repo.get_by_id(world.manager.id)

    resp = client.get("/api/attendance/summary?date=2024-01-10", headers=auth_header(manager))

    assert resp.status_code == 200
    assert resp.get_json() == {
        "date": "2024-01-10",
        "total_employees": 2,
        "present": 0,
        "absent": 2,
        "attendance_percentage": 0,
    }


def test_invalid_date_query_is_400(client, world, container, auth_header):
    admin = container.profiles_repo.get_by_id(world.admin.id)

    resp = client.get("/api/attendance/daily?date=yesterday", headers=auth_header(admin))

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation_error"


def test_admin_creates_organization_and_employee(client, world, container, auth_header):
    headers = auth_header(container.profiles_repo.get_by_id(world.admin.id))

    org = client.post("/api/organizations", json={"name": "Org C"}, headers=headers)
    assert org.status_code == 201
    org_id = org.get_json()["organization"]["id"]

    emp = client.post(
        "/api/employees",
        json={"name": "Dana", "email": "dana@example.com", "organization_id": org_id},
        headers=headers,
    )
    assert emp.status_code == 201
    assert emp.get_json()["employee"]["organization_id"] == org_id


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/nope")

    assert resp.status_code == 404
    assert resp.get_json()["error"] == "not_found"


def test_check_in_with_bare_date_timestamp_is_400(client, world, auth_header):
    resp = client.post(
        "/api/attendance/checkin",
        json={"check_in": "2024-01-10"},
        headers=auth_header(world.worker_profile),
    )

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation_error"


def test_employee_linked_to_unknown_user_is_404(client, world, container, auth_header):
    headers = auth_header(container.profiles_repo.get_by_id(world.admin.id))

    resp = client.post(
        "/api/employees",
        json={"name": "Ghost", "email": "ghost@example.com", "organization_id": world.org_a.id, "user_id": "nobody"},
        headers=headers,
    )

    assert resp.status_code == 404
    assert resp.get_json()["error"] == "not_found"
