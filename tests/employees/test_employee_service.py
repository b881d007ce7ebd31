from __future__ import annotations

from datetime import datetime

import pytest

from attendsys.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError


@pytest.fixture
def service(container):
    return container.employee_service


def test_manager_lists_only_their_organization(service, world):
    employees = service.list_employees(world.manager)

    assert {e.organization_id for e in employees} == {world.org_a.id}
    assert len(employees) == 2


def test_admin_lists_everyone(service, world):
    assert len(service.list_employees(world.admin)) == 3


def test_employee_cannot_list(service, world):
    with pytest.raises(AuthorizationError):
        service.list_employees(world.worker)


def test_manager_creates_in_own_organization_by_default(service, world):
    employee = service.create_employee(world.manager, {"name": "New Hire", "email": "New@Example.com"})

    assert employee.organization_id == world.org_a.id
    assert employee.email == "new@example.com"
    assert employee.organization_name == "Org A"


def test_manager_cannot_create_in_other_organization(service, world):
    with pytest.raises(AuthorizationError):
        service.create_employee(
            world.manager,
            {"name": "Spy", "email": "spy@example.com", "organization_id": world.org_b.id},
        )


def test_admin_must_choose_organization(service, world):
    with pytest.raises(ValidationError):
        service.create_employee(world.admin, {"name": "X", "email": "x@example.com"})

    with pytest.raises(NotFoundError):
        service.create_employee(world.admin, {"name": "X", "email": "x@example.com", "organization_id": 999})


def test_duplicate_email_conflicts(service, world):
    with pytest.raises(ConflictError):
        service.create_employee(world.admin, {"name": "Dup", "email": world.colleague.email, "organization_id": world.org_b.id})


def test_get_employee_includes_recent_attendance(container, service, world):
    container.attendance_service.check_in(world.admin, employee_id=world.colleague.id, now=datetime(2024, 1, 10, 9, 0))

    data = service.get_employee(world.manager, world.colleague.id)

    assert data["name"] == "Colleague"
    assert [r["date"] for r in data["attendance_records"]] == ["2024-01-10"]


def test_manager_cannot_read_other_organization(service, world):
    with pytest.raises(AuthorizationError):
        service.get_employee(world.manager, world.outsider.id)


def test_update_changes_fields_but_not_organization(service, world):
    updated = service.update_employee(world.manager, world.colleague.id, {"department": "Ops"})
    assert updated.department == "Ops"

    with pytest.raises(ValidationError):
        service.update_employee(world.admin, world.colleague.id, {"organization_id": world.org_b.id})

    with pytest.raises(ValidationError):
        service.update_employee(world.admin, world.colleague.id, {})


def test_delete_cascades_attendance(container, service, world):
    container.attendance_service.check_in(world.admin, employee_id=world.colleague.id, now=datetime(2024, 1, 10, 9, 0))

    service.delete_employee(world.manager, world.colleague.id)

    with pytest.raises(NotFoundError):
        service.get_employee(world.admin, world.colleague.id)
    assert container.attendance_service.list_records(world.admin, employee_id=world.colleague.id) == []


def test_linking_unknown_user_is_not_found(service, world):
    with pytest.raises(NotFoundError) as exc:
        service.create_employee(
            world.admin,
            {"name": "Ghost", "email": "ghost@example.com", "organization_id": world.org_a.id, "user_id": "no-such-profile"},
        )
    assert exc.value.message == "User not found"

    with pytest.raises(NotFoundError):
        service.update_employee(world.manager, world.colleague.id, {"user_id": "no-such-profile"})


def test_linking_existing_user(service, seed, world):
    from attendsys.core.enums import Role

    profile = seed.profile(Role.EMPLOYEE, org_id=world.org_a.id)

    updated = service.update_employee(world.manager, world.colleague.id, {"user_id": profile.id})

    assert updated.user_id == profile.id
