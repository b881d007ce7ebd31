from __future__ import annotations

import os
from dataclasses import replace
from datetime import date, datetime
from types import SimpleNamespace
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

os.environ.setdefault("APP_ENV", "testing")

from attendsys.attendance.model import AttendanceListRow, AttendanceRecord  # noqa: E402
from attendsys.container import AuthConfig, wire  # noqa: E402
from attendsys.core.enums import Role  # noqa: E402
from attendsys.core.exceptions import DuplicateRecordError  # noqa: E402
from attendsys.employees.model import Employee  # noqa: E402
from attendsys.organizations.model import Organization  # noqa: E402
from attendsys.users.model import Profile  # noqa: E402

TEST_SECRET = "test-secret"
PROVIDER_SECRET = "test-provider-secret"
PROVIDER_ISSUER = "https://auth.example.test/auth/v1"


class InMemoryStore:
    """Shared tables for the fake repositories, with the store's FK cascades."""

    def __init__(self):
        self.organizations: dict[int, Organization] = {}
        self.profiles: dict[str, Profile] = {}
        self.employees: dict[int, Employee] = {}
        self.records: dict[tuple[int, date], AttendanceRecord] = {}
        self._ids = {"org": 0, "emp": 0, "rec": 0}

    def next_id(self, kind: str) -> int:
        self._ids[kind] += 1
        return self._ids[kind]

    def delete_employee(self, employee_id: int) -> None:
        self.employees.pop(employee_id, None)
        for key in [k for k, r in self.records.items() if r.employee_id == employee_id]:
            del self.records[key]


class InMemoryProfiles:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, profile_id: str) -> Optional[Profile]:
        return self._s.profiles.get(profile_id)

    def get_by_email(self, email: str) -> Optional[Profile]:
        return next((p for p in self._s.profiles.values() if p.email == email), None)

    def create_profile(self, *, profile_id, email, name, password_hash, role, organization_id) -> Profile:
        if self.get_by_email(email):
            raise DuplicateRecordError(email)
        profile = Profile(
            id=profile_id,
            email=email,
            name=name,
            password_hash=password_hash,
            role=role,
            organization_id=organization_id,
            created_at=datetime(2024, 1, 1),
        )
        self._s.profiles[profile_id] = profile
        return profile

    def set_role(self, profile_id: str, *, role: Role, organization_id) -> bool:
        profile = self._s.profiles.get(profile_id)
        if not profile:
            return False
        self._s.profiles[profile_id] = replace(profile, role=role, organization_id=organization_id)
        return True


class InMemoryOrganizations:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def list_all(self):
        return sorted(self._s.organizations.values(), key=lambda o: o.id, reverse=True)

    def get_by_id(self, organization_id: int) -> Optional[Organization]:
        return self._s.organizations.get(organization_id)

    def count_employees(self, organization_id: int) -> int:
        return sum(1 for e in self._s.employees.values() if e.organization_id == organization_id)

    def create(self, *, name, location, logo_url, created_by) -> Organization:
        org = Organization(
            id=self._s.next_id("org"),
            name=name,
            location=location,
            logo_url=logo_url,
            created_by=created_by,
            created_at=datetime(2024, 1, 1),
        )
        self._s.organizations[org.id] = org
        return org

    def update(self, organization_id: int, changes: dict) -> Optional[Organization]:
        org = self._s.organizations.get(organization_id)
        if not org:
            return None
        org = replace(org, **changes)
        self._s.organizations[org.id] = org
        return org

    def delete(self, organization_id: int) -> bool:
        if organization_id not in self._s.organizations:
            return False
        del self._s.organizations[organization_id]
        for emp_id in [e.id for e in self._s.employees.values() if e.organization_id == organization_id]:
            self._s.delete_employee(emp_id)
        for p in list(self._s.profiles.values()):
            if p.organization_id == organization_id:
                self._s.profiles[p.id] = replace(p, organization_id=None)
        return True


class InMemoryEmployees:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def _joined(self, e: Employee) -> Employee:
        org = self._s.organizations.get(e.organization_id)
        return replace(e, organization_name=org.name if org else None)

    def list_all(self, *, organization_id=None):
        rows = [
            self._joined(e)
            for e in self._s.employees.values()
            if organization_id is None or e.organization_id == organization_id
        ]
        return sorted(rows, key=lambda e: e.id, reverse=True)

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        e = self._s.employees.get(employee_id)
        return self._joined(e) if e else None

    def get_by_email(self, email: str) -> Optional[Employee]:
        return next((self._joined(e) for e in self._s.employees.values() if e.email == email), None)

    def get_by_user_id(self, user_id: str) -> Optional[Employee]:
        return next((self._joined(e) for e in self._s.employees.values() if e.user_id == user_id), None)

    def _check_unique(self, email, user_id, current_id=None) -> None:
        for e in self._s.employees.values():
            if e.id == current_id:
                continue
            if e.email == email or (user_id and e.user_id == user_id):
                raise DuplicateRecordError(email)

    def create(self, *, name, email, organization_id, department=None, avatar_url=None, user_id=None) -> Employee:
        self._check_unique(email, user_id)
        emp = Employee(
            id=self._s.next_id("emp"),
            name=name,
            email=email,
            organization_id=organization_id,
            department=department,
            avatar_url=avatar_url,
            user_id=user_id,
            created_at=datetime(2024, 1, 1),
        )
        self._s.employees[emp.id] = emp
        return self._joined(emp)

    def update(self, employee_id: int, changes: dict) -> Optional[Employee]:
        emp = self._s.employees.get(employee_id)
        if not emp:
            return None
        self._check_unique(changes.get("email", emp.email), changes.get("user_id", emp.user_id), emp.id)
        emp = replace(emp, **changes)
        self._s.employees[emp.id] = emp
        return self._joined(emp)

    def delete(self, employee_id: int) -> bool:
        if employee_id not in self._s.employees:
            return False
        self._s.delete_employee(employee_id)
        return True


class InMemoryAttendance:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._s.records.get((employee_id, work_date))

    def _insert(self, employee_id, work_date, check_in, is_absent) -> AttendanceRecord:
        if (employee_id, work_date) in self._s.records:
            raise DuplicateRecordError(f"{employee_id}/{work_date}")
        rec = AttendanceRecord(
            id=self._s.next_id("rec"),
            employee_id=employee_id,
            work_date=work_date,
            check_in=check_in,
            check_out=None,
            is_absent=is_absent,
        )
        self._s.records[(employee_id, work_date)] = rec
        return rec

    def create_checkin(self, *, employee_id, work_date, check_in) -> AttendanceRecord:
        return self._insert(employee_id, work_date, check_in, False)

    def create_absence(self, *, employee_id, work_date) -> AttendanceRecord:
        return self._insert(employee_id, work_date, None, True)

    def update_checkout(self, *, record_id, check_out) -> bool:
        for key, rec in self._s.records.items():
            if rec.id == record_id:
                if rec.check_out is not None or rec.is_absent:
                    return False
                self._s.records[key] = replace(rec, check_out=check_out)
                return True
        return False

    def list_for_date(self, *, work_date, employee_ids):
        ids = set(employee_ids)
        return [r for r in self._s.records.values() if r.work_date == work_date and r.employee_id in ids]

    def list_records(self, *, start_date=None, end_date=None, employee_id=None, organization_id=None, limit=None):
        out = []
        for rec in self._s.records.values():
            emp = self._s.employees.get(rec.employee_id)
            if emp is None:
                continue
            if start_date and rec.work_date < start_date:
                continue
            if end_date and rec.work_date > end_date:
                continue
            if employee_id is not None and rec.employee_id != employee_id:
                continue
            if organization_id is not None and emp.organization_id != organization_id:
                continue
            org = self._s.organizations.get(emp.organization_id)
            out.append(
                AttendanceListRow(
                    record=rec,
                    employee_name=emp.name,
                    employee_email=emp.email,
                    department=emp.department,
                    organization_id=emp.organization_id,
                    organization_name=org.name if org else None,
                )
            )
        out.sort(key=lambda r: (r.record.work_date, r.record.id), reverse=True)
        return out[:limit] if limit is not None else out


class Seeder:
    def __init__(self, store: InMemoryStore):
        self.store = store
        self.orgs = InMemoryOrganizations(store)
        self.profiles = InMemoryProfiles(store)
        self.employees = InMemoryEmployees(store)

    def org(self, name: str = "Acme") -> Organization:
        return self.orgs.create(name=name, location=None, logo_url=None, created_by=None)

    def profile(self, role: Role, *, org_id=None, email=None, password: str = "secret123") -> Profile:
        pid = f"user-{len(self.store.profiles) + 1}"
        return self.profiles.create_profile(
            profile_id=pid,
            email=email or f"{pid}@example.com",
            name=pid,
            password_hash=generate_password_hash(password),
            role=role,
            organization_id=org_id,
        )

    def employee(self, org_id: int, *, name: Optional[str] = None, user_id=None, department=None) -> Employee:
        n = len(self.store.employees) + 1
        return self.employees.create(
            name=name or f"Employee {n}",
            email=f"employee{n}@example.com",
            organization_id=org_id,
            department=department,
            user_id=user_id,
        )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 10, 9, 0, 0)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def seed(store) -> Seeder:
    return Seeder(store)


@pytest.fixture
def container(store):
    return wire(
        profiles_repo=InMemoryProfiles(store),
        organizations_repo=InMemoryOrganizations(store),
        employees_repo=InMemoryEmployees(store),
        attendance_repo=InMemoryAttendance(store),
        auth_config=AuthConfig(
            secret_key=TEST_SECRET,
            provider_secret=PROVIDER_SECRET,
            provider_issuer=PROVIDER_ISSUER,
        ),
    )


@pytest.fixture
def world(seed):
    """Two tenants: org A with a manager, a linked employee and a colleague; org B with one employee."""
    org_a = seed.org("Org A")
    org_b = seed.org("Org B")
    admin = seed.profile(Role.ADMIN, email="admin@example.com")
    manager = seed.profile(Role.MANAGER, org_id=org_a.id, email="manager@example.com")
    worker = seed.profile(Role.EMPLOYEE, org_id=org_a.id, email="worker@example.com")
    self_emp = seed.employee(org_a.id, name="Worker", user_id=worker.id)
    colleague = seed.employee(org_a.id, name="Colleague")
    outsider = seed.employee(org_b.id, name="Outsider")
    return SimpleNamespace(
        org_a=org_a,
        org_b=org_b,
        admin=admin.to_identity(),
        manager=manager.to_identity(),
        worker=worker.to_identity(),
        worker_profile=worker,
        self_emp=self_emp,
        colleague=colleague,
        outsider=outsider,
    )


@pytest.fixture
def app(container):
    from attendsys.main import create_app

    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_header(container):
    def _make(profile: Profile) -> dict:
        return {"Authorization": f"Bearer {container.token_issuer.issue(profile)}"}

    return _make
