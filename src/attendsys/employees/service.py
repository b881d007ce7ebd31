from __future__ import annotations

import logging
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..authorization.policy import ADMIN_OR_MANAGER, Scope, authorize
from ..common.validators import optional_int, optional_str, optional_url, require_email, require_non_empty
from ..core.constants import EMPLOYEE_RECENT_RECORDS_LIMIT
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    DuplicateRecordError,
    NotFoundError,
    ValidationError,
)
from ..organizations.repository import OrganizationRepository
from ..users.model import Identity
from ..users.repository import ProfileRepository
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


def _clean_fields(payload: dict, *, partial: bool) -> dict:
    out: dict = {}
    if not partial or "name" in payload:
        out["name"] = require_non_empty(payload.get("name"), "name")
    if not partial or "email" in payload:
        out["email"] = require_email(payload.get("email"))
    if "department" in payload:
        out["department"] = optional_str(payload.get("department"), "department")
    if "avatar_url" in payload:
        out["avatar_url"] = optional_url(payload.get("avatar_url"), "avatar_url")
    if "user_id" in payload:
        out["user_id"] = optional_str(payload.get("user_id"), "user_id")
    return out


class EmployeeService:
    """Use case: employee CRUD within the caller's organization scope."""

    def __init__(
        self,
        employees: EmployeeRepository,
        organizations: OrganizationRepository,
        attendance: AttendanceRepository,
        profiles: ProfileRepository,
    ):
        self._employees = employees
        self._organizations = organizations
        self._attendance = attendance
        self._profiles = profiles

    def _get_in_scope(self, scope: Scope, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        scope.require_organization(employee.organization_id)
        return employee

    def _require_profile(self, user_id: Optional[str]) -> None:
        if user_id is not None and not self._profiles.get_by_id(user_id):
            raise NotFoundError("User not found")

    def _ensure_unique(self, fields: dict, *, current_id: Optional[int] = None) -> None:
        email = fields.get("email")
        if email:
            other = self._employees.get_by_email(email)
            if other and other.id != current_id:
                raise ConflictError("An employee with this email already exists")
        user_id = fields.get("user_id")
        if user_id:
            other = self._employees.get_by_user_id(user_id)
            if other and other.id != current_id:
                raise ConflictError("This user is already linked to another employee")

    def list_employees(self, identity: Optional[Identity]) -> list[Employee]:
        scope = authorize(identity, ADMIN_OR_MANAGER)
        org_id = None if scope.is_unrestricted else scope.organization_id
        return list(self._employees.list_all(organization_id=org_id))

    def get_employee(self, identity: Optional[Identity], employee_id: int) -> dict:
        scope = authorize(identity, ADMIN_OR_MANAGER)
        employee = self._get_in_scope(scope, employee_id)

        rows = self._attendance.list_records(employee_id=employee.id, limit=EMPLOYEE_RECENT_RECORDS_LIMIT)
        data = employee.to_dict()
        data["attendance_records"] = [r.record.to_dict() for r in rows]
        return data

    def create_employee(self, identity: Optional[Identity], payload: dict) -> Employee:
        scope = authorize(identity, ADMIN_OR_MANAGER)
        fields = _clean_fields(payload, partial=False)

        organization_id = optional_int(payload.get("organization_id"), "organization_id")
        if organization_id is None:
            if scope.is_unrestricted:
                raise ValidationError("organization_id is required")
            organization_id = scope.organization_id
        if not scope.allows_organization(organization_id):
            raise AuthorizationError("You can only add employees to your own organization")
        if not self._organizations.get_by_id(organization_id):
            raise NotFoundError("Organization not found")

        self._require_profile(fields.get("user_id"))
        self._ensure_unique(fields)
        try:
            employee = self._employees.create(organization_id=organization_id, **fields)
        except DuplicateRecordError:
            raise ConflictError("An employee with this email or user already exists")

        logger.info("Employee %s created in organization %s", employee.id, organization_id)
        return employee

    def update_employee(self, identity: Optional[Identity], employee_id: int, payload: dict) -> Employee:
        scope = authorize(identity, ADMIN_OR_MANAGER)
        current = self._get_in_scope(scope, employee_id)

        if "organization_id" in payload:
            requested = optional_int(payload.get("organization_id"), "organization_id")
            if requested != current.organization_id:
                raise ValidationError("Employees cannot be moved to another organization")

        changes = _clean_fields(payload, partial=True)
        if not changes and "organization_id" not in payload:
            raise ValidationError("Nothing to update")

        self._require_profile(changes.get("user_id"))
        self._ensure_unique(changes, current_id=current.id)
        try:
            updated = self._employees.update(current.id, changes)
        except DuplicateRecordError:
            raise ConflictError("An employee with this email or user already exists")
        if not updated:
            raise NotFoundError("Employee not found")
        return updated

    def delete_employee(self, identity: Optional[Identity], employee_id: int) -> None:
        scope = authorize(identity, ADMIN_OR_MANAGER)
        employee = self._get_in_scope(scope, employee_id)

        if not self._employees.delete(employee.id):
            raise NotFoundError("Employee not found")
        logger.info("Employee %s deleted by %s", employee.id, identity.email)
