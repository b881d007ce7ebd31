"""Role-scoped authorization.

Every service operation calls :func:`authorize` with the caller's identity and
the roles allowed to invoke it. The returned :class:`Scope` is then used to
narrow store queries to what the caller may see.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Optional

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError

ALL_ROLES = frozenset(Role)
ADMIN_ONLY = frozenset({Role.ADMIN})
ADMIN_OR_MANAGER = frozenset({Role.ADMIN, Role.MANAGER})


@dataclass(frozen=True)
class Scope:
    """Visible slice of the store for one caller.

    organization_id None means every organization. user_id is set for
    employee callers, who only ever see their own employee row; employee_id is
    filled once that row has been resolved.
    """

    role: Role
    organization_id: Optional[int] = None
    user_id: Optional[str] = None
    employee_id: Optional[int] = None

    @property
    def is_unrestricted(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_self_only(self) -> bool:
        return self.role == Role.EMPLOYEE

    def allows_organization(self, organization_id: Optional[int]) -> bool:
        if self.is_unrestricted:
            return True
        return organization_id is not None and organization_id == self.organization_id

    def require_organization(self, organization_id: Optional[int]) -> None:
        if not self.allows_organization(organization_id):
            raise AuthorizationError("You can only access your own organization")

    def require_employee(self, employee_id: int, organization_id: Optional[int]) -> None:
        """Reject targets outside the scope (other orgs, or other people for employees)."""
        if self.is_self_only:
            if self.employee_id is None or employee_id != self.employee_id:
                raise AuthorizationError("You can only act on your own attendance")
            return
        self.require_organization(organization_id)

    def bind_employee(self, employee_id: Optional[int]) -> "Scope":
        if employee_id is None:
            raise NotFoundError("Employee record not found")
        return replace(self, employee_id=int(employee_id))


def authorize(identity, required_roles: Iterable[Role], resource_org_id: Optional[int] = None) -> Scope:
    """Decide whether ``identity`` may run an operation gated on ``required_roles``.

    ``resource_org_id`` is the organization of the target resource, when the
    operation names one. Pure: no store access, no side effects.
    """
    if identity is None:
        raise AuthenticationError("Not authenticated")

    required = frozenset(required_roles)
    if identity.role not in required:
        raise AuthorizationError(
            "Access denied for this role",
            required_roles=required,
            actual_role=identity.role,
        )

    if identity.role == Role.ADMIN:
        return Scope(role=Role.ADMIN)

    org_id = int(identity.organization_id) if identity.organization_id is not None else None
    if identity.role == Role.MANAGER:
        if org_id is None:
            raise AuthorizationError("Your account is not assigned to an organization")
        scope = Scope(role=Role.MANAGER, organization_id=org_id)
    else:
        # Employees are scoped by their linked employee row, resolved later.
        scope = Scope(role=Role.EMPLOYEE, organization_id=org_id, user_id=identity.id)

    if resource_org_id is not None:
        scope.require_organization(int(resource_org_id))
    return scope
