from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee

UPDATABLE_COLUMNS = ("name", "email", "department", "avatar_url", "user_id")


class EmployeeRepository(Protocol):
    def list_all(self, *, organization_id: Optional[int] = None) -> Sequence[Employee]:
        """Newest first; ``organization_id`` None lists every organization."""

        raise NotImplementedError

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_user_id(self, user_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        email: str,
        organization_id: int,
        department: Optional[str] = None,
        avatar_url: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Employee:
        """Raises DuplicateRecordError on a taken email or linked user."""

        raise NotImplementedError

    def update(self, employee_id: int, changes: dict) -> Optional[Employee]:
        raise NotImplementedError

    def delete(self, employee_id: int) -> bool:
        raise NotImplementedError
