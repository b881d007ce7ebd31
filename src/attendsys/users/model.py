from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat
from ..core.enums import Role


@dataclass(frozen=True)
class Identity:
    """Caller identity after bearer-token verification."""

    id: str
    email: str
    role: Role
    organization_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "role": self.role.value,
            "organization_id": self.organization_id,
        }


@dataclass(frozen=True)
class Profile:
    """Domain entity: a login account with its role and tenant.

    Note: pure data object (no DB access code).
    """

    id: str
    email: str
    name: Optional[str]
    password_hash: Optional[str]
    role: Role
    organization_id: Optional[int]
    created_at: Optional[datetime] = None

    def to_identity(self) -> Identity:
        return Identity(id=self.id, email=self.email, role=self.role, organization_id=self.organization_id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "organization_id": self.organization_id,
            "created_at": isoformat(self.created_at),
        }
