from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat


@dataclass(frozen=True)
class Employee:
    """Domain entity: a person tracked for attendance within one organization.

    ``user_id`` links the login profile, if one has been provisioned.
    ``organization_name`` is filled by list/detail queries only.
    """

    id: int
    name: str
    email: str
    organization_id: int
    department: Optional[str] = None
    avatar_url: Optional[str] = None
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    organization_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "department": self.department,
            "avatar_url": self.avatar_url,
            "organization_id": self.organization_id,
            "organization_name": self.organization_name,
            "user_id": self.user_id,
            "created_at": isoformat(self.created_at),
        }
