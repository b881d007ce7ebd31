from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat


@dataclass(frozen=True)
class Organization:
    """Domain entity: a tenant owning employees and their attendance."""

    id: int
    name: str
    location: Optional[str] = None
    logo_url: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "location": self.location,
            "logo_url": self.logo_url,
            "created_by": self.created_by,
            "created_at": isoformat(self.created_at),
        }
