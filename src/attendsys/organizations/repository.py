from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Organization

# Columns a partial update may touch.
UPDATABLE_COLUMNS = ("name", "location", "logo_url")


class OrganizationRepository(Protocol):
    def list_all(self) -> Sequence[Organization]:
        """Newest first."""

        raise NotImplementedError

    def get_by_id(self, organization_id: int) -> Optional[Organization]:
        raise NotImplementedError

    def count_employees(self, organization_id: int) -> int:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        location: Optional[str],
        logo_url: Optional[str],
        created_by: Optional[str],
    ) -> Organization:
        raise NotImplementedError

    def update(self, organization_id: int, changes: dict) -> Optional[Organization]:
        raise NotImplementedError

    def delete(self, organization_id: int) -> bool:
        """Deletes the organization; the store cascades to employees and their records."""

        raise NotImplementedError
