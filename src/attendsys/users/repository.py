from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import Role
from .model import Profile


class ProfileRepository(Protocol):
    """Repository interface for login profiles.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, profile_id: str) -> Optional[Profile]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Profile]:
        raise NotImplementedError

    def create_profile(
        self,
        *,
        profile_id: str,
        email: str,
        name: str,
        password_hash: Optional[str],
        role: Role,
        organization_id: Optional[int],
    ) -> Profile:
        """Raises DuplicateRecordError when the email is taken."""

        raise NotImplementedError

    def set_role(self, profile_id: str, *, role: Role, organization_id: Optional[int]) -> bool:
        raise NotImplementedError
