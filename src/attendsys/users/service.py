from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..authorization.policy import ADMIN_ONLY, authorize
from ..common.validators import optional_int, require_email, require_int, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    ConflictError,
    DuplicateRecordError,
    NotFoundError,
    ValidationError,
)
from ..organizations.repository import OrganizationRepository
from .model import Identity, Profile
from .repository import ProfileRepository
from .tokens import SelfIssuedTokenResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    token: str
    profile: Profile

    def to_dict(self) -> dict:
        user = self.profile.to_dict()
        user.pop("created_at", None)
        return {"token": self.token, "user": user}


def _parse_role(value: Any) -> Role:
    if value is None:
        return Role.EMPLOYEE
    try:
        return Role(value)
    except ValueError:
        raise ValidationError("role must be one of admin, manager, employee")


class AuthService:
    """Use case: authenticate a profile (login) and issue a bearer token."""

    def __init__(self, profiles: ProfileRepository, tokens: SelfIssuedTokenResolver):
        self._profiles = profiles
        self._tokens = tokens

    def login(self, email: Any, password: Any) -> LoginResult:
        email = require_email(email)
        require_min_length(password, "password", MIN_PASSWORD_LENGTH)

        profile = self._profiles.get_by_email(email)
        if not profile or not profile.password_hash:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(profile.password_hash, password)
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            logger.warning("Failed login for %s", email)
            raise AuthenticationError("Invalid credentials")

        return LoginResult(token=self._tokens.issue(profile), profile=profile)


class UserService:
    """Use case: manage login profiles (admin)."""

    def __init__(self, profiles: ProfileRepository, organizations: OrganizationRepository):
        self._profiles = profiles
        self._organizations = organizations

    def _require_organization(self, organization_id: Optional[int]) -> None:
        if organization_id is not None and not self._organizations.get_by_id(organization_id):
            raise NotFoundError("Organization not found")

    def register(self, identity: Optional[Identity], payload: dict) -> Profile:
        authorize(identity, ADMIN_ONLY)

        email = require_email(payload.get("email"))
        password = require_min_length(payload.get("password"), "password", MIN_PASSWORD_LENGTH)
        name = require_non_empty(payload.get("name"), "name")
        role = _parse_role(payload.get("role"))
        organization_id = optional_int(payload.get("organization_id"), "organization_id")
        if role == Role.ADMIN:
            organization_id = None
        self._require_organization(organization_id)

        if self._profiles.get_by_email(email):
            raise ConflictError("A user with this email already exists")

        try:
            profile = self._profiles.create_profile(
                profile_id=str(uuid.uuid4()),
                email=email,
                name=name,
                password_hash=generate_password_hash(password),
                role=role,
                organization_id=organization_id,
            )
        except DuplicateRecordError:
            raise ConflictError("A user with this email already exists")

        logger.info("Registered %s as %s", email, role.value)
        return profile

    def assign_manager(self, identity: Optional[Identity], payload: dict) -> Profile:
        authorize(identity, ADMIN_ONLY)

        user_id = require_non_empty(payload.get("user_id"), "user_id")
        organization_id = require_int(payload.get("organization_id"), "organization_id")

        profile = self._profiles.get_by_id(user_id)
        if not profile:
            raise NotFoundError("User not found")
        self._require_organization(organization_id)

        self._profiles.set_role(user_id, role=Role.MANAGER, organization_id=organization_id)
        logger.info("Assigned %s as manager of organization %s", profile.email, organization_id)
        return self._profiles.get_by_id(user_id)

    def describe(self, identity: Optional[Identity]) -> dict:
        if identity is None:
            raise AuthenticationError("Not authenticated")
        profile = self._profiles.get_by_id(identity.id)
        data = identity.to_dict()
        data["name"] = profile.name if profile else None
        return data
