from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_PROVIDER_AUDIENCE, DEFAULT_TOKEN_TTL_MINUTES, INSECURE_SECRET_KEYS
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .organizations.mysql_organization_repository import MySQLOrganizationRepository
from .organizations.repository import OrganizationRepository
from .organizations.service import OrganizationService
from .users.mysql_profile_repository import MySQLProfileRepository
from .users.repository import ProfileRepository
from .users.service import AuthService, UserService
from .users.tokens import (
    CompositeIdentityResolver,
    IdentityResolver,
    ProviderTokenResolver,
    SelfIssuedTokenResolver,
)


@dataclass(frozen=True)
class AuthConfig:
    secret_key: str
    token_ttl_minutes: int = DEFAULT_TOKEN_TTL_MINUTES
    provider_secret: str = ""
    provider_issuer: str = ""
    provider_audience: str = DEFAULT_PROVIDER_AUDIENCE

    @classmethod
    def from_settings(cls, settings) -> "AuthConfig":
        secret_key = str(getattr(settings, "SECRET_KEY", "") or "")
        relaxed = bool(getattr(settings, "DEBUG", False)) or bool(getattr(settings, "TESTING", False))
        if not relaxed and (not secret_key or secret_key in INSECURE_SECRET_KEYS):
            raise RuntimeError("SECRET_KEY must be set to a private value outside development and testing")
        return cls(
            secret_key=secret_key,
            token_ttl_minutes=int(getattr(settings, "TOKEN_TTL_MINUTES", DEFAULT_TOKEN_TTL_MINUTES)),
            provider_secret=str(getattr(settings, "PROVIDER_JWT_SECRET", "") or ""),
            provider_issuer=str(getattr(settings, "PROVIDER_ISSUER", "") or ""),
            provider_audience=str(getattr(settings, "PROVIDER_AUDIENCE", DEFAULT_PROVIDER_AUDIENCE)),
        )


@dataclass(frozen=True)
class Container:
    profiles_repo: ProfileRepository
    organizations_repo: OrganizationRepository
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository

    token_issuer: SelfIssuedTokenResolver
    identity_resolver: IdentityResolver

    auth_service: AuthService
    user_service: UserService
    organization_service: OrganizationService
    employee_service: EmployeeService
    attendance_service: AttendanceService


def wire(
    *,
    profiles_repo: ProfileRepository,
    organizations_repo: OrganizationRepository,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    auth_config: AuthConfig,
) -> Container:
    """Compose services over the given repositories (MySQL in production, fakes in tests)."""
    token_issuer = SelfIssuedTokenResolver(
        profiles_repo,
        secret=auth_config.secret_key,
        ttl_minutes=auth_config.token_ttl_minutes,
    )
    provider: Optional[ProviderTokenResolver] = None
    if auth_config.provider_secret and auth_config.provider_issuer:
        provider = ProviderTokenResolver(
            profiles_repo,
            secret=auth_config.provider_secret,
            issuer=auth_config.provider_issuer,
            audience=auth_config.provider_audience,
        )

    return Container(
        profiles_repo=profiles_repo,
        organizations_repo=organizations_repo,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        token_issuer=token_issuer,
        identity_resolver=CompositeIdentityResolver(token_issuer, provider),
        auth_service=AuthService(profiles_repo, token_issuer),
        user_service=UserService(profiles_repo, organizations_repo),
        organization_service=OrganizationService(organizations_repo),
        employee_service=EmployeeService(employees_repo, organizations_repo, attendance_repo, profiles_repo),
        attendance_service=AttendanceService(attendance_repo, employees_repo),
    )


def build_container(*, db_config: dict, auth_config: AuthConfig) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        profiles_repo=MySQLProfileRepository(conn),
        organizations_repo=MySQLOrganizationRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        auth_config=auth_config,
    )
