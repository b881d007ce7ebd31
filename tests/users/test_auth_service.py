from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from attendsys.core.enums import Role
from attendsys.core.exceptions import AuthenticationError, AuthorizationError, ConflictError, NotFoundError


PROVIDER_SECRET = "test-provider-secret"
PROVIDER_ISSUER = "https://auth.example.test/auth/v1"


def _provider_token(sub: str, *, secret: str = PROVIDER_SECRET, exp_delta=timedelta(hours=1)) -> str:
    now = datetime.now(timezone.utc)
    payload = {"sub": sub, "iss": PROVIDER_ISSUER, "aud": "authenticated", "iat": now, "exp": now + exp_delta}
    return jwt.encode(payload, secret, algorithm="HS256")


def test_login_returns_token_resolving_to_profile(container, seed):
    profile = seed.profile(Role.ADMIN, email="boss@example.com", password="hunter22")

    result = container.auth_service.login("Boss@Example.com", "hunter22")

    assert result.to_dict()["user"]["email"] == "boss@example.com"
    assert "password_hash" not in result.to_dict()["user"]
    identity = container.identity_resolver.resolve(result.token)
    assert identity.id == profile.id
    assert identity.role == Role.ADMIN


def test_login_with_wrong_password_or_unknown_email_fails(container, seed):
    seed.profile(Role.EMPLOYEE, email="pat@example.com", password="right-one")

    with pytest.raises(AuthenticationError):
        container.auth_service.login("pat@example.com", "wrong-one")
    with pytest.raises(AuthenticationError):
        container.auth_service.login("nobody@example.com", "whatever")


def test_expired_self_issued_token_is_rejected(container, seed):
    profile = seed.profile(Role.ADMIN)
    token = container.token_issuer.issue(profile, now=datetime.now(timezone.utc) - timedelta(days=30))

    with pytest.raises(AuthenticationError) as exc:
        container.identity_resolver.resolve(token)
    assert exc.value.message == "Token has expired"


def test_provider_token_resolves_through_profiles(container, world):
    identity = container.identity_resolver.resolve(_provider_token(world.manager.id))

    assert identity.role == Role.MANAGER
    assert identity.organization_id == world.org_a.id


def test_provider_token_with_bad_signature_is_rejected(container, world):
    with pytest.raises(AuthenticationError):
        container.identity_resolver.resolve(_provider_token(world.manager.id, secret="forged"))


def test_token_without_profile_is_rejected(container):
    with pytest.raises(AuthenticationError) as exc:
        container.identity_resolver.resolve(_provider_token("ghost"))
    assert exc.value.message == "User profile not found"


def test_unknown_issuer_and_garbage_are_rejected(container):
    stranger = jwt.encode({"sub": "x", "iss": "https://elsewhere"}, "k", algorithm="HS256")

    with pytest.raises(AuthenticationError) as exc:
        container.identity_resolver.resolve(stranger)
    assert exc.value.message == "Unrecognized token issuer"
    with pytest.raises(AuthenticationError):
        container.identity_resolver.resolve("not-a-jwt")


def test_register_is_admin_only_and_unique(container, world):
    payload = {"email": "new@example.com", "password": "secret123", "name": "New", "organization_id": world.org_a.id}

    with pytest.raises(AuthorizationError):
        container.user_service.register(world.manager, payload)

    profile = container.user_service.register(world.admin, payload)
    assert profile.role == Role.EMPLOYEE
    assert profile.organization_id == world.org_a.id
    assert container.auth_service.login("new@example.com", "secret123").profile.id == profile.id

    with pytest.raises(ConflictError):
        container.user_service.register(world.admin, payload)


def test_register_admin_drops_organization(container, world):
    profile = container.user_service.register(
        world.admin,
        {"email": "a2@example.com", "password": "secret123", "name": "A2", "role": "admin", "organization_id": world.org_a.id},
    )

    assert profile.organization_id is None


def test_assign_manager(container, world):
    profile = container.user_service.assign_manager(
        world.admin, {"user_id": world.worker.id, "organization_id": world.org_b.id}
    )

    assert profile.role == Role.MANAGER
    assert profile.organization_id == world.org_b.id
    with pytest.raises(NotFoundError):
        container.user_service.assign_manager(world.admin, {"user_id": "ghost", "organization_id": world.org_b.id})
