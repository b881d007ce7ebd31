"""Bearer-token identity resolution.

Two token sources are accepted: tokens this service signs itself at login,
and tokens issued by the hosted identity provider. Both are HS256 JWTs whose
``sub`` is a profile id; :class:`CompositeIdentityResolver` routes a token to
the right verifier by its (unverified) ``iss`` claim.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol

import jwt

from ..core.constants import DEFAULT_TOKEN_TTL_MINUTES, SELF_ISSUER, TOKEN_ALGORITHM
from ..core.exceptions import AuthenticationError
from .model import Identity, Profile
from .repository import ProfileRepository


class IdentityResolver(Protocol):
    def resolve(self, token: str) -> Identity:
        raise NotImplementedError


class JWTIdentityResolver:
    def __init__(
        self,
        profiles: ProfileRepository,
        *,
        secret: str,
        issuer: str,
        audience: Optional[str] = None,
    ):
        self._profiles = profiles
        self._secret = secret
        self.issuer = issuer
        self._audience = audience

    def _claims(self, token: str) -> dict:
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[TOKEN_ALGORITHM],
                issuer=self.issuer,
                audience=self._audience,
                options={"require": ["sub", "exp", "iss"]},
            )
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token has expired")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid or expired token")

    def resolve(self, token: str) -> Identity:
        claims = self._claims(token)
        profile = self._profiles.get_by_id(str(claims["sub"]))
        if not profile:
            raise AuthenticationError("User profile not found")
        return profile.to_identity()


class SelfIssuedTokenResolver(JWTIdentityResolver):
    """Verifies (and issues) tokens signed with the application's SECRET_KEY."""

    def __init__(self, profiles: ProfileRepository, *, secret: str, ttl_minutes: int = DEFAULT_TOKEN_TTL_MINUTES):
        super().__init__(profiles, secret=secret, issuer=SELF_ISSUER)
        self._ttl = timedelta(minutes=int(ttl_minutes))

    def issue(self, profile: Profile, *, now: Optional[datetime] = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": profile.id,
            "email": profile.email,
            "role": profile.role.value,
            "iss": self.issuer,
            "iat": issued_at,
            "exp": issued_at + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=TOKEN_ALGORITHM)


class ProviderTokenResolver(JWTIdentityResolver):
    """Verifies access tokens minted by the hosted auth provider.

    Role and organization still come from our own ``profiles`` row, never from
    provider claims.
    """


class CompositeIdentityResolver:
    def __init__(self, own: SelfIssuedTokenResolver, provider: Optional[ProviderTokenResolver] = None):
        self._own = own
        self._provider = provider

    def resolve(self, token: str) -> Identity:
        try:
            unverified = jwt.decode(token, options={"verify_signature": False})
        except jwt.InvalidTokenError:
            raise AuthenticationError("Malformed bearer token")

        issuer = unverified.get("iss")
        if issuer == self._own.issuer:
            return self._own.resolve(token)
        if self._provider is not None and issuer == self._provider.issuer:
            return self._provider.resolve(token)
        raise AuthenticationError("Unrecognized token issuer")
