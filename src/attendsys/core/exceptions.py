from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    ``code`` is the stable reason code returned to API clients and
    ``status_code`` the HTTP status the controller layer maps it to.
    """

    code = "error"
    status_code = 400

    def __init__(self, message: str, *, record: Any = None, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.record = record
        self.details = details


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"
    status_code = 400


class AuthenticationError(DomainError):
    """Raised when credentials are missing or invalid."""

    code = "unauthenticated"
    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "forbidden"
    status_code = 403

    def __init__(self, message: str, *, required_roles=None, actual_role=None):
        details = None
        if required_roles is not None:
            details = {
                "required_roles": sorted(r.value for r in required_roles),
                "your_role": actual_role.value if actual_role is not None else None,
            }
        super().__init__(message, details=details)
        self.required_roles = required_roles
        self.actual_role = actual_role


class NotFoundError(DomainError):
    """Raised when a resource or a required link is absent."""

    code = "not_found"
    status_code = 404


class ConflictError(DomainError):
    """Raised on state-transition violations; carries the existing record."""

    code = "conflict"
    status_code = 409


class DuplicateRecordError(Exception):
    """Raised by repositories when the store rejects a unique-key violation."""
