"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

SELF_ISSUER = "attendsys"
TOKEN_ALGORITHM = "HS256"
DEFAULT_TOKEN_TTL_MINUTES = 60 * 24
DEFAULT_PROVIDER_AUDIENCE = "authenticated"
MIN_PASSWORD_LENGTH = 6
EMPLOYEE_RECENT_RECORDS_LIMIT = 30

# Defaults shipped in the settings modules; never acceptable for signing in production.
INSECURE_SECRET_KEYS = frozenset({"dev-secret-key", "test-secret", "please-set-SECRET_KEY"})
