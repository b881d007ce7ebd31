import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendsys_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

ALLOWED_ORIGINS = ["http://localhost:3000"]

TOKEN_TTL_MINUTES = 60

PROVIDER_JWT_SECRET = "test-provider-secret"
PROVIDER_ISSUER = "https://auth.example.test/auth/v1"
PROVIDER_AUDIENCE = "authenticated"

AUTO_INIT_DB = False
AUTO_SEED_DB = False

SEED_ADMIN_EMAIL = ""
SEED_ADMIN_PASSWORD = ""
