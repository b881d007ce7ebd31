import os


def get_settings_module() -> str:
    # APP_ENV picks the settings module; defaults to development.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "attendsys.config.production"

    if env in {"test", "testing"}:
        return "attendsys.config.testing"

    return "attendsys.config.development"
