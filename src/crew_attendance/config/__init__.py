import os


def get_settings_module() -> str:
    """Dotted path of the settings module selected by APP_ENV (default: development)."""
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "crew_attendance.config.production"

    if env in {"test", "testing"}:
        return "crew_attendance.config.testing"

    return "crew_attendance.config.development"
