import os


def get_settings_module() -> str:
    # APP_ENV picks the settings module; anything unrecognised means development.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def env_list(name: str) -> list:
    """Comma separated environment variable as a list of non-empty strings."""
    return [item.strip() for item in os.getenv(name, "").split(",") if item.strip()]
