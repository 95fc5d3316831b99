import os

from django.core.exceptions import ImproperlyConfigured


def require_env(name: str) -> str:
    """Return a required environment variable or fail at startup."""
    value = os.getenv(name, "").strip()
    if not value:
        raise ImproperlyConfigured(
            f"Missing required environment variable {name}"
        )
    return value


def get_bool_env(name: str, default: bool) -> bool:
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.lower() in {"1", "true", "yes", "on"}


def get_list_env(name: str) -> list[str]:
    raw_value = os.getenv(name, "")
    if not raw_value:
        return []
    parts = raw_value.replace(";", ",").split(",")
    return [p.strip() for p in parts if p.strip()]
