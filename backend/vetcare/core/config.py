"""
Centralized configuration module for application-wide settings.

Every setting is read from the environment (optionally populated from a
``.env`` file by ``create_app``) through a small getter so tests can override
values with ``monkeypatch.setenv`` before the getter runs.
"""

import logging
import os
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///vetcare.db"
DEFAULT_TELECONFERENCE_BASE_URL = "https://meet.vetcare360.app"
WEAK_SECRETS = ("dev-secret-change-me", "secret123")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("true", "1", "yes")


# ===========================
# Timezone Configuration
# ===========================


def get_app_timezone() -> ZoneInfo:
    """
    Get the application timezone from the TZ environment variable.

    Returns:
        ZoneInfo: Application timezone (defaults to UTC if not configured)

    Examples:
        >>> # TZ=America/Mexico_City
        >>> tz = get_app_timezone()
    """
    tz_name = os.getenv("TZ", "UTC")

    try:
        return ZoneInfo(tz_name)
    except Exception as e:
        logger.warning(
            f"Invalid timezone '{tz_name}' specified in TZ environment variable. "
            f"Falling back to UTC. Error: {e}"
        )
        return ZoneInfo("UTC")


# ===========================
# Database Configuration
# ===========================


def get_database_url() -> str:
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


# ===========================
# Teleconference Configuration
# ===========================


def get_teleconference_base_url() -> str:
    """
    Base path under which remote-consultation session URLs are derived.

    Environment Variables:
        TELECONFERENCE_BASE_URL: e.g. 'https://meet.vetcare360.app'
            A trailing slash is ignored.
    """
    base = os.getenv("TELECONFERENCE_BASE_URL", DEFAULT_TELECONFERENCE_BASE_URL)
    return base.strip().rstrip("/") or DEFAULT_TELECONFERENCE_BASE_URL


# ===========================
# Runtime Configuration
# ===========================


def get_environment() -> str:
    return os.getenv("FLASK_ENV", "development")


def is_testing() -> bool:
    return _env_flag("TESTING", "false")


def get_secret_key() -> str:
    return os.getenv("FLASK_SECRET_KEY", "dev-secret-change-me")


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO" if get_environment() == "production" else "DEBUG")


def get_log_to_file() -> bool:
    return _env_flag("LOG_TO_FILE", "0")


def get_rate_limit_enabled() -> bool:
    return _env_flag("RATE_LIMIT_ENABLED", "1")


def get_limiter_storage_uri() -> str:
    return os.getenv("LIMITER_STORAGE_URI", "memory://")


def get_sentry_dsn() -> str | None:
    return os.getenv("SENTRY_DSN") or None


def validate_secret_key(secret_key: str, environment: str) -> None:
    """Reject weak secrets outside development and testing."""
    if environment != "production":
        return
    if secret_key in WEAK_SECRETS or len(secret_key) < 32:
        raise ValueError(
            "Production deployment requires strong SECRET_KEY (min 32 chars). "
            "Set FLASK_SECRET_KEY environment variable."
        )


def log_runtime_config() -> None:
    """
    Log the active configuration.

    Should be called during application startup to provide visibility into
    the settings in use, without exposing secrets.
    """
    logger.info(
        "Runtime configuration initialized",
        extra={
            "context": {
                "environment": get_environment(),
                "timezone": str(get_app_timezone()),
                "teleconference_base_url": get_teleconference_base_url(),
                "rate_limit_enabled": get_rate_limit_enabled(),
                "sentry_enabled": bool(get_sentry_dsn()),
            }
        },
    )
