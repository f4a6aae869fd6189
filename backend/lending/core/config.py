"""
Centralized configuration module for application-wide settings.

Values come from the environment (optionally populated from a ``.env`` file
via python-dotenv) so tests and deployments can override them without code
changes.
"""

import logging
import os
from datetime import date, datetime
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Only load from .env when DATABASE_URL is not already defined by the environment
if not os.getenv("DATABASE_URL"):
    load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower().strip() in ("true", "1", "yes")


# ===========================
# Database Configuration
# ===========================

DEFAULT_DATABASE_URL = "sqlite:///./library.db"


def get_database_url() -> str:
    """Return the effective database URL (read at call time for tests)."""
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


# ===========================
# Timezone Configuration
# ===========================


def get_app_timezone() -> ZoneInfo:
    """
    Get the application timezone from environment variable.

    Returns:
        ZoneInfo: Application timezone (defaults to UTC if not configured)

    Environment Variables:
        TZ: Timezone identifier (e.g., 'Europe/Istanbul', 'UTC')
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


# Global timezone instance - initialized once at import time
APP_TZ = get_app_timezone()


def today() -> date:
    """Return the current calendar date in the application timezone."""
    return datetime.now(APP_TZ).date()


def now() -> datetime:
    """Return the current timezone-aware datetime in the application timezone."""
    return datetime.now(APP_TZ)


def log_timezone_config():
    """Log the active timezone configuration at startup."""
    logger.info(
        "Timezone configuration initialized",
        extra={
            "context": {
                "timezone": str(APP_TZ),
                "tz_env_var": os.getenv("TZ", "UTC"),
            }
        },
    )


# ===========================
# Lending Configuration
# ===========================


def get_default_loan_days() -> int:
    """
    Get the loan duration used when a caller does not supply one.

    Environment Variables:
        DEFAULT_LOAN_DAYS: positive integer number of days (default 14)
    """
    raw = os.getenv("DEFAULT_LOAN_DAYS", "14")
    try:
        days = int(raw)
    except ValueError:
        logger.warning(
            "Invalid DEFAULT_LOAN_DAYS, falling back to 14",
            extra={"context": {"value": raw}},
        )
        return 14
    if days <= 0:
        logger.warning(
            "Non-positive DEFAULT_LOAN_DAYS, falling back to 14",
            extra={"context": {"value": days}},
        )
        return 14
    return days


# ===========================
# Logging Configuration
# ===========================

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_TO_FILE = _env_flag("LOG_TO_FILE", "true")
LOG_JSON = _env_flag("LOG_JSON", "false")


def is_testing() -> bool:
    return _env_flag("TESTING")
