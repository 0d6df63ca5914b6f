"""
PagePress configuration — all environment variables in one place.

Read from environment at runtime. Never hardcode secrets.
"""

from __future__ import annotations

import os


def _csv(value: str) -> frozenset[str]:
    return frozenset(part.strip() for part in value.split(",") if part.strip())


class Settings:
    """Application settings from environment variables."""

    # Database
    DATABASE_URL: str = os.environ.get("DATABASE_URL", "")
    DB_POOL_MIN_SIZE: int = int(os.environ.get("DB_POOL_MIN_SIZE", "2"))
    DB_POOL_MAX_SIZE: int = int(os.environ.get("DB_POOL_MAX_SIZE", "20"))
    DB_COMMAND_TIMEOUT: float = float(os.environ.get("DB_COMMAND_TIMEOUT", "30"))

    # Application
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Public site
    DEFAULT_HOMEPAGE_SLUG: str = os.environ.get("DEFAULT_HOMEPAGE_SLUG", "home")
    RESERVED_SLUGS: frozenset[str] = _csv(os.environ.get("RESERVED_SLUGS", "uploads,admin,api"))
    ADMIN_PATH: str = os.environ.get("ADMIN_PATH", "/admin/")

    # The renderer never caches; clients revalidate against the ETag
    PUBLIC_CACHE_CONTROL: str = os.environ.get("PUBLIC_CACHE_CONTROL", "no-cache")


# Singleton instance
settings = Settings()

# Validate required settings (skip in test mode)
_testing = os.environ.get("TESTING", "").lower() == "true"

if not _testing:
    if not settings.DATABASE_URL:
        raise RuntimeError("DATABASE_URL environment variable is required")
    if not settings.ADMIN_PATH.startswith("/"):
        raise RuntimeError("ADMIN_PATH must start with '/'")
