"""Rate limiting configuration for the API."""

import os

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

# Redis URIs (redis://...) share counters across workers; memory:// is per process
IS_TESTING = os.getenv("TESTING", "").lower() in ("1", "true", "yes")

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri="memory://" if IS_TESTING else settings.RATE_LIMIT_STORAGE_URI,
    enabled=not IS_TESTING,
)


def auth_limit() -> str:
    """Per-minute limit string for login attempts."""
    return f"{settings.RATE_LIMIT_AUTH}/minute"
