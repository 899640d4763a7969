"""FastAPI dependency utilities."""

from functools import lru_cache

from app.application.use_cases.notifications import NotificationDispatcher
from app.config import Settings, get_settings
from app.infrastructure.database import get_db

__all__ = ["get_app_settings", "get_db", "get_notification_dispatcher"]


def get_app_settings() -> Settings:
    """Return the process-wide settings."""

    return get_settings()


@lru_cache
def _build_dispatcher() -> NotificationDispatcher:
    return NotificationDispatcher.from_settings(get_settings())


def get_notification_dispatcher() -> NotificationDispatcher:
    """Return the shared dispatcher built from the process settings."""

    return _build_dispatcher()
