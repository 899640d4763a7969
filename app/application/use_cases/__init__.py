"""Aggregate application use cases."""

from .notifications import create_notification, sweep_once
from .users import create_user

__all__ = [
    "create_notification",
    "create_user",
    "sweep_once",
]
