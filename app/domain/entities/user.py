"""Domain entity representing a user that can receive notifications."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class User:
    """Contact details used to resolve a notification recipient."""

    id: int | None
    name: str
    email: str | None = None
    contact_number: str | None = None
    preferences: dict[str, Any] = field(default_factory=dict)
    is_active: bool = True
    created_at: datetime | None = None
