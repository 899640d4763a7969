"""Domain entity representing a multi-channel user notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .user import User


class NotificationType(str, Enum):
    """Kinds of notification known to the template renderer."""

    TRAINING_PROGRESS = "TRAINING_PROGRESS"
    PAYMENT_REMINDER = "PAYMENT_REMINDER"
    EVALUATION_DUE = "EVALUATION_DUE"
    GENERIC = "GENERIC"

    @classmethod
    def parse(cls, value: "str | NotificationType | None") -> "NotificationType":
        """Return the matching member, falling back to ``GENERIC``."""

        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            return cls.GENERIC


class NotificationPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class NotificationStatus(str, Enum):
    """Delivery state of a notification.

    ``SENDING`` marks a notification claimed by a dispatcher; it only exists
    between the claim and the final ``SENT``/``FAILED`` write.
    """

    PENDING = "PENDING"
    SENDING = "SENDING"
    SENT = "SENT"
    FAILED = "FAILED"


class ChannelName(str, Enum):
    EMAIL = "email"
    SMS = "sms"
    IN_APP = "inApp"


@dataclass
class ChannelDelivery:
    """Per-channel delivery state of a notification."""

    enabled: bool = False
    sent: bool = False
    sent_at: datetime | None = None
    error: str | None = None

    def mark_sent(self, when: datetime) -> None:
        self.sent = True
        self.sent_at = when
        self.error = None

    def mark_failed(self, error: str) -> None:
        self.sent = False
        self.error = error


def default_channels(
    *, email: bool = False, sms: bool = False, in_app: bool = False
) -> dict[ChannelName, ChannelDelivery]:
    """Return a complete channel mapping with the given channels enabled."""

    return {
        ChannelName.EMAIL: ChannelDelivery(enabled=email),
        ChannelName.SMS: ChannelDelivery(enabled=sms),
        ChannelName.IN_APP: ChannelDelivery(enabled=in_app),
    }


@dataclass
class Notification:
    """Message addressed to a user and delivered through its enabled channels."""

    id: int | None
    recipient_id: int
    type: NotificationType
    title: str
    message: str
    priority: NotificationPriority = NotificationPriority.MEDIUM
    channels: dict[ChannelName, ChannelDelivery] = field(default_factory=default_channels)
    status: NotificationStatus = NotificationStatus.PENDING
    scheduled_for: datetime | None = None
    expires_at: datetime | None = None
    related_entity_type: str | None = None
    related_entity_id: str | None = None
    action_url: str | None = None
    created_by: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    read_at: datetime | None = None
    recipient: User | None = None

    def __post_init__(self) -> None:
        for name in ChannelName:
            self.channels.setdefault(name, ChannelDelivery())

    @property
    def is_read(self) -> bool:
        return self.read_at is not None

    def channel(self, name: ChannelName) -> ChannelDelivery:
        return self.channels[name]

    def has_enabled_channel(self) -> bool:
        return any(delivery.enabled for delivery in self.channels.values())

    def is_due(self, now: datetime) -> bool:
        return self.scheduled_for is None or self.scheduled_for <= now

    def is_eligible(self, now: datetime) -> bool:
        """Return ``True`` when the notification may be dispatched at ``now``."""

        return (
            self.status is NotificationStatus.PENDING
            and self.is_due(now)
            and self.has_enabled_channel()
        )


__all__ = [
    "ChannelDelivery",
    "ChannelName",
    "Notification",
    "NotificationPriority",
    "NotificationStatus",
    "NotificationType",
    "default_channels",
]
