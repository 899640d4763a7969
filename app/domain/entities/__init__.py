"""Domain entities exposed by the application."""

from .dispatch_result import DispatchOutcome, DispatchResult
from .notification import (
    ChannelDelivery,
    ChannelName,
    Notification,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
    default_channels,
)
from .sms_configuration import SmsConfigurationCheck
from .user import User

__all__ = [
    "ChannelDelivery",
    "ChannelName",
    "DispatchOutcome",
    "DispatchResult",
    "Notification",
    "NotificationPriority",
    "NotificationStatus",
    "NotificationType",
    "SmsConfigurationCheck",
    "User",
    "default_channels",
]
