from .notification import (
    ChannelDeliveryRead,
    DispatchResultRead,
    EvaluationDueCreate,
    MarkAllReadResponse,
    NotificationChannelsCreate,
    NotificationCreate,
    NotificationPageRead,
    NotificationRead,
    PaginationRead,
    PaymentReminderCreate,
    RecipientSummary,
    SmsConfigurationRead,
    SweepResultRead,
    TrainingProgressCreate,
)
from .user import UserCreate, UserRead

__all__ = [
    "ChannelDeliveryRead",
    "DispatchResultRead",
    "EvaluationDueCreate",
    "MarkAllReadResponse",
    "NotificationChannelsCreate",
    "NotificationCreate",
    "NotificationPageRead",
    "NotificationRead",
    "PaginationRead",
    "PaymentReminderCreate",
    "RecipientSummary",
    "SmsConfigurationRead",
    "SweepResultRead",
    "TrainingProgressCreate",
    "UserCreate",
    "UserRead",
]
