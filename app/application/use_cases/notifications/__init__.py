"""Public helpers for creating, dispatching and reading notifications."""

from .create_notification import create_notification, get_notification
from .dispatch import (
    MISSING_CONTACT_NUMBER_ERROR,
    MISSING_EMAIL_ERROR,
    NotificationDispatcher,
    SMS_NOT_CONFIGURED_ERROR,
)
from .events import (
    notify_evaluation_due,
    notify_payment_reminder,
    notify_training_progress,
)
from .inbox import (
    NotificationPage,
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)
from .sweep import sweep_once
from .templates import render_email, render_sms

__all__ = [
    "MISSING_CONTACT_NUMBER_ERROR",
    "MISSING_EMAIL_ERROR",
    "NotificationDispatcher",
    "NotificationPage",
    "SMS_NOT_CONFIGURED_ERROR",
    "create_notification",
    "get_notification",
    "list_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
    "notify_evaluation_due",
    "notify_payment_reminder",
    "notify_training_progress",
    "render_email",
    "render_sms",
    "sweep_once",
]
