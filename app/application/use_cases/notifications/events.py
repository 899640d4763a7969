"""Typed helpers that build notifications for training and payment events."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from app.domain.entities import (
    Notification,
    NotificationPriority,
    NotificationType,
    default_channels,
)
from app.utils import format_short_date

from .create_notification import create_notification
from .dispatch import NotificationDispatcher

EVALUATION_VALIDITY = timedelta(days=7)


def format_amount(amount: int | float | Decimal | str) -> str:
    """Render ``amount`` without a trailing ``.0`` for whole values."""

    if isinstance(amount, str):
        return amount
    if float(amount).is_integer():
        return str(int(amount))
    return str(amount)


def notify_training_progress(
    session: Session,
    dispatcher: NotificationDispatcher,
    *,
    candidate_id: str | int,
    training_id: str | int,
    message: str,
    user_id: int,
) -> Notification:
    """Tell ``user_id`` about progress on a training."""

    return create_notification(
        session,
        dispatcher,
        recipient_id=user_id,
        type=NotificationType.TRAINING_PROGRESS,
        title="Training Progress Update",
        message=message,
        priority=NotificationPriority.MEDIUM,
        channels=default_channels(email=True, sms=False, in_app=True),
        related_entity_type="TRAINING",
        related_entity_id=str(training_id),
        action_url=f"/htd/trainings/{training_id}",
        created_by=user_id,
    )


def notify_payment_reminder(
    session: Session,
    dispatcher: NotificationDispatcher,
    *,
    candidate_id: str | int,
    amount: int | float | Decimal | str,
    due_date: date,
    user_id: int,
) -> Notification:
    """Remind ``user_id`` about an upcoming candidate payment.

    SMS is enabled only when the carrier is configured at creation time; the
    flag is not re-evaluated when the reminder is dispatched later.
    """

    return create_notification(
        session,
        dispatcher,
        recipient_id=user_id,
        type=NotificationType.PAYMENT_REMINDER,
        title="Payment Reminder",
        message=(
            f"Payment of ${format_amount(amount)} is due on {format_short_date(due_date)}"
        ),
        priority=NotificationPriority.HIGH,
        channels=default_channels(
            email=True, sms=dispatcher.sms_configured, in_app=True
        ),
        related_entity_type="CANDIDATE",
        related_entity_id=str(candidate_id),
        action_url=f"/htd/payments/new?candidateId={candidate_id}",
        created_by=user_id,
    )


def notify_evaluation_due(
    session: Session,
    dispatcher: NotificationDispatcher,
    *,
    training_id: str | int,
    evaluator_id: int,
    candidate_name: str,
) -> Notification:
    """Ask an evaluator to complete the monthly evaluation of a candidate."""

    now = dispatcher.now()
    return create_notification(
        session,
        dispatcher,
        recipient_id=evaluator_id,
        type=NotificationType.EVALUATION_DUE,
        title="Monthly Evaluation Due",
        message=(
            f"Monthly evaluation for {candidate_name} is due. "
            "Please complete the evaluation."
        ),
        priority=NotificationPriority.HIGH,
        channels=default_channels(email=True, sms=False, in_app=True),
        related_entity_type="TRAINING",
        related_entity_id=str(training_id),
        action_url=f"/htd/trainings/{training_id}/evaluation",
        scheduled_for=now,
        expires_at=now + EVALUATION_VALIDITY,
    )


__all__ = [
    "format_amount",
    "notify_evaluation_due",
    "notify_payment_reminder",
    "notify_training_progress",
]
