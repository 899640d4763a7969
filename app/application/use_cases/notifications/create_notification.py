"""Use cases for creating and retrieving notifications."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from app.domain.entities import (
    ChannelDelivery,
    ChannelName,
    Notification,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
    default_channels,
)
from app.infrastructure.repositories import NotificationRepository, UserRepository

from .dispatch import NotificationDispatcher

logger = logging.getLogger(__name__)


def create_notification(
    session: Session,
    dispatcher: NotificationDispatcher,
    *,
    recipient_id: int | None,
    type: NotificationType | str,
    title: str,
    message: str,
    priority: NotificationPriority | str = NotificationPriority.MEDIUM,
    channels: dict[ChannelName, ChannelDelivery] | None = None,
    scheduled_for: datetime | None = None,
    expires_at: datetime | None = None,
    related_entity_type: str | None = None,
    related_entity_id: str | None = None,
    action_url: str | None = None,
    created_by: int | None = None,
) -> Notification:
    """Persist a pending notification and send it right away when it is due."""

    if recipient_id is None:
        raise ValueError("Invalid notification data: recipient is required")
    if UserRepository(session).get(recipient_id) is None:
        raise ValueError("Notification recipient not found")

    now = dispatcher.now()
    notification = Notification(
        id=None,
        recipient_id=recipient_id,
        type=NotificationType.parse(type),
        title=title,
        message=message,
        priority=NotificationPriority(priority),
        channels=channels if channels is not None else default_channels(),
        status=NotificationStatus.PENDING,
        scheduled_for=scheduled_for or now,
        expires_at=expires_at,
        related_entity_type=related_entity_type,
        related_entity_id=related_entity_id,
        action_url=action_url,
        created_by=created_by,
        created_at=now,
    )

    repository = NotificationRepository(session)
    saved = repository.create(notification)
    if not saved.is_eligible(dispatcher.now()):
        return saved

    result = dispatcher.dispatch(session, saved.id)
    logger.debug("Immediate dispatch of notification %s: %s", saved.id, result.outcome.value)
    return repository.get(saved.id) or saved


def get_notification(session: Session, notification_id: int) -> Notification:
    """Return the requested notification or raise an error if it does not exist."""

    notification = NotificationRepository(session).get(notification_id)
    if notification is None:
        raise ValueError("Notification not found")
    return notification


__all__ = ["create_notification", "get_notification"]
