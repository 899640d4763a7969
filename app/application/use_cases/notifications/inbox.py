"""In-app inbox operations used by the notification center."""

from __future__ import annotations

import math
from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.domain.entities import Notification, NotificationPriority, NotificationType
from app.infrastructure.repositories import NotificationRepository


@dataclass(frozen=True)
class NotificationPage:
    notifications: list[Notification]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def list_notifications(
    session: Session,
    *,
    recipient_id: int,
    page: int = 1,
    limit: int = 20,
    unread_only: bool = False,
    notification_type: NotificationType | None = None,
    priority: NotificationPriority | None = None,
) -> NotificationPage:
    """Return one page of ``recipient_id``'s notifications, newest first."""

    if page < 1:
        raise ValueError("page must be greater than or equal to 1")
    if limit < 1:
        raise ValueError("limit must be greater than or equal to 1")

    notifications, total = NotificationRepository(session).list_for_recipient(
        recipient_id,
        offset=(page - 1) * limit,
        limit=limit,
        unread_only=unread_only,
        notification_type=notification_type,
        priority=priority,
    )
    return NotificationPage(
        notifications=notifications, page=page, limit=limit, total=total
    )


def mark_notification_read(
    session: Session, *, notification_id: int, recipient_id: int
) -> Notification:
    notification = NotificationRepository(session).mark_as_read(
        notification_id, recipient_id=recipient_id
    )
    if notification is None:
        raise ValueError("Notification not found")
    return notification


def mark_all_notifications_read(session: Session, *, recipient_id: int) -> int:
    return NotificationRepository(session).mark_all_as_read(recipient_id=recipient_id)


__all__ = [
    "NotificationPage",
    "list_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
]
