"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.domain.entities import (
    ChannelDelivery,
    ChannelName,
    Notification,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
)
from app.infrastructure.models import NotificationModel
from app.infrastructure.repositories.user_repository import UserRepository
from app.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)

# Column prefix of each channel sub-record on ``NotificationModel``.
_CHANNEL_COLUMNS: dict[ChannelName, str] = {
    ChannelName.EMAIL: "email",
    ChannelName.SMS: "sms",
    ChannelName.IN_APP: "in_app",
}


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: int) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification, include_creation_fields=True)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, notification: Notification) -> Notification:
        if notification.id is None:
            raise ValueError("Notification id is required for updates")
        model = self.session.get(NotificationModel, notification.id)
        if model is None:
            msg = f"Notification with id {notification.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, notification, include_creation_fields=False)
        model.updated_at = ensure_app_naive_datetime(now_in_app_timezone())
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_due(self, now: datetime) -> Sequence[Notification]:
        """Return pending notifications due at ``now`` with recipients resolved."""

        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.status == NotificationStatus.PENDING.value)
            .filter(NotificationModel.scheduled_for <= ensure_app_naive_datetime(now))
            .filter(
                or_(
                    NotificationModel.email_enabled.is_(True),
                    NotificationModel.sms_enabled.is_(True),
                    NotificationModel.in_app_enabled.is_(True),
                )
            )
            .order_by(NotificationModel.scheduled_for.asc(), NotificationModel.id.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def claim_for_dispatch(self, notification_id: int, now: datetime) -> bool:
        """Atomically move a due notification from ``PENDING`` to ``SENDING``.

        Returns ``True`` only for the caller whose update changed the row.
        """

        updated = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .filter(NotificationModel.status == NotificationStatus.PENDING.value)
            .filter(NotificationModel.scheduled_for <= ensure_app_naive_datetime(now))
            .update(
                {NotificationModel.status: NotificationStatus.SENDING.value},
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated == 1

    def release_claim(self, notification_id: int) -> None:
        """Return a claimed notification to ``PENDING`` so it can be retried."""

        self.session.query(NotificationModel).filter(
            NotificationModel.id == notification_id,
            NotificationModel.status == NotificationStatus.SENDING.value,
        ).update(
            {NotificationModel.status: NotificationStatus.PENDING.value},
            synchronize_session=False,
        )
        self.session.commit()

    def fail_claim(self, notification: Notification) -> bool:
        """Move a claimed notification from ``SENDING`` to ``FAILED``.

        The per-channel state of ``notification`` is written along with the
        status so channels that were delivered keep their ``sent`` marker.
        """

        values: dict = {NotificationModel.status: NotificationStatus.FAILED.value}
        for name, prefix in _CHANNEL_COLUMNS.items():
            delivery = notification.channels.get(name) or ChannelDelivery()
            values[getattr(NotificationModel, f"{prefix}_sent")] = delivery.sent
            values[getattr(NotificationModel, f"{prefix}_sent_at")] = (
                ensure_app_naive_datetime(delivery.sent_at)
            )
            values[getattr(NotificationModel, f"{prefix}_error")] = delivery.error

        updated = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification.id)
            .filter(NotificationModel.status == NotificationStatus.SENDING.value)
            .update(values, synchronize_session=False)
        )
        self.session.commit()
        return updated == 1

    def list_for_recipient(
        self,
        recipient_id: int,
        *,
        offset: int = 0,
        limit: int | None = 20,
        unread_only: bool = False,
        notification_type: NotificationType | None = None,
        priority: NotificationPriority | None = None,
    ) -> tuple[list[Notification], int]:
        """Return a page of notifications for ``recipient_id`` and the total count."""

        query = self.session.query(NotificationModel).filter(
            NotificationModel.recipient_id == recipient_id
        )
        if unread_only:
            query = query.filter(NotificationModel.read_at.is_(None))
        if notification_type is not None:
            query = query.filter(NotificationModel.type == notification_type.value)
        if priority is not None:
            query = query.filter(NotificationModel.priority == priority.value)

        total = query.count()
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        ).offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()], total

    def mark_as_read(
        self, notification_id: int, *, recipient_id: int
    ) -> Notification | None:
        model = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .filter(NotificationModel.recipient_id == recipient_id)
            .first()
        )
        if model is None:
            return None
        if model.read_at is None:
            model.read_at = ensure_app_naive_datetime(now_in_app_timezone())
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def mark_all_as_read(self, *, recipient_id: int) -> int:
        updated = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.recipient_id == recipient_id)
            .filter(NotificationModel.read_at.is_(None))
            .update(
                {
                    NotificationModel.read_at: ensure_app_naive_datetime(
                        now_in_app_timezone()
                    )
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationModel,
        notification: Notification,
        *,
        include_creation_fields: bool,
    ) -> None:
        if include_creation_fields:
            model.created_at = (
                ensure_app_naive_datetime(notification.created_at)
                or ensure_app_naive_datetime(now_in_app_timezone())
            )
        model.recipient_id = notification.recipient_id
        model.type = notification.type.value
        model.title = notification.title
        model.message = notification.message
        model.priority = notification.priority.value
        model.status = notification.status.value
        model.scheduled_for = (
            ensure_app_naive_datetime(notification.scheduled_for)
            or ensure_app_naive_datetime(now_in_app_timezone())
        )
        model.expires_at = ensure_app_naive_datetime(notification.expires_at)
        model.related_entity_type = notification.related_entity_type
        model.related_entity_id = notification.related_entity_id
        model.action_url = notification.action_url
        model.created_by = notification.created_by
        model.read_at = ensure_app_naive_datetime(notification.read_at)

        for name, prefix in _CHANNEL_COLUMNS.items():
            delivery = notification.channels.get(name) or ChannelDelivery()
            setattr(model, f"{prefix}_enabled", delivery.enabled)
            setattr(model, f"{prefix}_sent", delivery.sent)
            setattr(model, f"{prefix}_sent_at", ensure_app_naive_datetime(delivery.sent_at))
            setattr(model, f"{prefix}_error", delivery.error)

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        channels = {
            name: ChannelDelivery(
                enabled=bool(getattr(model, f"{prefix}_enabled")),
                sent=bool(getattr(model, f"{prefix}_sent")),
                sent_at=ensure_app_timezone(getattr(model, f"{prefix}_sent_at")),
                error=getattr(model, f"{prefix}_error"),
            )
            for name, prefix in _CHANNEL_COLUMNS.items()
        }
        recipient = (
            UserRepository._to_entity(model.recipient) if model.recipient else None
        )
        return Notification(
            id=model.id,
            recipient_id=model.recipient_id,
            type=NotificationType.parse(model.type),
            title=model.title,
            message=model.message,
            priority=NotificationPriority(model.priority),
            channels=channels,
            status=NotificationStatus(model.status),
            scheduled_for=ensure_app_timezone(model.scheduled_for),
            expires_at=ensure_app_timezone(model.expires_at),
            related_entity_type=model.related_entity_type,
            related_entity_id=model.related_entity_id,
            action_url=model.action_url,
            created_by=model.created_by,
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
            read_at=ensure_app_timezone(model.read_at),
            recipient=recipient,
        )


__all__ = ["NotificationRepository"]
