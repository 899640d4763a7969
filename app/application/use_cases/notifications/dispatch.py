"""Deliver a notification through its enabled channels."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Final

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import Settings
from app.domain.entities import (
    ChannelName,
    DispatchOutcome,
    DispatchResult,
    Notification,
    NotificationStatus,
    User,
)
from app.infrastructure.delivery import EmailSender, SmsNotConfiguredError, SmsSender
from app.infrastructure.email import build_email_sender
from app.infrastructure.repositories import NotificationRepository
from app.infrastructure.sms import TwilioSmsSender
from app.utils import now_in_app_timezone

from .templates import render_email, render_sms

logger = logging.getLogger(__name__)

SMS_NOT_CONFIGURED_ERROR: Final[str] = "SMS service not configured"
MISSING_EMAIL_ERROR: Final[str] = "Recipient has no email address"
MISSING_CONTACT_NUMBER_ERROR: Final[str] = "Recipient has no contact number"


class NotificationDispatcher:
    """Send notifications and record the per-channel outcome.

    Senders, links and the clock are injected so nothing is read from the
    environment while dispatching.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        email_sender: EmailSender,
        sms_sender: SmsSender,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self._base_url = settings.client_url
        self._brand = settings.brand_name
        self._email_sender = email_sender
        self._sms_sender = sms_sender
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> "NotificationDispatcher":
        return cls(
            settings,
            email_sender=build_email_sender(settings),
            sms_sender=TwilioSmsSender.from_settings(settings),
        )

    @property
    def sms_configured(self) -> bool:
        return self._sms_sender.is_configured

    def now(self) -> datetime:
        return self._clock()

    def dispatch(self, session: Session, notification_id: int | None) -> DispatchResult:
        """Attempt delivery of ``notification_id``; never raises."""

        if notification_id is None:
            return DispatchResult.not_found(None, "Notification ID is required")

        repository = NotificationRepository(session)
        claimed = False
        handed_over: set[ChannelName] = set()
        notification: Notification | None = None
        try:
            notification = repository.get(notification_id)
            if notification is None:
                return DispatchResult.not_found(notification_id, "Notification not found")
            if notification.recipient is None:
                return DispatchResult.not_found(
                    notification_id, "Notification recipient not found"
                )

            now = self._clock()
            if not notification.is_eligible(now):
                return DispatchResult.not_eligible(notification_id)
            if not repository.claim_for_dispatch(notification_id, now):
                logger.info(
                    "Notification %s was claimed by another dispatcher", notification_id
                )
                return DispatchResult.not_eligible(notification_id)
            claimed = True

            failed_channels = self._deliver(
                notification, notification.recipient, handed_over
            )
            notification.status = (
                NotificationStatus.FAILED if failed_channels else NotificationStatus.SENT
            )
            repository.update(notification)
            claimed = False
        except Exception as exc:
            logger.exception("Error sending notification %s", notification_id)
            session.rollback()
            if claimed and handed_over:
                # Never released once a sender was called.
                self._fail_claim(repository, notification)
            elif claimed:
                self._release_claim(repository, notification_id)
            return DispatchResult(
                DispatchOutcome.ERROR, notification_id, error=str(exc) or repr(exc)
            )

        channel_errors = {
            name.value: delivery.error
            for name, delivery in notification.channels.items()
            if delivery.enabled and delivery.error
        }
        outcome = (
            DispatchOutcome.PARTIALLY_FAILED if failed_channels else DispatchOutcome.SENT
        )
        return DispatchResult(outcome, notification_id, channel_errors=channel_errors)

    def _deliver(
        self,
        notification: Notification,
        recipient: User,
        handed_over: set[ChannelName],
    ) -> set[ChannelName]:
        """Attempt every enabled channel and return the ones whose failure counts.

        ``handed_over`` collects each channel right before its sender is
        called, so callers know whether anything may have left the process.
        """

        failed: set[ChannelName] = set()

        email = notification.channel(ChannelName.EMAIL)
        if email.enabled:
            if not recipient.email:
                logger.warning(
                    "Notification %s has email enabled but recipient %s has no address",
                    notification.id,
                    recipient.id,
                )
                email.mark_failed(MISSING_EMAIL_ERROR)
            else:
                content = render_email(
                    notification, base_url=self._base_url, brand=self._brand
                )
                handed_over.add(ChannelName.EMAIL)
                try:
                    self._email_sender.send(recipient.email, content)
                except Exception as exc:
                    logger.error(
                        "Email sending failed for notification %s: %s", notification.id, exc
                    )
                    email.mark_failed(str(exc) or exc.__class__.__name__)
                    failed.add(ChannelName.EMAIL)
                else:
                    email.mark_sent(self._clock())

        sms = notification.channel(ChannelName.SMS)
        if sms.enabled:
            if not recipient.contact_number:
                logger.warning(
                    "Notification %s has SMS enabled but recipient %s has no number",
                    notification.id,
                    recipient.id,
                )
                sms.mark_failed(MISSING_CONTACT_NUMBER_ERROR)
            elif not self._sms_sender.is_configured:
                logger.warning("SMS channel enabled but Twilio not configured - skipping SMS")
                sms.mark_failed(SMS_NOT_CONFIGURED_ERROR)
            else:
                body = render_sms(notification, base_url=self._base_url, brand=self._brand)
                handed_over.add(ChannelName.SMS)
                try:
                    self._sms_sender.send(recipient.contact_number, body)
                except SmsNotConfiguredError:
                    logger.warning("SMS carrier rejected credentials as missing - skipping SMS")
                    sms.mark_failed(SMS_NOT_CONFIGURED_ERROR)
                except Exception as exc:
                    logger.error(
                        "SMS sending failed for notification %s: %s", notification.id, exc
                    )
                    sms.mark_failed(str(exc) or exc.__class__.__name__)
                    failed.add(ChannelName.SMS)
                else:
                    sms.mark_sent(self._clock())

        # In-app notifications are read through the inbox API; nothing to send.
        return failed

    @staticmethod
    def _release_claim(repository: NotificationRepository, notification_id: int) -> None:
        try:
            repository.release_claim(notification_id)
        except SQLAlchemyError:
            logger.exception(
                "Could not release dispatch claim for notification %s", notification_id
            )
            repository.session.rollback()

    @staticmethod
    def _fail_claim(repository: NotificationRepository, notification: Notification) -> None:
        try:
            repository.fail_claim(notification)
        except SQLAlchemyError:
            logger.exception(
                "Could not mark notification %s as failed; it stays claimed",
                notification.id,
            )
            repository.session.rollback()


__all__ = [
    "MISSING_CONTACT_NUMBER_ERROR",
    "MISSING_EMAIL_ERROR",
    "NotificationDispatcher",
    "SMS_NOT_CONFIGURED_ERROR",
]
