"""SMS sender backed by the Twilio REST API."""

from __future__ import annotations

import logging
from typing import Callable

from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from app.config import Settings
from app.infrastructure.delivery import DeliveryError, SmsNotConfiguredError

logger = logging.getLogger(__name__)


class TwilioSmsSender:
    """Send single-segment SMS messages through a Twilio account.

    The sender is usable without credentials: :attr:`is_configured` is then
    ``False`` and :meth:`send` raises :class:`SmsNotConfiguredError`.
    """

    def __init__(
        self,
        *,
        account_sid: str | None,
        auth_token: str | None,
        from_number: str | None,
        client_factory: Callable[[str, str], Client] = Client,
    ) -> None:
        self._account_sid = account_sid
        self._auth_token = auth_token
        self._from_number = from_number
        self._client_factory = client_factory
        self._client: Client | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "TwilioSmsSender":
        return cls(
            account_sid=settings.twilio_account_sid,
            auth_token=settings.twilio_auth_token,
            from_number=settings.twilio_phone_number,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self._account_sid and self._auth_token and self._from_number)

    def _get_client(self) -> Client:
        if self._client is None:
            self._client = self._client_factory(self._account_sid, self._auth_token)
        return self._client

    def send(self, recipient: str, content: str) -> None:
        if not self.is_configured:
            raise SmsNotConfiguredError(
                "SMS service not configured - Twilio credentials missing"
            )

        try:
            self._get_client().messages.create(
                body=content,
                from_=self._from_number,
                to=recipient,
            )
        except TwilioException as exc:
            logger.error("Twilio SMS sending failed: %s", exc)
            raise DeliveryError(f"SMS sending failed: {exc}") from exc
        logger.info("SMS sent successfully to %s", recipient)


__all__ = ["TwilioSmsSender"]
