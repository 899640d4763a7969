"""Email senders used by the notification dispatcher (SMTP and SendGrid)."""

from __future__ import annotations

import json
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any, Callable

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from app.config import Settings
from app.infrastructure.delivery import DeliveryError, EmailContent, EmailSender

logger = logging.getLogger(__name__)


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages: list[str] = []
            for item in errors:
                if not isinstance(item, dict):
                    continue
                message = item.get("message")
                if message:
                    messages.append(str(message))
            if messages:
                return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    if isinstance(parsed, list):
        return "; ".join(str(item) for item in parsed)

    return None


def _describe_sendgrid_failure(status_code: Any, body: Any) -> str:
    details = _extract_sendgrid_error_details(body)
    if status_code and details:
        return f"SendGrid API request failed with status {status_code}: {details}"
    if status_code:
        return f"SendGrid API request failed with status {status_code}"
    if details:
        return f"SendGrid API request failed: {details}"
    return "SendGrid API request failed"


class SmtpEmailSender:
    """Deliver multipart (HTML + plain text) messages through an SMTP relay.

    A new connection is opened for every message; volumes are low and it
    avoids keeping idle sockets around between sweeps.
    """

    def __init__(
        self,
        *,
        host: str,
        port: int,
        from_address: str,
        secure: bool = False,
        username: str | None = None,
        password: str | None = None,
        timeout: float = 30.0,
        smtp_factory: Callable[..., smtplib.SMTP] | None = None,
    ) -> None:
        self._host = host
        self._port = port
        self._from_address = from_address
        self._secure = secure
        self._username = username
        self._password = password
        self._timeout = timeout
        self._smtp_factory = smtp_factory or (
            smtplib.SMTP_SSL if secure else smtplib.SMTP
        )

    @property
    def from_address(self) -> str:
        return self._from_address

    def build_message(self, recipient: str, content: EmailContent) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["From"] = self._from_address
        message["To"] = recipient
        message["Subject"] = content.subject
        message.attach(MIMEText(content.text, "plain", "utf-8"))
        message.attach(MIMEText(content.html, "html", "utf-8"))
        return message

    def send(self, recipient: str, content: EmailContent) -> None:
        message = self.build_message(recipient, content)
        try:
            with self._smtp_factory(self._host, self._port, timeout=self._timeout) as server:
                server.ehlo()
                if not self._secure and server.has_extn("starttls"):
                    server.starttls()
                    server.ehlo()
                if self._username:
                    server.login(self._username, self._password or "")
                server.sendmail(self._from_address, [recipient], message.as_string())
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("SMTP delivery to %s failed: %s", recipient, exc)
            raise DeliveryError(str(exc) or exc.__class__.__name__) from exc


class SendGridEmailSender:
    """Deliver messages through the SendGrid REST API."""

    def __init__(
        self,
        *,
        api_key: str,
        from_address: str,
        client_factory: Callable[[str], SendGridAPIClient] = SendGridAPIClient,
    ) -> None:
        self._api_key = api_key
        self._from_address = from_address
        self._client_factory = client_factory

    @property
    def from_address(self) -> str:
        return self._from_address

    def send(self, recipient: str, content: EmailContent) -> None:
        message = Mail(
            from_email=self._from_address,
            to_emails=recipient,
            subject=content.subject,
            html_content=content.html,
            plain_text_content=content.text,
        )

        try:
            client = self._client_factory(self._api_key)
            response = client.send(message)
        except Exception as exc:
            description = _describe_sendgrid_failure(
                getattr(exc, "status_code", None), getattr(exc, "body", None)
            )
            logger.error(description)
            raise DeliveryError(description) from exc

        status_code = getattr(response, "status_code", None)
        if not isinstance(status_code, int) or not 200 <= status_code < 300:
            description = _describe_sendgrid_failure(
                status_code, getattr(response, "body", None)
            )
            logger.error(description)
            raise DeliveryError(description)


def build_email_sender(settings: Settings) -> EmailSender:
    """Return the email sender selected by ``EMAIL_BACKEND``."""

    if settings.email_backend == "sendgrid":
        return SendGridEmailSender(
            api_key=settings.sendgrid_api_key or "",
            from_address=settings.sendgrid_sender or settings.smtp_from,
        )
    return SmtpEmailSender(
        host=settings.smtp_host,
        port=settings.smtp_port,
        from_address=settings.smtp_from,
        secure=settings.smtp_secure,
        username=settings.smtp_user,
        password=settings.smtp_pass,
        timeout=settings.smtp_timeout_seconds,
    )


__all__ = ["SendGridEmailSender", "SmtpEmailSender", "build_email_sender"]
