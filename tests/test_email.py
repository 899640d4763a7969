"""Unit tests for the SMTP and SendGrid email senders."""

from __future__ import annotations

import json
import logging
import smtplib

import pytest

from app.config import Settings
from app.infrastructure.delivery import DeliveryError, EmailContent
from app.infrastructure.email import (
    SendGridEmailSender,
    SmtpEmailSender,
    _extract_sendgrid_error_details,
    build_email_sender,
)

CONTENT = EmailContent(subject="Payment Reminder", html="<p>Due</p>", text="Due")


class _FakeSMTP:
    """Stand-in for ``smtplib.SMTP`` that records the conversation."""

    instances: list["_FakeSMTP"] = []

    def __init__(self, host, port, timeout=None, extensions=("starttls",), fail_with=None):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.extensions = set(extensions)
        self.fail_with = fail_with
        self.calls: list[str] = []
        self.logged_in: tuple[str, str] | None = None
        self.messages: list[tuple[str, list[str], str]] = []
        _FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.calls.append("quit")
        return False

    def ehlo(self):
        self.calls.append("ehlo")

    def has_extn(self, name):
        return name in self.extensions

    def starttls(self):
        self.calls.append("starttls")

    def login(self, user, password):
        self.logged_in = (user, password)

    def sendmail(self, from_address, to_addresses, message):
        if self.fail_with is not None:
            raise self.fail_with
        self.messages.append((from_address, to_addresses, message))


@pytest.fixture(autouse=True)
def _reset_fake_smtp():
    _FakeSMTP.instances.clear()
    yield
    _FakeSMTP.instances.clear()


def test_smtp_sender_upgrades_with_starttls_and_logs_in():
    sender = SmtpEmailSender(
        host="smtp.example.com",
        port=587,
        from_address="noreply@htd-system.com",
        username="mailer",
        password="secret",
        smtp_factory=_FakeSMTP,
    )

    sender.send("ana@example.com", CONTENT)

    server = _FakeSMTP.instances[0]
    assert (server.host, server.port, server.timeout) == ("smtp.example.com", 587, 30.0)
    assert server.calls == ["ehlo", "starttls", "ehlo", "quit"]
    assert server.logged_in == ("mailer", "secret")
    from_address, recipients, raw = server.messages[0]
    assert from_address == "noreply@htd-system.com"
    assert recipients == ["ana@example.com"]
    assert "Subject: Payment Reminder" in raw
    assert "multipart/alternative" in raw


def test_smtp_sender_skips_login_and_tls_when_not_available():
    def factory(host, port, timeout=None):
        return _FakeSMTP(host, port, timeout=timeout, extensions=())

    sender = SmtpEmailSender(
        host="localhost", port=25, from_address="noreply@htd-system.com", smtp_factory=factory
    )

    sender.send("ana@example.com", CONTENT)

    server = _FakeSMTP.instances[0]
    assert "starttls" not in server.calls
    assert server.logged_in is None


def test_smtp_sender_wraps_transport_errors():
    def factory(host, port, timeout=None):
        return _FakeSMTP(
            host,
            port,
            timeout=timeout,
            fail_with=smtplib.SMTPRecipientsRefused({"ana@example.com": (550, b"unknown")}),
        )

    sender = SmtpEmailSender(
        host="localhost", port=25, from_address="noreply@htd-system.com", smtp_factory=factory
    )

    with pytest.raises(DeliveryError):
        sender.send("ana@example.com", CONTENT)


def test_smtp_message_has_plain_and_html_parts():
    sender = SmtpEmailSender(
        host="localhost", port=25, from_address="noreply@htd-system.com", smtp_factory=_FakeSMTP
    )

    message = sender.build_message("ana@example.com", CONTENT)
    parts = [part.get_content_type() for part in message.get_payload()]

    assert message["To"] == "ana@example.com"
    assert parts == ["text/plain", "text/html"]


class _Response:
    def __init__(self, status_code, body=b""):
        self.status_code = status_code
        self.body = body


def _sendgrid_factory(response=None, error=None):
    captured: dict = {}

    class _Client:
        def __init__(self, api_key):
            captured["api_key"] = api_key

        def send(self, message):
            captured["message"] = message
            if error is not None:
                raise error
            return response

    return _Client, captured


def test_sendgrid_sender_builds_mail_payload():
    factory, captured = _sendgrid_factory(_Response(202))
    sender = SendGridEmailSender(
        api_key="SG.key", from_address="noreply@htd-system.com", client_factory=factory
    )

    sender.send("ana@example.com", CONTENT)

    assert captured["api_key"] == "SG.key"
    payload = captured["message"].get()
    assert payload["from"]["email"] == "noreply@htd-system.com"
    assert payload["personalizations"][0]["to"][0]["email"] == "ana@example.com"
    assert payload["subject"] == "Payment Reminder"
    content_types = [item["type"] for item in payload["content"]]
    assert content_types == ["text/plain", "text/html"]


def test_sendgrid_sender_raises_with_error_details(caplog):
    body = json.dumps({"errors": [{"message": "The from address does not match"}]})
    factory, _ = _sendgrid_factory(_Response(403, body.encode("utf-8")))
    sender = SendGridEmailSender(
        api_key="SG.key", from_address="noreply@htd-system.com", client_factory=factory
    )

    with caplog.at_level(logging.ERROR), pytest.raises(DeliveryError) as exc_info:
        sender.send("ana@example.com", CONTENT)

    message = str(exc_info.value)
    assert "status 403" in message
    assert "The from address does not match" in message
    assert "The from address does not match" in caplog.text


def test_sendgrid_sender_wraps_client_exceptions():
    class _HTTPError(Exception):
        status_code = 401
        body = b'{"errors": [{"message": "Permission denied, wrong credentials"}]}'

    factory, _ = _sendgrid_factory(error=_HTTPError("unauthorized"))
    sender = SendGridEmailSender(
        api_key="SG.key", from_address="noreply@htd-system.com", client_factory=factory
    )

    with pytest.raises(DeliveryError, match="Permission denied, wrong credentials"):
        sender.send("ana@example.com", CONTENT)


@pytest.mark.parametrize(
    ("body", "expected"),
    [
        (None, None),
        (b"", None),
        ("plain failure", "plain failure"),
        ({"errors": [{"message": "a"}, {"message": "b"}]}, "a; b"),
        (["x", "y"], "x; y"),
    ],
)
def test_extract_sendgrid_error_details(body, expected):
    assert _extract_sendgrid_error_details(body) == expected


def test_build_email_sender_selects_backend():
    smtp_settings = Settings(_env_file=None, email_backend="smtp", smtp_from="hi@htd.example")
    sendgrid_settings = Settings(
        _env_file=None,
        email_backend="sendgrid",
        sendgrid_api_key="SG.key",
        sendgrid_sender="hi@htd.example",
    )

    smtp_sender = build_email_sender(smtp_settings)
    sendgrid_sender = build_email_sender(sendgrid_settings)

    assert isinstance(smtp_sender, SmtpEmailSender)
    assert smtp_sender.from_address == "hi@htd.example"
    assert isinstance(sendgrid_sender, SendGridEmailSender)
    assert sendgrid_sender.from_address == "hi@htd.example"
