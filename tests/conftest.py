"""Shared fixtures for the notification tests."""

from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Ensure the project root (which contains the ``app`` package) is importable
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["APP_TIMEZONE"] = "UTC"
os.environ["NOTIFICATION_SWEEP_ENABLED"] = "false"

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.application.use_cases.notifications import NotificationDispatcher
from app.config import Settings
from app.domain.entities import (
    Notification,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
    User,
    default_channels,
)
from app.infrastructure.database import initialize_database
from app.infrastructure.delivery import EmailContent
from app.infrastructure.repositories import NotificationRepository, UserRepository

START = datetime(2024, 8, 20, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeEmailSender:
    """Record outgoing emails; raise ``error`` when it is set."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, EmailContent]] = []
        self.error: Exception | None = None

    def send(self, recipient: str, content: EmailContent) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append((recipient, content))


class FakeSmsSender:
    def __init__(self, *, configured: bool = False) -> None:
        self.configured = configured
        self.sent: list[tuple[str, str]] = []
        self.error: Exception | None = None

    @property
    def is_configured(self) -> bool:
        return self.configured

    def send(self, recipient: str, content: str) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append((recipient, content))


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    initialize_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(START)


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        client_url="https://htd.example.com",
        brand_name="HTD",
        email_backend="smtp",
        twilio_account_sid=None,
        twilio_auth_token=None,
        twilio_phone_number=None,
        sendgrid_api_key=None,
        sendgrid_sender=None,
    )


@pytest.fixture()
def email_sender() -> FakeEmailSender:
    return FakeEmailSender()


@pytest.fixture()
def sms_sender() -> FakeSmsSender:
    return FakeSmsSender(configured=False)


@pytest.fixture()
def dispatcher(settings, email_sender, sms_sender, clock) -> NotificationDispatcher:
    return NotificationDispatcher(
        settings, email_sender=email_sender, sms_sender=sms_sender, clock=clock
    )


@pytest.fixture()
def recipient(session) -> User:
    return UserRepository(session).create(
        User(
            id=None,
            name="Ana Torres",
            email="ana@example.com",
            contact_number="+15550001111",
        )
    )


@pytest.fixture()
def make_notification(session, recipient, clock):
    """Persist a notification without dispatching it."""

    def factory(
        *,
        email: bool = True,
        sms: bool = False,
        in_app: bool = False,
        status: NotificationStatus = NotificationStatus.PENDING,
        scheduled_for: datetime | None = None,
        notification_type: NotificationType = NotificationType.GENERIC,
        action_url: str | None = None,
        recipient_id: int | None = None,
        priority: NotificationPriority = NotificationPriority.MEDIUM,
        title: str = "Heads up",
        message: str = "Something happened.",
    ) -> Notification:
        notification = Notification(
            id=None,
            recipient_id=recipient_id or recipient.id,
            type=notification_type,
            title=title,
            message=message,
            priority=priority,
            channels=default_channels(email=email, sms=sms, in_app=in_app),
            status=status,
            scheduled_for=scheduled_for or clock(),
            action_url=action_url,
            created_at=clock(),
        )
        return NotificationRepository(session).create(notification)

    return factory
