"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.infrastructure.database import Base
from app.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """Database representation for multi-channel notifications.

    Channel sub-records are flattened into ``<channel>_*`` columns so the
    sweep can filter on ``*_enabled`` in SQL.
    """

    __tablename__ = "notification"

    id = Column(Integer, primary_key=True, index=True)
    recipient_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    type = Column(String(40), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    priority = Column(String(10), nullable=False, default="MEDIUM")
    status = Column(String(10), nullable=False, default="PENDING", index=True)
    scheduled_for = Column(
        DateTime(), nullable=False, default=now_in_app_naive_datetime, index=True
    )
    expires_at = Column(DateTime(), nullable=True)

    email_enabled = Column(Boolean, nullable=False, default=False)
    email_sent = Column(Boolean, nullable=False, default=False)
    email_sent_at = Column(DateTime(), nullable=True)
    email_error = Column(Text, nullable=True)
    sms_enabled = Column(Boolean, nullable=False, default=False)
    sms_sent = Column(Boolean, nullable=False, default=False)
    sms_sent_at = Column(DateTime(), nullable=True)
    sms_error = Column(Text, nullable=True)
    in_app_enabled = Column(Boolean, nullable=False, default=False)
    in_app_sent = Column(Boolean, nullable=False, default=False)
    in_app_sent_at = Column(DateTime(), nullable=True)
    in_app_error = Column(Text, nullable=True)

    related_entity_type = Column(String(40), nullable=True)
    related_entity_id = Column(String(64), nullable=True)
    action_url = Column(String(500), nullable=True)
    created_by = Column(Integer, nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime(), nullable=True, onupdate=now_in_app_naive_datetime)
    read_at = Column(DateTime(), nullable=True)

    recipient = relationship("UserModel", lazy="joined")


__all__ = ["NotificationModel"]
