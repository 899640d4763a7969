"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities import NotificationPriority, NotificationStatus, NotificationType


class ChannelDeliveryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    enabled: bool
    sent: bool
    sent_at: datetime | None = None
    error: str | None = None


class ChannelToggle(BaseModel):
    enabled: bool = False


class NotificationChannelsCreate(BaseModel):
    """Channels requested for a new notification."""

    model_config = ConfigDict(populate_by_name=True)

    email: ChannelToggle = Field(default_factory=ChannelToggle)
    sms: ChannelToggle = Field(default_factory=ChannelToggle)
    in_app: ChannelToggle = Field(default_factory=ChannelToggle, alias="inApp")


class RecipientSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str | None = None
    contact_number: str | None = None


class NotificationCreate(BaseModel):
    """Payload used to create (and possibly immediately send) a notification."""

    recipient_id: int
    type: NotificationType = NotificationType.GENERIC
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    priority: NotificationPriority = NotificationPriority.MEDIUM
    channels: NotificationChannelsCreate = Field(default_factory=NotificationChannelsCreate)
    scheduled_for: datetime | None = None
    expires_at: datetime | None = None
    related_entity_type: str | None = None
    related_entity_id: str | None = None
    action_url: str | None = Field(default=None, max_length=500)
    created_by: int | None = None


class TrainingProgressCreate(BaseModel):
    candidate_id: str
    training_id: str
    message: str = Field(..., min_length=1)
    user_id: int


class PaymentReminderCreate(BaseModel):
    candidate_id: str
    amount: Decimal = Field(..., gt=0)
    due_date: date
    user_id: int


class EvaluationDueCreate(BaseModel):
    training_id: str
    evaluator_id: int
    candidate_name: str = Field(..., min_length=1)


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: int
    recipient_id: int
    recipient: RecipientSummary | None = None
    type: NotificationType
    title: str
    message: str
    priority: NotificationPriority
    status: NotificationStatus
    channels: dict[str, ChannelDeliveryRead]
    scheduled_for: datetime | None = None
    expires_at: datetime | None = None
    related_entity_type: str | None = None
    related_entity_id: str | None = None
    action_url: str | None = None
    created_by: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    read_at: datetime | None = None
    is_read: bool = False


class PaginationRead(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class NotificationPageRead(BaseModel):
    notifications: list[NotificationRead]
    pagination: PaginationRead


class DispatchResultRead(BaseModel):
    notification_id: int | None = None
    outcome: str
    success: bool
    channel_errors: dict[str, str] = Field(default_factory=dict)
    error: str | None = None


class SweepResultRead(BaseModel):
    processed: int


class MarkAllReadResponse(BaseModel):
    updated: int


class SmsConfigurationRead(BaseModel):
    is_configured: bool
    issues: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


__all__ = [
    "ChannelDeliveryRead",
    "DispatchResultRead",
    "EvaluationDueCreate",
    "MarkAllReadResponse",
    "NotificationChannelsCreate",
    "NotificationCreate",
    "NotificationPageRead",
    "NotificationRead",
    "PaginationRead",
    "PaymentReminderCreate",
    "RecipientSummary",
    "SmsConfigurationRead",
    "SweepResultRead",
    "TrainingProgressCreate",
]
