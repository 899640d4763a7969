"""Endpoints to create, dispatch and read notifications."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.application.use_cases.notifications import (
    NotificationDispatcher,
    create_notification as create_notification_uc,
    get_notification as get_notification_uc,
    list_notifications as list_notifications_uc,
    mark_all_notifications_read as mark_all_notifications_read_uc,
    mark_notification_read as mark_notification_read_uc,
    notify_evaluation_due as notify_evaluation_due_uc,
    notify_payment_reminder as notify_payment_reminder_uc,
    notify_training_progress as notify_training_progress_uc,
    sweep_once,
)
from app.domain.entities import (
    ChannelDelivery,
    ChannelName,
    DispatchOutcome,
    Notification,
    NotificationPriority,
    NotificationType,
)
from app.interfaces.api.dependencies import get_db, get_notification_dispatcher
from app.interfaces.api.schemas import (
    ChannelDeliveryRead,
    DispatchResultRead,
    EvaluationDueCreate,
    MarkAllReadResponse,
    NotificationCreate,
    NotificationPageRead,
    NotificationRead,
    PaginationRead,
    PaymentReminderCreate,
    RecipientSummary,
    SweepResultRead,
    TrainingProgressCreate,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_schema(notification: Notification) -> NotificationRead:
    recipient = (
        RecipientSummary.model_validate(notification.recipient)
        if notification.recipient and notification.recipient.id is not None
        else None
    )
    return NotificationRead(
        id=notification.id or 0,
        recipient_id=notification.recipient_id,
        recipient=recipient,
        type=notification.type,
        title=notification.title,
        message=notification.message,
        priority=notification.priority,
        status=notification.status,
        channels={
            name.value: ChannelDeliveryRead.model_validate(delivery)
            for name, delivery in notification.channels.items()
        },
        scheduled_for=notification.scheduled_for,
        expires_at=notification.expires_at,
        related_entity_type=notification.related_entity_type,
        related_entity_id=notification.related_entity_id,
        action_url=notification.action_url,
        created_by=notification.created_by,
        created_at=notification.created_at,
        updated_at=notification.updated_at,
        read_at=notification.read_at,
        is_read=notification.is_read,
    )


@router.get("/", response_model=NotificationPageRead)
def list_notifications(
    recipient_id: int = Query(..., description="User whose inbox is listed"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    unread_only: bool = Query(False, alias="unreadOnly"),
    notification_type: NotificationType | None = Query(None, alias="type"),
    priority: NotificationPriority | None = Query(None),
    db: Session = Depends(get_db),
) -> NotificationPageRead:
    """Return a page of notifications for ``recipient_id``, newest first."""

    result = list_notifications_uc(
        db,
        recipient_id=recipient_id,
        page=page,
        limit=limit,
        unread_only=unread_only,
        notification_type=notification_type,
        priority=priority,
    )
    return NotificationPageRead(
        notifications=[_notification_to_schema(n) for n in result.notifications],
        pagination=PaginationRead(
            page=result.page, limit=result.limit, total=result.total, pages=result.pages
        ),
    )


@router.post("/", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def create_notification(
    payload: NotificationCreate,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> NotificationRead:
    """Create a notification; it is sent immediately when already due."""

    channels = {
        ChannelName.EMAIL: ChannelDelivery(enabled=payload.channels.email.enabled),
        ChannelName.SMS: ChannelDelivery(enabled=payload.channels.sms.enabled),
        ChannelName.IN_APP: ChannelDelivery(enabled=payload.channels.in_app.enabled),
    }
    try:
        notification = create_notification_uc(
            db,
            dispatcher,
            recipient_id=payload.recipient_id,
            type=payload.type,
            title=payload.title,
            message=payload.message,
            priority=payload.priority,
            channels=channels,
            scheduled_for=payload.scheduled_for,
            expires_at=payload.expires_at,
            related_entity_type=payload.related_entity_type,
            related_entity_id=payload.related_entity_id,
            action_url=payload.action_url,
            created_by=payload.created_by,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _notification_to_schema(notification)


@router.post(
    "/training-progress",
    response_model=NotificationRead,
    status_code=status.HTTP_201_CREATED,
)
def create_training_progress_notification(
    payload: TrainingProgressCreate,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> NotificationRead:
    try:
        notification = notify_training_progress_uc(
            db,
            dispatcher,
            candidate_id=payload.candidate_id,
            training_id=payload.training_id,
            message=payload.message,
            user_id=payload.user_id,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _notification_to_schema(notification)


@router.post(
    "/payment-reminder",
    response_model=NotificationRead,
    status_code=status.HTTP_201_CREATED,
)
def create_payment_reminder_notification(
    payload: PaymentReminderCreate,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> NotificationRead:
    try:
        notification = notify_payment_reminder_uc(
            db,
            dispatcher,
            candidate_id=payload.candidate_id,
            amount=payload.amount,
            due_date=payload.due_date,
            user_id=payload.user_id,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _notification_to_schema(notification)


@router.post(
    "/evaluation-due",
    response_model=NotificationRead,
    status_code=status.HTTP_201_CREATED,
)
def create_evaluation_due_notification(
    payload: EvaluationDueCreate,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> NotificationRead:
    try:
        notification = notify_evaluation_due_uc(
            db,
            dispatcher,
            training_id=payload.training_id,
            evaluator_id=payload.evaluator_id,
            candidate_name=payload.candidate_name,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _notification_to_schema(notification)


@router.post("/sweep", response_model=SweepResultRead)
def run_sweep(
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> SweepResultRead:
    """Send every due notification now instead of waiting for the worker."""

    return SweepResultRead(processed=sweep_once(db, dispatcher))


@router.patch("/read-all", response_model=MarkAllReadResponse)
def mark_all_read(
    recipient_id: int = Query(...),
    db: Session = Depends(get_db),
) -> MarkAllReadResponse:
    updated = mark_all_notifications_read_uc(db, recipient_id=recipient_id)
    return MarkAllReadResponse(updated=updated)


@router.get("/{notification_id}", response_model=NotificationRead)
def read_notification(
    notification_id: int,
    db: Session = Depends(get_db),
) -> NotificationRead:
    try:
        notification = get_notification_uc(db, notification_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return _notification_to_schema(notification)


@router.patch("/{notification_id}/read", response_model=NotificationRead)
def mark_read(
    notification_id: int,
    recipient_id: int = Query(...),
    db: Session = Depends(get_db),
) -> NotificationRead:
    try:
        notification = mark_notification_read_uc(
            db, notification_id=notification_id, recipient_id=recipient_id
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return _notification_to_schema(notification)


@router.post("/{notification_id}/dispatch", response_model=DispatchResultRead)
def dispatch_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> DispatchResultRead:
    """Attempt delivery of a single notification and report the outcome."""

    result = dispatcher.dispatch(db, notification_id)
    if result.outcome is DispatchOutcome.NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.error)
    return DispatchResultRead(
        notification_id=result.notification_id,
        outcome=result.outcome.value,
        success=bool(result),
        channel_errors=result.channel_errors,
        error=result.error,
    )
