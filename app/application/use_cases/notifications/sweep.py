"""Send every notification whose scheduled time has been reached."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.infrastructure.repositories import NotificationRepository

from .dispatch import NotificationDispatcher

logger = logging.getLogger(__name__)


def sweep_once(session: Session, dispatcher: NotificationDispatcher) -> int:
    """Dispatch due notifications and return how many were fetched.

    The count includes notifications whose delivery failed; inspect their
    persisted status for per-item results.
    """

    repository = NotificationRepository(session)
    try:
        due = repository.list_due(dispatcher.now())
    except SQLAlchemyError:
        logger.exception("Error processing scheduled notifications")
        session.rollback()
        return 0

    for notification in due:
        if notification.id is None:
            logger.warning("Skipping notification with missing ID")
            continue

        try:
            result = dispatcher.dispatch(session, notification.id)
        except Exception:
            logger.exception("Failed to send notification %s", notification.id)
            continue
        logger.debug(
            "Notification %s dispatched with outcome %s",
            notification.id,
            result.outcome.value,
        )

    if due:
        logger.info("Processed %d scheduled notifications", len(due))
    return len(due)


__all__ = ["sweep_once"]
