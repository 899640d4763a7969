"""Background thread that periodically sends due notifications.

Usage::

    worker = NotificationSweepWorker(SessionLocal, dispatcher, interval_seconds=60)
    worker.start()
    ...
    worker.stop()
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

from sqlalchemy.orm import Session

from app.application.use_cases.notifications import NotificationDispatcher, sweep_once

logger = logging.getLogger(__name__)

_MAX_BACKOFF_FACTOR = 8


class NotificationSweepWorker:
    """Daemon thread running :func:`sweep_once` on a fixed interval."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        dispatcher: NotificationDispatcher,
        *,
        interval_seconds: float,
    ) -> None:
        self._session_factory = session_factory
        self._dispatcher = dispatcher
        self._interval = interval_seconds
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._consecutive_failures = 0

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background worker thread."""

        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            name="notification-sweep",
            daemon=True,
        )
        self._thread.start()
        logger.info("Notification sweep worker started (interval=%ss)", self._interval)

    def stop(self) -> None:
        """Signal the worker to stop and wait for it."""

        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=self._interval + 5)
            self._thread = None
            logger.info("Notification sweep worker stopped")

    def run_once(self) -> int:
        """Run a single sweep in a fresh session and return the fetched count."""

        session = self._session_factory()
        try:
            return sweep_once(session, self._dispatcher)
        finally:
            session.close()

    def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.run_once()
                self._consecutive_failures = 0
            except Exception:
                self._consecutive_failures += 1
                logger.exception(
                    "Notification sweep failed (consecutive: %d)",
                    self._consecutive_failures,
                )
                backoff = min(
                    self._interval * (2**self._consecutive_failures),
                    self._interval * _MAX_BACKOFF_FACTOR,
                )
                self._stop_event.wait(timeout=backoff)
                continue
            self._stop_event.wait(timeout=self._interval)


__all__ = ["NotificationSweepWorker"]
