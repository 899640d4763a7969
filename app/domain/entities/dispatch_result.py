"""Outcome of a single notification dispatch attempt."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class DispatchOutcome(str, Enum):
    SENT = "SENT"
    PARTIALLY_FAILED = "PARTIALLY_FAILED"
    NOT_ELIGIBLE = "NOT_ELIGIBLE"
    NOT_FOUND = "NOT_FOUND"
    ERROR = "ERROR"


@dataclass(frozen=True)
class DispatchResult:
    """Describe what happened when a notification was dispatched.

    The result is truthy only for :attr:`DispatchOutcome.SENT`, so callers
    interested in the overall success can keep treating it as a boolean.
    """

    outcome: DispatchOutcome
    notification_id: int | None = None
    channel_errors: dict[str, str] = field(default_factory=dict)
    error: str | None = None

    def __bool__(self) -> bool:
        return self.outcome is DispatchOutcome.SENT

    @property
    def attempted(self) -> bool:
        """``True`` when at least one channel delivery was attempted."""

        return self.outcome in (DispatchOutcome.SENT, DispatchOutcome.PARTIALLY_FAILED)

    @classmethod
    def not_found(cls, notification_id: int | None, error: str) -> "DispatchResult":
        return cls(DispatchOutcome.NOT_FOUND, notification_id, error=error)

    @classmethod
    def not_eligible(cls, notification_id: int | None) -> "DispatchResult":
        return cls(DispatchOutcome.NOT_ELIGIBLE, notification_id)


__all__ = ["DispatchOutcome", "DispatchResult"]
