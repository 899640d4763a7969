"""Contracts shared by the channel senders."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


class DeliveryError(Exception):
    """Raised when an external channel rejects or fails to deliver a message."""


class SmsNotConfiguredError(DeliveryError):
    """Raised when an SMS is requested but the carrier credentials are missing."""


@dataclass(frozen=True)
class EmailContent:
    subject: str
    html: str
    text: str


@runtime_checkable
class EmailSender(Protocol):
    def send(self, recipient: str, content: EmailContent) -> None:
        """Deliver ``content`` to ``recipient`` or raise :class:`DeliveryError`."""


@runtime_checkable
class SmsSender(Protocol):
    @property
    def is_configured(self) -> bool:
        """``True`` when every carrier credential is available."""

    def send(self, recipient: str, content: str) -> None:
        """Deliver ``content`` to ``recipient`` or raise :class:`DeliveryError`."""


__all__ = [
    "DeliveryError",
    "EmailContent",
    "EmailSender",
    "SmsNotConfiguredError",
    "SmsSender",
]
