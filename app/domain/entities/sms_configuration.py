"""Result of validating the SMS carrier credentials."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SmsConfigurationCheck:
    is_configured: bool
    issues: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


__all__ = ["SmsConfigurationCheck"]
