"""Diagnostics for the Twilio SMS carrier configuration."""

from __future__ import annotations

import logging
import re
from typing import Final

from app.config import Settings
from app.domain.entities import SmsConfigurationCheck

logger = logging.getLogger(__name__)

_E164_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\+[1-9]\d{1,14}$")
_ACCOUNT_SID_PREFIX: Final[str] = "AC"


def check_sms_configuration(settings: Settings) -> SmsConfigurationCheck:
    """Validate the carrier credentials without contacting the carrier.

    Each missing credential is an issue and makes the carrier unconfigured.
    Format problems are only warnings.
    """

    issues: list[str] = []
    warnings: list[str] = []

    if not settings.twilio_account_sid:
        issues.append("TWILIO_ACCOUNT_SID is not configured")
    if not settings.twilio_auth_token:
        issues.append("TWILIO_AUTH_TOKEN is not configured")
    if not settings.twilio_phone_number:
        issues.append("TWILIO_PHONE_NUMBER is not configured")

    phone_number = settings.twilio_phone_number
    if phone_number and not _E164_PATTERN.match(phone_number):
        warnings.append(
            "TWILIO_PHONE_NUMBER format may be invalid "
            "(should be in E.164 format like +1234567890)"
        )

    account_sid = settings.twilio_account_sid
    if account_sid and not account_sid.startswith(_ACCOUNT_SID_PREFIX):
        warnings.append(f'TWILIO_ACCOUNT_SID should start with "{_ACCOUNT_SID_PREFIX}"')

    return SmsConfigurationCheck(
        is_configured=not issues, issues=issues, warnings=warnings
    )


def log_sms_status(settings: Settings) -> SmsConfigurationCheck:
    """Log the outcome of :func:`check_sms_configuration` and return it."""

    check = check_sms_configuration(settings)

    if check.is_configured:
        logger.info("Twilio SMS service is properly configured")
        for warning in check.warnings:
            logger.warning("Twilio warning: %s", warning)
    else:
        logger.warning("Twilio SMS service is not configured:")
        for issue in check.issues:
            logger.warning("  - %s", issue)
        logger.warning("SMS notifications will be disabled")

    return check


__all__ = ["check_sms_configuration", "log_sms_status"]
