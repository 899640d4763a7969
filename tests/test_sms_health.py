"""Tests for the Twilio configuration health check."""

from __future__ import annotations

import logging

from app.config import Settings
from app.infrastructure.sms_health import check_sms_configuration, log_sms_status


def _settings(**twilio):
    values = {
        "twilio_account_sid": None,
        "twilio_auth_token": None,
        "twilio_phone_number": None,
    }
    values.update(twilio)
    return Settings(_env_file=None, **values)


def test_fully_configured_carrier_has_no_issues():
    check = check_sms_configuration(
        _settings(
            twilio_account_sid="AC0123456789",
            twilio_auth_token="secret",
            twilio_phone_number="+15550009999",
        )
    )

    assert check.is_configured is True
    assert check.issues == []
    assert check.warnings == []


def test_missing_credentials_are_reported_individually():
    check = check_sms_configuration(_settings())

    assert check.is_configured is False
    assert check.issues == [
        "TWILIO_ACCOUNT_SID is not configured",
        "TWILIO_AUTH_TOKEN is not configured",
        "TWILIO_PHONE_NUMBER is not configured",
    ]
    assert check.warnings == []


def test_single_missing_credential():
    check = check_sms_configuration(
        _settings(twilio_account_sid="AC0123456789", twilio_auth_token="secret")
    )

    assert check.is_configured is False
    assert check.issues == ["TWILIO_PHONE_NUMBER is not configured"]
    assert check.warnings == []


def test_non_e164_phone_number_is_only_a_warning():
    check = check_sms_configuration(
        _settings(
            twilio_account_sid="AC0123456789",
            twilio_auth_token="secret",
            twilio_phone_number="1234567890",
        )
    )

    assert check.is_configured is True
    assert len(check.warnings) == 1
    assert "E.164" in check.warnings[0]


def test_account_sid_without_prefix_is_a_warning():
    check = check_sms_configuration(
        _settings(
            twilio_account_sid="XY0123456789",
            twilio_auth_token="secret",
            twilio_phone_number="+15550009999",
        )
    )

    assert check.is_configured is True
    assert check.warnings == ['TWILIO_ACCOUNT_SID should start with "AC"']


def test_log_sms_status_reports_disabled_sms(caplog):
    with caplog.at_level(logging.WARNING):
        check = log_sms_status(_settings(twilio_auth_token="secret"))

    assert check.is_configured is False
    assert "TWILIO_ACCOUNT_SID is not configured" in caplog.text
    assert "SMS notifications will be disabled" in caplog.text
