"""Run a single notification sweep, e.g. from cron when the worker is disabled."""

from __future__ import annotations

import argparse
import logging

from app.application.use_cases.notifications import NotificationDispatcher, sweep_once
from app.config import get_settings
from app.infrastructure.database import SessionLocal, initialize_database
from app.infrastructure.sms_health import check_sms_configuration, log_sms_status


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Send every pending notification whose scheduled time has passed.",
    )
    parser.add_argument(
        "--check-only",
        action="store_true",
        help="Only print the SMS carrier configuration check and exit.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    if args.check_only:
        check = check_sms_configuration(settings)
        print(f"SMS configured: {'yes' if check.is_configured else 'no'}")
        for issue in check.issues:
            print(f"  issue: {issue}")
        for warning in check.warnings:
            print(f"  warning: {warning}")
        return

    initialize_database()
    log_sms_status(settings)
    dispatcher = NotificationDispatcher.from_settings(settings)

    session = SessionLocal()
    try:
        processed = sweep_once(session, dispatcher)
    finally:
        session.close()
    print(f"Processed {processed} due notifications")


if __name__ == "__main__":
    main()
