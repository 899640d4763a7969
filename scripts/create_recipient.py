"""Utility script to register a notification recipient in the database."""

from __future__ import annotations

import argparse

from sqlalchemy.exc import SQLAlchemyError

from app.application.use_cases.users.create_user import create_user
from app.infrastructure.database import SessionLocal, initialize_database


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for recipient creation."""

    parser = argparse.ArgumentParser(
        description="Register a user that can receive HTD notifications.",
    )
    parser.add_argument("--name", required=True, help="Full name of the recipient")
    parser.add_argument("--email", default=None, help="Email address (optional)")
    parser.add_argument(
        "--contact-number",
        default=None,
        help="Phone number in E.164 format, used for SMS (optional)",
    )
    return parser.parse_args()


def main() -> None:
    """Create a recipient using the provided command line arguments."""

    args = parse_args()
    initialize_database()

    session = SessionLocal()
    try:
        user = create_user(
            session,
            name=args.name,
            email=args.email,
            contact_number=args.contact_number,
        )
    except ValueError as exc:
        session.rollback()
        raise SystemExit(f"Could not create the recipient: {exc}") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Error saving the recipient to the database: {exc}") from exc
    else:
        print(
            "Recipient created:\n"
            f"  ID: {user.id}\n"
            f"  Name: {user.name}\n"
            f"  Email: {user.email or '-'}\n"
            f"  Contact number: {user.contact_number or '-'}"
        )
    finally:
        session.close()


if __name__ == "__main__":
    main()
