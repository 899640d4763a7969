"""Use case for registering notification recipients."""

import re

from sqlalchemy.orm import Session

from app.domain.entities import User
from app.infrastructure.repositories import UserRepository

_CONTACT_NUMBER_PATTERN = re.compile(r"^\+?[0-9][0-9 ()-]{5,19}$")


def create_user(
    session: Session,
    *,
    name: str,
    email: str | None = None,
    contact_number: str | None = None,
    preferences: dict | None = None,
) -> User:
    """Create a new recipient ensuring unique email addresses."""

    name = name.strip()
    if not name:
        raise ValueError("User name is required")

    repository = UserRepository(session)

    if email:
        email = email.strip().lower()
        if email.count("@") != 1:
            raise ValueError("Email address is not valid")
        if repository.get_by_email(email):
            raise ValueError("Email address is already registered")

    if contact_number:
        contact_number = contact_number.strip()
        if not _CONTACT_NUMBER_PATTERN.match(contact_number):
            raise ValueError("Contact number is not valid")

    user = User(
        id=None,
        name=name,
        email=email or None,
        contact_number=contact_number or None,
        preferences=preferences or {},
        is_active=True,
    )
    return repository.create(user)
