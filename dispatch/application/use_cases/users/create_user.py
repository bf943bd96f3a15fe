"""Use case for creating users."""

from sqlalchemy.orm import Session

from dispatch.domain.entities import User, UserRole
from dispatch.infrastructure.repositories import UserRepository
from dispatch.infrastructure.security import get_password_hash
from dispatch.utils import now_in_app_timezone


def create_user(
    session: Session,
    *,
    name: str,
    email: str,
    password: str,
    role: UserRole | str,
) -> User:
    """Create a new user ensuring unique email addresses."""

    repository = UserRepository(session)

    if repository.get_by_email(email):
        raise ValueError("Email address is already registered")

    try:
        role = UserRole(role)
    except ValueError as exc:
        raise ValueError(f"Unknown role: {role}") from exc

    user = User(
        id=None,
        name=name.strip(),
        email=email,
        password=get_password_hash(password),
        role=role,
        is_active=True,
        created_at=now_in_app_timezone(),
    )
    return repository.create(user)
