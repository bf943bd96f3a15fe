"""FastAPI dependency utilities."""

from collections.abc import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from dispatch.application.use_cases.lifecycle import LoadLifecycle
from dispatch.application.use_cases.locations import LocationTracker
from dispatch.application.use_cases.notifications import NotificationDispatcher
from dispatch.config import Settings, get_settings
from dispatch.domain.entities import User, UserRole
from dispatch.infrastructure.database import get_db
from dispatch.infrastructure.notifications import EventPublisher, realtime_event_publisher
from dispatch.infrastructure.repositories import UserRepository
from dispatch.infrastructure.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def _credentials_error(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_current_user(token: str, db: Session) -> User:
    """Resolve the authenticated user for the provided token."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _credentials_error() from exc

    email: str | None = payload.get("sub")
    if not isinstance(email, str):
        raise _credentials_error()

    user = UserRepository(db).get_by_email(email)
    if user is None:
        raise _credentials_error("User not found")
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Return the authenticated user from the provided token."""

    return resolve_current_user(token, db)


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Ensure the authenticated user is active."""

    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )
    return current_user


def require_role(*roles: UserRole) -> Callable[..., User]:
    """Return a dependency admitting only active users holding one of ``roles``."""

    def dependency(current_user: User = Depends(get_current_active_user)) -> User:
        if not any(current_user.has_role(role) for role in roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not authorized",
            )
        return current_user

    return dependency


require_driver = require_role(UserRole.DRIVER)
require_customer = require_role(UserRole.CUSTOMER)


def get_event_publisher() -> EventPublisher:
    return realtime_event_publisher


def get_notification_dispatcher(
    db: Session = Depends(get_db),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> NotificationDispatcher:
    return NotificationDispatcher(db, publisher)


def get_location_tracker(
    db: Session = Depends(get_db),
    publisher: EventPublisher = Depends(get_event_publisher),
    settings: Settings = Depends(get_settings),
) -> LocationTracker:
    return LocationTracker(db, publisher, settings)


def get_load_lifecycle(
    db: Session = Depends(get_db),
    notifications: NotificationDispatcher = Depends(get_notification_dispatcher),
    locations: LocationTracker = Depends(get_location_tracker),
    settings: Settings = Depends(get_settings),
) -> LoadLifecycle:
    return LoadLifecycle(db, notifications, locations, settings)


__all__ = [
    "get_current_active_user",
    "get_current_user",
    "get_event_publisher",
    "get_load_lifecycle",
    "get_location_tracker",
    "get_notification_dispatcher",
    "oauth2_scheme",
    "require_customer",
    "require_driver",
    "require_role",
    "resolve_current_user",
]
