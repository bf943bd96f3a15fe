"""Shared fixtures: a throwaway SQLite database and recording publisher."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

TEST_DB_PATH = Path(tempfile.gettempdir()) / "freight_dispatch_test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["APP_TIMEZONE"] = "UTC"

from dispatch.config import get_settings, reset_settings_cache  # noqa: E402

reset_settings_cache()

from dispatch.application.use_cases.lifecycle import LoadLifecycle  # noqa: E402
from dispatch.application.use_cases.locations import LocationTracker  # noqa: E402
from dispatch.application.use_cases.notifications import (  # noqa: E402
    NotificationDispatcher,
)
from dispatch.domain.entities import Load, LoadStatus, User, UserRole  # noqa: E402
from dispatch.infrastructure.database import (  # noqa: E402
    Base,
    SessionLocal,
    engine,
    initialize_database,
)
from dispatch.infrastructure.notifications import EventPublisher  # noqa: E402
from dispatch.infrastructure.repositories import (  # noqa: E402
    LoadRepository,
    UserRepository,
)


class RecordingPublisher(EventPublisher):
    """Publisher that keeps every event in memory."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str, Any]] = []

    def publish(self, topic: str, event_type: str, payload: Any) -> None:
        self.events.append((topic, event_type, payload))

    def for_topic(self, topic: str) -> list[tuple[str, Any]]:
        return [(event_type, payload) for t, event_type, payload in self.events if t == topic]


class FailingPublisher(EventPublisher):
    """Publisher whose transport is down."""

    def __init__(self) -> None:
        self.attempts = 0

    def publish(self, topic: str, event_type: str, payload: Any) -> None:
        self.attempts += 1
        raise ConnectionError("transport down")


@pytest.fixture(autouse=True)
def reset_database():
    """Ensure the test database starts from a clean state for each test."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def settings():
    return get_settings()


@pytest.fixture()
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture()
def dispatcher(session, publisher) -> NotificationDispatcher:
    return NotificationDispatcher(session, publisher)


@pytest.fixture()
def tracker(session, publisher, settings) -> LocationTracker:
    return LocationTracker(session, publisher, settings)


@pytest.fixture()
def lifecycle(session, dispatcher, tracker, settings) -> LoadLifecycle:
    return LoadLifecycle(session, dispatcher, tracker, settings)


@pytest.fixture()
def make_user(session):
    """Insert users directly; the stored password is not a usable hash."""

    counter = {"value": 0}

    def factory(
        role: UserRole = UserRole.DRIVER,
        *,
        name: str | None = None,
        is_active: bool = True,
        password: str = "not-a-hash",
    ) -> User:
        counter["value"] += 1
        index = counter["value"]
        return UserRepository(session).create(
            User(
                id=None,
                name=name or f"{role.value.title()} {index}",
                email=f"{role.value}{index}@example.com",
                password=password,
                role=role,
                is_active=is_active,
                created_at=None,
            )
        )

    return factory


@pytest.fixture()
def make_load(session):
    def factory(customer: User, **overrides: Any) -> Load:
        values: dict[str, Any] = {
            "id": None,
            "customer_id": customer.id,
            "title": "Pallets of tiles",
            "status": LoadStatus.AVAILABLE,
            "pickup_location": "Cape Town",
            "dropoff_location": "Stellenbosch",
            "pickup_date": None,
            "weight_lbs": 1200.0,
        }
        values.update(overrides)
        return LoadRepository(session).create(Load(**values))

    return factory


@pytest.fixture()
def customer(make_user) -> User:
    return make_user(UserRole.CUSTOMER, name="Carla Customer")


@pytest.fixture()
def driver(make_user) -> User:
    return make_user(UserRole.DRIVER, name="Dan Driver")


@pytest.fixture()
def failing_publisher() -> FailingPublisher:
    return FailingPublisher()
