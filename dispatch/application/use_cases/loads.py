"""Use cases for posting loads and reading the load board."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime

from sqlalchemy.orm import Session

from dispatch.domain.entities import (
    ACTIVE_LOAD_STATUSES,
    HISTORY_LOAD_STATUSES,
    Load,
    LoadStatus,
    LocationUpdate,
    User,
    UserRole,
)
from dispatch.infrastructure.repositories import LoadRepository, UserRepository
from dispatch.utils import now_in_app_timezone

from .locations import LocationTracker
from .notifications import NotificationDispatcher, notify_load_posted

logger = logging.getLogger(__name__)

SEQUENCED_LOAD_STATUSES = (
    LoadStatus.ACCEPTED,
    LoadStatus.PICKED_UP,
    LoadStatus.IN_TRANSIT,
)


def create_load(
    session: Session,
    dispatcher: NotificationDispatcher,
    customer: User,
    *,
    title: str,
    pickup_location: str,
    dropoff_location: str,
    pickup_date: datetime | None = None,
    weight_lbs: float = 0.0,
    description: str | None = None,
    cargo_type: str | None = None,
    pickup_latitude: float | None = None,
    pickup_longitude: float | None = None,
    dropoff_latitude: float | None = None,
    dropoff_longitude: float | None = None,
) -> Load:
    """Post a new ``Available`` load and tell every active driver about it."""

    if not customer.is_customer():
        raise PermissionError("Only customers can post loads")

    title = title.strip()
    if not title:
        raise ValueError("Load title is required")
    if not pickup_location.strip() or not dropoff_location.strip():
        raise ValueError("Pickup and dropoff locations are required")
    if weight_lbs < 0:
        raise ValueError("Weight cannot be negative")

    repository = LoadRepository(session)
    load = repository.create(
        Load(
            id=None,
            customer_id=customer.id,
            title=title,
            status=LoadStatus.AVAILABLE,
            pickup_location=pickup_location.strip(),
            dropoff_location=dropoff_location.strip(),
            pickup_date=pickup_date,
            weight_lbs=weight_lbs,
            description=description,
            cargo_type=cargo_type,
            pickup_latitude=pickup_latitude,
            pickup_longitude=pickup_longitude,
            dropoff_latitude=dropoff_latitude,
            dropoff_longitude=dropoff_longitude,
            created_at=now_in_app_timezone(),
        )
    )

    driver_ids = UserRepository(session).list_ids_by_role(UserRole.DRIVER)
    sent = notify_load_posted(dispatcher, load=load, driver_ids=driver_ids)
    logger.info("Load %s posted by customer %s; %s drivers notified", load.id, customer.id, sent)
    return load


def list_available_loads(
    session: Session, *, skip: int = 0, limit: int | None = 100
) -> Sequence[Load]:
    repository = LoadRepository(session)
    return repository.list(statuses=[LoadStatus.AVAILABLE], skip=skip, limit=limit)


def _can_view(load: Load, user: User) -> bool:
    return load.is_owned_by(user.id) or load.is_assigned_to(user.id) or user.is_admin()


def get_load_for_user(session: Session, load_id: int, user: User) -> Load:
    """Return the load when ``user`` is its customer, its driver or an admin."""

    load = LoadRepository(session).get(load_id)
    if load is None:
        raise LookupError("Load not found")
    if not _can_view(load, user):
        raise PermissionError("You do not have access to this load")
    return load


def list_active_loads_for_driver(session: Session, driver_id: int) -> Sequence[Load]:
    repository = LoadRepository(session)
    return repository.list_by_acceptance(statuses=ACTIVE_LOAD_STATUSES, driver_id=driver_id)


def list_active_loads_for_customer(session: Session, customer_id: int) -> Sequence[Load]:
    repository = LoadRepository(session)
    return repository.list_by_acceptance(
        statuses=ACTIVE_LOAD_STATUSES, customer_id=customer_id
    )


def list_load_history_for_driver(session: Session, driver_id: int) -> Sequence[Load]:
    repository = LoadRepository(session)
    return repository.list_history(statuses=HISTORY_LOAD_STATUSES, driver_id=driver_id)


def list_load_history_for_customer(session: Session, customer_id: int) -> Sequence[Load]:
    repository = LoadRepository(session)
    return repository.list_history(statuses=HISTORY_LOAD_STATUSES, customer_id=customer_id)


def record_load_location(
    session: Session,
    tracker: LocationTracker,
    *,
    load_id: int,
    driver_id: int,
    latitude: float,
    longitude: float,
    notes: str | None = None,
) -> LocationUpdate:
    """Store a position report made by the load's assigned driver."""

    if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
        raise ValueError("Coordinates are out of range")
    load = LoadRepository(session).get(load_id)
    if load is None:
        raise LookupError("Load not found")
    if not load.is_assigned_to(driver_id):
        raise PermissionError("You are not assigned to this load")
    return tracker.record_sample(
        driver_id, latitude, longitude, load_id=load_id, notes=notes
    )


def get_load_location_history(
    session: Session, tracker: LocationTracker, *, load_id: int, user: User
) -> Sequence[LocationUpdate]:
    load = LoadRepository(session).get(load_id)
    if load is None:
        raise LookupError("Load not found")
    if not _can_view(load, user):
        raise PermissionError("You do not have access to this load")
    return tracker.load_history(load_id)


def update_delivery_sequence(
    session: Session, *, driver_id: int, sequences: Mapping[int, int]
) -> int:
    """Store the driver's preferred delivery order; every load must be theirs."""

    if not sequences:
        return 0
    repository = LoadRepository(session)
    loads = repository.list(ids=sequences.keys())
    if len(loads) != len(sequences):
        raise LookupError("Load not found")
    if any(not load.is_assigned_to(driver_id) for load in loads):
        raise PermissionError("You are not assigned to every load in the sequence")

    repository.set_delivery_sequence(sequences)
    logger.info(
        "Driver %s updated delivery sequence for %s loads", driver_id, len(sequences)
    )
    return len(sequences)


def list_driver_loads_by_sequence(session: Session, driver_id: int) -> Sequence[Load]:
    repository = LoadRepository(session)
    return repository.list_by_acceptance(
        statuses=SEQUENCED_LOAD_STATUSES, driver_id=driver_id, by_sequence=True
    )


__all__ = [
    "SEQUENCED_LOAD_STATUSES",
    "create_load",
    "get_load_for_user",
    "get_load_location_history",
    "list_active_loads_for_customer",
    "list_active_loads_for_driver",
    "list_available_loads",
    "list_driver_loads_by_sequence",
    "list_load_history_for_customer",
    "list_load_history_for_driver",
    "record_load_location",
    "update_delivery_sequence",
]
