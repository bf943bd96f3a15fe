"""State machine driving a load from posting to completion."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, NamedTuple

from sqlalchemy.orm import Session

from dispatch.config import Settings
from dispatch.domain.entities import BookingStatus, Load, LoadStatus
from dispatch.infrastructure.repositories import (
    BookingRepository,
    LoadRepository,
    UserRepository,
)
from dispatch.utils import now_in_app_timezone

from .locations import LocationTracker
from .notifications import (
    NotificationDispatcher,
    notify_driver_arrived_at_dropoff,
    notify_driver_arrived_at_pickup,
    notify_eta_updated,
    notify_load_accepted,
    notify_load_cancelled,
    notify_load_completed,
    notify_load_delivered,
    notify_load_in_transit,
    notify_load_picked_up,
)

logger = logging.getLogger(__name__)

DEFAULT_CANCEL_REASON = "User requested cancellation"

LOAD_NOT_FOUND = "Load not found"
NOT_ASSIGNED = "You are not assigned to this load"
NOT_OWNER = "You are not the owner of this load"
CANNOT_CANCEL = "You do not have permission to cancel this load"
DRIVERS_ONLY = "Only drivers can accept loads"


class TransitionResult(NamedTuple):
    success: bool
    message: str


class _Transition(NamedTuple):
    allowed: frozenset[LoadStatus]
    rejection: str


_TRANSITIONS: Mapping[str, _Transition] = {
    "accept": _Transition(
        frozenset({LoadStatus.AVAILABLE}),
        "Load is not available (current status: {status})",
    ),
    "arrive_pickup": _Transition(
        frozenset({LoadStatus.ACCEPTED}),
        "Load must be accepted to notify arrival (current status: {status})",
    ),
    "pick_up": _Transition(
        frozenset({LoadStatus.ACCEPTED}),
        "Load must be accepted before pickup (current status: {status})",
    ),
    "start_transit": _Transition(
        frozenset({LoadStatus.PICKED_UP}),
        "Load must be picked up before transit (current status: {status})",
    ),
    "arrive_dropoff": _Transition(
        frozenset({LoadStatus.PICKED_UP, LoadStatus.IN_TRANSIT}),
        "Invalid load status for arrival notification (current status: {status})",
    ),
    "deliver": _Transition(
        frozenset({LoadStatus.PICKED_UP, LoadStatus.IN_TRANSIT}),
        "Load must be in transit before delivery (current status: {status})",
    ),
    "complete": _Transition(
        frozenset({LoadStatus.DELIVERED}),
        "Load must be delivered before completion (current status: {status})",
    ),
    "cancel": _Transition(
        frozenset(set(LoadStatus) - {LoadStatus.COMPLETED}),
        "Cannot cancel a completed load",
    ),
}


def _rejected(message: str) -> TransitionResult:
    return TransitionResult(False, message)


def _state_rejection(operation: str, status: LoadStatus) -> TransitionResult:
    return _rejected(_TRANSITIONS[operation].rejection.format(status=status.value))


class LoadLifecycle:
    """Apply lifecycle transitions to loads and emit their side effects.

    Every operation returns a :class:`TransitionResult`. Business-rule
    rejections (missing load, wrong actor, wrong state) come back as
    ``success=False`` with a user-facing message; they are never raised.

    Writes go through :meth:`LoadRepository.update_where` guarded by the
    allowed statuses and the version read beforehand, so two concurrent
    callers cannot both move the same load. The loser gets the ordinary
    state rejection for whatever status the load ended up in.
    """

    def __init__(
        self,
        session: Session,
        notifications: NotificationDispatcher,
        locations: LocationTracker,
        settings: Settings,
    ) -> None:
        self._loads = LoadRepository(session)
        self._users = UserRepository(session)
        self._bookings = BookingRepository(session)
        self._notifications = notifications
        self._locations = locations
        self._settings = settings

    def accept(
        self, load_id: int, driver_id: int, estimated_minutes: int | None = None
    ) -> TransitionResult:
        load = self._loads.get(load_id)
        if load is None:
            return _rejected(LOAD_NOT_FOUND)
        driver = self._users.get(driver_id)
        if driver is None or not driver.is_driver():
            return _rejected(DRIVERS_ONLY)
        if estimated_minutes is None:
            estimated_minutes = self._settings.default_eta_minutes

        updated = self._apply(
            "accept",
            load,
            {
                "status": LoadStatus.ACCEPTED,
                "assigned_driver_id": driver_id,
                "accepted_at": now_in_app_timezone(),
                "estimated_minutes": estimated_minutes,
            },
        )
        if isinstance(updated, TransitionResult):
            return updated

        self._bookings.upsert_status(
            load_id=load_id, driver_id=driver_id, status=BookingStatus.ACCEPTED
        )
        notify_load_accepted(
            self._notifications,
            load=updated,
            driver_name=driver.name,
            estimated_minutes=estimated_minutes,
        )
        logger.info("Load %s accepted by driver %s", load_id, driver_id)
        return TransitionResult(True, "Load accepted successfully")

    def notify_arrival_at_pickup(self, load_id: int, driver_id: int) -> TransitionResult:
        return self._notify_arrival(
            "arrive_pickup", load_id, driver_id, notify_driver_arrived_at_pickup
        )

    def pick_up(self, load_id: int, driver_id: int) -> TransitionResult:
        load, rejection = self._load_for_driver(load_id, driver_id)
        if rejection is not None:
            return rejection

        updated = self._apply(
            "pick_up",
            load,
            {"status": LoadStatus.PICKED_UP, "picked_up_at": now_in_app_timezone()},
        )
        if isinstance(updated, TransitionResult):
            return updated

        notify_load_picked_up(
            self._notifications, load=updated, driver_name=self._user_name(driver_id)
        )
        logger.info("Load %s picked up by driver %s", load_id, driver_id)
        return TransitionResult(True, "Load marked as picked up")

    def start_transit(self, load_id: int, driver_id: int) -> TransitionResult:
        load, rejection = self._load_for_driver(load_id, driver_id)
        if rejection is not None:
            return rejection

        updated = self._apply("start_transit", load, {"status": LoadStatus.IN_TRANSIT})
        if isinstance(updated, TransitionResult):
            return updated

        estimated_minutes = self._refresh_eta(updated, driver_id)
        notify_load_in_transit(
            self._notifications,
            load=updated,
            driver_name=self._user_name(driver_id),
            estimated_minutes=estimated_minutes,
        )
        logger.info("Load %s in transit with driver %s", load_id, driver_id)
        return TransitionResult(True, "Load in transit")

    def notify_arrival_at_dropoff(self, load_id: int, driver_id: int) -> TransitionResult:
        return self._notify_arrival(
            "arrive_dropoff", load_id, driver_id, notify_driver_arrived_at_dropoff
        )

    def deliver(self, load_id: int, driver_id: int) -> TransitionResult:
        load, rejection = self._load_for_driver(load_id, driver_id)
        if rejection is not None:
            return rejection

        updated = self._apply(
            "deliver",
            load,
            {"status": LoadStatus.DELIVERED, "delivered_at": now_in_app_timezone()},
        )
        if isinstance(updated, TransitionResult):
            return updated

        notify_load_delivered(
            self._notifications, load=updated, driver_name=self._user_name(driver_id)
        )
        logger.info("Load %s delivered by driver %s", load_id, driver_id)
        return TransitionResult(True, "Load marked as delivered")

    def complete(self, load_id: int, customer_id: int) -> TransitionResult:
        load = self._loads.get(load_id)
        if load is None:
            return _rejected(LOAD_NOT_FOUND)
        if not load.is_owned_by(customer_id):
            return _rejected(NOT_OWNER)

        updated = self._apply(
            "complete",
            load,
            {"status": LoadStatus.COMPLETED, "completed_at": now_in_app_timezone()},
        )
        if isinstance(updated, TransitionResult):
            return updated

        if updated.assigned_driver_id is not None:
            self._bookings.upsert_status(
                load_id=load_id,
                driver_id=updated.assigned_driver_id,
                status=BookingStatus.COMPLETED,
            )
        notify_load_completed(
            self._notifications,
            load=updated,
            customer_name=self._user_name(customer_id, fallback="Customer"),
        )
        logger.info("Load %s completed by customer %s", load_id, customer_id)
        return TransitionResult(True, "Load marked as completed")

    def cancel(
        self, load_id: int, user_id: int, reason: str = DEFAULT_CANCEL_REASON
    ) -> TransitionResult:
        load = self._loads.get(load_id)
        if load is None:
            return _rejected(LOAD_NOT_FOUND)
        if not (load.is_owned_by(user_id) or load.is_assigned_to(user_id)):
            return _rejected(CANNOT_CANCEL)

        updated = self._apply("cancel", load, {"status": LoadStatus.CANCELLED})
        if isinstance(updated, TransitionResult):
            return updated

        if updated.assigned_driver_id is not None:
            self._bookings.upsert_status(
                load_id=load_id,
                driver_id=updated.assigned_driver_id,
                status=BookingStatus.CANCELLED,
            )
        notify_load_cancelled(
            self._notifications,
            load=updated,
            cancelled_by=user_id,
            reason=reason or DEFAULT_CANCEL_REASON,
        )
        logger.info("Load %s cancelled by user %s: %s", load_id, user_id, reason)
        return TransitionResult(True, "Load cancelled")

    def update_eta(
        self, load_id: int, driver_id: int, estimated_minutes: int
    ) -> TransitionResult:
        load, rejection = self._load_for_driver(load_id, driver_id)
        if rejection is not None:
            return rejection
        if estimated_minutes < 0:
            return _rejected("Estimated minutes cannot be negative")

        updated = self._loads.update_where(
            load_id,
            {"estimated_minutes": estimated_minutes},
            assigned_driver_id=driver_id,
        )
        if updated is None:
            return _rejected(NOT_ASSIGNED)

        notify_eta_updated(
            self._notifications, load=updated, estimated_minutes=estimated_minutes
        )
        logger.info("ETA for load %s set to %s minutes", load_id, estimated_minutes)
        return TransitionResult(True, f"ETA updated to {estimated_minutes} minutes")

    def _load_for_driver(
        self, load_id: int, driver_id: int
    ) -> tuple[Load | None, TransitionResult | None]:
        load = self._loads.get(load_id)
        if load is None:
            return None, _rejected(LOAD_NOT_FOUND)
        if not load.is_assigned_to(driver_id):
            return load, _rejected(NOT_ASSIGNED)
        return load, None

    def _apply(
        self, operation: str, load: Load, values: Mapping[str, Any]
    ) -> Load | TransitionResult:
        """Run the guarded update for ``operation`` or explain why it cannot run."""

        allowed = _TRANSITIONS[operation].allowed
        if load.status not in allowed:
            return _state_rejection(operation, load.status)

        updated = self._loads.update_where(
            load.id, values, statuses=allowed, version=load.version
        )
        if updated is not None:
            return updated

        current = self._loads.get(load.id)
        if current is None:
            return _rejected(LOAD_NOT_FOUND)
        logger.info(
            "Load %s changed concurrently during %s (now %s)",
            load.id,
            operation,
            current.status.value,
        )
        return _state_rejection(operation, current.status)

    def _notify_arrival(
        self,
        operation: str,
        load_id: int,
        driver_id: int,
        notify: Callable[..., None],
    ) -> TransitionResult:
        load, rejection = self._load_for_driver(load_id, driver_id)
        if rejection is not None:
            return rejection
        if load.status not in _TRANSITIONS[operation].allowed:
            return _state_rejection(operation, load.status)

        notify(self._notifications, load=load, driver_name=self._user_name(driver_id))
        logger.info("Driver %s reported arrival for load %s", driver_id, load_id)
        return TransitionResult(True, "Customer notified of your arrival")

    def _refresh_eta(self, load: Load, driver_id: int) -> int:
        fallback = load.estimated_minutes
        if fallback is None:
            fallback = self._settings.default_eta_minutes
        try:
            return self._locations.refresh_load_eta(load.id, driver_id)
        except Exception:
            logger.warning(
                "Could not refresh ETA for load %s; keeping %s minutes",
                load.id,
                fallback,
                exc_info=True,
            )
            return fallback

    def _user_name(self, user_id: int, *, fallback: str = "Driver") -> str:
        user = self._users.get(user_id)
        return user.name if user is not None else fallback


__all__ = ["DEFAULT_CANCEL_REASON", "LoadLifecycle", "TransitionResult"]
