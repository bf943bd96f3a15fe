"""Utility helpers to generate and dispatch load lifecycle notifications."""

from __future__ import annotations

from collections.abc import Iterable

from dispatch.domain.entities import (
    ARRIVAL_AT_DROPOFF,
    ARRIVAL_AT_PICKUP,
    LOAD_EVENT_ETA,
    LOAD_EVENT_STATUS,
    NOTIFICATION_CATEGORY_INFO,
    NOTIFICATION_CATEGORY_LOAD_POSTED,
    NOTIFICATION_CATEGORY_SUCCESS,
    NOTIFICATION_CATEGORY_WARNING,
    Load,
    LoadEtaEvent,
    LoadStatus,
    LoadStatusEvent,
)
from dispatch.infrastructure.notifications import load_topic
from dispatch.utils import now_in_app_timezone

from .dispatcher import NotificationDispatcher


def load_action_url(load_id: int | None) -> str:
    return f"/loads/{load_id}"


def _broadcast_status(
    dispatcher: NotificationDispatcher,
    *,
    load: Load,
    status: str,
    message: str,
    estimated_minutes: int | None = None,
) -> None:
    event = LoadStatusEvent(
        load_id=load.id,
        status=status,
        message=message,
        timestamp=now_in_app_timezone(),
        estimated_minutes=estimated_minutes,
    )
    dispatcher.broadcast(load_topic(load.id), LOAD_EVENT_STATUS, event)


def _notify_about_load(
    dispatcher: NotificationDispatcher,
    *,
    user_id: int,
    load: Load,
    title: str,
    message: str,
    category: str,
) -> None:
    dispatcher.notify(
        user_id,
        title,
        message,
        category,
        load_action_url(load.id),
        load_id=load.id,
    )


def notify_load_posted(
    dispatcher: NotificationDispatcher, *, load: Load, driver_ids: Iterable[int]
) -> int:
    """Tell every listed driver that a new load is on the board."""

    message = (
        f"A new load '{load.title}' is available from {load.pickup_location} "
        f"to {load.dropoff_location}"
    )
    sent = 0
    for driver_id in driver_ids:
        _notify_about_load(
            dispatcher,
            user_id=driver_id,
            load=load,
            title="New Load Available",
            message=message,
            category=NOTIFICATION_CATEGORY_LOAD_POSTED,
        )
        sent += 1
    return sent


def notify_load_accepted(
    dispatcher: NotificationDispatcher,
    *,
    load: Load,
    driver_name: str,
    estimated_minutes: int,
) -> None:
    _notify_about_load(
        dispatcher,
        user_id=load.customer_id,
        load=load,
        title="Load Accepted",
        message=(
            f"{driver_name} has accepted your load. "
            f"Estimated arrival: {estimated_minutes} minutes."
        ),
        category=NOTIFICATION_CATEGORY_SUCCESS,
    )
    _broadcast_status(
        dispatcher,
        load=load,
        status=LoadStatus.ACCEPTED.value,
        message=f"Driver {driver_name} accepted the load",
        estimated_minutes=estimated_minutes,
    )


def notify_driver_arrived_at_pickup(
    dispatcher: NotificationDispatcher, *, load: Load, driver_name: str
) -> None:
    _notify_about_load(
        dispatcher,
        user_id=load.customer_id,
        load=load,
        title="Driver Arrived",
        message=f"{driver_name} has arrived at the pickup location.",
        category=NOTIFICATION_CATEGORY_INFO,
    )
    _broadcast_status(
        dispatcher,
        load=load,
        status=ARRIVAL_AT_PICKUP,
        message=f"Driver {driver_name} arrived at pickup location",
    )


def notify_load_picked_up(
    dispatcher: NotificationDispatcher, *, load: Load, driver_name: str
) -> None:
    _notify_about_load(
        dispatcher,
        user_id=load.customer_id,
        load=load,
        title="Load Picked Up",
        message=f"{driver_name} has picked up your load.",
        category=NOTIFICATION_CATEGORY_INFO,
    )
    _broadcast_status(
        dispatcher,
        load=load,
        status=LoadStatus.PICKED_UP.value,
        message=f"Driver {driver_name} picked up the load",
    )


def notify_load_in_transit(
    dispatcher: NotificationDispatcher,
    *,
    load: Load,
    driver_name: str,
    estimated_minutes: int,
) -> None:
    _notify_about_load(
        dispatcher,
        user_id=load.customer_id,
        load=load,
        title="Load In Transit",
        message=(
            f"{driver_name} is on the way with your load. "
            f"ETA: {estimated_minutes} minutes."
        ),
        category=NOTIFICATION_CATEGORY_INFO,
    )
    _broadcast_status(
        dispatcher,
        load=load,
        status=LoadStatus.IN_TRANSIT.value,
        message="Load is in transit",
        estimated_minutes=estimated_minutes,
    )


def notify_driver_arrived_at_dropoff(
    dispatcher: NotificationDispatcher, *, load: Load, driver_name: str
) -> None:
    _notify_about_load(
        dispatcher,
        user_id=load.customer_id,
        load=load,
        title="Driver Arrived at Destination",
        message=f"{driver_name} has arrived at the delivery location.",
        category=NOTIFICATION_CATEGORY_INFO,
    )
    _broadcast_status(
        dispatcher,
        load=load,
        status=ARRIVAL_AT_DROPOFF,
        message=f"Driver {driver_name} arrived at delivery location",
    )


def notify_load_delivered(
    dispatcher: NotificationDispatcher, *, load: Load, driver_name: str
) -> None:
    _notify_about_load(
        dispatcher,
        user_id=load.customer_id,
        load=load,
        title="Load Delivered",
        message=f"{driver_name} has delivered your load. Please confirm completion.",
        category=NOTIFICATION_CATEGORY_SUCCESS,
    )
    _broadcast_status(
        dispatcher,
        load=load,
        status=LoadStatus.DELIVERED.value,
        message="Load has been delivered",
    )


def notify_load_completed(
    dispatcher: NotificationDispatcher, *, load: Load, customer_name: str
) -> None:
    if load.assigned_driver_id:
        _notify_about_load(
            dispatcher,
            user_id=load.assigned_driver_id,
            load=load,
            title="Load Completed",
            message=f"{customer_name} has confirmed delivery. Payment will be processed.",
            category=NOTIFICATION_CATEGORY_SUCCESS,
        )
    _broadcast_status(
        dispatcher,
        load=load,
        status=LoadStatus.COMPLETED.value,
        message="Load has been completed",
    )


def notify_load_cancelled(
    dispatcher: NotificationDispatcher,
    *,
    load: Load,
    cancelled_by: int,
    reason: str,
) -> None:
    """Warn the party that did not cancel; nobody is told before acceptance."""

    if load.assigned_driver_id and cancelled_by == load.assigned_driver_id:
        _notify_about_load(
            dispatcher,
            user_id=load.customer_id,
            load=load,
            title="Load Cancelled",
            message=f"Driver cancelled the load. Reason: {reason}",
            category=NOTIFICATION_CATEGORY_WARNING,
        )
    elif load.assigned_driver_id:
        _notify_about_load(
            dispatcher,
            user_id=load.assigned_driver_id,
            load=load,
            title="Load Cancelled",
            message=f"Customer cancelled the load. Reason: {reason}",
            category=NOTIFICATION_CATEGORY_WARNING,
        )
    _broadcast_status(
        dispatcher,
        load=load,
        status=LoadStatus.CANCELLED.value,
        message=f"Load cancelled: {reason}",
    )


def broadcast_eta(
    dispatcher: NotificationDispatcher, *, load_id: int, estimated_minutes: int
) -> None:
    event = LoadEtaEvent(
        load_id=load_id,
        estimated_minutes=estimated_minutes,
        timestamp=now_in_app_timezone(),
    )
    dispatcher.broadcast(load_topic(load_id), LOAD_EVENT_ETA, event)


def notify_eta_updated(
    dispatcher: NotificationDispatcher, *, load: Load, estimated_minutes: int
) -> None:
    _notify_about_load(
        dispatcher,
        user_id=load.customer_id,
        load=load,
        title="ETA Updated",
        message=f"Estimated arrival time updated: {estimated_minutes} minutes.",
        category=NOTIFICATION_CATEGORY_INFO,
    )
    broadcast_eta(dispatcher, load_id=load.id, estimated_minutes=estimated_minutes)


__all__ = [
    "broadcast_eta",
    "load_action_url",
    "notify_driver_arrived_at_dropoff",
    "notify_driver_arrived_at_pickup",
    "notify_eta_updated",
    "notify_load_accepted",
    "notify_load_cancelled",
    "notify_load_completed",
    "notify_load_delivered",
    "notify_load_in_transit",
    "notify_load_picked_up",
    "notify_load_posted",
]
