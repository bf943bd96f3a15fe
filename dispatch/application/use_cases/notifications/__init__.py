"""Public helpers for emitting domain notifications."""

from .dispatcher import NOTIFICATION_EVENT_TYPE, NotificationDispatcher
from .events import (
    broadcast_eta,
    load_action_url,
    notify_driver_arrived_at_dropoff,
    notify_driver_arrived_at_pickup,
    notify_eta_updated,
    notify_load_accepted,
    notify_load_cancelled,
    notify_load_completed,
    notify_load_delivered,
    notify_load_in_transit,
    notify_load_picked_up,
    notify_load_posted,
)

__all__ = [
    "NOTIFICATION_EVENT_TYPE",
    "NotificationDispatcher",
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
