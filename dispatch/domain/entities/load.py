"""Domain entity representing a shipment posted by a customer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class LoadStatus(str, Enum):
    """Closed set of states a load moves through."""

    AVAILABLE = "Available"
    ACCEPTED = "Accepted"
    PICKED_UP = "PickedUp"
    IN_TRANSIT = "InTransit"
    DELIVERED = "Delivered"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


ACTIVE_LOAD_STATUSES = (
    LoadStatus.ACCEPTED,
    LoadStatus.PICKED_UP,
    LoadStatus.IN_TRANSIT,
    LoadStatus.DELIVERED,
)

HISTORY_LOAD_STATUSES = (LoadStatus.COMPLETED, LoadStatus.CANCELLED)


@dataclass
class Load:
    """Shipment request and its lifecycle bookkeeping."""

    id: int | None
    customer_id: int
    title: str
    status: LoadStatus
    pickup_location: str
    dropoff_location: str
    pickup_date: datetime | None
    weight_lbs: float = 0.0
    description: str | None = None
    cargo_type: str | None = None
    pickup_latitude: float | None = None
    pickup_longitude: float | None = None
    dropoff_latitude: float | None = None
    dropoff_longitude: float | None = None
    assigned_driver_id: int | None = None
    estimated_minutes: int | None = None
    delivery_sequence: int | None = None
    version: int = 0
    created_at: datetime | None = None
    accepted_at: datetime | None = None
    picked_up_at: datetime | None = None
    delivered_at: datetime | None = None
    completed_at: datetime | None = None

    def is_assigned_to(self, driver_id: int | None) -> bool:
        return driver_id is not None and self.assigned_driver_id == driver_id

    def is_owned_by(self, customer_id: int | None) -> bool:
        return customer_id is not None and self.customer_id == customer_id

    def has_dropoff_coordinates(self) -> bool:
        return self.dropoff_latitude is not None and self.dropoff_longitude is not None


__all__ = [
    "ACTIVE_LOAD_STATUSES",
    "HISTORY_LOAD_STATUSES",
    "Load",
    "LoadStatus",
]
