"""Domain entity representing a driver's claim on a load."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class BookingStatus(str, Enum):
    """Booking states, mirroring part of the load lifecycle."""

    REQUESTED = "Requested"
    ACCEPTED = "Accepted"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


@dataclass
class Booking:
    """A driver's response record against a load."""

    id: int | None
    load_id: int
    driver_id: int
    status: BookingStatus
    created_at: datetime | None = None
    responded_at: datetime | None = None


__all__ = ["Booking", "BookingStatus"]
