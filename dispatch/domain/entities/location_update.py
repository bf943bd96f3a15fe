"""Domain entity representing a driver GPS sample."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class LocationUpdate:
    """Immutable position reported by a driver's device."""

    id: int | None
    driver_id: int
    latitude: float
    longitude: float
    reported_at: datetime | None
    load_id: int | None = None
    notes: str | None = None


__all__ = ["LocationUpdate"]
