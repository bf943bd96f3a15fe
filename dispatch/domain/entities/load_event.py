"""Domain events broadcast to subscribers of a load topic."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

LOAD_EVENT_STATUS = "load.status"
LOAD_EVENT_ETA = "load.eta"
LOAD_EVENT_LOCATION = "load.location"

# Pseudo-statuses broadcast for arrival notices; the load itself does not change.
ARRIVAL_AT_PICKUP = "DriverArrived"
ARRIVAL_AT_DROPOFF = "DriverArrivedAtDropoff"


@dataclass
class LoadStatusEvent:
    """A load changed status or a driver announced an arrival."""

    load_id: int
    status: str
    message: str
    timestamp: datetime
    estimated_minutes: int | None = None


@dataclass
class LoadEtaEvent:
    """The estimated arrival for a load was recomputed or set by the driver."""

    load_id: int
    estimated_minutes: int
    timestamp: datetime


@dataclass
class LoadLocationEvent:
    """A driver reported a new position while carrying a load."""

    load_id: int
    driver_id: int
    latitude: float
    longitude: float
    timestamp: datetime


__all__ = [
    "ARRIVAL_AT_DROPOFF",
    "ARRIVAL_AT_PICKUP",
    "LOAD_EVENT_ETA",
    "LOAD_EVENT_LOCATION",
    "LOAD_EVENT_STATUS",
    "LoadEtaEvent",
    "LoadLocationEvent",
    "LoadStatusEvent",
]
