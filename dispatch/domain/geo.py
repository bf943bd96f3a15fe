"""Great-circle distance and travel time estimates."""

from __future__ import annotations

import math

EARTH_RADIUS_KM = 6371.0
DEFAULT_SPEED_KMH = 60.0


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return the Haversine distance in kilometers between two coordinates."""

    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def estimate_travel_minutes(
    distance: float, speed_kmh: float = DEFAULT_SPEED_KMH
) -> int:
    """Return whole minutes needed to cover ``distance`` km, rounded up."""

    if speed_kmh <= 0:
        raise ValueError("Average speed must be greater than zero")
    # Multiply before dividing so whole-kilometre inputs stay exact.
    return math.ceil(distance * 60 / speed_kmh)


__all__ = [
    "DEFAULT_SPEED_KMH",
    "EARTH_RADIUS_KM",
    "distance_km",
    "estimate_travel_minutes",
]
