"""Driver location samples and ETA estimation."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from dispatch.config import Settings
from dispatch.domain.entities import (
    LOAD_EVENT_ETA,
    LOAD_EVENT_LOCATION,
    LoadEtaEvent,
    LoadLocationEvent,
    LocationUpdate,
)
from dispatch.domain.geo import distance_km, estimate_travel_minutes
from dispatch.infrastructure.notifications import EventPublisher, load_topic
from dispatch.infrastructure.repositories import (
    LoadRepository,
    LocationUpdateRepository,
)
from dispatch.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


class LocationTracker:
    """Record driver positions and derive arrival estimates from them."""

    def __init__(
        self, session: Session, publisher: EventPublisher, settings: Settings
    ) -> None:
        self._samples = LocationUpdateRepository(session)
        self._loads = LoadRepository(session)
        self._publisher = publisher
        self._settings = settings

    def record_sample(
        self,
        driver_id: int,
        latitude: float,
        longitude: float,
        load_id: int | None = None,
        notes: str | None = None,
    ) -> LocationUpdate:
        sample = self._samples.create(
            LocationUpdate(
                id=None,
                driver_id=driver_id,
                latitude=latitude,
                longitude=longitude,
                reported_at=now_in_app_timezone(),
                load_id=load_id,
                notes=notes,
            )
        )
        if load_id is not None:
            event = LoadLocationEvent(
                load_id=load_id,
                driver_id=driver_id,
                latitude=latitude,
                longitude=longitude,
                timestamp=sample.reported_at,
            )
            self._publish(load_topic(load_id), LOAD_EVENT_LOCATION, event)
        return sample

    def latest_sample(self, driver_id: int) -> LocationUpdate | None:
        return self._samples.get_latest_for_driver(driver_id)

    def driver_history(
        self, driver_id: int, since: datetime | None = None
    ) -> Sequence[LocationUpdate]:
        return self._samples.list_for_driver(driver_id, since=since)

    def load_history(self, load_id: int) -> Sequence[LocationUpdate]:
        return self._samples.list_for_load(load_id)

    def estimate_minutes(
        self,
        driver_id: int,
        destination_latitude: float,
        destination_longitude: float,
        speed_kmh: float | None = None,
    ) -> int:
        """Return minutes from the driver's last position to the destination.

        A driver who never reported a position yields ``0``.
        """

        sample = self.latest_sample(driver_id)
        if sample is None:
            logger.warning("No location data for driver %s", driver_id)
            return 0
        distance = distance_km(
            sample.latitude,
            sample.longitude,
            destination_latitude,
            destination_longitude,
        )
        if speed_kmh is None:
            speed_kmh = self._settings.average_speed_kmh
        return estimate_travel_minutes(distance, speed_kmh)

    def refresh_load_eta(self, load_id: int, driver_id: int) -> int:
        """Recompute the ETA to the load's dropoff and store it on the load."""

        load = self._loads.get(load_id)
        if load is None:
            raise LookupError("Load not found")
        if not load.is_assigned_to(driver_id):
            raise PermissionError("You are not assigned to this load")
        if not load.has_dropoff_coordinates():
            raise LookupError("Load has no dropoff coordinates")
        if self.latest_sample(driver_id) is None:
            raise LookupError("No location data for driver")

        minutes = self.estimate_minutes(
            driver_id, load.dropoff_latitude, load.dropoff_longitude
        )
        self._loads.update_where(
            load_id, {"estimated_minutes": minutes}, assigned_driver_id=driver_id
        )
        event = LoadEtaEvent(
            load_id=load_id,
            estimated_minutes=minutes,
            timestamp=now_in_app_timezone(),
        )
        self._publish(load_topic(load_id), LOAD_EVENT_ETA, event)
        logger.info("ETA for load %s refreshed to %s minutes", load_id, minutes)
        return minutes

    def purge_stale_samples(self, retention_days: int | None = None) -> int:
        days = retention_days
        if days is None:
            days = self._settings.location_retention_days
        if days <= 0:
            raise ValueError("Retention window must be at least one day")
        cutoff = now_in_app_timezone() - timedelta(days=days)
        deleted = self._samples.delete_older_than(cutoff)
        logger.info("Removed %s location samples older than %s days", deleted, days)
        return deleted

    def _publish(self, topic: str, event_type: str, payload: object) -> None:
        try:
            self._publisher.publish(topic, event_type, payload)
        except Exception:
            logger.warning("Could not publish %s to %s", event_type, topic, exc_info=True)


__all__ = ["LocationTracker"]
