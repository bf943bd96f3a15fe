"""Persistence helpers for driver location samples."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import delete
from sqlalchemy.orm import Session

from dispatch.domain.entities import LocationUpdate
from dispatch.infrastructure.models import LocationUpdateModel
from dispatch.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class LocationUpdateRepository:
    """Append and query :class:`LocationUpdate` samples."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, sample: LocationUpdate) -> LocationUpdate:
        model = LocationUpdateModel(
            driver_id=sample.driver_id,
            load_id=sample.load_id,
            latitude=sample.latitude,
            longitude=sample.longitude,
            reported_at=ensure_app_naive_datetime(
                sample.reported_at or now_in_app_timezone()
            ),
            notes=sample.notes,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def get_latest_for_driver(self, driver_id: int) -> LocationUpdate | None:
        model = (
            self.session.query(LocationUpdateModel)
            .filter(LocationUpdateModel.driver_id == driver_id)
            .order_by(
                LocationUpdateModel.reported_at.desc(), LocationUpdateModel.id.desc()
            )
            .first()
        )
        return self._to_entity(model) if model else None

    def list_for_driver(
        self, driver_id: int, *, since: datetime | None = None
    ) -> Sequence[LocationUpdate]:
        query = self.session.query(LocationUpdateModel).filter(
            LocationUpdateModel.driver_id == driver_id
        )
        if since is not None:
            query = query.filter(
                LocationUpdateModel.reported_at >= ensure_app_naive_datetime(since)
            )
        query = query.order_by(
            LocationUpdateModel.reported_at.asc(), LocationUpdateModel.id.asc()
        )
        return [self._to_entity(model) for model in query.all()]

    def list_for_load(self, load_id: int) -> Sequence[LocationUpdate]:
        query = (
            self.session.query(LocationUpdateModel)
            .filter(LocationUpdateModel.load_id == load_id)
            .order_by(
                LocationUpdateModel.reported_at.asc(), LocationUpdateModel.id.asc()
            )
        )
        return [self._to_entity(model) for model in query.all()]

    def delete_older_than(self, cutoff: datetime) -> int:
        result = self.session.execute(
            delete(LocationUpdateModel)
            .where(LocationUpdateModel.reported_at < ensure_app_naive_datetime(cutoff))
            .execution_options(synchronize_session=False)
        )
        self.session.commit()
        return int(result.rowcount or 0)

    @staticmethod
    def _to_entity(model: LocationUpdateModel) -> LocationUpdate:
        return LocationUpdate(
            id=model.id,
            driver_id=model.driver_id,
            latitude=model.latitude,
            longitude=model.longitude,
            reported_at=ensure_app_timezone(model.reported_at),
            load_id=model.load_id,
            notes=model.notes,
        )


__all__ = ["LocationUpdateRepository"]
