"""Persistence helpers for driver bookings."""

from __future__ import annotations

from sqlalchemy.orm import Session

from dispatch.domain.entities import Booking, BookingStatus
from dispatch.infrastructure.models import BookingModel
from dispatch.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class BookingRepository:
    """Provide CRUD operations for :class:`Booking` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_for_load_and_driver(self, *, load_id: int, driver_id: int) -> Booking | None:
        model = self._latest_model(load_id, driver_id)
        return self._to_entity(model) if model else None

    def upsert_status(
        self, *, load_id: int, driver_id: int, status: BookingStatus
    ) -> Booking:
        """Set ``status`` on the driver's booking for the load, creating it if needed."""

        model = self._latest_model(load_id, driver_id)
        now = ensure_app_naive_datetime(now_in_app_timezone())
        if model is None:
            model = BookingModel(
                load_id=load_id,
                driver_id=driver_id,
                created_at=now,
            )
        model.status = BookingStatus(status).value
        model.responded_at = now
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def _latest_model(self, load_id: int, driver_id: int) -> BookingModel | None:
        return (
            self.session.query(BookingModel)
            .filter(BookingModel.load_id == load_id, BookingModel.driver_id == driver_id)
            .order_by(BookingModel.id.desc())
            .first()
        )

    @staticmethod
    def _to_entity(model: BookingModel) -> Booking:
        return Booking(
            id=model.id,
            load_id=model.load_id,
            driver_id=model.driver_id,
            status=BookingStatus(model.status),
            created_at=ensure_app_timezone(model.created_at),
            responded_at=ensure_app_timezone(model.responded_at),
        )


__all__ = ["BookingRepository"]
