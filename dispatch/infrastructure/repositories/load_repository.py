"""Persistence layer for shipment loads."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from dispatch.domain.entities import Load, LoadStatus
from dispatch.infrastructure.models import LoadModel
from dispatch.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)

_DATETIME_FIELDS = frozenset(
    {
        "pickup_date",
        "created_at",
        "accepted_at",
        "picked_up_at",
        "delivered_at",
        "completed_at",
    }
)


class LoadRepository:
    """Provide CRUD-style operations for :class:`Load` records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, load_id: int) -> Load | None:
        model = self.session.get(LoadModel, load_id, populate_existing=True)
        return self._to_entity(model) if model else None

    def list(
        self,
        *,
        statuses: Iterable[LoadStatus] | None = None,
        customer_id: int | None = None,
        driver_id: int | None = None,
        ids: Iterable[int] | None = None,
        skip: int = 0,
        limit: int | None = None,
    ) -> Sequence[Load]:
        query = self.session.query(LoadModel)
        if statuses is not None:
            query = query.filter(
                LoadModel.status.in_([LoadStatus(status).value for status in statuses])
            )
        if customer_id is not None:
            query = query.filter(LoadModel.customer_id == customer_id)
        if driver_id is not None:
            query = query.filter(LoadModel.assigned_driver_id == driver_id)
        if ids is not None:
            query = query.filter(LoadModel.id.in_(list(ids)))
        query = query.order_by(LoadModel.created_at.desc(), LoadModel.id.desc())
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def list_history(
        self,
        *,
        statuses: Iterable[LoadStatus],
        customer_id: int | None = None,
        driver_id: int | None = None,
    ) -> Sequence[Load]:
        """Return finished loads ordered by completion (or creation) time, newest first."""

        query = self.session.query(LoadModel).filter(
            LoadModel.status.in_([LoadStatus(status).value for status in statuses])
        )
        if customer_id is not None:
            query = query.filter(LoadModel.customer_id == customer_id)
        if driver_id is not None:
            query = query.filter(LoadModel.assigned_driver_id == driver_id)
        query = query.order_by(
            func.coalesce(LoadModel.completed_at, LoadModel.created_at).desc(),
            LoadModel.id.desc(),
        )
        return [self._to_entity(model) for model in query.all()]

    def list_by_acceptance(
        self,
        *,
        statuses: Iterable[LoadStatus],
        customer_id: int | None = None,
        driver_id: int | None = None,
        by_sequence: bool = False,
    ) -> Sequence[Load]:
        """Return in-flight loads, oldest acceptance first.

        With ``by_sequence`` the driver's own delivery ordering wins and loads
        without a sequence number go last.
        """

        query = self.session.query(LoadModel).filter(
            LoadModel.status.in_([LoadStatus(status).value for status in statuses])
        )
        if customer_id is not None:
            query = query.filter(LoadModel.customer_id == customer_id)
        if driver_id is not None:
            query = query.filter(LoadModel.assigned_driver_id == driver_id)
        ordering = [LoadModel.accepted_at.asc(), LoadModel.id.asc()]
        if by_sequence:
            ordering = [
                LoadModel.delivery_sequence.is_(None),
                LoadModel.delivery_sequence.asc(),
                *ordering,
            ]
        query = query.order_by(*ordering)
        return [self._to_entity(model) for model in query.all()]

    def create(self, load: Load) -> Load:
        model = LoadModel()
        self._apply_entity_to_model(model, load, include_creation_fields=True)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update_where(
        self,
        load_id: int,
        values: Mapping[str, Any],
        *,
        statuses: Iterable[LoadStatus] | None = None,
        version: int | None = None,
        assigned_driver_id: int | None = None,
    ) -> Load | None:
        """Apply ``values`` to the load only when every given predicate still holds.

        The update is a single ``UPDATE ... WHERE`` statement that also bumps
        ``version``. Returns the refreshed load, or ``None`` when no row
        matched (missing load, status moved on, or a concurrent write won).
        """

        statement = update(LoadModel).where(LoadModel.id == load_id)
        if statuses is not None:
            statement = statement.where(
                LoadModel.status.in_([LoadStatus(status).value for status in statuses])
            )
        if version is not None:
            statement = statement.where(LoadModel.version == version)
        if assigned_driver_id is not None:
            statement = statement.where(
                LoadModel.assigned_driver_id == assigned_driver_id
            )

        column_values = {
            key: self._to_column_value(key, value) for key, value in values.items()
        }
        column_values["version"] = LoadModel.version + 1
        statement = statement.values(**column_values).execution_options(
            synchronize_session=False
        )

        result = self.session.execute(statement)
        self.session.commit()
        if result.rowcount != 1:
            return None
        return self.get(load_id)

    def set_delivery_sequence(self, sequences: Mapping[int, int]) -> None:
        for load_id, sequence in sequences.items():
            self.session.execute(
                update(LoadModel)
                .where(LoadModel.id == load_id)
                .values(delivery_sequence=sequence)
                .execution_options(synchronize_session=False)
            )
        self.session.commit()

    @staticmethod
    def _to_column_value(key: str, value: Any) -> Any:
        if isinstance(value, LoadStatus):
            return value.value
        if key in _DATETIME_FIELDS:
            return ensure_app_naive_datetime(value)
        return value

    @staticmethod
    def _to_entity(model: LoadModel) -> Load:
        return Load(
            id=model.id,
            customer_id=model.customer_id,
            title=model.title,
            status=LoadStatus(model.status),
            pickup_location=model.pickup_location,
            dropoff_location=model.dropoff_location,
            pickup_date=ensure_app_timezone(model.pickup_date),
            weight_lbs=model.weight_lbs,
            description=model.description,
            cargo_type=model.cargo_type,
            pickup_latitude=model.pickup_latitude,
            pickup_longitude=model.pickup_longitude,
            dropoff_latitude=model.dropoff_latitude,
            dropoff_longitude=model.dropoff_longitude,
            assigned_driver_id=model.assigned_driver_id,
            estimated_minutes=model.estimated_minutes,
            delivery_sequence=model.delivery_sequence,
            version=model.version,
            created_at=ensure_app_timezone(model.created_at),
            accepted_at=ensure_app_timezone(model.accepted_at),
            picked_up_at=ensure_app_timezone(model.picked_up_at),
            delivered_at=ensure_app_timezone(model.delivered_at),
            completed_at=ensure_app_timezone(model.completed_at),
        )

    @staticmethod
    def _apply_entity_to_model(
        model: LoadModel,
        load: Load,
        *,
        include_creation_fields: bool,
    ) -> None:
        model.customer_id = load.customer_id
        model.title = load.title
        model.description = load.description
        model.cargo_type = load.cargo_type
        model.weight_lbs = load.weight_lbs
        model.status = LoadStatus(load.status).value
        model.pickup_location = load.pickup_location
        model.dropoff_location = load.dropoff_location
        model.pickup_latitude = load.pickup_latitude
        model.pickup_longitude = load.pickup_longitude
        model.dropoff_latitude = load.dropoff_latitude
        model.dropoff_longitude = load.dropoff_longitude
        model.pickup_date = ensure_app_naive_datetime(load.pickup_date)
        model.assigned_driver_id = load.assigned_driver_id
        model.estimated_minutes = load.estimated_minutes
        model.delivery_sequence = load.delivery_sequence
        if include_creation_fields:
            model.version = 0
            model.created_at = ensure_app_naive_datetime(
                load.created_at or now_in_app_timezone()
            )
        model.accepted_at = ensure_app_naive_datetime(load.accepted_at)
        model.picked_up_at = ensure_app_naive_datetime(load.picked_up_at)
        model.delivered_at = ensure_app_naive_datetime(load.delivered_at)
        model.completed_at = ensure_app_naive_datetime(load.completed_at)


__all__ = ["LoadRepository"]
