"""Persistence helpers for delivery ratings."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from dispatch.domain.entities import Rating
from dispatch.infrastructure.models import RatingModel
from dispatch.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class RatingRepository:
    """Provide CRUD operations for :class:`Rating` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, rating_id: int) -> Rating | None:
        model = self.session.get(RatingModel, rating_id)
        return self._to_entity(model) if model else None

    def get_for_load(self, load_id: int, *, customer_id: int | None = None) -> Rating | None:
        query = self.session.query(RatingModel).filter(RatingModel.load_id == load_id)
        if customer_id is not None:
            query = query.filter(RatingModel.customer_id == customer_id)
        model = query.order_by(RatingModel.id.asc()).first()
        return self._to_entity(model) if model else None

    def list(
        self, *, driver_id: int | None = None, customer_id: int | None = None
    ) -> Sequence[Rating]:
        query = self.session.query(RatingModel)
        if driver_id is not None:
            query = query.filter(RatingModel.driver_id == driver_id)
        if customer_id is not None:
            query = query.filter(RatingModel.customer_id == customer_id)
        query = query.order_by(RatingModel.created_at.desc(), RatingModel.id.desc())
        return [self._to_entity(model) for model in query.all()]

    def create(self, rating: Rating) -> Rating:
        model = RatingModel()
        self._apply_entity_to_model(model, rating)
        model.created_at = ensure_app_naive_datetime(
            rating.created_at or now_in_app_timezone()
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, rating: Rating) -> Rating:
        model = self.session.get(RatingModel, rating.id)
        if model is None:
            msg = f"Rating with id {rating.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, rating)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def delete(self, rating_id: int) -> None:
        model = self.session.get(RatingModel, rating_id)
        if model is None:
            msg = f"Rating with id {rating_id} not found"
            raise ValueError(msg)
        self.session.delete(model)
        self.session.commit()

    @staticmethod
    def _apply_entity_to_model(model: RatingModel, rating: Rating) -> None:
        model.load_id = rating.load_id
        model.customer_id = rating.customer_id
        model.driver_id = rating.driver_id
        model.stars = rating.stars
        model.comment = rating.comment

    @staticmethod
    def _to_entity(model: RatingModel) -> Rating:
        return Rating(
            id=model.id,
            load_id=model.load_id,
            customer_id=model.customer_id,
            driver_id=model.driver_id,
            stars=model.stars,
            comment=model.comment,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["RatingRepository"]
