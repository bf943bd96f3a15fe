"""Use cases for rating drivers after a delivery."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.orm import Session

from dispatch.config import Settings
from dispatch.domain.entities import (
    MAX_RATING_STARS,
    MIN_RATING_STARS,
    LoadStatus,
    Rating,
    User,
)
from dispatch.infrastructure.repositories import LoadRepository, RatingRepository
from dispatch.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

RATEABLE_LOAD_STATUSES = frozenset({LoadStatus.DELIVERED, LoadStatus.COMPLETED})


@dataclass(frozen=True)
class DriverRatingSummary:
    ratings: Sequence[Rating]
    average: float
    total: int


def _validate_stars(stars: int) -> None:
    if not MIN_RATING_STARS <= stars <= MAX_RATING_STARS:
        msg = f"Stars must be between {MIN_RATING_STARS} and {MAX_RATING_STARS}"
        raise ValueError(msg)


def _ensure_editable(
    rating: Rating, customer: User, action: str, settings: Settings
) -> None:
    if rating.customer_id != customer.id:
        raise PermissionError("You can only change your own ratings")
    hours = settings.rating_edit_window_hours
    if (
        rating.created_at is not None
        and now_in_app_timezone() - rating.created_at > timedelta(hours=hours)
    ):
        raise ValueError(f"Can only {action} ratings within {hours} hours of creation")


def create_rating(
    session: Session,
    customer: User,
    *,
    load_id: int,
    stars: int,
    comment: str | None = None,
) -> Rating:
    """Rate the driver of a delivered load; one rating per customer and load."""

    _validate_stars(stars)
    load = LoadRepository(session).get(load_id)
    if load is None:
        raise LookupError("Load not found")
    if not load.is_owned_by(customer.id):
        raise PermissionError("You are not the owner of this load")
    if load.status not in RATEABLE_LOAD_STATUSES:
        raise ValueError("Can only rate after delivery")
    if load.assigned_driver_id is None:
        raise ValueError("No driver assigned to this load")

    repository = RatingRepository(session)
    if repository.get_for_load(load_id, customer_id=customer.id) is not None:
        raise ValueError("You have already rated this delivery")

    rating = repository.create(
        Rating(
            id=None,
            load_id=load_id,
            customer_id=customer.id,
            driver_id=load.assigned_driver_id,
            stars=stars,
            comment=comment,
            created_at=now_in_app_timezone(),
        )
    )
    logger.info(
        "Customer %s rated driver %s with %s stars for load %s",
        customer.id,
        rating.driver_id,
        stars,
        load_id,
    )
    return rating


def get_rating(session: Session, rating_id: int) -> Rating:
    rating = RatingRepository(session).get(rating_id)
    if rating is None:
        raise LookupError("Rating not found")
    return rating


def list_driver_ratings(session: Session, driver_id: int) -> DriverRatingSummary:
    ratings = RatingRepository(session).list(driver_id=driver_id)
    total = len(ratings)
    average = sum(rating.stars for rating in ratings) / total if total else 0.0
    return DriverRatingSummary(ratings=ratings, average=round(average, 2), total=total)


def list_customer_ratings(session: Session, customer_id: int) -> Sequence[Rating]:
    return RatingRepository(session).list(customer_id=customer_id)


def get_load_rating(session: Session, load_id: int) -> Rating:
    rating = RatingRepository(session).get_for_load(load_id)
    if rating is None:
        raise LookupError("No rating found for this load")
    return rating


def update_rating(
    session: Session,
    customer: User,
    rating_id: int,
    *,
    stars: int,
    comment: str | None = None,
    settings: Settings,
) -> Rating:
    _validate_stars(stars)
    repository = RatingRepository(session)
    rating = repository.get(rating_id)
    if rating is None:
        raise LookupError("Rating not found")
    _ensure_editable(rating, customer, "update", settings)

    rating.stars = stars
    rating.comment = comment
    return repository.update(rating)


def delete_rating(
    session: Session, customer: User, rating_id: int, *, settings: Settings
) -> None:
    repository = RatingRepository(session)
    rating = repository.get(rating_id)
    if rating is None:
        raise LookupError("Rating not found")
    _ensure_editable(rating, customer, "delete", settings)
    repository.delete(rating_id)
    logger.info("Customer %s deleted rating %s", customer.id, rating_id)


__all__ = [
    "DriverRatingSummary",
    "RATEABLE_LOAD_STATUSES",
    "create_rating",
    "delete_rating",
    "get_load_rating",
    "get_rating",
    "list_customer_ratings",
    "list_driver_ratings",
    "update_rating",
]
