"""Endpoints for rating drivers."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from dispatch.application.use_cases.ratings import (
    create_rating as create_rating_uc,
    delete_rating as delete_rating_uc,
    get_load_rating as get_load_rating_uc,
    get_rating as get_rating_uc,
    list_customer_ratings as list_customer_ratings_uc,
    list_driver_ratings as list_driver_ratings_uc,
    update_rating as update_rating_uc,
)
from dispatch.config import Settings, get_settings
from dispatch.domain.entities import User
from dispatch.infrastructure.database import get_db
from dispatch.interfaces.api.dependencies import get_current_active_user, require_customer
from dispatch.interfaces.api.routes_helpers import http_error_from
from dispatch.interfaces.api.schemas import (
    DriverRatingsRead,
    RatingCreate,
    RatingRead,
    RatingUpdate,
)

router = APIRouter(prefix="/ratings", tags=["ratings"])


@router.post("", response_model=RatingRead, status_code=status.HTTP_201_CREATED)
def create_rating(
    payload: RatingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_customer),
) -> RatingRead:
    try:
        rating = create_rating_uc(
            db,
            current_user,
            load_id=payload.load_id,
            stars=payload.stars,
            comment=payload.comment,
        )
    except (LookupError, PermissionError, ValueError) as exc:
        raise http_error_from(exc) from exc
    return RatingRead.model_validate(rating)


@router.get("/driver/{driver_id}", response_model=DriverRatingsRead)
def list_driver_ratings(
    driver_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_active_user),
) -> DriverRatingsRead:
    summary = list_driver_ratings_uc(db, driver_id)
    return DriverRatingsRead(
        ratings=[RatingRead.model_validate(rating) for rating in summary.ratings],
        average_rating=summary.average,
        total_ratings=summary.total,
    )


@router.get("/customer/{customer_id}", response_model=list[RatingRead])
def list_customer_ratings(
    customer_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_active_user),
) -> list[RatingRead]:
    return [
        RatingRead.model_validate(rating)
        for rating in list_customer_ratings_uc(db, customer_id)
    ]


@router.get("/load/{load_id}", response_model=RatingRead)
def get_load_rating(
    load_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_active_user),
) -> RatingRead:
    try:
        rating = get_load_rating_uc(db, load_id)
    except LookupError as exc:
        raise http_error_from(exc) from exc
    return RatingRead.model_validate(rating)


@router.get("/{rating_id}", response_model=RatingRead)
def get_rating(
    rating_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_active_user),
) -> RatingRead:
    try:
        rating = get_rating_uc(db, rating_id)
    except LookupError as exc:
        raise http_error_from(exc) from exc
    return RatingRead.model_validate(rating)


@router.put("/{rating_id}", response_model=RatingRead)
def update_rating(
    rating_id: int,
    payload: RatingUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_customer),
    settings: Settings = Depends(get_settings),
) -> RatingRead:
    try:
        rating = update_rating_uc(
            db,
            current_user,
            rating_id,
            stars=payload.stars,
            comment=payload.comment,
            settings=settings,
        )
    except (LookupError, PermissionError, ValueError) as exc:
        raise http_error_from(exc) from exc
    return RatingRead.model_validate(rating)


@router.delete("/{rating_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_rating(
    rating_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_customer),
    settings: Settings = Depends(get_settings),
) -> Response:
    try:
        delete_rating_uc(db, current_user, rating_id, settings=settings)
    except (LookupError, PermissionError, ValueError) as exc:
        raise http_error_from(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
