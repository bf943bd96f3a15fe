"""Schemas for driver ratings."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from dispatch.domain.entities import MAX_RATING_STARS, MIN_RATING_STARS


class RatingCreate(BaseModel):
    load_id: int
    stars: int = Field(..., ge=MIN_RATING_STARS, le=MAX_RATING_STARS)
    comment: str | None = Field(None, max_length=500)


class RatingUpdate(BaseModel):
    stars: int = Field(..., ge=MIN_RATING_STARS, le=MAX_RATING_STARS)
    comment: str | None = Field(None, max_length=500)


class RatingRead(BaseModel):
    id: int
    load_id: int
    customer_id: int
    driver_id: int
    stars: int
    comment: str | None
    created_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class DriverRatingsRead(BaseModel):
    ratings: list[RatingRead]
    average_rating: float
    total_ratings: int


__all__ = ["DriverRatingsRead", "RatingCreate", "RatingRead", "RatingUpdate"]
