"""Domain entity representing a customer's rating of a delivery."""

from dataclasses import dataclass
from datetime import datetime

MIN_RATING_STARS = 1
MAX_RATING_STARS = 5


@dataclass
class Rating:
    """Stars and optional comment left by a customer for a driver."""

    id: int | None
    load_id: int
    customer_id: int
    driver_id: int
    stars: int
    comment: str | None
    created_at: datetime | None


__all__ = ["Rating", "MIN_RATING_STARS", "MAX_RATING_STARS"]
