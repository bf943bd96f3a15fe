"""Repository implementations for infrastructure layer."""

from .booking_repository import BookingRepository
from .load_repository import LoadRepository
from .location_update_repository import LocationUpdateRepository
from .notification_repository import NotificationRepository
from .rating_repository import RatingRepository
from .user_repository import UserRepository

__all__ = [
    "BookingRepository",
    "LoadRepository",
    "LocationUpdateRepository",
    "NotificationRepository",
    "RatingRepository",
    "UserRepository",
]
