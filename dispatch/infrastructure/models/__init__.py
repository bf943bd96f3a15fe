"""ORM models used by the application infrastructure."""

from .booking import BookingModel
from .load import LoadModel
from .location_update import LocationUpdateModel
from .notification import NotificationModel
from .rating import RatingModel
from .user import UserModel

__all__ = [
    "BookingModel",
    "LoadModel",
    "LocationUpdateModel",
    "NotificationModel",
    "RatingModel",
    "UserModel",
]
