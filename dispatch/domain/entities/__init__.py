"""Domain entities exposed by the application."""

from .booking import Booking, BookingStatus
from .load import (
    ACTIVE_LOAD_STATUSES,
    HISTORY_LOAD_STATUSES,
    Load,
    LoadStatus,
)
from .load_event import (
    ARRIVAL_AT_DROPOFF,
    ARRIVAL_AT_PICKUP,
    LOAD_EVENT_ETA,
    LOAD_EVENT_LOCATION,
    LOAD_EVENT_STATUS,
    LoadEtaEvent,
    LoadLocationEvent,
    LoadStatusEvent,
)
from .location_update import LocationUpdate
from .notification import (
    NOTIFICATION_CATEGORY_INFO,
    NOTIFICATION_CATEGORY_LOAD_POSTED,
    NOTIFICATION_CATEGORY_SUCCESS,
    NOTIFICATION_CATEGORY_WARNING,
    Notification,
)
from .rating import MAX_RATING_STARS, MIN_RATING_STARS, Rating
from .user import User, UserRole

__all__ = [
    "ACTIVE_LOAD_STATUSES",
    "HISTORY_LOAD_STATUSES",
    "ARRIVAL_AT_DROPOFF",
    "ARRIVAL_AT_PICKUP",
    "LOAD_EVENT_ETA",
    "LOAD_EVENT_LOCATION",
    "LOAD_EVENT_STATUS",
    "Booking",
    "BookingStatus",
    "Load",
    "LoadEtaEvent",
    "LoadLocationEvent",
    "LoadStatus",
    "LoadStatusEvent",
    "LocationUpdate",
    "MAX_RATING_STARS",
    "MIN_RATING_STARS",
    "Notification",
    "NOTIFICATION_CATEGORY_INFO",
    "NOTIFICATION_CATEGORY_LOAD_POSTED",
    "NOTIFICATION_CATEGORY_SUCCESS",
    "NOTIFICATION_CATEGORY_WARNING",
    "Rating",
    "User",
    "UserRole",
]
