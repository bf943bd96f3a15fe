from .auth import Token
from .load import (
    AcceptLoadRequest,
    CancelLoadRequest,
    DeliverySequenceItem,
    DeliverySequenceRequest,
    EtaUpdateRequest,
    LoadCreate,
    LoadRead,
    TransitionResponse,
)
from .location import LocationRead, LocationReport
from .notification import (
    MarkReadResponse,
    NotificationMarkReadRequest,
    NotificationRead,
    UnreadCountResponse,
)
from .rating import DriverRatingsRead, RatingCreate, RatingRead, RatingUpdate

__all__ = [
    "AcceptLoadRequest",
    "CancelLoadRequest",
    "DeliverySequenceItem",
    "DeliverySequenceRequest",
    "DriverRatingsRead",
    "EtaUpdateRequest",
    "LoadCreate",
    "LoadRead",
    "LocationRead",
    "LocationReport",
    "MarkReadResponse",
    "NotificationMarkReadRequest",
    "NotificationRead",
    "RatingCreate",
    "RatingRead",
    "RatingUpdate",
    "Token",
    "TransitionResponse",
    "UnreadCountResponse",
]
