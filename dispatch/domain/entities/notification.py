"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

NOTIFICATION_CATEGORY_INFO = "Info"
NOTIFICATION_CATEGORY_SUCCESS = "Success"
NOTIFICATION_CATEGORY_WARNING = "Warning"
NOTIFICATION_CATEGORY_LOAD_POSTED = "LoadPosted"


@dataclass
class Notification:
    """Information message delivered to a specific user."""

    id: int | None
    user_id: int
    title: str
    message: str
    category: str = NOTIFICATION_CATEGORY_INFO
    action_url: str | None = None
    load_id: int | None = None
    is_read: bool = False
    created_at: datetime | None = None


__all__ = [
    "Notification",
    "NOTIFICATION_CATEGORY_INFO",
    "NOTIFICATION_CATEGORY_SUCCESS",
    "NOTIFICATION_CATEGORY_WARNING",
    "NOTIFICATION_CATEGORY_LOAD_POSTED",
]
