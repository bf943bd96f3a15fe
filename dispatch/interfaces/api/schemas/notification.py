"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NotificationMarkReadRequest(BaseModel):
    """Payload used to mark a batch of notifications as read."""

    ids: list[int] = Field(..., min_length=1, description="Notification identifiers")

    def unique_ids(self) -> list[int]:
        """Return the list of identifiers without duplicates preserving order."""

        return list(dict.fromkeys(self.ids))


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: int
    user_id: int
    title: str
    message: str
    category: str
    action_url: str | None = None
    load_id: int | None = None
    is_read: bool
    created_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class UnreadCountResponse(BaseModel):
    count: int


class MarkReadResponse(BaseModel):
    updated: int


__all__ = [
    "MarkReadResponse",
    "NotificationMarkReadRequest",
    "NotificationRead",
    "UnreadCountResponse",
]
