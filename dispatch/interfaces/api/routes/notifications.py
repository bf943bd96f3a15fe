"""Endpoints for reading and acknowledging notifications."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from dispatch.application.use_cases.notifications import NotificationDispatcher
from dispatch.domain.entities import Notification, User
from dispatch.interfaces.api.dependencies import (
    get_current_active_user,
    get_notification_dispatcher,
)
from dispatch.interfaces.api.schemas import (
    MarkReadResponse,
    NotificationMarkReadRequest,
    NotificationRead,
    TransitionResponse,
    UnreadCountResponse,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead.model_validate(notification)


@router.get("", response_model=list[NotificationRead])
def list_notifications(
    limit: int = Query(20, ge=1, le=200),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    current_user: User = Depends(get_current_active_user),
) -> list[NotificationRead]:
    """Return the most recent notifications for the authenticated user."""

    notifications = dispatcher.list_for_user(current_user.id, limit=limit)
    return [_notification_to_schema(notification) for notification in notifications]


@router.get("/unread", response_model=list[NotificationRead])
def list_unread_notifications(
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    current_user: User = Depends(get_current_active_user),
) -> list[NotificationRead]:
    notifications = dispatcher.list_unread(current_user.id)
    return [_notification_to_schema(notification) for notification in notifications]


@router.get("/unread-count", response_model=UnreadCountResponse)
def unread_count(
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    current_user: User = Depends(get_current_active_user),
) -> UnreadCountResponse:
    return UnreadCountResponse(count=dispatcher.unread_count(current_user.id))


@router.post("/{notification_id}/read", response_model=TransitionResponse)
def mark_notification_as_read(
    notification_id: int,
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    current_user: User = Depends(get_current_active_user),
) -> TransitionResponse:
    if not dispatcher.mark_as_read(notification_id, user_id=current_user.id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found",
        )
    return TransitionResponse(message="Notification marked as read")


@router.post("/read", response_model=MarkReadResponse)
def mark_notifications_as_read(
    payload: NotificationMarkReadRequest,
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    current_user: User = Depends(get_current_active_user),
) -> MarkReadResponse:
    updated = dispatcher.mark_many_as_read(payload.unique_ids(), user_id=current_user.id)
    return MarkReadResponse(updated=updated)


@router.post("/read-all", response_model=MarkReadResponse)
def mark_all_notifications_as_read(
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    current_user: User = Depends(get_current_active_user),
) -> MarkReadResponse:
    return MarkReadResponse(updated=dispatcher.mark_all_as_read(current_user.id))
