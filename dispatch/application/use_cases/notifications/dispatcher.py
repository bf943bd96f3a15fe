"""Persist notifications and publish them to realtime subscribers."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from sqlalchemy.orm import Session

from dispatch.domain.entities import NOTIFICATION_CATEGORY_INFO, Notification
from dispatch.infrastructure.notifications import (
    EventPublisher,
    serialize_notification,
    user_topic,
)
from dispatch.infrastructure.repositories import NotificationRepository
from dispatch.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

NOTIFICATION_EVENT_TYPE = "notification"


class NotificationDispatcher:
    """Store one notification row per message and push it to the recipient.

    The persisted row is the durable record. The realtime push is best effort:
    with nobody connected to ``user:{id}`` the event is simply dropped, and a
    publisher error is logged without reaching the caller.
    """

    def __init__(self, session: Session, publisher: EventPublisher) -> None:
        self._repository = NotificationRepository(session)
        self._publisher = publisher

    def notify(
        self,
        user_id: int,
        title: str,
        message: str,
        category: str = NOTIFICATION_CATEGORY_INFO,
        action_url: str | None = None,
        *,
        load_id: int | None = None,
    ) -> Notification:
        notification = Notification(
            id=None,
            user_id=user_id,
            title=title,
            message=message,
            category=category,
            action_url=action_url,
            load_id=load_id,
            is_read=False,
            created_at=now_in_app_timezone(),
        )
        saved = self._repository.create(notification)
        self._publish(
            user_topic(user_id), NOTIFICATION_EVENT_TYPE, serialize_notification(saved)
        )
        logger.info("Notification sent to user %s: %s", user_id, title)
        return saved

    def broadcast(self, topic: str, event_type: str, payload: Any) -> None:
        """Publish ``payload`` to ``topic`` without persisting anything."""

        self._publish(topic, event_type, payload)

    def list_for_user(self, user_id: int, *, limit: int | None = 20) -> Sequence[Notification]:
        return self._repository.list_for_user(user_id, limit=limit)

    def list_unread(self, user_id: int) -> Sequence[Notification]:
        return self._repository.list_unread_for_user(user_id)

    def unread_count(self, user_id: int) -> int:
        return self._repository.count_unread_for_user(user_id)

    def mark_as_read(self, notification_id: int, *, user_id: int) -> bool:
        """Mark one notification read; only its recipient may do so."""

        notification = self._repository.get(notification_id)
        if notification is None or notification.user_id != user_id:
            return False
        if notification.is_read:
            return True
        return self._repository.mark_as_read([notification_id], user_id=user_id) == 1

    def mark_many_as_read(self, notification_ids: Iterable[int], *, user_id: int) -> int:
        return self._repository.mark_as_read(notification_ids, user_id=user_id)

    def mark_all_as_read(self, user_id: int) -> int:
        return self._repository.mark_all_as_read(user_id)

    def _publish(self, topic: str, event_type: str, payload: Any) -> None:
        try:
            self._publisher.publish(topic, event_type, payload)
        except Exception:
            logger.warning("Could not publish %s to %s", event_type, topic, exc_info=True)


__all__ = ["NOTIFICATION_EVENT_TYPE", "NotificationDispatcher"]
