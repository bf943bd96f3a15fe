"""Helpers to push realtime events to websocket subscribers."""

from __future__ import annotations

import abc
import asyncio
import copy
import logging
from dataclasses import asdict, is_dataclass
from datetime import datetime
from typing import Any

from anyio import from_thread

from dispatch.domain.entities import Notification

from .manager import TopicConnectionManager, realtime_hub

logger = logging.getLogger(__name__)


class EventPublisher(abc.ABC):
    """Publish a message to every subscriber of a topic."""

    @abc.abstractmethod
    def publish(self, topic: str, event_type: str, payload: Any) -> None:
        """Deliver ``payload`` as an ``event_type`` message on ``topic``."""


class RealtimeEventPublisher(EventPublisher):
    """Best-effort delivery through the in-process websocket hub.

    Callers on the event loop get a scheduled task. Callers on an AnyIO worker
    thread (sync FastAPI routes) hop onto the loop and wait for the send.
    Anywhere else the event is dropped, as it would be with no subscribers.
    """

    def __init__(self, manager: TopicConnectionManager) -> None:
        self._manager = manager
        self._pending: set[asyncio.Task[int]] = set()

    def publish(self, topic: str, event_type: str, payload: Any) -> None:
        try:
            message = {"type": event_type, "data": serialize_payload(payload)}
            self._schedule_send(topic, message)
        except Exception:
            logger.warning("Could not publish %s to %s", event_type, topic, exc_info=True)

    def _schedule_send(self, topic: str, message: dict[str, Any]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run(self._manager.send_to_topic, topic, message)
            except RuntimeError:
                logger.debug("No event loop available; dropping %s for %s", message["type"], topic)
        else:
            task = loop.create_task(self._manager.send_to_topic(topic, message))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)


def serialize_payload(payload: Any) -> Any:
    """Return a JSON-serializable copy of ``payload``."""

    if is_dataclass(payload) and not isinstance(payload, type):
        data: Any = asdict(payload)
    else:
        data = copy.deepcopy(payload)
    if isinstance(data, datetime):
        return data.isoformat()
    _normalize_datetime_values(data)
    return data


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``."""

    return serialize_payload(notification)


def _normalize_datetime_values(data: Any) -> None:
    """Convert ``datetime`` instances nested inside ``data`` into ISO strings."""

    if isinstance(data, dict):
        for key, value in data.items():
            if isinstance(value, datetime):
                data[key] = value.isoformat()
            elif isinstance(value, (dict, list)):
                _normalize_datetime_values(value)
    elif isinstance(data, list):
        for index, item in enumerate(data):
            if isinstance(item, datetime):
                data[index] = item.isoformat()
            elif isinstance(item, (dict, list)):
                _normalize_datetime_values(item)


realtime_event_publisher = RealtimeEventPublisher(realtime_hub)


__all__ = [
    "EventPublisher",
    "RealtimeEventPublisher",
    "realtime_event_publisher",
    "serialize_notification",
    "serialize_payload",
]
