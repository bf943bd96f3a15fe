"""Connection management for the realtime websocket hub."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, DefaultDict, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


def user_topic(user_id: int) -> str:
    """Return the topic every connection of ``user_id`` joins on connect."""

    return f"user:{user_id}"


def load_topic(load_id: int) -> str:
    """Return the topic carrying status, ETA and location events for a load."""

    return f"load:{load_id}"


class TopicConnectionManager:
    """Track websocket connections grouped by topic.

    A connection may belong to many topics and a topic may have any number of
    connections. Messages are delivered at most once, in the order
    :meth:`send_to_topic` is awaited; nothing is buffered for absent
    subscribers.
    """

    def __init__(self) -> None:
        self._subscribers: DefaultDict[str, Set[WebSocket]] = defaultdict(set)
        self._topics: DefaultDict[WebSocket, Set[str]] = defaultdict(set)

    async def connect(self, websocket: WebSocket, *, topics: tuple[str, ...] = ()) -> None:
        """Accept the websocket connection and join the initial ``topics``."""

        await websocket.accept()
        for topic in topics:
            self.join(topic, websocket)

    def join(self, topic: str, websocket: WebSocket) -> None:
        self._subscribers[topic].add(websocket)
        self._topics[websocket].add(topic)

    def leave(self, topic: str, websocket: WebSocket) -> None:
        connections = self._subscribers.get(topic)
        if connections is not None:
            connections.discard(websocket)
            if not connections:
                self._subscribers.pop(topic, None)
        topics = self._topics.get(websocket)
        if topics is not None:
            topics.discard(topic)
            if not topics:
                self._topics.pop(websocket, None)

    def disconnect(self, websocket: WebSocket) -> None:
        """Remove ``websocket`` from every topic it joined."""

        for topic in list(self._topics.get(websocket, ())):
            self.leave(topic, websocket)
        self._topics.pop(websocket, None)

    def topics_for(self, websocket: WebSocket) -> frozenset[str]:
        return frozenset(self._topics.get(websocket, ()))

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, ()))

    async def send_to_topic(self, topic: str, message: dict[str, Any]) -> int:
        """Send ``message`` to every connection in ``topic``; return deliveries."""

        delivered = 0
        for connection in list(self._subscribers.get(topic, ())):
            try:
                await connection.send_json(message)
            except Exception:
                logger.info("Dropping unreachable connection from topic %s", topic)
                self.disconnect(connection)
            else:
                delivered += 1
        return delivered


realtime_hub = TopicConnectionManager()


__all__ = ["TopicConnectionManager", "load_topic", "realtime_hub", "user_topic"]
