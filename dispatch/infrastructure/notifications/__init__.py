"""Realtime transport helpers for the infrastructure layer."""

from .manager import TopicConnectionManager, load_topic, realtime_hub, user_topic
from .publisher import (
    EventPublisher,
    RealtimeEventPublisher,
    realtime_event_publisher,
    serialize_notification,
    serialize_payload,
)

__all__ = [
    "TopicConnectionManager",
    "realtime_hub",
    "user_topic",
    "load_topic",
    "EventPublisher",
    "RealtimeEventPublisher",
    "realtime_event_publisher",
    "serialize_notification",
    "serialize_payload",
]
