"""Websocket hub streaming notifications and load events."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect, status

from dispatch.application.use_cases.loads import record_load_location
from dispatch.application.use_cases.locations import LocationTracker
from dispatch.application.use_cases.notifications import NotificationDispatcher
from dispatch.config import get_settings
from dispatch.domain.entities import User
from dispatch.infrastructure.database import SessionLocal
from dispatch.infrastructure.notifications import (
    load_topic,
    realtime_event_publisher,
    realtime_hub,
    serialize_notification,
    user_topic,
)
from dispatch.infrastructure.repositories import LoadRepository
from dispatch.interfaces.api.dependencies import resolve_current_user

router = APIRouter(prefix="/realtime", tags=["realtime"])
logger = logging.getLogger(__name__)


def _error(message: str) -> dict[str, Any]:
    return {"type": "error", "message": message}


def _load_id_from(message: dict[str, Any]) -> int:
    load_id = message.get("load_id")
    if isinstance(load_id, bool) or not isinstance(load_id, int):
        raise ValueError("load_id must be an integer")
    return load_id


def _subscribe(websocket: WebSocket, user: User, message: dict[str, Any]) -> dict[str, Any]:
    load_id = _load_id_from(message)
    session = SessionLocal()
    try:
        load = LoadRepository(session).get(load_id)
    finally:
        session.close()
    if load is None:
        raise LookupError("Load not found")
    if not (load.is_owned_by(user.id) or load.is_assigned_to(user.id) or user.is_admin()):
        raise PermissionError("You cannot follow this load")
    realtime_hub.join(load_topic(load_id), websocket)
    return {"type": "subscribed", "load_id": load_id}


def _unsubscribe(websocket: WebSocket, user: User, message: dict[str, Any]) -> dict[str, Any]:
    load_id = _load_id_from(message)
    realtime_hub.leave(load_topic(load_id), websocket)
    return {"type": "unsubscribed", "load_id": load_id}


def _acknowledge(websocket: WebSocket, user: User, message: dict[str, Any]) -> dict[str, Any]:
    ids = message.get("ids")
    if not isinstance(ids, list) or not all(
        isinstance(item, int) and not isinstance(item, bool) for item in ids
    ):
        raise ValueError("ids must be a list of integers")
    session = SessionLocal()
    try:
        dispatcher = NotificationDispatcher(session, realtime_event_publisher)
        updated = dispatcher.mark_many_as_read(ids, user_id=user.id) if ids else 0
    finally:
        session.close()
    return {"type": "ack", "updated": updated}


def _report_location(
    websocket: WebSocket, user: User, message: dict[str, Any]
) -> dict[str, Any]:
    load_id = _load_id_from(message)
    latitude = message.get("latitude")
    longitude = message.get("longitude")
    if not all(
        isinstance(value, (int, float)) and not isinstance(value, bool)
        for value in (latitude, longitude)
    ):
        raise ValueError("latitude and longitude must be numbers")
    session = SessionLocal()
    try:
        tracker = LocationTracker(session, realtime_event_publisher, get_settings())
        record_load_location(
            session,
            tracker,
            load_id=load_id,
            driver_id=user.id,
            latitude=float(latitude),
            longitude=float(longitude),
        )
    finally:
        session.close()
    return {"type": "location_recorded", "load_id": load_id}


_HANDLERS = {
    "subscribe": _subscribe,
    "unsubscribe": _unsubscribe,
    "ack": _acknowledge,
    "location": _report_location,
}


def _handle_message(websocket: WebSocket, user: User, message: Any) -> dict[str, Any]:
    if not isinstance(message, dict):
        return _error("Invalid message")
    message_type = message.get("type")
    if message_type == "ping":
        return {"type": "pong"}
    handler = _HANDLERS.get(message_type)
    if handler is None:
        return _error(f"Unknown message type: {message_type}")
    try:
        return handler(websocket, user, message)
    except (LookupError, PermissionError, ValueError) as exc:
        return _error(str(exc))
    except Exception:
        logger.exception("Failed to handle %s frame from user %s", message_type, user.id)
        return _error("Internal error")


@router.websocket("/ws")
async def realtime_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint for notifications and subscribed load events."""

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    session = SessionLocal()
    try:
        user = resolve_current_user(token, session)
        if not user.is_active:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
        dispatcher = NotificationDispatcher(session, realtime_event_publisher)
        pending_notifications = dispatcher.list_unread(user.id)
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    finally:
        session.close()

    await realtime_hub.connect(websocket, topics=(user_topic(user.id),))
    logger.info("User %s connected to the realtime hub", user.id)
    try:
        await websocket.send_json(
            {
                "type": "init",
                "data": [serialize_notification(n) for n in pending_notifications],
            }
        )
        while True:
            try:
                message = await websocket.receive_json()
            except ValueError:
                await websocket.send_json(_error("Invalid JSON"))
                continue
            await websocket.send_json(_handle_message(websocket, user, message))
    except WebSocketDisconnect:
        logger.info("User %s disconnected from the realtime hub", user.id)
    finally:
        realtime_hub.disconnect(websocket)
