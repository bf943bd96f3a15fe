"""Integration tests for the realtime websocket hub."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from dispatch.domain.entities import User, UserRole
from dispatch.infrastructure.database import SessionLocal
from dispatch.infrastructure.notifications import realtime_hub
from dispatch.infrastructure.repositories import UserRepository
from dispatch.infrastructure.security import create_access_token
from main import create_app


def _create_user(role: UserRole, email: str, name: str) -> User:
    with SessionLocal() as session:
        return UserRepository(session).create(
            User(
                id=None,
                name=name,
                email=email,
                password="unused",
                role=role,
                is_active=True,
                created_at=None,
            )
        )


def _token(user: User) -> str:
    return create_access_token({"sub": user.email, "role": user.role.value})


@pytest.fixture()
def client():
    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture()
def people():
    return {
        "customer": _create_user(UserRole.CUSTOMER, "customer@example.com", "Carla Customer"),
        "driver": _create_user(UserRole.DRIVER, "driver@example.com", "Dan Driver"),
        "stranger": _create_user(UserRole.CUSTOMER, "stranger@example.com", "Sam Stranger"),
    }


def _post_load(client: TestClient, customer: User) -> int:
    response = client.post(
        "/loads",
        json={"title": "Cement", "pickup_location": "A", "dropoff_location": "B"},
        headers={"Authorization": f"Bearer {_token(customer)}"},
    )
    assert response.status_code == 201, response.text
    return response.json()["id"]


def test_connection_requires_valid_token(client) -> None:
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/realtime/ws") as websocket:
            websocket.receive_json()
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/realtime/ws?token=garbage") as websocket:
            websocket.receive_json()


def test_init_ping_and_errors(client, people) -> None:
    load_id = _post_load(client, people["customer"])

    with client.websocket_connect(f"/realtime/ws?token={_token(people['driver'])}") as websocket:
        init = websocket.receive_json()
        assert init["type"] == "init"
        assert [n["title"] for n in init["data"]] == ["New Load Available"]

        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

        websocket.send_json({"type": "teleport"})
        assert websocket.receive_json()["type"] == "error"

        websocket.send_json({"type": "subscribe", "load_id": "x"})
        assert websocket.receive_json()["type"] == "error"

        websocket.send_json({"type": "subscribe", "load_id": load_id})
        assert websocket.receive_json() == {
            "type": "error",
            "message": "You cannot follow this load",
        }

        websocket.send_json({"type": "ack", "ids": [n["id"] for n in init["data"]]})
        assert websocket.receive_json() == {"type": "ack", "updated": 1}

    assert realtime_hub.subscriber_count(f"user:{people['driver'].id}") == 0


def test_subscriber_receives_lifecycle_events(client, people) -> None:
    customer = people["customer"]
    driver = people["driver"]
    load_id = _post_load(client, customer)

    with client.websocket_connect(f"/realtime/ws?token={_token(customer)}") as websocket:
        assert websocket.receive_json() == {"type": "init", "data": []}
        websocket.send_json({"type": "subscribe", "load_id": load_id})
        assert websocket.receive_json() == {"type": "subscribed", "load_id": load_id}

        response = client.post(
            f"/loads/{load_id}/accept",
            headers={"Authorization": f"Bearer {_token(driver)}"},
        )
        assert response.status_code == 200

        received = {}
        for _ in range(2):
            message = websocket.receive_json()
            received[message["type"]] = message["data"]

        assert received["notification"]["title"] == "Load Accepted"
        assert received["load.status"]["status"] == "Accepted"
        assert received["load.status"]["estimated_minutes"] == 30

        websocket.send_json({"type": "unsubscribe", "load_id": load_id})
        assert websocket.receive_json() == {"type": "unsubscribed", "load_id": load_id}


def test_driver_reports_location_over_websocket(client, people) -> None:
    customer = people["customer"]
    driver = people["driver"]
    load_id = _post_load(client, customer)
    client.post(
        f"/loads/{load_id}/accept",
        headers={"Authorization": f"Bearer {_token(driver)}"},
    )

    with client.websocket_connect(f"/realtime/ws?token={_token(driver)}") as websocket:
        websocket.receive_json()
        websocket.send_json(
            {"type": "location", "load_id": load_id, "latitude": -33.9, "longitude": 18.4}
        )
        assert websocket.receive_json() == {"type": "location_recorded", "load_id": load_id}

        websocket.send_json(
            {"type": "location", "load_id": load_id, "latitude": "north", "longitude": 18.4}
        )
        assert websocket.receive_json()["type"] == "error"

    history = client.get(
        f"/loads/{load_id}/location-history",
        headers={"Authorization": f"Bearer {_token(customer)}"},
    )
    assert [(p["latitude"], p["longitude"]) for p in history.json()] == [(-33.9, 18.4)]
