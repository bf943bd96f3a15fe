"""Integration tests for the load, notification and rating endpoints."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from dispatch.domain.entities import User, UserRole
from dispatch.infrastructure.database import SessionLocal
from dispatch.infrastructure.repositories import UserRepository
from dispatch.infrastructure.security import get_password_hash
from main import create_app

PASSWORD = "StrongPass123"


def _create_user(role: UserRole, email: str, name: str) -> User:
    with SessionLocal() as session:
        return UserRepository(session).create(
            User(
                id=None,
                name=name,
                email=email,
                password=get_password_hash(PASSWORD),
                role=role,
                is_active=True,
                created_at=None,
            )
        )


def _auth_headers(client: TestClient, email: str) -> dict[str, str]:
    response = client.post(
        "/auth/token",
        data={"username": email, "password": PASSWORD},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture()
def client():
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def accounts(client):
    customer = _create_user(UserRole.CUSTOMER, "customer@example.com", "Carla Customer")
    driver = _create_user(UserRole.DRIVER, "driver@example.com", "Dan Driver")
    return {
        "customer": customer,
        "driver": driver,
        "customer_headers": _auth_headers(client, customer.email),
        "driver_headers": _auth_headers(client, driver.email),
    }


def _post_load(client: TestClient, headers: dict[str, str]) -> dict:
    response = client.post(
        "/loads",
        json={
            "title": "Wine crates",
            "pickup_location": "Stellenbosch",
            "dropoff_location": "Cape Town",
            "weight_lbs": 900,
        },
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_requests_without_token_are_rejected(client) -> None:
    assert client.get("/loads/available").status_code == 401
    assert client.get("/notifications").status_code == 401


def test_lifecycle_over_http(client, accounts) -> None:
    customer_headers = accounts["customer_headers"]
    driver_headers = accounts["driver_headers"]
    load = _post_load(client, customer_headers)
    assert load["status"] == "Available"

    assert client.post("/loads", json={}, headers=driver_headers).status_code == 403

    board = client.get("/loads/available", headers=driver_headers)
    assert [item["id"] for item in board.json()] == [load["id"]]
    assert client.get("/loads/available", headers=customer_headers).status_code == 403

    unread = client.get("/notifications/unread", headers=driver_headers).json()
    assert [n["title"] for n in unread] == ["New Load Available"]

    accepted = client.post(
        f"/loads/{load['id']}/accept",
        json={"estimated_minutes": 25},
        headers=driver_headers,
    )
    assert accepted.status_code == 200
    assert accepted.json() == {"message": "Load accepted successfully"}

    again = client.post(f"/loads/{load['id']}/accept", headers=driver_headers)
    assert again.status_code == 400
    assert again.json() == {"detail": "Load is not available (current status: Accepted)"}

    early = client.post(f"/loads/{load['id']}/complete", headers=customer_headers)
    assert early.status_code == 400
    assert early.json()["detail"] == (
        "Load must be delivered before completion (current status: Accepted)"
    )

    for step in ("arrive-pickup", "pickup", "start-transit", "arrive-dropoff", "deliver"):
        response = client.post(f"/loads/{load['id']}/{step}", headers=driver_headers)
        assert response.status_code == 200, (step, response.text)

    detail = client.get(f"/loads/{load['id']}", headers=customer_headers).json()
    assert detail["status"] == "Delivered"
    assert detail["estimated_minutes"] == 25

    done = client.post(f"/loads/{load['id']}/complete", headers=customer_headers)
    assert done.json() == {"message": "Load marked as completed"}

    history = client.get("/loads/customer/history", headers=customer_headers).json()
    assert [item["id"] for item in history] == [load["id"]]
    assert client.get("/loads/driver/active", headers=driver_headers).json() == []

    count = client.get("/notifications/unread-count", headers=customer_headers).json()
    assert count["count"] >= 6
    assert client.post("/notifications/read-all", headers=customer_headers).json()["updated"] == count["count"]
    assert client.get("/notifications/unread-count", headers=customer_headers).json() == {"count": 0}

    rating = client.post(
        "/ratings",
        json={"load_id": load["id"], "stars": 5, "comment": "On time"},
        headers=customer_headers,
    )
    assert rating.status_code == 201, rating.text
    summary = client.get(
        f"/ratings/driver/{accounts['driver'].id}", headers=driver_headers
    ).json()
    assert summary["total_ratings"] == 1
    assert summary["average_rating"] == 5


def test_location_and_eta_endpoints(client, accounts) -> None:
    customer_headers = accounts["customer_headers"]
    driver_headers = accounts["driver_headers"]
    load = _post_load(client, customer_headers)
    assert client.post(f"/loads/{load['id']}/accept", headers=driver_headers).status_code == 200

    recorded = client.post(
        f"/loads/{load['id']}/location",
        json={"latitude": -33.93, "longitude": 18.86},
        headers=driver_headers,
    )
    assert recorded.status_code == 201
    assert recorded.json()["latitude"] == -33.93

    invalid = client.post(
        f"/loads/{load['id']}/location",
        json={"latitude": 123, "longitude": 18.86},
        headers=driver_headers,
    )
    assert invalid.status_code == 422

    history = client.get(f"/loads/{load['id']}/location-history", headers=customer_headers)
    assert [(p["latitude"], p["longitude"]) for p in history.json()] == [(-33.93, 18.86)]

    eta = client.post(
        f"/loads/{load['id']}/eta", json={"estimated_minutes": 15}, headers=driver_headers
    )
    assert eta.json() == {"message": "ETA updated to 15 minutes"}
    assert client.post(
        f"/loads/{load['id']}/eta", json={"estimated_minutes": -5}, headers=driver_headers
    ).status_code == 422

    sequence = client.post(
        "/loads/driver/sequence",
        json={"load_sequences": [{"load_id": load["id"], "sequence": 1}]},
        headers=driver_headers,
    )
    assert sequence.status_code == 200
    ordered = client.get("/loads/driver/sequence", headers=driver_headers).json()
    assert [(item["id"], item["delivery_sequence"]) for item in ordered] == [(load["id"], 1)]


def test_missing_and_forbidden_loads(client, accounts) -> None:
    customer_headers = accounts["customer_headers"]
    driver_headers = accounts["driver_headers"]
    load = _post_load(client, customer_headers)

    assert client.get("/loads/9999", headers=customer_headers).status_code == 404
    assert client.get(f"/loads/{load['id']}", headers=driver_headers).status_code == 403
    missing = client.post("/loads/9999/pickup", headers=driver_headers)
    assert missing.status_code == 400
    assert missing.json() == {"detail": "Load not found"}

    cancelled = client.post(
        f"/loads/{load['id']}/cancel", json={"reason": "Not needed"}, headers=customer_headers
    )
    assert cancelled.json() == {"message": "Load cancelled"}


def test_notification_read_endpoints(client, accounts) -> None:
    driver_headers = accounts["driver_headers"]
    _post_load(client, accounts["customer_headers"])
    _post_load(client, accounts["customer_headers"])
    notifications = client.get("/notifications", headers=driver_headers).json()
    assert len(notifications) == 2

    first, second = (n["id"] for n in notifications)
    assert client.post(f"/notifications/{first}/read", headers=driver_headers).status_code == 200
    assert client.post("/notifications/9999/read", headers=driver_headers).status_code == 404
    marked = client.post(
        "/notifications/read", json={"ids": [first, second, second]}, headers=driver_headers
    )
    assert marked.json() == {"updated": 1}
    assert client.get("/notifications/unread", headers=driver_headers).json() == []
