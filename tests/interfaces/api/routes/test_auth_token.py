"""Tests for the authentication token endpoint."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from dispatch.application.use_cases.users import (
    AuthenticationStatus,
    authenticate_user,
    create_user,
)
from dispatch.domain.entities import UserRole
from dispatch.infrastructure.database import SessionLocal
from dispatch.infrastructure.models import UserModel
from dispatch.infrastructure.security import decode_access_token
from main import create_app

PASSWORD = "StrongPass123"


def _create_user(*, email: str, role: UserRole, is_active: bool = True) -> int:
    """Insert a user through the registration use case."""

    with SessionLocal() as session:
        user = create_user(
            session, name="Test User", email=email, password=PASSWORD, role=role
        )
        if not is_active:
            _deactivate(session, user.id)
        return user.id


def _deactivate(session, user_id: int) -> None:
    session.get(UserModel, user_id).is_active = False
    session.commit()


def _login(client: TestClient, email: str, password: str = PASSWORD):
    return client.post(
        "/auth/token",
        data={"username": email, "password": password},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )


@pytest.mark.parametrize("role", list(UserRole))
def test_login_returns_role_claim(role: UserRole) -> None:
    """Obtaining a token should report the role of the account."""

    email = f"{role.value}@example.com"
    _create_user(email=email, role=role)

    with TestClient(create_app()) as client:
        response = _login(client, email)

    assert response.status_code == 200
    payload = response.json()
    assert payload["token_type"] == "bearer"
    assert payload["role"] == role.value
    claims = decode_access_token(payload["access_token"])
    assert claims["sub"] == email
    assert claims["role"] == role.value


def test_login_failures() -> None:
    _create_user(email="driver@example.com", role=UserRole.DRIVER)
    _create_user(email="gone@example.com", role=UserRole.DRIVER, is_active=False)

    with TestClient(create_app()) as client:
        wrong_password = _login(client, "driver@example.com", "nope")
        unknown = _login(client, "nobody@example.com")
        inactive = _login(client, "gone@example.com")

    assert wrong_password.status_code == 401
    assert wrong_password.json()["detail"] == "Incorrect email or password"
    assert unknown.status_code == 401
    assert inactive.status_code == 403
    assert inactive.json()["detail"] == "Inactive user"


def test_token_for_deactivated_user_is_rejected() -> None:
    user_id = _create_user(email="driver@example.com", role=UserRole.DRIVER)

    with TestClient(create_app()) as client:
        token = _login(client, "driver@example.com").json()["access_token"]
        headers = {"Authorization": f"Bearer {token}"}
        assert client.get("/notifications", headers=headers).status_code == 200

        with SessionLocal() as session:
            _deactivate(session, user_id)

        assert client.get("/notifications", headers=headers).status_code == 400
        assert client.get(
            "/notifications", headers={"Authorization": "Bearer broken"}
        ).status_code == 401


def test_registration_rules() -> None:
    with SessionLocal() as session:
        create_user(
            session,
            name=" Ada ",
            email="ada@example.com",
            password=PASSWORD,
            role="customer",
        )
        with pytest.raises(ValueError, match="already registered"):
            create_user(
                session,
                name="Ada",
                email="ada@example.com",
                password=PASSWORD,
                role=UserRole.CUSTOMER,
            )
        with pytest.raises(ValueError, match="Unknown role"):
            create_user(
                session, name="Bob", email="bob@example.com", password=PASSWORD, role="pilot"
            )

        user, status = authenticate_user(session, "ada@example.com", PASSWORD)

    assert status is AuthenticationStatus.SUCCESS
    assert user.name == "Ada"
    assert user.role is UserRole.CUSTOMER
