"""Persistence layer for user data."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from dispatch.domain.entities import User, UserRole
from dispatch.infrastructure.models import UserModel
from dispatch.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class UserRepository:
    """Provide CRUD operations for user entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str) -> User | None:
        model = (
            self.session.query(UserModel)
            .filter(UserModel.email == email.strip().lower())
            .first()
        )
        return self._to_entity(model) if model else None

    def list_ids_by_role(self, role: UserRole, *, active_only: bool = True) -> Sequence[int]:
        query = self.session.query(UserModel.id).filter(
            UserModel.role == UserRole(role).value
        )
        if active_only:
            query = query.filter(UserModel.is_active.is_(True))
        return [row.id for row in query.order_by(UserModel.id).all()]

    def create(self, user: User) -> User:
        model = UserModel()
        model.name = user.name
        model.email = user.email.strip().lower()
        model.password = user.password
        model.role = UserRole(user.role).value
        model.is_active = user.is_active
        model.created_at = ensure_app_naive_datetime(
            user.created_at or now_in_app_timezone()
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            password=model.password,
            role=UserRole(model.role),
            is_active=model.is_active,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["UserRepository"]
