"""Domain entity representing a user."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class UserRole(str, Enum):
    """Roles a marketplace account can hold."""

    ADMIN = "admin"
    DRIVER = "driver"
    CUSTOMER = "customer"


@dataclass
class User:
    """Core attributes describing an application user."""

    id: int | None
    name: str
    email: str
    password: str
    role: UserRole
    is_active: bool
    created_at: datetime | None

    def has_role(self, role: UserRole | str) -> bool:
        """Return ``True`` when the user's role matches ``role``."""

        return self.role.value == UserRole(role).value

    def is_admin(self) -> bool:
        """Return ``True`` when the user is an administrator."""

        return self.has_role(UserRole.ADMIN)

    def is_driver(self) -> bool:
        return self.has_role(UserRole.DRIVER)

    def is_customer(self) -> bool:
        return self.has_role(UserRole.CUSTOMER)


__all__ = ["User", "UserRole"]
