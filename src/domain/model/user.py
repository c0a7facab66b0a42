# domain/model/user.py

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class LoginField(str, Enum):
    """Fields a user can sign in with. Order is the collision-check order."""
    EMAIL = 'email'
    NAME = 'name'
    PHONE = 'phone'


@dataclass
class User:
    """Domain model representing a user."""
    id: str
    created_at: datetime
    updated_at: datetime
    password_hash: str
    email: str | None = None
    name: str | None = None
    phone: str | None = None

    def login_values(self) -> dict[LoginField, str]:
        """Return the login handles this user has, keyed by field."""
        return {
            field: getattr(self, field.value)
            for field in LoginField
            if getattr(self, field.value) is not None
        }


@dataclass(frozen=True)
class UserPatch:
    """Field-level edit of a user. None means 'leave untouched'."""
    email: str | None = None
    name: str | None = None
    phone: str | None = None
    password: str | None = None

    def login_values(self) -> dict[LoginField, str]:
        return {
            field: getattr(self, field.value)
            for field in LoginField
            if getattr(self, field.value) is not None
        }

    def is_empty(self) -> bool:
        return not self.login_values() and self.password is None
