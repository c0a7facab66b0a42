"""In-memory implementation of UserRepository for testing."""

import threading
import uuid
from dataclasses import replace
from datetime import datetime, timezone

from domain.model.errors import LoginIsOccupied, NotFoundError, ValidationError
from domain.model.user import LoginField, User

_MUTABLE_FIELDS = {'email', 'name', 'phone', 'password_hash'}


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}
        self._lock = threading.Lock()

    def _check_occupied(self, logins: dict[LoginField, str], exclude_id: str | None = None) -> None:
        for field in LoginField:
            value = logins.get(field)
            if value is None:
                continue
            for user in self.store.values():
                if user.id != exclude_id and getattr(user, field.value) == value:
                    raise LoginIsOccupied(field)

    # ── write operations ─────────────────────────────────────

    def create(
        self,
        password_hash: str,
        email: str | None = None,
        name: str | None = None,
        phone: str | None = None,
    ) -> User:
        if not password_hash:
            raise ValidationError("Password hash must not be empty")

        now = datetime.now(timezone.utc)
        user = User(
            id=uuid.uuid4().hex,
            created_at=now,
            updated_at=now,
            password_hash=password_hash,
            email=email,
            name=name,
            phone=phone,
        )
        if not user.login_values():
            raise ValidationError("At least one of email, name or phone is required")

        with self._lock:
            self._check_occupied(user.login_values())
            self.store[user.id] = user
        return replace(user)

    def update(self, user_id: str, changes: dict) -> User:
        unknown = set(changes) - _MUTABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update fields: {sorted(unknown)}")
        if 'password_hash' in changes and not changes['password_hash']:
            raise ValidationError("Password hash must not be empty")

        with self._lock:
            user = self.store.get(user_id)
            if not user:
                raise NotFoundError(f"User {user_id} not found")

            logins = {
                field: changes[field.value]
                for field in LoginField
                if changes.get(field.value) is not None
            }
            self._check_occupied(logins, exclude_id=user_id)

            updated = replace(user, **changes, updated_at=datetime.now(timezone.utc))
            self.store[user_id] = updated
        return replace(updated)

    def clear(self) -> int:
        with self._lock:
            count = len(self.store)
            self.store.clear()
        return count

    # ── read operations ──────────────────────────────────────

    def get_by_id(self, user_id: str) -> User | None:
        user = self.store.get(user_id)
        return replace(user) if user else None

    def get_by_field(self, field: LoginField, value: str) -> User | None:
        for user in self.store.values():
            if getattr(user, LoginField(field).value) == value:
                return replace(user)
        return None
