from typing import Protocol

from domain.model.user import LoginField, User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Implementations enforce per-field uniqueness of email, name and phone
    atomically with the write, and raise LoginIsOccupied on collision.
    """
    def create(
        self,
        password_hash: str,
        email: str | None = None,
        name: str | None = None,
        phone: str | None = None,
    ) -> User:
        """Create a new user. Raise LoginIsOccupied if any login is taken."""
        ...

    def update(self, user_id: str, changes: dict) -> User:
        """Apply all changes or none. Raise NotFoundError or LoginIsOccupied."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def get_by_field(self, field: LoginField, value: str) -> User | None:
        """Find the user holding value in the given login field."""
        ...

    def clear(self) -> int:
        """Remove every user. Return the number removed."""
        ...
