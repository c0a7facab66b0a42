"""User service — create and edit users under the login uniqueness rule.

Uniqueness itself is enforced by the repository, atomically with the write.
This layer hashes passwords and shapes the change set.
"""

import logging

from domain.model.errors import NotFoundError, ValidationError
from domain.model.user import User, UserPatch
from port.password_hasher import PasswordHasher
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)


def create_user(
    repo: UserRepository,
    hasher: PasswordHasher,
    password: str,
    email: str | None = None,
    name: str | None = None,
    phone: str | None = None,
) -> str:
    """Create a user and return its id.

    Raises:
        ValidationError: no login field given
        LoginIsOccupied: email, name or phone already belongs to another user
    """
    if email is None and name is None and phone is None:
        raise ValidationError("At least one of email, name or phone is required")

    user = repo.create(
        password_hash=hasher.hash(password),
        email=email,
        name=name,
        phone=phone,
    )
    return user.id


def edit_user(
    repo: UserRepository,
    hasher: PasswordHasher,
    user_id: str,
    patch: UserPatch,
) -> User:
    """Apply a field-level patch to a user.

    Only fields set in the patch are written and re-checked for uniqueness.
    Either every change is applied or none is.

    Raises:
        NotFoundError: user does not exist
        LoginIsOccupied: a patched login belongs to a different user
    """
    if patch.is_empty():
        user = repo.get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")
        return user

    changes: dict = {field.value: value for field, value in patch.login_values().items()}
    if patch.password is not None:
        changes['password_hash'] = hasher.hash(patch.password)

    user = repo.update(user_id, changes)
    logger.info("User edited", extra={"userId": user_id, "fields": sorted(changes)})
    return user


def clear_users(repo: UserRepository) -> int:
    """Remove every user. Maintenance only."""
    count = repo.clear()
    logger.warning("All users removed", extra={"deleted": count})
    return count
