"""Resolve a free-form login string to exactly one user."""

from domain.model.errors import AmbiguousLoginError, NotFoundError
from domain.model.user import LoginField, User
from port.user_repository import UserRepository


def resolve(repo: UserRepository, login: str) -> User:
    """Find the single user whose email, name or phone equals login.

    Each login field is queried on its own. Uniqueness holds per field only,
    so two different users may match through different fields; that case is
    reported instead of picking one.

    Raises:
        NotFoundError: no user holds this login
        AmbiguousLoginError: more than one user matches
    """
    matches: dict[str, User] = {}
    matched_fields: list[LoginField] = []

    for field in LoginField:
        user = repo.get_by_field(field, login)
        if user is None:
            continue
        matched_fields.append(field)
        matches.setdefault(user.id, user)

    if not matches:
        raise NotFoundError("No user with this login")
    if len(matches) > 1:
        raise AmbiguousLoginError(matched_fields)
    return next(iter(matches.values()))
