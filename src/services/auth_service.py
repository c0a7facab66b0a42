"""Auth service — signup, signin and token authentication.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import logging

from domain.model.errors import DomainError, PermissionDeniedError, UnauthorizedError
from domain.model.user import User
from port.password_hasher import PasswordHasher
from port.user_repository import UserRepository
from services.identity_resolver import resolve
from services.session_service import SessionIssuer
from services.user_service import create_user

logger = logging.getLogger(__name__)


def signup(
    repo: UserRepository,
    hasher: PasswordHasher,
    issuer: SessionIssuer,
    password: str,
    email: str | None = None,
    name: str | None = None,
    phone: str | None = None,
) -> tuple[User, str]:
    """Register a new user and issue their first access token.

    Raises:
        ValidationError: no login field given
        LoginIsOccupied: a login already belongs to another user
    """
    user_id = create_user(repo, hasher, password, email=email, name=name, phone=phone)
    user = repo.get_by_id(user_id)
    if not user:
        raise DomainError("Failed to load created user")

    logger.info("User signed up", extra={"userId": user_id})
    return user, issuer.issue(user_id)


def signin(
    repo: UserRepository,
    hasher: PasswordHasher,
    issuer: SessionIssuer,
    login: str,
    password: str,
) -> tuple[User, str]:
    """Authenticate with any login handle and a password.

    Raises:
        NotFoundError: login does not match any user
        AmbiguousLoginError: login matches several users
        PermissionDeniedError: password does not match
    """
    user = resolve(repo, login)
    if not hasher.verify(password, user.password_hash):
        logger.warning("Signin rejected: wrong password", extra={"userId": user.id})
        raise PermissionDeniedError("Wrong password")

    logger.info("User signed in", extra={"userId": user.id})
    return user, issuer.issue(user.id)


def authenticate(repo: UserRepository, issuer: SessionIssuer, token: str) -> User:
    """Return the user a bearer token belongs to.

    Raises:
        UnauthorizedError: token invalid or expired, or the user no longer exists
    """
    user_id = issuer.validate(token)
    user = repo.get_by_id(user_id)
    if not user:
        raise UnauthorizedError("User not found")
    return user
