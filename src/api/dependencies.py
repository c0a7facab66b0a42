import os

from fastapi import HTTPException

from adapter.clock.system_clock import SystemClock
from adapter.mongodb.connection import get_mongodb_client, DATABASE_NAME
from adapter.mongodb.user_repository import MongoUserRepository
from adapter.security.bcrypt_hasher import BCRYPT_ROUNDS, BcryptPasswordHasher
from port.clock import Clock
from port.password_hasher import PasswordHasher
from port.user_repository import UserRepository
from services.session_service import JWT_ALGORITHM, SessionIssuer

_system_clock = SystemClock()


def _get_db():
    """Get MongoDB database, raising 503 if unavailable."""
    client = get_mongodb_client()
    if client is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return client[DATABASE_NAME]


def get_user_repo() -> UserRepository:
    return MongoUserRepository(_get_db())


def get_password_hasher() -> PasswordHasher:
    return BcryptPasswordHasher(rounds=int(os.getenv("BCRYPT_ROUNDS", BCRYPT_ROUNDS)))


def get_clock() -> Clock:
    return _system_clock


def get_session_issuer() -> SessionIssuer:
    """Build the token issuer from the environment.

    Raises ValueError if JWT_SECRET_KEY is not set.
    """
    return SessionIssuer(
        secret_key=os.getenv("JWT_SECRET_KEY"),
        clock=get_clock(),
        algorithm=os.getenv("JWT_ALGORITHM", JWT_ALGORITHM),
    )
