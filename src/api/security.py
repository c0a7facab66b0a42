"""Bearer token authentication dependencies."""

import logging
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from api.dependencies import get_session_issuer, get_user_repo
from domain.model.errors import UnauthorizedError
from domain.model.user import User
from port.user_repository import UserRepository
from services.auth_service import authenticate
from services.session_service import SessionIssuer

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user_required(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    user_repo: UserRepository = Depends(get_user_repo),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> User:
    """Get current authenticated user. Raises 401 if not authenticated."""
    if not credentials:
        raise _unauthorized("Not authenticated")

    try:
        return authenticate(user_repo, issuer, credentials.credentials)
    except UnauthorizedError as e:
        logger.debug("Bearer token rejected", extra={"reason": str(e)})
        raise _unauthorized(str(e))
