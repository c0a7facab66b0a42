"""Authentication routes (signup, signin)."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_password_hasher, get_session_issuer, get_user_repo
from api.models import AuthResponse, SigninRequest, SignupRequest, UserResponse
from domain.model.errors import (
    AmbiguousLoginError,
    LoginIsOccupied,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from port.password_hasher import PasswordHasher
from port.user_repository import UserRepository
from services import auth_service
from services.session_service import SessionIssuer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    request: SignupRequest,
    repo: UserRepository = Depends(get_user_repo),
    hasher: PasswordHasher = Depends(get_password_hasher),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    """Register a new user.

    Returns:
        Access token and user info

    Raises:
        HTTPException: 409 if a login is occupied, 400 if validation fails
    """
    try:
        user, token = auth_service.signup(
            repo,
            hasher,
            issuer,
            password=request.password,
            email=request.email,
            name=request.name,
            phone=request.phone,
        )
    except LoginIsOccupied as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": str(e), "field": e.field.value},
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return AuthResponse(token=token, user=UserResponse.from_domain(user))


@router.post("/signin", response_model=AuthResponse)
async def signin(
    request: SigninRequest,
    repo: UserRepository = Depends(get_user_repo),
    hasher: PasswordHasher = Depends(get_password_hasher),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    """Sign in with email, name or phone and return an access token.

    Raises:
        HTTPException: 400 if the login is unknown, 403 if the password is
            wrong, 409 if the login matches several accounts
    """
    try:
        user, token = auth_service.signin(repo, hasher, issuer, request.login, request.password)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid login or password",
        )
    except PermissionDeniedError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Wrong password")
    except AmbiguousLoginError as e:
        logger.warning("Ambiguous signin", extra={"fields": [f.value for f in e.fields]})
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return AuthResponse(token=token, user=UserResponse.from_domain(user))
