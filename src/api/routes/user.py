"""Current user routes."""

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_password_hasher, get_user_repo
from api.models import EditUserRequest, UserResponse
from api.security import get_current_user_required
from domain.model.errors import LoginIsOccupied, NotFoundError
from domain.model.user import User, UserPatch
from port.password_hasher import PasswordHasher
from port.user_repository import UserRepository
from services.user_service import edit_user

router = APIRouter(prefix="/user", tags=["user"])


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user_required)):
    """Get current authenticated user info."""
    return UserResponse.from_domain(current_user)


@router.patch("/me", response_model=UserResponse)
async def edit_me(
    request: EditUserRequest,
    current_user: User = Depends(get_current_user_required),
    repo: UserRepository = Depends(get_user_repo),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """Change login handles and/or password of the current user.

    Raises:
        HTTPException: 409 if a new login is occupied by another user
    """
    patch = UserPatch(
        email=request.email,
        name=request.name,
        phone=request.phone,
        password=request.password,
    )
    try:
        user = edit_user(repo, hasher, current_user.id, patch)
    except LoginIsOccupied as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": str(e), "field": e.field.value},
        )
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")

    return UserResponse.from_domain(user)
