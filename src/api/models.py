"""Pydantic models for API request/response."""

from datetime import datetime
from typing import Annotated, Optional
from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, Field, model_validator

from domain.model.user import User


def _check_email(value: str) -> str:
    """Validate email syntax, keeping the address exactly as submitted.

    Logins are matched verbatim at signin, so the stored email must not be
    normalized here.
    """
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"value is not a valid email address: {e}")
    return value


Email = Annotated[str, AfterValidator(_check_email)]


class SignupRequest(BaseModel):
    """Request model for user registration. At least one login is required."""
    email: Optional[Email] = None
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, min_length=1, max_length=32)
    password: str = Field(..., min_length=1)

    @model_validator(mode='after')
    def require_login(self):
        if self.email is None and self.name is None and self.phone is None:
            raise ValueError("At least one of email, name or phone is required")
        return self


class SigninRequest(BaseModel):
    """Request model for login with any handle."""
    login: str = Field(..., min_length=1, description="Email, name or phone")
    password: str = Field(..., min_length=1)


class EditUserRequest(BaseModel):
    """Request model for a partial user update."""
    email: Optional[Email] = None
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, min_length=1, max_length=32)
    password: Optional[str] = Field(None, min_length=1)


class UserResponse(BaseModel):
    """Public view of a user. Never includes the password hash."""
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            phone=user.phone,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class AuthResponse(BaseModel):
    """Response model for signup and signin."""
    token: str
    user: UserResponse
