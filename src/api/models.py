"""Pydantic models for API request/response."""

from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from domain.model.user import User


class UserResponse(BaseModel):
    """Public view of a user. Never carries the password hash."""
    id: str = Field(..., description="User ID (MongoDB _id)")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="User email")
    avatar: Optional[str] = Field(None, description="Server-relative avatar path")

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(id=user.id, name=user.name, email=user.email, avatar=user.avatar)


def _blank_to_none(v):
    """Treat an empty email like a missing one instead of an invalid address."""
    if isinstance(v, str) and not v.strip():
        return None
    return v


# Fields are optional so missing ones reach the service and get the
# uniform "All fields are required" message instead of a schema error.
class RegisterRequest(BaseModel):
    """Request model for user registration."""
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None

    @field_validator('email', mode='before')
    @classmethod
    def blank_email_to_none(cls, v):
        return _blank_to_none(v)


class LoginRequest(BaseModel):
    """Request model for user login."""
    email: Optional[EmailStr] = None
    password: Optional[str] = None

    @field_validator('email', mode='before')
    @classmethod
    def blank_email_to_none(cls, v):
        return _blank_to_none(v)


class ProfileUpdateRequest(BaseModel):
    """Request model for a partial profile update."""
    name: Optional[str] = None
    email: Optional[EmailStr] = None

    @field_validator('email', mode='before')
    @classmethod
    def blank_email_to_none(cls, v):
        return _blank_to_none(v)


class AuthResponse(BaseModel):
    """Response model for registration and login."""
    token: str
    user: UserResponse


class UserEnvelope(BaseModel):
    """Response model wrapping a single user."""
    user: UserResponse
