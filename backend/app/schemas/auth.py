"""
Authentication and session request/response schemas.

The session, user and JWT shapes all carry the same identity fields:
``id``, ``email``, ``role``, ``full_name`` and an opaque ``subscription``.
"""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, EmailStr, Field

from app.models.user import UserRole


class LoginRequest(BaseModel):
    """Login request body."""
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=8, description="User password")


class RegisterRequest(BaseModel):
    """Registration request body."""
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(
        ...,
        min_length=8,
        description="User password (min 8 characters)"
    )
    password_confirm: str = Field(..., description="Password confirmation")
    full_name: Optional[str] = Field(None, max_length=120, description="Display name")

    def passwords_match(self) -> bool:
        """Check if password and confirmation match."""
        return self.password == self.password_confirm


class RegisterResponse(BaseModel):
    """Registration response."""
    user_id: str = Field(..., description="Created user ID")
    email: str = Field(..., description="Registered email")
    message: str = Field(
        default="Registration successful",
        description="Success message"
    )


class SessionUser(BaseModel):
    """Identity exposed to the UI for the signed-in user."""
    id: str
    email: str
    role: UserRole
    full_name: Optional[str] = None
    subscription: Any = None


class Session(BaseModel):
    """Current session as returned by /auth/session."""
    user: SessionUser
    expires: datetime = Field(..., description="Session expiry (token exp)")


class LoginResponse(BaseModel):
    """Login response with JWT token and the resulting session."""
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Token expiration time in seconds")
    session: Session


class TokenRefreshResponse(BaseModel):
    """Token refresh response."""
    access_token: str = Field(..., description="New JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Token expiration time in seconds")


class TokenPayload(BaseModel):
    """Decoded JWT token payload."""
    sub: str = Field(..., description="Subject (user ID)")
    email: str
    role: UserRole
    full_name: Optional[str] = None
    subscription: Any = None
    exp: datetime = Field(..., description="Expiration time")
    iat: datetime = Field(..., description="Issued at time")
