"""
User model for authentication database.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, EmailStr, Field


class UserRole(str, Enum):
    """User role levels."""
    FREE = "FREE"
    PREMIUM = "PREMIUM"
    ADMIN = "ADMIN"


class UserStatus(str, Enum):
    """User account status."""
    ACTIVE = "active"
    DISABLED = "disabled"


def default_subscription() -> dict[str, Any]:
    """Subscription state given to every new account."""
    return {"tier": "FREE", "stripe_customer_id": None, "expires_at": None}


class User(BaseModel):
    """
    User document model for MongoDB auth_db.users collection.
    """
    id: Optional[str] = Field(None, alias="_id", description="MongoDB ObjectId as string")
    email: EmailStr = Field(..., description="Unique email address")
    hashed_password: str = Field(..., description="Bcrypt hashed password")
    role: UserRole = Field(default=UserRole.FREE, description="Access level")
    full_name: Optional[str] = Field(None, description="Display name")
    subscription: dict[str, Any] = Field(
        default_factory=default_subscription,
        description="Opaque billing state, owned by the payments integration"
    )
    status: UserStatus = Field(
        default=UserStatus.ACTIVE,
        description="Account status"
    )
    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Account creation timestamp"
    )

    class Config:
        populate_by_name = True
        use_enum_values = True

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value
