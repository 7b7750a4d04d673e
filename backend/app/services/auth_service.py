"""
Authentication service for user management and sessions.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.security import hash_password, verify_password, create_access_token
from app.config import get_settings
from app.database.databases import auth_db
from app.models.user import User, UserRole, UserStatus, default_subscription
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    Session,
    SessionUser,
)

logger = logging.getLogger(__name__)


def build_session(user: User, expires: datetime) -> Session:
    """Project a user onto the session shape exposed to the UI."""
    return Session(
        user=SessionUser(
            id=user.id,
            email=user.email,
            role=user.role,
            full_name=user.full_name,
            subscription=user.subscription,
        ),
        expires=expires,
    )


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        """Initialize with auth database."""
        self.db = db
        self.users_collection = db[auth_db.Collections.USERS]
        self.settings = get_settings()

    async def register_user(self, request: RegisterRequest) -> RegisterResponse:
        """
        Register a new user.

        Raises:
            ValueError: If passwords don't match or email exists
        """
        if not request.passwords_match():
            raise ValueError("Passwords do not match")

        existing = await self.users_collection.find_one({"email": request.email})
        if existing:
            raise ValueError("Email already registered")

        user_doc = {
            "email": request.email,
            "hashed_password": hash_password(request.password),
            "role": UserRole.FREE.value,
            "full_name": request.full_name,
            "subscription": default_subscription(),
            "status": UserStatus.ACTIVE.value,
            "created_at": datetime.now(timezone.utc),
        }

        result = await self.users_collection.insert_one(user_doc)
        logger.info(f"Registered user {result.inserted_id}")

        return RegisterResponse(
            user_id=str(result.inserted_id),
            email=request.email,
            message="Registration successful"
        )

    async def login(self, request: LoginRequest) -> LoginResponse:
        """
        Authenticate user and open a session.

        Raises:
            ValueError: If credentials are invalid or the account is disabled
        """
        user = await self.get_user_by_email(request.email)

        if user is None or not verify_password(request.password, user.hashed_password):
            raise ValueError("Invalid email or password")

        if user.status == UserStatus.DISABLED.value:
            raise ValueError("Account is disabled")

        return self._issue_session(user)

    async def refresh_token(self, user_id: str) -> LoginResponse:
        """
        Re-issue a session token with the user's current role and subscription.

        Raises:
            ValueError: If user not found or disabled
        """
        user = await self.get_user_by_id(user_id)

        if user is None:
            raise ValueError("User not found")

        if user.status == UserStatus.DISABLED.value:
            raise ValueError("Account is disabled")

        return self._issue_session(user)

    def _issue_session(self, user: User) -> LoginResponse:
        expires_in = self.settings.jwt_access_token_expire_minutes * 60
        access_token = create_access_token(user, timedelta(seconds=expires_in))
        expires = datetime.now(timezone.utc) + timedelta(seconds=expires_in)

        return LoginResponse(
            access_token=access_token,
            token_type="bearer",
            expires_in=expires_in,
            session=build_session(user, expires),
        )

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID, or None if the ID is malformed or unknown."""
        try:
            user_doc = await self.users_collection.find_one({"_id": ObjectId(user_id)})
        except InvalidId:
            return None

        if not user_doc:
            return None

        user_doc["_id"] = str(user_doc["_id"])
        return User(**user_doc)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        user_doc = await self.users_collection.find_one({"email": email})

        if not user_doc:
            return None

        user_doc["_id"] = str(user_doc["_id"])
        return User(**user_doc)
