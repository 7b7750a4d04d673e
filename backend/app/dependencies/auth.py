"""
Authentication dependencies for route protection.
"""
from datetime import datetime, timezone
from typing import Annotated

from fastapi import Depends, HTTPException, Query, status
from jose import JWTError

from app.core.security import decode_token
from app.database.connections import get_mongo_client
from app.database.databases import auth_db
from app.models.user import User, UserStatus
from app.schemas.auth import Session
from app.services.auth_service import AuthService, build_session


async def get_current_user(
    token: Annotated[str, Query(description="JWT access token")]
) -> User:
    """
    Dependency to get the current authenticated user from JWT token.

    Token is passed as query parameter: ?token=xxx

    Raises:
        HTTPException 401: If token is invalid, expired or the user is gone
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_token(token)
        user_id: str = payload.get("sub")
        if user_id is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    client = await get_mongo_client()
    auth_service = AuthService(client[auth_db.DB_NAME])

    user = await auth_service.get_user_by_id(user_id)

    if user is None:
        raise credentials_exception

    return user


async def get_current_active_user(
    current_user: Annotated[User, Depends(get_current_user)]
) -> User:
    """
    Dependency to ensure the current user is active (not disabled).

    Raises:
        HTTPException 403: If user account is disabled
    """
    if current_user.status == UserStatus.DISABLED:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled",
        )
    return current_user


async def get_current_session(
    token: Annotated[str, Query(description="JWT access token")],
    current_user: Annotated[User, Depends(get_current_active_user)],
) -> Session:
    """Session view of the authenticated user, expiring with the token."""
    exp = decode_token(token).get("exp")
    return build_session(current_user, datetime.fromtimestamp(exp, tz=timezone.utc))


# Type alias for cleaner route signatures
CurrentUser = Annotated[User, Depends(get_current_active_user)]
