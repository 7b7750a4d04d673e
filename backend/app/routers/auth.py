"""
Authentication router for registration, login, token refresh and session.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from app.database.connections import get_mongo_client
from app.database.databases import auth_db
from app.dependencies.auth import get_current_active_user, get_current_session
from app.models.user import User
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    Session,
    TokenRefreshResponse,
)
from app.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])


async def get_auth_service() -> AuthService:
    """Dependency to get AuthService instance."""
    client = await get_mongo_client()
    db = client[auth_db.DB_NAME]
    return AuthService(db)


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
async def register(
    body: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Register a new account on the FREE tier.

    - **email**: Valid email address (must be unique)
    - **password**: Password (minimum 8 characters)
    - **password_confirm**: Must match password
    - **full_name**: Optional display name
    """
    try:
        return await auth_service.register_user(body)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Login and open a session",
)
async def login(
    body: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Authenticate with email and password.

    Returns the JWT token together with the session it encodes. Pass the
    token as the `token` query parameter to protected endpoints.
    """
    try:
        return await auth_service.login(body)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


@router.post(
    "/refresh",
    response_model=TokenRefreshResponse,
    summary="Refresh access token",
)
async def refresh_token(
    current_user: Annotated[User, Depends(get_current_active_user)],
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Re-issue the token, picking up role or subscription changes.

    Requires valid token as query parameter: `?token=xxx`
    """
    try:
        result = await auth_service.refresh_token(current_user.id)
        return TokenRefreshResponse(
            access_token=result.access_token,
            token_type=result.token_type,
            expires_in=result.expires_in,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )


@router.get(
    "/session",
    response_model=Session,
    summary="Get the current session",
)
async def get_session(
    session: Annotated[Session, Depends(get_current_session)],
):
    """
    Current user identity, role and subscription, plus session expiry.

    Requires valid token as query parameter: `?token=xxx`
    """
    return session
