"""
Request and response schemas for API endpoints.
"""
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    Session,
    SessionUser,
    TokenRefreshResponse,
    TokenPayload,
)
from app.schemas.health import (
    DatabaseStatus,
    EnvironmentInfo,
    HealthCheckFailure,
    HealthCheckResponse,
    ServiceStatus,
)
from app.schemas.market import CacheInfo, MarketHealthResponse, MarketSentimentResponse
from app.schemas.services import StartServicesResponse

__all__ = [
    # Auth
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "RegisterResponse",
    "Session",
    "SessionUser",
    "TokenRefreshResponse",
    "TokenPayload",
    # Health
    "DatabaseStatus",
    "EnvironmentInfo",
    "HealthCheckFailure",
    "HealthCheckResponse",
    "ServiceStatus",
    # Market
    "CacheInfo",
    "MarketHealthResponse",
    "MarketSentimentResponse",
    # Services
    "StartServicesResponse",
]
