"""
Health check response schemas.
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

ServiceState = Literal["healthy", "unhealthy", "unknown"]
OverallState = Literal["healthy", "degraded", "unhealthy"]


class ServiceStatus(BaseModel):
    """Result of a single probe."""
    name: str
    status: ServiceState
    details: Optional[str] = None
    last_check: datetime


class DatabaseStatus(BaseModel):
    connected: bool
    latency: Optional[int] = Field(None, description="Ping round-trip in milliseconds")


class EnvironmentInfo(BaseModel):
    environment: str
    platform: str


class HealthCheckResponse(BaseModel):
    """Aggregated admin health report."""
    overall: OverallState
    timestamp: datetime
    services: list[ServiceStatus]
    database: DatabaseStatus
    environment: EnvironmentInfo


class HealthCheckFailure(BaseModel):
    """Returned with a 500 when the check could not complete."""
    error: str = "Health check failed"
    details: Optional[str] = None
    timestamp: datetime
    services: list[ServiceStatus]
    database: DatabaseStatus
    environment: EnvironmentInfo
