"""
Admin router: aggregated health check and background service bootstrap.
"""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.database.connections import get_mongo_client
from app.dependencies.roles import require_admin
from app.schemas.health import DatabaseStatus, HealthCheckFailure, HealthCheckResponse
from app.schemas.services import StartServicesResponse
from app.services.bootstrap import DECLARED_SERVICES, get_service_registry, initialize_services
from app.services.health_check import HealthCheckError, HealthCheckService, environment_info

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get(
    "/health-check",
    response_model=HealthCheckResponse,
    responses={500: {"model": HealthCheckFailure}},
    summary="Aggregated service health",
)
async def health_check():
    """
    Probe the database and background services.

    Unauthenticated so external monitors can poll it. Returns 500 with the
    services gathered so far when the database is unreachable.
    """
    registry = get_service_registry()
    services = []
    try:
        client = await get_mongo_client()
        checker = HealthCheckService(client, registry.get_monitor(), registry.cron)
        return await checker.run()
    except HealthCheckError as e:
        services = e.services
        details = str(e)
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        details = str(e)

    failure = HealthCheckFailure(
        details=details,
        timestamp=datetime.now(timezone.utc),
        services=services,
        database=DatabaseStatus(connected=False),
        environment=environment_info(),
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=failure.model_dump(mode="json"),
    )


@router.post(
    "/start-services",
    response_model=StartServicesResponse,
    summary="Start background services",
    dependencies=[Depends(require_admin())],
)
async def start_services():
    """
    Start health monitoring and cron jobs after a deployment.

    Safe to call repeatedly; services already running are left alone.
    """
    try:
        await initialize_services()
    except Exception as e:
        logger.error(f"Failed to start services: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to start services", "details": str(e)},
        )

    logger.info("Background services started")
    return StartServicesResponse(
        success=True,
        message="Background services started successfully",
        services=DECLARED_SERVICES,
    )
