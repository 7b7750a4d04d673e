"""
Liveness and readiness probes for the process supervisor and load balancer.
"""
from fastapi import APIRouter, status

from app.database.connections import get_mongo_client, get_redis_client, ping_mongo
from app.services.bootstrap import get_service_registry

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Liveness probe",
)
async def health_check():
    """Returns 200 while the API process is serving requests."""
    return {"status": "healthy"}


@router.get(
    "/health/ready",
    status_code=status.HTTP_200_OK,
    summary="Readiness probe with dependencies",
)
async def readiness_check():
    """
    Verify MongoDB and Redis are reachable.

    Always 200; ``status`` is ``degraded`` when a dependency is down so the
    supervisor does not restart the process over an external outage.
    """
    checks = {
        "api": "healthy",
        "mongodb": "unknown",
        "redis": "unknown",
    }
    mongo_latency = None

    try:
        client = await get_mongo_client()
        mongo_latency = await ping_mongo(client)
        checks["mongodb"] = "healthy"
    except Exception as e:
        checks["mongodb"] = f"unhealthy: {str(e)}"

    try:
        redis = await get_redis_client()
        await redis.ping()
        checks["redis"] = "healthy"
    except Exception as e:
        checks["redis"] = f"unhealthy: {str(e)}"

    all_healthy = all(v == "healthy" for v in checks.values())

    return {
        "status": "healthy" if all_healthy else "degraded",
        "checks": checks,
        "mongodb_latency_ms": mongo_latency,
        "background_services": get_service_registry().initialized,
    }
