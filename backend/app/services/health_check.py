"""
Admin health check aggregator.

Runs a fixed sequence of probes against the database and the background
services. Every probe is isolated: a failing probe becomes an ``unhealthy``
entry and the remaining probes still run. The overall state is folded from
the individual entries by ``classify_overall``.
"""
import logging
import sys
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Iterable, Optional

from motor.motor_asyncio import AsyncIOMotorClient

from app.config import get_settings
from app.database.connections import ping_mongo
from app.database.databases import forecasts_db, system_db
from app.schemas.health import (
    DatabaseStatus,
    EnvironmentInfo,
    HealthCheckResponse,
    OverallState,
    ServiceStatus,
)
from app.services.health_monitor import HealthMonitoringService
from app.services.scheduler import CronService

logger = logging.getLogger(__name__)


class HealthCheckError(Exception):
    """Raised when the check cannot complete; carries what was gathered so far."""

    def __init__(self, message: str, services: list[ServiceStatus]):
        super().__init__(message)
        self.services = services


def classify_overall(statuses: Iterable[str]) -> OverallState:
    """
    Fold probe states into one.

    unhealthy if any probe is unhealthy, else degraded if any is unknown,
    else healthy.
    """
    statuses = list(statuses)
    if "unhealthy" in statuses:
        return "unhealthy"
    if "unknown" in statuses:
        return "degraded"
    return "healthy"


def environment_info() -> EnvironmentInfo:
    return EnvironmentInfo(environment=get_settings().environment, platform=sys.platform)


class HealthCheckService:
    """Sequential probes over the database and background services."""

    def __init__(
        self,
        client: AsyncIOMotorClient,
        monitor: HealthMonitoringService,
        cron: Optional[CronService] = None,
    ):
        self.client = client
        self.monitor = monitor
        self.cron = cron
        self.jobs = client[system_db.DB_NAME][system_db.Collections.JOBS]
        self.channels = client[forecasts_db.DB_NAME][forecasts_db.Collections.CHANNELS]
        self.collection_jobs = client[forecasts_db.DB_NAME][forecasts_db.Collections.CHANNEL_COLLECTION_JOBS]

    async def run(self) -> HealthCheckResponse:
        """
        Run all probes.

        Raises:
            HealthCheckError: If the database cannot be reached
        """
        timestamp = datetime.now(timezone.utc)
        services: list[ServiceStatus] = []

        try:
            latency = await ping_mongo(self.client)
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            raise HealthCheckError(str(e), services) from e

        services.append(self._cron_status(timestamp))

        probes: list[tuple[str, Callable[[datetime], Awaitable[ServiceStatus]]]] = [
            ("Health Monitoring", self._health_monitoring),
            ("Job Execution", self._job_execution),
            ("X Collection", self._x_collection),
        ]
        for name, probe in probes:
            try:
                services.append(await probe(timestamp))
            except Exception as e:
                logger.warning(f"Probe '{name}' failed: {e}")
                services.append(ServiceStatus(
                    name=name, status="unhealthy", details=str(e), last_check=timestamp,
                ))

        return HealthCheckResponse(
            overall=classify_overall(s.status for s in services),
            timestamp=timestamp,
            services=services,
            database=DatabaseStatus(connected=True, latency=latency),
            environment=environment_info(),
        )

    # ==================== Probes ====================

    def _cron_status(self, timestamp: datetime) -> ServiceStatus:
        # Jobs may run in another worker; activity is covered by Job Execution
        details = "Background jobs running"
        if self.cron is None or not self.cron.running:
            details = "Background jobs running (scheduler not started in this worker)"
        return ServiceStatus(
            name="Cron Service", status="healthy", details=details, last_check=timestamp,
        )

    async def _health_monitoring(self, timestamp: datetime) -> ServiceStatus:
        stats = self.monitor.get_stats()
        return ServiceStatus(
            name="Health Monitoring",
            status="healthy",
            details=f"Monitoring {len(stats)} metrics",
            last_check=timestamp,
        )

    async def _job_execution(self, timestamp: datetime) -> ServiceStatus:
        since = timestamp - timedelta(hours=1)
        recent_jobs = await self.jobs.count_documents({"created_at": {"$gte": since}})
        return ServiceStatus(
            name="Job Execution",
            status="healthy" if recent_jobs > 0 else "unknown",
            details=f"{recent_jobs} jobs in last hour",
            last_check=timestamp,
        )

    async def _x_collection(self, timestamp: datetime) -> ServiceStatus:
        active_channels = await self.channels.count_documents({"is_active": True})
        since = timestamp - timedelta(hours=24)
        recent_collections = await self.collection_jobs.count_documents({"created_at": {"$gte": since}})
        return ServiceStatus(
            name="X Collection",
            status="healthy" if active_channels > 0 else "unknown",
            details=f"{active_channels} active channels, {recent_collections} collections in 24h",
            last_check=timestamp,
        )
