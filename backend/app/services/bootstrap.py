"""
Background service bootstrap.

Owns the process-wide health monitor and cron service. Initialization is
idempotent: the admin endpoint and the startup hook may both call it.
"""
import logging
from typing import Optional

from app.database.connections import get_mongo_client
from app.database.databases import forecasts_db, system_db
from app.services.channel_collection import ChannelCollectionService
from app.services.health_monitor import HealthMonitoringService
from app.services.market_sentiment import get_market_sentiment_service
from app.services.scheduler import CronService

logger = logging.getLogger(__name__)

# Subsystems reported by POST /api/admin/start-services
DECLARED_SERVICES = [
    "Health monitoring",
    "Cron jobs (X collection every 10 minutes)",
    "Market sentiment refresh (hourly)",
    "Job cleanup (daily)",
]


class ServiceRegistry:
    """Holds the long-running services of this process."""

    def __init__(self):
        self.monitor: Optional[HealthMonitoringService] = None
        self.cron: Optional[CronService] = None
        self.initialized = False

    def get_monitor(self) -> HealthMonitoringService:
        """The shared monitor, created on first use (not started)."""
        if self.monitor is None:
            self.monitor = HealthMonitoringService()
        return self.monitor

    async def get_cron(self) -> CronService:
        """The shared cron service, created on first use (not started)."""
        if self.cron is None:
            client = await get_mongo_client()
            forecasts = client[forecasts_db.DB_NAME]
            self.cron = CronService(
                system_db_instance=client[system_db.DB_NAME],
                forecasts_db_instance=forecasts,
                channel_collection=ChannelCollectionService(forecasts),
                market_sentiment=get_market_sentiment_service(),
            )
        return self.cron

    async def initialize(self) -> bool:
        """
        Start health monitoring and cron jobs.

        Returns:
            False if services were already running
        """
        if self.initialized:
            logger.warning("Services already initialized, skipping")
            return False

        logger.info("Initializing services...")
        self.get_monitor().start()
        logger.info("Health monitoring started")

        cron = await self.get_cron()
        cron.start()
        logger.info("Cron jobs started")

        self.initialized = True
        logger.info("All services initialized successfully")
        return True

    async def shutdown(self) -> None:
        """Stop whatever was started and forget initialization."""
        if self.monitor is not None:
            await self.monitor.stop()
        if self.cron is not None:
            await self.cron.stop()
            await self.cron.channel_collection.x_client.close()
        await get_market_sentiment_service().close()
        self.initialized = False


_registry = ServiceRegistry()


def get_service_registry() -> ServiceRegistry:
    return _registry


async def initialize_services() -> bool:
    return await _registry.initialize()


async def shutdown_services() -> None:
    await _registry.shutdown()
