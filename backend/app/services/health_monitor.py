"""
Periodic health monitoring of the platform's dependencies.

Each run checks the database, upstream market data APIs, extraction and
e-mail configuration, Stripe and the cache, then persists a HEALTH_CHECK
event in system_db.events so history and uptime can be computed later.
"""
import asyncio
import logging
import os
import resource
import sys
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Literal, Optional

import httpx
from motor.motor_asyncio import AsyncIOMotorClient
from redis.asyncio import Redis

from app.config import get_settings
from app.database.connections import get_mongo_client, get_redis_client, ping_mongo
from app.database.databases import auth_db, system_db

logger = logging.getLogger(__name__)

HealthState = Literal["healthy", "degraded", "down"]

BINANCE_PING_URL = "https://api.binance.com/api/v3/ping"
COINGECKO_PING_URL = "https://api.coingecko.com/api/v3/ping"

SLOW_DATABASE_MS = 1000
SLOW_MARKET_DATA_MS = 3000

HEALTH_CHECK_EVENT = "HEALTH_CHECK"


@dataclass
class ServiceHealth:
    """Latest probe result for one dependency."""
    name: str
    status: HealthState = "healthy"
    response_time: int = 0
    last_checked: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    error: Optional[str] = None


@dataclass
class SystemMetrics:
    cpu: float
    memory_used: int
    memory_total: int
    memory_percentage: float
    uptime: float
    timestamp: datetime


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _rss_bytes() -> int:
    """Peak resident set size of this process in bytes."""
    rss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # Linux reports kilobytes, macOS bytes
    return rss if sys.platform == "darwin" else rss * 1024


def _total_memory_bytes() -> int:
    try:
        return os.sysconf("SC_PAGE_SIZE") * os.sysconf("SC_PHYS_PAGES")
    except (ValueError, OSError, AttributeError):
        return 0


class HealthMonitoringService:
    """
    Checks platform dependencies on an interval and records the results.

    Connections are resolved lazily from app.database.connections unless
    explicit clients are passed in.
    """

    def __init__(
        self,
        mongo_client: Optional[AsyncIOMotorClient] = None,
        redis_client: Optional[Redis] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._mongo_client = mongo_client
        self._redis_client = redis_client
        self._http_client = http_client
        self.services: dict[str, ServiceHealth] = {}
        self.running = False
        self._task: Optional[asyncio.Task] = None
        self._started_at = time.monotonic()

    # ==================== Connections ====================

    async def _get_mongo(self) -> AsyncIOMotorClient:
        if self._mongo_client is None:
            self._mongo_client = await get_mongo_client()
        return self._mongo_client

    async def _get_redis(self) -> Redis:
        if self._redis_client is None:
            self._redis_client = await get_redis_client()
        return self._redis_client

    async def _get_http(self) -> httpx.AsyncClient:
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(timeout=10.0, follow_redirects=True)
        return self._http_client

    # ==================== Lifecycle ====================

    def start(self, interval_seconds: Optional[float] = None) -> None:
        """Start the monitoring loop on the running event loop."""
        if self._task is not None and not self._task.done():
            logger.warning("Health monitoring already running")
            return

        interval = interval_seconds or get_settings().health_monitor_interval_seconds
        self.running = True
        self._task = asyncio.create_task(self._run(interval))
        logger.info(f"Health monitoring started (every {interval}s)")

    async def stop(self) -> None:
        """Stop the monitoring loop and release the HTTP client."""
        self.running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        if self._http_client is not None and not self._http_client.is_closed:
            await self._http_client.aclose()
        logger.info("Health monitoring stopped")

    async def _run(self, interval: float) -> None:
        while self.running:
            try:
                await self.check_all_services()
                await asyncio.sleep(interval)
            except asyncio.CancelledError:
                logger.info("Health monitoring cancelled")
                break
            except Exception as e:
                logger.error(f"Error in health monitoring loop: {e}")
                await asyncio.sleep(interval)

    # ==================== Checks ====================

    async def check_all_services(self) -> dict[str, Any]:
        """Run every probe concurrently, then persist the combined result."""
        await asyncio.gather(
            self.check_database(),
            self.check_market_data_apis(),
            self.check_extraction_services(),
            self.check_email_service(),
            self.check_stripe_service(),
            self.check_cache_service(),
        )
        return await self.log_health_status()

    async def check_database(self) -> ServiceHealth:
        status = ServiceHealth(name="Database")
        start = time.perf_counter()
        try:
            client = await self._get_mongo()
            await ping_mongo(client)
            await client[auth_db.DB_NAME][auth_db.Collections.USERS].estimated_document_count()
            status.response_time = _elapsed_ms(start)
            if status.response_time > SLOW_DATABASE_MS:
                status.status = "degraded"
        except Exception as e:
            status.status = "down"
            status.error = str(e)
            status.response_time = _elapsed_ms(start)

        self.services["database"] = status
        return status

    async def check_market_data_apis(self) -> ServiceHealth:
        status = ServiceHealth(name="MarketData")
        start = time.perf_counter()
        try:
            client = await self._get_http()
            for url in (BINANCE_PING_URL, COINGECKO_PING_URL):
                response = await client.get(url)
                if not response.is_success:
                    status.status = "degraded"

            status.response_time = _elapsed_ms(start)
            if status.response_time > SLOW_MARKET_DATA_MS:
                status.status = "degraded"
        except Exception as e:
            status.status = "down"
            status.error = str(e)
            status.response_time = _elapsed_ms(start)

        self.services["market_data"] = status
        return status

    async def check_extraction_services(self) -> ServiceHealth:
        status = ServiceHealth(name="ExtractionServices")
        settings = get_settings()
        has_gemini = bool(settings.gemini_api_key)
        has_openai = bool(settings.openai_api_key)

        if not has_gemini and not has_openai:
            status.status = "down"
            status.error = "No extraction API keys configured"
        elif not has_gemini or not has_openai:
            status.status = "degraded"
            status.error = "Some extraction API keys missing"

        self.services["extraction"] = status
        return status

    async def check_email_service(self) -> ServiceHealth:
        status = ServiceHealth(name="EmailService")
        settings = get_settings()
        if not (settings.smtp_host and settings.smtp_user and settings.smtp_password):
            status.status = "down"
            status.error = "SMTP not configured"

        self.services["email"] = status
        return status

    async def check_stripe_service(self) -> ServiceHealth:
        status = ServiceHealth(name="StripeService")
        if not get_settings().stripe_secret_key:
            status.status = "down"
            status.error = "Stripe not configured"

        self.services["stripe"] = status
        return status

    async def check_cache_service(self) -> ServiceHealth:
        status = ServiceHealth(name="CacheService")
        start = time.perf_counter()
        try:
            redis = await self._get_redis()
            await redis.ping()
            status.response_time = _elapsed_ms(start)
        except Exception as e:
            status.status = "down"
            status.error = str(e)
            status.response_time = _elapsed_ms(start)

        self.services["cache"] = status
        return status

    # ==================== Reporting ====================

    def get_system_metrics(self) -> SystemMetrics:
        usage = resource.getrusage(resource.RUSAGE_SELF)
        used = _rss_bytes()
        total = _total_memory_bytes()
        return SystemMetrics(
            cpu=usage.ru_utime,
            memory_used=used,
            memory_total=total,
            memory_percentage=(used / total) * 100 if total else 0.0,
            uptime=time.monotonic() - self._started_at,
            timestamp=datetime.now(timezone.utc),
        )

    def get_overall_health(self) -> dict[str, Any]:
        """
        Combine the latest probe results.

        unhealthy if any dependency is down, degraded if any is degraded,
        healthy otherwise.
        """
        services = list(self.services.values())
        if any(s.status == "down" for s in services):
            overall = "unhealthy"
        elif any(s.status == "degraded" for s in services):
            overall = "degraded"
        else:
            overall = "healthy"

        return {
            "status": overall,
            "services": [asdict(s) for s in services],
            "metrics": asdict(self.get_system_metrics()),
        }

    async def log_health_status(self) -> dict[str, Any]:
        """Persist the current overall health as a system event."""
        health = self.get_overall_health()
        client = await self._get_mongo()
        events = client[system_db.DB_NAME][system_db.Collections.EVENTS]
        await events.insert_one({
            "type": HEALTH_CHECK_EVENT,
            "entity_type": "SYSTEM",
            "entity_id": "health",
            "data": health,
            "created_at": datetime.now(timezone.utc),
        })

        if health["status"] == "unhealthy":
            down = [s["name"] for s in health["services"] if s["status"] == "down"]
            logger.error(f"System health check failed: {', '.join(down)} down")
        return health

    async def get_health_history(self, hours: int = 24) -> list[dict[str, Any]]:
        """Recorded health checks, newest first."""
        since = datetime.now(timezone.utc) - timedelta(hours=hours)
        client = await self._get_mongo()
        events = client[system_db.DB_NAME][system_db.Collections.EVENTS]
        cursor = events.find(
            {"type": HEALTH_CHECK_EVENT, "created_at": {"$gte": since}},
        ).sort("created_at", -1)
        return [{"timestamp": doc["created_at"], **doc.get("data", {})} async for doc in cursor]

    async def get_uptime(self, service_name: str, days: int = 30) -> float:
        """Percentage of recorded checks in which a service was healthy."""
        since = datetime.now(timezone.utc) - timedelta(days=days)
        client = await self._get_mongo()
        events = client[system_db.DB_NAME][system_db.Collections.EVENTS]

        total = 0
        healthy = 0
        async for doc in events.find({"type": HEALTH_CHECK_EVENT, "created_at": {"$gte": since}}):
            for service in doc.get("data", {}).get("services", []):
                if service.get("name") == service_name:
                    total += 1
                    if service.get("status") == "healthy":
                        healthy += 1

        return (healthy / total) * 100 if total else 0.0

    def get_stats(self) -> dict[str, Any]:
        """Summary counts for the admin health check."""
        health = self.get_overall_health()
        statuses = [s["status"] for s in health["services"]]
        return {
            "overall_status": health["status"],
            "services_count": len(statuses),
            "healthy_count": statuses.count("healthy"),
            "degraded_count": statuses.count("degraded"),
            "down_count": statuses.count("down"),
            "uptime": int(health["metrics"]["uptime"] // 60),
            "memory_usage": f"{health['metrics']['memory_percentage']:.2f}",
        }
