"""
Tests for the periodic health monitor.

External HTTP is served by httpx.MockTransport, Redis by fakeredis and
MongoDB by mongomock-motor.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from app.config import Settings
from app.services.health_monitor import HealthMonitoringService, ServiceHealth


def _http(status_code=200, error=None):
    def handler(request):
        if error is not None:
            raise error
        return httpx.Response(status_code, json={})
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _settings(**overrides):
    values = {
        "gemini_api_key": None,
        "openai_api_key": None,
        "smtp_host": None,
        "smtp_user": None,
        "smtp_password": None,
        "stripe_secret_key": None,
    }
    values.update(overrides)
    return Settings(**values)


def _mongo(user_count=1):
    client = MagicMock()
    users = client.__getitem__.return_value.__getitem__.return_value
    users.estimated_document_count = AsyncMock(return_value=user_count)
    return client


@pytest.fixture
def monitor(mock_async_mongo_client, mock_async_redis):
    return HealthMonitoringService(mock_async_mongo_client, mock_async_redis, _http())


@pytest.fixture
def db_monitor(mock_async_redis):
    return HealthMonitoringService(_mongo(), mock_async_redis, _http())


@pytest.mark.asyncio
class TestProbes:

    async def test_database_healthy(self, db_monitor):
        with patch("app.services.health_monitor.ping_mongo", AsyncMock(return_value=3)):
            status = await db_monitor.check_database()

        assert status.status == "healthy"
        assert db_monitor.services["database"] is status

    async def test_database_down(self, db_monitor):
        with patch("app.services.health_monitor.ping_mongo", AsyncMock(side_effect=Exception("refused"))):
            status = await db_monitor.check_database()

        assert status.status == "down"
        assert status.error == "refused"

    async def test_database_slow_is_degraded(self, db_monitor):
        with patch("app.services.health_monitor.ping_mongo", AsyncMock(return_value=1)), \
             patch("app.services.health_monitor._elapsed_ms", return_value=1500):
            status = await db_monitor.check_database()

        assert status.status == "degraded"
        assert status.response_time == 1500

    async def test_market_data_non_success_is_degraded(self, mock_async_mongo_client, mock_async_redis):
        monitor = HealthMonitoringService(mock_async_mongo_client, mock_async_redis, _http(503))

        status = await monitor.check_market_data_apis()

        assert status.status == "degraded"

    async def test_market_data_unreachable_is_down(self, mock_async_mongo_client, mock_async_redis):
        monitor = HealthMonitoringService(
            mock_async_mongo_client, mock_async_redis, _http(error=httpx.ConnectError("no route"))
        )

        status = await monitor.check_market_data_apis()

        assert status.status == "down"
        assert "no route" in status.error

    @pytest.mark.parametrize("keys,expected", [
        ({}, "down"),
        ({"gemini_api_key": "g"}, "degraded"),
        ({"openai_api_key": "o"}, "degraded"),
        ({"gemini_api_key": "g", "openai_api_key": "o"}, "healthy"),
    ])
    async def test_extraction_keys(self, monitor, keys, expected):
        with patch("app.services.health_monitor.get_settings", return_value=_settings(**keys)):
            status = await monitor.check_extraction_services()

        assert status.status == expected

    async def test_email_requires_full_smtp_config(self, monitor):
        partial = _settings(smtp_host="smtp.example.com", smtp_user="bot")
        full = _settings(smtp_host="smtp.example.com", smtp_user="bot", smtp_password="secret")

        with patch("app.services.health_monitor.get_settings", return_value=partial):
            assert (await monitor.check_email_service()).status == "down"
        with patch("app.services.health_monitor.get_settings", return_value=full):
            assert (await monitor.check_email_service()).status == "healthy"

    async def test_stripe_key_presence(self, monitor):
        with patch("app.services.health_monitor.get_settings", return_value=_settings()):
            assert (await monitor.check_stripe_service()).error == "Stripe not configured"

    async def test_cache_ping(self, monitor):
        status = await monitor.check_cache_service()

        assert status.status == "healthy"

    async def test_cache_down(self, mock_async_mongo_client):
        redis = AsyncMock()
        redis.ping = AsyncMock(side_effect=ConnectionError("redis gone"))
        monitor = HealthMonitoringService(mock_async_mongo_client, redis, _http())

        status = await monitor.check_cache_service()

        assert status.status == "down"
        assert status.error == "redis gone"


class TestOverallHealth:

    def _monitor(self, *statuses):
        monitor = HealthMonitoringService()
        for i, state in enumerate(statuses):
            monitor.services[f"svc{i}"] = ServiceHealth(name=f"Svc{i}", status=state)
        return monitor

    @pytest.mark.parametrize("statuses,expected", [
        (("healthy", "healthy"), "healthy"),
        (("healthy", "degraded"), "degraded"),
        (("degraded", "down"), "unhealthy"),
        ((), "healthy"),
    ])
    def test_overall_status(self, statuses, expected):
        assert self._monitor(*statuses).get_overall_health()["status"] == expected

    def test_stats_summary(self):
        stats = self._monitor("healthy", "degraded", "down", "healthy").get_stats()

        assert stats["overall_status"] == "unhealthy"
        assert stats["services_count"] == 4
        assert stats["healthy_count"] == 2
        assert stats["degraded_count"] == 1
        assert stats["down_count"] == 1
        assert isinstance(stats["uptime"], int)
        assert len(stats["memory_usage"].split(".")[1]) == 2

    def test_system_metrics(self):
        metrics = HealthMonitoringService().get_system_metrics()

        assert metrics.memory_used > 0
        assert 0 <= metrics.memory_percentage <= 100
        assert metrics.uptime >= 0


@pytest.mark.asyncio
class TestHealthEvents:

    async def test_check_all_services_records_event(self, monitor, mock_system_db):
        with patch("app.services.health_monitor.ping_mongo", AsyncMock(return_value=1)):
            health = await monitor.check_all_services()

        assert {s["name"] for s in health["services"]} == {
            "Database", "MarketData", "ExtractionServices", "EmailService", "StripeService", "CacheService",
        }
        event = await mock_system_db.events.find_one({"type": "HEALTH_CHECK"})
        assert event["entity_type"] == "SYSTEM"
        assert event["data"]["status"] == health["status"]

    async def test_start_and_stop(self, monitor):
        monitor.check_all_services = AsyncMock(return_value={})

        monitor.start(interval_seconds=60)
        # Second start is ignored while the loop is alive
        monitor.start(interval_seconds=60)
        await monitor.stop()

        assert monitor.running is False
        assert monitor._task is None


def _health_event(hours_ago, status="healthy", services=()):
    return {
        "type": "HEALTH_CHECK",
        "entity_type": "SYSTEM",
        "entity_id": "health",
        "data": {"status": status, "services": list(services)},
        "created_at": datetime.now(timezone.utc) - timedelta(hours=hours_ago),
    }


@pytest.mark.asyncio
class TestHealthHistory:

    @pytest.fixture(autouse=True)
    def _clock(self, mongo_clock):
        mongo_clock("app.services.health_monitor")

    async def test_history_is_windowed_and_newest_first(self, monitor, mock_system_db):
        await mock_system_db.events.insert_many([
            _health_event(5, status="degraded"),
            _health_event(48, status="unhealthy"),
            _health_event(1, status="healthy"),
            {"type": "USER_LOGIN", "created_at": datetime.now(timezone.utc)},
        ])

        history = await monitor.get_health_history(hours=24)

        assert [entry["status"] for entry in history] == ["healthy", "degraded"]
        assert history[0]["timestamp"] > history[1]["timestamp"]

    async def test_history_empty(self, monitor):
        assert await monitor.get_health_history() == []

    async def test_uptime_percentage(self, monitor, mock_system_db):
        await mock_system_db.events.insert_many([
            _health_event(1, services=[{"name": "Database", "status": "healthy"}]),
            _health_event(2, services=[{"name": "Database", "status": "healthy"}]),
            _health_event(3, services=[
                {"name": "Database", "status": "healthy"},
                {"name": "CacheService", "status": "down"},
            ]),
            _health_event(4, services=[{"name": "Database", "status": "down"}]),
            # Outside the 30 day window
            _health_event(24 * 40, services=[{"name": "Database", "status": "down"}]),
        ])

        assert await monitor.get_uptime("Database") == 75.0
        assert await monitor.get_uptime("CacheService") == 0.0

    async def test_uptime_without_checks_is_zero(self, monitor, mock_system_db):
        await mock_system_db.events.insert_one(
            _health_event(1, services=[{"name": "Database", "status": "healthy"}])
        )

        assert await monitor.get_uptime("StripeService") == 0.0
        assert await monitor.get_uptime("Database", days=0) == 0.0
