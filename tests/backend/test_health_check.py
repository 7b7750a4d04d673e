"""
Tests for the admin health check aggregator.

These tests verify:
- Overall classification over every combination of probe states
- Each probe is isolated: one failing probe does not stop the others
- Empty deployments (no channels, no recent jobs) report degraded
- Database failure yields 500 with connected=false
- Only GET is accepted
"""

from itertools import product
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.services.health_check import HealthCheckError, HealthCheckService, classify_overall

STATES = ["healthy", "unhealthy", "unknown"]


class TestClassifyOverall:

    @pytest.mark.parametrize("statuses", list(product(STATES, repeat=4)))
    def test_fold_over_all_probe_combinations(self, statuses):
        overall = classify_overall(statuses)

        if "unhealthy" in statuses:
            assert overall == "unhealthy"
        elif "unknown" in statuses:
            assert overall == "degraded"
        else:
            assert overall == "healthy"

    def test_no_probes_is_healthy(self):
        assert classify_overall([]) == "healthy"


@pytest.fixture
def checker_factory(mock_async_mongo_client, mock_monitor, running_cron, counting_collection):
    """Build a HealthCheckService with the database ping and counts stubbed."""
    def _make(jobs=3, channels=2, collections=5, cron=running_cron, monitor=mock_monitor):
        checker = HealthCheckService(mock_async_mongo_client, monitor, cron)
        checker.jobs = counting_collection(jobs)
        checker.channels = counting_collection(channels)
        checker.collection_jobs = counting_collection(collections)
        return checker
    return _make


@pytest.mark.asyncio
class TestHealthCheckService:

    async def test_all_probes_healthy(self, checker_factory):
        with patch("app.services.health_check.ping_mongo", AsyncMock(return_value=4)):
            result = await checker_factory().run()

        assert result.overall == "healthy"
        assert result.database.connected is True
        assert result.database.latency == 4
        assert [s.name for s in result.services] == [
            "Cron Service", "Health Monitoring", "Job Execution", "X Collection",
        ]
        by_name = {s.name: s for s in result.services}
        assert by_name["Health Monitoring"].details == "Monitoring 7 metrics"
        assert by_name["Job Execution"].details == "3 jobs in last hour"
        assert by_name["X Collection"].details == "2 active channels, 5 collections in 24h"

    async def test_no_channels_and_no_jobs_is_degraded(self, checker_factory):
        with patch("app.services.health_check.ping_mongo", AsyncMock(return_value=1)):
            result = await checker_factory(jobs=0, channels=0, collections=0).run()

        by_name = {s.name: s.status for s in result.services}
        assert by_name["Job Execution"] == "unknown"
        assert by_name["X Collection"] == "unknown"
        assert result.overall == "degraded"

    async def test_failing_probe_is_isolated(self, checker_factory):
        checker = checker_factory()
        checker.jobs.count_documents = AsyncMock(side_effect=Exception("jobs collection locked"))

        with patch("app.services.health_check.ping_mongo", AsyncMock(return_value=1)):
            result = await checker.run()

        by_name = {s.name: s for s in result.services}
        assert by_name["Job Execution"].status == "unhealthy"
        assert by_name["Job Execution"].details == "jobs collection locked"
        # Later probes still ran
        assert by_name["X Collection"].status == "healthy"
        assert result.overall == "unhealthy"

    async def test_monitor_failure_marks_only_that_service(self, checker_factory):
        monitor = MagicMock()
        monitor.get_stats.side_effect = RuntimeError("monitor crashed")

        with patch("app.services.health_check.ping_mongo", AsyncMock(return_value=1)):
            result = await checker_factory(monitor=monitor).run()

        by_name = {s.name: s.status for s in result.services}
        assert by_name["Health Monitoring"] == "unhealthy"
        assert by_name["Job Execution"] == "healthy"

    async def test_cron_not_started_in_this_worker_stays_healthy(self, checker_factory):
        with patch("app.services.health_check.ping_mongo", AsyncMock(return_value=1)):
            result = await checker_factory(cron=None).run()

        cron = result.services[0]
        assert cron.name == "Cron Service"
        assert cron.status == "healthy"
        assert "not started in this worker" in cron.details
        assert result.overall == "healthy"

    async def test_running_cron_reports_jobs_running(self, checker_factory):
        with patch("app.services.health_check.ping_mongo", AsyncMock(return_value=1)):
            result = await checker_factory().run()

        assert result.services[0].details == "Background jobs running"

    async def test_database_unreachable_raises_with_partial_services(self, checker_factory):
        with patch("app.services.health_check.ping_mongo", AsyncMock(side_effect=Exception("No servers found"))):
            with pytest.raises(HealthCheckError) as exc_info:
                await checker_factory().run()

        assert str(exc_info.value) == "No servers found"
        assert exc_info.value.services == []


class TestHealthCheckEndpoint:
    """Tests for /api/admin/health-check."""

    def test_get_returns_report(self, client, mock_get_mongo_client):
        with patch("app.routers.admin.get_mongo_client", mock_get_mongo_client), \
             patch("app.services.health_check.ping_mongo", AsyncMock(return_value=2)):
            response = client.get("/api/admin/health-check")

        assert response.status_code == 200
        data = response.json()
        # Fresh database: nothing collected yet
        assert data["overall"] == "degraded"
        assert data["database"] == {"connected": True, "latency": 2}
        assert data["environment"]["environment"] == "test"
        assert {s["name"] for s in data["services"]} == {
            "Cron Service", "Health Monitoring", "Job Execution", "X Collection",
        }

    def test_database_failure_returns_500(self, client, mock_get_mongo_client):
        with patch("app.routers.admin.get_mongo_client", mock_get_mongo_client), \
             patch("app.services.health_check.ping_mongo", AsyncMock(side_effect=Exception("connection refused"))):
            response = client.get("/api/admin/health-check")

        assert response.status_code == 500
        data = response.json()
        assert data["error"] == "Health check failed"
        assert data["details"] == "connection refused"
        assert data["database"]["connected"] is False
        assert data["services"] == []

    def test_client_failure_returns_500(self, client):
        with patch("app.routers.admin.get_mongo_client", AsyncMock(side_effect=Exception("bad uri"))):
            response = client.get("/api/admin/health-check")

        assert response.status_code == 500
        assert response.json()["database"]["connected"] is False

    @pytest.mark.parametrize("method", ["post", "put", "delete", "patch"])
    def test_non_get_is_rejected(self, client, method):
        response = getattr(client, method)("/api/admin/health-check")

        assert response.status_code == 405
