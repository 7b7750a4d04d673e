"""
Backend-specific test fixtures and configuration.

These fixtures extend the global fixtures with helpers for testing the
admin routes, background services and channel collection.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "backend"))


# =============================================================================
# Database Override Fixtures
# =============================================================================

@pytest.fixture
def mock_get_mongo_client(mock_async_mongo_client):
    """
    Replacement for get_mongo_client returning the mongomock client.

    Usage in tests:
        with patch("app.routers.admin.get_mongo_client", mock_get_mongo_client):
            response = client.get("/api/admin/health-check")
    """
    async def _mock():
        return mock_async_mongo_client
    return _mock


class NaiveUTCDatetime(datetime):
    """datetime whose now() is naive UTC, the form mongomock stores dates in."""

    @classmethod
    def now(cls, tz=None):
        return datetime.now(timezone.utc).replace(tzinfo=None)


@pytest.fixture
def mongo_clock(monkeypatch):
    """
    Make a service module compute query bounds in naive UTC.

    mongomock cannot compare its stored naive dates against aware bounds.

    Usage in tests:
        mongo_clock("app.services.health_monitor")
    """
    def _use(module: str) -> None:
        monkeypatch.setattr(f"{module}.datetime", NaiveUTCDatetime)
    return _use


@pytest.fixture
def counting_collection():
    """Factory for collection stubs whose count_documents returns a fixed count."""
    def _make(count: int) -> MagicMock:
        collection = MagicMock()
        collection.count_documents = AsyncMock(return_value=count)
        return collection
    return _make


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def mock_monitor():
    """A health monitor reporting a clean bill of health."""
    monitor = MagicMock()
    monitor.get_stats.return_value = {
        "overall_status": "healthy",
        "services_count": 6,
        "healthy_count": 6,
        "degraded_count": 0,
        "down_count": 0,
        "uptime": 12,
        "memory_usage": "1.50",
    }
    return monitor


@pytest.fixture
def running_cron():
    cron = MagicMock()
    cron.running = True
    return cron


@pytest.fixture
def mock_x_client():
    """XClient with its network calls mocked."""
    client = MagicMock()
    client.get_user_id = AsyncMock(return_value="44196397")
    client.get_user_posts = AsyncMock(return_value=[])
    client.close = AsyncMock()
    return client


# =============================================================================
# Channel Fixtures
# =============================================================================

@pytest.fixture
def channel_doc():
    """Factory for forecasts_db.channels documents."""
    def _make(**overrides) -> dict:
        doc = {
            "forecaster_id": "forecaster-1",
            "channel_type": "TWITTER",
            "channel_id": "cryptoanalyst",
            "channel_name": "Crypto Analyst",
            "channel_url": "https://x.com/cryptoanalyst",
            "is_primary": True,
            "is_active": True,
            "collection_settings": {"check_interval": 3600, "last_checked": None, "enabled": True},
            "keywords": [],
            "metadata": {},
            "created_at": datetime(2025, 1, 1, tzinfo=timezone.utc),
        }
        doc.update(overrides)
        return doc
    return _make


# =============================================================================
# Response Assertion Helpers
# =============================================================================

@pytest.fixture
def assert_error_response():
    """Helper to assert error response structure."""
    def _assert(response, status_code: int, detail_contains: str = None):
        assert response.status_code == status_code
        data = response.json()
        assert "detail" in data
        if detail_contains:
            assert detail_contains.lower() in data["detail"].lower()
    return _assert
