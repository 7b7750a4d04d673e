"""
Global test fixtures for OpinionPointer.

This module provides shared fixtures for all tests including:
- Mock MongoDB (mongomock-motor)
- Mock Redis (fakeredis)
- User documents and admin/free users
- FastAPI test clients with database connections patched
"""

import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

# Background services must not start on their own during tests
os.environ.setdefault("ENVIRONMENT", "test")

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))


# =============================================================================
# MongoDB Fixtures (mongomock)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_mongo_client():
    """
    Create an async mock MongoDB client using mongomock-motor.
    """
    from mongomock_motor import AsyncMongoMockClient
    client = AsyncMongoMockClient()
    yield client
    client.close()


@pytest_asyncio.fixture
async def mock_auth_db(mock_async_mongo_client):
    """Provide mock auth_db database."""
    db = mock_async_mongo_client["auth_db"]
    await db.users.create_index("email", unique=True)
    yield db


@pytest_asyncio.fixture
async def mock_forecasts_db(mock_async_mongo_client):
    """Provide mock forecasts_db database."""
    db = mock_async_mongo_client["forecasts_db"]
    await db.contents.create_index(
        [("source_type", 1), ("source_id", 1), ("forecaster_id", 1)], unique=True
    )
    yield db


@pytest_asyncio.fixture
async def mock_system_db(mock_async_mongo_client):
    """Provide mock system_db database."""
    yield mock_async_mongo_client["system_db"]


# =============================================================================
# Redis Fixtures (fakeredis)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_redis():
    """
    Create an async mock Redis client using fakeredis.
    """
    import fakeredis.aioredis
    redis_client = fakeredis.aioredis.FakeRedis(decode_responses=True)
    yield redis_client
    await redis_client.flushall()
    await redis_client.aclose()


# =============================================================================
# User Fixtures
# =============================================================================

@pytest.fixture
def test_user_data() -> dict:
    """Registration payload."""
    return {
        "email": "testuser@example.com",
        "password": "SecurePassword123!",
        "password_confirm": "SecurePassword123!",
        "full_name": "Test User",
    }


@pytest.fixture
def mock_user() -> dict:
    """A complete user document as stored in MongoDB."""
    return {
        "_id": "507f1f77bcf86cd799439011",
        "email": "testuser@example.com",
        "hashed_password": "$2b$12$LQv3c1yqBWVHxkd0LHAkCOYz6TtxMQJqhN8/X4.qOZ3q7K9V6X6Hy",
        "role": "FREE",
        "full_name": "Test User",
        "subscription": {"tier": "FREE", "stripe_customer_id": None, "expires_at": None},
        "status": "active",
        "created_at": datetime.now(timezone.utc),
    }


@pytest.fixture
def free_user(mock_user):
    from app.models.user import User
    return User(**mock_user)


@pytest.fixture
def admin_user(mock_user):
    from app.models.user import User
    return User(**{
        **mock_user,
        "_id": "507f1f77bcf86cd799439012",
        "email": "admin@example.com",
        "role": "ADMIN",
        "full_name": "Site Admin",
    })


# =============================================================================
# FastAPI Test Client Fixtures
# =============================================================================

@pytest.fixture
def app():
    """
    The FastAPI app, with overrides cleared after each test.
    """
    from app.main import app
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app, mock_async_mongo_client) -> Generator:
    """
    TestClient whose startup hooks run against the mongomock client.

    Routes that resolve their own connections still need to be patched
    where they import ``get_mongo_client``.
    """
    async def _get_mongo():
        return mock_async_mongo_client

    with patch("app.main.get_mongo_client", side_effect=_get_mongo):
        with TestClient(app) as c:
            yield c


@pytest_asyncio.fixture
async def async_client(app):
    """
    Async client over ASGITransport (startup hooks are not run).
    """
    from httpx import AsyncClient, ASGITransport

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac


@pytest.fixture
def as_user(app):
    """
    Authenticate requests as the given user.

    Usage:
        def test_something(client, as_user, admin_user):
            as_user(admin_user)
            client.post("/api/admin/start-services?token=any")
    """
    from app.dependencies.auth import get_current_active_user

    def _as(user):
        app.dependency_overrides[get_current_active_user] = lambda: user

    return _as
