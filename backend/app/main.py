"""
OpinionPointer Backend - FastAPI Application

Tracks forecasters and their predictions, collects content from their
channels, and exposes market sentiment and admin health monitoring.
"""
import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.core.logging import setup_logging
from app.database.connections import get_mongo_client, close_connections
from app.database.registry import sync_registry, create_indexes
from app.routers import admin, auth, health, market
from app.services.bootstrap import initialize_services, shutdown_services

logger = logging.getLogger(__name__)


async def _autostart_services(delay: float) -> None:
    """Start background services once the server is accepting requests."""
    await asyncio.sleep(delay)
    try:
        await initialize_services()
    except Exception as e:
        logger.error(f"Failed to start background services: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
    - Sync database registry and create indexes
    - Schedule background services (health monitor, cron jobs)

    Shutdown:
    - Stop background services
    - Close all database connections
    """
    setup_logging()
    settings = get_settings()
    logger.info(f"Starting up OpinionPointer Backend ({settings.environment})...")

    try:
        client = await get_mongo_client()
        await sync_registry(client)
        await create_indexes(client)
        logger.info("Database registry synced and indexes created")
    except Exception as e:
        logger.warning(f"Database initialization warning: {e}")

    autostart = None
    if settings.should_autostart_services:
        autostart = asyncio.create_task(_autostart_services(settings.autostart_delay_seconds))

    yield

    logger.info("Shutting down OpinionPointer Backend...")
    if autostart is not None and not autostart.done():
        autostart.cancel()
    await shutdown_services()
    await close_connections()


# Create FastAPI application
app = FastAPI(
    title="OpinionPointer API",
    description="""
## OpinionPointer API

Tracks forecasters, collects their posts and rates calls against market mood.

### Features
- **Authentication**: JWT sessions with FREE / PREMIUM / ADMIN roles
- **Market sentiment**: Fear & Greed index with difficulty multipliers
- **Admin health**: Aggregated probe of database, jobs and channel collection
- **Background services**: Health monitoring and scheduled channel collection

### Authentication
Protected endpoints take the JWT token as a query parameter:
```
GET /auth/session?token=your_jwt_token
```

Obtain a token via `POST /auth/login`.
    """,
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:8501",  # Streamlit default
        "http://streamlit_frontend:8501",  # Docker network
        "http://localhost:3000",  # Development
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(market.router)
app.include_router(admin.router)


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "OpinionPointer API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
