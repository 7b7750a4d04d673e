"""
Database registry management.
Ensures all databases and collections are registered on startup.
"""
import logging
from datetime import datetime, timezone

from motor.motor_asyncio import AsyncIOMotorClient

from app.database.databases import auth_db, forecasts_db, system_db

logger = logging.getLogger(__name__)

# All database manifests
ALL_DB_MANIFESTS = [
    auth_db.DB_MANIFEST,
    forecasts_db.DB_MANIFEST,
    system_db.DB_MANIFEST,
]


async def sync_registry(client: AsyncIOMotorClient) -> None:
    """
    Synchronize the database registry on application startup.
    Ensures all databases are registered in system_db.db_registry.
    """
    sys_db = client[system_db.DB_NAME]
    registry_collection = sys_db[system_db.Collections.DB_REGISTRY]
    now = datetime.now(timezone.utc)

    for manifest in ALL_DB_MANIFESTS:
        db_name = manifest["db_name"]

        await registry_collection.update_one(
            {"_id": db_name},
            {
                "$set": {
                    "purpose": manifest["purpose"],
                    "collections": manifest["collections"],
                    "access_level": manifest["access_level"],
                    "schema_version": "1.0",
                    "updated_at": now,
                },
                "$setOnInsert": {
                    "created_at": now,
                }
            },
            upsert=True,
        )

        # Ensure _metadata collection exists in each database
        await client[db_name]["_metadata"].update_one(
            {"_id": "db_metadata"},
            {
                "$set": {
                    "db_name": db_name,
                    "last_updated_at": now,
                },
                "$setOnInsert": {
                    "created_at": now,
                }
            },
            upsert=True,
        )
    logger.info(f"Registered {len(ALL_DB_MANIFESTS)} databases")


async def create_indexes(client: AsyncIOMotorClient) -> None:
    """Create necessary indexes for all databases."""

    # Auth DB indexes
    auth_users = client[auth_db.DB_NAME][auth_db.Collections.USERS]
    await auth_users.create_index("email", unique=True)

    # Forecasts DB indexes
    await forecasts_db.create_forecast_indexes(client[forecasts_db.DB_NAME])

    # System DB indexes
    system = client[system_db.DB_NAME]
    await system[system_db.Collections.JOBS].create_index([("created_at", -1)])
    await system[system_db.Collections.JOBS].create_index([("status", 1), ("created_at", 1)])
    await system[system_db.Collections.EVENTS].create_index([("type", 1), ("created_at", -1)])
