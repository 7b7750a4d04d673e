"""
Forecasts database configuration.
Stores forecasters, their data-collection channels and collected content.

Structure:
- forecasters: Tracked forecasters (people making predictions)
- channels: External sources (X accounts, YouTube channels) per forecaster
- channel_collection_jobs: One document per collection attempt on a channel
- contents: Collected posts, deduplicated per source and forecaster
- _metadata: Database metadata
"""
from motor.motor_asyncio import AsyncIOMotorDatabase

DB_NAME = "forecasts_db"


class Collections:
    """Collection names in forecasts_db."""
    FORECASTERS = "forecasters"
    CHANNELS = "channels"
    CHANNEL_COLLECTION_JOBS = "channel_collection_jobs"
    CONTENTS = "contents"
    METADATA = "_metadata"

    # Index definitions for each collection
    INDEXES = {
        "forecasters": [
            {"keys": [("slug", 1)], "unique": True},
        ],
        "channels": [
            {"keys": [("forecaster_id", 1)]},
            {"keys": [("is_active", 1)]},
            {"keys": [("channel_type", 1), ("channel_id", 1)]},
        ],
        "channel_collection_jobs": [
            {"keys": [("channel_id", 1)]},
            {"keys": [("created_at", -1)]},
        ],
        "contents": [
            {"keys": [("source_type", 1), ("source_id", 1), ("forecaster_id", 1)], "unique": True},
        ],
    }


async def create_forecast_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create indexes for forecasts database collections."""
    for collection_name, indexes in Collections.INDEXES.items():
        collection = db[collection_name]
        for index_def in indexes:
            keys = index_def["keys"]
            kwargs = {k: v for k, v in index_def.items() if k != "keys"}
            await collection.create_index(keys, **kwargs)


# Manifest for registry
DB_MANIFEST = {
    "db_name": DB_NAME,
    "purpose": "Forecasters, collection channels and collected content",
    "collections": [
        Collections.FORECASTERS,
        Collections.CHANNELS,
        Collections.CHANNEL_COLLECTION_JOBS,
        Collections.CONTENTS,
        Collections.METADATA,
    ],
    "access_level": "standard",
}
