"""
Channel-based content collection.

Walks the forecasters' channels that are due for a check, pulls their recent
posts and stores the new ones in forecasts_db.contents. Primary channels keep
every post; secondary channels keep only posts mentioning one of the
channel's active keywords.
"""
import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from app.database.databases import forecasts_db
from app.models.channel import (
    ChannelCollectionJob,
    ChannelType,
    CollectionJobStatus,
    CollectionJobType,
    CollectionResult,
    ForecasterChannel,
)
from app.services.x_client import XClient

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # MongoDB may return naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_channel_due(channel: ForecasterChannel, now: Optional[datetime] = None) -> bool:
    """A channel is due when never checked or its check interval has elapsed."""
    settings = channel.collection_settings
    if settings.last_checked is None:
        return True

    now = now or datetime.now(timezone.utc)
    elapsed = now - _as_utc(settings.last_checked)
    return elapsed >= timedelta(seconds=settings.check_interval)


def matches_keywords(text: str, keywords: list[str]) -> bool:
    """Case-insensitive substring match; no keywords means no filtering."""
    if not keywords:
        return True
    search_text = text.lower()
    return any(keyword.lower() in search_text for keyword in keywords)


class ChannelCollectionService:
    """
    Service for collecting content from forecaster channels.
    """

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        x_client: Optional[XClient] = None,
        channel_delay: float = 2.0,
        item_delay: float = 1.0,
    ):
        self.db = db
        self.channels = db[forecasts_db.Collections.CHANNELS]
        self.jobs = db[forecasts_db.Collections.CHANNEL_COLLECTION_JOBS]
        self.contents = db[forecasts_db.Collections.CONTENTS]
        self.x_client = x_client or XClient()
        self.channel_delay = channel_delay
        self.item_delay = item_delay

    # ==================== Selection ====================

    async def get_channels_due(self) -> list[ForecasterChannel]:
        """Active, enabled channels whose check interval has elapsed."""
        due = []
        cursor = self.channels.find({"is_active": True})
        async for doc in cursor:
            doc["_id"] = str(doc["_id"])
            channel = ForecasterChannel(**doc)
            if not channel.collection_settings.enabled:
                continue
            if is_channel_due(channel):
                due.append(channel)
        return due

    async def get_channel(self, channel_id: str) -> Optional[ForecasterChannel]:
        try:
            doc = await self.channels.find_one({"_id": ObjectId(channel_id)})
        except InvalidId:
            return None

        if doc is None:
            return None
        doc["_id"] = str(doc["_id"])
        return ForecasterChannel(**doc)

    # ==================== Collection ====================

    async def process_scheduled_collection(self) -> dict[str, Any]:
        """Collect from every due channel, pausing between channels."""
        logger.info("Starting scheduled channel collection")
        channels = await self.get_channels_due()
        logger.info(f"Found {len(channels)} channels due for collection")

        collected = 0
        failed = 0
        for i, channel in enumerate(channels):
            result = await self.collect_from_channel(channel)
            collected += result.items_collected
            if not result.success:
                failed += 1
            if self.channel_delay and i < len(channels) - 1:
                await asyncio.sleep(self.channel_delay)

        logger.info(f"Scheduled collection done: {collected} items from {len(channels)} channels")
        return {"channels": len(channels), "items_collected": collected, "failed": failed}

    async def collect_from_channel_immediate(self, channel_id: str) -> CollectionResult:
        """Collect from one channel right away, regardless of its schedule."""
        logger.info(f"Immediate collection for channel {channel_id}")
        channel = await self.get_channel(channel_id)
        if channel is None:
            return CollectionResult(success=False, error=f"Channel {channel_id} not found")
        return await self.collect_from_channel(channel)

    async def collect_from_channel(self, channel: ForecasterChannel) -> CollectionResult:
        """
        Run one collection job for a channel.

        The job document moves RUNNING -> COMPLETED/FAILED and the channel's
        last_checked is updated whatever the outcome.
        """
        now = datetime.now(timezone.utc)
        job = ChannelCollectionJob(
            channel_id=channel.id,
            job_type=CollectionJobType.FULL_SCAN if channel.is_primary else CollectionJobType.KEYWORD_SCAN,
            status=CollectionJobStatus.RUNNING,
            config={"keywords": channel.active_keywords, "is_primary": channel.is_primary},
            started_at=now,
            created_at=now,
        )
        job_doc = job.model_dump(exclude={"id"})
        insert = await self.jobs.insert_one(job_doc)

        try:
            if channel.channel_type == ChannelType.TWITTER:
                result = await self._collect_x_channel(channel)
            else:
                raise ValueError(f"Unsupported channel type: {channel.channel_type}")
        except Exception as e:
            logger.error(f"Collection failed for channel {channel.channel_id}: {e}")
            result = CollectionResult(success=False, error=str(e))

        await self.jobs.update_one(
            {"_id": insert.inserted_id},
            {"$set": {
                "status": (CollectionJobStatus.COMPLETED if result.success else CollectionJobStatus.FAILED).value,
                "completed_at": datetime.now(timezone.utc),
                "items_found": result.items_collected + result.items_filtered,
                "items_processed": result.items_collected,
                "error": result.error,
            }},
        )
        await self._update_last_checked(channel.id)

        if result.success:
            logger.info(
                f"Collection completed for {channel.channel_id}: "
                f"{result.items_collected} collected, {result.items_filtered} filtered"
            )
        return result

    async def _collect_x_channel(self, channel: ForecasterChannel) -> CollectionResult:
        user_id = await self.x_client.get_user_id(channel.channel_id)
        max_results = 10 if channel.is_primary else 20
        posts = await self.x_client.get_user_posts(user_id, max_results=max_results)

        keywords = channel.active_keywords
        collected = 0
        filtered = 0
        for post in posts:
            post_id = str(post["id"])
            if await self.is_duplicate_content(ChannelType.TWITTER.value, post_id, channel.forecaster_id):
                filtered += 1
                continue

            if not channel.is_primary and not matches_keywords(post.get("text", ""), keywords):
                filtered += 1
                continue

            try:
                await self._store_post(channel, post)
            except DuplicateKeyError:
                # Stored by a concurrent collection after the duplicate check
                logger.info(f"Post {post_id} for {channel.channel_id} already stored, skipping")
                filtered += 1
                continue
            collected += 1

            if self.item_delay:
                await asyncio.sleep(self.item_delay)

        return CollectionResult(success=True, items_collected=collected, items_filtered=filtered)

    async def is_duplicate_content(self, source_type: str, source_id: str, forecaster_id: str) -> bool:
        """Checks all history; a post is never stored twice for a forecaster."""
        existing = await self.contents.find_one({
            "source_type": source_type,
            "source_id": source_id,
            "forecaster_id": forecaster_id,
        })
        return existing is not None

    async def _store_post(self, channel: ForecasterChannel, post: dict[str, Any]) -> None:
        post_id = str(post["id"])
        await self.contents.insert_one({
            "source_type": ChannelType.TWITTER.value,
            "source_id": post_id,
            "forecaster_id": channel.forecaster_id,
            "channel_id": channel.id,
            "url": f"https://x.com/{channel.channel_id}/status/{post_id}",
            "text": post.get("text", ""),
            "published_at": post.get("created_at"),
            "collected_at": datetime.now(timezone.utc),
        })

    async def _update_last_checked(self, channel_id: str) -> None:
        try:
            query = {"_id": ObjectId(channel_id)}
        except InvalidId:
            query = {"_id": channel_id}
        await self.channels.update_one(
            query,
            {"$set": {"collection_settings.last_checked": datetime.now(timezone.utc)}},
        )

    # ==================== Stats ====================

    async def get_collection_stats(self, forecaster_id: Optional[str] = None) -> dict[str, Any]:
        """Channel, recent job and content counts, optionally for one forecaster."""
        channel_filter = {"forecaster_id": forecaster_id} if forecaster_id else {}
        since = datetime.now(timezone.utc) - timedelta(hours=24)

        job_filter: dict[str, Any] = {"created_at": {"$gte": since}}
        if forecaster_id:
            channel_ids = [str(doc["_id"]) async for doc in self.channels.find(channel_filter, {"_id": 1})]
            job_filter["channel_id"] = {"$in": channel_ids}

        total_channels = await self.channels.count_documents(channel_filter)
        active_channels = await self.channels.count_documents({**channel_filter, "is_active": True})
        recent_jobs = await self.jobs.count_documents(job_filter)
        total_content = await self.contents.count_documents(channel_filter)

        return {
            "channels": {"total": total_channels, "active": active_channels},
            "jobs": {"recent": recent_jobs},
            "content": {"total": total_content},
        }
