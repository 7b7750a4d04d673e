"""
In-process job scheduler.

Each job runs on its own asyncio task at a fixed interval. Every execution is
recorded in system_db.jobs so the admin health check can see recent activity.
"""
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database.databases import forecasts_db, system_db
from app.models.job import Job, JobStatus
from app.services.channel_collection import ChannelCollectionService
from app.services.market_sentiment import MarketSentimentService

logger = logging.getLogger(__name__)

RETENTION_DAYS = 30


@dataclass
class ScheduledJob:
    name: str
    interval_seconds: int
    handler: Callable[[], Awaitable[Any]]
    enabled: bool = True


class CronService:
    """Runs the platform's recurring background jobs."""

    def __init__(
        self,
        system_db_instance: AsyncIOMotorDatabase,
        forecasts_db_instance: AsyncIOMotorDatabase,
        channel_collection: ChannelCollectionService,
        market_sentiment: MarketSentimentService,
    ):
        self.job_log = system_db_instance[system_db.Collections.JOBS]
        self.events = system_db_instance[system_db.Collections.EVENTS]
        self.collection_jobs = forecasts_db_instance[forecasts_db.Collections.CHANNEL_COLLECTION_JOBS]
        self.channel_collection = channel_collection
        self.market_sentiment = market_sentiment
        self._tasks: dict[str, asyncio.Task] = {}

        self.jobs = [
            # Channels carry their own check interval, so poll often
            ScheduledJob("collect_channel_content", 10 * 60, self.collect_channel_content),
            ScheduledJob("refresh_market_sentiment", 60 * 60, self.refresh_market_sentiment),
            ScheduledJob("cleanup_old_jobs", 24 * 60 * 60, self.cleanup_old_jobs),
        ]

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._tasks.values())

    def start(self) -> None:
        """Schedule every enabled job on the running event loop."""
        logger.info("Starting cron service")
        for job in self.jobs:
            if not job.enabled or job.name in self._tasks:
                continue
            self._tasks[job.name] = asyncio.create_task(self._run_periodically(job))
            logger.info(f"Scheduled job: {job.name} (every {job.interval_seconds}s)")

    async def stop(self) -> None:
        """Cancel all scheduled jobs."""
        logger.info("Stopping cron service")
        for name, task in self._tasks.items():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            logger.info(f"Stopped job: {name}")
        self._tasks.clear()

    async def _run_periodically(self, job: ScheduledJob) -> None:
        while True:
            try:
                await asyncio.sleep(job.interval_seconds)
                await self.run_job(job)
            except asyncio.CancelledError:
                break

    async def run_job(self, job: ScheduledJob) -> Job:
        """Execute a job once and record the outcome."""
        logger.info(f"Running job: {job.name}")
        record = Job(type=job.name.upper(), created_at=datetime.now(timezone.utc))
        try:
            result = await job.handler()
            record.status = JobStatus.COMPLETED.value
            record.payload = result if isinstance(result, dict) else {}
            record.completed_at = datetime.now(timezone.utc)
        except Exception as e:
            logger.error(f"Job failed: {job.name}: {e}")
            record.status = JobStatus.FAILED.value
            record.error = str(e)
            record.payload = {"error": str(e)}

        await self._record(record)
        return record

    async def _record(self, record: Job) -> None:
        await self.job_log.insert_one(record.model_dump(exclude={"id"}))

    # ==================== Jobs ====================

    async def collect_channel_content(self) -> dict[str, Any]:
        return await self.channel_collection.process_scheduled_collection()

    async def refresh_market_sentiment(self) -> dict[str, Any]:
        snapshot = await self.market_sentiment.fetch_fresh_market_context()
        return {
            "market_context": snapshot.market_context.value,
            "sentiment_score": snapshot.sentiment_score,
        }

    async def cleanup_old_jobs(self) -> dict[str, Any]:
        """Drop finished jobs, events and collection jobs past retention."""
        cutoff = datetime.now(timezone.utc) - timedelta(days=RETENTION_DAYS)
        finished = {"$in": [JobStatus.COMPLETED.value, JobStatus.FAILED.value]}

        jobs = await self.job_log.delete_many({"created_at": {"$lt": cutoff}, "status": finished})
        events = await self.events.delete_many({"created_at": {"$lt": cutoff}})
        collections = await self.collection_jobs.delete_many({"created_at": {"$lt": cutoff}, "status": finished})

        logger.info(
            f"Cleanup removed {jobs.deleted_count} jobs, {events.deleted_count} events, "
            f"{collections.deleted_count} collection jobs"
        )
        return {
            "jobs": jobs.deleted_count,
            "events": events.deleted_count,
            "collection_jobs": collections.deleted_count,
        }

    # ==================== Manual triggers ====================

    async def execute_job(self, job_name: str) -> Job:
        """Run a scheduled job by name right now."""
        job = next((j for j in self.jobs if j.name == job_name), None)
        if job is None:
            raise ValueError(f"Job {job_name} not found")

        logger.info(f"Manually executing job: {job_name}")
        return await self.run_job(job)

    async def trigger_channel_collection(self, channel_id: str) -> dict[str, Any]:
        """Collect one channel immediately, e.g. right after it is created."""
        logger.info(f"Triggering immediate collection for channel {channel_id}")
        result = await self.channel_collection.collect_from_channel_immediate(channel_id)

        record = Job(
            type="CHANNEL_COLLECTION",
            status=JobStatus.COMPLETED if result.success else JobStatus.FAILED,
            payload={"channel_id": channel_id, **result.model_dump()},
            error=result.error,
            created_at=datetime.now(timezone.utc),
            completed_at=datetime.now(timezone.utc),
        )
        await self._record(record)
        return result.model_dump()
