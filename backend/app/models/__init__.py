"""
Pydantic models for database documents and data structures.
"""
from app.models.user import User, UserRole, UserStatus
from app.models.channel import (
    ChannelCollectionJob,
    ChannelKeyword,
    ChannelType,
    CollectionJobStatus,
    CollectionJobType,
    CollectionResult,
    CollectionSettings,
    ForecasterChannel,
)
from app.models.job import Job, JobStatus
from app.models.sentiment import MarketContext, MarketSentimentSnapshot

__all__ = [
    "User",
    "UserRole",
    "UserStatus",
    "ChannelCollectionJob",
    "ChannelKeyword",
    "ChannelType",
    "CollectionJobStatus",
    "CollectionJobType",
    "CollectionResult",
    "CollectionSettings",
    "ForecasterChannel",
    "Job",
    "JobStatus",
    "MarketContext",
    "MarketSentimentSnapshot",
]
