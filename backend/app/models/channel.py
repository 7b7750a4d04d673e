"""
Channel models for the forecasts database.

A channel is an external source (X account, YouTube channel) attached to a
forecaster. Collection jobs record each attempt at pulling new content from it.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class ChannelType(str, Enum):
    """Supported external sources."""
    TWITTER = "TWITTER"
    YOUTUBE = "YOUTUBE"


class CollectionJobType(str, Enum):
    """Primary channels are scanned fully, secondary ones by keyword."""
    FULL_SCAN = "FULL_SCAN"
    KEYWORD_SCAN = "KEYWORD_SCAN"


class CollectionJobStatus(str, Enum):
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class CollectionSettings(BaseModel):
    """Per-channel collection schedule."""
    check_interval: int = Field(default=3600, ge=0, description="Seconds between collections")
    last_checked: Optional[datetime] = Field(None, description="Last collection attempt")
    enabled: bool = Field(default=True, description="Whether scheduled collection runs")


class ChannelKeyword(BaseModel):
    """Keyword used to filter posts from secondary channels."""
    keyword: str
    is_active: bool = True
    is_default: bool = False


class ForecasterChannel(BaseModel):
    """
    Channel document model for forecasts_db.channels collection.
    """
    id: Optional[str] = Field(None, alias="_id", description="MongoDB ObjectId as string")
    forecaster_id: str = Field(..., description="Owning forecaster")
    channel_type: ChannelType = Field(..., description="External source kind")
    channel_id: str = Field(..., description="Handle or ID on the external source")
    channel_name: Optional[str] = None
    channel_url: str = Field(..., description="Public URL of the channel")
    is_primary: bool = Field(default=False)
    is_active: bool = Field(default=True)
    collection_settings: CollectionSettings = Field(default_factory=CollectionSettings)
    keywords: list[ChannelKeyword] = Field(default=[])
    metadata: dict[str, Any] = Field(default={})
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        populate_by_name = True
        use_enum_values = True

    @property
    def active_keywords(self) -> list[str]:
        """Active keywords, defaults first."""
        keywords = [k for k in self.keywords if k.is_active]
        keywords.sort(key=lambda k: not k.is_default)
        return [k.keyword for k in keywords]


class ChannelCollectionJob(BaseModel):
    """
    Collection attempt document for forecasts_db.channel_collection_jobs.
    """
    id: Optional[str] = Field(None, alias="_id")
    channel_id: str
    job_type: CollectionJobType
    status: CollectionJobStatus = CollectionJobStatus.PENDING
    config: dict[str, Any] = Field(default={})
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    error: Optional[str] = None
    items_found: int = 0
    items_processed: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        populate_by_name = True
        use_enum_values = True


class CollectionResult(BaseModel):
    """Outcome of collecting from one channel."""
    success: bool
    items_collected: int = 0
    items_filtered: int = 0
    error: Optional[str] = None
