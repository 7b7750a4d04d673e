"""
Market sentiment models (Fear & Greed index).
"""
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class MarketContext(str, Enum):
    """Five-level market mood classification."""
    EXTREME_FEAR = "EXTREME_FEAR"
    FEAR = "FEAR"
    NEUTRAL = "NEUTRAL"
    GREED = "GREED"
    EXTREME_GREED = "EXTREME_GREED"


class MarketSentimentSnapshot(BaseModel):
    """A single reading of the index as held by the sentiment service."""
    market_context: MarketContext
    sentiment_score: int = Field(..., ge=0, le=100)
    classification: str
    timestamp: datetime = Field(..., description="When the index value was published")
    last_updated: datetime = Field(..., description="When this process fetched it")
