"""
Market sentiment request/response schemas.
"""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from app.models.sentiment import MarketContext


class CacheInfo(BaseModel):
    """State of the sentiment service's in-process cache."""
    is_cached: bool
    last_fetch: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class MarketSentimentResponse(BaseModel):
    """Sentiment snapshot enriched with display fields."""
    market_context: MarketContext
    sentiment_score: int = Field(..., ge=0, le=100)
    classification: str
    timestamp: datetime
    last_updated: datetime
    emoji: str
    description: str
    difficulty_multiplier: float
    cache_info: Optional[CacheInfo] = None
    fresh: bool = False


class MarketHealthResponse(BaseModel):
    """Status of the market data sources."""
    status: str
    services: dict[str, Any]
    last_check: datetime
    uptime: float = Field(..., description="Process uptime in seconds")
