"""
Market sentiment router.
"""
import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from app.models.sentiment import MarketContext
from app.schemas.market import CacheInfo, MarketHealthResponse, MarketSentimentResponse
from app.services.market_sentiment import MarketSentimentService, get_market_sentiment_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/market", tags=["Market"])

_PROCESS_STARTED = time.monotonic()


@router.get(
    "/sentiment",
    response_model=MarketSentimentResponse,
    summary="Current market sentiment",
)
async def get_sentiment(
    service: MarketSentimentService = Depends(get_market_sentiment_service),
):
    """
    Current Fear & Greed reading with display fields.

    Never fails: falls back to a neutral reading when the service errors.
    """
    try:
        snapshot = await service.get_current_market_context()
        return service.to_response(snapshot)
    except Exception as e:
        logger.error(f"Error getting market sentiment: {e}")
        now = datetime.now(timezone.utc)
        return MarketSentimentResponse(
            market_context=MarketContext.NEUTRAL,
            sentiment_score=50,
            classification="Neutral (Error)",
            timestamp=now,
            last_updated=now,
            emoji="⚪",
            description="Market sentiment unavailable",
            difficulty_multiplier=1.0,
            cache_info=CacheInfo(is_cached=False),
        )


@router.get(
    "/sentiment/fresh",
    response_model=MarketSentimentResponse,
    summary="Force a fresh sentiment fetch",
)
async def get_fresh_sentiment(
    service: MarketSentimentService = Depends(get_market_sentiment_service),
):
    """Bypass the cache and fetch a new reading."""
    try:
        snapshot = await service.fetch_fresh_market_context()
        return service.to_response(snapshot, include_cache_info=False, fresh=True)
    except Exception as e:
        logger.error(f"Error fetching fresh market sentiment: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch fresh market sentiment",
        )


@router.get(
    "/health",
    response_model=MarketHealthResponse,
    summary="Market data source status",
)
async def get_market_health(
    service: MarketSentimentService = Depends(get_market_sentiment_service),
):
    """Status of the sentiment data source and its cache."""
    return MarketHealthResponse(
        status="operational",
        services={
            "fear_greed_index": {
                "status": "operational",
                "api_url": service.api_url,
                "cache": service.get_cache_info().model_dump(mode="json"),
            },
        },
        last_check=datetime.now(timezone.utc),
        uptime=time.monotonic() - _PROCESS_STARTED,
    )
