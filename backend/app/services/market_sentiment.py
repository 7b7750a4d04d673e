"""
Market sentiment service backed by the Fear & Greed index.

The index (https://api.alternative.me/fng/) is public and needs no API key.
Readings are cached in-process; when the API is unreachable the service
serves the last good reading, or a neutral fallback if it never had one.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import httpx

from app.config import get_settings
from app.models.sentiment import MarketContext, MarketSentimentSnapshot
from app.schemas.market import CacheInfo, MarketSentimentResponse

logger = logging.getLogger(__name__)

USER_AGENT = "OpinionPointer-Analytics/1.0"

DIFFICULTY_MULTIPLIERS = {
    MarketContext.EXTREME_FEAR: 1.4,
    MarketContext.FEAR: 1.2,
    MarketContext.NEUTRAL: 1.0,
    MarketContext.GREED: 1.3,
    MarketContext.EXTREME_GREED: 1.5,
}

EMOJIS = {
    MarketContext.EXTREME_FEAR: "🔴",
    MarketContext.FEAR: "🟡",
    MarketContext.NEUTRAL: "⚪",
    MarketContext.GREED: "🟢",
    MarketContext.EXTREME_GREED: "🟢",
}

DESCRIPTIONS = {
    MarketContext.EXTREME_FEAR: "Extreme Fear - Market panic, oversold conditions",
    MarketContext.FEAR: "Fear - Caution dominates, selling pressure",
    MarketContext.NEUTRAL: "Neutral - Balanced market sentiment",
    MarketContext.GREED: "Greed - Optimism prevails, buying pressure",
    MarketContext.EXTREME_GREED: "Extreme Greed - Market euphoria, overbought conditions",
}


def map_score_to_market_context(score: int) -> MarketContext:
    """
    Map an index score (0-100) to a market context.

    0-24 extreme fear, 25-44 fear, 45-54 neutral, 55-74 greed, 75-100 extreme greed.
    """
    if score <= 24:
        return MarketContext.EXTREME_FEAR
    if score <= 44:
        return MarketContext.FEAR
    if score <= 54:
        return MarketContext.NEUTRAL
    if score <= 74:
        return MarketContext.GREED
    return MarketContext.EXTREME_GREED


def get_difficulty_multiplier(context: MarketContext) -> float:
    """Extreme moods make calls harder to get right."""
    return DIFFICULTY_MULTIPLIERS[MarketContext(context)]


def get_market_context_emoji(context: MarketContext) -> str:
    return EMOJIS[MarketContext(context)]


def get_market_context_description(context: MarketContext) -> str:
    return DESCRIPTIONS[MarketContext(context)]


class MarketSentimentService:
    """Cached client for the Fear & Greed index."""

    def __init__(self, api_url: Optional[str] = None, cache_duration: Optional[timedelta] = None):
        settings = get_settings()
        self.api_url = api_url or settings.fear_greed_api_url
        if cache_duration is None:
            cache_duration = timedelta(minutes=settings.sentiment_cache_minutes)
        self.cache_duration = cache_duration
        self._client: Optional[httpx.AsyncClient] = None
        self._cached: Optional[MarketSentimentSnapshot] = None
        self._last_fetch: Optional[datetime] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client with connection pooling."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=10.0,
                headers={"User-Agent": USER_AGENT},
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _cache_is_fresh(self) -> bool:
        if self._cached is None or self._last_fetch is None:
            return False
        return datetime.now(timezone.utc) - self._last_fetch < self.cache_duration

    async def _fetch_index(self) -> dict[str, Any]:
        """Fetch the latest raw index reading."""
        client = await self._get_client()
        response = await client.get(self.api_url)
        response.raise_for_status()

        data = response.json().get("data") or []
        if not data:
            raise ValueError("Invalid API response format")
        return data[0]

    async def get_current_market_context(self) -> MarketSentimentSnapshot:
        """
        Get the current market sentiment.

        Serves the cached reading while it is fresh. On API errors falls back
        to the stale cache, then to a neutral reading.
        """
        if self._cache_is_fresh():
            logger.debug(f"Using cached market context: {self._cached.market_context}")
            return self._cached

        try:
            logger.info("Fetching Fear & Greed index")
            raw = await self._fetch_index()
            score = int(raw["value"])
            now = datetime.now(timezone.utc)

            self._cached = MarketSentimentSnapshot(
                market_context=map_score_to_market_context(score),
                sentiment_score=score,
                classification=raw["value_classification"],
                timestamp=datetime.fromtimestamp(int(raw["timestamp"]), tz=timezone.utc),
                last_updated=now,
            )
            self._last_fetch = now

            logger.info(
                f"Updated market context: {self._cached.market_context.value} "
                f"(score {score}, {self._cached.classification})"
            )
            return self._cached

        except Exception as e:
            logger.error(f"Failed to fetch Fear & Greed index: {e}")

            if self._cached is not None:
                logger.warning("Using stale cached sentiment due to API error")
                return self._cached

            logger.warning("Using fallback neutral sentiment")
            now = datetime.now(timezone.utc)
            return MarketSentimentSnapshot(
                market_context=MarketContext.NEUTRAL,
                sentiment_score=50,
                classification="Neutral (API Error)",
                timestamp=now,
                last_updated=now,
            )

    async def fetch_fresh_market_context(self) -> MarketSentimentSnapshot:
        """Drop the cache and fetch a new reading."""
        self.clear_cache()
        return await self.get_current_market_context()

    def get_cache_info(self) -> CacheInfo:
        return CacheInfo(
            is_cached=self._cached is not None,
            last_fetch=self._last_fetch,
            expires_at=self._last_fetch + self.cache_duration if self._last_fetch else None,
        )

    def clear_cache(self) -> None:
        self._cached = None
        self._last_fetch = None
        logger.info("Market sentiment cache cleared")

    def to_response(
        self,
        snapshot: MarketSentimentSnapshot,
        include_cache_info: bool = True,
        fresh: bool = False,
    ) -> MarketSentimentResponse:
        """Enrich a snapshot with display fields."""
        context = snapshot.market_context
        return MarketSentimentResponse(
            market_context=context,
            sentiment_score=snapshot.sentiment_score,
            classification=snapshot.classification,
            timestamp=snapshot.timestamp,
            last_updated=snapshot.last_updated,
            emoji=get_market_context_emoji(context),
            description=get_market_context_description(context),
            difficulty_multiplier=get_difficulty_multiplier(context),
            cache_info=self.get_cache_info() if include_cache_info else None,
            fresh=fresh,
        )


# Singleton instance for shared use
_market_sentiment_service: Optional[MarketSentimentService] = None


def get_market_sentiment_service() -> MarketSentimentService:
    """Get shared MarketSentimentService instance."""
    global _market_sentiment_service
    if _market_sentiment_service is None:
        _market_sentiment_service = MarketSentimentService()
    return _market_sentiment_service
