"""
X (Twitter) API client via RapidAPI.
"""
import logging
from typing import Any, Optional

import httpx

from app.config import get_settings

logger = logging.getLogger(__name__)


class XClient:
    """Async client for the twitter241 RapidAPI endpoints."""

    def __init__(self, api_key: Optional[str] = None, host: Optional[str] = None):
        settings = get_settings()
        self.api_key = api_key or settings.rapidapi_key
        self.host = host or settings.rapidapi_host
        self.base_url = f"https://{self.host}/api/v2"
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client with connection pooling."""
        if not self.api_key:
            raise ValueError("RapidAPI key not configured")

        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=30.0,
                headers={
                    "X-RapidAPI-Key": self.api_key,
                    "X-RapidAPI-Host": self.host,
                },
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def get_user_id(self, username: str) -> str:
        """Resolve a handle (without @) to the numeric user id."""
        client = await self._get_client()
        response = await client.get(f"/users/by/username/{username.lstrip('@')}")
        response.raise_for_status()

        data = response.json().get("data")
        if not data:
            raise ValueError(f"X user not found: {username}")
        return str(data["id"])

    async def get_user_posts(self, user_id: str, max_results: int = 10) -> list[dict[str, Any]]:
        """
        Fetch a user's most recent posts.

        Returns:
            List of post dicts with at least ``id`` and ``text``
        """
        client = await self._get_client()
        response = await client.get(
            f"/users/{user_id}/tweets",
            params={"max_results": max_results},
        )
        response.raise_for_status()

        posts = response.json().get("data") or []
        logger.debug(f"Fetched {len(posts)} posts for user {user_id}")
        return posts
