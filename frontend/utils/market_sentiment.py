"""
Market sentiment queries for the dashboard.

Caching is delegated to ``st.cache_data`` (ttl = staleness) and polling to
``st.fragment(run_every=...)`` in the views; this module only supplies the
parameters and a small retry loop around the API client.
"""
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable, MutableMapping, Optional

import streamlit as st

from config import (
    API_URL,
    MARKET_HEALTH_REFETCH_INTERVAL,
    QUERY_RETRY,
    SENTIMENT_REFETCH_INTERVAL,
    SENTIMENT_STALE_TIME,
)
from utils.api import APIClient

_api = APIClient(API_URL)


@dataclass(frozen=True)
class QueryOptions:
    retry: int = 0
    refetch_interval: Optional[timedelta] = None
    stale_time: Optional[timedelta] = None
    enabled: bool = True


SENTIMENT_QUERY = QueryOptions(
    retry=QUERY_RETRY,
    refetch_interval=SENTIMENT_REFETCH_INTERVAL,
    stale_time=SENTIMENT_STALE_TIME,
)
# Only fetched when the user asks for it
FRESH_SENTIMENT_QUERY = QueryOptions(retry=QUERY_RETRY, enabled=False)
MARKET_HEALTH_QUERY = QueryOptions(
    retry=QUERY_RETRY,
    refetch_interval=MARKET_HEALTH_REFETCH_INTERVAL,
    stale_time=MARKET_HEALTH_REFETCH_INTERVAL,
)


class QueryError(Exception):
    pass


@dataclass
class QueryResult:
    data: Optional[dict] = None
    error: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.error is None and self.data is not None


def _error_message(result: dict) -> str:
    if result.get("error"):
        return result["error"]
    data = result.get("data")
    if isinstance(data, dict) and data.get("detail"):
        return str(data["detail"])
    return f"HTTP {result.get('status')}"


def fetch_with_retry(fetch: Callable[[], dict], options: QueryOptions) -> dict:
    """Call ``fetch`` up to ``retry + 1`` times; raise QueryError if all fail."""
    message = "No attempt made"
    for _ in range(options.retry + 1):
        result = fetch()
        if result.get("status") == 200:
            return result["data"]
        message = _error_message(result)
    raise QueryError(message)


# Exceptions are not cached, so a failed fetch is retried on the next run
@st.cache_data(ttl=SENTIMENT_QUERY.stale_time, show_spinner=False)
def _cached_market_sentiment() -> dict:
    return fetch_with_retry(_api.get_market_sentiment, SENTIMENT_QUERY)


@st.cache_data(ttl=MARKET_HEALTH_QUERY.stale_time, show_spinner=False)
def _cached_market_health() -> dict:
    return fetch_with_retry(_api.get_market_health, MARKET_HEALTH_QUERY)


def _run(query: Callable[[], dict]) -> QueryResult:
    try:
        return QueryResult(data=query())
    except QueryError as e:
        return QueryResult(error=str(e))


def use_market_sentiment() -> QueryResult:
    """Current sentiment, cached for 15 minutes and polled every 30."""
    return _run(_cached_market_sentiment)


def use_market_health() -> QueryResult:
    """Sentiment source health, polled every 5 minutes."""
    return _run(_cached_market_health)


class ManualQuery:
    """A query that only runs when ``refetch()`` is called.

    The last result is kept in ``state`` so it survives reruns.
    """

    def __init__(
        self,
        key: str,
        fetch: Callable[[], dict],
        options: QueryOptions,
        state: Optional[MutableMapping[str, Any]] = None,
    ):
        self.key = key
        self.fetch = fetch
        self.options = options
        self.state = st.session_state if state is None else state

    @property
    def result(self) -> Optional[QueryResult]:
        return self.state.get(self.key)

    @property
    def data(self) -> Optional[dict]:
        return self.result.data if self.result else None

    @property
    def is_idle(self) -> bool:
        return self.result is None

    def refetch(self) -> QueryResult:
        result = _run(lambda: fetch_with_retry(self.fetch, self.options))
        self.state[self.key] = result
        return result


def use_market_sentiment_fresh(state: Optional[MutableMapping[str, Any]] = None) -> ManualQuery:
    """Cache-bypassing sentiment; nothing is fetched until ``refetch()``."""
    return ManualQuery("market_sentiment_fresh", _api.get_fresh_market_sentiment, FRESH_SENTIMENT_QUERY, state)
