"""
Tests for the dashboard's market sentiment queries.
"""
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from utils.market_sentiment import (
    FRESH_SENTIMENT_QUERY,
    MARKET_HEALTH_QUERY,
    SENTIMENT_QUERY,
    ManualQuery,
    QueryError,
    QueryOptions,
    fetch_with_retry,
    use_market_sentiment_fresh,
)


class TestQueryOptions:

    def test_sentiment_polling(self):
        assert SENTIMENT_QUERY.refetch_interval == timedelta(minutes=30)
        assert SENTIMENT_QUERY.stale_time == timedelta(minutes=15)
        assert SENTIMENT_QUERY.retry == 1

    def test_market_health_polling(self):
        assert MARKET_HEALTH_QUERY.refetch_interval == timedelta(minutes=5)

    def test_fresh_query_is_disabled(self):
        assert FRESH_SENTIMENT_QUERY.enabled is False
        assert FRESH_SENTIMENT_QUERY.refetch_interval is None


class TestFetchWithRetry:

    def test_success_returns_data(self, mock_api_responses):
        fetch = MagicMock(return_value=mock_api_responses["sentiment_ok"])

        data = fetch_with_retry(fetch, QueryOptions(retry=1))

        assert data["market_context"] == "GREED"
        assert fetch.call_count == 1

    def test_retries_once_then_succeeds(self, mock_api_responses):
        fetch = MagicMock(side_effect=[
            mock_api_responses["connection_error"],
            mock_api_responses["sentiment_ok"],
        ])

        data = fetch_with_retry(fetch, QueryOptions(retry=1))

        assert data["sentiment_score"] == 68
        assert fetch.call_count == 2

    def test_raises_after_all_attempts_fail(self, mock_api_responses):
        fetch = MagicMock(return_value=mock_api_responses["server_error"])

        with pytest.raises(QueryError, match="Failed to fetch fresh market sentiment"):
            fetch_with_retry(fetch, QueryOptions(retry=1))

        assert fetch.call_count == 2

    def test_connection_error_message(self, mock_api_responses):
        fetch = MagicMock(return_value=mock_api_responses["connection_error"])

        with pytest.raises(QueryError, match="Cannot connect to backend"):
            fetch_with_retry(fetch, QueryOptions())


class TestManualQuery:

    def test_nothing_fetched_until_refetch(self, mock_session_state, mock_api_responses):
        fetch = MagicMock(return_value=mock_api_responses["sentiment_ok"])

        query = ManualQuery("fresh", fetch, FRESH_SENTIMENT_QUERY, mock_session_state)

        fetch.assert_not_called()
        assert query.is_idle is True
        assert query.data is None

    def test_refetch_stores_result_across_reruns(self, mock_session_state, mock_api_responses):
        fetch = MagicMock(return_value=mock_api_responses["sentiment_ok"])
        ManualQuery("fresh", fetch, FRESH_SENTIMENT_QUERY, mock_session_state).refetch()

        # A later script run builds a new query over the same state
        query = ManualQuery("fresh", fetch, FRESH_SENTIMENT_QUERY, mock_session_state)

        assert query.is_idle is False
        assert query.result.is_success is True
        assert query.data["market_context"] == "GREED"

    def test_refetch_failure_is_captured(self, mock_session_state, mock_api_responses):
        fetch = MagicMock(return_value=mock_api_responses["server_error"])
        query = ManualQuery("fresh", fetch, FRESH_SENTIMENT_QUERY, mock_session_state)

        result = query.refetch()

        assert result.is_success is False
        assert result.error == "Failed to fetch fresh market sentiment"
        assert fetch.call_count == 2

    def test_fresh_sentiment_query_key(self, mock_session_state):
        query = use_market_sentiment_fresh(mock_session_state)

        assert query.key == "market_sentiment_fresh"
        assert query.options is FRESH_SENTIMENT_QUERY
        assert query.is_idle is True
