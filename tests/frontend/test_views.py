"""
Tests for the HTML fragments the views render with unsafe_allow_html.

Text coming from the backend or third-party APIs must reach the page escaped.
"""
import pytest

from views.admin_health import service_line
from views.dashboard import sentiment_card_html


@pytest.fixture
def sentiment():
    return {
        "sentiment_score": 72,
        "classification": "Greed",
        "market_context": "GREED",
        "difficulty_multiplier": 1.2,
        "description": "Market shows greed",
        "emoji": "🤑",
    }


class TestSentimentCard:

    def test_renders_reading(self, sentiment):
        card = sentiment_card_html(sentiment, "Market sentiment")

        assert "Greed (72/100)" in card
        assert "Difficulty x1.2" in card
        assert "bg-green-100" in card

    def test_api_text_is_escaped(self, sentiment):
        sentiment["classification"] = "<script>alert(1)</script>"
        sentiment["description"] = 'Fear & "panic"'

        card = sentiment_card_html(sentiment, "Market sentiment")

        assert "<script>" not in card
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in card
        assert "Fear &amp; &quot;panic&quot;" in card


class TestServiceLine:

    def test_renders_name_badge_and_details(self):
        line = service_line({"name": "Job Execution", "status": "healthy", "details": "3 jobs in last hour"})

        assert line.startswith("**Job Execution**")
        assert ">healthy</span>" in line
        assert "3 jobs in last hour" in line

    def test_error_details_are_escaped(self):
        line = service_line({
            "name": "X Collection",
            "status": "unhealthy",
            "details": "<img src=x onerror=alert(1)>",
        })

        assert "<img" not in line
        assert "&lt;img src=x onerror=alert(1)&gt;" in line

    def test_missing_details(self):
        line = service_line({"name": "Cron Service", "status": "healthy", "details": None})

        assert line.endswith("<span class='text-gray-700'></span>")
