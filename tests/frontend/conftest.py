"""
Frontend test fixtures and mocks.

Mocks Streamlit session_state and API responses for isolated testing.
"""
import sys
from pathlib import Path

import pytest

# Views import ``config`` and ``utils`` as top-level modules
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "frontend"))


class MockSessionState(dict):
    """Mock st.session_state that behaves like both dict and attribute access."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.update({
            "is_authenticated": False,
            "token": None,
            "session": None,
            "nav_page": "Dashboard",
        })

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError:
            raise AttributeError(f"'SessionState' has no attribute '{name}'")

    def __setattr__(self, name, value):
        self[name] = value


@pytest.fixture
def mock_session_state():
    """Provide a mock session state for testing."""
    return MockSessionState()


@pytest.fixture
def authenticated_session_state():
    """Provide an authenticated mock session state."""
    state = MockSessionState()
    state.update({
        "is_authenticated": True,
        "token": "test-jwt-token",
        "session": {"user": {"id": "user-123", "email": "test@example.com", "role": "FREE"}},
    })
    return state


@pytest.fixture
def mock_api_responses():
    """Common API response fixtures."""
    return {
        "sentiment_ok": {
            "status": 200,
            "data": {
                "market_context": "GREED",
                "sentiment_score": 68,
                "classification": "Greed",
                "emoji": "🟢",
                "difficulty_multiplier": 1.3,
                "fresh": False,
            },
        },
        "server_error": {"status": 500, "data": {"detail": "Failed to fetch fresh market sentiment"}},
        "connection_error": {"status": 0, "error": "Cannot connect to backend"},
    }
