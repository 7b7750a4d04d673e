import os
from datetime import timedelta

API_URL = os.getenv("API_URL", "http://localhost:8000")

APP_NAME = "OpinionPointer"

# Market sentiment polling
SENTIMENT_REFETCH_INTERVAL = timedelta(minutes=30)
SENTIMENT_STALE_TIME = timedelta(minutes=15)
MARKET_HEALTH_REFETCH_INTERVAL = timedelta(minutes=5)
QUERY_RETRY = 1
