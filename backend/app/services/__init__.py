"""
Service layer for business logic.
"""
from app.services.auth_service import AuthService
from app.services.bootstrap import ServiceRegistry, initialize_services, shutdown_services
from app.services.channel_collection import ChannelCollectionService
from app.services.health_check import HealthCheckService, classify_overall
from app.services.health_monitor import HealthMonitoringService
from app.services.market_sentiment import MarketSentimentService, get_market_sentiment_service
from app.services.scheduler import CronService
from app.services.x_client import XClient

__all__ = [
    "AuthService",
    "ChannelCollectionService",
    "CronService",
    "HealthCheckService",
    "HealthMonitoringService",
    "MarketSentimentService",
    "ServiceRegistry",
    "XClient",
    "classify_overall",
    "get_market_sentiment_service",
    "initialize_services",
    "shutdown_services",
]
