"""
Application configuration loaded from environment variables.
"""
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Runtime
    environment: str = "development"
    log_level: str = "INFO"

    # MongoDB
    mongo_uri: str = "mongodb://mongodb:27017"

    # Redis
    redis_host: str = "redis"
    redis_port: int = 6379

    # JWT Configuration
    jwt_secret_key: str = "CHANGE_ME_IN_PRODUCTION_USE_STRONG_SECRET"
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 60 * 24

    # Market sentiment (Fear & Greed index)
    fear_greed_api_url: str = "https://api.alternative.me/fng/"
    sentiment_cache_minutes: int = 60

    # Background services
    autostart_services: Optional[bool] = None
    autostart_delay_seconds: float = 2.0
    health_monitor_interval_seconds: int = 60

    # External providers
    rapidapi_key: Optional[str] = None
    rapidapi_host: str = "twitter241.p.rapidapi.com"
    gemini_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    smtp_host: Optional[str] = None
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    stripe_secret_key: Optional[str] = None

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def should_autostart_services(self) -> bool:
        """Services start on their own outside of tests unless overridden."""
        if self.autostart_services is not None:
            return self.autostart_services
        return self.environment in ("production", "development")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
