"""
API Routers module.
"""
from app.routers import admin, auth, health, market

__all__ = ["admin", "auth", "health", "market"]
