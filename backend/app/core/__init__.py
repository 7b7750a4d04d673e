"""
Core module - Security and logging utilities.
"""
from app.core.logging import setup_logging
from app.core.security import (
    hash_password,
    verify_password,
    create_access_token,
    decode_token,
)

__all__ = [
    "setup_logging",
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_token",
]
