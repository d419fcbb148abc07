"""
Shared infrastructure for the Hive client.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- storage: Durable key-value store for session state
- api_client: Authenticated HTTP client for the platform API
- exceptions: Base exception classes
- models: The User model shared by auth and achievements

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings, configure_logging
from .storage import IKeyValueStore, InMemoryStore, JsonFileStore, get_store, reset_store_cache
from .api_client import ApiClient
from .exceptions import (
    HiveError,
    ValidationError,
    AuthenticationError,
    RateLimitError,
    ExternalServiceError,
    ApiError,
    SessionExpiredError,
)
from .models import User, UserRole

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "IKeyValueStore",
    "InMemoryStore",
    "JsonFileStore",
    "get_store",
    "reset_store_cache",
    "ApiClient",
    "HiveError",
    "ValidationError",
    "AuthenticationError",
    "RateLimitError",
    "ExternalServiceError",
    "ApiError",
    "SessionExpiredError",
    "User",
    "UserRole",
]
