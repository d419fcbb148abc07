"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import pytest
from datetime import datetime, timezone, timedelta
from typing import Optional
from unittest.mock import AsyncMock, MagicMock
import jwt  # PyJWT

from shared.config import Settings, get_settings
from shared.storage import InMemoryStore, reset_store_cache
from modules.auth.service import reset_session_manager
from modules.achievements.evaluator import reset_achievement_evaluator


# Test JWT secret (the client never verifies signatures)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"


def create_test_token(
    user_id: str = "test-user-123",
    expired: bool = False,
    now: Optional[datetime] = None,
) -> str:
    """
    Create a test JWT access token.

    Args:
        user_id: User ID to include in the token
        expired: If True, creates an expired token
        now: Reference time (defaults to the current time)

    Returns:
        JWT token string
    """
    now = now or datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "id": user_id,
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
    }
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


def make_user_payload(**overrides) -> dict:
    """Backend-shaped user document."""
    user = {
        "_id": "test-user-123",
        "username": "tester",
        "email": "test@example.com",
        "role": "creator",
        "isVerified": True,
        "posts": [],
        "subscriber": [],
        "subscribed": [],
    }
    user.update(overrides)
    return user


def make_auth_body(token: str = "access-token", refresh_token: str = "refresh-token", **user) -> dict:
    """Backend-shaped success body for login, register, and 2FA verification."""
    return {
        "status": "success",
        "token": token,
        "refreshToken": refresh_token,
        "data": {"user": make_user_payload(**user)},
    }


class FakeClock:
    """Controllable replacement for time.time."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset module singletons and cached settings before and after each test."""
    get_settings.cache_clear()
    reset_store_cache()
    reset_session_manager()
    reset_achievement_evaluator()
    yield
    get_settings.cache_clear()
    reset_store_cache()
    reset_session_manager()
    reset_achievement_evaluator()


@pytest.fixture
def store() -> InMemoryStore:
    """Empty in-memory key-value store."""
    return InMemoryStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    """Settings with the documented rate-limit intervals."""
    return Settings(
        login_min_interval_seconds=5,
        register_min_interval_seconds=30,
        logout_min_interval_seconds=5,
        user_refresh_min_interval_seconds=30,
    )


@pytest.fixture
def notifier() -> MagicMock:
    return MagicMock()


@pytest.fixture
def realtime() -> MagicMock:
    """Realtime connection double with async connect/disconnect."""
    connection = MagicMock()
    connection.connect = AsyncMock()
    connection.disconnect = AsyncMock()
    return connection
