"""Root test fixtures shared across all test types.

This conftest contains fixtures that can be used by both unit and integration tests.
Database-specific fixtures are in tests/integration/conftest.py.
"""

import os

# Settings are read at import time of the app, so the environment goes first
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-sparkhub-tests-0123456789")
os.environ.setdefault("DATABASE_SSL_MODE", "disable")

# ruff: noqa: E402 - Imports must be after env var setup
from collections.abc import AsyncGenerator

import pytest
from fakeredis import aioredis as fakeredis_aio
from redis.asyncio import Redis

from src.sparkhub.core import redis as redis_core
from src.sparkhub.core.config import get_settings
from src.sparkhub.core.locks import OwnerLocks, reset_owner_locks
from tests.helpers import RecordingSink

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()


# --- Notification Fixtures ---


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


# --- Owner Lock Fixtures ---


@pytest.fixture
def owner_locks() -> OwnerLocks:
    """In-process owner locks (no Redis) with a short wait time."""
    return OwnerLocks(wait_seconds=5.0)


@pytest.fixture(autouse=True)
def _reset_owner_lock_registry() -> None:
    reset_owner_locks()
    yield
    reset_owner_locks()


# --- Redis Test Fixtures (shared) ---


@pytest.fixture
async def fake_redis() -> AsyncGenerator[Redis]:
    """Provides a fakeredis client for testing.

    Returns an in-memory Redis implementation that behaves like
    a real Redis server but doesn't require external dependencies.
    """
    client = fakeredis_aio.FakeRedis(decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
async def mock_redis(fake_redis: Redis, monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[Redis]:
    """Patches get_redis() to return the fakeredis client."""
    redis_core.reset_redis_state()

    async def _get_fake_redis() -> Redis:
        return fake_redis

    monkeypatch.setattr("src.sparkhub.core.redis.get_redis", _get_fake_redis)
    yield fake_redis
    redis_core.reset_redis_state()


@pytest.fixture
async def mock_redis_unavailable(monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[None]:
    """Patches get_redis() to return None (simulates Redis unavailable)."""
    redis_core.reset_redis_state()

    async def _get_none() -> None:
        return None

    monkeypatch.setattr("src.sparkhub.core.redis.get_redis", _get_none)
    yield
    redis_core.reset_redis_state()
