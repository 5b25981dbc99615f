"""Per-owner exclusion scope for the supervision workflow.

Every read-then-write on an owner's idea and requests runs while holding the
owner's lock. Locks are keyed by owner id only, so different owners proceed in
parallel.

Inside one process an ``asyncio.Lock`` per owner serializes callers in arrival
order. When Redis is available a Redis lock with the same key is taken as well,
which extends the scope across worker processes.
"""

import asyncio
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from uuid import UUID

from redis.asyncio import Redis
from redis.exceptions import LockError, RedisError

from src.sparkhub.core.config import get_settings
from src.sparkhub.core.exceptions import OwnerBusyError
from src.sparkhub.core.logging import get_logger

logger = get_logger(__name__)

RedisProvider = Callable[[], Awaitable[Redis | None]]

OWNER_LOCK_PREFIX = "sparkhub:owner-lock"


@dataclass
class _LocalEntry:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    holders: int = 0


class OwnerLocks:
    """Registry of per-owner locks."""

    def __init__(
        self,
        redis_provider: RedisProvider | None = None,
        ttl_seconds: float = 30.0,
        wait_seconds: float = 10.0,
        key_prefix: str = OWNER_LOCK_PREFIX,
    ) -> None:
        self._entries: dict[str, _LocalEntry] = {}
        self._redis_provider = redis_provider
        self._ttl_seconds = ttl_seconds
        self._wait_seconds = wait_seconds
        self._key_prefix = key_prefix

    @property
    def active_owners(self) -> int:
        """Number of owners that currently hold or wait for a lock."""
        return len(self._entries)

    def redis_key(self, owner_id: UUID) -> str:
        return f"{self._key_prefix}:{owner_id}"

    @asynccontextmanager
    async def hold(self, owner_id: UUID) -> AsyncGenerator[None]:
        """Hold the exclusion scope of ``owner_id`` for the duration of the block.

        Raises:
            OwnerBusyError: If the lock could not be acquired within the wait time.
        """
        key = str(owner_id)
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = _LocalEntry()
        entry.holders += 1
        try:
            try:
                async with asyncio.timeout(self._wait_seconds):
                    await entry.lock.acquire()
            except TimeoutError as e:
                logger.warning("Owner lock wait timed out", owner_id=key, scope="local")
                raise OwnerBusyError(owner_id=key) from e
            try:
                async with self._hold_distributed(owner_id):
                    yield
            finally:
                entry.lock.release()
        finally:
            entry.holders -= 1
            if entry.holders == 0:
                self._entries.pop(key, None)

    @asynccontextmanager
    async def _hold_distributed(self, owner_id: UUID) -> AsyncGenerator[None]:
        redis = await self._redis_provider() if self._redis_provider else None
        if redis is None:
            yield
            return

        lock = redis.lock(
            self.redis_key(owner_id),
            timeout=self._ttl_seconds,
            blocking_timeout=self._wait_seconds,
        )
        try:
            acquired = await lock.acquire()
        except RedisError as e:
            logger.warning("Redis owner lock unavailable", owner_id=str(owner_id), error=str(e))
            raise OwnerBusyError(owner_id=str(owner_id)) from e
        if not acquired:
            logger.warning("Owner lock wait timed out", owner_id=str(owner_id), scope="redis")
            raise OwnerBusyError(owner_id=str(owner_id))
        try:
            yield
        finally:
            try:
                await lock.release()
            except LockError:
                # TTL expired while we held it; the next holder already owns the key
                logger.warning("Redis owner lock expired before release", owner_id=str(owner_id))
            except RedisError as e:
                # The block already ran; the key expires after the TTL
                logger.warning(
                    "Redis owner lock release failed", owner_id=str(owner_id), error=str(e)
                )


_owner_locks: OwnerLocks | None = None


async def _default_redis_provider() -> Redis | None:
    from src.sparkhub.core import redis as redis_core

    return await redis_core.get_redis()


def get_owner_locks() -> OwnerLocks:
    """Get the process-wide owner lock registry."""
    global _owner_locks
    if _owner_locks is None:
        settings = get_settings()
        _owner_locks = OwnerLocks(
            redis_provider=_default_redis_provider,
            ttl_seconds=settings.owner_lock_ttl_seconds,
            wait_seconds=settings.owner_lock_wait_seconds,
        )
    return _owner_locks


def reset_owner_locks() -> None:
    """Drop the registry. For tests only."""
    global _owner_locks
    _owner_locks = None
