from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import redis.asyncio as aioredis
from redis.exceptions import LockError, RedisError

from chat_store.application.exceptions import StoreError

logger = logging.getLogger(__name__)


class RedisPairLock:
    """Distributed per-pair mutex built on the redis-py Lock."""

    def __init__(
        self,
        redis: aioredis.Redis,
        *,
        prefix: str,
        timeout: float,
        blocking_timeout: float,
    ) -> None:
        self._redis = redis
        self._prefix = prefix
        self._timeout = timeout
        self._blocking_timeout = blocking_timeout

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        name = f"{self._prefix}{key}"
        lock = self._redis.lock(
            name,
            timeout=self._timeout,
            blocking_timeout=self._blocking_timeout,
        )
        try:
            acquired = await lock.acquire()
        except RedisError as exc:
            raise StoreError(f"Could not acquire lock {name}") from exc
        if not acquired:
            raise StoreError(f"Timed out waiting for lock {name}")

        logger.debug("Acquired lock %s", name)
        try:
            yield
        finally:
            try:
                await lock.release()
            except LockError:
                # expired while held; the next holder already owns it
                logger.warning("Lock %s expired before release", name)
