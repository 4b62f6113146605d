"""Redis-backed cache, job queue, and rate-limit counters.

Every key is namespaced under ``rhodium:`` so the gateway can share a Redis
(or Redis-compatible) server with other services. Queues are Redis lists:
jobs are pushed on the left and popped from the right, giving FIFO order.
"""

from __future__ import annotations

from redis.asyncio import Redis
from redis.exceptions import RedisError

from rhodium.logging import get_logger, log_debug
from rhodium.storage.errors import CacheConnectionError

logger = get_logger(__name__)

KEY_PREFIX = "rhodium:"


def _text(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


class RedisCacheStore:
    """Cache store over an injected ``redis.asyncio.Redis`` client.

    Parameters
    ----------
    client
        Async Redis client. The store closes it in :meth:`aclose` only when
        ``owns_client`` is set.
    owns_client
        Whether :meth:`aclose` should close ``client``.

    """

    def __init__(self, client: Redis, *, owns_client: bool = False) -> None:
        """Wrap ``client``."""
        self._redis = client
        self._owns_client = owns_client

    @classmethod
    def from_url(cls, url: str) -> RedisCacheStore:
        """Build a store owning a client connected to ``url``."""
        return cls(Redis.from_url(url), owns_client=True)

    @staticmethod
    def _key(*parts: str) -> str:
        return KEY_PREFIX + ":".join(parts)

    async def aclose(self) -> None:
        """Close the client when the store owns it."""
        if self._owns_client:
            await self._redis.aclose()

    async def ping(self) -> None:
        """Send ``PING``."""
        try:
            await self._redis.ping()
        except RedisError as exc:
            raise CacheConnectionError.for_command("PING") from exc

    async def cache_compliance(self, key: str, value: str, ttl_s: int) -> None:
        """Store ``value`` under ``compliance:<key>`` expiring after ``ttl_s``."""
        log_debug(logger, "Caching compliance result: %s (TTL: %ss)", key, ttl_s)
        try:
            await self._redis.set(self._key("compliance", key), value, ex=ttl_s)
        except RedisError as exc:
            raise CacheConnectionError.for_command("SET") from exc

    async def get_compliance(self, key: str) -> str | None:
        """Return the cached value for ``key`` or ``None`` when absent."""
        try:
            value = await self._redis.get(self._key("compliance", key))
        except RedisError as exc:
            raise CacheConnectionError.for_command("GET") from exc
        return _text(value)

    async def enqueue_job(self, queue: str, job: str) -> None:
        """Push ``job`` onto ``queue``."""
        log_debug(logger, "Enqueueing job to %s", queue)
        try:
            await self._redis.lpush(self._key("queue", queue), job)
        except RedisError as exc:
            raise CacheConnectionError.for_command("LPUSH") from exc

    async def dequeue_job(self, queue: str) -> str | None:
        """Pop the oldest job from ``queue`` without blocking."""
        try:
            value = await self._redis.rpop(self._key("queue", queue))
        except RedisError as exc:
            raise CacheConnectionError.for_command("RPOP") from exc
        return _text(value)

    async def rate_limit_increment(self, key: str, window_s: int) -> int:
        """Increment a fixed-window counter and return its new value.

        The window starts with the first increment: the expiry is only set
        when the key does not already carry one.
        """
        redis_key = self._key("ratelimit", key)
        try:
            pipeline = self._redis.pipeline()
            pipeline.incr(redis_key)
            pipeline.expire(redis_key, window_s, nx=True)
            count, _ = await pipeline.execute()
        except RedisError as exc:
            raise CacheConnectionError.for_command("INCR") from exc
        return int(count)
