"""Redis-based cache service for effective permission sets.

Provides async Redis caching with TTL support. Only used when
permission_cache_enabled is set; the TTL bounds how long a revoked grant
can keep answering Allow if an invalidation is missed.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import redis.asyncio as redis

from entitlements.core.config import get_settings

logger = logging.getLogger(__name__)


class CacheService:
    """Async Redis cache service with TTL support.

    Uses entitlements.core.config for connection settings. Call connect() at
    startup and disconnect() at shutdown. Every operation degrades to a miss
    when Redis is unreachable.
    """

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        """Initialize cache service.

        Args:
            redis_client: Optional Redis client for testing or DI.
        """
        self.redis = redis_client
        self.settings = get_settings()
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish Redis connection. Call on app startup."""
        if self.redis is not None:
            return
        try:
            self.redis = redis.Redis(
                host=self.settings.redis_host,
                port=self.settings.redis_port,
                db=self.settings.redis_db,
                password=(
                    self.settings.redis_password.get_secret_value()
                    if self.settings.redis_password
                    else None
                ),
                decode_responses=True,
                socket_connect_timeout=5,
                socket_keepalive=True,
            )
            await self.redis.ping()
            self._connected = True
            logger.info(
                "Redis cache connected: %s:%s",
                self.settings.redis_host,
                self.settings.redis_port,
            )
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Redis connection failed: %s. Cache disabled.", e)
            self._connected = False
            self.redis = None

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis cache disconnected")

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._connected and self.redis is not None

    async def get(self, key: str) -> Any | None:
        """Return cached value (JSON-deserialized) or None if missing/unavailable."""
        if not self.is_available() or self.redis is None:
            return None
        try:
            value = await self.redis.get(key)
        except redis.RedisError:
            logger.exception("Cache get error for key %s", key)
            return None
        if value is None:
            logger.debug("Cache MISS: %s", key)
            return None
        logger.debug("Cache HIT: %s", key)
        return json.loads(value)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store value with TTL (defaults to cache_ttl_permissions). Returns True on success."""
        if not self.is_available() or self.redis is None:
            return False
        ttl = ttl or self.settings.cache_ttl_permissions
        try:
            await self.redis.setex(key, ttl, json.dumps(value))
        except redis.RedisError:
            logger.exception("Cache set error for key %s", key)
            return False
        logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
        return True

    async def delete(self, key: str) -> bool:
        """Remove key from cache. Returns True if deleted."""
        if not self.is_available() or self.redis is None:
            return False
        try:
            await self.redis.delete(key)
        except redis.RedisError:
            logger.exception("Cache delete error for key %s", key)
            return False
        logger.debug("Cache DELETE: %s", key)
        return True

    async def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching pattern using SCAN + batched UNLINK (non-blocking).

        Args:
            pattern: Redis SCAN match pattern (e.g. permission:*).

        Returns:
            Number of keys deleted.
        """
        if not self.is_available() or self.redis is None:
            return 0
        chunk_size = 500
        deleted = 0
        try:
            chunk: list[str] = []
            async for key in self.redis.scan_iter(match=pattern):
                chunk.append(key)
                if len(chunk) >= chunk_size:
                    deleted += await self.redis.unlink(*chunk)
                    chunk = []
            if chunk:
                deleted += await self.redis.unlink(*chunk)
        except redis.RedisError:
            logger.exception("Cache delete_pattern error for %s", pattern)
            return deleted
        if deleted > 0:
            logger.info("Cache INVALIDATE: %s (%s keys)", pattern, deleted)
        return deleted
