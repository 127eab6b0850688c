"""Cache: optional Redis service for effective permission sets."""

from entitlements.infrastructure.cache.redis_cache import CacheService

__all__ = ["CacheService"]
