"""Unit tests for CacheService with an injected (mocked) Redis client."""

import json
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import RedisError

from entitlements.core.config import get_settings
from entitlements.infrastructure.cache import CacheService


def _scan(keys: list[str]):
    async def scan_iter(match=None):
        for key in keys:
            yield key

    return scan_iter


@pytest.fixture
def redis_client() -> AsyncMock:
    client = AsyncMock()
    client.unlink.side_effect = lambda *keys: len(keys)
    return client


@pytest.fixture
def cache(redis_client) -> CacheService:
    return CacheService(redis_client=redis_client)


async def test_get_hit_decodes_json(cache, redis_client) -> None:
    redis_client.get.return_value = json.dumps(["campaigns_read"])
    assert await cache.get("permission:u1") == ["campaigns_read"]
    redis_client.get.assert_awaited_once_with("permission:u1")


async def test_get_miss(cache, redis_client) -> None:
    redis_client.get.return_value = None
    assert await cache.get("permission:u1") is None


async def test_set_uses_setex_with_ttl(cache, redis_client) -> None:
    assert await cache.set("permission:u1", ["cards_read"], ttl=15) is True
    redis_client.setex.assert_awaited_once_with("permission:u1", 15, '["cards_read"]')


async def test_set_defaults_to_permission_ttl(cache, redis_client) -> None:
    await cache.set("permission:u1", [])
    redis_client.setex.assert_awaited_once_with(
        "permission:u1", get_settings().cache_ttl_permissions, "[]"
    )


async def test_delete(cache, redis_client) -> None:
    assert await cache.delete("permission:u1") is True
    redis_client.delete.assert_awaited_once_with("permission:u1")


async def test_delete_pattern_unlinks_in_chunks(cache, redis_client) -> None:
    keys = [f"permission:u{i}" for i in range(501)]
    redis_client.scan_iter = _scan(keys)
    assert await cache.delete_pattern("permission:*") == 501
    calls = redis_client.unlink.await_args_list
    assert [len(c.args) for c in calls] == [500, 1]
    assert calls[1].args == ("permission:u500",)


async def test_delete_pattern_with_no_keys(cache, redis_client) -> None:
    redis_client.scan_iter = _scan([])
    assert await cache.delete_pattern("permission:*") == 0
    redis_client.unlink.assert_not_awaited()


async def test_redis_errors_degrade_to_miss(cache, redis_client) -> None:
    redis_client.get.side_effect = RedisError("down")
    redis_client.setex.side_effect = RedisError("down")
    redis_client.delete.side_effect = RedisError("down")
    assert await cache.get("permission:u1") is None
    assert await cache.set("permission:u1", []) is False
    assert await cache.delete("permission:u1") is False


async def test_unconnected_cache_is_unavailable() -> None:
    cache = CacheService()
    assert cache.is_available() is False
    assert await cache.get("permission:u1") is None
    assert await cache.set("permission:u1", []) is False
    assert await cache.delete_pattern("permission:*") == 0


async def test_disconnect_closes_client(cache, redis_client) -> None:
    assert cache.is_available() is True
    await cache.disconnect()
    redis_client.aclose.assert_awaited_once()
    assert cache.is_available() is False
