"""Redis cache helpers - JSON round trip and graceful degradation."""

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from kalkyla.cache import redis_client


class FakeRedis:
    def __init__(self):
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, key):
        return self.data.get(key)

    async def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl

    async def delete(self, *keys):
        for key in keys:
            self.data.pop(key, None)


class DownRedis:
    async def _refuse(self, *args):
        raise RedisConnectionError("connection refused")

    get = setex = delete = _refuse


@pytest.mark.asyncio
async def test_json_values_are_cached(monkeypatch):
    fake = FakeRedis()
    monkeypatch.setattr(redis_client, "_redis", fake)

    assert await redis_client.cache_get_json("elprices") is None
    assert await redis_client.cache_set_json("elprices", {"SE3": {"quarter": 3}}, ttl_seconds=60) is True
    assert fake.ttls["elprices"] == 60
    assert await redis_client.cache_get_json("elprices") == {"SE3": {"quarter": 3}}

    assert await redis_client.cache_delete("elprices") is True
    assert await redis_client.cache_get_json("elprices") is None


@pytest.mark.asyncio
async def test_unreachable_redis_degrades_to_miss(monkeypatch):
    monkeypatch.setattr(redis_client, "_redis", DownRedis())

    assert await redis_client.cache_get_json("elprices") is None
    assert await redis_client.cache_set_json("elprices", {"SE3": None}) is False
    assert await redis_client.cache_delete("elprices") is False
