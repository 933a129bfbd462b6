import asyncio
import fnmatch

import pytest

from tabulator.services.base import CacheError
from tabulator.services.cache import RedisService


class _FakeAsyncRedis:
    def __init__(self):
        self.store = {}
        self.expiry = {}
        self.closed = False

    async def ping(self):
        return True

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value):
        self.store[key] = value
        return True

    async def setex(self, key, ttl, value):
        self.store[key] = value
        self.expiry[key] = ttl
        return True

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
        return removed

    async def scan_iter(self, match=None):
        for key in list(self.store):
            if match is None or fnmatch.fnmatch(key, match):
                yield key

    async def aclose(self):
        self.closed = True


@pytest.fixture
def fake_redis(monkeypatch):
    import tabulator.services.cache.redis_service as mod

    fake = _FakeAsyncRedis()
    monkeypatch.setattr(mod.redis, "from_url", lambda url, **kwargs: fake)
    return fake


def test_set_and_get(fake_redis):
    async def scenario():
        service = RedisService("redis://test")
        await service.set("tab:grid:tok:People", [["a", "b"], ["c"]], ttl=30)
        return await service.get("tab:grid:tok:People"), await service.get("missing")

    value, missing = asyncio.run(scenario())
    assert value == [["a", "b"], ["c"]]
    assert missing is None
    assert fake_redis.expiry["tab:grid:tok:People"] == 30


def test_corrupted_entry_is_dropped(fake_redis):
    fake_redis.store["broken"] = "{not json"

    async def scenario():
        return await RedisService("redis://test").get("broken")

    assert asyncio.run(scenario()) is None
    assert "broken" not in fake_redis.store


def test_clear_pattern_and_close(fake_redis):
    fake_redis.store.update({"tab:grid:tok:a": "1", "tab:grid:tok:b": "2", "tab:grid:x:a": "3"})

    async def scenario():
        service = RedisService("redis://test")
        deleted = await service.clear_pattern("tab:grid:tok:*")
        await service.close()
        return deleted

    assert asyncio.run(scenario()) == 2
    assert list(fake_redis.store) == ["tab:grid:x:a"]
    assert fake_redis.closed


def test_connection_failure(monkeypatch):
    import tabulator.services.cache.redis_service as mod

    class _Unreachable(_FakeAsyncRedis):
        async def ping(self):
            raise ConnectionError("refused")

    monkeypatch.setattr(mod.redis, "from_url", lambda url, **kwargs: _Unreachable())

    with pytest.raises(CacheError) as exc_info:
        asyncio.run(RedisService("redis://test").get("k"))
    assert exc_info.value.code == "REDIS_CONNECTION_ERROR"
