import asyncio
import fnmatch
import json

import pytest

from tabulator.services.base import CacheError, DestinationWriteError
from tabulator.services.cache import CacheKeys
from tabulator.services.reader import WorksheetReader
from tabulator.services.transform import RowSelection


GRID = [
    ["first title", "second title"],
    ["first content", "second content"],
    ["nothing", "related"],
]


class _FakeSheetService:
    def __init__(self, grid=None):
        self.grid = grid if grid is not None else GRID
        self.calls = 0

    async def get_worksheet_grid(self, spreadsheet_token, worksheet):
        self.calls += 1
        return [list(row) for row in self.grid]


class _FakeRedis:
    def __init__(self):
        self.store = {}
        self.ttls = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ttl=None):
        self.store[key] = json.loads(json.dumps(value))
        self.ttls[key] = ttl
        return True

    async def clear_pattern(self, pattern):
        keys = [k for k in self.store if fnmatch.fnmatch(k, pattern)]
        for k in keys:
            del self.store[k]
        return len(keys)


class _BrokenRedis:
    async def get(self, key):
        raise CacheError("down", code="CACHE_GET_ERROR")

    async def set(self, key, value, ttl=None):
        raise CacheError("down", code="CACHE_SET_ERROR")


def test_read_uses_default_selection():
    reader = WorksheetReader(_FakeSheetService())
    table = asyncio.run(reader.read("tok", "People"))
    assert table.records() == [
        {"first_title": "first content", "second_title": "second content"},
        {"first_title": "nothing", "second_title": "related"},
    ]
    assert reader.get_metrics()["records_built"] == 2


def test_read_with_selection():
    reader = WorksheetReader(_FakeSheetService())
    table = asyncio.run(reader.read("tok", "People", RowSelection(reject=lambda row: "nothing" in row)))
    assert len(table) == 1


def test_read_grid_is_cached():
    sheets = _FakeSheetService()
    redis = _FakeRedis()
    reader = WorksheetReader(sheets, redis_service=redis, cache_ttl=60)

    first = asyncio.run(reader.read("tok", "People"))
    second = asyncio.run(reader.read("tok", "People"))

    assert sheets.calls == 1
    assert first.records() == second.records()
    assert redis.ttls[CacheKeys.grid_key("tok", "People")] == 60


def test_cache_errors_fall_back_to_source():
    sheets = _FakeSheetService()
    reader = WorksheetReader(sheets, redis_service=_BrokenRedis())
    table = asyncio.run(reader.read("tok", "People"))
    assert len(table) == 2
    assert sheets.calls == 1


def test_invalidate():
    redis = _FakeRedis()
    reader = WorksheetReader(_FakeSheetService(), redis_service=redis)
    asyncio.run(reader.read("tok", "People"))
    asyncio.run(reader.read("tok", "Other"))
    asyncio.run(reader.read("other-token", "People"))

    assert asyncio.run(reader.invalidate("tok")) == 2
    assert list(redis.store) == [CacheKeys.grid_key("other-token", "People")]
    assert asyncio.run(WorksheetReader(_FakeSheetService()).invalidate("tok")) == 0


def test_export_writes_projected_table(tmp_path):
    reader = WorksheetReader(_FakeSheetService())
    destination = tmp_path / "nested" / "people.json"

    path = asyncio.run(reader.export("tok", "People", destination, fields=["second_title"]))

    assert path == destination
    expected = asyncio.run(reader.read("tok", "People")).only("second_title").serialize()
    assert path.read_text(encoding="utf-8") == expected


def test_export_into_unwritable_location(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory")
    reader = WorksheetReader(_FakeSheetService())
    with pytest.raises(DestinationWriteError):
        asyncio.run(reader.export("tok", "People", blocker / "sub" / "people.json"))


def test_explicit_zero_cache_ttl_is_kept():
    redis = _FakeRedis()
    reader = WorksheetReader(_FakeSheetService(), redis_service=redis, cache_ttl=0)
    asyncio.run(reader.read("tok", "People"))
    assert reader.cache_ttl == 0
    assert redis.ttls[CacheKeys.grid_key("tok", "People")] == 0
