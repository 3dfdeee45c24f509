"""Tests for finder.py: the filter contract and the shard cache."""

import pytest

from iblock_finder.cache_utils import CacheStore, MemoryCacheStore
from iblock_finder.exceptions import InvalidFilterError, ValueNotFoundError
from iblock_finder.finder import Finder, ShardCache, ShardStrategy, prepare_filter
from iblock_finder.types import CodeLookup, PropIdLookup


class CountingStrategy(ShardStrategy):
    name = "counting"

    def __init__(self):
        self.builds = []

    def build_shard(self, shard):
        self.builds.append(shard)
        return {"code": f"code-{shard}"}

    def resolve(self, structure, request, shard):
        if isinstance(request, CodeLookup):
            return structure["code"]
        if isinstance(request, PropIdLookup):
            raise ValueNotFoundError("Property ID", request.prop_code)
        raise InvalidFilterError("type")

    def shard_tags(self, shard, structure):
        return {f"item_{shard}"}


class FailingCacheStore(CacheStore):
    def get(self, key):
        raise ConnectionError("cache is down")

    def set(self, key, value, ttl, tags):
        raise ConnectionError("cache is down")

    def clear_by_tag(self, tag):
        raise ConnectionError("cache is down")


class TestPrepareFilter:
    def test_normalizes_values(self):
        assert prepare_filter({"id": "7", "type": "  news ", "code": "a&b"}) == {
            "id": 7,
            "type": "news",
            "code": "a&b",
        }

    def test_type_and_code_are_enough(self):
        assert prepare_filter({"type": "news", "code": "press"}) == {
            "type": "news",
            "code": "press",
        }

    @pytest.mark.parametrize("filter", [None, {}])
    def test_empty_filter(self, filter):
        with pytest.raises(InvalidFilterError):
            prepare_filter(filter)

    @pytest.mark.parametrize("value", [-1, 0, "abc", None, True])
    def test_invalid_id(self, value):
        with pytest.raises(InvalidFilterError) as excinfo:
            prepare_filter({"id": value})
        assert excinfo.value.key == "id"

    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_empty_string(self, value):
        with pytest.raises(InvalidFilterError) as excinfo:
            prepare_filter({"type": "news", "code": value})
        assert excinfo.value.key == "code"

    def test_unknown_key(self):
        with pytest.raises(InvalidFilterError) as excinfo:
            prepare_filter({"id": 1, "name": "x"})
        assert excinfo.value.key == "name"

    def test_type_without_code(self):
        with pytest.raises(InvalidFilterError) as excinfo:
            prepare_filter({"type": "news"})
        assert excinfo.value.key == "code"


class TestShardCache:
    def make_cache(self, strategy, cache_store=None):
        return ShardCache(
            strategy,
            cache_store or MemoryCacheStore(),
            ttl=60,
            collection_tag="collection",
            namespace="tests",
        )

    def test_builds_once_per_shard(self):
        strategy = CountingStrategy()
        cache = self.make_cache(strategy)

        assert cache.get(CodeLookup(), 1) == "code-1"
        assert cache.get(CodeLookup(), 1) == "code-1"
        assert cache.get(CodeLookup(), 2) == "code-2"
        assert strategy.builds == [1, 2]

    def test_writes_collection_and_shard_tags(self):
        strategy = CountingStrategy()
        cache_store = MemoryCacheStore()
        cache = self.make_cache(strategy, cache_store)
        cache.get(CodeLookup(), 1)

        assert cache_store.clear_by_tag("item_1") == 1
        cache.get(CodeLookup(), 1)
        assert cache_store.clear_by_tag("collection") == 1
        assert strategy.builds == [1, 1]

    def test_cache_key_is_deterministic(self):
        first = self.make_cache(CountingStrategy())
        second = self.make_cache(CountingStrategy())
        assert first.cache_key(7) == second.cache_key(7)
        assert first.cache_key(7) != first.cache_key(8)
        assert first.cache_key("lite") != first.cache_key(7)

    def test_store_errors_count_as_miss(self, caplog):
        strategy = CountingStrategy()
        cache = self.make_cache(strategy, FailingCacheStore())

        assert cache.get(CodeLookup(), 1) == "code-1"
        assert cache.get(CodeLookup(), 1) == "code-1"
        assert strategy.builds == [1, 1]
        assert "Cache read failed" in caplog.text
        assert "Cache write failed" in caplog.text

    def test_resolution_errors_propagate(self):
        cache = self.make_cache(CountingStrategy())
        with pytest.raises(ValueNotFoundError):
            cache.get(PropIdLookup(prop_code="MISSING"), 1)
        with pytest.raises(InvalidFilterError):
            cache.get(object(), 1)


class TestFinder:
    def test_keeps_prepared_filter(self):
        finder = Finder({"id": "3"})
        assert finder.is_resolved
        assert finder.filter == {"id": 3}

    def test_raises_on_invalid_filter(self):
        with pytest.raises(InvalidFilterError):
            Finder({"id": -1})

    def test_silent_mode_leaves_finder_unresolved(self, caplog):
        finder = Finder({"id": -1}, silent_mode=True)
        assert not finder.is_resolved
        assert finder.filter is None
        assert "unresolved" in caplog.text
