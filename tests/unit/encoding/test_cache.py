"""Tests for EncodingMetadataCache."""

from __future__ import annotations

import threading

import fakeredis
import pytest

from aionxml.core.exceptions import CacheError
from aionxml.encoding.cache import EncodingMetadataCache
from aionxml.encoding.metadata_store import EncodingMetadataStore
from aionxml.models.encoding import DEFAULT_ENCODING, EncodingInfo
from aionxml.persistence.redis_backend import RedisCacheBackend
from tests.fakes import MemoryCacheBackend, MemoryMetadataStore

GBK = EncodingInfo(encoding="GBK")
UTF16 = EncodingInfo(encoding="UTF-16LE", has_bom=True)


class FlakyCacheBackend(MemoryCacheBackend):
    """Memory backend whose writes or deletes can be switched to fail."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_setex = False
        self.fail_delete = False

    def setex(self, key: str, ttl: int, value: str) -> None:
        if self.fail_setex:
            raise CacheError(f"SETEX failed for key={key!r}")
        super().setex(key, ttl, value)

    def delete(self, key: str) -> None:
        if self.fail_delete:
            raise CacheError(f"DELETE failed for key={key!r}")
        super().delete(key)


@pytest.fixture
def backend():
    return MemoryMetadataStore()


@pytest.fixture
def store(backend):
    return EncodingMetadataStore(backend)


@pytest.fixture
def cache(store):
    return EncodingMetadataCache(store, MemoryCacheBackend(), ttl_seconds=60)


class TestGetWithCache:
    def test_miss_then_hit_reads_store_once(self, cache, store, backend):
        store.save_metadata("items", "", b"x", UTF16)
        reads_before = backend.read_count

        assert cache.get_with_cache("items") == UTF16
        assert cache.get_with_cache("items") == UTF16

        assert backend.read_count == reads_before + 1
        stats = cache.stats()
        assert (stats.hits, stats.misses, stats.size) == (1, 1, 1)
        assert stats.hit_rate == 0.5

    def test_absent_key_caches_default(self, cache):
        assert cache.get_with_cache("ghost") == DEFAULT_ENCODING
        assert cache.get_with_cache("ghost") == DEFAULT_ENCODING
        assert cache.stats().hits == 1

    def test_repeated_reads_are_idempotent(self, cache, store):
        store.save_metadata("npcs", "", b"x", GBK)
        results = {cache.get_with_cache("npcs") for _ in range(5)}
        assert results == {GBK}

    def test_concurrent_misses_read_store_once(self, cache, store, backend):
        store.save_metadata("items", "", b"x", GBK)
        reads_before = backend.read_count
        barrier = threading.Barrier(8)
        seen: list[EncodingInfo] = []

        def read() -> None:
            barrier.wait()
            seen.append(cache.get_with_cache("items"))

        threads = [threading.Thread(target=read) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert seen == [GBK] * 8
        assert backend.read_count == reads_before + 1


class TestSaveMetadata:
    def test_save_overwrites_cached_entry(self, cache):
        cache.save_metadata("items", "", b"a", GBK)
        assert cache.get_with_cache("items") == GBK
        cache.save_metadata("items", "", b"b", UTF16)
        assert cache.get_with_cache("items") == UTF16

    def test_save_then_read_is_a_hit(self, cache, backend):
        cache.save_metadata("items", "", b"a", GBK)
        reads_before = backend.read_count
        cache.get_with_cache("items")
        assert backend.read_count == reads_before
        assert cache.stats().hits == 1


class TestCacheFailures:
    def test_failed_repopulate_never_serves_stale_value(self, store):
        flaky = FlakyCacheBackend()
        cache = EncodingMetadataCache(store, flaky)
        cache.save_metadata("items", "", b"a", GBK)
        assert cache.get_with_cache("items") == GBK

        flaky.fail_setex = True
        record = cache.save_metadata("items", "", b"b", UTF16)

        assert record.encoding_info == UTF16
        assert store.get_metadata("items") == UTF16
        assert flaky.get(cache.cache_key("items")) is None
        flaky.fail_setex = False
        assert cache.get_with_cache("items") == store.get_metadata("items")

    def test_failed_delete_leaves_store_untouched(self, store):
        flaky = FlakyCacheBackend()
        cache = EncodingMetadataCache(store, flaky)
        cache.save_metadata("items", "", b"a", GBK)

        flaky.fail_delete = True
        with pytest.raises(CacheError):
            cache.save_metadata("items", "", b"b", UTF16)

        assert store.get_metadata("items") == GBK
        assert store.find_metadata("items").import_count == 1
        assert cache.get_with_cache("items") == GBK

    def test_save_keeps_file_path_for_raw_bytes(self, cache, store):
        cache.save_metadata("items", "", b"a", GBK, file_path="/data/items.xml")
        assert store.find_metadata("items").original_file_path == "/data/items.xml"


class TestMaintenance:
    def test_invalidate_forces_reload(self, cache, store):
        cache.save_metadata("items", "", b"a", GBK)
        store.save_metadata("items", "", b"b", UTF16)  # bypasses the cache
        assert cache.get_with_cache("items") == GBK
        cache.invalidate("items")
        assert cache.get_with_cache("items") == UTF16

    def test_stats_drop_expired_entries(self, store):
        backend = MemoryCacheBackend()
        cache = EncodingMetadataCache(store, backend)
        cache.get_with_cache("items")
        cache.get_with_cache("npcs")
        assert cache.stats().size == 2

        backend.delete(cache.cache_key("items"))  # TTL expiry

        assert cache.stats().size == 1

    def test_clear_resets_everything(self, cache):
        cache.get_with_cache("a")
        cache.get_with_cache("b")
        assert cache.clear() == 2
        stats = cache.stats()
        assert (stats.hits, stats.misses, stats.size) == (0, 0, 0)

    def test_warmup_all_and_named(self, cache, store, backend):
        store.save_metadata("items", "", b"a", GBK)
        store.save_metadata("npcs", "", b"b", UTF16)
        assert cache.warmup("items") == 1
        assert cache.warmup() == 2
        reads_before = backend.read_count
        assert cache.get_with_cache("npcs") == UTF16
        assert backend.read_count == reads_before

    def test_key_format(self, cache):
        assert cache.cache_key("spawns", "110010000") == "encoding_meta:spawns:110010000"
        assert cache.cache_key("items", None) == "encoding_meta:items:"


class TestRedisBacked:
    def test_shared_cache_across_instances(self, store):
        client = fakeredis.FakeRedis(decode_responses=True)
        first = EncodingMetadataCache(store, RedisCacheBackend(client=client))
        second = EncodingMetadataCache(store, RedisCacheBackend(client=client))

        first.save_metadata("items", "", b"a", UTF16)
        assert second.get_with_cache("items") == UTF16
        assert second.stats().hits == 1
