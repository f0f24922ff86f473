"""Read-through cache of resolved EncodingInfo in front of EncodingMetadataStore.

Entries are JSON-encoded ``EncodingInfo`` values stored under
``{key_prefix}:{table_name}:{map_variant}`` in any ICacheBackend, so the same
class serves the in-process dict backend and a shared Redis.
"""

from __future__ import annotations

import logging
import threading

from aionxml.core.exceptions import CacheError
from aionxml.core.protocols import ICacheBackend
from aionxml.core.types import FileSource, MetadataKey
from aionxml.encoding.metadata_store import EncodingMetadataStore
from aionxml.models.encoding import CacheStats, EncodingInfo, EncodingMetadata

logger = logging.getLogger(__name__)


class EncodingMetadataCache:
    """Cache that never diverges from the store after a completed save."""

    def __init__(
        self,
        store: EncodingMetadataStore,
        backend: ICacheBackend,
        ttl_seconds: int = 3600,
        key_prefix: str = "encoding_meta",
    ) -> None:
        self._store = store
        self._backend = backend
        self._ttl = ttl_seconds
        self._prefix = key_prefix
        self._stats_lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._keys: set[str] = set()

    @property
    def store(self) -> EncodingMetadataStore:
        return self._store

    def cache_key(self, table_name: str, map_variant: str | None = "") -> str:
        return f"{self._prefix}:{MetadataKey.of(table_name, map_variant)}"

    def _read(self, key: str) -> EncodingInfo | None:
        raw = self._backend.get(key)
        if raw is None:
            return None
        return EncodingInfo.model_validate_json(raw)

    def _write(self, key: str, info: EncodingInfo) -> None:
        self._backend.setex(key, self._ttl, info.model_dump_json())
        with self._stats_lock:
            self._keys.add(key)

    def get_with_cache(self, table_name: str, map_variant: str | None = "") -> EncodingInfo:
        key = self.cache_key(table_name, map_variant)
        cached = self._read(key)
        if cached is not None:
            with self._stats_lock:
                self._hits += 1
            logger.debug("Cache hit %s", key)
            return cached

        with self._stats_lock:
            self._misses += 1
        logger.debug("Cache miss %s", key)

        with self._store.locks.lock_for(table_name, map_variant):
            # another thread may have populated the entry while we waited
            cached = self._read(key)
            if cached is not None:
                return cached
            info = self._store.get_metadata(table_name, map_variant)
            self._write(key, info)
            return info

    def save_metadata(
        self,
        table_name: str,
        map_variant: str | None,
        file: FileSource,
        encoding_info: EncodingInfo,
        file_path: str = "",
    ) -> EncodingMetadata:
        """Persist through the store, dropping the cached entry first.

        A failed delete aborts before the store is touched. A failed repopulate
        only costs a miss: the next read goes to the store.
        """
        key = self.cache_key(table_name, map_variant)
        with self._store.locks.lock_for(table_name, map_variant):
            self._backend.delete(key)
            with self._stats_lock:
                self._keys.discard(key)
            record = self._store.save_metadata(table_name, map_variant, file, encoding_info, file_path=file_path)
            try:
                self._write(key, record.encoding_info)
            except CacheError as exc:
                logger.warning("Cache repopulate failed for %s, next read goes to the store: %s", key, exc)
        return record

    def invalidate(self, table_name: str, map_variant: str | None = "") -> None:
        key = self.cache_key(table_name, map_variant)
        with self._store.locks.lock_for(table_name, map_variant):
            self._backend.delete(key)
            with self._stats_lock:
                self._keys.discard(key)

    def clear(self) -> int:
        """Drop every entry this cache wrote and reset the counters."""
        with self._stats_lock:
            keys = list(self._keys)
            self._keys.clear()
            self._hits = 0
            self._misses = 0
        for key in keys:
            self._backend.delete(key)
        logger.info("Cleared %d encoding cache entries", len(keys))
        return len(keys)

    def warmup(self, *table_names: str) -> int:
        """Load stored records into the cache; all tables when none are named."""
        records: list[EncodingMetadata] = []
        if table_names:
            for table_name in table_names:
                records.extend(self._store.list_records(table_name))
        else:
            records = self._store.list_records()

        for record in records:
            with self._store.locks.lock_for(record.table_name, record.map_variant):
                self._write(self.cache_key(record.table_name, record.map_variant), record.encoding_info)
        logger.info("Warmed encoding cache with %d entries", len(records))
        return len(records)

    def stats(self) -> CacheStats:
        """Hit/miss counters and the number of live entries this instance wrote.

        Keys whose entries expired in the backend are dropped here; entries
        written by other processes sharing the backend are not counted.
        """
        with self._stats_lock:
            keys = list(self._keys)
        expired = {key for key in keys if self._backend.get(key) is None}
        with self._stats_lock:
            self._keys -= expired
            return CacheStats(hits=self._hits, misses=self._misses, size=len(self._keys))
