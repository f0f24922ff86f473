"""In-memory backends: dict-backed, lock-guarded, used by tests and as the default."""

from __future__ import annotations

import threading

from aionxml.core.types import MetadataKey
from aionxml.models.encoding import BaselineRecord, EncodingMetadata


class MemoryMetadataStore:
    """Dict-backed IMetadataStore and IBaselineStore.

    ``read_count`` and ``write_count`` let tests assert how often the store was hit.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: dict[MetadataKey, EncodingMetadata] = {}
        self._baselines: dict[MetadataKey, BaselineRecord] = {}
        self.read_count = 0
        self.write_count = 0

    # ---- IMetadataStore ----

    def get_record(self, table_name: str, map_variant: str) -> EncodingMetadata | None:
        with self._lock:
            self.read_count += 1
            return self._records.get(MetadataKey.of(table_name, map_variant))

    def put_record(self, record: EncodingMetadata) -> None:
        with self._lock:
            self.write_count += 1
            self._records[record.key] = record

    def delete_record(self, table_name: str, map_variant: str) -> bool:
        with self._lock:
            self.write_count += 1
            return self._records.pop(MetadataKey.of(table_name, map_variant), None) is not None

    def list_records(self, table_name: str | None = None) -> list[EncodingMetadata]:
        with self._lock:
            self.read_count += 1
            return [
                r for k, r in sorted(self._records.items())
                if table_name is None or k.table_name == table_name
            ]

    # ---- IBaselineStore ----

    def get_baseline(self, table_name: str, map_variant: str) -> BaselineRecord | None:
        with self._lock:
            return self._baselines.get(MetadataKey.of(table_name, map_variant))

    def put_baseline(self, record: BaselineRecord) -> None:
        with self._lock:
            self._baselines[MetadataKey.of(record.table_name, record.map_variant)] = record


class MemoryCacheBackend:
    """Dict-backed ICacheBackend. TTLs are accepted and ignored."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._store: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._store.get(key)

    def setex(self, key: str, ttl: int, value: str) -> None:
        with self._lock:
            self._store[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
