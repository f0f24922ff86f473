"""Per-key re-entrant locks shared by the metadata store and its cache."""

from __future__ import annotations

import threading

from aionxml.core.types import MetadataKey


class KeyLockRegistry:
    """Hands out one RLock per MetadataKey; entries live as long as the registry."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[MetadataKey, threading.RLock] = {}

    def lock_for(self, table_name: str, map_variant: str | None = "") -> threading.RLock:
        key = MetadataKey.of(table_name, map_variant)
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock
