"""Redis cache backend implementing ICacheBackend, for caches shared across processes."""

from __future__ import annotations

import redis

from aionxml.core.exceptions import CacheError


class RedisCacheBackend:
    """ICacheBackend backed by Redis; every client error surfaces as CacheError."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        client: redis.Redis | None = None,
    ) -> None:
        self._client = client or redis.Redis(host=host, port=port, db=db, decode_responses=True)

    def get(self, key: str) -> str | None:
        try:
            return self._client.get(key)
        except redis.RedisError as exc:
            raise CacheError(f"Redis GET failed for key={key!r}: {exc}") from exc

    def setex(self, key: str, ttl: int, value: str) -> None:
        try:
            self._client.setex(key, ttl, value)
        except redis.RedisError as exc:
            raise CacheError(f"Redis SETEX failed for key={key!r}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self._client.delete(key)
        except redis.RedisError as exc:
            raise CacheError(f"Redis DELETE failed for key={key!r}: {exc}") from exc

    def close(self) -> None:
        self._client.close()
