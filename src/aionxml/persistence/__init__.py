"""Pluggable persistence backends behind Protocol interfaces."""

from __future__ import annotations

from aionxml.core.config import AppSettings
from aionxml.core.protocols import IBaselineStore, ICacheBackend, IMetadataStore
from aionxml.persistence.dynamodb_backend import DynamoDBMetadataStore
from aionxml.persistence.memory_backend import MemoryCacheBackend, MemoryMetadataStore
from aionxml.persistence.redis_backend import RedisCacheBackend


def create_persistence(
    settings: AppSettings | None = None,
) -> tuple[IMetadataStore, IBaselineStore, ICacheBackend]:
    """Create wired-up persistence backends from application settings.

    Returns:
        Tuple of (metadata_store, baseline_store, cache). The metadata and
        baseline stores are the same object for both built-in backends.
    """
    if settings is None:
        settings = AppSettings()

    if settings.store_backend == "dynamodb":
        store = DynamoDBMetadataStore(
            table_name=settings.dynamodb.table_name,
            table_suffix=settings.dynamodb.table_suffix,
            region=settings.dynamodb.region,
            endpoint_url=settings.dynamodb.endpoint_url,
        )
    else:
        store = MemoryMetadataStore()

    if settings.cache_backend == "redis":
        cache = RedisCacheBackend(
            host=settings.redis.host,
            port=settings.redis.port,
            db=settings.redis.db,
        )
    else:
        cache = MemoryCacheBackend()

    return store, store, cache
