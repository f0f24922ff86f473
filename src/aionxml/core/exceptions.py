"""aionxml exception hierarchy."""

from __future__ import annotations


class AionXmlError(Exception):
    """Base exception for all aionxml errors."""


class PersistenceError(AionXmlError):
    """The backing key-value store failed (unavailable, IO error, ...)."""


class MetadataStoreError(PersistenceError):
    """Encoding metadata read or write failed."""

    def __init__(self, operation: str, table_name: str, map_variant: str, message: str) -> None:
        self.operation = operation
        self.table_name = table_name
        self.map_variant = map_variant
        super().__init__(
            f"Metadata {operation} failed for table={table_name!r} map_variant={map_variant!r}: {message}"
        )


class BaselineStoreError(PersistenceError):
    """Round-trip baseline hash read or write failed."""


class CacheError(AionXmlError):
    """Cache backend operation failed."""


class CategoryNotFoundError(AionXmlError):
    """No pattern category with the requested mechanism code."""

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"Unknown mechanism code: {code!r}")
