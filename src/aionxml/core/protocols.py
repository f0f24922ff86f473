"""Protocol interfaces for the aionxml persistence seams.

Backends satisfy these structurally and can be checked with isinstance().
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from aionxml.models.encoding import BaselineRecord, EncodingMetadata


# ---------------------------------------------------------------------------
# Persistence: Encoding Metadata Store
# ---------------------------------------------------------------------------

@runtime_checkable
class IMetadataStore(Protocol):
    """Key-value store of encoding metadata keyed by (table_name, map_variant)."""

    def get_record(self, table_name: str, map_variant: str) -> EncodingMetadata | None: ...

    def put_record(self, record: EncodingMetadata) -> None: ...

    def delete_record(self, table_name: str, map_variant: str) -> bool: ...

    def list_records(self, table_name: str | None = None) -> list[EncodingMetadata]: ...


# ---------------------------------------------------------------------------
# Persistence: Round-trip Baseline Store
# ---------------------------------------------------------------------------

@runtime_checkable
class IBaselineStore(Protocol):
    """Upsert/point-lookup store of baseline content hashes."""

    def get_baseline(self, table_name: str, map_variant: str) -> BaselineRecord | None: ...

    def put_baseline(self, record: BaselineRecord) -> None: ...


# ---------------------------------------------------------------------------
# Persistence: Cache Backend
# ---------------------------------------------------------------------------

@runtime_checkable
class ICacheBackend(Protocol):
    """Redis-compatible cache interface."""

    def get(self, key: str) -> str | None: ...

    def setex(self, key: str, ttl: int, value: str) -> None: ...

    def delete(self, key: str) -> None: ...
