"""Encoding metadata service over a pluggable IMetadataStore backend.

``get_metadata`` always succeeds: an unknown key resolves to the default
encoding. ``find_metadata`` is the Optional variant for callers that need to
tell "never imported" apart from "imported as UTF-8".
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timezone

from aionxml.core.protocols import IMetadataStore
from aionxml.core.types import FileSource
from aionxml.encoding.codec import content_hash, load_bytes
from aionxml.encoding.locks import KeyLockRegistry
from aionxml.models.encoding import (
    DEFAULT_ENCODING,
    EncodingInfo,
    EncodingMetadata,
    EncodingStatistic,
)

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class EncodingMetadataStore:
    """Upsert/lookup of one EncodingMetadata record per (table_name, map_variant)."""

    def __init__(
        self,
        backend: IMetadataStore,
        locks: KeyLockRegistry | None = None,
        default: EncodingInfo = DEFAULT_ENCODING,
    ) -> None:
        self._backend = backend
        self._locks = locks or KeyLockRegistry()
        self._default = default

    @property
    def backend(self) -> IMetadataStore:
        return self._backend

    @property
    def locks(self) -> KeyLockRegistry:
        return self._locks

    @property
    def default(self) -> EncodingInfo:
        return self._default

    # ---- writes ----

    def save_metadata(
        self,
        table_name: str,
        map_variant: str | None,
        file: FileSource,
        encoding_info: EncodingInfo,
        file_path: str = "",
    ) -> EncodingMetadata:
        """Record the encoding a file was imported with. Last write wins.

        ``file_path`` names the source when ``file`` is already-read bytes.
        """
        map_variant = map_variant or ""
        data, path = load_bytes(file)

        with self._locks.lock_for(table_name, map_variant):
            previous = self._backend.get_record(table_name, map_variant)
            record = EncodingMetadata(
                table_name=table_name,
                map_variant=map_variant,
                encoding=encoding_info.encoding,
                has_bom=encoding_info.has_bom,
                original_file_path=path or file_path,
                original_file_hash=content_hash(data),
                file_size_bytes=len(data),
                last_import_time=_now(),
                import_count=(previous.import_count if previous else 0) + 1,
            )
            if previous is not None:
                record = record.model_copy(update={
                    "last_export_time": previous.last_export_time,
                    "export_count": previous.export_count,
                    "last_validation_time": previous.last_validation_time,
                    "last_validation_result": previous.last_validation_result,
                    "validation_count": previous.validation_count,
                })
            self._backend.put_record(record)

        logger.info("Saved encoding metadata %s:%s -> %s", table_name, map_variant, encoding_info)
        return record

    def update_export_time(self, table_name: str, map_variant: str | None = "") -> EncodingMetadata | None:
        map_variant = map_variant or ""
        with self._locks.lock_for(table_name, map_variant):
            record = self._backend.get_record(table_name, map_variant)
            if record is None:
                return None
            record = record.model_copy(update={
                "last_export_time": _now(),
                "export_count": record.export_count + 1,
            })
            self._backend.put_record(record)
        return record

    def record_validation(
        self, table_name: str, map_variant: str | None, passed: bool,
    ) -> EncodingMetadata | None:
        map_variant = map_variant or ""
        with self._locks.lock_for(table_name, map_variant):
            record = self._backend.get_record(table_name, map_variant)
            if record is None:
                return None
            record = record.model_copy(update={
                "last_validation_time": _now(),
                "last_validation_result": passed,
                "validation_count": record.validation_count + 1,
            })
            self._backend.put_record(record)
        return record

    def delete_metadata(self, table_name: str, map_variant: str | None = "") -> bool:
        map_variant = map_variant or ""
        with self._locks.lock_for(table_name, map_variant):
            deleted = self._backend.delete_record(table_name, map_variant)
        if deleted:
            logger.info("Deleted encoding metadata %s:%s", table_name, map_variant)
        return deleted

    # ---- reads ----

    def find_metadata(self, table_name: str, map_variant: str | None = "") -> EncodingMetadata | None:
        return self._backend.get_record(table_name, map_variant or "")

    def get_metadata(self, table_name: str, map_variant: str | None = "") -> EncodingInfo:
        record = self.find_metadata(table_name, map_variant)
        if record is None:
            logger.debug("No encoding metadata for %s:%s, using default", table_name, map_variant or "")
            return self._default
        return record.encoding_info

    def has_metadata(self, table_name: str, map_variant: str | None = "") -> bool:
        return self.find_metadata(table_name, map_variant) is not None

    def list_records(self, table_name: str | None = None) -> list[EncodingMetadata]:
        return self._backend.list_records(table_name)

    def table_default(self, table_name: str) -> EncodingInfo | None:
        """Most common encoding across every map variant of a table.

        Ties go to the variant seen first in key order.
        """
        records = sorted(self._backend.list_records(table_name), key=lambda r: r.map_variant)
        if not records:
            return None
        counts = Counter(r.encoding_info for r in records)
        return counts.most_common(1)[0][0]

    def encoding_statistics(self) -> list[EncodingStatistic]:
        stats: dict[EncodingInfo, EncodingStatistic] = {}
        for record in self._backend.list_records():
            info = record.encoding_info
            stat = stats.get(info)
            if stat is None:
                stat = stats[info] = EncodingStatistic(encoding=info.encoding, has_bom=info.has_bom)
            stat.file_count += 1
            stat.total_imports += record.import_count
            stat.total_exports += record.export_count
        return sorted(stats.values(), key=lambda s: s.file_count, reverse=True)
