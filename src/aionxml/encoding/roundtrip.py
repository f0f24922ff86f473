"""Import/export integrity check by byte-exact content hash."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from aionxml.core.protocols import IBaselineStore
from aionxml.core.types import FileSource
from aionxml.encoding.codec import content_hash, load_bytes
from aionxml.encoding.metadata_store import EncodingMetadataStore
from aionxml.models.encoding import BaselineRecord, ValidationResult, ValidationSummary

logger = logging.getLogger(__name__)


class RoundTripValidator:
    """Stores a baseline hash at import and compares exported files against it."""

    def __init__(
        self,
        baselines: IBaselineStore,
        metadata: EncodingMetadataStore | None = None,
    ) -> None:
        self._baselines = baselines
        self._metadata = metadata

    def save_file_hash(self, table_name: str, map_variant: str | None, file: FileSource) -> str:
        data, _ = load_bytes(file)
        digest = content_hash(data)
        self._baselines.put_baseline(BaselineRecord(
            table_name=table_name,
            map_variant=map_variant or "",
            file_hash=digest,
            file_size_bytes=len(data),
            saved_at=datetime.now(timezone.utc),
        ))
        logger.info("Saved baseline hash %s:%s = %s", table_name, map_variant or "", digest)
        return digest

    def validate_round_trip(
        self, table_name: str, map_variant: str | None, candidate: FileSource,
    ) -> ValidationResult:
        map_variant = map_variant or ""
        data, _ = load_bytes(candidate)
        exported_hash = content_hash(data)

        baseline = self._baselines.get_baseline(table_name, map_variant)
        if baseline is None:
            result = ValidationResult(
                original_hash="",
                exported_hash=exported_hash,
                passed=False,
                message=f"No baseline hash recorded for {table_name}:{map_variant}; import the file first",
            )
            logger.warning(result.message)
            return result

        original_hash = baseline.file_hash.lower()
        passed = original_hash == exported_hash
        if passed:
            message = f"Round trip OK for {table_name}:{map_variant} ({exported_hash})"
        else:
            message = (
                f"Round trip mismatch for {table_name}:{map_variant}: "
                f"original {original_hash}, exported {exported_hash}"
            )
        result = ValidationResult(
            original_hash=original_hash,
            exported_hash=exported_hash,
            passed=passed,
            message=message,
        )

        if self._metadata is not None:
            self._metadata.record_validation(table_name, map_variant, passed)

        log = logger.info if passed else logger.warning
        log(message)
        return result

    def summarize_validations(self) -> ValidationSummary:
        """Report the last validation outcome across every stored metadata record."""
        summary = ValidationSummary()
        if self._metadata is None:
            return summary
        for record in self._metadata.list_records():
            summary.total += 1
            if record.last_validation_result is None:
                summary.not_validated += 1
            elif record.last_validation_result:
                summary.passed += 1
            else:
                summary.failed += 1
                summary.failed_keys.append(str(record.key))
        return summary
