"""Bounded worker pool over a corpus: per-file encoding, per-column hypotheses."""

from __future__ import annotations

import concurrent.futures
import logging
from collections.abc import Iterable, Mapping, Sequence

from aionxml.encoding.cache import EncodingMetadataCache
from aionxml.encoding.codec import load_bytes
from aionxml.encoding.fallback import EncodingFallbackStrategy
from aionxml.encoding.roundtrip import RoundTripValidator
from aionxml.inference.field_type import FieldTypeInferrer
from aionxml.inference.reference import ReferenceDetector
from aionxml.inference.slot_pattern import BonusAttrPatternAnalyzer
from aionxml.inference.value_domain import ValueDomainAnalyzer
from aionxml.models.corpus import CorpusFile, FileEncodingOutcome
from aionxml.models.inference import ColumnHypotheses

logger = logging.getLogger(__name__)


class CorpusProcessor:
    """Fans files and columns out to a thread pool; results come back in completion order."""

    def __init__(
        self,
        strategy: EncodingFallbackStrategy,
        cache: EncodingMetadataCache,
        validator: RoundTripValidator,
        field_types: FieldTypeInferrer | None = None,
        references: ReferenceDetector | None = None,
        slots: BonusAttrPatternAnalyzer | None = None,
        value_domains: ValueDomainAnalyzer | None = None,
        max_workers: int = 8,
    ) -> None:
        self._strategy = strategy
        self._cache = cache
        self._validator = validator
        self._field_types = field_types or FieldTypeInferrer()
        self._references = references or ReferenceDetector()
        self._slots = slots or BonusAttrPatternAnalyzer()
        self._value_domains = value_domains or ValueDomainAnalyzer()
        self._max_workers = max_workers

    # ---- files ----

    def detect_file(self, file: CorpusFile, persist: bool = True) -> FileEncodingOutcome:
        # detection, stored hash and baseline share a single read
        data, path = load_bytes(file.path)
        info = self._strategy.detect_with_fallback(data, file.table_name)
        confidence = self._strategy.calculate_confidence(info, data)
        baseline_hash = None
        if persist:
            self._cache.save_metadata(file.table_name, file.map_variant, data, info, file_path=path)
            baseline_hash = self._validator.save_file_hash(file.table_name, file.map_variant, data)
        return FileEncodingOutcome(
            path=file.path,
            table_name=file.table_name,
            map_variant=file.map_variant,
            encoding=info,
            confidence=confidence,
            baseline_hash=baseline_hash,
        )

    def detect_files(self, files: Iterable[CorpusFile], persist: bool = True) -> list[FileEncodingOutcome]:
        files = list(files)
        outcomes: list[FileEncodingOutcome] = []
        with concurrent.futures.ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            futures = {executor.submit(self.detect_file, f, persist): f for f in files}
            for future in concurrent.futures.as_completed(futures):
                outcomes.append(future.result())
        logger.info("Detected encodings for %d files", len(outcomes))
        return outcomes

    # ---- columns ----

    def profile_column(self, field_id: int, field_name: str, values: Sequence[str | None]) -> ColumnHypotheses:
        return ColumnHypotheses(
            field_id=field_id,
            field_name=field_name,
            field_type=self._field_types.infer_from_values(field_name, values),
            reference=self._references.detect_field(field_name),
            slot=self._slots.extract_slot_info(field_name),
            value_domain=self._value_domains.analyze_field(field_id, values),
        )

    def profile_columns(
        self,
        columns: Sequence[str],
        rows_by_name: Mapping[str, Sequence[str | None]],
    ) -> list[ColumnHypotheses]:
        """Hypotheses for every named column; ``field_id`` is the column position."""
        results: list[ColumnHypotheses] = []
        with concurrent.futures.ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            futures = {
                executor.submit(self.profile_column, field_id, name, rows_by_name.get(name, [])): name
                for field_id, name in enumerate(columns)
            }
            for future in concurrent.futures.as_completed(futures):
                results.append(future.result())
        return sorted(results, key=lambda h: h.field_id)
