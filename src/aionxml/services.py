"""Process-wide service graph, built once at startup and closed at shutdown."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from aionxml.core.config import AppSettings
from aionxml.core.protocols import IBaselineStore, ICacheBackend, IMetadataStore
from aionxml.encoding.cache import EncodingMetadataCache
from aionxml.encoding.detector import EncodingDetector
from aionxml.encoding.fallback import EncodingFallbackStrategy
from aionxml.encoding.metadata_store import EncodingMetadataStore
from aionxml.encoding.roundtrip import RoundTripValidator
from aionxml.inference.field_type import FieldTypeInferrer
from aionxml.inference.reference import ReferenceDetector
from aionxml.inference.slot_pattern import BonusAttrPatternAnalyzer
from aionxml.inference.value_domain import ValueDomainAnalyzer
from aionxml.models.encoding import EncodingInfo
from aionxml.orchestration.corpus_processor import CorpusProcessor
from aionxml.persistence import create_persistence

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    settings: AppSettings
    metadata_backend: IMetadataStore
    baseline_backend: IBaselineStore
    cache_backend: ICacheBackend
    metadata_store: EncodingMetadataStore
    cache: EncodingMetadataCache
    detector: EncodingDetector
    strategy: EncodingFallbackStrategy
    validator: RoundTripValidator
    field_types: FieldTypeInferrer
    references: ReferenceDetector
    slots: BonusAttrPatternAnalyzer
    value_domains: ValueDomainAnalyzer
    processor: CorpusProcessor

    def close(self) -> None:
        close = getattr(self.cache_backend, "close", None)
        if close is not None:
            close()
        logger.info("Services closed")


def build_services(
    settings: AppSettings | None = None,
    backend: IMetadataStore | None = None,
    cache_backend: ICacheBackend | None = None,
) -> ServiceContainer:
    """Wire every service from settings.

    ``backend`` must also implement IBaselineStore when given; tests pass a
    MemoryMetadataStore here.
    """
    if settings is None:
        settings = AppSettings()

    if backend is None or cache_backend is None:
        default_store, _, default_cache = create_persistence(settings)
        backend = backend or default_store
        cache_backend = cache_backend or default_cache

    default = EncodingInfo(
        encoding=settings.encoding.default_encoding,
        has_bom=settings.encoding.default_has_bom,
    )
    metadata_store = EncodingMetadataStore(backend, default=default)
    cache = EncodingMetadataCache(
        metadata_store,
        cache_backend,
        ttl_seconds=settings.cache.ttl_seconds,
        key_prefix=settings.cache.key_prefix,
    )
    detector = EncodingDetector(legacy_encoding=settings.encoding.legacy_encoding, default=default)
    strategy = EncodingFallbackStrategy(
        metadata_store,
        detector,
        weak_threshold=settings.encoding.weak_confidence_threshold,
        error_penalty=settings.encoding.error_penalty,
        default=default,
    )
    validator = RoundTripValidator(backend, metadata_store)  # type: ignore[arg-type]
    field_types = FieldTypeInferrer(
        max_enum_values=settings.inference.max_enum_values,
        enum_distinct_ratio=settings.inference.enum_distinct_ratio,
    )
    references = ReferenceDetector()
    slots = BonusAttrPatternAnalyzer()
    value_domains = ValueDomainAnalyzer(
        max_enum_values=settings.inference.max_enum_values,
        enum_distinct_ratio=settings.inference.enum_distinct_ratio,
        top_values_limit=settings.inference.top_values_limit,
    )
    processor = CorpusProcessor(
        strategy,
        cache,
        validator,
        field_types=field_types,
        references=references,
        slots=slots,
        value_domains=value_domains,
        max_workers=settings.worker.max_workers,
    )
    logger.info(
        "Services built: store=%s cache=%s legacy=%s",
        type(backend).__name__, type(cache_backend).__name__, settings.encoding.legacy_encoding,
    )
    return ServiceContainer(
        settings=settings,
        metadata_backend=backend,
        baseline_backend=backend,  # type: ignore[arg-type]
        cache_backend=cache_backend,
        metadata_store=metadata_store,
        cache=cache,
        detector=detector,
        strategy=strategy,
        validator=validator,
        field_types=field_types,
        references=references,
        slots=slots,
        value_domains=value_domains,
        processor=processor,
    )
