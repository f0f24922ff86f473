"""Tests for the service container lifecycle."""

from __future__ import annotations

from unittest.mock import MagicMock

from aionxml.core.config import AppSettings, EncodingConfig, InferenceConfig
from aionxml.models.encoding import EncodingInfo
from aionxml.models.inference import FieldType
from aionxml.persistence.memory_backend import MemoryCacheBackend, MemoryMetadataStore
from aionxml.services import build_services


class TestBuildServices:
    def test_defaults_to_memory_backends(self):
        services = build_services(AppSettings())
        assert isinstance(services.metadata_backend, MemoryMetadataStore)
        assert isinstance(services.cache_backend, MemoryCacheBackend)
        assert services.baseline_backend is services.metadata_backend

    def test_settings_flow_into_services(self):
        settings = AppSettings(encoding=EncodingConfig(
            legacy_encoding="CP949", default_encoding="UTF-16LE", default_has_bom=True,
        ))
        services = build_services(settings)
        default = EncodingInfo(encoding="UTF-16LE", has_bom=True)
        assert services.detector.legacy_encoding == "CP949"
        assert services.metadata_store.get_metadata("ghost") == default

    def test_enum_ratio_reaches_field_type_inference(self):
        settings = AppSettings(inference=InferenceConfig(enum_distinct_ratio=0.6))
        services = build_services(settings)
        result = services.field_types.infer_from_values("grade", ["A", "B", "C", "A", "B", "C"])
        assert result.field_type is FieldType.ENUM

    def test_explicit_backends_are_used(self):
        backend, cache = MemoryMetadataStore(), MemoryCacheBackend()
        services = build_services(AppSettings(), backend=backend, cache_backend=cache)
        assert services.metadata_store.backend is backend
        assert services.cache_backend is cache


class TestClose:
    def test_closes_cache_backend_when_supported(self):
        cache = MagicMock()
        services = build_services(AppSettings(), backend=MemoryMetadataStore(), cache_backend=cache)
        services.close()
        cache.close.assert_called_once()

    def test_memory_backend_close_is_noop(self):
        build_services(AppSettings()).close()
