"""Tests for configuration defaults and env overrides."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from aionxml.core.config import AppSettings, CacheConfig, EncodingConfig, InferenceConfig
from aionxml.core.log import configure_logging


def test_default_settings():
    settings = AppSettings()
    assert settings.environment == "dev"
    assert settings.store_backend == "memory"
    assert settings.cache_backend == "memory"
    assert settings.dynamodb.table_name == "aionxml-encoding-metadata"


def test_encoding_config_defaults():
    config = EncodingConfig()
    assert config.default_encoding == "UTF-8"
    assert config.legacy_encoding == "GBK"
    assert config.weak_confidence_threshold == 80
    assert config.error_penalty == 10.0


def test_cache_and_inference_defaults():
    assert CacheConfig().ttl_seconds == 3600
    inference = InferenceConfig()
    assert (inference.max_enum_values, inference.enum_distinct_ratio, inference.top_values_limit) == (20, 0.5, 100)


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("AIONXML_ENCODING_LEGACY_ENCODING", "BIG5")
    monkeypatch.setenv("AIONXML_STORE_BACKEND", "dynamodb")
    assert EncodingConfig().legacy_encoding == "BIG5"
    assert AppSettings().store_backend == "dynamodb"


def test_rejects_unknown_legacy_layout(monkeypatch):
    monkeypatch.setenv("AIONXML_ENCODING_LEGACY_ENCODING", "SHIFT_JIS")
    with pytest.raises(ValidationError):
        EncodingConfig()


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def _restore_logger(self):
        logger = logging.getLogger("aionxml")
        handlers, level = list(logger.handlers), logger.level
        logger.handlers.clear()
        yield
        logger.handlers[:] = handlers
        logger.setLevel(level)

    def test_sets_level_and_single_handler(self):
        configure_logging(AppSettings(log_level="debug"))
        configure_logging(AppSettings(log_level="WARNING"))
        logger = logging.getLogger("aionxml")
        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING
