"""Three-stage encoding decision: raw detection, table history, fixed default."""

from __future__ import annotations

import logging

from aionxml.core.types import FileSource
from aionxml.encoding.codec import load_bytes
from aionxml.encoding.detector import EncodingDetector
from aionxml.encoding.metadata_store import EncodingMetadataStore
from aionxml.models.encoding import EncodingInfo

logger = logging.getLogger(__name__)

_REPLACEMENT = "\ufffd"


def calculate_confidence(info: EncodingInfo, data: bytes, error_penalty: float = 10.0) -> int:
    """Score 0..100 for decoding ``data`` under ``info``.

    Invalid sequences are counted as the U+FFFD characters a replacing decode
    adds beyond those already present in the text. The score never increases
    as the share of invalid characters grows.
    """
    if not data:
        return 100
    try:
        replaced = info.decode(data, errors="replace")
        ignored = info.decode(data, errors="ignore")
    except LookupError:
        return 0

    invalid = replaced.count(_REPLACEMENT) - ignored.count(_REPLACEMENT)
    error_rate = invalid / max(len(replaced), 1)
    return max(0, round(100 * (1 - error_penalty * error_rate)))


class EncodingFallbackStrategy:
    """Wraps the detector with history and a default when detection is weak."""

    def __init__(
        self,
        store: EncodingMetadataStore,
        detector: EncodingDetector | None = None,
        weak_threshold: int = 80,
        error_penalty: float = 10.0,
        default: EncodingInfo | None = None,
    ) -> None:
        self._store = store
        self._detector = detector or EncodingDetector()
        self._weak_threshold = weak_threshold
        self._error_penalty = error_penalty
        self._default = default or store.default

    @property
    def detector(self) -> EncodingDetector:
        return self._detector

    def calculate_confidence(self, info: EncodingInfo, file: FileSource) -> int:
        data, _ = load_bytes(file)
        return calculate_confidence(info, data, self._error_penalty)

    def historical_encoding(self, table_name: str) -> EncodingInfo | None:
        record = self._store.find_metadata(table_name, "")
        if record is not None:
            return record.encoding_info
        return self._store.table_default(table_name)

    def detect_with_fallback(self, file: FileSource, table_name: str) -> EncodingInfo:
        data, path = load_bytes(file)
        guess = self._detector.detect(data)
        confidence = calculate_confidence(guess, data, self._error_penalty)
        if confidence >= self._weak_threshold:
            return guess

        historical = self.historical_encoding(table_name)
        if historical is not None:
            logger.warning(
                "Weak detection %s (%d) for %s, using historical %s",
                guess, confidence, path or table_name, historical,
            )
            return historical

        logger.warning(
            "Weak detection %s (%d) for %s and no history, using default %s",
            guess, confidence, path or table_name, self._default,
        )
        return self._default
