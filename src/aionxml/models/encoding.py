"""Encoding metadata, round-trip baseline and validation models."""

from __future__ import annotations

import codecs
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from aionxml.core.types import MetadataKey

# Canonical label -> Python codec. Bare "UTF-16" follows the big-endian
# default used when no BOM is present.
_CODECS: dict[str, str] = {
    "UTF-8": "utf-8",
    "UTF-16": "utf-16-be",
    "UTF-16LE": "utf-16-le",
    "UTF-16BE": "utf-16-be",
    "GBK": "gbk",
    "GB2312": "gb2312",
    "GB18030": "gb18030",
    "BIG5": "big5",
    "CP949": "cp949",
    "EUC-KR": "euc-kr",
    "ASCII": "ascii",
}

_BOMS: dict[str, bytes] = {
    "utf-8": codecs.BOM_UTF8,
    "utf-16-le": codecs.BOM_UTF16_LE,
    "utf-16-be": codecs.BOM_UTF16_BE,
}

_ALIASES: dict[str, str] = {
    "UTF8": "UTF-8",
    "UTF-8-SIG": "UTF-8",
    "UTF16": "UTF-16",
    "UTF16LE": "UTF-16LE",
    "UTF-16-LE": "UTF-16LE",
    "UTF16BE": "UTF-16BE",
    "UTF-16-BE": "UTF-16BE",
    "CP936": "GBK",
    "BIG-5": "BIG5",
    "US-ASCII": "ASCII",
}


def normalize_label(label: str) -> str:
    """Upper-case an encoding label and fold common spelling variants."""
    canonical = label.strip().upper().replace("_", "-")
    return _ALIASES.get(canonical, canonical)


def codec_for(label: str) -> str:
    """Python codec name for a canonical encoding label."""
    canonical = normalize_label(label)
    return _CODECS.get(canonical, canonical.lower())


def is_known_encoding(label: str) -> bool:
    try:
        codecs.lookup(codec_for(label))
    except LookupError:
        return False
    return True


class EncodingInfo(BaseModel):
    """How a file's bytes are decoded and re-encoded. Immutable."""

    model_config = {"frozen": True}

    encoding: str
    has_bom: bool = False

    @field_validator("encoding")
    @classmethod
    def _canonical_label(cls, value: str) -> str:
        return normalize_label(value)

    @property
    def codec(self) -> str:
        return codec_for(self.encoding)

    @property
    def bom(self) -> bytes:
        """BOM bytes written ahead of the content; empty when ``has_bom`` is false."""
        if not self.has_bom:
            return b""
        return _BOMS.get(self.codec, b"")

    @property
    def is_utf16(self) -> bool:
        return self.encoding.startswith("UTF-16")

    def decode(self, data: bytes, errors: str = "strict") -> str:
        bom = self.bom
        if bom and data.startswith(bom):
            data = data[len(bom):]
        return data.decode(self.codec, errors)

    def encode(self, text: str, errors: str = "strict") -> bytes:
        return self.bom + text.encode(self.codec, errors)

    def __str__(self) -> str:
        return self.encoding + (" (with BOM)" if self.has_bom else "")


DEFAULT_ENCODING = EncodingInfo(encoding="UTF-8", has_bom=False)


class EncodingMetadata(BaseModel):
    """Persisted encoding decision for one (table_name, map_variant)."""

    table_name: str
    map_variant: str = ""
    encoding: str
    has_bom: bool = False
    original_file_path: str = ""
    original_file_hash: str = ""
    file_size_bytes: int = 0
    last_import_time: Optional[datetime] = None
    import_count: int = 0
    last_export_time: Optional[datetime] = None
    export_count: int = 0
    last_validation_time: Optional[datetime] = None
    last_validation_result: Optional[bool] = None
    validation_count: int = 0

    @property
    def key(self) -> MetadataKey:
        return MetadataKey.of(self.table_name, self.map_variant)

    @property
    def encoding_info(self) -> EncodingInfo:
        return EncodingInfo(encoding=self.encoding, has_bom=self.has_bom)


class BaselineRecord(BaseModel):
    """Content hash captured at import time, compared after export."""

    table_name: str
    map_variant: str = ""
    file_hash: str
    file_size_bytes: int = 0
    saved_at: Optional[datetime] = None


class ValidationResult(BaseModel):
    """Outcome of one round-trip validation call."""

    original_hash: str
    exported_hash: str
    passed: bool
    message: str

    def __str__(self) -> str:
        return self.message


class ValidationSummary(BaseModel):
    """Aggregate of the last validation result across all stored keys."""

    total: int = 0
    passed: int = 0
    failed: int = 0
    not_validated: int = 0
    failed_keys: list[str] = Field(default_factory=list)


class EncodingStatistic(BaseModel):
    """How many stored tables use one encoding, and how often they moved."""

    encoding: str
    has_bom: bool = False
    file_count: int = 0
    total_imports: int = 0
    total_exports: int = 0


class CacheStats(BaseModel):
    hits: int = 0
    misses: int = 0
    size: int = 0

    @property
    def hit_rate(self) -> float:
        lookups = self.hits + self.misses
        return self.hits / lookups if lookups else 0.0
