"""Byte-level IO helpers that keep encoding and BOM intact across a round trip."""

from __future__ import annotations

import hashlib
from pathlib import Path

from aionxml.core.types import FileSource
from aionxml.models.encoding import EncodingInfo


def load_bytes(file: FileSource) -> tuple[bytes, str]:
    """Return ``(content, path)``; ``path`` is empty when raw bytes were given."""
    if isinstance(file, (bytes, bytearray, memoryview)):
        return bytes(file), ""
    path = Path(file)
    return path.read_bytes(), str(path.resolve())


def content_hash(data: bytes) -> str:
    """128-bit MD5 hex digest of raw bytes, lower-case."""
    return hashlib.md5(data).hexdigest()


def read_text(file: FileSource, info: EncodingInfo) -> str:
    data, _ = load_bytes(file)
    return info.decode(data)


def write_text(path: Path | str, text: str, info: EncodingInfo) -> bytes:
    """Encode ``text`` exactly as ``info`` describes (BOM included) and write it."""
    data = info.encode(text)
    Path(path).write_bytes(data)
    return data
