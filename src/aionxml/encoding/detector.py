"""Single-file encoding guess: BOM sniffing plus a byte-distribution heuristic.

Detection order:

1. Byte-order mark (UTF-8, UTF-16LE, UTF-16BE).
2. BOM-less UTF-16 XML, recognised by the NUL-interleaved ``<`` that opens the document.
3. The label from the XML declaration, when it names a known ASCII-compatible
   codec and the bytes decode strictly under it.
4. Pure 7-bit content is UTF-8; otherwise strict UTF-8.
5. Legacy double-byte layout scan (GBK by default): every high-bit byte must be a
   valid lead byte immediately followed by a valid trail byte.
6. The configured default.
"""

from __future__ import annotations

import codecs
import logging
import re
from pathlib import Path

from aionxml.models.encoding import (
    DEFAULT_ENCODING,
    EncodingInfo,
    codec_for,
    is_known_encoding,
)

logger = logging.getLogger(__name__)

_BOM_TABLE: tuple[tuple[bytes, str], ...] = (
    (codecs.BOM_UTF8, "UTF-8"),
    (codecs.BOM_UTF16_LE, "UTF-16LE"),
    (codecs.BOM_UTF16_BE, "UTF-16BE"),
)

ByteRange = tuple[int, int]

# encoding label -> (lead byte range, allowed trail byte ranges)
DOUBLE_BYTE_LAYOUTS: dict[str, tuple[ByteRange, tuple[ByteRange, ...]]] = {
    "GBK": ((0x81, 0xFE), ((0x40, 0x7E), (0x80, 0xFE))),
    "BIG5": ((0x81, 0xFE), ((0x40, 0x7E), (0xA1, 0xFE))),
    "CP949": ((0x81, 0xFE), ((0x41, 0x5A), (0x61, 0x7A), (0x81, 0xFE))),
}

_XML_DECLARED_ENCODING = re.compile(
    rb"""<\?xml[^>]*?encoding\s*=\s*["']([A-Za-z0-9._\-]+)["']""", re.IGNORECASE
)
_DECLARATION_WINDOW = 256


def _in_ranges(byte: int, ranges: tuple[ByteRange, ...]) -> bool:
    return any(lo <= byte <= hi for lo, hi in ranges)


def is_valid_double_byte(data: bytes, legacy_encoding: str = "GBK") -> bool:
    """True when every high-bit byte forms a valid lead/trail pair under the layout."""
    (lead_lo, lead_hi), trail_ranges = DOUBLE_BYTE_LAYOUTS[legacy_encoding]
    i = 0
    n = len(data)
    while i < n:
        byte = data[i]
        if byte < 0x80:
            i += 1
            continue
        if not lead_lo <= byte <= lead_hi or i + 1 >= n:
            return False
        if not _in_ranges(data[i + 1], trail_ranges):
            return False
        i += 2
    return True


def _ascii_compatible(label: str) -> bool:
    try:
        return "<?xml".encode(codec_for(label)) == b"<?xml"
    except (LookupError, UnicodeError):
        return False


def declared_encoding(data: bytes) -> str | None:
    """Encoding named by the XML declaration, if any."""
    match = _XML_DECLARED_ENCODING.search(data[:_DECLARATION_WINDOW])
    if match is None:
        return None
    return match.group(1).decode("ascii")


class EncodingDetector:
    """Best-effort, never-raising encoding guess for one file's bytes."""

    def __init__(
        self,
        legacy_encoding: str = "GBK",
        default: EncodingInfo = DEFAULT_ENCODING,
    ) -> None:
        if legacy_encoding not in DOUBLE_BYTE_LAYOUTS:
            raise ValueError(f"No double-byte layout for {legacy_encoding!r}")
        self._legacy_encoding = legacy_encoding
        self._default = default

    @property
    def legacy_encoding(self) -> str:
        return self._legacy_encoding

    def detect(self, data: bytes) -> EncodingInfo:
        by_bom = self.detect_bom(data)
        if by_bom is not None:
            logger.debug("Encoding from BOM: %s", by_bom)
            return by_bom

        if data.startswith(b"<\x00"):
            return EncodingInfo(encoding="UTF-16LE", has_bom=False)
        if data.startswith(b"\x00<"):
            return EncodingInfo(encoding="UTF-16BE", has_bom=False)

        by_declaration = self._declared(data)
        if by_declaration is not None:
            logger.debug("Encoding from XML declaration: %s", by_declaration)
            return by_declaration

        if data.isascii():
            return EncodingInfo(encoding="UTF-8", has_bom=False)

        try:
            data.decode("utf-8")
        except UnicodeDecodeError:
            pass
        else:
            return EncodingInfo(encoding="UTF-8", has_bom=False)

        if is_valid_double_byte(data, self._legacy_encoding):
            logger.debug("Byte stream validates as %s", self._legacy_encoding)
            return EncodingInfo(encoding=self._legacy_encoding, has_bom=False)

        logger.warning("Could not determine encoding, using default %s", self._default)
        return self._default

    def detect_file(self, path: Path | str) -> EncodingInfo:
        return self.detect(Path(path).read_bytes())

    @staticmethod
    def _declared(data: bytes) -> EncodingInfo | None:
        declared = declared_encoding(data)
        if not declared or not is_known_encoding(declared) or not _ascii_compatible(declared):
            return None
        try:
            data.decode(codec_for(declared))
        except UnicodeDecodeError:
            return None
        return EncodingInfo(encoding=declared, has_bom=False)

    @staticmethod
    def detect_bom(data: bytes) -> EncodingInfo | None:
        for bom, label in _BOM_TABLE:
            if data.startswith(bom):
                return EncodingInfo(encoding=label, has_bom=True)
        return None
