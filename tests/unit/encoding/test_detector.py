"""Tests for EncodingDetector."""

from __future__ import annotations

import codecs

import pytest

from aionxml.encoding.detector import (
    DOUBLE_BYTE_LAYOUTS,
    EncodingDetector,
    declared_encoding,
    is_valid_double_byte,
)
from aionxml.models.encoding import DEFAULT_ENCODING, EncodingInfo

XML = '<?xml version="1.0" encoding="{enc}"?>\n<items><item id="1" name="{name}"/></items>\n'


@pytest.fixture
def detector():
    return EncodingDetector()


class TestBom:
    @pytest.mark.parametrize("bom, label", [
        (codecs.BOM_UTF8, "UTF-8"),
        (codecs.BOM_UTF16_LE, "UTF-16LE"),
        (codecs.BOM_UTF16_BE, "UTF-16BE"),
    ])
    def test_bom_wins(self, detector, bom, label):
        assert detector.detect(bom + b"<a/>") == EncodingInfo(encoding=label, has_bom=True)

    def test_utf16le_document_with_bom(self, detector):
        data = codecs.BOM_UTF16_LE + XML.format(enc="UTF-16", name="剑").encode("utf-16-le")
        assert detector.detect(data) == EncodingInfo(encoding="UTF-16LE", has_bom=True)


class TestBomlessUtf16:
    def test_little_endian(self, detector):
        data = XML.format(enc="UTF-16", name="x").encode("utf-16-le")
        assert detector.detect(data) == EncodingInfo(encoding="UTF-16LE", has_bom=False)

    def test_big_endian(self, detector):
        data = XML.format(enc="UTF-16", name="x").encode("utf-16-be")
        assert detector.detect(data) == EncodingInfo(encoding="UTF-16BE", has_bom=False)


class TestAscii:
    def test_plain_ascii_is_utf8(self, detector):
        assert detector.detect(b"<items/>") == EncodingInfo(encoding="UTF-8")

    def test_declared_ascii_compatible_label_is_used(self, detector):
        data = XML.format(enc="gbk", name="sword").encode("ascii")
        assert detector.detect(data) == EncodingInfo(encoding="GBK")

    def test_declared_utf16_in_ascii_bytes_is_ignored(self, detector):
        data = XML.format(enc="UTF-16", name="sword").encode("ascii")
        assert detector.detect(data) == EncodingInfo(encoding="UTF-8")

    def test_unknown_declared_label_is_ignored(self, detector):
        data = XML.format(enc="x-klingon", name="sword").encode("ascii")
        assert detector.detect(data) == EncodingInfo(encoding="UTF-8")


class TestUtf8AndLegacy:
    def test_multibyte_utf8(self, detector):
        data = XML.format(enc="UTF-8", name="물약 药水").encode("utf-8")
        assert detector.detect(data) == EncodingInfo(encoding="UTF-8")

    def test_gbk_without_bom(self, detector):
        data = XML.format(enc="GBK", name="长剑和盾牌").encode("gbk")
        assert detector.detect(data) == EncodingInfo(encoding="GBK")

    def test_big5_layout(self):
        data = XML.format(enc="BIG5", name="長劍").encode("big5")
        assert EncodingDetector(legacy_encoding="BIG5").detect(data) == EncodingInfo(encoding="BIG5")

    def test_declared_big5_beats_gbk_layout_scan(self, detector):
        data = XML.format(enc="Big5", name="長劍武器").encode("big5")
        assert detector.detect(data) == EncodingInfo(encoding="BIG5")

    def test_declared_cp949_beats_gbk_layout_scan(self, detector):
        data = XML.format(enc="CP949", name="물약").encode("cp949")
        assert detector.detect(data) == EncodingInfo(encoding="CP949")

    def test_declaration_that_does_not_decode_is_ignored(self, detector):
        data = XML.format(enc="UTF-8", name="长剑和盾牌").encode("gbk")
        assert detector.detect(data) == EncodingInfo(encoding="GBK")

    def test_undecodable_falls_back_to_default(self, detector):
        assert detector.detect(b"<a>\x80\x80\x80</a>") == DEFAULT_ENCODING

    def test_custom_default(self):
        default = EncodingInfo(encoding="UTF-16LE", has_bom=True)
        assert EncodingDetector(default=default).detect(b"<a>\x80</a>") == default

    def test_empty_input(self, detector):
        assert detector.detect(b"") == EncodingInfo(encoding="UTF-8")

    def test_unknown_layout_rejected(self):
        with pytest.raises(ValueError):
            EncodingDetector(legacy_encoding="SHIFT_JIS")


class TestDoubleByteScan:
    def test_layouts(self):
        assert set(DOUBLE_BYTE_LAYOUTS) == {"GBK", "BIG5", "CP949"}

    def test_truncated_lead_byte_fails(self):
        assert not is_valid_double_byte(b"abc\xb3")

    def test_bad_trail_byte_fails(self):
        assert not is_valid_double_byte(b"\xb3\x20")

    def test_cp949_trail_ranges(self):
        assert is_valid_double_byte("한글".encode("cp949"), "CP949")
        assert not is_valid_double_byte(b"\xb0\x5b", "CP949")


class TestDetectFile:
    def test_reads_from_disk(self, detector, tmp_path):
        path = tmp_path / "items.xml"
        path.write_bytes(codecs.BOM_UTF8 + b"<a/>")
        assert detector.detect_file(path) == EncodingInfo(encoding="UTF-8", has_bom=True)

    def test_missing_file_propagates(self, detector, tmp_path):
        with pytest.raises(FileNotFoundError):
            detector.detect_file(tmp_path / "missing.xml")


def test_declared_encoding_parsing():
    assert declared_encoding(b"<?xml version='1.0' encoding='euc-kr'?>") == "euc-kr"
    assert declared_encoding(b"<items/>") is None
