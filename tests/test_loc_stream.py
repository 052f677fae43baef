"""
Tests for the byte stream primitives (integers, strings, string lists).
"""

import io
import struct

import pytest

from loc_errors import StringDecodeError, StringEncodeError, TruncatedReadError
from loc_stream import ByteReader, ByteWriter, decode_utf16le, encode_string


def reader_for(data: bytes) -> ByteReader:
    return ByteReader(io.BytesIO(data))


class TestIntegers:
    """Fixed-width little-endian integers."""

    def test_write_layout(self):
        buf = io.BytesIO()
        writer = ByteWriter(buf)
        writer.write_u8(0xAB)
        writer.write_u32(0x11223344)
        writer.write_u64(0x0102030405060708)
        writer.write_i32(-2)
        assert buf.getvalue() == (
            b'\xAB'
            b'\x44\x33\x22\x11'
            b'\x08\x07\x06\x05\x04\x03\x02\x01'
            b'\xFE\xFF\xFF\xFF'
        )

    def test_read_layout(self):
        reader = reader_for(b'\xAB\x44\x33\x22\x11\x08\x07\x06\x05\x04\x03\x02\x01\xFE\xFF\xFF\xFF')
        assert reader.read_u8() == 0xAB
        assert reader.read_u32() == 0x11223344
        assert reader.read_u64() == 0x0102030405060708
        assert reader.read_i32() == -2
        assert reader.tell() == 17

    def test_truncated_u32(self):
        with pytest.raises(TruncatedReadError, match="Need 4 bytes"):
            reader_for(b'\x01\x00').read_u32()

    def test_short_read_allowed(self):
        reader = reader_for(b'\x01\x02\x03')
        assert reader.read(16, exact=False) == b'\x01\x02\x03'

    def test_seek(self):
        buf = io.BytesIO()
        writer = ByteWriter(buf)
        writer.write_u64(0)
        writer.write_u32(7)
        end = writer.tell()
        writer.seek(0)
        writer.write_u64(end)
        writer.seek(end)
        assert buf.getvalue() == struct.pack('<QI', 12, 7)

    def test_seek_past_end(self):
        reader = reader_for(b'\x00' * 8)
        reader.seek(8)
        assert reader.tell() == 8
        with pytest.raises(TruncatedReadError, match="past the end"):
            reader.seek(9)
        with pytest.raises(TruncatedReadError):
            reader.seek(2**64 - 1)


class TestStringEncode:
    """String encoding selection."""

    def test_ascii(self):
        assert encode_string("hello") == b'\x06\x00\x00\x00hello\x00'

    def test_non_ascii(self):
        data = encode_string("é")
        assert struct.unpack_from('<i', data)[0] == -2
        assert data[4:] == b'\xE9\x00\x00\x00'

    def test_empty(self):
        assert encode_string("") == b'\x00\x00\x00\x00'
        assert encode_string("", force_wide=True) == b'\x00\x00\x00\x00'

    def test_force_wide(self):
        data = encode_string("UI", force_wide=True)
        assert data == struct.pack('<i', -3) + b'U\x00I\x00\x00\x00'

    def test_surrogate_pair_counts_two_units(self):
        data = encode_string("\U0001F44B")
        assert struct.unpack_from('<i', data)[0] == -3
        assert data[4:] == b'\x3D\xD8\x4B\xDC\x00\x00'

    def test_lone_surrogate_rejected(self):
        with pytest.raises(StringEncodeError):
            encode_string("ab\ud800")


class TestStringDecode:
    """String decoding and malformed payloads."""

    def test_ascii(self):
        assert reader_for(b'\x06\x00\x00\x00hello\x00').read_string() == "hello"

    def test_wide(self):
        data = struct.pack('<i', -2) + b'\xE9\x00\x00\x00'
        assert reader_for(data).read_string() == "é"

    def test_empty(self):
        reader = reader_for(b'\x00\x00\x00\x00\xFF')
        assert reader.read_string() == ""
        assert reader.tell() == 4

    def test_strips_multiple_nuls(self):
        assert reader_for(b'\x04\x00\x00\x00ab\x00\x00').read_string() == "ab"

    def test_utf8_payload(self):
        payload = "päivä\x00".encode('utf-8')
        data = struct.pack('<i', len(payload)) + payload
        assert reader_for(data).read_string() == "päivä"

    def test_inverse_of_encode(self):
        for text in ("hello", "é", "Näkemiin 👋", ""):
            assert reader_for(encode_string(text)).read_string() == text
            assert reader_for(encode_string(text, True)).read_string() == text

    def test_truncated_payload(self):
        with pytest.raises(TruncatedReadError):
            reader_for(b'\x06\x00\x00\x00hel').read_string()

    def test_invalid_utf8(self):
        with pytest.raises(StringDecodeError, match="UTF-8"):
            reader_for(b'\x02\x00\x00\x00\xFF\x00').read_string()

    def test_odd_utf16_length(self):
        with pytest.raises(StringDecodeError, match="Odd"):
            decode_utf16le(b'A')

    def test_lone_low_surrogate(self):
        with pytest.raises(StringDecodeError, match="low surrogate"):
            decode_utf16le(b'\x4B\xDC\x00\x00')

    def test_high_surrogate_without_low(self):
        with pytest.raises(StringDecodeError, match="surrogate pair"):
            decode_utf16le(b'\x3D\xD8A\x00')

    def test_end_of_data_mid_pair(self):
        with pytest.raises(StringDecodeError, match="end of data"):
            decode_utf16le(b'A\x00\x3D\xD8')

    def test_malformed_through_reader(self):
        data = struct.pack('<i', -2) + b'\x4B\xDC\x00\x00'
        with pytest.raises(StringDecodeError):
            reader_for(data).read_string()


class TestStringList:
    """u32-counted string lists."""

    def test_write(self):
        buf = io.BytesIO()
        ByteWriter(buf).write_string_list(["en", "fi"])
        assert buf.getvalue() == (
            b'\x02\x00\x00\x00'
            b'\x03\x00\x00\x00en\x00'
            b'\x03\x00\x00\x00fi\x00'
        )

    def test_none_writes_empty_list(self):
        buf = io.BytesIO()
        ByteWriter(buf).write_string_list(None)
        assert buf.getvalue() == b'\x00\x00\x00\x00'

    def test_read_preserves_order(self):
        buf = io.BytesIO()
        ByteWriter(buf).write_string_list(["zh-Hans", "en", "fi", "de"])
        assert reader_for(buf.getvalue()).read_string_list() == ["zh-Hans", "en", "fi", "de"]
