"""
loc_stream.py - Little-endian byte stream primitives for loc files

Wraps a seekable binary file object with an explicit cursor and provides
the fixed-width integer and string codecs shared by the locmeta and locres
formats.

String format:
    i32 length, then payload
      length > 0   length UTF-8 bytes, trailing NUL included
      length < 0   -length UTF-16LE code units, trailing NUL unit included
      length == 0  empty string, no payload

String list format:
    u32 count, then count strings

Usage:
    with open(path, 'rb') as f:
        reader = ByteReader(f)
        version = reader.read_u8()
        name = reader.read_string()
"""

import io
import struct
from typing import BinaryIO, List, Optional, Sequence

from loc_errors import StringDecodeError, StringEncodeError, TruncatedReadError

U8 = struct.Struct('<B')
U32 = struct.Struct('<I')
U64 = struct.Struct('<Q')
I32 = struct.Struct('<i')

HIGH_SURROGATES = range(0xD800, 0xDC00)
LOW_SURROGATES = range(0xDC00, 0xE000)


def check_utf16le(data: bytes) -> None:
    """Validate a UTF-16LE payload, raising StringDecodeError on bad pairs."""
    if len(data) % 2 != 0:
        raise StringDecodeError(
            f"Odd UTF-16 payload length: {len(data)} bytes")

    units = struct.unpack(f'<{len(data) // 2}H', data)
    i = 0
    while i < len(units):
        unit = units[i]
        i += 1
        if unit in LOW_SURROGATES:
            raise StringDecodeError(
                f"Unexpected low surrogate 0x{unit:04X} at unit {i - 1}")
        if unit in HIGH_SURROGATES:
            if i >= len(units):
                raise StringDecodeError(
                    "Unexpected end of data after high surrogate")
            if units[i] not in LOW_SURROGATES:
                raise StringDecodeError(
                    f"Invalid surrogate pair 0x{unit:04X} 0x{units[i]:04X}")
            i += 1


def decode_utf16le(data: bytes) -> str:
    """Decode a UTF-16LE payload with strict surrogate handling."""
    check_utf16le(data)
    return data.decode('utf-16-le')


def encode_string(value: str, force_wide: bool = False) -> bytes:
    """Encode a string with its i32 length prefix.

    7-bit ASCII is written as positive-length UTF-8 unless force_wide is
    set; everything else becomes negative-length UTF-16LE.
    Raises StringEncodeError for strings holding lone surrogates.
    """
    if not value:
        return I32.pack(0)

    terminated = value + '\x00'
    if not force_wide and terminated.isascii():
        payload = terminated.encode('ascii')
        return I32.pack(len(payload)) + payload

    try:
        payload = terminated.encode('utf-16-le')
    except UnicodeEncodeError as e:
        raise StringEncodeError(f"Cannot encode string as UTF-16LE: {e}") from e
    return I32.pack(-(len(payload) // 2)) + payload


class ByteReader:
    """Reads little-endian primitives from a seekable binary stream."""

    def __init__(self, stream: BinaryIO):
        self.stream = stream

    def tell(self) -> int:
        return self.stream.tell()

    def seek(self, position: int) -> None:
        """Move the cursor; positions past the end of the stream are rejected."""
        end = self.stream.seek(0, io.SEEK_END)
        if position > end:
            raise TruncatedReadError(
                f"Offset {position} is past the end of the data ({end} bytes)")
        self.stream.seek(position)

    def read(self, size: int, exact: bool = True) -> bytes:
        """Read size bytes.

        With exact=False a short read is returned as-is instead of raising.
        """
        pos = self.stream.tell()
        data = self.stream.read(size)
        if exact and len(data) < size:
            raise TruncatedReadError(
                f"Need {size} bytes at offset {pos}, got {len(data)}")
        return data

    def read_u8(self) -> int:
        return U8.unpack(self.read(1))[0]

    def read_u32(self) -> int:
        return U32.unpack(self.read(4))[0]

    def read_u64(self) -> int:
        return U64.unpack(self.read(8))[0]

    def read_i32(self) -> int:
        return I32.unpack(self.read(4))[0]

    def read_string(self) -> str:
        """Read a length-prefixed UTF-8 or UTF-16LE string."""
        length = self.read_i32()
        if length == 0:
            return ''

        if length > 0:
            raw = self.read(length)
            try:
                text = raw.decode('utf-8')
            except UnicodeDecodeError as e:
                raise StringDecodeError(f"Invalid UTF-8 string: {e}") from e
            return text.rstrip('\x00')

        raw = self.read(-length * 2)
        return decode_utf16le(raw).rstrip('\x00')

    def read_string_list(self) -> List[str]:
        count = self.read_u32()
        return [self.read_string() for _ in range(count)]


class ByteWriter:
    """Writes little-endian primitives to a seekable binary stream."""

    def __init__(self, stream: BinaryIO):
        self.stream = stream

    def tell(self) -> int:
        return self.stream.tell()

    def seek(self, position: int) -> None:
        self.stream.seek(position)

    def write(self, data: bytes) -> None:
        self.stream.write(data)

    def write_u8(self, value: int) -> None:
        self.write(U8.pack(value))

    def write_u32(self, value: int) -> None:
        self.write(U32.pack(value))

    def write_u64(self, value: int) -> None:
        self.write(U64.pack(value))

    def write_i32(self, value: int) -> None:
        self.write(I32.pack(value))

    def write_string(self, value: str, force_wide: bool = False) -> None:
        self.write(encode_string(value, force_wide))

    def write_string_list(self, items: Optional[Sequence[str]]) -> None:
        items = items or []
        self.write_u32(len(items))
        for item in items:
            self.write_string(item)
