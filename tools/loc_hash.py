"""
loc_hash.py - String hashes used by the locres wire format

Two deterministic, non-cryptographic 32-bit hashes over the UTF-16 form
of a string:

crc_hash32:
    CRC-32 (zlib polynomial) where every UTF-16 code unit is fed as a
    4-byte little-endian word. This is the checksum the Optimized format
    stores in front of every namespace name and key.

key_hash32:
    CityHash64 over the UTF-16LE bytes, folded to 32 bits as
    ``low + high * 23``. Used by the CityHash format.

Reference vectors:
    crc_hash32("example") == 0x7C20EA98
    key_hash32("example") == 0xBF7A4AE6
"""

import struct
import zlib

from cityhash import CityHash64

MASK32 = 0xFFFFFFFF


def _utf16_units(value: str):
    data = value.encode('utf-16-le', errors='surrogatepass')
    return struct.unpack(f'<{len(data) // 2}H', data)


def crc_hash32(value: str) -> int:
    """Compute the CRC-32 variant over the UTF-16 code units of a string."""
    units = _utf16_units(value)
    widened = struct.pack(f'<{len(units)}I', *units)
    return zlib.crc32(widened) & MASK32


def fold64(value: int) -> int:
    """Fold a 64-bit hash to 32 bits (low word + high word * 23)."""
    low = value & MASK32
    high = (value >> 32) & MASK32
    return (low + high * 23) & MASK32


def key_hash32(value: str) -> int:
    """Compute the CityHash-based 32-bit key hash of a string."""
    data = value.encode('utf-16-le', errors='surrogatepass')
    return fold64(CityHash64(data))
