"""
locmeta.py - Encoder/decoder for .locmeta localization descriptor files

A locmeta file names the native culture of a localization target, the
path of its native .locres file and, from V1 on, the list of compiled
cultures.

Binary Format:
    magic(16)                 fixed, must match exactly
    version(u8)               0 = V0, 1 = V1
    native_culture(string)
    native_locres(string)
    compiled_cultures(list)   V1 only; V0 has no section at all

Usage:
    from locmeta import Locmeta, LocmetaFile, LocmetaVersion

    meta = LocmetaFile('Game.locmeta').read()
    print(meta.native_culture, meta.compiled_cultures)

    LocmetaFile('Out.locmeta').write(
        Locmeta(LocmetaVersion.V1, 'en', 'en/Game.locres', ['en', 'fi']))
"""

import io
import logging
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

from loc_errors import InvalidExtensionError, InvalidFormatError, InvalidVersionError
from loc_stream import ByteReader, ByteWriter

logger = logging.getLogger(__name__)

LOCMETA_EXTENSION = '.locmeta'
LOCMETA_MAGIC = bytes([
    0x4F, 0xEE, 0x4C, 0xA1, 0x68, 0x48, 0x55, 0x83,
    0x6C, 0x4C, 0x46, 0xBD, 0x70, 0xDA, 0x50, 0x7C,
])


class LocmetaVersion(IntEnum):
    """Locmeta format versions."""
    V0 = 0
    V1 = 1

    @property
    def has_compiled_cultures(self) -> bool:
        return self >= LocmetaVersion.V1


@dataclass
class Locmeta:
    """Contents of a locmeta file.

    compiled_cultures is None under V0, where the format has no such section.
    """
    version: LocmetaVersion = LocmetaVersion.V1
    native_culture: str = ''
    native_locres: str = ''
    compiled_cultures: Optional[List[str]] = None


def decode_locmeta(stream: BinaryIO) -> Locmeta:
    """Decode a locmeta descriptor from a binary stream."""
    reader = ByteReader(stream)
    reader.seek(0)

    magic = reader.read(len(LOCMETA_MAGIC), exact=False)
    if magic != LOCMETA_MAGIC:
        raise InvalidFormatError(f"Not a locmeta file (magic {magic.hex()})")

    version_num = reader.read_u8()
    if version_num > LocmetaVersion.V1:
        raise InvalidVersionError(f"Unsupported locmeta version: {version_num}")
    version = LocmetaVersion(version_num)

    native_culture = reader.read_string()
    native_locres = reader.read_string()
    compiled_cultures = None
    if version.has_compiled_cultures:
        compiled_cultures = reader.read_string_list()

    logger.debug("Decoded locmeta %s: native=%s", version.name, native_culture)
    return Locmeta(version, native_culture, native_locres, compiled_cultures)


def encode_locmeta(locmeta: Locmeta, stream: BinaryIO) -> None:
    """Encode a locmeta descriptor to a binary stream."""
    version = LocmetaVersion(locmeta.version)
    writer = ByteWriter(stream)
    writer.write(LOCMETA_MAGIC)
    writer.write_u8(version)
    writer.write_string(locmeta.native_culture)
    writer.write_string(locmeta.native_locres)
    if version.has_compiled_cultures:
        writer.write_string_list(locmeta.compiled_cultures)
    elif locmeta.compiled_cultures:
        logger.debug("Dropping %d compiled cultures for V0 output",
                     len(locmeta.compiled_cultures))


class LocmetaFile:
    """Reads and writes a .locmeta file at a fixed path."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        if not str(self.path).endswith(LOCMETA_EXTENSION):
            raise InvalidExtensionError(
                f"Expected a {LOCMETA_EXTENSION} file: {self.path}")

    def read(self) -> Locmeta:
        with open(self.path, 'rb') as f:
            return decode_locmeta(f)

    def write(self, locmeta: Locmeta) -> None:
        # Truncates first; a failed write leaves a partial file behind
        with open(self.path, 'wb') as f:
            encode_locmeta(locmeta, f)


# Convenience functions
def to_bytes(locmeta: Locmeta) -> bytes:
    """Encode a locmeta descriptor to bytes."""
    buf = io.BytesIO()
    encode_locmeta(locmeta, buf)
    return buf.getvalue()


def from_bytes(data: bytes) -> Locmeta:
    """Decode a locmeta descriptor from bytes."""
    return decode_locmeta(io.BytesIO(data))
