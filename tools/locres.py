"""
locres.py - Encoder/decoder for .locres localization resource files

A locres file maps (namespace, key) pairs to translated strings. Four wire
format generations exist, each adding to the previous one:

Legacy (0):
    No header. Namespaces and keys are written in place with the
    translation stored inline after each key.

Compact (1):
    16-byte magic + version(u8) + string table offset(u64) header.
    Translations are deduplicated into a string table at the end of the
    file and entries reference them by index.

Optimized (2):
    Compact plus a total key count, a CRC hash in front of every namespace
    name and key, and a reference count per string table row.

CityHash (3):
    Optimized with the CRC hashes replaced by CityHash-based key hashes.

Binary Format (Compact and later):
    Header (25 bytes): magic(16) + version(u8) + table_offset(u64)
    Keys:
        [entry_count(u32)]                      Optimized+
        namespace_count(u32)
        per namespace:
            [name_hash(u32)] name(string) key_count(u32)
            per key:
                [key_hash(u32)] key(string) source_hash(u32) string_index(u32)
    String table (at table_offset):
        string_count(u32)
        per string: text(string) [ref_count(u32)]   ref_count Optimized+

Files without the magic are Legacy; the 16 bytes probed for the magic are
already part of the Legacy payload.

Usage:
    from locres import Locres, LocresEntry, LocresFile, LocresNamespace, LocresVersion

    locres = LocresFile('Game.locres').read()
    entry = locres.get('UI').get('Start')
    print(entry.translation)

    ns = LocresNamespace('UI')
    ns.set(LocresEntry('Start', 'Aloita', 0x12345678))
    out = Locres(LocresVersion.CITYHASH)
    out.set(ns)
    LocresFile('fi/Game.locres').write(out)
"""

import copy
import io
import logging
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import BinaryIO, Callable, Dict, Iterator, List, Optional, Union

from loc_errors import InvalidExtensionError, InvalidStringIndexError, InvalidVersionError
from loc_hash import crc_hash32, key_hash32
from loc_stream import ByteReader, ByteWriter

logger = logging.getLogger(__name__)

LOCRES_EXTENSION = '.locres'
LOCRES_MAGIC = bytes([
    0x0E, 0x14, 0x74, 0x75, 0x67, 0x4A, 0x03, 0xFC,
    0x4A, 0x15, 0x90, 0x9D, 0xC3, 0x37, 0x7F, 0x1B,
])

# magic(16) + version(1)
TABLE_OFFSET_POS = len(LOCRES_MAGIC) + 1
# magic(16) + version(1) + table_offset(8)
KEYS_POS = TABLE_OFFSET_POS + 8


class LocresVersion(IntEnum):
    """Locres wire format generations."""
    LEGACY = 0
    COMPACT = 1
    OPTIMIZED = 2
    CITYHASH = 3

    @property
    def has_header(self) -> bool:
        return self >= LocresVersion.COMPACT

    @property
    def has_string_table(self) -> bool:
        return self >= LocresVersion.COMPACT

    @property
    def has_ref_counts(self) -> bool:
        return self >= LocresVersion.OPTIMIZED

    @property
    def has_entry_count(self) -> bool:
        return self >= LocresVersion.OPTIMIZED

    @property
    def has_name_hashes(self) -> bool:
        return self >= LocresVersion.OPTIMIZED

    @property
    def name_hash(self) -> Optional[Callable[[str], int]]:
        """Hash written before namespace names and keys, if any."""
        if self == LocresVersion.CITYHASH:
            return key_hash32
        if self == LocresVersion.OPTIMIZED:
            return crc_hash32
        return None


@dataclass
class LocresEntry:
    """A single key -> translation pair.

    source_hash is the checksum of the source text and is carried through
    unchanged. string_index is only meaningful during a write.
    """
    key: str
    translation: str
    source_hash: int = 0
    string_index: Optional[int] = field(default=None, compare=False, repr=False)


@dataclass
class LocresNamespace:
    """A named, insertion-ordered group of entries."""
    name: str
    entries: Dict[str, LocresEntry] = field(default_factory=dict)

    def get(self, key: str) -> Optional[LocresEntry]:
        return self.entries.get(key)

    def set(self, entry: LocresEntry) -> None:
        """Add an entry, replacing any entry with the same key in place."""
        self.entries[entry.key] = entry

    def remove(self, key: str) -> None:
        self.entries.pop(key, None)

    @property
    def count(self) -> int:
        return len(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[LocresEntry]:
        return iter(self.entries.values())

    def __contains__(self, key: str) -> bool:
        return key in self.entries


@dataclass
class Locres:
    """An insertion-ordered dictionary of namespaces."""
    version: LocresVersion = LocresVersion.CITYHASH
    namespaces: Dict[str, LocresNamespace] = field(default_factory=dict)

    def get(self, name: str) -> Optional[LocresNamespace]:
        return self.namespaces.get(name)

    def set(self, namespace: LocresNamespace) -> None:
        """Add a namespace, replacing any namespace with the same name in place."""
        self.namespaces[namespace.name] = namespace

    def remove(self, name: str) -> None:
        self.namespaces.pop(name, None)

    @property
    def count(self) -> int:
        return len(self.namespaces)

    @property
    def entry_count(self) -> int:
        """Total number of keys across all namespaces."""
        return sum(len(ns) for ns in self.namespaces.values())

    def copy(self) -> 'Locres':
        """Return an independent deep copy."""
        return copy.deepcopy(self)

    def __len__(self) -> int:
        return len(self.namespaces)

    def __iter__(self) -> Iterator[LocresNamespace]:
        return iter(self.namespaces.values())

    def __contains__(self, name: str) -> bool:
        return name in self.namespaces


@dataclass
class StringTableRow:
    """A unique translation in the string table."""
    text: str
    index: int
    ref_count: int = 1


def build_string_table(locres: Locres) -> List[StringTableRow]:
    """Deduplicate translations and assign each entry its string index.

    Rows are ordered by first appearance while walking namespaces and
    entries in insertion order.
    """
    rows: Dict[str, StringTableRow] = {}
    for namespace in locres:
        for entry in namespace:
            row = rows.get(entry.translation)
            if row is None:
                row = StringTableRow(entry.translation, len(rows))
                rows[entry.translation] = row
            else:
                row.ref_count += 1
            entry.string_index = row.index
    return list(rows.values())


def _read_string_table(reader: ByteReader, version: LocresVersion,
                       offset: int) -> List[str]:
    reader.seek(offset)
    count = reader.read_u32()
    strings = []
    for _ in range(count):
        strings.append(reader.read_string())
        if version.has_ref_counts:
            reader.read_u32()
    return strings


def decode_locres(stream: BinaryIO) -> Locres:
    """Decode a locres dictionary from a seekable binary stream."""
    reader = ByteReader(stream)
    reader.seek(0)

    version = LocresVersion.LEGACY
    table_offset = 0
    magic = reader.read(len(LOCRES_MAGIC), exact=False)
    if magic == LOCRES_MAGIC:
        version_num = reader.read_u8()
        if version_num > LocresVersion.CITYHASH:
            raise InvalidVersionError(f"Unsupported locres version: {version_num}")
        version = LocresVersion(version_num)
        table_offset = reader.read_u64()
    else:
        logger.debug("No locres magic, reading as legacy")

    strings: List[str] = []
    if version.has_string_table:
        strings = _read_string_table(reader, version, table_offset)
        logger.debug("String table at %d: %d strings", table_offset, len(strings))

    reader.seek(KEYS_POS if version.has_header else 0)
    if version.has_entry_count:
        reader.read_u32()

    locres = Locres(version)
    namespace_count = reader.read_u32()
    for _ in range(namespace_count):
        if version.has_name_hashes:
            reader.read_u32()
        namespace = LocresNamespace(reader.read_string())

        key_count = reader.read_u32()
        for _ in range(key_count):
            if version.has_name_hashes:
                reader.read_u32()
            key = reader.read_string()
            source_hash = reader.read_u32()

            if version.has_string_table:
                index = reader.read_u32()
                if index >= len(strings):
                    raise InvalidStringIndexError(
                        f"String index {index} out of range for key '{key}' "
                        f"({len(strings)} strings)")
                translation = strings[index]
            else:
                translation = reader.read_string()

            namespace.set(LocresEntry(key, translation, source_hash))
        locres.set(namespace)

    logger.debug("Decoded locres %s: %d namespaces, %d keys",
                 version.name, locres.count, locres.entry_count)
    return locres


def _encode_legacy(locres: Locres, writer: ByteWriter) -> None:
    writer.write_u32(locres.count)
    for namespace in locres:
        writer.write_string(namespace.name, force_wide=True)
        writer.write_u32(namespace.count)
        for entry in namespace:
            writer.write_string(entry.key)
            writer.write_u32(entry.source_hash)
            writer.write_string(entry.translation)


def encode_locres(locres: Locres, stream: BinaryIO) -> None:
    """Encode a locres dictionary to a seekable binary stream.

    Assigns string_index on every entry as a side effect.
    """
    version = LocresVersion(locres.version)
    writer = ByteWriter(stream)

    if version.has_header:
        writer.write(LOCRES_MAGIC)
        writer.write_u8(version)
        writer.write_u64(0)  # table offset, patched below

    table = build_string_table(locres)

    if not version.has_string_table:
        _encode_legacy(locres, writer)
        return

    name_hash = version.name_hash
    if version.has_entry_count:
        writer.write_u32(locres.entry_count)

    writer.write_u32(locres.count)
    for namespace in locres:
        if name_hash is not None:
            writer.write_u32(name_hash(namespace.name))
        writer.write_string(namespace.name)
        writer.write_u32(namespace.count)

        for entry in namespace:
            if name_hash is not None:
                writer.write_u32(name_hash(entry.key))
            writer.write_string(entry.key)
            writer.write_u32(entry.source_hash)
            writer.write_u32(entry.string_index)

    table_offset = writer.tell()
    writer.seek(TABLE_OFFSET_POS)
    writer.write_u64(table_offset)
    writer.seek(table_offset)

    writer.write_u32(len(table))
    for row in table:
        writer.write_string(row.text)
        if version.has_ref_counts:
            writer.write_u32(row.ref_count)

    logger.debug("Encoded locres %s: %d keys, %d unique strings at %d",
                 version.name, locres.entry_count, len(table), table_offset)


class LocresFile:
    """Reads and writes a .locres file at a fixed path."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        if not str(self.path).endswith(LOCRES_EXTENSION):
            raise InvalidExtensionError(
                f"Expected a {LOCRES_EXTENSION} file: {self.path}")

    def read(self) -> Locres:
        with open(self.path, 'rb') as f:
            return decode_locres(f)

    def write(self, locres: Locres) -> None:
        # Truncates first; a failed write leaves a partial file behind
        with open(self.path, 'wb') as f:
            encode_locres(locres, f)


# Convenience functions
def to_bytes(locres: Locres) -> bytes:
    """Encode a locres dictionary to bytes."""
    buf = io.BytesIO()
    encode_locres(locres, buf)
    return buf.getvalue()


def from_bytes(data: bytes) -> Locres:
    """Decode a locres dictionary from bytes."""
    return decode_locres(io.BytesIO(data))
