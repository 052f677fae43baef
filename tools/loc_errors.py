"""
loc_errors.py - Exception types raised by the locmeta/locres codecs.

Every error derives from LocError so callers can catch the whole family,
and also from the closest builtin so ``except ValueError`` keeps working.
"""


class LocError(Exception):
    """Base class for localization file errors."""
    pass


class InvalidExtensionError(LocError, ValueError):
    """File path does not carry the expected suffix."""
    pass


class InvalidFormatError(LocError, ValueError):
    """File does not start with the expected magic."""
    pass


class InvalidVersionError(LocError, ValueError):
    """Version byte is outside the supported range."""
    pass


class InvalidStringIndexError(LocError, IndexError):
    """Entry references a row past the end of the string table."""
    pass


class TruncatedReadError(LocError, EOFError):
    """Data ended before a fixed-size field or payload was complete."""
    pass


class StringDecodeError(LocError, ValueError):
    """Malformed UTF-8 or UTF-16LE string payload."""
    pass


class StringEncodeError(LocError, ValueError):
    """String cannot be represented as UTF-16LE (lone surrogate)."""
    pass
