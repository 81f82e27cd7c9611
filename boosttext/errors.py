"""Errors raised while reading or writing Boost text archives.

Every error kind is its own class so callers can test for the exact
failure with ``except``/``pytest.raises`` instead of matching messages.
"""

from __future__ import annotations


class BoostError(Exception):
    """Base class for all archive errors."""


class NotBoostError(BoostError):
    """Missing or empty source, or the magic signature did not match."""


class InvalidHeaderError(BoostError):
    """The magic signature matched but the header fields are malformed."""


class InvalidTypeDescrError(BoostError):
    """A type descriptor record could not be decoded."""


class InvalidArrayLenError(BoostError):
    """Encoded fixed-array length differs from the destination length."""


class TypeNotSupportedError(BoostError):
    """The value's shape has no defined encoding."""


class UnexpectedEOFError(BoostError, EOFError):
    """The source ran out in the middle of a token or payload."""


class NotADelimiterError(BoostError):
    """The byte following a string payload is not the delimiter."""


class ShortWriteError(BoostError, OSError):
    """The sink accepted fewer bytes than it was given."""


class ParseError(BoostError, ValueError):
    """A numeric token could not be parsed."""

    def __init__(self, message: str, token: str = None, offset: int = None):
        self.token = token
        self.offset = offset
        full_msg = message
        if offset is not None:
            full_msg = f"Offset {offset}: {message}"
        if token is not None:
            full_msg += f" (token {token!r})"
        super().__init__(full_msg)
