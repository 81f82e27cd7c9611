"""Archive header: magic signature and library version.

A Boost text archive starts with::

    22 serialization::archive 17 <values...>

where ``22`` is the length prefix of the signature string and ``17`` is the
serialization library version. The header is written once per archive by
the encoder and read once, before the first value, by the decoder.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .errors import BoostError, InvalidHeaderError, NotBoostError

logger = logging.getLogger(__name__)

MAGIC_SIGNATURE = b"serialization::archive"

# Library version written by current Boost releases.
LIBRARY_VERSION = 17


@dataclass(frozen=True)
class Header:
    """Version record following the magic signature.

    ``Header()`` (version 0) is the "not yet customized" value: an encoder
    holding it replaces it with the default header of its architecture
    profile when the header is written.
    """

    version: int = 0

    @property
    def is_zero(self) -> bool:
        return self == Header()

    def marshal_boost(self, w) -> None:
        w.write_u16(self.version)

    @classmethod
    def unmarshal_boost(cls, r) -> "Header":
        return cls(version=int(r.read_u16()))


def read_header(r) -> Header:
    """Read and check the signature, then decode the header fields.

    Anything going wrong before the signature matched is reported as
    NotBoostError; anything after it as InvalidHeaderError.
    """
    r.check()
    if r.source is None:
        raise r.latch(NotBoostError("no archive source"))

    try:
        signature = r.read_bytes()
    except BoostError as exc:
        raise r.latch(NotBoostError(f"missing archive signature: {exc}")) from exc
    if signature != MAGIC_SIGNATURE:
        raise r.latch(NotBoostError(f"bad archive signature {signature[:64]!r}"))

    try:
        hdr = Header.unmarshal_boost(r)
    except BoostError as exc:
        raise r.latch(InvalidHeaderError(f"invalid archive header: {exc}")) from exc

    logger.debug("read archive header, library version %d", hdr.version)
    return hdr


def write_header(w, hdr: Header) -> None:
    w.write_string(MAGIC_SIGNATURE)
    hdr.marshal_boost(w)
    logger.debug("wrote archive header, library version %d", hdr.version)
