"""
text_archive.py - Primitive token reader/writer for Boost text archives

Format specification:
- Numbers: ASCII decimal (floats may use exponents, ``inf``, ``nan``)
  followed by one space delimiter
- Booleans: unsigned 8-bit integer token, 0 is false
- Complex: real token then imaginary token
- Strings: length token, then exactly that many raw bytes, then one
  delimiter (a missing delimiter at end of input is tolerated)
- Lengths: unsigned decimal, 32 or 64 bits wide depending on the
  architecture profile

Example archive holding ``int16(4)`` and ``"pet"``::

    22 serialization::archive 17 4 3 pet

Every read and write goes through a sticky error slot: the first failure
is latched and re-raised by every later call, without touching the
underlying stream again.

Usage:
    w = WBuffer(io.BytesIO())
    w.write_i16(4)
    w.write_string("pet")

    r = RBuffer(io.BytesIO(b"4 3 pet "))
    legs = r.read_i16()
    name = r.read_string()
"""

from __future__ import annotations

import re
from typing import Any, BinaryIO, Optional, Union

import numpy as np

from . import header as _header
from . import registry as _registry
from .arch import Arch
from .errors import (
    NotADelimiterError,
    ParseError,
    ShortWriteError,
    UnexpectedEOFError,
)
from .registry import Registry

DELIMITER = b" "

# Boost ends an archive with a newline, so it also terminates a token.
DELIMITERS = (DELIMITER, b"\n")

_UINT_RE = re.compile(r"[0-9]+")
_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)

_UINT64_MAX = (1 << 64) - 1
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1

_CHUNK_SIZE = 64 * 1024


def _wrap(value: int, bits: int, signed: bool) -> int:
    """Two's complement narrowing, like a C integer conversion."""
    value &= (1 << bits) - 1
    if signed and value >= 1 << (bits - 1):
        value -= 1 << bits
    return value


class RBuffer:
    """Reads primitive values from a Boost text archive."""

    def __init__(self, source: Optional[BinaryIO], arch: Arch = Arch.UNSPECIFIED):
        self.source = source
        self.arch = Arch(arch)
        self.types = Registry()
        self._err: Optional[BaseException] = None
        self._pos = 0

    @property
    def err(self) -> Optional[BaseException]:
        """The latched error, if any."""
        return self._err

    @property
    def offset(self) -> int:
        """Number of bytes consumed from the source so far."""
        return self._pos

    def latch(self, err: BaseException) -> BaseException:
        """Store ``err`` in the error slot and return it for raising."""
        self._err = err
        return err

    def check(self):
        if self._err is not None:
            raise self._err

    # -- raw access --------------------------------------------------------

    def _read_byte(self) -> bytes:
        try:
            b = self.source.read(1)
        except Exception as exc:
            raise self.latch(exc)
        self._pos += len(b)
        return b

    def _read_full(self, n: int) -> bytes:
        buf = bytearray()
        while len(buf) < n:
            try:
                chunk = self.source.read(min(n - len(buf), _CHUNK_SIZE))
            except Exception as exc:
                raise self.latch(exc)
            if not chunk:
                break
            buf += chunk
        self._pos += len(buf)
        if len(buf) < n:
            raise self.latch(
                UnexpectedEOFError(f"Offset {self._pos}: wanted {n} bytes, got {len(buf)}")
            )
        return bytes(buf)

    def _read_token(self) -> str:
        buf = bytearray()
        while True:
            b = self._read_byte()
            if not b:
                raise self.latch(
                    UnexpectedEOFError(f"Offset {self._pos}: unexpected end of archive")
                )
            if b in DELIMITERS:
                return buf.decode("latin-1")
            buf += b

    def _skip_delimiter(self):
        # end of input is fine here, unlike in _read_token
        b = self._read_byte()
        if b and b not in DELIMITERS:
            raise self.latch(
                NotADelimiterError(f"Offset {self._pos}: expected delimiter, got {b!r}")
            )

    def read(self, size: int) -> bytes:
        """Read exactly ``size`` raw bytes."""
        self.check()
        return self._read_full(size)

    # -- numbers -----------------------------------------------------------

    def _read_uint(self) -> int:
        self.check()
        tok = self._read_token()
        if not _UINT_RE.fullmatch(tok):
            raise self.latch(ParseError("invalid unsigned integer", tok, self._pos))
        value = int(tok)
        if value > _UINT64_MAX:
            raise self.latch(ParseError("value out of range", tok, self._pos))
        return value

    def _read_int(self) -> int:
        self.check()
        tok = self._read_token()
        if not _INT_RE.fullmatch(tok):
            raise self.latch(ParseError("invalid integer", tok, self._pos))
        value = int(tok)
        if not _INT64_MIN <= value <= _INT64_MAX:
            raise self.latch(ParseError("value out of range", tok, self._pos))
        return value

    def read_bool(self) -> bool:
        return bool(self.read_u8() != 0)

    def read_u8(self) -> np.uint8:
        return np.uint8(_wrap(self._read_uint(), 8, False))

    def read_u16(self) -> np.uint16:
        return np.uint16(_wrap(self._read_uint(), 16, False))

    def read_u32(self) -> np.uint32:
        return np.uint32(_wrap(self._read_uint(), 32, False))

    def read_u64(self) -> np.uint64:
        return np.uint64(self._read_uint())

    def read_i8(self) -> np.int8:
        return np.int8(_wrap(self._read_int(), 8, True))

    def read_i16(self) -> np.int16:
        return np.int16(_wrap(self._read_int(), 16, True))

    def read_i32(self) -> np.int32:
        return np.int32(_wrap(self._read_int(), 32, True))

    def read_i64(self) -> np.int64:
        return np.int64(self._read_int())

    def read_f64(self) -> np.float64:
        self.check()
        tok = self._read_token()
        if not _FLOAT_RE.fullmatch(tok):
            raise self.latch(ParseError("invalid floating point number", tok, self._pos))
        return np.float64(float(tok))

    def read_f32(self) -> np.float32:
        return np.float32(self.read_f64())

    def read_c64(self) -> np.complex64:
        real = self.read_f32()
        imag = self.read_f32()
        return np.complex64(complex(real, imag))

    def read_c128(self) -> np.complex128:
        real = self.read_f64()
        imag = self.read_f64()
        return np.complex128(complex(real, imag))

    # -- lengths and strings -------------------------------------------------

    def read_len(self) -> int:
        if self.arch.len_bits == 32:
            return int(self.read_u32())
        return int(self.read_u64())

    def read_bytes(self) -> bytes:
        """Read a length-prefixed payload and its trailing delimiter."""
        n = self.read_len()
        raw = self._read_full(n) if n else b""
        self._skip_delimiter()
        return raw

    def read_string(self) -> str:
        raw = self.read_bytes()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise self.latch(ParseError(f"invalid UTF-8 string: {exc}", offset=self._pos)) from exc

    # -- archive metadata ----------------------------------------------------

    def read_header(self) -> _header.Header:
        return _header.read_header(self)

    def read_type_descr(self, typ: Any) -> _registry.TypeDescr:
        return _registry.read_type_descr(self, typ)


class WBuffer:
    """Writes primitive values to a Boost text archive."""

    def __init__(self, sink: BinaryIO, arch: Arch = Arch.UNSPECIFIED):
        self.sink = sink
        self.arch = Arch(arch)
        self.types = Registry()
        self._err: Optional[BaseException] = None

    @property
    def err(self) -> Optional[BaseException]:
        """The latched error, if any."""
        return self._err

    def latch(self, err: BaseException) -> BaseException:
        """Store ``err`` in the error slot and return it for raising."""
        self._err = err
        return err

    def check(self):
        if self._err is not None:
            raise self._err

    def write(self, data: Union[bytes, bytearray]) -> int:
        """Write raw bytes."""
        self.check()
        data = bytes(data)
        try:
            n = self.sink.write(data)
        except Exception as exc:
            raise self.latch(exc)
        if n is not None and n < len(data):
            raise self.latch(ShortWriteError(f"short write: {n} of {len(data)} bytes"))
        return len(data)

    def _write_token(self, tok: str):
        self.write(tok.encode("ascii") + DELIMITER)

    # -- numbers -----------------------------------------------------------

    def write_bool(self, value: Any):
        self.write_u8(1 if value else 0)

    def write_u8(self, value: Any):
        self._write_token(str(_wrap(int(value), 8, False)))

    def write_u16(self, value: Any):
        self._write_token(str(_wrap(int(value), 16, False)))

    def write_u32(self, value: Any):
        self._write_token(str(_wrap(int(value), 32, False)))

    def write_u64(self, value: Any):
        self._write_token(str(_wrap(int(value), 64, False)))

    def write_i8(self, value: Any):
        self._write_token(str(_wrap(int(value), 8, True)))

    def write_i16(self, value: Any):
        self._write_token(str(_wrap(int(value), 16, True)))

    def write_i32(self, value: Any):
        self._write_token(str(_wrap(int(value), 32, True)))

    def write_i64(self, value: Any):
        self._write_token(str(_wrap(int(value), 64, True)))

    # numpy prints the shortest string that round-trips at the value's width,
    # and spells non-finite values "inf", "-inf" and "nan" like C++ streams
    def write_f32(self, value: Any):
        self._write_token(str(np.float32(value)))

    def write_f64(self, value: Any):
        self._write_token(str(np.float64(value)))

    def write_c64(self, value: Any):
        value = complex(value)
        self.write_f32(value.real)
        self.write_f32(value.imag)

    def write_c128(self, value: Any):
        value = complex(value)
        self.write_f64(value.real)
        self.write_f64(value.imag)

    # -- lengths and strings -------------------------------------------------

    def write_len(self, n: int):
        if self.arch.len_bits == 32:
            self.write_u32(n)
        else:
            self.write_u64(n)

    def write_bytes(self, raw: Union[bytes, bytearray]):
        """Write a length-prefixed payload followed by the delimiter."""
        self.write_len(len(raw))
        self.write(bytes(raw) + DELIMITER)

    def write_string(self, value: Union[str, bytes]):
        if isinstance(value, str):
            value = value.encode("utf-8")
        self.write_bytes(value)

    # -- archive metadata ----------------------------------------------------

    def write_header(self, hdr: _header.Header):
        _header.write_header(self, hdr)

    def write_type_descr(self, typ: Any) -> _registry.TypeDescr:
        return _registry.write_type_descr(self, typ)
