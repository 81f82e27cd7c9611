"""
codec.py - Encode and decode values as Boost text archives

Value layouts (after the archive header):
- Scalars: one token (complex: two)
- Strings: length-prefixed payload
- Struct: type descriptor, then each field in declared order
- Slice: type descriptor, length, a reserved ``0`` when the element type
  is not a primitive, then the elements
- Array: type descriptor, length, then the elements
- Map: type descriptor, entry count, reserved ``0`` and ``0``, then each
  key followed by its value

A type descriptor is only present the first time its type appears in the
archive.

Usage:
    import boosttext as bt

    ANIMAL = bt.Struct("animal", [("name", bt.STRING), ("legs", bt.INT16), ("tails", bt.INT8)])

    buf = io.BytesIO()
    enc = bt.Encoder(buf)
    enc.encode({"name": "pet", "legs": 4, "tails": 1}, ANIMAL)
    enc.encode(np.int32(42))

    dec = bt.Decoder(io.BytesIO(buf.getvalue()))
    pet = dec.decode(ANIMAL)
    answer = dec.decode(bt.INT32)

    # One-shot helpers
    data = bt.dumps([True, "hello"])
    values = bt.loads(data, [bool, str])
"""

from __future__ import annotations

import io
from typing import Any, BinaryIO, Iterable, Optional, Sequence

from .arch import Arch
from .errors import BoostError, InvalidArrayLenError, TypeNotSupportedError
from .header import Header
from .schema import (
    Array,
    Map,
    Scalar,
    Slice,
    Struct,
    as_type,
    is_builtin,
    is_marshaler,
    is_unmarshaler,
    pack,
    type_name,
    type_of,
)
from .text_archive import RBuffer, WBuffer


class Encoder:
    """Writes values to a Boost text archive.

    The archive header is written once, before the first value. Set
    ``header`` before the first call to ``encode`` to override the
    profile's default header.
    """

    def __init__(self, sink: BinaryIO, arch: Arch = Arch.W64, header: Optional[Header] = None):
        self._w = WBuffer(sink, arch)
        self.header = header if header is not None else Header()
        self._header_written = False

    @property
    def arch(self) -> Arch:
        return self._w.arch

    @property
    def err(self) -> Optional[BaseException]:
        return self._w.err

    def _ensure_header(self):
        if self._header_written:
            return
        self._header_written = True
        if self.header.is_zero:
            self.header = self._w.arch.header()
        self._w.write_header(self.header)

    def encode(self, value: Any, typ: Any = None):
        """Write ``value``; ``typ`` is required when it cannot be inferred."""
        self._ensure_header()
        self._w.check()

        if not is_marshaler(value):
            typ = as_type(typ) if typ is not None else type_of(value)
            if typ is None:
                raise TypeNotSupportedError(f"cannot encode value of type {type(value).__name__}")
        self._encode(value, typ)

    def _encode(self, value: Any, typ: Any):
        w = self._w
        w.check()
        try:
            self._encode_value(value, typ)
        except Exception as exc:
            if exc is w.err:
                raise
            if isinstance(exc, (BoostError, OSError)):
                w.latch(exc)
                raise
            raise w.latch(TypeNotSupportedError(
                f"cannot encode {type(value).__name__} value: {exc!r}"
            )) from exc

    def _encode_value(self, value: Any, typ: Any):
        w = self._w
        if is_marshaler(value):
            value.marshal_boost(w)
        elif isinstance(typ, Scalar):
            getattr(w, f"write_{typ.code}")(value)
        elif isinstance(typ, Struct):
            w.write_type_descr(typ)
            for field, ftype in typ.fields:
                self._encode(typ.field_value(value, field), ftype)
        elif isinstance(typ, Slice):
            w.write_type_descr(typ)
            w.write_len(len(value))
            if not is_builtin(typ.elem):
                w.write_u32(0)  # item version
            for item in value:
                self._encode(item, typ.elem)
        elif isinstance(typ, Array):
            if len(value) != typ.length:
                raise InvalidArrayLenError(
                    f"{typ.name}: got {len(value)} elements, want {typ.length}"
                )
            w.write_type_descr(typ)
            w.write_len(len(value))
            for item in value:
                self._encode(item, typ.elem)
        elif isinstance(typ, Map):
            w.write_type_descr(typ)
            w.write_len(len(value))
            w.write_u64(0)  # item version
            w.write_u8(0)  # entry class info
            for key, item in value.items():
                self._encode(key, typ.key)
                self._encode(item, typ.value)
        else:
            raise TypeNotSupportedError(f"cannot encode {value!r} as {type_name(typ)}")


class Decoder:
    """Reads values from a Boost text archive.

    The header is read by the first call to ``decode``. Lengths are plain
    decimal tokens, so archives written with either width profile decode
    without specifying ``arch``.
    """

    def __init__(self, source: Optional[BinaryIO], arch: Arch = Arch.UNSPECIFIED):
        self._r = RBuffer(source, arch)
        self.header: Optional[Header] = None

    @property
    def arch(self) -> Arch:
        return self._r.arch

    @property
    def err(self) -> Optional[BaseException]:
        return self._r.err

    def _ensure_header(self):
        if self.header is None:
            self.header = self._r.read_header()

    def decode(self, typ: Any) -> Any:
        """Read the next value, shaped by the schema or class ``typ``."""
        self._ensure_header()
        self._r.check()

        target = as_type(typ)
        if target is None:
            raise TypeNotSupportedError(f"cannot decode into {typ!r}")
        return self._decode(target)

    def _decode(self, typ: Any) -> Any:
        r = self._r
        r.check()
        try:
            return self._decode_value(typ)
        except Exception as exc:
            if exc is r.err:
                raise
            if isinstance(exc, (BoostError, OSError)):
                r.latch(exc)
                raise
            raise r.latch(TypeNotSupportedError(
                f"cannot decode {type_name(typ)}: {exc!r}"
            )) from exc

    def _decode_value(self, typ: Any) -> Any:
        r = self._r
        if is_unmarshaler(typ):
            return typ.unmarshal_boost(r)
        if isinstance(typ, Scalar):
            return getattr(r, f"read_{typ.code}")()
        if isinstance(typ, Struct):
            r.read_type_descr(typ)
            values = {}
            for field, ftype in typ.fields:
                values[field] = self._decode(ftype)
            return typ.build(values)
        if isinstance(typ, Slice):
            r.read_type_descr(typ)
            n = r.read_len()
            if not is_builtin(typ.elem):
                r.read_u32()  # item version
            return typ.build([self._decode(typ.elem) for _ in range(n)])
        if isinstance(typ, Array):
            r.read_type_descr(typ)
            n = r.read_len()
            if n != typ.length:
                raise InvalidArrayLenError(
                    f"{typ.name}: archive holds {n} elements, want {typ.length}"
                )
            return pack(typ.elem, [self._decode(typ.elem) for _ in range(n)])
        if isinstance(typ, Map):
            r.read_type_descr(typ)
            n = r.read_len()
            r.read_u64()  # item version
            r.read_u8()  # entry class info
            result = {}
            for _ in range(n):
                key = self._decode(typ.key)
                result[key] = self._decode(typ.value)
            return result
        raise TypeNotSupportedError(f"cannot decode {type_name(typ)}")


# Convenience functions


def _pair_types(values: Sequence[Any], types: Optional[Sequence[Any]]) -> Iterable[tuple]:
    if types is None:
        return ((value, None) for value in values)
    if len(types) != len(values):
        raise ValueError(f"got {len(values)} values but {len(types)} types")
    return zip(values, types)


def dump(values: Sequence[Any], sink: BinaryIO, types: Optional[Sequence[Any]] = None,
         arch: Arch = Arch.W64):
    """Write ``values`` as one archive to an open binary stream.

    Args:
        values: Values to encode, in order
        sink: Writable binary file-like object
        types: Optional schema per value (None entries are inferred)
        arch: Width profile for length fields

    Example:
        with open("out.txt", "wb") as f:
            bt.dump([np.int16(4), "pet"], f)
    """
    enc = Encoder(sink, arch=arch)
    for value, typ in _pair_types(values, types):
        enc.encode(value, typ)


def dumps(values: Sequence[Any], types: Optional[Sequence[Any]] = None,
          arch: Arch = Arch.W64) -> bytes:
    """Serialize ``values`` to archive bytes.

    Example:
        data = bt.dumps([True, 3.3])
    """
    buf = io.BytesIO()
    dump(values, buf, types, arch)
    return buf.getvalue()


def load(source: BinaryIO, types: Sequence[Any], arch: Arch = Arch.UNSPECIFIED) -> list:
    """Read one value per entry of ``types`` from an open binary stream.

    Example:
        with open("data.txt", "rb") as f:
            legs, name = bt.load(f, [bt.INT16, bt.STRING])
    """
    dec = Decoder(source, arch=arch)
    return [dec.decode(typ) for typ in types]


def loads(data: bytes, types: Sequence[Any], arch: Arch = Arch.UNSPECIFIED) -> list:
    """Parse archive bytes; see ``load``.

    Example:
        flag, text = bt.loads(data, [bool, str])
    """
    return load(io.BytesIO(data), types, arch)
