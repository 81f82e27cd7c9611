"""Schemas describing the shape of archived values.

A Boost archive carries no field names and no type tags, so both sides
must agree on the layout. Each value is described by one of:

- Scalar: bool, sized integers, floats, complex pairs and strings
  (module constants ``BOOL``, ``INT8`` ... ``COMPLEX128``, ``STRING``)
- Struct: named record with ordered fields
- Slice: variable-length sequence (``std::vector``)
- Array: fixed-length sequence (``std::array``)
- Map: key/value collection (``std::map``)

Classes may instead implement the marshal/unmarshal capability::

    class Animal:
        def marshal_boost(self, w): ...

        @classmethod
        def unmarshal_boost(cls, r): ...

in which case they read and write themselves, type descriptor included.

Example:
    ANIMAL = Struct("animal", [("name", STRING), ("legs", INT16), ("tails", INT8)])
    PETS = Slice(ANIMAL)
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import numpy as np

from .errors import TypeNotSupportedError


class Kind(enum.Enum):
    BOOL = "bool"
    INT8 = "int8_t"
    INT16 = "int16_t"
    INT32 = "int32_t"
    INT64 = "int64_t"
    UINT8 = "uint8_t"
    UINT16 = "uint16_t"
    UINT32 = "uint32_t"
    UINT64 = "uint64_t"
    FLOAT32 = "float"
    FLOAT64 = "double"
    COMPLEX64 = "complex<float>"
    COMPLEX128 = "complex<double>"
    STRING = "string"
    STRUCT = "struct"
    SLICE = "vector"
    ARRAY = "array"
    MAP = "map"


# Kinds Boost treats as primitives inside collections (no item version).
_BUILTIN_KINDS = frozenset({
    Kind.BOOL,
    Kind.INT8, Kind.INT16, Kind.INT32, Kind.INT64,
    Kind.UINT8, Kind.UINT16, Kind.UINT32, Kind.UINT64,
    Kind.FLOAT32, Kind.FLOAT64,
})


@dataclass(frozen=True)
class Scalar:
    """A primitive kind; ``code`` selects the ``read_<code>``/``write_<code>`` pair."""

    kind: Kind
    code: str
    dtype: Optional[np.dtype] = None

    @property
    def name(self) -> str:
        return self.kind.value

    @property
    def builtin(self) -> bool:
        return self.kind in _BUILTIN_KINDS


BOOL = Scalar(Kind.BOOL, "bool", np.dtype(np.bool_))
INT8 = Scalar(Kind.INT8, "i8", np.dtype(np.int8))
INT16 = Scalar(Kind.INT16, "i16", np.dtype(np.int16))
INT32 = Scalar(Kind.INT32, "i32", np.dtype(np.int32))
INT64 = Scalar(Kind.INT64, "i64", np.dtype(np.int64))
UINT8 = Scalar(Kind.UINT8, "u8", np.dtype(np.uint8))
UINT16 = Scalar(Kind.UINT16, "u16", np.dtype(np.uint16))
UINT32 = Scalar(Kind.UINT32, "u32", np.dtype(np.uint32))
UINT64 = Scalar(Kind.UINT64, "u64", np.dtype(np.uint64))
FLOAT32 = Scalar(Kind.FLOAT32, "f32", np.dtype(np.float32))
FLOAT64 = Scalar(Kind.FLOAT64, "f64", np.dtype(np.float64))
COMPLEX64 = Scalar(Kind.COMPLEX64, "c64", np.dtype(np.complex64))
COMPLEX128 = Scalar(Kind.COMPLEX128, "c128", np.dtype(np.complex128))
STRING = Scalar(Kind.STRING, "string")

SCALARS = (
    BOOL, INT8, INT16, INT32, INT64, UINT8, UINT16, UINT32, UINT64,
    FLOAT32, FLOAT64, COMPLEX64, COMPLEX128, STRING,
)

_BY_DTYPE = {s.dtype: s for s in SCALARS if s.dtype is not None}


@dataclass(frozen=True)
class Struct:
    """Record with fields in declared order.

    Decoding builds ``factory(**fields)``, or a plain dict when no factory
    is given. ``version`` is the class version stored in the type
    descriptor.
    """

    name: str
    fields: tuple
    factory: Optional[Callable[..., Any]] = None
    version: int = 0

    kind = Kind.STRUCT

    def __post_init__(self):
        fields = tuple((field, _normalize(typ)) for field, typ in self.fields)
        object.__setattr__(self, "fields", fields)

    def field_value(self, value: Any, field: str) -> Any:
        if isinstance(value, Mapping):
            return value[field]
        return getattr(value, field)

    def build(self, values: dict) -> Any:
        if self.factory is None:
            return values
        return self.factory(**values)


@dataclass(frozen=True)
class Slice:
    """Variable-length sequence.

    Decoded numeric elements are packed into an ndarray; ``factory``, when
    given, converts the packed result (``bytes`` for ``BYTES``). It does not
    take part in the type identity.
    """

    elem: Any
    factory: Optional[Callable[[Any], Any]] = field(default=None, compare=False)

    kind = Kind.SLICE

    def __post_init__(self):
        object.__setattr__(self, "elem", _normalize(self.elem))

    @property
    def name(self) -> str:
        return f"vector<{type_name(self.elem)}>"

    def build(self, items: list) -> Any:
        packed = pack(self.elem, items)
        if self.factory is None:
            return packed
        return self.factory(packed)


@dataclass(frozen=True)
class Array:
    elem: Any
    length: int

    kind = Kind.ARRAY

    def __post_init__(self):
        object.__setattr__(self, "elem", _normalize(self.elem))

    @property
    def name(self) -> str:
        return f"array<{type_name(self.elem)},{self.length}>"


@dataclass(frozen=True)
class Map:
    key: Any
    value: Any

    kind = Kind.MAP

    def __post_init__(self):
        object.__setattr__(self, "key", _normalize(self.key))
        object.__setattr__(self, "value", _normalize(self.value))

    @property
    def name(self) -> str:
        return f"map<{type_name(self.key)},{type_name(self.value)}>"


_SCHEMAS = (Scalar, Struct, Slice, Array, Map)


def is_marshaler(value: Any) -> bool:
    return not isinstance(value, type) and callable(getattr(value, "marshal_boost", None))


def is_unmarshaler(typ: Any) -> bool:
    return isinstance(typ, type) and callable(getattr(typ, "unmarshal_boost", None))


def type_name(typ: Any) -> str:
    """Stable identity of a type, used to key the descriptor registry."""
    if isinstance(typ, _SCHEMAS):
        return typ.name
    if isinstance(typ, str):
        return typ
    if isinstance(typ, type):
        return getattr(typ, "__boost_name__", typ.__name__)
    raise TypeNotSupportedError(f"no type identity for {typ!r}")


def as_type(typ: Any) -> Any:
    """Normalize a decode target to a schema or capability class.

    Returns None when the target has no determinable shape (a plain
    ``int``, an instance, ...).
    """
    if isinstance(typ, _SCHEMAS):
        return typ
    if not isinstance(typ, type):
        return None
    if is_unmarshaler(typ) or callable(getattr(typ, "marshal_boost", None)):
        return typ
    boost_type = getattr(typ, "__boost_type__", None)
    if boost_type is not None:
        return boost_type
    if issubclass(typ, np.generic):
        try:
            return _BY_DTYPE.get(np.dtype(typ))
        except TypeError:  # abstract scalar classes such as np.integer
            return None
    return _PYTHON_TYPES.get(typ)


def type_of(value: Any) -> Any:
    """Infer the schema of a value to encode, or None if it is ambiguous."""
    if isinstance(value, (bool, np.bool_)):
        return BOOL
    if isinstance(value, str):
        return STRING
    if isinstance(value, np.generic):
        return _BY_DTYPE.get(value.dtype)
    if isinstance(value, float):
        return FLOAT64
    if isinstance(value, complex):
        return COMPLEX128
    if isinstance(value, (bytes, bytearray)):
        return BYTES
    if isinstance(value, np.ndarray):
        elem = _BY_DTYPE.get(value.dtype)
        if value.ndim != 1 or elem is None:
            return None
        return Slice(elem)
    return getattr(value, "__boost_type__", None)


def is_builtin(typ: Any) -> bool:
    return isinstance(typ, Scalar) and typ.builtin


def pack(elem: Any, items: list) -> Any:
    """Numeric and bool sequences become ndarrays, anything else a list."""
    if isinstance(elem, Scalar) and elem.dtype is not None:
        return np.array(items, dtype=elem.dtype)
    return items


def _normalize(typ: Any) -> Any:
    resolved = as_type(typ)
    if resolved is None:
        raise TypeNotSupportedError(f"unsupported element type {typ!r}")
    return resolved


# std::vector<uint8_t> decoded back into bytes
BYTES = Slice(UINT8, factory=bytes)

_PYTHON_TYPES = {
    bool: BOOL,
    float: FLOAT64,
    complex: COMPLEX128,
    str: STRING,
    bytes: BYTES,
}
