"""Read and write Boost.Serialization text archives."""

from .arch import Arch
from .codec import Decoder, Encoder, dump, dumps, load, loads
from .errors import (
    BoostError,
    InvalidArrayLenError,
    InvalidHeaderError,
    InvalidTypeDescrError,
    NotADelimiterError,
    NotBoostError,
    ParseError,
    ShortWriteError,
    TypeNotSupportedError,
    UnexpectedEOFError,
)
from .header import LIBRARY_VERSION, MAGIC_SIGNATURE, Header
from .registry import Registry, TypeDescr
from .schema import (
    BOOL,
    BYTES,
    COMPLEX64,
    COMPLEX128,
    FLOAT32,
    FLOAT64,
    INT8,
    INT16,
    INT32,
    INT64,
    STRING,
    UINT8,
    UINT16,
    UINT32,
    UINT64,
    Array,
    Kind,
    Map,
    Scalar,
    Slice,
    Struct,
)
from .text_archive import RBuffer, WBuffer

__all__ = [
    "Arch",
    "Array",
    "BOOL",
    "BYTES",
    "BoostError",
    "COMPLEX128",
    "COMPLEX64",
    "Decoder",
    "Encoder",
    "FLOAT32",
    "FLOAT64",
    "Header",
    "INT16",
    "INT32",
    "INT64",
    "INT8",
    "InvalidArrayLenError",
    "InvalidHeaderError",
    "InvalidTypeDescrError",
    "Kind",
    "LIBRARY_VERSION",
    "MAGIC_SIGNATURE",
    "Map",
    "NotADelimiterError",
    "NotBoostError",
    "ParseError",
    "RBuffer",
    "Registry",
    "STRING",
    "Scalar",
    "ShortWriteError",
    "Slice",
    "Struct",
    "TypeDescr",
    "TypeNotSupportedError",
    "UINT16",
    "UINT32",
    "UINT64",
    "UINT8",
    "UnexpectedEOFError",
    "WBuffer",
    "dump",
    "dumps",
    "load",
    "loads",
]
