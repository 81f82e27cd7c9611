"""Per-archive type descriptors.

Boost writes class information (tracking flag, class version) the first
time a class-typed value appears in an archive and never again for that
class. The registry remembers which types were already described, so the
second occurrence of a type reads and writes no descriptor bytes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

from .errors import BoostError, InvalidTypeDescrError
from .schema import type_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TypeDescr:
    name: str
    version: int = 0
    flags: int = 0  # tracking level

    def marshal_boost(self, w) -> None:
        w.write_u8(self.flags)
        w.write_u32(self.version)

    @classmethod
    def unmarshal_boost(cls, r, name: str) -> "TypeDescr":
        flags = int(r.read_u8())
        version = int(r.read_u32())
        return cls(name=name, version=version, flags=flags)


class Registry:
    """Type identity -> TypeDescr, owned by a single reader or writer."""

    def __init__(self) -> None:
        self._types: dict[str, TypeDescr] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def get(self, name: str) -> Optional[TypeDescr]:
        return self._types.get(name)

    def add(self, descr: TypeDescr) -> None:
        self._types[descr.name] = descr
        logger.debug("registered type descriptor %s (version %d)", descr.name, descr.version)


def read_type_descr(r, typ) -> TypeDescr:
    name = type_name(typ)
    descr = r.types.get(name)
    if descr is not None:
        return descr

    r.check()
    try:
        descr = TypeDescr.unmarshal_boost(r, name)
    except BoostError as exc:
        raise r.latch(InvalidTypeDescrError(f"invalid type descriptor for {name}: {exc}")) from exc
    r.types.add(descr)
    return descr


def write_type_descr(w, typ) -> TypeDescr:
    name = type_name(typ)
    descr = w.types.get(name)
    if descr is not None:
        return descr

    descr = TypeDescr(name=name, version=getattr(typ, "version", 0))
    descr.marshal_boost(w)
    w.types.add(descr)
    return descr
