"""Architecture profiles.

Boost writes ``std::size_t`` lengths (container sizes, string sizes), so
their width follows the pointer width of the program that produced the
archive. In the text format both widths are plain decimal tokens; the
profile only decides the range a length is narrowed to.
"""

from __future__ import annotations

import enum

from .header import LIBRARY_VERSION, Header


class Arch(enum.IntEnum):
    UNSPECIFIED = 0
    HW = 1  # host width
    W32 = 32
    W64 = 64

    @property
    def len_bits(self) -> int:
        """Width of length fields: 32 bits for W32, 64 bits otherwise."""
        if self == Arch.W32:
            return 32
        return 64

    def header(self) -> Header:
        """Default header written by an encoder using this profile."""
        return Header(version=LIBRARY_VERSION)

    def encoder(self, sink):
        from .codec import Encoder

        return Encoder(sink, arch=self)

    def decoder(self, source):
        from .codec import Decoder

        return Decoder(source, arch=self)
