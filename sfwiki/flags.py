"""Bit-flag helpers and a packed RGBA colour."""

from __future__ import annotations

import struct
from dataclasses import dataclass


@dataclass
class Rgba:
    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 0

    def to_int(self) -> int:
        """The four bytes R, G, B, A read as a little-endian signed 32-bit integer."""
        return struct.unpack("<i", bytes((self.r, self.g, self.b, self.a)))[0]


def set_flag_bits(data: int, mask: int, flag: bool) -> int:
    """Return ``data`` with the ``mask`` bits set when ``flag`` is true, cleared otherwise."""
    return data | mask if flag else data & ~mask


def check_flag_bits(data: int, mask: int) -> bool:
    """True if any bit of ``mask`` is set in ``data``."""
    return (data & mask) != 0