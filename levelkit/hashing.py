"""A murmur-like 32-bit hash over bytes."""

from __future__ import annotations

import struct
from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]

_M = 0xC6A4A793
_R = 24
_MASK32 = 0xFFFFFFFF


def hash32(data: BytesLike, seed: int) -> int:
    """Return the 32-bit hash of ``data`` for the given ``seed``."""
    data = bytes(data)
    n = len(data)
    h = (seed ^ (n * _M)) & _MASK32
    whole = n - n % 4
    for (word,) in struct.iter_unpack("<I", data[:whole]):
        h = ((h + word) * _M) & _MASK32
        h ^= h >> 16
    tail = data[whole:]
    if tail:
        h = ((h + int.from_bytes(tail, "little")) * _M) & _MASK32
        h ^= h >> _R
    return h