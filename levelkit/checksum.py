"""CRC-32 checksums over the Castagnoli polynomial, with record masking."""

from __future__ import annotations

from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]

_POLY = 0x82F63B78
_MASK32 = 0xFFFFFFFF
_MASK_DELTA = 0xA282EAD8


def _table_entry(index: int) -> int:
    crc = index
    for _ in range(8):
        crc = (crc >> 1) ^ _POLY if crc & 1 else crc >> 1
    return crc


_TABLE = tuple(_table_entry(i) for i in range(256))


def update_crc(crc: int, data: BytesLike) -> int:
    """Extend ``crc`` with ``data``."""
    crc = (crc & _MASK32) ^ _MASK32
    for byte in bytes(data):
        crc = _TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc ^ _MASK32


def new_crc(data: BytesLike) -> int:
    """Return the checksum of ``data``."""
    return update_crc(0, data)


def mask_crc(crc: int) -> int:
    """Return the masked form of ``crc`` as stored alongside data."""
    crc &= _MASK32
    rotated = ((crc >> 15) | (crc << 17)) & _MASK32
    return (rotated + _MASK_DELTA) & _MASK32