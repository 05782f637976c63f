"""Internal keys: a user key followed by a packed sequence number and key type."""

from __future__ import annotations

import enum
import struct
from typing import Tuple, Union

BytesLike = Union[bytes, bytearray, memoryview]

MAX_SEQ = (1 << 56) - 1


class KeyType(enum.IntEnum):
    """The kind of entry an internal key denotes; stored on disk, so values are fixed."""

    DEL = 0
    VAL = 1

    def __str__(self) -> str:
        return "d" if self is KeyType.DEL else "v"


# Seeking to a sequence number uses the highest type, since types sort descending.
SEEK_TYPE = KeyType.VAL
MAX_NUM = (MAX_SEQ << 8) | int(SEEK_TYPE)
MAX_NUM_BYTES = struct.pack("<Q", MAX_NUM)


class InternalKeyCorrupted(ValueError):
    """An internal key could not be decoded."""

    def __init__(self, ikey: BytesLike, reason: str) -> None:
        self.ikey = bytes(ikey)
        self.reason = reason
        super().__init__(f"internal key {self.ikey!r} corrupted: {reason}")


def _split_num(num: int) -> Tuple[int, int]:
    return num >> 8, num & 0xFF


class InternalKey(bytes):
    """An encoded internal key."""

    def _check(self) -> None:
        if len(self) < 8:
            raise ValueError(f"internal key {bytes(self)!r}, len={len(self)}: invalid length")

    def ukey(self) -> bytes:
        """Return the user key part."""
        self._check()
        return bytes(self[:-8])

    def num(self) -> int:
        """Return the packed sequence number and type."""
        self._check()
        return struct.unpack("<Q", self[-8:])[0]

    def parse_num(self) -> Tuple[int, KeyType]:
        """Return ``(sequence, key type)``."""
        seq, kt = _split_num(self.num())
        if kt > KeyType.VAL:
            raise ValueError(
                f"internal key {bytes(self)!r}, len={len(self)}: invalid type {kt:#x}"
            )
        return seq, KeyType(kt)

    def __str__(self) -> str:
        try:
            ukey, seq, kt = parse_internal_key(self)
        except InternalKeyCorrupted:
            return "<invalid>"
        return f"{ukey.hex()},{kt}{seq}"


def make_internal_key(ukey: BytesLike, seq: int, kt: Union[KeyType, int]) -> InternalKey:
    """Encode ``ukey`` with sequence number ``seq`` and type ``kt``."""
    if seq < 0 or seq > MAX_SEQ:
        raise ValueError("invalid sequence number")
    if int(kt) not in (KeyType.DEL, KeyType.VAL):
        raise ValueError("invalid type")
    return InternalKey(bytes(ukey) + struct.pack("<Q", (seq << 8) | int(kt)))


def parse_internal_key(ik: BytesLike) -> Tuple[bytes, int, KeyType]:
    """Decode ``ik`` into ``(user key, sequence, key type)``."""
    ik = bytes(ik)
    if len(ik) < 8:
        raise InternalKeyCorrupted(ik, "invalid length")
    seq, kt = _split_num(struct.unpack("<Q", ik[-8:])[0])
    if kt > KeyType.VAL:
        raise InternalKeyCorrupted(ik, "invalid type")
    return ik[:-8], seq, KeyType(kt)


def valid_internal_key(ik: BytesLike) -> bool:
    """Return whether ``ik`` decodes as an internal key."""
    try:
        parse_internal_key(ik)
    except InternalKeyCorrupted:
        return False
    return True