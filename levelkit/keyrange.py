"""Key ranges over byte strings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class KeyRange:
    """A key range: ``start`` is included, ``limit`` is not; ``None`` means unbounded."""

    start: Optional[bytes] = None
    limit: Optional[bytes] = None


def bytes_prefix(prefix: bytes) -> KeyRange:
    """Return the range of keys that begin with ``prefix`` under byte ordering."""
    prefix = bytes(prefix)
    stripped = prefix.rstrip(b"\xff")
    limit = None
    if stripped:
        limit = stripped[:-1] + bytes([stripped[-1] + 1])
    return KeyRange(prefix, limit)