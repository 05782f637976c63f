"""Self-checking records and latency statistics for database stress runs."""

from __future__ import annotations

import os
import struct
import time
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .checksum import mask_crc, new_crc
from .keyrange import KeyRange, bytes_prefix

DEFAULT_NUM_KEYS = (100000, 1332, 531, 1234, 9553, 1024, 35743)
MIN_DATA_LEN = (2 + 4 + 4) * 2 + 4


def parse_int_list(text: str) -> List[int]:
    """Parse a comma-separated list of integers; blank items are skipped."""
    return [int(item) for item in (part.strip() for part in text.split(",")) if item]


def format_int_list(values: Iterable[int]) -> str:
    """Format integers as a comma-separated list."""
    return ",".join(str(v) for v in values)


def _checksum(data: bytes) -> int:
    return mask_crc(new_crc(data))


def random_data(ns: int, prefix: int, i: int, data_len: int) -> bytes:
    """Build a record of ``data_len`` bytes tagged with ``ns``, ``prefix`` and ``i``.

    The record holds two identical checksummed halves and a checksum over the
    whole record in its last four bytes.
    """
    if data_len < MIN_DATA_LEN:
        raise ValueError("data_len is too small")
    dst = bytearray(data_len)
    half = (data_len - 4) // 2
    dst[2:half - 8] = os.urandom(half - 10)
    dst[0] = ns
    dst[1] = prefix
    struct.pack_into("<I", dst, half - 8, i)
    struct.pack_into("<I", dst, half - 4, _checksum(bytes(dst[:half - 4])))
    full = half * 2
    dst[half:full] = dst[:half]
    if full < data_len - 4:
        dst[full:data_len - 4] = os.urandom(data_len - 4 - full)
    struct.pack_into("<I", dst, data_len - 4, _checksum(bytes(dst[:data_len - 4])))
    return bytes(dst)


def data_split(data: bytes) -> Tuple[bytes, bytes]:
    """Return the two halves of a record."""
    n = (len(data) - 4) // 2
    return data[:n], data[n:n + n]


def data_ns(data: bytes) -> int:
    return data[0]


def data_prefix(data: bytes) -> int:
    return data[1]


def data_i(data: bytes) -> int:
    """Return the index a record was written with."""
    return struct.unpack_from("<I", data, (len(data) - 4) // 2 - 8)[0]


def data_checksum(data: bytes) -> Tuple[int, int]:
    """Return ``(stored, computed)`` checksums; they differ when the record is damaged."""
    stored = struct.unpack_from("<I", data, len(data) - 4)[0]
    return stored, _checksum(bytes(data[:-4]))


def data_prefix_range(ns: int, prefix: int) -> KeyRange:
    return bytes_prefix(bytes([ns, prefix]))


def data_ns_range(ns: int) -> KeyRange:
    return bytes_prefix(bytes([ns]))


@dataclass
class LatencyStats:
    """Accumulated operation latencies; all durations are in nanoseconds."""

    dur: int = 0
    min: int = 0
    max: int = 0
    num: int = 0
    mark: Optional[int] = None

    def start(self) -> None:
        self.mark = time.monotonic_ns()

    def record(self, n: int) -> None:
        """Record ``n`` operations completed since :meth:`start`."""
        if self.mark is None:
            raise RuntimeError("not started")
        dur = time.monotonic_ns() - self.mark
        per_op = dur // n
        if per_op < self.min or self.min == 0:
            self.min = per_op
        if per_op > self.max:
            self.max = per_op
        self.dur += dur
        self.num += n
        self.mark = None

    def rate_per_sec(self) -> int:
        seconds = self.dur // 1_000_000_000
        if seconds > 0:
            return self.num // seconds
        return self.num

    def avg(self) -> int:
        if self.num > 0:
            return self.dur // self.num
        return 0

    def add(self, other: "LatencyStats") -> None:
        """Merge the samples of ``other`` into these."""
        if other.min < self.min or self.min == 0:
            self.min = other.min
        if other.max > self.max:
            self.max = other.max
        self.dur += other.dur
        self.num += other.num