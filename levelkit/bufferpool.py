"""A pool of reusable byte buffers grouped by size class."""

from __future__ import annotations

import threading
import time
from collections import deque
from typing import Deque, List, Union

_POOL_CAPACITY = (2, 2, 4, 4, 2, 1)
_DRAIN_INTERVAL = 2.0
_ADJUST_AFTER = 20


def _format_list(values: List[int]) -> str:
    return "[" + " ".join(str(v) for v in values) + "]"


class BufferPool:
    """Hands out zeroed or recycled byte buffers and takes them back for reuse.

    Buffers are kept in a small pool per size class. One buffer per class is
    dropped for every two seconds that pass, so idle pools shrink over time.
    """

    def __init__(self, baseline: int) -> None:
        if baseline <= 0:
            raise ValueError("baseline can't be <= 0")
        self._baseline0 = baseline
        self._baseline = (baseline // 4, baseline // 2, baseline * 2, baseline * 4)
        self._pools: List[Deque[bytearray]] = [deque() for _ in _POOL_CAPACITY]
        self._size = [0] * 5
        self._size_miss = [0] * 5
        self._size_half = [0] * 5
        self._lock = threading.Lock()
        self._closed = False
        self._last_drain = time.monotonic()
        self._get = 0
        self._put = 0
        self._half = 0
        self._less = 0
        self._equal = 0
        self._greater = 0
        self._miss = 0

    def _pool_num(self, n: int) -> int:
        if self._baseline0 // 2 < n <= self._baseline0:
            return 0
        for i, limit in enumerate(self._baseline):
            if n <= limit:
                return i + 1
        return len(self._baseline) + 1

    def _offer(self, pool_num: int, buf: bytearray) -> None:
        pool = self._pools[pool_num]
        if len(pool) < _POOL_CAPACITY[pool_num]:
            pool.append(buf)

    def _drain(self) -> None:
        now = time.monotonic()
        ticks = int((now - self._last_drain) // _DRAIN_INTERVAL)
        if ticks <= 0:
            return
        self._last_drain += ticks * _DRAIN_INTERVAL
        for pool in self._pools:
            for _ in range(min(ticks, len(pool))):
                pool.popleft()

    def get(self, n: int) -> bytearray:
        """Return a buffer of length ``n``, recycled when a suitable one is pooled."""
        with self._lock:
            if self._closed:
                return bytearray(n)
            self._drain()
            self._get += 1
            pool_num = self._pool_num(n)
            pool = self._pools[pool_num]
            if pool_num == 0:
                if pool:
                    buf = pool.popleft()
                    cap = len(buf)
                    if cap > n:
                        if cap - n >= n:
                            self._half += 1
                            self._offer(pool_num, buf)
                            return bytearray(n)
                        self._less += 1
                        del buf[n:]
                        return buf
                    if cap == n:
                        self._equal += 1
                        return buf
                    self._greater += 1
                else:
                    self._miss += 1
                return bytearray(n)

            idx = pool_num - 1
            if pool:
                buf = pool.popleft()
                cap = len(buf)
                if cap > n:
                    if cap - n >= n:
                        self._half += 1
                        self._size_half[idx] += 1
                        if self._size_half[idx] == _ADJUST_AFTER:
                            self._size[idx] = cap // 2
                            self._size_half[idx] = 0
                        else:
                            self._offer(pool_num, buf)
                        return bytearray(n)
                    self._less += 1
                    del buf[n:]
                    return buf
                if cap == n:
                    self._equal += 1
                    return buf
                self._greater += 1
                if cap >= self._size[idx]:
                    self._offer(pool_num, buf)
            else:
                self._miss += 1

            size = self._size[idx]
            if n > size:
                if size == 0:
                    self._size[idx] = n
                else:
                    self._size_miss[idx] += 1
                    if self._size_miss[idx] == _ADJUST_AFTER:
                        self._size[idx] = n
                        self._size_miss[idx] = 0
            return bytearray(n)

    def put(self, buf: Union[bytes, bytearray]) -> None:
        """Give ``buf`` back to the pool; it is dropped if its class is full."""
        with self._lock:
            if self._closed:
                return
            self._drain()
            self._put += 1
            if not isinstance(buf, bytearray):
                buf = bytearray(buf)
            self._offer(self._pool_num(len(buf)), buf)

    def close(self) -> None:
        """Close the pool: pooled buffers are dropped and later calls bypass it."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            for pool in self._pools:
                pool.clear()

    def __str__(self) -> str:
        return (
            f"BufferPool{{B·{self._baseline0} Z·{_format_list(self._size)} "
            f"Zm·{_format_list(self._size_miss)} Zh·{_format_list(self._size_half)} "
            f"G·{self._get} P·{self._put} H·{self._half} <·{self._less} "
            f"=·{self._equal} >·{self._greater} M·{self._miss}}}"
        )