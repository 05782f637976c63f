"""Helpers for generating keys, random indices and deferred setup hooks."""

from __future__ import annotations

import random
import threading
from typing import Callable, Dict, Iterator, List, Optional, Tuple

_deferred: Dict[str, List[Callable[[], None]]] = {}
_deferred_lock = threading.Lock()


def defer(*args: object) -> bool:
    """Register a callable under a group name; the last string given is the group."""
    group = ""
    fn: Optional[Callable[[], None]] = None
    for arg in args:
        if isinstance(arg, str):
            group = arg
        elif callable(arg):
            fn = arg
    if fn is not None:
        with _deferred_lock:
            _deferred.setdefault(group, []).append(fn)
    return True


def run_defer(*args: str) -> bool:
    """Run and forget the callables of the given groups (the default group if none).

    Returns whether any callable was run.
    """
    groups = args or ("",)
    with _deferred_lock:
        fns = [fn for group in groups for fn in _deferred.pop(group, [])]
    for fn in fns:
        fn()
    return bool(fns)


def new_rand(seed: Optional[int] = None) -> random.Random:
    """Return a random generator, seeded when ``seed`` is given."""
    return random.Random(seed)


def bytes_separator(a: Optional[bytes], b: Optional[bytes]) -> bytes:
    """Return a short key that sorts after ``a`` and not after ``b``."""
    a = bytes(a or b"")
    b = bytes(b or b"")
    if a == b:
        return b
    n = min(len(a), len(b))
    i = 0
    while i < n and a[i] == b[i]:
        i += 1
    out = bytearray(a[:i])
    if i < n:
        c = (a[i] + 1) & 0xFF
        if c < b[i]:
            out.append(c)
            return bytes(out)
        out.append(a[i])
        i += 1
    for c in a[i:]:
        if c < 0xFF:
            out.append(c + 1)
            return bytes(out)
        out.append(c)
    i = len(a)
    if len(b) > i and b[i] > 0:
        out.append(b[i] - 1)
    else:
        out.append(ord("x"))
    return bytes(out)


def bytes_after(b: Optional[bytes]) -> bytes:
    """Return a short key that sorts after ``b``."""
    out = bytearray()
    for c in bytes(b or b""):
        if c < 0xFF:
            out.append(c + 1)
            return bytes(out)
        out.append(c)
    out.append(ord("x"))
    return bytes(out)


def _rand(rnd: Optional[random.Random]) -> random.Random:
    return rnd if rnd is not None else new_rand()


def random_index(rnd: Optional[random.Random], n: int, rounds: int) -> Iterator[int]:
    """Yield ``rounds`` random indices below ``n``."""
    rnd = _rand(rnd)
    for _ in range(rounds):
        yield rnd.randrange(n)


def shuffled_index(rnd: Optional[random.Random], n: int, rounds: int) -> Iterator[int]:
    """Yield a fresh permutation of ``range(n)`` for each of ``rounds`` rounds."""
    rnd = _rand(rnd)
    for _ in range(rounds):
        order = list(range(n))
        rnd.shuffle(order)
        yield from order


def random_range(
    rnd: Optional[random.Random], n: int, rounds: int
) -> Iterator[Tuple[int, int]]:
    """Yield ``rounds`` random ``(start, limit)`` pairs with ``start <= limit < n``."""
    rnd = _rand(rnd)
    for _ in range(rounds):
        start = rnd.randrange(n)
        remaining = n - start
        length = rnd.randrange(remaining) if remaining > 0 else 0
        yield start, start + length