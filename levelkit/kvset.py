"""An ordered set of key/value pairs used as a model of database contents."""

from __future__ import annotations

import bisect
import random
from typing import Iterator, List, Optional, Tuple, Union

from .keygen import bytes_after, bytes_separator, new_rand, shuffled_index
from .keyrange import KeyRange

KeyLike = Union[bytes, bytearray, str]


def _as_bytes(value: KeyLike) -> bytes:
    if isinstance(value, str):
        return value.encode("latin-1")
    return bytes(value)


def _entry_key(entry: Tuple[bytes, bytes]) -> bytes:
    return entry[0]


class KeyValue:
    """Key/value pairs kept in increasing key order, with their total byte size."""

    def __init__(self) -> None:
        self._entries: List[Tuple[bytes, bytes]] = []
        self._nbytes = 0

    def __repr__(self) -> str:
        return f"KeyValue({self._entries!r})"

    def put(self, key: KeyLike, value: KeyLike) -> None:
        """Append a pair whose key must sort after every key already present."""
        key, value = _as_bytes(key), _as_bytes(value)
        if self._entries and self._entries[-1][0] >= key:
            raise ValueError(
                f"put: keys are not in increasing order: {self._entries[-1][0]!r}, {key!r}"
            )
        self._entries.append((key, value))
        self._nbytes += len(key) + len(value)

    def put_u(self, key: KeyLike, value: KeyLike) -> bool:
        """Insert or overwrite a pair; return whether the key was new."""
        key, value = _as_bytes(key), _as_bytes(value)
        i, exist = self.get(key)
        if exist:
            self._nbytes += len(value) - len(self._entries[i][1])
            self._entries[i] = (key, value)
            return False
        self._entries.insert(i, (key, value))
        self._nbytes += len(key) + len(value)
        return True

    def delete(self, key: KeyLike) -> Optional[bytes]:
        """Remove ``key``; return its value, or ``None`` if it was absent."""
        i, exist = self.get(key)
        if not exist:
            return None
        value = self._entries[i][1]
        self.delete_index(i)
        return value

    def delete_index(self, i: int) -> bool:
        """Remove the pair at position ``i``; return whether there was one."""
        if 0 <= i < len(self._entries):
            key, value = self._entries.pop(i)
            self._nbytes -= len(key) + len(value)
            return True
        return False

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Tuple[bytes, bytes]]:
        return iter(list(self._entries))

    def size(self) -> int:
        """Total length of all keys and values."""
        return self._nbytes

    def key_at(self, i: int) -> bytes:
        return self._entries[i][0]

    def value_at(self, i: int) -> bytes:
        return self._entries[i][1]

    def index(self, i: int) -> Tuple[bytes, bytes]:
        """Return the pair at position ``i``."""
        if i < 0 or i >= len(self._entries):
            raise IndexError(f"index #{i}: out of range")
        return self._entries[i]

    def index_inexact(self, i: int) -> Tuple[bytes, bytes, bytes]:
        """Return ``(separator, key, value)`` where the separator seeks to position ``i``."""
        key, value = self.index(i)
        prev = self.key_at(i - 1) if i > 0 else None
        return bytes_separator(prev, key), key, value

    def index_or_none(self, i: int) -> Tuple[Optional[bytes], Optional[bytes]]:
        """Return the pair at ``i``, or ``(None, None)`` when out of range."""
        if 0 <= i < len(self._entries):
            return self._entries[i]
        return None, None

    def search(self, key: KeyLike) -> int:
        """Return the position of the first key not less than ``key``."""
        return bisect.bisect_left(self._entries, _as_bytes(key), key=_entry_key)

    def get(self, key: KeyLike) -> Tuple[int, bool]:
        """Return ``(position, present)`` for ``key``."""
        key = _as_bytes(key)
        i = self.search(key)
        return i, i < len(self._entries) and self._entries[i][0] == key

    def iterate_shuffled(
        self, rnd: Optional[random.Random] = None
    ) -> Iterator[Tuple[int, bytes, bytes]]:
        """Yield ``(i, key, value)`` for every pair in random order."""
        entries = list(self._entries)
        for i in shuffled_index(rnd, len(entries), 1):
            key, value = entries[i]
            yield i, key, value

    def iterate_inexact(self) -> Iterator[Tuple[int, bytes, bytes, bytes]]:
        """Yield ``(i, separator, key, value)`` for every pair in order."""
        for i in range(len(self._entries)):
            yield (i, *self.index_inexact(i))

    def clone(self) -> "KeyValue":
        copy = KeyValue()
        copy._entries = list(self._entries)
        copy._nbytes = self._nbytes
        return copy

    def slice(self, start: int, limit: int) -> "KeyValue":
        """Return a copy of the pairs at positions ``start`` to ``limit`` (exclusive)."""
        if start < 0 or limit > len(self._entries):
            raise IndexError(f"slice {start} .. {limit}: out of range")
        if limit < start:
            raise ValueError(f"slice {start} .. {limit}: invalid range")
        part = KeyValue()
        part._entries = self._entries[start:limit]
        part._nbytes = sum(len(k) + len(v) for k, v in part._entries)
        return part

    def slice_key(self, start: Optional[KeyLike], limit: Optional[KeyLike]) -> "KeyValue":
        """Return a copy of the pairs with ``start <= key < limit``; ``None`` is unbounded."""
        lo = 0 if start is None else self.search(start)
        hi = len(self._entries) if limit is None else self.search(limit)
        return self.slice(lo, hi)

    def slice_range(self, key_range: Optional[KeyRange]) -> "KeyValue":
        """Return a copy of the pairs inside ``key_range``; ``None`` means everything."""
        if key_range is None:
            return self.clone()
        return self.slice_key(key_range.start, key_range.limit)

    def range(self, start: int, limit: int) -> KeyRange:
        """Return the key range that covers positions ``start`` to ``limit``."""
        result = KeyRange()
        n = len(self._entries)
        if n > 0:
            if start == n:
                result.start = bytes_after(self.key_at(start - 1))
            else:
                result.start = self.key_at(start)
        if limit < n:
            result.limit = self.key_at(limit)
        return result


def _from_pairs(*pairs: Tuple[str, str]) -> KeyValue:
    kv = KeyValue()
    for key, value in pairs:
        kv.put(key, value)
    return kv


def empty_key() -> KeyValue:
    return _from_pairs(("", "v"))


def empty_value() -> KeyValue:
    return _from_pairs(("abc", ""), ("abcd", ""))


def one_key_value() -> KeyValue:
    return _from_pairs(("abc", "v"))


def big_value() -> KeyValue:
    return _from_pairs(("big1", "1" * 200000))


def special_key() -> KeyValue:
    return _from_pairs(("\xff\xff", "v3"))


def multiple_key_value() -> KeyValue:
    return _from_pairs(
        ("a", "v"),
        ("aa", "v1"),
        ("aaa", "v2"),
        ("aaacccccccccc", "v2"),
        ("aaaccccccccccd", "v3"),
        ("aaaccccccccccf", "v4"),
        ("aaaccccccccccfg", "v5"),
        ("ab", "v6"),
        ("abc", "v7"),
        ("abcd", "v8"),
        ("accccccccccccccc", "v9"),
        ("b", "v10"),
        ("bb", "v11"),
        ("bc", "v12"),
        ("c", "v13"),
        ("c1", "v13"),
        ("czzzzzzzzzzzzzz", "v14"),
        ("fffffffffffffff", "v15"),
        ("g11", "v15"),
        ("g111", "v15"),
        ("g111\xff", "v15"),
        ("zz", "v16"),
        ("zzzzzzz", "v16"),
        ("zzzzzzzzzzzzzzzz", "v16"),
    )


_KEYMAP = b"012345678ABCDEFGHIJKLMNOPQRSTUVWXYabcdefghijklmnopqrstuvwxy"


def generate(
    rnd: Optional[random.Random],
    n: int,
    incr: int,
    minlen: int,
    maxlen: int,
    vminlen: int,
    vmaxlen: int,
) -> KeyValue:
    """Generate ``n`` increasing keys with lengths in ``[minlen, maxlen)`` and filler values."""
    if rnd is None:
        rnd = new_rand()
    if maxlen < minlen:
        raise ValueError("max len should >= min len")

    def rrand(lo: int, hi: int) -> int:
        if lo == hi:
            return hi
        return rnd.randrange(hi - lo) + lo

    kv = KeyValue()
    end_c = len(_KEYMAP) - incr
    gen: List[int] = []
    for i in range(n):
        m = rrand(minlen, maxlen)
        last = gen
        while True:
            if m > len(last):
                gen = last + [0] * (m - len(last))
                break
            advanced = None
            for j in range(m - 1, -1, -1):
                c = last[j]
                if c == end_c:
                    continue
                advanced = last[:j] + [c + incr] + [0] * (m - j - 1)
                break
            if advanced is not None:
                gen = advanced
                break
            if m < maxlen:
                m += 1
                continue
            raise ValueError(
                f"only able to generate {len(kv)} keys out of {n} keys, "
                "try increasing max len"
            )
        key = bytes(_KEYMAP[c] for c in gen)
        length = rrand(vminlen, vmaxlen)
        value = f"v{i}".encode()[:length].ljust(length, b"x")
        kv.put(key, value)
    return kv