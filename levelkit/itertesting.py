"""Scripted checks of an ordered iterator against a model key/value set."""

from __future__ import annotations

import enum
import random
from typing import Callable, Optional, Protocol

from .keygen import new_rand, shuffled_index
from .kvset import KeyValue


class Iterator(Protocol):
    def first(self) -> bool: ...

    def last(self) -> bool: ...

    def next(self) -> bool: ...

    def prev(self) -> bool: ...

    def seek(self, key: bytes) -> bool: ...

    def key(self) -> Optional[bytes]: ...

    def value(self) -> Optional[bytes]: ...

    def error(self) -> Optional[BaseException]: ...

    def release(self) -> None: ...


class IterAct(enum.Enum):
    """The last movement made by an :class:`IteratorTesting`."""

    NONE = "none"
    FIRST = "first"
    LAST = "last"
    PREV = "prev"
    NEXT = "next"
    SEEK = "seek"
    SOI = "soi"
    EOI = "eoi"

    def __str__(self) -> str:
        return self.value


def _expect(condition: bool, message: str) -> None:
    if not condition:
        raise AssertionError(message)


class IteratorTesting:
    """Drives an iterator and checks every step against the expected pairs in ``kv``.

    ``pos`` is the expected position: -1 before the first pair and ``len(kv)``
    after the last one. A failed check raises :class:`AssertionError`.
    """

    def __init__(
        self,
        kv: KeyValue,
        iterator: Iterator,
        rnd: Optional[random.Random] = None,
        post_fn: Optional[Callable[["IteratorTesting"], None]] = None,
    ) -> None:
        self.kv = kv
        self.iterator = iterator
        self.rnd = rnd if rnd is not None else new_rand()
        self.post_fn = post_fn
        self.pos = -1
        self.act = IterAct.NONE
        self.last_act = IterAct.NONE

    def _post(self) -> None:
        if self.post_fn is not None:
            self.post_fn(self)

    def _set_act(self, act: IterAct) -> None:
        self.last_act, self.act = self.act, act

    def _check_error(self) -> None:
        err = self.iterator.error()
        _expect(err is None, f"iterator error: {err!r}, {self.text()}")

    def text(self) -> str:
        """Describe the current position and the last two actions."""
        return f"at pos {self.pos} and last action was <{self.last_act}> -> <{self.act}>"

    def __str__(self) -> str:
        return "IteratorTesting is " + self.text()

    def is_first(self) -> bool:
        return len(self.kv) > 0 and self.pos == 0

    def is_last(self) -> bool:
        return len(self.kv) > 0 and self.pos == len(self.kv) - 1

    def check_kv(self) -> None:
        """Check that the iterator holds the pair expected at ``pos``."""
        key, value = self.kv.index(self.pos)
        got_key = self.iterator.key()
        _expect(got_key is not None, f"key is missing, {self.text()}")
        _expect(got_key == key, f"key is invalid: {got_key!r} != {key!r}, {self.text()}")
        got_value = self.iterator.value()
        _expect(
            got_value == value,
            f"value for key {key!r}: {got_value!r} != {value!r}, {self.text()}",
        )

    def first(self) -> None:
        self._set_act(IterAct.FIRST)
        ok = self.iterator.first()
        self._check_error()
        if len(self.kv) > 0:
            self.pos = 0
            _expect(ok, str(self))
            self.check_kv()
        else:
            self.pos = -1
            _expect(not ok, str(self))
        self._post()

    def last(self) -> None:
        self._set_act(IterAct.LAST)
        ok = self.iterator.last()
        self._check_error()
        if len(self.kv) > 0:
            self.pos = len(self.kv) - 1
            _expect(ok, str(self))
            self.check_kv()
        else:
            self.pos = 0
            _expect(not ok, str(self))
        self._post()

    def next(self) -> None:
        self._set_act(IterAct.NEXT)
        ok = self.iterator.next()
        self._check_error()
        if self.pos < len(self.kv) - 1:
            self.pos += 1
            _expect(ok, str(self))
            self.check_kv()
        else:
            self.pos = len(self.kv)
            _expect(not ok, str(self))
        self._post()

    def prev(self) -> None:
        self._set_act(IterAct.PREV)
        ok = self.iterator.prev()
        self._check_error()
        if self.pos > 0:
            self.pos -= 1
            _expect(ok, str(self))
            self.check_kv()
        else:
            self.pos = -1
            _expect(not ok, str(self))
        self._post()

    def seek(self, i: int) -> None:
        """Seek to the exact key at position ``i``."""
        self._set_act(IterAct.SEEK)
        key, _ = self.kv.index(i)
        old_key, _ = self.kv.index_or_none(self.pos)
        ok = self.iterator.seek(key)
        self._check_error()
        _expect(ok, f"seek from key {old_key!r} to {key!r}, to pos {i}, {self.text()}")
        self.pos = i
        self.check_kv()
        self._post()

    def seek_inexact(self, i: int) -> None:
        """Seek with a separator key that should land on position ``i``."""
        self._set_act(IterAct.SEEK)
        key, target, _ = self.kv.index_inexact(i)
        old_key, _ = self.kv.index_or_none(self.pos)
        ok = self.iterator.seek(key)
        self._check_error()
        _expect(
            ok,
            f"seek from key {old_key!r} to {key!r} ({target!r}), to pos {i}, {self.text()}",
        )
        self.pos = i
        self.check_kv()
        self._post()

    def seek_key(self, key: bytes) -> None:
        """Seek to an arbitrary key, which may lie past the last pair."""
        self._set_act(IterAct.SEEK)
        old_key, _ = self.kv.index_or_none(self.pos)
        i = self.kv.search(key)
        ok = self.iterator.seek(key)
        self._check_error()
        if i < len(self.kv):
            target, _ = self.kv.index(i)
            _expect(
                ok,
                f"seek from key {old_key!r} to {key!r} ({target!r}), to pos {i}, {self.text()}",
            )
            self.pos = i
            self.check_kv()
        else:
            _expect(not ok, f"seek from key {old_key!r} to {key!r}, {self.text()}")
        self.pos = i
        self._post()

    def soi(self) -> None:
        """Check that stepping back from the start stays before the start."""
        self._set_act(IterAct.SOI)
        _expect(self.pos <= 0, str(self))
        for _ in range(3):
            self.prev()
        self._post()

    def eoi(self) -> None:
        """Check that stepping past the end stays after the end."""
        self._set_act(IterAct.EOI)
        _expect(self.pos >= len(self.kv) - 1, str(self))
        for _ in range(3):
            self.next()
        self._post()

    def walk_prev(self, fn: Callable[["IteratorTesting"], None]) -> None:
        """Call ``fn`` until the start is reached; each call must move backwards."""
        old = self.pos
        while self.pos > 0:
            fn(self)
            _expect(self.pos < old, str(self))
            old = self.pos

    def walk_next(self, fn: Callable[["IteratorTesting"], None]) -> None:
        """Call ``fn`` until the end is reached; each call must move forwards."""
        old = self.pos
        while self.pos < len(self.kv) - 1:
            fn(self)
            _expect(self.pos > old, str(self))
            old = self.pos

    def prev_all(self) -> None:
        self.walk_prev(IteratorTesting.prev)

    def next_all(self) -> None:
        self.walk_next(IteratorTesting.next)


def do_iterator_testing(t: IteratorTesting) -> None:
    """Run the full sequence of walks and seeks against ``t``."""
    if t.rnd is None:
        t.rnd = new_rand()
    t.soi()
    t.next_all()
    t.first()
    t.soi()
    t.next_all()
    t.eoi()
    t.prev_all()
    t.last()
    t.eoi()
    t.prev_all()
    t.soi()

    t.next_all()
    t.prev_all()
    t.next_all()
    t.last()
    t.prev_all()
    t.first()
    t.next_all()
    t.eoi()

    for i in shuffled_index(t.rnd, len(t.kv), 1):
        t.seek(i)

    for i in shuffled_index(t.rnd, len(t.kv), 1):
        t.seek_inexact(i)

    for i in shuffled_index(t.rnd, len(t.kv), 1):
        t.seek(i)
        if i % 2 != 0:
            t.prev_all()
            t.soi()
        else:
            t.next_all()
            t.eoi()

    for key in (b"", b"foo", b"bar", b"\xff" * 11):
        t.seek_key(key)