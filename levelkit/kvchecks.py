"""Checks that a read-only store returns exactly the pairs of a model set."""

from __future__ import annotations

import random
from typing import List, Optional, Tuple

from .dbtesting import NotFoundError
from .itertesting import IteratorTesting, do_iterator_testing
from .keygen import bytes_after, new_rand, random_index, random_range, shuffled_index
from .keyrange import KeyRange
from .kvset import (
    KeyValue,
    big_value,
    empty_key,
    empty_value,
    generate,
    multiple_key_value,
    one_key_value,
    special_key,
)


def _supports(db: object, name: str) -> bool:
    return callable(getattr(db, name, None))


def check_find(db, kv: KeyValue) -> None:
    """Check that ``db.find`` lands on each pair by exact and by separator key."""
    for i in shuffled_index(None, len(kv), 1):
        sep, key, value = kv.index_inexact(i)
        for probe in (key, sep):
            try:
                rkey, rvalue = db.find(probe)
            except NotFoundError as exc:
                raise AssertionError(f"find for key {probe!r} ({key!r}): not found") from exc
            if rkey != key:
                raise AssertionError(f"key for key {probe!r}: {rkey!r} != {key!r}")
            if rvalue != value:
                raise AssertionError(f"value for key {probe!r} ({key!r}): {rvalue!r} != {value!r}")


def check_find_after_last(db, kv: KeyValue) -> None:
    """Check that finding a key past the last pair reports not found."""
    key = bytes_after(kv.key_at(len(kv) - 1)) if len(kv) > 0 else b""
    try:
        rkey, _ = db.find(key)
    except NotFoundError:
        return
    raise AssertionError(f"find for key {key!r} yield key {rkey!r}")


def check_get(db, kv: KeyValue) -> None:
    """Check that ``db.get`` returns only exact keys."""
    for i in shuffled_index(None, len(kv), 1):
        sep, key, value = kv.index_inexact(i)
        try:
            rvalue = db.get(key)
        except NotFoundError as exc:
            raise AssertionError(f"get for key {key!r}: not found") from exc
        if rvalue != value:
            raise AssertionError(f"value for key {key!r}: {rvalue!r} != {value!r}")
        if sep:
            try:
                db.get(sep)
            except NotFoundError:
                continue
            raise AssertionError(f"get for key {sep!r} should fail")


def check_has(db, kv: KeyValue) -> None:
    """Check that ``db.has`` is true only for present keys."""
    for i in shuffled_index(None, len(kv), 1):
        sep, key, _ = kv.index_inexact(i)
        if not db.has(key):
            raise AssertionError(f"false for key {key!r}")
        if sep and db.has(sep):
            raise AssertionError(f"true for key {sep!r} ({key!r})")


def check_iter(db, key_range: Optional[KeyRange], kv: KeyValue) -> None:
    """Run the full iterator check over ``db.new_iterator(key_range)``."""
    iterator = db.new_iterator(key_range)
    try:
        err = iterator.error()
        if err is not None:
            raise AssertionError(f"iterator error: {err!r}")
        do_iterator_testing(IteratorTesting(kv, iterator))
    finally:
        iterator.release()


def key_value_checks(rnd: Optional[random.Random], kv: KeyValue, db) -> None:
    """Run every check that ``db`` supports against the model set ``kv``."""
    if rnd is None:
        rnd = new_rand()

    if _supports(db, "find"):
        check_find(db, kv)
        check_find_after_last(db, kv)
    if _supports(db, "get"):
        check_get(db, kv)
    if _supports(db, "has"):
        check_has(db, kv)
    if not _supports(db, "new_iterator"):
        return

    n = len(kv)
    check_iter(db, None, kv.clone())

    for i in random_index(rnd, n, min(n, 50)):
        sep, _, _ = kv.index_inexact(i)
        check_iter(db, KeyRange(sep, None), kv.slice(i, n))
        check_iter(db, KeyRange(None, sep), kv.slice(0, i))

    for start, limit in random_range(rnd, n, min(n, 50)):
        check_iter(db, kv.range(start, limit), kv.slice(start, limit))


def standard_key_values() -> List[Tuple[str, KeyValue]]:
    """Return the standard model sets, each with a short description."""
    return [
        ("with no key/value (empty)", KeyValue()),
        ("with empty key", empty_key()),
        ("with empty value", empty_value()),
        ("with one key/value", one_key_value()),
        ("with big value", big_value()),
        ("with special key", special_key()),
        ("with multiple key/value", multiple_key_value()),
        ("with generated key/value 2-incr", generate(None, 120, 2, 1, 50, 10, 120)),
        ("with generated key/value 3-incr", generate(None, 120, 3, 1, 50, 10, 120)),
    ]