"""Randomised put/delete checks of a key/value store against a model."""

from __future__ import annotations

import enum
import random
from typing import Callable, Optional, Protocol

from .itertesting import IteratorTesting, do_iterator_testing
from .keygen import new_rand, shuffled_index
from .kvset import KeyValue


class NotFoundError(KeyError):
    """The key is not present in the store."""


class Store(Protocol):
    def get(self, key: bytes) -> bytes: ...

    def put(self, key: bytes, value: bytes) -> None: ...

    def delete(self, key: bytes) -> None: ...


class DBAct(enum.Enum):
    """The last change made by a :class:`DBTesting`."""

    NONE = "none"
    PUT = "put"
    OVERWRITE = "overwrite"
    DELETE = "delete"
    DELETE_NA = "delete_na"

    def __str__(self) -> str:
        return self.value


class DBTesting:
    """Applies changes to ``db`` and to the model sets, then checks they agree.

    ``present`` holds the pairs the store should contain, ``deleted`` the pairs
    that were removed or not yet written. A failed check raises
    :class:`AssertionError`.
    """

    def __init__(
        self,
        db: Store,
        rnd: Optional[random.Random] = None,
        deleted: Optional[KeyValue] = None,
        present: Optional[KeyValue] = None,
        post_fn: Optional[Callable[["DBTesting"], None]] = None,
    ) -> None:
        self.db = db
        self.rnd = rnd if rnd is not None else new_rand()
        self.deleted = deleted if deleted is not None else KeyValue()
        self.present = present if present is not None else KeyValue()
        self.post_fn = post_fn
        self.act = DBAct.NONE
        self.last_act = DBAct.NONE
        self.act_key: Optional[bytes] = None
        self.last_act_key: Optional[bytes] = None

    def _post(self) -> None:
        if self.post_fn is not None:
            self.post_fn(self)

    def _set_act(self, act: DBAct, key: bytes) -> None:
        self.last_act, self.act = self.act, act
        self.last_act_key, self.act_key = self.act_key, key

    def text(self) -> str:
        """Describe the last two changes."""
        return (
            f"DBTesting last action was <{self.last_act}> {self.last_act_key!r}, "
            f"<{self.act}> {self.act_key!r}"
        )

    def check_present_kv(self, key: bytes, value: bytes) -> None:
        try:
            got = self.db.get(key)
        except NotFoundError as exc:
            raise AssertionError(f"get on key {key!r}: not found, {self.text()}") from exc
        if got != value:
            raise AssertionError(
                f"value for key {key!r}: {got!r} != {value!r}, {self.text()}"
            )

    def check_all_present(self) -> None:
        for _, key, value in self.present.iterate_shuffled(self.rnd):
            self.check_present_kv(key, value)

    def check_deleted_key(self, key: bytes) -> None:
        try:
            self.db.get(key)
        except NotFoundError:
            return
        raise AssertionError(f"get on deleted key {key!r} succeeded, {self.text()}")

    def check_all_deleted(self) -> None:
        for _, key, _ in self.deleted.iterate_shuffled(self.rnd):
            self.check_deleted_key(key)

    def check_all(self) -> None:
        """Check every present and deleted key, in random order."""
        dn = len(self.deleted)
        pn = len(self.present)
        for i in shuffled_index(self.rnd, dn + pn, 1):
            if i >= dn:
                key, value = self.present.index(i - dn)
                self.check_present_kv(key, value)
            else:
                self.check_deleted_key(self.deleted.key_at(i))

    def put(self, key: bytes, value: bytes) -> None:
        if self.present.put_u(key, value):
            self._set_act(DBAct.PUT, key)
        else:
            self._set_act(DBAct.OVERWRITE, key)
        self.deleted.delete(key)
        self.db.put(key, value)
        self.check_present_kv(key, value)
        self._post()

    def put_random(self) -> bool:
        """Write back a random deleted pair; return whether there was one."""
        if len(self.deleted) == 0:
            return False
        key, value = self.deleted.index(self.rnd.randrange(len(self.deleted)))
        self.put(key, value)
        return True

    def delete(self, key: bytes) -> None:
        value = self.present.delete(key)
        if value is not None:
            self._set_act(DBAct.DELETE, key)
            self.deleted.put_u(key, value)
        else:
            self._set_act(DBAct.DELETE_NA, key)
        self.db.delete(key)
        self.check_deleted_key(key)
        self._post()

    def delete_random(self) -> bool:
        """Delete a random present key; return whether there was one."""
        if len(self.present) == 0:
            return False
        self.delete(self.present.key_at(self.rnd.randrange(len(self.present))))
        return True

    def random_act(self, rounds: int) -> None:
        for _ in range(rounds):
            if self.rnd.randrange(2) == 0:
                self.put_random()
            else:
                self.delete_random()


def do_db_testing(t: DBTesting) -> None:
    """Run a sequence of random changes, then check iteration if the store supports it."""
    if t.rnd is None:
        t.rnd = new_rand()

    t.delete_random()
    t.put_random()
    t.delete_random()
    t.delete_random()
    for _ in range(len(t.deleted) // 2, -1, -1):
        t.put_random()
    t.random_act((len(t.deleted) + len(t.present)) * 10)

    new_iterator = getattr(t.db, "new_iterator", None)
    if callable(new_iterator):
        iterator = new_iterator(None)
        try:
            err = iterator.error()
            if err is not None:
                raise AssertionError(f"iterator error: {err!r}")
            do_iterator_testing(IteratorTesting(t.present, iterator, t.rnd))
        finally:
            iterator.release()