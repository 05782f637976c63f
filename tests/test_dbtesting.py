import bisect

import pytest

from levelkit.dbtesting import DBAct, DBTesting, NotFoundError, do_db_testing
from levelkit.keygen import new_rand
from levelkit.kvset import KeyValue, generate, multiple_key_value


class _ListIterator:
    def __init__(self, items):
        self._items = list(items)
        self._keys = [k for k, _ in self._items]
        self._pos = -1

    def _valid(self):
        return 0 <= self._pos < len(self._items)

    def first(self):
        self._pos = 0 if self._items else -1
        return self._valid()

    def last(self):
        self._pos = len(self._items) - 1
        return self._valid()

    def next(self):
        if self._pos >= len(self._items):
            return False
        self._pos += 1
        return self._valid()

    def prev(self):
        if self._pos <= 0:
            self._pos = -1
            return False
        self._pos -= 1
        return True

    def seek(self, key):
        self._pos = bisect.bisect_left(self._keys, key)
        return self._valid()

    def key(self):
        return self._items[self._pos][0] if self._valid() else None

    def value(self):
        return self._items[self._pos][1] if self._valid() else None

    def error(self):
        return None

    def release(self):
        pass


class _MemDB:
    def __init__(self, forget_deletes=False):
        self.data = {}
        self._forget_deletes = forget_deletes

    def get(self, key):
        try:
            return self.data[key]
        except KeyError:
            raise NotFoundError(key) from None

    def put(self, key, value):
        self.data[key] = value

    def delete(self, key):
        if not self._forget_deletes:
            self.data.pop(key, None)

    def new_iterator(self, key_range):
        return _ListIterator(sorted(self.data.items()))


def test_act_names():
    t = DBTesting(_MemDB(), new_rand(1))
    t.put(b"k", b"v")
    t.put(b"k", b"w")
    assert str(t.last_act) == "put"
    assert str(t.act) == "overwrite"
    t.delete(b"missing")
    assert str(t.act) == "delete_na"


def test_do_db_testing_keeps_model_and_store_in_sync():
    deleted = generate(new_rand(3), 40, 1, 1, 10, 5, 5)
    total = len(deleted)
    db = _MemDB()
    t = DBTesting(db, new_rand(5), deleted.clone())
    do_db_testing(t)
    assert len(t.present) + len(t.deleted) == total
    assert db.data == dict(t.present)
    t.check_all()
    assert t.act in (DBAct.PUT, DBAct.DELETE, DBAct.OVERWRITE)


def test_put_and_delete_actions():
    db = _MemDB()
    t = DBTesting(db, new_rand(1))
    t.put(b"k", b"v1")
    assert t.act == DBAct.PUT
    t.put(b"k", b"v2")
    assert t.act == DBAct.OVERWRITE
    assert t.last_act == DBAct.PUT
    t.delete(b"k")
    assert t.act == DBAct.DELETE
    assert t.deleted.get(b"k") == (0, True)
    t.delete(b"k")
    assert t.act == DBAct.DELETE_NA
    assert db.data == {}


def test_store_that_ignores_deletes_is_caught():
    t = DBTesting(_MemDB(forget_deletes=True), new_rand(1))
    t.put(b"a", b"1")
    with pytest.raises(AssertionError):
        t.delete(b"a")
    assert t.act == DBAct.DELETE
    assert t.deleted.get(b"a") == (0, True)
    assert len(t.present) == 0


def test_check_deleted_key_on_present_key_fails():
    db = _MemDB()
    t = DBTesting(db, new_rand(1))
    t.put(b"a", b"1")
    with pytest.raises(AssertionError):
        t.check_deleted_key(b"a")
    assert t.present.get(b"a") == (0, True)
    assert t.act == DBAct.PUT


def test_check_present_kv_on_missing_key_fails():
    t = DBTesting(_MemDB(), new_rand(1))
    with pytest.raises(AssertionError):
        t.check_present_kv(b"missing", b"x")
    assert len(t.present) == 0
    assert "last action was <none>" in t.text()


def test_random_helpers_report_emptiness():
    t = DBTesting(_MemDB(), new_rand(1))
    assert t.put_random() is False
    assert t.delete_random() is False


def test_put_random_moves_pair_to_present():
    deleted = multiple_key_value()
    t = DBTesting(_MemDB(), new_rand(2), deleted.clone())
    assert t.put_random() is True
    assert len(t.present) == 1
    assert len(t.deleted) == len(deleted) - 1


def test_post_fn_and_text():
    seen = []
    t = DBTesting(_MemDB(), new_rand(1), post_fn=lambda d: seen.append(d.act_key))
    t.put(b"x", b"1")
    t.delete(b"x")
    assert seen == [b"x", b"x"]
    assert "last action was <put>" in t.text()