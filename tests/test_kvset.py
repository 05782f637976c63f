import random

import pytest

from levelkit.keyrange import KeyRange
from levelkit.kvset import (
    KeyValue,
    big_value,
    empty_key,
    empty_value,
    generate,
    multiple_key_value,
    one_key_value,
    special_key,
)


def test_put_requires_increasing_keys():
    kv = KeyValue()
    kv.put(b"b", b"1")
    with pytest.raises(ValueError):
        kv.put(b"a", b"2")
    with pytest.raises(ValueError):
        kv.put(b"b", b"3")
    assert len(kv) == 1


def test_put_tracks_size():
    kv = KeyValue()
    kv.put("abc", "de")
    kv.put("abd", "")
    assert kv.size() == len("abc") + len("de") + len("abd")


def test_put_u_inserts_in_order_and_overwrites():
    kv = KeyValue()
    assert kv.put_u(b"m", b"1") is True
    assert kv.put_u(b"a", b"2") is True
    assert kv.put_u(b"z", b"3") is True
    assert [k for k, _ in kv] == [b"a", b"m", b"z"]
    assert kv.put_u(b"m", b"longer") is False
    assert kv.index(1) == (b"m", b"longer")
    assert kv.size() == sum(len(k) + len(v) for k, v in kv)


def test_delete_returns_value():
    kv = multiple_key_value()
    n = len(kv)
    assert kv.delete(b"abc") == b"v7"
    assert len(kv) == n - 1
    assert kv.delete(b"abc") is None
    assert kv.get(b"abc")[1] is False
    assert kv.size() == sum(len(k) + len(v) for k, v in kv)


def test_delete_index_out_of_range():
    kv = one_key_value()
    assert kv.delete_index(5) is False
    assert kv.delete_index(0) is True
    assert len(kv) == 0
    assert kv.size() == 0


def test_search_and_get():
    kv = multiple_key_value()
    for i, (key, _) in enumerate(kv):
        assert kv.search(key) == i
        assert kv.get(key) == (i, True)
    assert kv.get(b"aab") == (kv.search(b"aab"), False)
    assert kv.search(b"\xff") == len(kv)


def test_index_out_of_range():
    kv = one_key_value()
    with pytest.raises(IndexError):
        kv.index(1)
    with pytest.raises(IndexError):
        kv.index(-1)
    assert kv.index_or_none(3) == (None, None)
    assert kv.index_or_none(0) == (b"abc", b"v")


def test_index_inexact_seeks_to_position():
    kv = multiple_key_value()
    for i, sep, key, value in kv.iterate_inexact():
        assert sep <= key
        assert kv.search(sep) == i
        assert kv.value_at(i) == value


def test_iterate_shuffled_covers_all():
    kv = multiple_key_value()
    seen = sorted(kv.iterate_shuffled(random.Random(5)))
    assert seen == [(i, k, v) for i, (k, v) in enumerate(kv)]


def test_clone_is_independent():
    kv = one_key_value()
    copy = kv.clone()
    copy.put_u(b"zzz", b"1")
    assert len(kv) == 1
    assert len(copy) == 2


def test_slice_errors():
    kv = multiple_key_value()
    with pytest.raises(IndexError):
        kv.slice(-1, 2)
    with pytest.raises(IndexError):
        kv.slice(0, len(kv) + 1)
    with pytest.raises(ValueError):
        kv.slice(3, 2)


def test_slice_key_and_range():
    kv = multiple_key_value()
    part = kv.slice_key(b"b", b"c")
    assert [k for k, _ in part] == [b"b", b"bb", b"bc"]
    assert len(kv.slice_key(None, None)) == len(kv)
    same = kv.slice_range(KeyRange(b"b", b"c"))
    assert list(same) == list(part)
    assert list(kv.slice_range(None)) == list(kv)


def test_range_round_trip():
    kv = multiple_key_value()
    for start, limit in [(0, 5), (3, 10), (0, len(kv)), (len(kv), len(kv))]:
        r = kv.range(start, limit)
        assert list(kv.slice_range(r)) == list(kv.slice(start, limit))


def test_fixtures():
    assert list(empty_key()) == [(b"", b"v")]
    assert list(empty_value()) == [(b"abc", b""), (b"abcd", b"")]
    assert list(special_key()) == [(b"\xff\xff", b"v3")]
    assert big_value().value_at(0) == b"1" * 200000
    assert len(multiple_key_value()) == 24


@pytest.mark.parametrize("incr", [1, 2, 3])
def test_generate_increasing(incr):
    kv = generate(random.Random(7), 120, incr, 1, 50, 10, 120)
    assert len(kv) == 120
    keys = [k for k, _ in kv]
    assert keys == sorted(set(keys))
    for i, (key, value) in enumerate(kv):
        assert 1 <= len(key) <= 50
        assert 10 <= len(value) < 120
        assert value.startswith(f"v{i}".encode())


def test_generate_fixed_value_length():
    kv = generate(random.Random(1), 30, 1, 1, 50, 5, 5)
    assert all(len(v) == 5 for _, v in kv)


def test_generate_invalid_lengths():
    with pytest.raises(ValueError):
        generate(random.Random(1), 10, 1, 5, 2, 1, 1)


def test_generate_runs_out_of_keys():
    with pytest.raises(ValueError):
        generate(random.Random(1), 100, 1, 1, 1, 1, 1)