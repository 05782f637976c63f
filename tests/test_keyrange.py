import pytest

from levelkit.keyrange import KeyRange, bytes_prefix


def test_simple_prefix():
    assert bytes_prefix(b"ab") == KeyRange(b"ab", b"ac")


def test_prefix_with_trailing_ff():
    assert bytes_prefix(b"a\xff") == KeyRange(b"a\xff", b"b")


def test_all_ff_prefix_is_unbounded():
    r = bytes_prefix(b"\xff\xff")
    assert r.start == b"\xff\xff"
    assert r.limit is None


def test_empty_prefix_is_unbounded():
    assert bytes_prefix(b"") == KeyRange(b"", None)


def test_defaults_unbounded():
    r = KeyRange()
    assert r.start is None and r.limit is None


@pytest.mark.parametrize("prefix", [b"\x00", b"abc", b"a\xffz", b"\x01\xff\xff", b"zz"])
def test_prefixed_keys_fall_in_range(prefix):
    r = bytes_prefix(prefix)
    candidates = [prefix, prefix + b"\x00", prefix + b"\xff\xff", prefix + b"anything"]
    for key in candidates:
        assert r.start <= key
        assert r.limit is None or key < r.limit
    assert r.limit is None or not r.limit.startswith(prefix)
    assert r.limit is None or r.limit > prefix