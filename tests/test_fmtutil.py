import pytest

from levelkit.fmtutil import shorten, shorten_bytes, signed_int, signed_shorten_bytes


@pytest.mark.parametrize("text", ["", "a", "abcdefgh"])
def test_shorten_keeps_short(text):
    assert shorten(text) == text


def test_shorten_long():
    assert shorten("abcdefghij") == "abc..hij"


@pytest.mark.parametrize("text", ["123456789", "x" * 100, "hello, world"])
def test_shorten_shape(text):
    result = shorten(text)
    assert len(result) == 8
    assert result[:3] == text[:3]
    assert result[-3:] == text[-3:]


def test_shorten_bytes_boundary():
    assert shorten_bytes(1024) == "1024B"
    assert shorten_bytes(2048) == "2KiB"


@pytest.mark.parametrize("n", [1, 1000, 5000, 3 * 1024 ** 2, 7 * 1024 ** 3])
def test_signed_shorten_bytes_matches_unsigned(n):
    assert signed_shorten_bytes(n) == "+" + shorten_bytes(n)
    assert signed_shorten_bytes(-n) == "-" + shorten_bytes(n)


def test_zero_is_tilde():
    assert signed_shorten_bytes(0) == "~"
    assert signed_int(0) == "~"


@pytest.mark.parametrize("x", [1, 7, 12345, -1, -99])
def test_signed_int_round_trip(x):
    text = signed_int(x)
    assert int(text) == x
    assert text[0] == ("-" if x < 0 else "+")


def test_huge_sizes_do_not_fail():
    assert shorten_bytes(5 * 1024 ** 5).endswith("B")
    assert shorten_bytes(5 * 1024 ** 5)[:-1].rstrip("KMGiT").isdigit()