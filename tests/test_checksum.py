import pytest

from levelkit.checksum import mask_crc, new_crc, update_crc


def test_standard_check_value():
    assert new_crc(b"123456789") == 0xE3069283


def test_zero_block():
    assert new_crc(bytes(32)) == 0x8A9136AA


def test_empty_is_zero_and_mask_delta():
    assert new_crc(b"") == 0
    assert mask_crc(new_crc(b"")) == 0xA282EAD8


@pytest.mark.parametrize("split", [0, 1, 5, 20, 43])
def test_update_composes(split):
    data = b"the quick brown fox jumps over the lazy dog"
    assert update_crc(new_crc(data[:split]), data[split:]) == new_crc(data)


def test_accepts_bytearray_and_memoryview():
    data = b"levelkit"
    assert new_crc(bytearray(data)) == new_crc(data)
    assert new_crc(memoryview(data)) == new_crc(data)


def test_mask_changes_value_and_stays_32_bit():
    for data in (b"a", b"foo", b"bar" * 100):
        crc = new_crc(data)
        masked = mask_crc(crc)
        assert masked != crc
        assert 0 <= masked <= 0xFFFFFFFF
        assert mask_crc(mask_crc(crc)) != masked


def test_different_data_different_crc():
    assert new_crc(b"foo") != new_crc(b"bar")