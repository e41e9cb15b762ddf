import pytest

from sfwiki.flags import Rgba, check_flag_bits, set_flag_bits


def test_rgba_to_int_byte_layout():
    colour = Rgba(1, 2, 3, 4)
    assert colour.to_int().to_bytes(4, "little", signed=True) == bytes([1, 2, 3, 4])


def test_rgba_high_alpha_is_negative():
    assert Rgba(0, 0, 0, 255).to_int() < 0


def test_rgba_out_of_range_raises():
    with pytest.raises(ValueError):
        Rgba(256, 0, 0, 0).to_int()


@pytest.mark.parametrize("data", [0, 0x0F, 0xFFFFFFFF, 0x12345678])
@pytest.mark.parametrize("mask", [0x1, 0x80, 0x00FF0000])
def test_set_then_check(data, mask):
    on = set_flag_bits(data, mask, True)
    off = set_flag_bits(data, mask, False)
    assert check_flag_bits(on, mask)
    assert not check_flag_bits(off, mask)
    assert on & ~mask == data & ~mask
    assert off & ~mask == data & ~mask


def test_check_flag_bits_any_bit():
    assert check_flag_bits(0b0100, 0b0110)
    assert not check_flag_bits(0b1000, 0b0110)