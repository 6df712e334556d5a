import pytest

from spiderling.dxt import (
    convert_bit_range,
    decode_dxt1_block,
    decode_dxt23_alpha_block,
    decode_dxt45_alpha_block,
    decode_dxt_color_block,
    rgb888_from_565,
)


def pixels(block):
    return [tuple(block[i : i + 4]) for i in range(0, 64, 4)]


def test_convert_bit_range_endpoints():
    assert convert_bit_range(0, 5, 8) == 0
    assert convert_bit_range(31, 5, 8) == 255
    assert convert_bit_range(63, 6, 8) == 255


@pytest.mark.parametrize("bits", [4, 5, 6])
def test_convert_bit_range_is_monotonic(bits):
    values = [convert_bit_range(c, bits, 8) for c in range(1 << bits)]
    assert values == sorted(values)
    assert all(0 <= v <= 255 for v in values)


def test_convert_bit_range_rejects_zero_width():
    with pytest.raises(ValueError):
        convert_bit_range(1, 0, 8)


def test_rgb888_from_565():
    assert rgb888_from_565(0xFFFF) == (255, 255, 255)
    assert rgb888_from_565(0x0000) == (0, 0, 0)
    assert rgb888_from_565(0xF800) == (255, 0, 0)
    assert rgb888_from_565(0x07E0) == (0, 255, 0)
    assert rgb888_from_565(0x001F) == (0, 0, 255)


def test_dxt1_endpoint_indices():
    white_first = bytes([0xFF, 0xFF, 0x00, 0x00, 0, 0, 0, 0])
    block = decode_dxt1_block(white_first)
    assert len(block) == 64
    assert pixels(block) == [(255, 255, 255, 255)] * 16

    all_second = bytes([0xFF, 0xFF, 0x00, 0x00, 0x55, 0x55, 0x55, 0x55])
    assert pixels(decode_dxt1_block(all_second)) == [(0, 0, 0, 255)] * 16


def test_dxt1_pixel_order_follows_low_bits_first():
    data = bytes([0xFF, 0xFF, 0x00, 0x00, 0b00000001, 0, 0, 0])
    result = pixels(decode_dxt1_block(data))
    assert result[0] == (0, 0, 0, 255)
    assert result[1:] == [(255, 255, 255, 255)] * 15


def test_dxt1_transparent_when_c0_not_greater():
    data = bytes([0, 0, 0, 0, 0xFF, 0xFF, 0xFF, 0xFF])
    assert pixels(decode_dxt1_block(data)) == [(0, 0, 0, 0)] * 16


def test_dxt1_interpolated_colours_lie_between_endpoints():
    data = bytes([0xFF, 0xFF, 0x00, 0x00, 0xAA, 0xFF, 0xAA, 0xFF])
    for r, g, b, a in pixels(decode_dxt1_block(data)):
        assert 0 < r < 255 and r == g == b
        assert a == 255


def test_dxt1_rejects_short_input():
    with pytest.raises(ValueError):
        decode_dxt1_block(b"\x00\x01\x02")


def test_dxt23_alpha_sets_only_alpha():
    base = bytes(range(64))
    result = decode_dxt23_alpha_block(base, bytes(8))
    for k, (r, g, b, a) in enumerate(pixels(result)):
        assert (r, g, b) == tuple(base[4 * k : 4 * k + 3])
        assert a == 0
    full = decode_dxt23_alpha_block(base, bytes([0xFF] * 8))
    assert all(a == convert_bit_range(15, 4, 8) for *_, a in pixels(full))


def test_dxt23_alpha_rejects_wrong_block_size():
    with pytest.raises(ValueError):
        decode_dxt23_alpha_block(bytes(10), bytes(8))


def test_dxt45_alpha_endpoints():
    base = bytes(64)
    first = decode_dxt45_alpha_block(base, bytes([200, 10, 0, 0, 0, 0, 0, 0]))
    assert all(a == 200 for *_, a in pixels(first))
    # index 1 for every pixel: bit pattern 001 repeated
    bits = sum(1 << (3 * k) for k in range(16))
    second = decode_dxt45_alpha_block(base, bytes([200, 10]) + bits.to_bytes(6, "little"))
    assert all(a == 10 for *_, a in pixels(second))


def test_dxt45_alpha_fixed_extremes_when_a0_not_greater():
    base = bytes(64)
    opaque = decode_dxt45_alpha_block(base, bytes([0, 0] + [0xFF] * 6))
    assert all(a == 255 for *_, a in pixels(opaque))
    bits = sum(6 << (3 * k) for k in range(16))
    clear = decode_dxt45_alpha_block(bytes([9] * 64), bytes([50, 60]) + bits.to_bytes(6, "little"))
    assert all(a == 0 for *_, a in pixels(clear))
    assert all(rgb == (9, 9, 9) for *rgb, _ in [(p[0], p[1], p[2], p[3]) for p in pixels(clear)])


def test_dxt45_interpolation_is_monotonic():
    base = bytes(64)
    alphas = []
    for index in range(8):
        bits = sum(index << (3 * k) for k in range(16))
        result = decode_dxt45_alpha_block(base, bytes([210, 14]) + bits.to_bytes(6, "little"))
        alphas.append(result[3])
    ordered = [alphas[0]] + alphas[2:] + [alphas[1]]
    assert ordered == sorted(ordered, reverse=True)


def test_dxt_color_block_keeps_alpha():
    base = bytes([7] * 64)
    result = decode_dxt_color_block(base, bytes([0x00, 0xF8, 0x1F, 0x00, 0, 0, 0, 0]))
    assert pixels(result) == [(255, 0, 0, 7)] * 16
    second = decode_dxt_color_block(base, bytes([0x00, 0xF8, 0x1F, 0x00, 0x55, 0x55, 0x55, 0x55]))
    assert pixels(second) == [(0, 0, 255, 7)] * 16


def test_dxt_color_block_uses_four_colours_even_when_c0_small():
    base = bytes(64)
    data = bytes([0, 0, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF])
    for r, g, b, a in pixels(decode_dxt_color_block(base, data)):
        assert 0 < r < 255 and r == g == b
        assert a == 0


def test_dxt_color_block_then_alpha_round_trip():
    colour = decode_dxt_color_block(bytes(64), bytes([0xFF, 0xFF, 0, 0, 0, 0, 0, 0]))
    combined = decode_dxt45_alpha_block(colour, bytes([0, 0] + [0xFF] * 6))
    assert pixels(combined) == [(255, 255, 255, 255)] * 16