import numpy as np
import pytest

from spiderling.jpeg import (
    CHROMINANCE_QUANT,
    LUMINANCE_QUANT,
    ZIGZAG,
    encode_jpeg,
    write_jpeg,
)

SOF_OFFSET = 25 + 64 + 1 + 64


def _gradient(width, height, comp):
    ys, xs = np.mgrid[0:height, 0:width]
    channels = [(xs * 7 + ys * 3 + k * 40) % 256 for k in range(comp)]
    return np.stack(channels, axis=-1).astype(np.uint8)


def _noise(width, height, comp):
    rng = np.random.default_rng(5)
    return rng.integers(0, 256, size=(height, width, comp), dtype=np.uint8)


def _scan(encoded):
    start = encoded.index(b"\xff\xda") + 14
    return encoded[start:-2]


def test_markers_and_jfif_header():
    out = encode_jpeg(_gradient(16, 8, 3), 16, 8, 3, 75)
    assert out[:4] == b"\xff\xd8\xff\xe0"
    assert out[6:11] == b"JFIF\x00"
    assert out[-2:] == b"\xff\xd9"


@pytest.mark.parametrize("width,height", [(16, 8), (300, 2), (5, 513)])
def test_frame_header_dimensions(width, height):
    out = encode_jpeg(_gradient(width, height, 3), width, height, 3, 80)
    assert out[SOF_OFFSET:SOF_OFFSET + 2] == b"\xff\xc0"
    assert int.from_bytes(out[SOF_OFFSET + 5:SOF_OFFSET + 7], "big") == height
    assert int.from_bytes(out[SOF_OFFSET + 7:SOF_OFFSET + 9], "big") == width


def test_quality_50_stores_base_tables_in_zigzag_order():
    out = encode_jpeg(_gradient(8, 8, 3), 8, 8, 3, 50)
    expected_y = np.empty(64, dtype=np.uint8)
    expected_y[ZIGZAG] = LUMINANCE_QUANT
    expected_uv = np.empty(64, dtype=np.uint8)
    expected_uv[ZIGZAG] = CHROMINANCE_QUANT
    assert out[25:89] == expected_y.tobytes()
    assert out[89] == 1
    assert out[90:154] == expected_uv.tobytes()


def test_quality_100_gives_unit_tables():
    out = encode_jpeg(_gradient(8, 8, 1), 8, 8, 1, 100)
    assert out[25:89] == bytes([1] * 64)
    assert out[90:154] == bytes([1] * 64)


def test_zero_quality_means_90():
    image = _gradient(16, 16, 3)
    assert encode_jpeg(image, 16, 16, 3, 0) == encode_jpeg(image, 16, 16, 3, 90)


def test_quality_is_clamped():
    image = _gradient(16, 16, 3)
    assert encode_jpeg(image, 16, 16, 3, 250) == encode_jpeg(image, 16, 16, 3, 100)
    assert encode_jpeg(image, 16, 16, 3, -5) == encode_jpeg(image, 16, 16, 3, 1)


def test_lower_quality_is_smaller():
    image = _noise(32, 32, 3)
    assert len(encode_jpeg(image, 32, 32, 3, 10)) < len(encode_jpeg(image, 32, 32, 3, 100))


@pytest.mark.parametrize("comp", [1, 3, 4])
def test_scan_bytes_are_stuffed(comp):
    out = encode_jpeg(_noise(24, 24, comp), 24, 24, comp, 95)
    scan = _scan(out)
    positions = [i for i, byte in enumerate(scan) if byte == 0xFF]
    assert all(i + 1 < len(scan) and scan[i + 1] == 0 for i in positions)


def test_bytes_and_array_inputs_agree():
    image = _gradient(12, 10, 3)
    assert encode_jpeg(image.tobytes(), 12, 10, 3, 70) == encode_jpeg(image, 12, 10, 3, 70)


def test_fourth_channel_is_ignored():
    rgb = _gradient(16, 16, 3)
    alpha_a = np.zeros((16, 16, 1), dtype=np.uint8)
    alpha_b = np.full((16, 16, 1), 200, dtype=np.uint8)
    first = encode_jpeg(np.concatenate([rgb, alpha_a], axis=-1), 16, 16, 4, 85)
    second = encode_jpeg(np.concatenate([rgb, alpha_b], axis=-1), 16, 16, 4, 85)
    assert first == second == encode_jpeg(rgb, 16, 16, 3, 85)


def test_grey_equals_rgb_with_equal_channels():
    grey = _gradient(16, 16, 1)
    rgb = np.repeat(grey, 3, axis=-1)
    assert encode_jpeg(grey, 16, 16, 1, 60) == encode_jpeg(rgb, 16, 16, 3, 60)


def test_edge_padding_matches_replicated_image():
    image = _gradient(5, 3, 3)
    padded = np.pad(image, ((0, 5), (0, 3), (0, 0)), mode="edge")
    small = encode_jpeg(image, 5, 3, 3, 80)
    big = encode_jpeg(padded, 8, 8, 3, 80)
    assert _scan(small) == _scan(big)


def test_write_jpeg_writes_encoded_bytes(tmp_path):
    image = _gradient(9, 9, 3)
    target = tmp_path / "out.jpg"
    write_jpeg(target, image, 9, 9, 3, 90)
    assert target.read_bytes() == encode_jpeg(image, 9, 9, 3, 90)


@pytest.mark.parametrize("comp", [0, 2, 5])
def test_invalid_component_count(comp):
    with pytest.raises(ValueError):
        encode_jpeg(bytes(64 * 5), 8, 8, comp, 90)


@pytest.mark.parametrize("width,height", [(0, 8), (8, 0), (-1, 8)])
def test_invalid_dimensions(width, height):
    with pytest.raises(ValueError):
        encode_jpeg(bytes(256), width, height, 3, 90)


def test_short_data_rejected():
    with pytest.raises(ValueError):
        encode_jpeg(bytes(10), 8, 8, 3, 90)


def test_missing_data_rejected():
    with pytest.raises(ValueError):
        encode_jpeg(None, 8, 8, 3, 90)