"""Baseline JPEG encoder for 8-bit greyscale, RGB and RGBX images."""

from __future__ import annotations

from pathlib import Path

import numpy as np

_F32 = np.float32

ZIGZAG = np.array(
    [
        0, 1, 5, 6, 14, 15, 27, 28, 2, 4, 7, 13, 16, 26, 29, 42,
        3, 8, 12, 17, 25, 30, 41, 43, 9, 11, 18, 24, 31, 40, 44, 53,
        10, 19, 23, 32, 39, 45, 52, 54, 20, 22, 33, 38, 46, 51, 55, 60,
        21, 34, 37, 47, 50, 56, 59, 61, 35, 36, 48, 49, 57, 58, 62, 63,
    ]
)

_DC_LUMINANCE_COUNTS = (0, 1, 5, 1, 1, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 0)
_DC_LUMINANCE_VALUES = tuple(range(12))
_AC_LUMINANCE_COUNTS = (0, 2, 1, 3, 3, 2, 4, 3, 5, 5, 4, 4, 0, 0, 1, 0x7D)
_AC_LUMINANCE_VALUES = (
    0x01, 0x02, 0x03, 0x00, 0x04, 0x11, 0x05, 0x12, 0x21, 0x31, 0x41, 0x06, 0x13, 0x51, 0x61, 0x07,
    0x22, 0x71, 0x14, 0x32, 0x81, 0x91, 0xA1, 0x08, 0x23, 0x42, 0xB1, 0xC1, 0x15, 0x52, 0xD1, 0xF0,
    0x24, 0x33, 0x62, 0x72, 0x82, 0x09, 0x0A, 0x16, 0x17, 0x18, 0x19, 0x1A, 0x25, 0x26, 0x27, 0x28,
    0x29, 0x2A, 0x34, 0x35, 0x36, 0x37, 0x38, 0x39, 0x3A, 0x43, 0x44, 0x45, 0x46, 0x47, 0x48, 0x49,
    0x4A, 0x53, 0x54, 0x55, 0x56, 0x57, 0x58, 0x59, 0x5A, 0x63, 0x64, 0x65, 0x66, 0x67, 0x68, 0x69,
    0x6A, 0x73, 0x74, 0x75, 0x76, 0x77, 0x78, 0x79, 0x7A, 0x83, 0x84, 0x85, 0x86, 0x87, 0x88, 0x89,
    0x8A, 0x92, 0x93, 0x94, 0x95, 0x96, 0x97, 0x98, 0x99, 0x9A, 0xA2, 0xA3, 0xA4, 0xA5, 0xA6, 0xA7,
    0xA8, 0xA9, 0xAA, 0xB2, 0xB3, 0xB4, 0xB5, 0xB6, 0xB7, 0xB8, 0xB9, 0xBA, 0xC2, 0xC3, 0xC4, 0xC5,
    0xC6, 0xC7, 0xC8, 0xC9, 0xCA, 0xD2, 0xD3, 0xD4, 0xD5, 0xD6, 0xD7, 0xD8, 0xD9, 0xDA, 0xE1, 0xE2,
    0xE3, 0xE4, 0xE5, 0xE6, 0xE7, 0xE8, 0xE9, 0xEA, 0xF1, 0xF2, 0xF3, 0xF4, 0xF5, 0xF6, 0xF7, 0xF8,
    0xF9, 0xFA,
)
_DC_CHROMINANCE_COUNTS = (0, 3, 1, 1, 1, 1, 1, 1, 1, 1, 1, 0, 0, 0, 0, 0)
_DC_CHROMINANCE_VALUES = tuple(range(12))
_AC_CHROMINANCE_COUNTS = (0, 2, 1, 2, 4, 4, 3, 4, 7, 5, 4, 4, 0, 1, 2, 0x77)
_AC_CHROMINANCE_VALUES = (
    0x00, 0x01, 0x02, 0x03, 0x11, 0x04, 0x05, 0x21, 0x31, 0x06, 0x12, 0x41, 0x51, 0x07, 0x61, 0x71,
    0x13, 0x22, 0x32, 0x81, 0x08, 0x14, 0x42, 0x91, 0xA1, 0xB1, 0xC1, 0x09, 0x23, 0x33, 0x52, 0xF0,
    0x15, 0x62, 0x72, 0xD1, 0x0A, 0x16, 0x24, 0x34, 0xE1, 0x25, 0xF1, 0x17, 0x18, 0x19, 0x1A, 0x26,
    0x27, 0x28, 0x29, 0x2A, 0x35, 0x36, 0x37, 0x38, 0x39, 0x3A, 0x43, 0x44, 0x45, 0x46, 0x47, 0x48,
    0x49, 0x4A, 0x53, 0x54, 0x55, 0x56, 0x57, 0x58, 0x59, 0x5A, 0x63, 0x64, 0x65, 0x66, 0x67, 0x68,
    0x69, 0x6A, 0x73, 0x74, 0x75, 0x76, 0x77, 0x78, 0x79, 0x7A, 0x82, 0x83, 0x84, 0x85, 0x86, 0x87,
    0x88, 0x89, 0x8A, 0x92, 0x93, 0x94, 0x95, 0x96, 0x97, 0x98, 0x99, 0x9A, 0xA2, 0xA3, 0xA4, 0xA5,
    0xA6, 0xA7, 0xA8, 0xA9, 0xAA, 0xB2, 0xB3, 0xB4, 0xB5, 0xB6, 0xB7, 0xB8, 0xB9, 0xBA, 0xC2, 0xC3,
    0xC4, 0xC5, 0xC6, 0xC7, 0xC8, 0xC9, 0xCA, 0xD2, 0xD3, 0xD4, 0xD5, 0xD6, 0xD7, 0xD8, 0xD9, 0xDA,
    0xE2, 0xE3, 0xE4, 0xE5, 0xE6, 0xE7, 0xE8, 0xE9, 0xEA, 0xF2, 0xF3, 0xF4, 0xF5, 0xF6, 0xF7, 0xF8,
    0xF9, 0xFA,
)

LUMINANCE_QUANT = np.array(
    [
        16, 11, 10, 16, 24, 40, 51, 61, 12, 12, 14, 19, 26, 58, 60, 55,
        14, 13, 16, 24, 40, 57, 69, 56, 14, 17, 22, 29, 51, 87, 80, 62,
        18, 22, 37, 56, 68, 109, 103, 77, 24, 35, 55, 64, 81, 104, 113, 92,
        49, 64, 78, 87, 103, 121, 120, 101, 72, 92, 95, 98, 112, 100, 103, 99,
    ]
)
CHROMINANCE_QUANT = np.array(
    [17, 18, 24, 47, 99, 99, 99, 99, 18, 21, 26, 66, 99, 99, 99, 99,
     24, 26, 56, 99, 99, 99, 99, 99, 47, 66, 99, 99, 99, 99, 99, 99]
    + [99] * 32
)

_SQRT8 = _F32(2.828427125)
_AASF = np.array(
    [1.0, 1.387039845, 1.306562965, 1.175875602, 1.0, 0.785694958, 0.541196100, 0.275899379],
    dtype=_F32,
) * _SQRT8


def _huffman_table(counts, values) -> dict[int, tuple[int, int]]:
    """Canonical Huffman codes: symbol -> (code, length)."""
    table: dict[int, tuple[int, int]] = {}
    symbols = iter(values)
    code = 0
    for length, count in enumerate(counts, start=1):
        for _ in range(count):
            table[next(symbols)] = (code, length)
            code += 1
        code <<= 1
    return table


_Y_DC = _huffman_table(_DC_LUMINANCE_COUNTS, _DC_LUMINANCE_VALUES)
_Y_AC = _huffman_table(_AC_LUMINANCE_COUNTS, _AC_LUMINANCE_VALUES)
_UV_DC = _huffman_table(_DC_CHROMINANCE_COUNTS, _DC_CHROMINANCE_VALUES)
_UV_AC = _huffman_table(_AC_CHROMINANCE_COUNTS, _AC_CHROMINANCE_VALUES)


class _BitWriter:
    """Packs Huffman codes MSB first, stuffing a zero after every 0xFF byte."""

    def __init__(self, out: bytearray) -> None:
        self.out = out
        self.buffer = 0
        self.count = 0

    def write(self, code: int, length: int) -> None:
        self.count += length
        self.buffer |= code << (24 - self.count)
        while self.count >= 8:
            byte = (self.buffer >> 16) & 0xFF
            self.out.append(byte)
            if byte == 0xFF:
                self.out.append(0)
            self.buffer = (self.buffer << 8) & 0xFFFFFF
            self.count -= 8


def _magnitude_bits(value: int) -> tuple[int, int]:
    """The (bits, length) pair coding ``value`` after its size category."""
    length = max(1, abs(value).bit_length())
    if value < 0:
        value -= 1
    return value & ((1 << length) - 1), length


def _dct(d: np.ndarray) -> np.ndarray:
    """Scaled 8-point forward DCT along axis 0 (AAN algorithm, float32)."""
    d0, d1, d2, d3, d4, d5, d6, d7 = d
    tmp0, tmp7 = d0 + d7, d0 - d7
    tmp1, tmp6 = d1 + d6, d1 - d6
    tmp2, tmp5 = d2 + d5, d2 - d5
    tmp3, tmp4 = d3 + d4, d3 - d4

    tmp10, tmp13 = tmp0 + tmp3, tmp0 - tmp3
    tmp11, tmp12 = tmp1 + tmp2, tmp1 - tmp2
    out0 = tmp10 + tmp11
    out4 = tmp10 - tmp11
    z1 = (tmp12 + tmp13) * _F32(0.707106781)
    out2 = tmp13 + z1
    out6 = tmp13 - z1

    tmp10 = tmp4 + tmp5
    tmp11 = tmp5 + tmp6
    tmp12 = tmp6 + tmp7
    z5 = (tmp10 - tmp12) * _F32(0.382683433)
    z2 = tmp10 * _F32(0.541196100) + z5
    z4 = tmp12 * _F32(1.306562965) + z5
    z3 = tmp11 * _F32(0.707106781)
    z11 = tmp7 + z3
    z13 = tmp7 - z3
    out5 = z13 + z2
    out3 = z13 - z2
    out1 = z11 + z4
    out7 = z11 - z4
    return np.stack([out0, out1, out2, out3, out4, out5, out6, out7]).astype(_F32)


def _encode_block(writer, block, fdtbl, dc, dc_table, ac_table) -> int:
    coeffs = _dct(_dct(block.T).T).reshape(64)
    scaled = coeffs * fdtbl
    rounded = np.where(
        scaled < 0, np.ceil(scaled - _F32(0.5)), np.floor(scaled + _F32(0.5))
    ).astype(np.int64)
    du = [0] * 64
    for index, value in zip(ZIGZAG, rounded):
        du[index] = int(value)

    diff = du[0] - dc
    if diff == 0:
        writer.write(*dc_table[0])
    else:
        bits, length = _magnitude_bits(diff)
        writer.write(*dc_table[length])
        writer.write(bits, length)

    eob = ac_table[0x00]
    end = 63
    while end > 0 and du[end] == 0:
        end -= 1
    if end == 0:
        writer.write(*eob)
        return du[0]

    i = 1
    while i <= end:
        start = i
        while du[i] == 0 and i <= end:
            i += 1
        zeros = i - start
        for _ in range(zeros >> 4):
            writer.write(*ac_table[0xF0])
        zeros &= 15
        bits, length = _magnitude_bits(du[i])
        writer.write(*ac_table.get((zeros << 4) + length, (0, 0)))
        writer.write(bits, length)
        i += 1
    if end != 63:
        writer.write(*eob)
    return du[0]


def _quant_tables(quality: int, base: np.ndarray) -> tuple[bytes, np.ndarray]:
    natural = np.clip((base * quality + 50) // 100, 1, 255)
    stored = np.empty(64, dtype=np.uint8)
    stored[ZIGZAG] = natural
    grid = natural.astype(_F32).reshape(8, 8)
    fdtbl = _F32(1) / (grid * _AASF[:, None] * _AASF[None, :])
    return stored.tobytes(), fdtbl.reshape(64).astype(_F32)


def _pixels(data, width: int, height: int, comp: int) -> np.ndarray:
    if isinstance(data, (bytes, bytearray, memoryview)):
        flat = np.frombuffer(bytes(data), dtype=np.uint8)
    else:
        flat = np.asarray(data, dtype=np.uint8).reshape(-1)
    needed = width * height * comp
    if flat.size < needed:
        raise ValueError(f"image data holds {flat.size} bytes, {needed} needed")
    return flat[:needed].reshape(height, width, comp)


def encode_jpeg(data, width: int, height: int, comp: int, quality: int = 90) -> bytes:
    """Encode 8-bit pixels as a baseline JPEG with 4:4:4 YCbCr.

    ``comp`` is 1 (luminance), 3 (RGB) or 4 (RGBX, the fourth byte unused).
    ``quality`` runs from 1 to 100; 0 means 90 and other values are clamped.
    """
    if data is None:
        raise ValueError("no image data")
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive")
    if comp not in (1, 3, 4):
        raise ValueError("comp must be 1, 3 or 4")
    image = _pixels(data, width, height, comp)

    quality = quality or 90
    quality = min(100, max(1, quality))
    quality = 5000 // quality if quality < 50 else 200 - quality * 2
    y_table, fdtbl_y = _quant_tables(quality, LUMINANCE_QUANT)
    uv_table, fdtbl_uv = _quant_tables(quality, CHROMINANCE_QUANT)

    out = bytearray(
        [0xFF, 0xD8, 0xFF, 0xE0, 0, 0x10, *b"JFIF", 0, 1, 1, 0, 0, 1, 0, 1, 0, 0,
         0xFF, 0xDB, 0, 0x84, 0]
    )
    out += y_table
    out.append(1)
    out += uv_table
    out += bytes(
        [0xFF, 0xC0, 0, 0x11, 8, (height >> 8) & 0xFF, height & 0xFF,
         (width >> 8) & 0xFF, width & 0xFF, 3, 1, 0x11, 0, 2, 0x11, 1, 3, 0x11, 1,
         0xFF, 0xC4, 0x01, 0xA2, 0]
    )
    out += bytes(_DC_LUMINANCE_COUNTS) + bytes(_DC_LUMINANCE_VALUES)
    out.append(0x10)
    out += bytes(_AC_LUMINANCE_COUNTS) + bytes(_AC_LUMINANCE_VALUES)
    out.append(1)
    out += bytes(_DC_CHROMINANCE_COUNTS) + bytes(_DC_CHROMINANCE_VALUES)
    out.append(0x11)
    out += bytes(_AC_CHROMINANCE_COUNTS) + bytes(_AC_CHROMINANCE_VALUES)
    out += bytes([0xFF, 0xDA, 0, 0xC, 3, 1, 0, 2, 0x11, 3, 0x11, 0, 0x3F, 0])

    padded_h = -(-height // 8) * 8
    padded_w = -(-width // 8) * 8
    image = np.pad(image, ((0, padded_h - height), (0, padded_w - width), (0, 0)), mode="edge")
    g_index, b_index = (1, 2) if comp > 1 else (0, 0)
    r = image[..., 0].astype(_F32)
    g = image[..., g_index].astype(_F32)
    b = image[..., b_index].astype(_F32)
    y_plane = _F32(0.29900) * r + _F32(0.58700) * g + _F32(0.11400) * b - _F32(128)
    u_plane = _F32(-0.16874) * r - _F32(0.33126) * g + _F32(0.50000) * b
    v_plane = _F32(0.50000) * r - _F32(0.41869) * g - _F32(0.08131) * b

    writer = _BitWriter(out)
    dc_y = dc_u = dc_v = 0
    for y in range(0, height, 8):
        for x in range(0, width, 8):
            window = (slice(y, y + 8), slice(x, x + 8))
            dc_y = _encode_block(writer, y_plane[window], fdtbl_y, dc_y, _Y_DC, _Y_AC)
            dc_u = _encode_block(writer, u_plane[window], fdtbl_uv, dc_u, _UV_DC, _UV_AC)
            dc_v = _encode_block(writer, v_plane[window], fdtbl_uv, dc_v, _UV_DC, _UV_AC)

    writer.write(0x7F, 7)
    out += b"\xff\xd9"
    return bytes(out)


def write_jpeg(
    filename: str | Path, data, width: int, height: int, comp: int, quality: int = 90
) -> None:
    """Encode the image and write it to ``filename``."""
    encoded = encode_jpeg(data, width, height, comp, quality)
    with open(filename, "wb") as stream:
        stream.write(encoded)