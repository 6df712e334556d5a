"""Decoding of S3TC (DXT1 to DXT5) 4x4 texture blocks into RGBA bytes."""

from __future__ import annotations

BLOCK_BYTES = 16 * 4
COMPRESSED_BYTES = 8


def _compressed(data) -> bytes:
    raw = bytes(data)
    if len(raw) < COMPRESSED_BYTES:
        raise ValueError(f"a compressed block needs {COMPRESSED_BYTES} bytes, got {len(raw)}")
    return raw[:COMPRESSED_BYTES]


def _block(data) -> bytearray:
    out = bytearray(data)
    if len(out) != BLOCK_BYTES:
        raise ValueError(f"a decoded block holds {BLOCK_BYTES} bytes, got {len(out)}")
    return out


def convert_bit_range(c: int, from_bits: int, to_bits: int) -> int:
    """Rescale ``c`` from a ``from_bits`` wide range to a ``to_bits`` wide one."""
    if from_bits < 1 or to_bits < 1:
        raise ValueError("bit widths must be positive")
    b = (1 << (from_bits - 1)) + c * ((1 << to_bits) - 1)
    return (b + (b >> from_bits)) >> from_bits


def rgb888_from_565(c: int) -> tuple[int, int, int]:
    """Expand a packed 5:6:5 colour to 8-bit red, green and blue."""
    return (
        convert_bit_range((c >> 11) & 31, 5, 8),
        convert_bit_range((c >> 5) & 63, 6, 8),
        convert_bit_range(c & 31, 5, 8),
    )


def _endpoints(raw: bytes) -> tuple[int, int, tuple[int, int, int], tuple[int, int, int]]:
    c0 = raw[0] | (raw[1] << 8)
    c1 = raw[2] | (raw[3] << 8)
    return c0, c1, rgb888_from_565(c0), rgb888_from_565(c1)


def _two_bit_indices(raw: bytes):
    bits = int.from_bytes(raw[4:8], "little")
    return ((bits >> (2 * k)) & 3 for k in range(16))


def decode_dxt1_block(compressed) -> bytes:
    """Decode an 8-byte DXT1 block into 16 RGBA pixels (64 bytes)."""
    raw = _compressed(compressed)
    c0, c1, first, second = _endpoints(raw)
    if c0 > c1:
        palette = [
            (*first, 255),
            (*second, 255),
            (*((2 * a + b) // 3 for a, b in zip(first, second)), 255),
            (*((a + 2 * b) // 3 for a, b in zip(first, second)), 255),
        ]
    else:
        palette = [
            (*first, 255),
            (*second, 255),
            (*((a + b) // 2 for a, b in zip(first, second)), 255),
            (0, 0, 0, 0),
        ]
    out = bytearray()
    for index in _two_bit_indices(raw):
        out.extend(palette[index])
    return bytes(out)


def decode_dxt23_alpha_block(block, compressed) -> bytes:
    """Return ``block`` with its alpha bytes set from explicit 4-bit DXT2/3 alpha."""
    out = _block(block)
    bits = int.from_bytes(_compressed(compressed), "little")
    for k in range(16):
        out[4 * k + 3] = convert_bit_range((bits >> (4 * k)) & 15, 4, 8)
    return bytes(out)


def decode_dxt45_alpha_block(block, compressed) -> bytes:
    """Return ``block`` with its alpha bytes set from interpolated DXT4/5 alpha."""
    out = _block(block)
    raw = _compressed(compressed)
    a0, a1 = raw[0], raw[1]
    if a0 > a1:
        alphas = [a0, a1] + [((7 - k) * a0 + k * a1) // 7 for k in range(1, 7)]
    else:
        alphas = [a0, a1] + [((5 - k) * a0 + k * a1) // 5 for k in range(1, 5)] + [0, 255]
    bits = int.from_bytes(raw[2:8], "little")
    for k in range(16):
        out[4 * k + 3] = alphas[(bits >> (3 * k)) & 7]
    return bytes(out)


def decode_dxt_color_block(block, compressed) -> bytes:
    """Return ``block`` with its RGB bytes set from a four-colour DXT2-5 colour block."""
    out = _block(block)
    raw = _compressed(compressed)
    _, _, first, second = _endpoints(raw)
    palette = [
        first,
        second,
        tuple((2 * a + b) // 3 for a, b in zip(first, second)),
        tuple((a + 2 * b) // 3 for a, b in zip(first, second)),
    ]
    for k, index in enumerate(_two_bit_indices(raw)):
        out[4 * k : 4 * k + 3] = bytes(palette[index])
    return bytes(out)