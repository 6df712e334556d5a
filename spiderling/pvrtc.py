"""Decompression of PVRTC 2bpp and 4bpp textures into RGBA bytes."""

from __future__ import annotations

import struct

BLOCK_BYTES = 8
BLOCK_Y_SIZE = 4
BLOCK_X_2BPP = 8
BLOCK_X_4BPP = 4
PUNCH_THROUGH_INDEX = 2

_REP_VALS_0 = (0, 3, 5, 8)
_REP_VALS_1 = (0, 4, 4, 8)


def is_power_of_two(value: int) -> bool:
    """True when ``value`` is 1, 2, 4, 8, ...; zero is not a power of two."""
    if value <= 0:
        return False
    return value & (value - 1) == 0


def twiddle_uv(y_size: int, x_size: int, y_pos: int, x_pos: int) -> int:
    """Offset of a block in the twiddled (Morton) layout of a power-of-two grid.

    Bits of the smaller dimension are interleaved, y first; the remaining
    high bits of the larger dimension's position are appended above them.
    """
    if not (is_power_of_two(y_size) and is_power_of_two(x_size)):
        raise ValueError("twiddled dimensions must be powers of two")
    if not (0 <= y_pos < y_size and 0 <= x_pos < x_size):
        raise ValueError("position lies outside the grid")

    if y_size < x_size:
        min_dimension, max_value = y_size, x_pos
    else:
        min_dimension, max_value = x_size, y_pos

    twiddled = 0
    src_bit = 1
    dst_bit = 1
    shift_count = 0
    while src_bit < min_dimension:
        if y_pos & src_bit:
            twiddled |= dst_bit
        if x_pos & src_bit:
            twiddled |= dst_bit << 1
        src_bit <<= 1
        dst_bit <<= 2
        shift_count += 1

    max_value >>= shift_count
    return twiddled | (max_value << (2 * shift_count))


def _unpack_5554_colours(packed1: int) -> list[list[int]]:
    """Colours A and B of a block as 5-bit RGB and 4-bit alpha."""
    raws = (packed1 & 0xFFFE, packed1 >> 16)
    colours = [[0, 0, 0, 0], [0, 0, 0, 0]]
    for i, raw in enumerate(raws):
        colour = colours[i]
        if raw & 0x8000:
            colour[0] = (raw >> 10) & 0x1F
            colour[1] = (raw >> 5) & 0x1F
            colour[2] = raw & 0x1F
            if i == 0:
                colour[2] |= colour[2] >> 4
            colour[3] = 0xF
        else:
            colour[0] = (raw >> 7) & 0x1E
            colour[1] = (raw >> 3) & 0x1E
            colour[0] |= colour[0] >> 4
            colour[1] |= colour[1] >> 4
            colour[2] = (raw & 0xF) << 1
            # The blue expansion is applied to colour A in both cases.
            colours[0][2] |= colours[0][2] >> (3 if i == 0 else 4)
            colour[3] = (raw >> 11) & 0xE
    return colours


def _unpack_modulations(
    block: tuple[int, int],
    do_2bit_mode: bool,
    values: list[list[int]],
    modes: list[list[int]],
    start_x: int,
    start_y: int,
) -> None:
    packed0, packed1 = block
    mode = packed1 & 1
    bits = packed0

    if do_2bit_mode and mode:
        for y in range(BLOCK_Y_SIZE):
            for x in range(BLOCK_X_2BPP):
                modes[y + start_y][x + start_x] = mode
                if (x ^ y) & 1 == 0:
                    values[y + start_y][x + start_x] = bits & 3
                    bits >>= 2
    elif do_2bit_mode:
        for y in range(BLOCK_Y_SIZE):
            for x in range(BLOCK_X_2BPP):
                modes[y + start_y][x + start_x] = mode
                values[y + start_y][x + start_x] = 3 if bits & 1 else 0
                bits >>= 1
    else:
        for y in range(BLOCK_Y_SIZE):
            for x in range(BLOCK_X_4BPP):
                modes[y + start_y][x + start_x] = mode
                values[y + start_y][x + start_x] = bits & 3
                bits >>= 2


def _local_y(y: int) -> int:
    return (y & 0x3) | ((~y & 0x2) << 1)


def _local_x(x: int, do_2bit_mode: bool) -> int:
    if do_2bit_mode:
        return (x & 0x7) | ((~x & 0x4) << 1)
    return (x & 0x3) | ((~x & 0x2) << 1)


def _interpolate_colours(p, q, r, s, do_2bit_mode: bool, x: int, y: int) -> list[int]:
    """Bilinear interpolation of one colour signal, expanded to 8 bits."""
    v = _local_y(y) - BLOCK_Y_SIZE // 2
    if do_2bit_mode:
        u = _local_x(x, True) - BLOCK_X_2BPP // 2
        u_scale = 8
    else:
        u = _local_x(x, False) - BLOCK_X_4BPP // 2
        u_scale = 4

    result = []
    for k in range(4):
        tmp1 = p[k] * u_scale + u * (q[k] - p[k])
        tmp2 = r[k] * u_scale + u * (s[k] - r[k])
        result.append(tmp1 * 4 + v * (tmp2 - tmp1))

    if do_2bit_mode:
        result[0] >>= 2
        result[1] >>= 2
        result[2] >>= 2
        result[3] >>= 1
    else:
        result[0] >>= 1
        result[1] >>= 1
        result[2] >>= 1

    for k in range(3):
        result[k] += result[k] >> 5
    result[3] += result[3] >> 4
    return result


def _modulation_value(
    x: int,
    y: int,
    do_2bit_mode: bool,
    values: list[list[int]],
    modes: list[list[int]],
) -> tuple[int, bool]:
    """The modulation weight in eighths, and whether the pixel is punched through."""
    y = _local_y(y)
    x = _local_x(x, do_2bit_mode)
    mode = modes[y][x]

    if mode == 0:
        return _REP_VALS_0[values[y][x]], False
    if do_2bit_mode:
        if (x ^ y) & 1 == 0:
            return _REP_VALS_0[values[y][x]], False
        if mode == 1:
            total = (
                _REP_VALS_0[values[y - 1][x]]
                + _REP_VALS_0[values[y + 1][x]]
                + _REP_VALS_0[values[y][x - 1]]
                + _REP_VALS_0[values[y][x + 1]]
                + 2
            )
            return total // 4, False
        if mode == 2:
            return (_REP_VALS_0[values[y][x - 1]] + _REP_VALS_0[values[y][x + 1]] + 1) // 2, False
        return (_REP_VALS_0[values[y - 1][x]] + _REP_VALS_0[values[y + 1][x]] + 1) // 2, False
    return _REP_VALS_1[values[y][x]], values[y][x] == PUNCH_THROUGH_INDEX


def _limit_coord(value: int, size: int, tiles: bool) -> int:
    if tiles:
        return value & (size - 1)
    return min(size - 1, max(value, 0))


def decompress_pvrtc(
    data, do_2bit_mode: bool, x_dim: int, y_dim: int, assume_image_tiles: bool = True
) -> bytes:
    """Decode twiddled PVRTC blocks into ``x_dim * y_dim`` RGBA pixels.

    Each block is eight bytes: the modulation word then the colour word,
    both little-endian. The block grid is at least 2x2 and must have
    power-of-two sides.
    """
    if x_dim <= 0 or y_dim <= 0:
        raise ValueError("image dimensions must be positive")
    do_2bit_mode = bool(do_2bit_mode)
    x_block_size = BLOCK_X_2BPP if do_2bit_mode else BLOCK_X_4BPP
    blk_x_dim = max(2, x_dim // x_block_size)
    blk_y_dim = max(2, y_dim // BLOCK_Y_SIZE)
    if not (is_power_of_two(blk_x_dim) and is_power_of_two(blk_y_dim)):
        raise ValueError("the block grid must have power-of-two sides")

    raw = bytes(data)
    needed = blk_x_dim * blk_y_dim
    if len(raw) < needed * BLOCK_BYTES:
        raise ValueError(
            f"compressed data holds {len(raw)} bytes, {needed * BLOCK_BYTES} needed"
        )
    blocks = list(struct.iter_unpack("<2I", raw[: needed * BLOCK_BYTES]))

    values = [[0] * 16 for _ in range(8)]
    modes = [[0] * 16 for _ in range(8)]
    colours: list[list[list[list[int]]]] = [[[], []], [[], []]]
    previous: tuple[int, int, int, int] | None = None
    out = bytearray(x_dim * y_dim * 4)

    for y in range(y_dim):
        for x in range(x_dim):
            blk_x = _limit_coord(x - x_block_size // 2, x_dim, assume_image_tiles)
            blk_y = _limit_coord(y - BLOCK_Y_SIZE // 2, y_dim, assume_image_tiles)
            blk_x //= x_block_size
            blk_y //= BLOCK_Y_SIZE
            blk_xp1 = _limit_coord(blk_x + 1, blk_x_dim, assume_image_tiles)
            blk_yp1 = _limit_coord(blk_y + 1, blk_y_dim, assume_image_tiles)

            current = (
                twiddle_uv(blk_y_dim, blk_x_dim, blk_y, blk_x),
                twiddle_uv(blk_y_dim, blk_x_dim, blk_y, blk_xp1),
                twiddle_uv(blk_y_dim, blk_x_dim, blk_yp1, blk_x),
                twiddle_uv(blk_y_dim, blk_x_dim, blk_yp1, blk_xp1),
            )
            if current != previous:
                for i in range(2):
                    for j in range(2):
                        block = blocks[current[2 * i + j]]
                        colours[i][j] = _unpack_5554_colours(block[1])
                        _unpack_modulations(
                            block,
                            do_2bit_mode,
                            values,
                            modes,
                            j * x_block_size,
                            i * BLOCK_Y_SIZE,
                        )
                previous = current

            a_signal = _interpolate_colours(
                colours[0][0][0], colours[0][1][0], colours[1][0][0], colours[1][1][0],
                do_2bit_mode, x, y,
            )
            b_signal = _interpolate_colours(
                colours[0][0][1], colours[0][1][1], colours[1][0][1], colours[1][1][1],
                do_2bit_mode, x, y,
            )
            mod, punch_through = _modulation_value(x, y, do_2bit_mode, values, modes)

            pixel = [(a * 8 + mod * (b - a)) >> 3 for a, b in zip(a_signal, b_signal)]
            if punch_through:
                pixel[3] = 0

            position = (x + y * x_dim) * 4
            out[position : position + 4] = bytes(c & 0xFF for c in pixel)

    return bytes(out)