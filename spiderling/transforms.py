"""Vector helpers and 4x4 transform matrices for column vectors."""

from __future__ import annotations

import math
from collections.abc import Iterable

import numpy as np


def vec3(values: Iterable[float]) -> np.ndarray:
    """Build a 3-vector from the first three items of ``values``."""
    items = list(values)
    if len(items) < 3:
        raise ValueError(f"expected at least 3 components, got {len(items)}")
    return np.array(items[:3], dtype=float)


def normalize(v) -> np.ndarray:
    """Return ``v`` scaled to unit length; a zero vector yields NaNs."""
    arr = np.asarray(v, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        return arr / np.linalg.norm(arr)


def translate(matrix, offset) -> np.ndarray:
    """Return ``matrix`` followed by a translation by ``offset``."""
    t = np.identity(4)
    t[:3, 3] = vec3(offset)
    return np.asarray(matrix, dtype=float) @ t


def rotate(matrix, degrees: float, axis) -> np.ndarray:
    """Return ``matrix`` followed by a rotation of ``degrees`` about ``axis``."""
    a = vec3(axis)
    length = np.linalg.norm(a)
    if length == 0.0:
        raise ValueError("rotation axis must not be zero")
    a = a / length
    angle = math.radians(degrees)
    c, s = math.cos(angle), math.sin(angle)
    cross = np.array(
        [
            [0.0, -a[2], a[1]],
            [a[2], 0.0, -a[0]],
            [-a[1], a[0], 0.0],
        ]
    )
    r = np.identity(4)
    r[:3, :3] = c * np.identity(3) + s * cross + (1.0 - c) * np.outer(a, a)
    return np.asarray(matrix, dtype=float) @ r


def scale(matrix, factors) -> np.ndarray:
    """Return ``matrix`` followed by a scaling by ``factors``."""
    s = np.identity(4)
    s[0, 0], s[1, 1], s[2, 2] = vec3(factors)
    return np.asarray(matrix, dtype=float) @ s


def look_at(eye, center, up) -> np.ndarray:
    """Right-handed view matrix looking from ``eye`` towards ``center``."""
    eye = vec3(eye)
    f = normalize(vec3(center) - eye)
    s = normalize(np.cross(f, vec3(up)))
    u = np.cross(s, f)
    result = np.identity(4)
    result[0, :3] = s
    result[1, :3] = u
    result[2, :3] = -f
    result[0, 3] = -np.dot(s, eye)
    result[1, 3] = -np.dot(u, eye)
    result[2, 3] = np.dot(f, eye)
    return result


def ortho(left, right, bottom, top, near, far) -> np.ndarray:
    """Orthographic projection onto the cube [-1, 1]^3."""
    if right == left or top == bottom or far == near:
        raise ValueError("projection volume must have non-zero extent")
    result = np.identity(4)
    result[0, 0] = 2.0 / (right - left)
    result[1, 1] = 2.0 / (top - bottom)
    result[2, 2] = -2.0 / (far - near)
    result[0, 3] = -(right + left) / (right - left)
    result[1, 3] = -(top + bottom) / (top - bottom)
    result[2, 3] = -(far + near) / (far - near)
    return result


def perspective(fovy, aspect, near, far) -> np.ndarray:
    """Perspective projection; ``fovy`` is the vertical field of view in degrees."""
    if aspect == 0 or far == near:
        raise ValueError("aspect must be non-zero and near must differ from far")
    tan_half = math.tan(math.radians(fovy) / 2.0)
    result = np.zeros((4, 4))
    result[0, 0] = 1.0 / (aspect * tan_half)
    result[1, 1] = 1.0 / tan_half
    result[2, 2] = -(far + near) / (far - near)
    result[2, 3] = -(2.0 * far * near) / (far - near)
    result[3, 2] = -1.0
    return result