"""Rays and the result of intersecting a ray with a body."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


def _as_vec3(values) -> np.ndarray:
    return np.asarray(values, dtype=float).reshape(3)


@dataclass(eq=False)
class Ray:
    """A half-line starting at ``point`` and heading along ``direction``."""

    point: np.ndarray
    direction: np.ndarray

    def __post_init__(self) -> None:
        self.point = _as_vec3(self.point)
        self.direction = _as_vec3(self.direction)

    def at(self, t: float) -> np.ndarray:
        """Return the point reached after travelling ``t`` along the ray."""
        return self.point + t * self.direction


@dataclass(eq=False)
class Collision:
    """Where and how a ray met a body.

    ``t`` is the ray parameter of the hit, ``normal`` the surface normal there,
    ``hit`` the hit point and ``v`` the direction back towards the viewer.
    """

    t: float = -1.0
    normal: np.ndarray = field(default_factory=lambda: np.zeros(3))
    hit: np.ndarray = field(default_factory=lambda: np.zeros(3))
    v: np.ndarray = field(default_factory=lambda: np.zeros(3))
    is_collided: bool = False

    def __post_init__(self) -> None:
        self.normal = _as_vec3(self.normal)
        self.hit = _as_vec3(self.hit)
        self.v = _as_vec3(self.v)