"""A viewing camera: eye rays for ray tracing and view/projection matrices."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Mapping

import numpy as np

from .ray import Ray
from .transforms import look_at, normalize as unit, ortho, perspective, rotate, vec3

ZOOM_IN_FACTOR = 0.9
ZOOM_OUT_FACTOR = 1.1
PAN_DEGREES = 1.0


class Key(Enum):
    """Keys the camera reacts to."""

    LEFT_SHIFT = auto()
    LEFT_CONTROL = auto()
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    Z = auto()
    W = auto()
    S = auto()
    A = auto()
    D = auto()


def _vec(value) -> np.ndarray:
    return np.asarray(value, dtype=float).reshape(3)


@dataclass(eq=False)
class Camera:
    """Camera frame ``u``, ``v``, ``w`` with image-plane bounds and matrices."""

    eye: np.ndarray
    u: np.ndarray
    v: np.ndarray
    lookat: np.ndarray
    up: np.ndarray
    distance: float
    theta: float
    width: int
    height: int
    orthographic: bool = False
    near: float = 0.1
    far: float = 100.0
    yaw: float = -90.0
    pitch: float = 0.0
    camera_speed: float = 1.0
    degree_speed: float = 1.0
    w: np.ndarray = field(init=False)
    left: float = field(init=False)
    right: float = field(init=False)
    bottom: float = field(init=False)
    top: float = field(init=False)
    view: np.ndarray = field(init=False)
    proj: np.ndarray = field(init=False)

    def __post_init__(self) -> None:
        self.eye = _vec(self.eye)
        self.u = _vec(self.u)
        self.v = _vec(self.v)
        self.lookat = _vec(self.lookat)
        self.up = _vec(self.up)
        self.distance = float(self.distance)
        self.theta = float(self.theta)
        self.width = int(self.width)
        self.height = int(self.height)
        self.orthographic = bool(self.orthographic)
        if self.width <= 0 or self.height <= 0:
            raise ValueError("image width and height must be positive")

        self.w = np.cross(self.u, self.v)
        self.top = math.tan(math.radians(self.theta) / 2.0) * self.distance
        self.bottom = -self.top
        self.right = self.top * self.aspect
        self.left = -self.right
        self._update_matrices()

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Camera":
        """Build a camera from a scene entry; missing keys raise KeyError."""
        return cls(
            eye=vec3(data["eye"]),
            u=vec3(data["u"]),
            v=vec3(data["v"]),
            lookat=vec3(data["lookat"]),
            up=vec3(data["up"]),
            distance=float(data["d"]),
            theta=float(data["theta"]),
            width=int(data["width"]),
            height=int(data["height"]),
            orthographic=bool(data["orthographic"]),
            near=float(data["near"]),
            far=float(data["far"]),
            yaw=float(data["yaw"]),
            pitch=float(data["pitch"]),
            camera_speed=float(data["cs"]),
            degree_speed=float(data["ds"]),
        )

    @property
    def aspect(self) -> float:
        """Width over height of the image."""
        return self.width / self.height

    def _update_matrices(self) -> None:
        self.view = look_at(self.eye, self.eye + self.lookat, self.up)
        if self.orthographic:
            self.proj = ortho(self.left, self.right, self.bottom, self.top, self.near, self.far)
        else:
            self.proj = perspective(self.theta, self.aspect, self.near, self.far)

    def _ray(self, torque: float, sigma: float) -> Ray:
        if self.orthographic:
            return Ray(self.eye + torque * self.u + sigma * self.v, -self.w)
        direction = torque * self.u + sigma * self.v - self.distance * self.w
        return Ray(self.eye, unit(direction))

    def ray_generate(self, i: int, j: int) -> Ray:
        """The ray through the centre of pixel (``i``, ``j``)."""
        torque = self.left + (self.right - self.left) * (i + 0.5) / self.width
        sigma = self.bottom + (self.top - self.bottom) * (j + 0.5) / self.height
        return self._ray(torque, sigma)

    def multi_rays_gen(self, i: int, j: int, n: int) -> list[Ray]:
        """A grid of rays inside pixel (``i``, ``j``) for supersampling.

        The grid has as many rows and columns as there are whole numbers
        below the square root of ``n``; the offset step is ``1 / n``.
        """
        if n <= 0:
            return []
        steps = math.isqrt(n)
        if steps * steps < n:
            steps += 1
        step = 1.0 / n
        rays = []
        for a in range(steps):
            torque = self.left + (self.right - self.left) * (i + step * a) / self.width
            for b in range(steps):
                sigma = self.bottom + (self.top - self.bottom) * (j + step * b) / self.height
                rays.append(self._ray(torque, sigma))
        return rays

    def _look_from_angles(self) -> None:
        yaw, pitch = math.radians(self.yaw), math.radians(self.pitch)
        self.lookat = np.array(
            [math.cos(yaw) * math.cos(pitch), math.sin(pitch), math.sin(yaw) * math.cos(pitch)]
        )

    def _turn(self, degrees: float) -> None:
        self.yaw += degrees
        yaw = math.radians(self.yaw)
        self.lookat = np.array([math.cos(yaw), self.lookat[1], math.sin(yaw)])

    def _zoom(self, factor: float) -> None:
        self.left *= factor
        self.right *= factor
        self.bottom *= factor
        self.top *= factor
        self.theta *= factor

    def process_input(self, pressed: Iterable[Key]) -> None:
        """React to the set of keys currently held down.

        Shift with arrows turns the view, Control pans the view matrix only,
        Z with up/down zooms, and otherwise W/S/A/D and up/down move the eye.
        """
        keys = frozenset(pressed)
        if Key.LEFT_SHIFT in keys:
            if Key.UP in keys:
                self.pitch += self.degree_speed
                self._look_from_angles()
            if Key.DOWN in keys:
                self.pitch -= self.degree_speed
                self._look_from_angles()
            if Key.RIGHT in keys:
                self._turn(self.degree_speed)
            if Key.LEFT in keys:
                self._turn(-self.degree_speed)
        elif Key.LEFT_CONTROL in keys:
            self.view = rotate(self.view, PAN_DEGREES, (0.0, -1.0, 0.0))
            return
        elif Key.Z in keys:
            if Key.UP in keys:
                self._zoom(ZOOM_IN_FACTOR)
            if Key.DOWN in keys:
                self._zoom(ZOOM_OUT_FACTOR)
        else:
            forward = unit(-self.w)
            if Key.W in keys:
                self.eye = self.eye + self.camera_speed * forward
            if Key.S in keys:
                self.eye = self.eye - self.camera_speed * forward
            if Key.A in keys:
                self.eye = self.eye - unit(self.u) * self.camera_speed
            if Key.D in keys:
                self.eye = self.eye + unit(self.u) * self.camera_speed
            if Key.UP in keys:
                self.eye = self.eye + self.camera_speed * unit(self.v)
            if Key.DOWN in keys:
                self.eye = self.eye - self.camera_speed * unit(self.v)

        self.normalize()

    def normalize(self) -> None:
        """Rebuild the camera frame from ``lookat`` and ``up`` and refresh the matrices."""
        self.w = -self.lookat
        self.u = unit(np.cross(self.lookat, self.up))
        self.v = np.cross(self.w, self.u)
        self._update_matrices()