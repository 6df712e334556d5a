"""Light sources and Phong shading with hard shadows."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Iterable, Mapping

import numpy as np

from .bodies import Body
from .ray import Collision, Ray
from .transforms import normalize, vec3


class LightType(IntEnum):
    """Kinds of light, numbered as the shaders expect them."""

    DIRECTIONAL = 0
    POINT = 1
    SPOTLIGHT = 2


_TYPE_NAMES = {
    "Directional": LightType.DIRECTIONAL,
    "Point": LightType.POINT,
    "Spotlight": LightType.SPOTLIGHT,
}


def _vec(value) -> np.ndarray:
    return np.asarray(value, dtype=float).reshape(3)


@dataclass(eq=False)
class Light:
    """A light with ambient, diffuse and specular intensities and attenuation."""

    kind: LightType
    ambient: np.ndarray = field(default_factory=lambda: np.zeros(3))
    diffuse: np.ndarray = field(default_factory=lambda: np.zeros(3))
    specular: np.ndarray = field(default_factory=lambda: np.zeros(3))
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    direction: np.ndarray = field(default_factory=lambda: np.array([0.0, -1.0, 0.0]))
    ac: float = 0.0
    al: float = 0.0
    aq: float = 0.0
    aa: float = 0.0
    cutoff: float = 180.0

    def __post_init__(self) -> None:
        self.kind = LightType(self.kind)
        self.ambient = _vec(self.ambient)
        self.diffuse = _vec(self.diffuse)
        self.specular = _vec(self.specular)
        self.position = _vec(self.position)
        self.direction = _vec(self.direction)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Light":
        """Build a light from a scene entry; an unknown ``Type`` raises ValueError."""
        name = data["Type"]
        if name not in _TYPE_NAMES:
            raise ValueError(f"unknown light type: {name!r}")
        kind = _TYPE_NAMES[name]
        light = cls(
            kind=kind,
            ambient=vec3(data["ia"]),
            diffuse=vec3(data["id"]),
            specular=vec3(data["is"]),
        )
        if kind in (LightType.DIRECTIONAL, LightType.SPOTLIGHT):
            light.direction = vec3(data["direction"])
        if kind in (LightType.POINT, LightType.SPOTLIGHT):
            light.position = vec3(data["position"])
            light.ac = float(data["ac"])
            light.al = float(data["al"])
            light.aq = float(data["aq"])
        if kind is LightType.SPOTLIGHT:
            light.aa = float(data["aa"])
            light.cutoff = float(data["cutoff"])
        return light

    def process_light(
        self, collision: Collision, body: Body, bodies: Iterable[Body]
    ) -> np.ndarray:
        """Phong colour at a hit; only the ambient term if any body blocks the light."""
        to_light = normalize(self.position - collision.hit)
        material = body.material
        ambient = material.ka * self.ambient
        diffuse = material.kd * self.diffuse * max(0.0, float(np.dot(collision.normal, to_light)))
        halfway = normalize(collision.v + to_light)
        specular = (
            material.ks
            * self.specular
            * max(0.0, float(np.dot(collision.normal, halfway))) ** material.n
        )

        shadow_ray = Ray(collision.hit, to_light)
        if any(other.intersects(shadow_ray).is_collided for other in bodies):
            return ambient
        return ambient + diffuse + specular