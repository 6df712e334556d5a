"""Triangle meshes: vertices, tangent computation and model transforms."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Sequence

import numpy as np

from .material import Material
from .transforms import rotate, scale, translate, vec3


@dataclass(eq=False)
class Vertex:
    """A mesh vertex: position, normal, texture coordinate and tangent."""

    position: np.ndarray
    normal: np.ndarray
    texture: np.ndarray
    tangent: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self) -> None:
        self.position = np.asarray(self.position, dtype=float).reshape(3)
        self.normal = np.asarray(self.normal, dtype=float).reshape(3)
        self.texture = np.asarray(self.texture, dtype=float).reshape(2)
        self.tangent = np.asarray(self.tangent, dtype=float).reshape(3)


def compute_tangents(vertices: Sequence[Vertex]) -> list[Vertex]:
    """Return copies of ``vertices`` whose tangents follow each triangle's UVs.

    Every three consecutive vertices form a triangle and share one tangent.
    Degenerate texture coordinates give infinite or NaN tangents.
    """
    if len(vertices) % 3:
        raise ValueError("vertex count must be a multiple of three")
    result: list[Vertex] = []
    it = iter(vertices)
    for v0, v1, v2 in zip(it, it, it):
        delta_pos1 = v1.position - v0.position
        delta_pos2 = v2.position - v0.position
        delta_uv1 = v1.texture - v0.texture
        delta_uv2 = v2.texture - v0.texture
        with np.errstate(divide="ignore", invalid="ignore"):
            r = np.float64(1.0) / (delta_uv1[0] * delta_uv2[1] - delta_uv1[1] * delta_uv2[0])
            tangent = (delta_pos1 * delta_uv2[1] - delta_pos2 * delta_uv1[1]) * r
        result.extend(replace(v, tangent=tangent.copy()) for v in (v0, v1, v2))
    return result


@dataclass(eq=False)
class Mesh:
    """Triangles (three vertices each) with a material and a model matrix."""

    vertices: list[Vertex] = field(default_factory=list)
    material: Material = field(default_factory=Material)
    translation: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation_axis: np.ndarray = field(default_factory=lambda: np.zeros(3))
    scale_factors: np.ndarray = field(default_factory=lambda: np.ones(3))
    rotation_degrees: float = 0.0
    model_matrix: np.ndarray = field(default_factory=lambda: np.identity(4))

    def read(self, data: Mapping[str, Any]) -> None:
        """Take placement from a scene entry and rebuild the model matrix."""
        self.translation = vec3(data["translate"])
        self.rotation_axis = vec3(data["rotateAxis"])
        self.scale_factors = vec3(data["scale"])
        self.rotation_degrees = float(data["rotateDegree"])
        matrix = translate(np.identity(4), self.translation)
        matrix = rotate(matrix, self.rotation_degrees, self.rotation_axis)
        self.model_matrix = scale(matrix, self.scale_factors)