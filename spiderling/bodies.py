"""Ray-traceable bodies: spheres and finite planes with their triangle geometry."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any, Mapping

import numpy as np

from .material import Material
from .mesh import Vertex, compute_tangents
from .ray import Collision, Ray
from .transforms import normalize, rotate, scale, translate, vec3

SPHERE_MIN_HIT = 0.1
PLANE_MIN_HIT = 0.11


class Body(ABC):
    """A shape with a material that a ray can hit."""

    def __init__(self, shape: str, material: Material | None = None) -> None:
        self.shape = shape
        self.material = material if material is not None else Material()

    @abstractmethod
    def intersects(self, ray: Ray) -> Collision:
        """Intersect ``ray`` with the body; ``is_collided`` tells whether it hit."""


def sphere_geometry(precision: int) -> list[Vertex]:
    """Triangulate the unit sphere into ``6 * precision**2`` vertices."""
    if precision < 1:
        raise ValueError("precision must be at least 1")
    side = precision + 1
    positions: list[np.ndarray] = []
    textures: list[np.ndarray] = []
    normals: list[np.ndarray] = []
    tangents: list[np.ndarray] = []
    for i in range(side):
        for j in range(side):
            y = math.cos(math.radians(180.0 - i * 180.0 / precision))
            ring = abs(math.cos(math.asin(max(-1.0, min(1.0, y)))))
            angle = math.radians(j * 360.0 / precision)
            x = -math.cos(angle) * ring
            z = math.sin(angle) * ring
            point = np.array([x, y, z])
            positions.append(point)
            textures.append(np.array([j / precision, i / precision]))
            normals.append(normalize(point))
            if x == 0 and z == 0 and y in (1.0, -1.0):
                tangents.append(np.array([0.0, 0.0, -1.0]))
            else:
                tangents.append(np.cross(np.array([0.0, 1.0, 0.0]), point))

    indices: list[int] = []
    for i in range(precision):
        for j in range(precision):
            top = i * side + j
            bottom = (i + 1) * side + j
            indices.extend((top, top + 1, bottom, top + 1, bottom + 1, bottom))

    return [Vertex(positions[k], normals[k], textures[k], tangents[k]) for k in indices]


def plane_vertices(width: float, height: float, normal) -> list[Vertex]:
    """Two triangles spanning a ``width`` x ``height`` rectangle in the xz plane."""
    n = vec3(normal)
    hw, hh = width / 2.0, height / 2.0
    corners = [
        (np.array([-hw, 0.0, -hh]), np.array([0.0, 0.0])),
        (np.array([hw, 0.0, -hh]), np.array([1.0, 0.0])),
        (np.array([-hw, 0.0, hh]), np.array([0.0, 1.0])),
        (np.array([hw, 0.0, hh]), np.array([1.0, 1.0])),
    ]
    order = (0, 1, 2, 2, 1, 3)
    vertices = [Vertex(corners[k][0], n, corners[k][1]) for k in order]
    return compute_tangents(vertices)


class Sphere(Body):
    """A sphere given by centre and radius, with a tessellated mesh for display."""

    def __init__(
        self,
        center,
        radius: float,
        precision: int,
        material: Material | None = None,
        scale_factors=(1.0, 1.0, 1.0),
        shape: str = "Sphere",
    ) -> None:
        super().__init__(shape, material)
        self.center = vec3(center)
        self.radius = float(radius)
        self.precision = int(precision)
        self.scale_factors = vec3(scale_factors)
        self.vertices = sphere_geometry(self.precision)
        self.model_matrix = scale(translate(np.identity(4), self.center), self.scale_factors)

    @classmethod
    def from_json(cls, data: Mapping[str, Any], shape: str = "Sphere") -> "Sphere":
        """Build a sphere from a scene entry; missing keys raise KeyError."""
        return cls(
            center=vec3(data["center"]),
            radius=float(data["radius"]),
            precision=int(data["precision"]),
            material=Material.from_json(data["material"]),
            scale_factors=vec3(data["scale"]),
            shape=shape,
        )

    def intersects(self, ray: Ray) -> Collision:
        d = ray.direction
        offset = ray.point - self.center
        collision = Collision(t=-1.0)
        a = float(np.dot(d, d))
        b = 2.0 * float(np.dot(d, offset))
        c = float(np.dot(offset, offset)) - self.radius * self.radius
        delta = b * b - 4.0 * a * c
        if delta >= 0:
            root = math.sqrt(delta)
            collision.t = (-b - root) / (2.0 * a)
            if collision.t < 0:
                collision.t = (-b + root) / (2.0 * a)
            if collision.t > SPHERE_MIN_HIT:
                collision.is_collided = True
                collision.hit = ray.at(collision.t)
                collision.v = -d
                collision.normal = normalize((collision.hit - self.center) / self.radius)
        return collision


class Plane(Body):
    """An infinite plane for ray tracing, drawn as a finite rectangle."""

    def __init__(
        self,
        center,
        normal,
        width: float,
        height: float,
        material: Material | None = None,
        rotation_axis=(0.0, 1.0, 0.0),
        rotation_degrees: float = 0.0,
        scale_factors=(1.0, 1.0, 1.0),
        line_width: float = 1.0,
        shape: str = "Plane",
    ) -> None:
        super().__init__(shape, material)
        self.center = vec3(center)
        self.normal = vec3(normal)
        self.width = float(width)
        self.height = float(height)
        self.rotation_axis = vec3(rotation_axis)
        self.rotation_degrees = float(rotation_degrees)
        self.scale_factors = vec3(scale_factors)
        self.line_width = float(line_width)
        matrix = translate(np.identity(4), self.center)
        matrix = rotate(matrix, self.rotation_degrees, self.rotation_axis)
        self.model_matrix = scale(matrix, self.scale_factors)
        self.vertices = plane_vertices(self.width, self.height, self.normal)

    @classmethod
    def from_json(cls, data: Mapping[str, Any], shape: str = "Plane") -> "Plane":
        """Build a plane from a scene entry; missing keys raise KeyError."""
        return cls(
            center=vec3(data["center"]),
            normal=vec3(data["normal"]),
            width=float(data["width"]),
            height=float(data["height"]),
            material=Material.from_json(data["material"]),
            rotation_axis=vec3(data["rotateAxis"]),
            rotation_degrees=float(data["rotateDegree"]),
            scale_factors=vec3(data["scale"]),
            line_width=float(data["lineWidth"]),
            shape=shape,
        )

    def intersects(self, ray: Ray) -> Collision:
        collision = Collision(t=-1.0, normal=(0.0, 1.0, 0.0))
        denominator = float(np.dot(ray.direction, self.normal))
        if denominator != 0:
            collision.t = float(np.dot(self.center - ray.point, self.normal)) / denominator
            if collision.t > PLANE_MIN_HIT:
                collision.is_collided = True
                collision.normal = self.normal.copy()
                collision.hit = ray.at(collision.t)
                collision.v = -ray.direction
        return collision