"""Reader for Wavefront .obj files made of triangles."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from .material import Material
from .mesh import Mesh, Vertex, compute_tangents

logger = logging.getLogger(__name__)


def _floats(tokens: list[str], count: int) -> np.ndarray:
    values = [float(token) for token in tokens[:count]]
    return np.array(values + [0.0] * (count - len(values)))


def _face_indices(token: str) -> tuple[int, int, int]:
    parts = token.split("/")
    if len(parts) < 3 or not all(parts[:3]):
        raise ValueError(f"face vertex must be position/texture/normal: {token!r}")
    indices = tuple(int(part) for part in parts[:3])
    if any(index < 1 for index in indices):
        raise ValueError(f"face indices are 1-based: {token!r}")
    return indices  # type: ignore[return-value]


class ObjParser:
    """Accumulates positions, texture coordinates, normals and vertices."""

    def __init__(self) -> None:
        self.positions: list[np.ndarray] = []
        self.textures: list[np.ndarray] = []
        self.normals: list[np.ndarray] = []
        self.tangents: list[np.ndarray] = []
        self.vertices: list[Vertex] = []

    def parse_obj_file(self, filename: str | Path) -> Mesh:
        """Parse ``filename``; an unreadable file gives an empty mesh."""
        try:
            stream = open(filename, encoding="utf-8")
        except OSError:
            return Mesh()

        mtllib = ""
        mtl = ""
        with stream:
            for line in stream:
                tokens = line.split()
                if not tokens:
                    continue
                tag, args = tokens[0], tokens[1:]
                if tag == "v":
                    self.positions.append(_floats(args, 3))
                elif tag == "vt":
                    self.textures.append(_floats(args, 2))
                elif tag == "vn":
                    self.normals.append(_floats(args, 3))
                elif tag == "f":
                    self._add_face(args)
                elif tag == "mtllib" and args:
                    mtllib = args[0]
                elif tag == "usemtl" and args:
                    mtl = args[0]

        self.compute_tangent()
        return Mesh(vertices=list(self.vertices), material=self._load_material(mtllib, mtl))

    def compute_tangent(self) -> None:
        """Give every triangle of the parsed vertices its tangent."""
        self.vertices = compute_tangents(self.vertices)

    def _add_face(self, args: list[str]) -> None:
        if len(args) < 3:
            raise ValueError("a face needs three vertices")
        for token in args[:3]:
            p, t, n = _face_indices(token)
            self.vertices.append(
                Vertex(self.positions[p - 1], self.normals[n - 1], self.textures[t - 1])
            )

    @staticmethod
    def _load_material(mtllib: str, mtl: str) -> Material:
        if not mtllib:
            return Material(name=mtl)
        try:
            return Material.from_mtl_file(mtllib, mtl)
        except OSError:
            logger.warning("Failed to open material library %s", mtllib)
            return Material(name=mtl)


def parse_obj_file(filename: str | Path) -> Mesh:
    """Parse ``filename`` with a fresh parser."""
    return ObjParser().parse_obj_file(filename)