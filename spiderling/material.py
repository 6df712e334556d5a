"""Surface material properties, read from scene JSON or from .mtl files."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import numpy as np

from .transforms import vec3


def _floats(tokens: list[str], count: int) -> list[float]:
    values = [float(token) for token in tokens[:count]]
    return values + [0.0] * (count - len(values))


@dataclass(eq=False)
class Material:
    """Phong coefficients, specular exponent, reflectivity and texture maps."""

    ka: np.ndarray = field(default_factory=lambda: np.zeros(3))
    kd: np.ndarray = field(default_factory=lambda: np.zeros(3))
    ks: np.ndarray = field(default_factory=lambda: np.zeros(3))
    n: float = 0.0
    reflect: float = 0.0
    map_kd: str = ""
    map_ks: str = ""
    map_nm: str = ""
    map_dm: str = ""
    map_em: str = ""
    depth_scale: float = 0.1
    name: str = ""

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Material":
        """Build a material from a scene description; missing keys raise KeyError."""
        return cls(
            ka=vec3(data["ka"]),
            kd=vec3(data["kd"]),
            ks=vec3(data["ks"]),
            n=float(data["n"]),
            reflect=float(data["reflect"]),
            map_kd=str(data["mapKd"]),
            map_ks=str(data["mapKs"]),
            map_nm=str(data["mapNM"]),
            map_dm=str(data["mapDM"]),
            map_em=str(data["mapEM"]),
        )

    @classmethod
    def from_mtl_file(cls, filename: str | Path, name: str = "") -> "Material":
        """Read a material library; every recognised tag in the file applies."""
        material = cls(name=name)
        with open(filename, encoding="utf-8") as stream:
            for line in stream:
                tokens = line.split()
                if not tokens:
                    continue
                tag, args = tokens[0], tokens[1:]
                if tag == "Ns" and args:
                    material.n = float(args[0])
                elif tag == "Ka":
                    material.ka = np.array(_floats(args, 3))
                elif tag == "Kd":
                    material.kd = np.array(_floats(args, 3))
                elif tag == "Ks":
                    material.ks = np.array(_floats(args, 3))
                elif args and tag in _MAP_TAGS:
                    setattr(material, _MAP_TAGS[tag], args[0])
        return material


_MAP_TAGS = {
    "map_Kd": "map_kd",
    "map_Ks": "map_ks",
    "map_NM": "map_nm",
    "map_DM": "map_dm",
    "map_EM": "map_em",
}