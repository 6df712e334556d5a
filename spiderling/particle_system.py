"""A cloud of particles driven by forces and integrated with explicit Euler steps."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Mapping

import numpy as np

from .forces import Attraction, ConstantForce, Drag, Force, Gravity, Particle, Repulsion
from .generators import Generator, generator_from_json


class ParticleSystem:
    """Particles placed by a generator and moved by an attractor plus other forces."""

    def __init__(
        self,
        size: int,
        point_size: float,
        generator: Generator,
        attractor: Attraction,
        forces: Iterable[Force] = (),
    ) -> None:
        self.size = int(size)
        self.point_size = float(point_size)
        self.generator = generator
        self.attractor = attractor
        self.forces = list(forces)
        self.particles: list[Particle] = []

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "ParticleSystem":
        """Build a system from a scene entry; missing keys raise KeyError."""
        point_size = float(data["Psize"])
        size = int(data["Size"])
        generator = generator_from_json(data["Generator"])
        attractor = Attraction.from_json(data["Attraction"])
        forces = [
            Gravity.from_json(data["Gravity"]),
            Drag.from_json(data["Drag"]),
            ConstantForce.from_json(data["ConstantForce"]),
            Repulsion.from_json(data["Repulsion"]),
        ]
        return cls(size, point_size, generator, attractor, forces)

    def initialize(self) -> None:
        """Add ``size`` particles at positions drawn from the generator."""
        self.particles.extend(
            Particle(position=self.generator.sample()) for _ in range(self.size)
        )

    def update(self, dt: float) -> None:
        """Advance every particle by ``dt``; expired particles stop moving."""
        for particle in self.particles:
            if particle.life_frame >= 0:
                acceleration = self.attractor.get_force(particle)
                for force in self.forces:
                    acceleration = acceleration + force.get_force(particle)
                particle.acceleration = acceleration
                particle.velocity = particle.velocity + acceleration * dt
                particle.position = particle.position + particle.velocity * dt
            else:
                particle.velocity = np.zeros(3)
            particle.life_frame -= 1

    def positions(self) -> np.ndarray:
        """Positions of all particles as an ``(n, 3)`` array."""
        return np.array([p.position for p in self.particles], dtype=float).reshape(-1, 3)