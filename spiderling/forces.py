"""Particles and the forces acting on them; particles have unit mass."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Mapping

import numpy as np

from .transforms import vec3

GRAVITATIONAL_CONSTANT = 6.674e-11
STANDARD_GRAVITY = 9.8
DEFAULT_LIFE_FRAMES = 1000


@dataclass(eq=False)
class Particle:
    """A point with position, velocity, acceleration, colour and remaining life."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    acceleration: np.ndarray = field(default_factory=lambda: np.zeros(3))
    color: np.ndarray = field(default_factory=lambda: np.zeros(4))
    life_frame: int = DEFAULT_LIFE_FRAMES

    def __post_init__(self) -> None:
        self.position = np.asarray(self.position, dtype=float).reshape(3)
        self.velocity = np.asarray(self.velocity, dtype=float).reshape(3)
        self.acceleration = np.asarray(self.acceleration, dtype=float).reshape(3)
        self.color = np.asarray(self.color, dtype=float).reshape(4)


class Force(ABC):
    """A named force scaled by ``coefficient``."""

    G = GRAVITATIONAL_CONSTANT
    g = STANDARD_GRAVITY

    def __init__(self, name: str, coefficient: float) -> None:
        self.name = name
        self.coefficient = float(coefficient)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Force":
        """Build the force from a scene entry; missing keys raise KeyError."""
        return cls(str(data["Name"]), float(data["Coefficient"]))

    @abstractmethod
    def get_force(self, particle: Particle) -> np.ndarray:
        """The force on ``particle``, which is also its acceleration."""


class Gravity(Force):
    """Constant downward pull."""

    def get_force(self, particle: Particle) -> np.ndarray:
        return self.g * np.array([0.0, -1.0, 0.0]) * self.coefficient


class Drag(Force):
    """Resistance opposing the particle's velocity."""

    def get_force(self, particle: Particle) -> np.ndarray:
        return -particle.velocity * self.coefficient


class ConstantForce(Force):
    """A force of fixed magnitude along a fixed direction."""

    def __init__(self, name: str, coefficient: float, force: float, direction) -> None:
        super().__init__(name, coefficient)
        self.force = float(force)
        self.direction = vec3(direction)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "ConstantForce":
        return cls(
            str(data["Name"]),
            float(data["Coefficient"]),
            float(data["force"]),
            vec3(data["direction"]),
        )

    def get_force(self, particle: Particle) -> np.ndarray:
        return self.force * self.direction * self.coefficient


class _GoalForce(Force):
    """A force whose strength falls with the squared distance to ``goal``."""

    def __init__(self, name: str, coefficient: float, goal) -> None:
        super().__init__(name, coefficient)
        self.goal = vec3(goal)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "_GoalForce":
        return cls(str(data["Name"]), float(data["Coefficient"]), vec3(data["goal"]))

    def _push(self, particle: Particle) -> np.ndarray:
        offset = particle.position - self.goal
        r = np.float64(np.linalg.norm(offset))
        with np.errstate(divide="ignore", invalid="ignore"):
            return (self.g / (r * r)) * offset * self.coefficient


class Attraction(_GoalForce):
    """Pulls particles towards ``goal``."""

    def get_force(self, particle: Particle) -> np.ndarray:
        return -self._push(particle)


class Repulsion(_GoalForce):
    """Pushes particles away from ``goal``."""

    def get_force(self, particle: Particle) -> np.ndarray:
        return self._push(particle)