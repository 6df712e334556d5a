"""Random generators for initial particle positions."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

import numpy as np

DEFAULT_SEED = 1


class Generator(ABC):
    """Draws random 3-vectors from its own seeded random source."""

    def __init__(self, seed: int | None = DEFAULT_SEED) -> None:
        self.rng = random.Random(seed)

    @abstractmethod
    def sample(self) -> np.ndarray:
        """Draw one 3-vector."""


class UniformGenerator(Generator):
    """Each component uniform in its half-open range ``[low, high)``."""

    def __init__(
        self,
        x_range: Sequence[float],
        y_range: Sequence[float],
        z_range: Sequence[float],
        seed: int | None = DEFAULT_SEED,
    ) -> None:
        super().__init__(seed)
        self.ranges = []
        for low, high in (x_range, y_range, z_range):
            low, high = float(low), float(high)
            if high < low:
                raise ValueError(f"range maximum {high} is below minimum {low}")
            self.ranges.append((low, high))

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "UniformGenerator":
        """Read ``xMin``..``zMax``; missing keys raise KeyError."""
        return cls(
            (data["xMin"], data["xMax"]),
            (data["yMin"], data["yMax"]),
            (data["zMin"], data["zMax"]),
        )

    def sample(self) -> np.ndarray:
        return np.array([low + (high - low) * self.rng.random() for low, high in self.ranges])


class NormalGenerator(Generator):
    """Each component normally distributed with its own mean and deviation."""

    def __init__(
        self,
        means: Sequence[float],
        deviations: Sequence[float],
        seed: int | None = DEFAULT_SEED,
    ) -> None:
        super().__init__(seed)
        self.means = [float(m) for m in means]
        self.deviations = [float(s) for s in deviations]
        if len(self.means) != 3 or len(self.deviations) != 3:
            raise ValueError("need three means and three deviations")
        if any(s < 0 for s in self.deviations):
            raise ValueError("standard deviations must not be negative")

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "NormalGenerator":
        """Read ``xMean``, ``xSd`` and so on; missing keys raise KeyError."""
        return cls(
            (data["xMean"], data["yMean"], data["zMean"]),
            (data["xSd"], data["ySd"], data["zSd"]),
        )

    def sample(self) -> np.ndarray:
        return np.array(
            [self.rng.gauss(mean, sd) for mean, sd in zip(self.means, self.deviations)]
        )


_GENERATORS = {"Normal": NormalGenerator, "Uniform": UniformGenerator}


def generator_from_json(data: Mapping[str, Any]) -> Generator:
    """Pick the generator named by ``Type``; an unknown type raises ValueError."""
    kind = data["Type"]
    if kind not in _GENERATORS:
        raise ValueError(f"unknown generator type: {kind!r}")
    return _GENERATORS[kind].from_json(data)