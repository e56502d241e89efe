from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from evoarena.exceptions import ConfigurationError, GenomeError

__all__ = [
    "CrossoverMethod",
    "GaussianMutation",
    "MutationMethod",
    "SinglePointCrossover",
    "UniformCrossover",
]


class CrossoverMethod(ABC):
    @abstractmethod
    def crossover(
        self, parent_a: np.ndarray, parent_b: np.ndarray, rng: np.random.Generator
    ) -> np.ndarray:
        """Return a child chromosome mixing both parents."""

    @staticmethod
    def _check(parent_a: np.ndarray, parent_b: np.ndarray) -> None:
        if parent_a.shape != parent_b.shape:
            raise GenomeError(
                f"Parents differ in length: {parent_a.size} vs {parent_b.size}"
            )


class UniformCrossover(CrossoverMethod):
    """Each gene comes from either parent with equal probability."""

    def crossover(
        self, parent_a: np.ndarray, parent_b: np.ndarray, rng: np.random.Generator
    ) -> np.ndarray:
        self._check(parent_a, parent_b)
        mask = rng.random(parent_a.size) < 0.5
        return np.where(mask, parent_a, parent_b)


class SinglePointCrossover(CrossoverMethod):
    """Head of one parent, tail of the other, split at a random locus."""

    def crossover(
        self, parent_a: np.ndarray, parent_b: np.ndarray, rng: np.random.Generator
    ) -> np.ndarray:
        self._check(parent_a, parent_b)
        point = int(rng.integers(0, parent_a.size + 1))
        return np.concatenate([parent_a[:point], parent_b[point:]])


class MutationMethod(ABC):
    @abstractmethod
    def mutate(self, chromosome: np.ndarray, rng: np.random.Generator) -> np.ndarray:
        """Return a mutated copy of ``chromosome``."""


class GaussianMutation(MutationMethod):
    """Adds ``N(0, 1) * coeff`` to each gene with probability ``chance``."""

    def __init__(self, chance: float = 0.01, coeff: float = 0.3):
        if not 0.0 <= chance <= 1.0:
            raise ConfigurationError(f"chance must be in [0, 1], got {chance}")
        self.chance = chance
        self.coeff = coeff

    def mutate(self, chromosome: np.ndarray, rng: np.random.Generator) -> np.ndarray:
        mask = rng.random(chromosome.size) < self.chance
        noise = rng.standard_normal(chromosome.size) * self.coeff
        return np.where(mask, chromosome + noise, chromosome)
