from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

import numpy as np
from loguru import logger

from evoarena.evolution.individual import Individual, fitnesses
from evoarena.exceptions import ConfigurationError, EvolutionError

__all__ = [
    "RandomSelection",
    "RouletteWheelSelection",
    "SelectionMethod",
    "TournamentSelection",
]


class SelectionMethod(ABC):
    """Picks one parent out of an evaluated population."""

    @abstractmethod
    def select(
        self, population: Sequence[Individual], rng: np.random.Generator
    ) -> Individual:
        pass

    @staticmethod
    def _check(population: Sequence[Individual]) -> None:
        if not population:
            raise EvolutionError("Cannot select from an empty population")


class RandomSelection(SelectionMethod):
    def select(
        self, population: Sequence[Individual], rng: np.random.Generator
    ) -> Individual:
        self._check(population)
        return population[int(rng.integers(len(population)))]


class RouletteWheelSelection(SelectionMethod):
    """Fitness-proportional selection.

    Negative fitnesses are shifted into positive space; an all-zero wheel
    degrades to uniform choice.
    """

    def select(
        self, population: Sequence[Individual], rng: np.random.Generator
    ) -> Individual:
        self._check(population)
        weights = fitnesses(population)

        min_fitness = weights.min()
        if min_fitness < 0:
            weights = weights - min_fitness + 1e-6  # shift to positive space

        total = weights.sum()
        if total <= 0:
            logger.debug("RouletteWheelSelection: zero total fitness, choosing uniformly")
            return population[int(rng.integers(len(population)))]

        idx = rng.choice(len(population), p=weights / total)
        return population[int(idx)]


class TournamentSelection(SelectionMethod):
    def __init__(self, tournament_size: int = 3):
        if tournament_size < 1:
            raise ConfigurationError(f"tournament_size must be at least 1, got {tournament_size}")
        self.tournament_size = tournament_size

    def select(
        self, population: Sequence[Individual], rng: np.random.Generator
    ) -> Individual:
        self._check(population)
        k = min(self.tournament_size, len(population))
        candidates = rng.choice(len(population), size=k, replace=False)
        winner = max(candidates, key=lambda i: population[int(i)].fitness)
        return population[int(winner)]
