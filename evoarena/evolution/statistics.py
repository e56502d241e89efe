from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from pydantic import BaseModel

from evoarena.evolution.individual import Individual, fitnesses
from evoarena.exceptions import EvolutionError

__all__ = ["GenerationStatistics"]


class GenerationStatistics(BaseModel):
    """Fitness summary of one evaluated generation."""

    generation: int
    size: int
    min_fitness: float
    max_fitness: float
    mean_fitness: float
    median_fitness: float
    std_fitness: float

    @classmethod
    def from_population(
        cls, generation: int, population: Sequence[Individual]
    ) -> GenerationStatistics:
        if not population:
            raise EvolutionError("Cannot compute statistics of an empty population")
        values = fitnesses(population)
        return cls(
            generation=generation,
            size=len(values),
            min_fitness=float(values.min()),
            max_fitness=float(values.max()),
            mean_fitness=float(values.mean()),
            median_fitness=float(np.median(values)),
            std_fitness=float(values.std(ddof=1)) if len(values) > 1 else 0.0,
        )

    def summary(self) -> str:
        return (
            f"gen={self.generation} size={self.size} "
            f"min={self.min_fitness:.2f} max={self.max_fitness:.2f} "
            f"mean={self.mean_fitness:.2f} median={self.median_fitness:.2f} "
            f"std={self.std_fitness:.2f}"
        )
