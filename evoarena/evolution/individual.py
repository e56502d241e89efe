from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from evoarena.exceptions import GenomeError

__all__ = ["Individual", "fitnesses", "random_population"]


class Individual(BaseModel):
    """A chromosome (flat network weights) and the fitness it earned."""

    chromosome: np.ndarray
    fitness: float = 0.0
    generation: int = Field(default=0, ge=0)
    metadata: dict[str, float] = Field(default_factory=dict)

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @field_validator("chromosome", mode="before")
    @classmethod
    def _as_vector(cls, v):
        arr = np.asarray(v, dtype=float)
        if arr.ndim != 1 or arr.size == 0:
            raise GenomeError(f"Chromosome must be a non-empty 1-D vector, got shape {arr.shape}")
        if not np.all(np.isfinite(arr)):
            raise GenomeError("Chromosome contains non-finite genes")
        return arr

    @field_serializer("chromosome")
    def _serialize_chromosome(self, chromosome: np.ndarray) -> list[float]:
        return chromosome.tolist()

    def __len__(self) -> int:
        return int(self.chromosome.size)


def random_population(
    size: int, chromosome_length: int, rng: np.random.Generator
) -> list[Individual]:
    """Initial population with genes drawn uniformly from [-1, 1]."""
    if size <= 0:
        raise GenomeError(f"Population size must be positive, got {size}")
    return [
        Individual(chromosome=rng.uniform(-1.0, 1.0, size=chromosome_length))
        for _ in range(size)
    ]


def fitnesses(population: Sequence[Individual]) -> np.ndarray:
    return np.array([ind.fitness for ind in population], dtype=float)
