from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from loguru import logger

from evoarena.evolution.individual import Individual
from evoarena.evolution.operators import CrossoverMethod, MutationMethod
from evoarena.evolution.selectors import SelectionMethod
from evoarena.evolution.statistics import GenerationStatistics
from evoarena.exceptions import ConfigurationError, EvolutionError, GenomeError

__all__ = ["GeneticAlgorithm"]


class GeneticAlgorithm:
    """Breeds the next generation from an evaluated one.

    Every child is ``mutate(crossover(select(), select()))``; the ``elitism``
    best individuals are carried over unchanged. Population size is
    preserved.
    """

    def __init__(
        self,
        selection: SelectionMethod,
        crossover: CrossoverMethod,
        mutation: MutationMethod,
        elitism: int = 0,
    ):
        if elitism < 0:
            raise ConfigurationError(f"elitism must be non-negative, got {elitism}")
        self.selection = selection
        self.crossover = crossover
        self.mutation = mutation
        self.elitism = elitism

        logger.info(
            "[GeneticAlgorithm] Init | selection={}, crossover={}, mutation={}, elitism={}",
            type(selection).__name__,
            type(crossover).__name__,
            type(mutation).__name__,
            elitism,
        )

    def evolve(
        self,
        population: Sequence[Individual],
        rng: np.random.Generator,
        generation: int = 0,
    ) -> tuple[list[Individual], GenerationStatistics]:
        if not population:
            raise EvolutionError("Cannot evolve an empty population")
        lengths = {len(ind) for ind in population}
        if len(lengths) != 1:
            raise GenomeError(f"Population mixes chromosome lengths: {sorted(lengths)}")

        stats = GenerationStatistics.from_population(generation, population)

        n_elites = min(self.elitism, len(population))
        ranked = sorted(population, key=lambda ind: ind.fitness, reverse=True)
        next_population = [
            Individual(chromosome=ind.chromosome.copy(), generation=generation + 1)
            for ind in ranked[:n_elites]
        ]

        while len(next_population) < len(population):
            parent_a = self.selection.select(population, rng)
            parent_b = self.selection.select(population, rng)
            child = self.crossover.crossover(parent_a.chromosome, parent_b.chromosome, rng)
            child = self.mutation.mutate(child, rng)
            next_population.append(Individual(chromosome=child, generation=generation + 1))

        logger.debug(
            "[GeneticAlgorithm] Bred generation {} | elites={}, children={}",
            generation + 1,
            n_elites,
            len(next_population) - n_elites,
        )
        return next_population, stats
