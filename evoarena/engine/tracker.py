from __future__ import annotations

import math
from collections.abc import Sequence

from loguru import logger
from pydantic import BaseModel

from evoarena.evolution.individual import Individual
from evoarena.evolution.statistics import GenerationStatistics
from evoarena.utils.trackers.base import LogWriter


class _RunningStats(BaseModel):
    n: int = 0
    mean: float = 0.0
    m2: float = 0.0

    def update(self, x: float) -> None:
        self.n += 1
        delta = x - self.mean
        self.mean += delta / self.n
        self.m2 += delta * (x - self.mean)

    def std_value(self) -> float:
        if self.n <= 1:
            return 0.0
        return math.sqrt(self.m2 / (self.n - 1))


class GenerationTracker:
    """
    Writes one record per evaluated generation (step = generation):
      * "fitness/{min,max,mean,median,std}" and a "fitness/hist" histogram
      * "episodes/{survival_rate,mean_distance}" from individual metadata
      * "all/fitness/{mean,std}" running over every individual ever evaluated
      * "frontier/best_fitness" whenever the best fitness improves
    """

    def __init__(self, writer: LogWriter) -> None:
        self._writer = writer.bind(path=["evolution"])
        self._all = _RunningStats()
        self._best: float | None = None

    @property
    def best_fitness(self) -> float | None:
        return self._best

    def close(self) -> None:
        self._writer.close()

    def record(
        self, stats: GenerationStatistics, population: Sequence[Individual]
    ) -> bool:
        """Write one generation; returns True if the frontier improved."""
        step = stats.generation
        fitness = self._writer.bind(path=["fitness"])
        episodes = self._writer.bind(path=["episodes"])

        fitness.scalar("min", stats.min_fitness, step=step)
        fitness.scalar("max", stats.max_fitness, step=step)
        fitness.scalar("mean", stats.mean_fitness, step=step)
        fitness.scalar("median", stats.median_fitness, step=step)
        fitness.scalar("std", stats.std_fitness, step=step)
        fitness.hist("hist", [ind.fitness for ind in population], step=step)

        survived = [ind.metadata["survival_rate"] for ind in population if "survival_rate" in ind.metadata]
        if survived:
            episodes.scalar("survival_rate", sum(survived) / len(survived), step=step)
        distances = [ind.metadata["distance"] for ind in population if "distance" in ind.metadata]
        if distances:
            episodes.scalar("mean_distance", sum(distances) / len(distances), step=step)

        for ind in population:
            self._all.update(ind.fitness)
        running = self._writer.bind(path=["all", "fitness"])
        running.scalar("mean", self._all.mean, step=step)
        running.scalar("std", self._all.std_value(), step=step)

        if self._best is None or stats.max_fitness > self._best:
            self._best = stats.max_fitness
            self._writer.scalar("best_fitness", self._best, step=step, path=["frontier"])
            logger.debug("[GenerationTracker] New frontier {:.2f} at generation {}", self._best, step)
            return True
        return False
