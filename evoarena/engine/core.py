from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
import contextlib
from datetime import datetime, timezone

import numpy as np
from loguru import logger

from evoarena.engine.config import EngineConfig
from evoarena.engine.metrics import EngineMetrics
from evoarena.engine.tracker import GenerationTracker
from evoarena.evolution.genetic_algorithm import GeneticAlgorithm
from evoarena.evolution.individual import Individual, random_population
from evoarena.evolution.statistics import GenerationStatistics
from evoarena.exceptions import EvolutionError, GenomeError
from evoarena.simulation.simulation import Simulation
from evoarena.storage.checkpoint import Checkpoint, CheckpointStorage

__all__ = ["EvolutionEngine"]

# fitness of an individual whose episodes could not be simulated
FAILED_FITNESS: float = 0.0


class EvolutionEngine:
    """
    Generational loop:
    - evaluate every individual on a shared worker pool of
      ``max_concurrent_evaluations`` threads, all individuals of a generation
      facing the same episode seeds;
    - record statistics, frontier and checkpoints;
    - breed the next generation with the genetic algorithm.
    """

    def __init__(
        self,
        simulation: Simulation,
        algorithm: GeneticAlgorithm,
        config: EngineConfig,
        storage: CheckpointStorage | None = None,
        tracker: GenerationTracker | None = None,
    ):
        self.simulation = simulation
        self.algorithm = algorithm
        self.config = config
        self.storage = storage
        self.tracker = tracker

        self.rng = np.random.default_rng(config.seed)
        self.metrics = EngineMetrics()
        self.generation = 0
        self.population: list[Individual] = random_population(
            config.population_size, simulation.chromosome_length, self.rng
        )
        self.history: list[GenerationStatistics] = []
        self.champion: Individual | None = None

        self._running = False
        self._paused = False
        self._consecutive_errors = 0
        self._started_at: datetime | None = None
        self._task: asyncio.Task | None = None
        # episodes abandoned by a generation timeout hold their worker until done
        self._executor: ThreadPoolExecutor | None = None

        logger.info(
            "[EvolutionEngine] Init | population={}, genes={}, max_generations={}",
            config.population_size,
            simulation.chromosome_length,
            config.max_generations or "unlimited",
        )

    # -------- lifecycle --------

    async def run(self) -> None:
        logger.info("[EvolutionEngine] Start")
        self._running, self._consecutive_errors = True, 0
        self._started_at = datetime.now(timezone.utc)

        try:
            while self._running:
                if self._paused:
                    await asyncio.sleep(max(self.config.loop_interval, 0.05))
                    continue

                if self._reached_generation_cap():
                    logger.info(
                        "[EvolutionEngine] Stop: max_generations={}",
                        self.config.max_generations,
                    )
                    break

                try:
                    await asyncio.wait_for(
                        self.evolve_step(), timeout=self.config.generation_timeout
                    )
                    self._consecutive_errors = 0
                except asyncio.TimeoutError:
                    self._on_error(f"Generation {self.generation} timed out")
                except EvolutionError as exc:
                    self._on_error(str(exc))

                if self._consecutive_errors >= self.config.max_consecutive_errors:
                    logger.critical(
                        "[EvolutionEngine] Stop: {} consecutive errors",
                        self._consecutive_errors,
                    )
                    break

                await asyncio.sleep(self.config.loop_interval)
        finally:
            self._running = False
            self._save_checkpoint(final=True)
            if self._executor is not None:
                self._executor.shutdown(wait=False, cancel_futures=True)
                self._executor = None
            logger.info("[EvolutionEngine] Stopped after {} generation(s)", self.generation)

    def start(self) -> asyncio.Task:
        """Schedule ``run()`` on the current loop; a live task is reused."""
        if self._task is not None and not self._task.done():
            logger.warning("[EvolutionEngine] Already started")
            return self._task
        self._task = asyncio.create_task(self.run(), name="evolution-engine")
        return self._task

    async def shutdown(self) -> None:
        """Ask the loop to stop after the current generation and wait for it."""
        self.stop()
        task, self._task = self._task, None
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    @property
    def task(self) -> asyncio.Task | None:
        return self._task

    def stop(self) -> None:
        self._running = False

    def pause(self) -> None:
        self._paused = True
        logger.info("[EvolutionEngine] Paused")

    def resume(self) -> None:
        self._paused = False
        logger.info("[EvolutionEngine] Resumed")

    def is_running(self) -> bool:
        return self._running

    async def get_status(self) -> dict[str, object]:
        return {
            "running": self._running,
            "paused": self._paused,
            "generation": self.generation,
            "population_size": len(self.population),
            "champion_fitness": self.champion.fitness if self.champion else None,
            "started_at": self._started_at.isoformat() if self._started_at else None,
            "metrics": self.metrics.model_dump(),
        }

    def restore(self, checkpoint: Checkpoint) -> None:
        """Continue from a checkpoint written by a previous run."""
        if checkpoint.topology != self.simulation.topology:
            raise GenomeError(
                "Checkpoint network topology does not match the simulation: "
                f"{[t.neurons for t in checkpoint.topology]} vs "
                f"{[t.neurons for t in self.simulation.topology]}"
            )
        if not checkpoint.population:
            raise EvolutionError("Checkpoint carries no population to resume from")

        self.generation = checkpoint.generation
        self.population = list(checkpoint.population)
        self.history = list(checkpoint.history)
        self.champion = checkpoint.champion
        self.metrics.record_best(checkpoint.champion.fitness, checkpoint.champion.generation)
        self.metrics.total_generations = checkpoint.generation
        logger.info(
            "[EvolutionEngine] Restored generation {} (champion fitness={:.2f})",
            checkpoint.generation,
            checkpoint.champion.fitness,
        )

    # -------- one generation --------

    async def evolve_step(self) -> GenerationStatistics:
        try:
            return await self._step()
        except EvolutionError:
            raise
        except Exception as exc:
            raise EvolutionError(f"Evolution step failed: {exc}") from exc

    async def _step(self) -> GenerationStatistics:
        seeds = [
            int(s)
            for s in self.rng.integers(0, 2**32, size=self.config.episodes_per_individual)
        ]
        evaluated = await self._evaluate(self.population, seeds)

        next_population, stats = self.algorithm.evolve(
            evaluated, self.rng, generation=self.generation
        )
        self.history.append(stats)

        best = max(evaluated, key=lambda ind: ind.fitness)
        if self.metrics.record_best(best.fitness, self.generation) or self.champion is None:
            self.champion = best
            logger.info(
                "[EvolutionEngine] New champion | generation={}, fitness={:.2f}",
                self.generation,
                best.fitness,
            )

        if self.tracker is not None:
            self.tracker.record(stats, evaluated)

        if self.generation % self.config.log_interval == 0:
            logger.info("[EvolutionEngine] {}", stats.summary())

        self.population = next_population
        self.generation += 1
        self.metrics.total_generations = self.generation

        if self.config.checkpoint_interval and self.generation % self.config.checkpoint_interval == 0:
            self._save_checkpoint()
        return stats

    async def _evaluate(
        self, population: list[Individual], seeds: list[int]
    ) -> list[Individual]:
        loop = asyncio.get_running_loop()
        executor = self._get_executor()
        evaluated = await asyncio.gather(
            *(
                loop.run_in_executor(executor, self._evaluate_individual, ind, seeds)
                for ind in population
            )
        )
        errors = sum(1 for ind in evaluated if ind.metadata.get("failed"))
        self.metrics.record_evaluation(len(population) * len(seeds), errors)
        if errors == len(population):
            raise EvolutionError(
                f"Every evaluation of generation {self.generation} failed"
            )
        return list(evaluated)

    def _evaluate_individual(self, ind: Individual, seeds: list[int]) -> Individual:
        try:
            brain = self.simulation.brain_from_chromosome(ind.chromosome)
            results = [self.simulation.run_episode(brain, seed) for seed in seeds]
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("[EvolutionEngine] Evaluation failed: {}", exc)
            return ind.model_copy(
                update={"fitness": FAILED_FITNESS, "metadata": {"failed": 1.0}}
            )

        n = len(results)
        return ind.model_copy(
            update={
                "fitness": sum(r.fitness for r in results) / n,
                "generation": self.generation,
                "metadata": {
                    "survival_rate": sum(1.0 for r in results if r.survived) / n,
                    "distance": sum(r.distance_travelled for r in results) / n,
                    "ticks_alive": sum(r.ticks_alive for r in results) / n,
                },
            }
        )

    # -------- helpers --------

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.config.max_concurrent_evaluations,
                thread_name_prefix="evoarena-episode",
            )
            logger.debug(
                "[EvolutionEngine] Created episode pool with {} workers",
                self.config.max_concurrent_evaluations,
            )
        return self._executor

    def _reached_generation_cap(self) -> bool:
        cap = self.config.max_generations
        return cap is not None and self.generation >= cap

    def _on_error(self, message: str) -> None:
        self._consecutive_errors += 1
        self.metrics.errors_encountered += 1
        logger.error(
            "[EvolutionEngine] {} ({} consecutive)", message, self._consecutive_errors
        )

    def _save_checkpoint(self, final: bool = False) -> None:
        if self.storage is None or self.champion is None:
            return
        if final and self.storage.path_for(self.generation).exists():
            return
        checkpoint = Checkpoint(
            generation=self.generation,
            seed=self.config.seed,
            topology=self.simulation.topology,
            simulation=self.simulation.config,
            champion=self.champion,
            population=self.population,
            history=self.history,
        )
        self.storage.save(checkpoint)
        self.metrics.checkpoints_saved += 1
