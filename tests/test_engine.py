import asyncio
import threading
import time

import numpy as np
import pytest

from evoarena.brain import Eye
from evoarena.engine import EngineConfig, EvolutionEngine, GenerationTracker
from evoarena.evolution import (
    GaussianMutation,
    GeneticAlgorithm,
    RouletteWheelSelection,
    UniformCrossover,
)
from evoarena.exceptions import GenomeError, SimulationError
from evoarena.simulation import Simulation, SimulationConfig
from evoarena.storage import CheckpointStorage
from evoarena.utils.serve import serve_until_signal
from evoarena.utils.trackers.backends import MemoryBackend
from evoarena.utils.trackers.core import GenericLogger


def _algorithm() -> GeneticAlgorithm:
    return GeneticAlgorithm(
        RouletteWheelSelection(), UniformCrossover(), GaussianMutation(chance=0.1, coeff=0.3)
    )


def _engine(simulation, tmp_path=None, tracker=None, **overrides) -> EvolutionEngine:
    config = EngineConfig(
        **{
            "population_size": 6,
            "max_generations": 3,
            "max_concurrent_evaluations": 2,
            "checkpoint_interval": 2,
            "seed": 5,
            **overrides,
        }
    )
    storage = CheckpointStorage(tmp_path) if tmp_path is not None else None
    return EvolutionEngine(simulation, _algorithm(), config, storage=storage, tracker=tracker)


class _BrokenSimulation(Simulation):
    def run_episode(self, brain, seed, on_frame=None):
        raise SimulationError("arena on fire")


@pytest.mark.asyncio
async def test_run_reaches_generation_cap(small_simulation, tmp_path):
    backend = MemoryBackend()
    tracker = GenerationTracker(GenericLogger(backend))
    engine = _engine(small_simulation, tmp_path, tracker=tracker)

    await engine.run()
    tracker.close()

    assert engine.generation == 3
    assert len(engine.history) == 3
    assert [s.generation for s in engine.history] == [0, 1, 2]
    assert engine.champion is not None
    assert engine.champion.fitness == max(s.max_fitness for s in engine.history)
    assert engine.metrics.episodes_run == 3 * 6
    assert not engine.is_running()

    names = [p.name for p in CheckpointStorage(tmp_path).paths()]
    assert names == ["checkpoint_gen_000002.json", "checkpoint_gen_000003.json"]
    assert [s for s, _ in backend.scalar_series("evolution/fitness/max")] == [0, 1, 2]


@pytest.mark.asyncio
async def test_same_seed_same_run(small_simulation):
    a = _engine(small_simulation)
    b = _engine(small_simulation)
    await a.run()
    await b.run()
    assert [s.model_dump() for s in a.history] == [s.model_dump() for s in b.history]


@pytest.mark.asyncio
async def test_individuals_share_episode_seeds(small_simulation):
    engine = _engine(small_simulation, population_size=4)
    clone = engine.population[0].chromosome.copy()
    for ind in engine.population:
        ind.chromosome = clone.copy()

    await engine.evolve_step()

    stats = engine.history[0]
    assert stats.min_fitness == stats.max_fitness


@pytest.mark.asyncio
async def test_failing_evaluations_stop_after_consecutive_errors():
    sim = _BrokenSimulation(SimulationConfig(eye=Eye(cells=3), hidden_layers=[2], episode_ticks=5))
    engine = _engine(sim, max_generations=50, max_consecutive_errors=3)

    await engine.run()

    assert engine.generation == 0
    assert engine.metrics.errors_encountered == 3
    assert engine.metrics.evaluation_errors == 3 * 6


@pytest.mark.asyncio
async def test_restore_continues_from_checkpoint(small_simulation, tmp_path):
    first = _engine(small_simulation, tmp_path, max_generations=2)
    await first.run()
    checkpoint = CheckpointStorage(tmp_path).latest()

    second = _engine(small_simulation, max_generations=4)
    second.restore(checkpoint)
    assert second.generation == 2
    np.testing.assert_array_equal(
        second.population[0].chromosome, first.population[0].chromosome
    )

    await second.run()
    assert second.generation == 4
    assert len(second.history) == 4


def test_restore_rejects_other_topology(small_simulation, tmp_path):
    engine = _engine(small_simulation, tmp_path, max_generations=1)
    asyncio.run(engine.run())
    checkpoint = CheckpointStorage(tmp_path).latest()

    other = Simulation(SimulationConfig(eye=Eye(cells=7), hidden_layers=[3], episode_ticks=5))
    with pytest.raises(GenomeError):
        _engine(other).restore(checkpoint)


@pytest.mark.asyncio
async def test_pause_and_status(small_simulation):
    engine = _engine(small_simulation, max_generations=None)
    engine.pause()
    task = engine.start()
    assert engine.start() is task
    await asyncio.sleep(0.1)

    status = await engine.get_status()
    assert status["running"] is True
    assert status["paused"] is True
    assert status["generation"] == 0

    engine.resume()
    await asyncio.sleep(0.2)
    await engine.shutdown()
    assert not engine.is_running()
    assert engine.generation >= 1
    assert engine.task is None
    assert task.done()


@pytest.mark.asyncio
async def test_serve_until_engine_finishes(small_simulation):
    engine = _engine(small_simulation, max_generations=2)
    task = engine.start()
    await asyncio.wait_for(
        serve_until_signal(stop_coros=(engine.shutdown(),), watch=(task,)),
        timeout=30,
    )
    assert engine.generation == 2


class _SlowSimulation(Simulation):
    """Episodes that take a while and count how many run at once."""

    def __init__(self, config, delay: float):
        super().__init__(config)
        self.delay = delay
        self.active = 0
        self.peak = 0
        self._lock = threading.Lock()

    def run_episode(self, brain, seed, on_frame=None):
        with self._lock:
            self.active += 1
            self.peak = max(self.peak, self.active)
        try:
            time.sleep(self.delay)
            return super().run_episode(brain, seed, on_frame)
        finally:
            with self._lock:
                self.active -= 1


@pytest.mark.asyncio
async def test_generation_timeouts_keep_concurrency_bounded():
    sim = _SlowSimulation(
        SimulationConfig(eye=Eye(cells=3), hidden_layers=[2], episode_ticks=5), delay=0.3
    )
    engine = _engine(
        sim,
        max_generations=50,
        generation_timeout=0.1,
        max_concurrent_evaluations=2,
        max_consecutive_errors=3,
    )

    await engine.run()
    await asyncio.sleep(0.5)

    assert engine.generation == 0
    assert engine.metrics.errors_encountered == 3
    assert sim.peak <= 2
