import numpy as np
import pytest

from evoarena.brain import LayerTopology
from evoarena.evolution import GenerationStatistics, Individual
from evoarena.exceptions import CheckpointNotFoundError, ConfigurationError, StorageError
from evoarena.simulation import SimulationConfig
from evoarena.storage import Checkpoint, CheckpointStorage


def _checkpoint(generation: int, fitness: float = 12.0) -> Checkpoint:
    champion = Individual(chromosome=np.array([0.25, -1.5, 3.0]), fitness=fitness, generation=generation)
    return Checkpoint(
        generation=generation,
        seed=7,
        topology=[LayerTopology(neurons=1), LayerTopology(neurons=1)],
        simulation=SimulationConfig(episode_ticks=33),
        champion=champion,
        population=[champion, Individual(chromosome=np.zeros(3))],
        history=[
            GenerationStatistics.from_population(generation, [champion]),
        ],
    )


class TestCheckpointStorage:
    def test_save_then_load(self, tmp_path):
        storage = CheckpointStorage(tmp_path / "ckpt")
        path = storage.save(_checkpoint(4))
        assert path.name == "checkpoint_gen_000004.json"

        loaded = storage.load(path)
        assert loaded.generation == 4
        assert loaded.seed == 7
        assert loaded.simulation.episode_ticks == 33
        np.testing.assert_allclose(loaded.champion.chromosome, [0.25, -1.5, 3.0])
        assert loaded.champion.fitness == 12.0
        assert len(loaded.population) == 2
        assert loaded.history[0].max_fitness == 12.0

    def test_latest_is_highest_generation(self, tmp_path):
        storage = CheckpointStorage(tmp_path)
        for gen in (10, 2, 30):
            storage.save(_checkpoint(gen, fitness=float(gen)))
        assert storage.latest().generation == 30

    def test_keep_last_prunes_old_checkpoints(self, tmp_path):
        storage = CheckpointStorage(tmp_path, keep_last=2)
        for gen in range(5):
            storage.save(_checkpoint(gen))
        assert [p.name for p in storage.paths()] == [
            "checkpoint_gen_000003.json",
            "checkpoint_gen_000004.json",
        ]

    def test_keep_last_validated(self, tmp_path):
        with pytest.raises(ConfigurationError):
            CheckpointStorage(tmp_path, keep_last=0)

    def test_missing_checkpoint(self, tmp_path):
        storage = CheckpointStorage(tmp_path / "nothing")
        with pytest.raises(CheckpointNotFoundError):
            storage.latest()
        with pytest.raises(StorageError):
            storage.load(tmp_path / "nope.json")

    def test_corrupt_checkpoint(self, tmp_path):
        bad = tmp_path / "checkpoint_gen_000001.json"
        bad.write_text("{not json", encoding="utf-8")
        with pytest.raises(StorageError):
            CheckpointStorage(tmp_path).load(bad)

    def test_invalid_chromosome_is_storage_error(self, tmp_path):
        storage = CheckpointStorage(tmp_path)
        path = storage.save(_checkpoint(1))
        path.write_text(path.read_text().replace("0.25", "[0.25]", 1), encoding="utf-8")
        with pytest.raises(StorageError):
            storage.load(path)
