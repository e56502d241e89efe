import numpy as np
import pytest

from evoarena.analysis import history_frame, plot_fitness_history, replay_champion
from evoarena.evolution import GenerationStatistics, Individual
from evoarena.exceptions import StorageError
from evoarena.storage import Checkpoint
from evoarena.world import WorldConfig, setup_world
from evoarena.world.render import save_snapshot


def _history() -> list[GenerationStatistics]:
    return [
        GenerationStatistics(
            generation=g,
            size=10,
            min_fitness=float(g),
            max_fitness=float(10 * g),
            mean_fitness=float(5 * g),
            median_fitness=float(5 * g),
            std_fitness=1.0,
        )
        for g in (1, 0, 2)
    ]


def test_history_frame_sorted_by_generation():
    df = history_frame(_history())
    assert list(df.index) == [0, 1, 2]
    assert list(df["max_fitness"]) == [0.0, 10.0, 20.0]


def test_history_frame_empty():
    df = history_frame([])
    assert df.empty
    assert "max_fitness" in df.columns


def test_plot_fitness_history_writes_png(tmp_path):
    path = plot_fitness_history(_history(), tmp_path / "plots" / "fitness.png")
    assert path.exists()
    assert path.stat().st_size > 0


def test_plot_without_history_fails(tmp_path):
    with pytest.raises(StorageError):
        plot_fitness_history([], tmp_path / "fitness.png")


def test_save_snapshot(tmp_path, rng):
    world = setup_world(WorldConfig(num_enemies=25), rng)
    path = save_snapshot(world, tmp_path / "world.png")
    assert path.exists()
    assert path.read_bytes()[:4] == b"\x89PNG"


def test_replay_champion_snapshots(small_simulation, tmp_path, rng):
    champion = Individual(
        chromosome=rng.uniform(-1, 1, size=small_simulation.chromosome_length),
        fitness=20.0,
    )
    checkpoint = Checkpoint(
        generation=1,
        seed=0,
        topology=small_simulation.topology,
        simulation=small_simulation.config,
        champion=champion,
    )

    result = replay_champion(checkpoint, small_simulation, seed=4, out_dir=tmp_path, every=5)

    again = small_simulation.evaluate(champion.chromosome, seed=4)
    assert result == again
    pngs = sorted(p.name for p in tmp_path.glob("*.png"))
    final_tick = result.ticks_alive if result.survived else result.ticks_alive + 1
    assert f"final_tick_{final_tick:06d}.png" in pngs
    assert len(pngs) == final_tick // 5 + 1


def test_replay_rejects_bad_interval(small_simulation, rng):
    checkpoint = Checkpoint(
        generation=0,
        seed=0,
        topology=small_simulation.topology,
        champion=Individual(chromosome=np.zeros(small_simulation.chromosome_length)),
    )
    with pytest.raises(ValueError):
        replay_champion(checkpoint, small_simulation, seed=0, every=0)
