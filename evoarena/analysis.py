"""Fitness history tables, plots and champion replays."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402
from loguru import logger  # noqa: E402

from evoarena.evolution.statistics import GenerationStatistics  # noqa: E402
from evoarena.exceptions import StorageError  # noqa: E402
from evoarena.simulation.simulation import EpisodeResult, Simulation  # noqa: E402
from evoarena.storage.checkpoint import Checkpoint  # noqa: E402
from evoarena.world.models import World  # noqa: E402
from evoarena.world.render import save_snapshot  # noqa: E402

__all__ = ["history_frame", "plot_fitness_history", "replay_champion"]


def history_frame(history: Sequence[GenerationStatistics]) -> pd.DataFrame:
    """One row per generation, indexed by generation number."""
    if not history:
        return pd.DataFrame(
            columns=list(GenerationStatistics.model_fields.keys())
        ).set_index("generation")
    df = pd.DataFrame([s.model_dump() for s in history])
    return df.set_index("generation").sort_index()


def plot_fitness_history(
    history: Sequence[GenerationStatistics], path: str | Path
) -> Path:
    """Plot min/mean/max fitness with a ±std band and save it to ``path``."""
    df = history_frame(history)
    if df.empty:
        raise StorageError("No generation statistics to plot")

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(12, 6))
    try:
        x = df.index.to_numpy()
        ax.plot(x, df["max_fitness"], label="max", color="tab:green", linewidth=2)
        ax.plot(x, df["mean_fitness"], label="mean", color="tab:blue")
        ax.plot(x, df["min_fitness"], label="min", color="tab:red", alpha=0.6)
        ax.fill_between(
            x,
            df["mean_fitness"] - df["std_fitness"],
            df["mean_fitness"] + df["std_fitness"],
            color="tab:blue",
            alpha=0.15,
            label="mean ± std",
        )
        ax.set_xlabel("Generation")
        ax.set_ylabel("Fitness (ticks survived)")
        ax.set_title("Fitness evolution")
        ax.grid(True, alpha=0.3)
        ax.legend()
        fig.tight_layout()
        fig.savefig(path, dpi=120)
    finally:
        plt.close(fig)

    logger.info("Saved fitness plot to {}", path)
    return path


def replay_champion(
    checkpoint: Checkpoint,
    simulation: Simulation,
    seed: int,
    out_dir: str | Path | None = None,
    every: int = 50,
) -> EpisodeResult:
    """Replay the checkpoint's champion, optionally saving a snapshot every N ticks.

    The final frame is always saved when ``out_dir`` is given.
    """
    if every <= 0:
        raise ValueError(f"every must be positive, got {every}")
    brain = simulation.brain_from_chromosome(checkpoint.champion.chromosome)
    out = Path(out_dir) if out_dir is not None else None
    last: list[World] = []

    def _on_frame(world: World) -> None:
        last[:] = [world]
        if out is not None and world.tick % every == 0:
            save_snapshot(world, out / f"tick_{world.tick:06d}.png")

    result = simulation.run_episode(brain, seed, on_frame=_on_frame)
    if out is not None and last:
        save_snapshot(last[0], out / f"final_tick_{last[0].tick:06d}.png")

    logger.info(
        "Replay seed={} | ticks_alive={}, survived={}, distance={:.1f}",
        seed,
        result.ticks_alive,
        result.survived,
        result.distance_travelled,
    )
    return result
