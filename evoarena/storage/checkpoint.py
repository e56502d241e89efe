from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import orjson
from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from evoarena.brain.network import LayerTopology
from evoarena.evolution.individual import Individual
from evoarena.evolution.statistics import GenerationStatistics
from evoarena.exceptions import CheckpointNotFoundError, ConfigurationError, GenomeError, StorageError
from evoarena.simulation.simulation import SimulationConfig
from evoarena.utils.json import dumps, loads

__all__ = ["Checkpoint", "CheckpointStorage"]


class Checkpoint(BaseModel):
    """Everything needed to resume a run or replay its champion."""

    generation: int = Field(ge=0)
    seed: int
    topology: list[LayerTopology]
    simulation: SimulationConfig | None = None
    champion: Individual
    population: list[Individual] = Field(default_factory=list)
    history: list[GenerationStatistics] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class CheckpointStorage:
    """
    Directory of JSON checkpoints:
      file = ``checkpoint_gen_<generation:06d>.json``
      ``latest()`` is the highest generation present.
    """

    PATTERN = "checkpoint_gen_*.json"

    def __init__(self, directory: str | Path, keep_last: int | None = None) -> None:
        if keep_last is not None and keep_last < 1:
            raise ConfigurationError(f"keep_last must be at least 1, got {keep_last}")
        self.directory = Path(directory)
        self.keep_last = keep_last

    def path_for(self, generation: int) -> Path:
        return self.directory / f"checkpoint_gen_{generation:06d}.json"

    def save(self, checkpoint: Checkpoint) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(checkpoint.generation)
        tmp = path.with_suffix(".json.tmp")
        try:
            tmp.write_text(dumps(checkpoint.model_dump(mode="json")), encoding="utf-8")
            tmp.replace(path)
        except OSError as exc:
            raise StorageError(f"Failed to write checkpoint {path}: {exc}") from exc

        logger.info(
            "[CheckpointStorage] Saved generation {} (champion fitness={:.2f}) to {}",
            checkpoint.generation,
            checkpoint.champion.fitness,
            path,
        )
        self._prune()
        return path

    def load(self, path: str | Path) -> Checkpoint:
        path = Path(path)
        if not path.exists():
            raise CheckpointNotFoundError(f"Checkpoint {path} does not exist")
        try:
            data = loads(path.read_bytes())
            return Checkpoint.model_validate(data)
        except (OSError, orjson.JSONDecodeError, ValidationError, GenomeError) as exc:
            raise StorageError(f"Corrupt checkpoint {path}: {exc}") from exc

    def paths(self) -> list[Path]:
        if not self.directory.exists():
            return []
        return sorted(self.directory.glob(self.PATTERN))

    def latest(self) -> Checkpoint:
        paths = self.paths()
        if not paths:
            raise CheckpointNotFoundError(f"No checkpoints in {self.directory}")
        return self.load(paths[-1])

    def _prune(self) -> None:
        if self.keep_last is None:
            return
        stale = self.paths()[: -self.keep_last]
        for path in stale:
            path.unlink(missing_ok=True)
            logger.debug("[CheckpointStorage] Pruned {}", path.name)
