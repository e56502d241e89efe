from __future__ import annotations

from pydantic import BaseModel, Field


class EngineConfig(BaseModel):
    """Configuration options controlling EvolutionEngine behaviour."""

    population_size: int = Field(default=40, gt=1)
    max_generations: int | None = Field(
        default=None,
        gt=0,
        description="Maximum number of generations to run (None = unlimited)",
    )
    episodes_per_individual: int = Field(
        default=1,
        gt=0,
        description="Episodes averaged into one fitness value; every individual sees the same seeds",
    )
    max_concurrent_evaluations: int = Field(default=4, gt=0)
    generation_timeout: float = Field(default=600.0, gt=0)
    loop_interval: float = Field(
        default=0.0, ge=0, description="Pause in seconds between generations"
    )
    max_consecutive_errors: int = Field(default=3, gt=0)
    checkpoint_interval: int | None = Field(
        default=10,
        gt=0,
        description="Save a checkpoint every N generations (None = only at the end)",
    )
    log_interval: int = Field(default=1, gt=0)
    seed: int = 0
