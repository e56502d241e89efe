from __future__ import annotations

from pydantic import BaseModel, Field


class EngineMetrics(BaseModel):
    """Counters describing the progress of a run."""

    total_generations: int = Field(
        default=0, description="Total number of generations bred"
    )
    episodes_run: int = Field(default=0, description="Total number of episodes simulated")
    evaluation_errors: int = Field(
        default=0, description="Total individuals whose evaluation failed"
    )
    errors_encountered: int = Field(
        default=0, description="Total failed or timed-out generations"
    )
    checkpoints_saved: int = Field(default=0, description="Total checkpoints written")
    best_fitness: float | None = Field(
        default=None, description="Best fitness seen so far"
    )
    best_generation: int | None = Field(
        default=None, description="Generation the best fitness was reached in"
    )

    def record_evaluation(self, episodes: int, errors: int) -> None:
        self.episodes_run += episodes
        self.evaluation_errors += errors

    def record_best(self, fitness: float, generation: int) -> bool:
        """Update the best fitness; returns True if it improved."""
        if self.best_fitness is None or fitness > self.best_fitness:
            self.best_fitness = fitness
            self.best_generation = generation
            return True
        return False
