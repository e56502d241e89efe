from __future__ import annotations

from collections.abc import Callable

import numpy as np
from loguru import logger
from pydantic import BaseModel, Field

from evoarena.brain.eye import Eye
from evoarena.brain.network import LayerTopology, Network, weight_count
from evoarena.exceptions import SimulationError
from evoarena.simulation.agent import BRAIN_OUTPUTS, Agent, AgentConfig
from evoarena.world.models import Controls, World, WorldConfig
from evoarena.world.rules import setup_world, update

__all__ = ["EpisodeResult", "Simulation", "SimulationConfig"]

FrameCallback = Callable[[World], None]


class SimulationConfig(BaseModel):
    world: WorldConfig = Field(default_factory=WorldConfig)
    eye: Eye = Field(default_factory=Eye)
    agent: AgentConfig = Field(default_factory=AgentConfig)
    hidden_layers: list[int] = Field(default_factory=lambda: [18])
    episode_ticks: int = Field(
        default=1000, gt=0, description="An episode ends when the player dies or after this many ticks"
    )


class EpisodeResult(BaseModel):
    """Outcome of one brain living through one world.

    ``ticks_alive`` counts the ticks the player finished alive; fitness equals it.
    """

    fitness: float
    ticks_alive: int
    distance_travelled: float
    survived: bool
    seed: int


class Simulation:
    """Runs brains through freshly seeded worlds and scores them.

    Episodes are deterministic in ``(brain, seed)``: enemy motion only draws
    from the world RNG, so every brain given the same seed faces the same
    enemies.
    """

    def __init__(self, config: SimulationConfig | None = None):
        self.config = config or SimulationConfig()
        if any(n <= 0 for n in self.config.hidden_layers):
            raise SimulationError(
                f"Hidden layer sizes must be positive, got {self.config.hidden_layers}"
            )

    @property
    def topology(self) -> list[LayerTopology]:
        sizes = [self.config.eye.cells, *self.config.hidden_layers, BRAIN_OUTPUTS]
        return [LayerTopology(neurons=n) for n in sizes]

    @property
    def chromosome_length(self) -> int:
        return weight_count(self.topology)

    def random_brain(self, rng: np.random.Generator) -> Network:
        return Network.random(self.topology, rng)

    def brain_from_chromosome(self, chromosome: np.ndarray) -> Network:
        return Network.from_weights(self.topology, chromosome)

    def run_episode(
        self,
        brain: Network,
        seed: int,
        on_frame: FrameCallback | None = None,
    ) -> EpisodeResult:
        """Let ``brain`` steer the player until death or the tick limit."""
        rng = np.random.default_rng(seed)
        world = setup_world(self.config.world, rng)
        agent = Agent(world.player, self.config.eye, brain, self.config.agent)

        distance = 0.0
        for _ in range(self.config.episode_ticks):
            before = world.player.position.model_copy()
            target = agent.next_position(world.enemies)
            world = update(world, Controls(target=target), rng)
            distance += before.distance_to(world.player.position)
            if on_frame is not None:
                on_frame(world)
            if not world.player.alive:
                break

        # the tick on which the player dies does not count
        ticks_alive = world.tick if world.player.alive else world.tick - 1
        result = EpisodeResult(
            fitness=float(ticks_alive),
            ticks_alive=ticks_alive,
            distance_travelled=distance,
            survived=world.player.alive,
            seed=seed,
        )
        logger.trace(
            "[Simulation] Episode seed={} | ticks={}, survived={}",
            seed,
            result.ticks_alive,
            result.survived,
        )
        return result

    def evaluate(self, chromosome: np.ndarray, seed: int) -> EpisodeResult:
        return self.run_episode(self.brain_from_chromosome(chromosome), seed)
