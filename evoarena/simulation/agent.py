from __future__ import annotations

import math

import numpy as np
from pydantic import BaseModel, Field, model_validator

from evoarena.brain.eye import Eye, wrap_angle
from evoarena.brain.network import Network
from evoarena.exceptions import BrainError
from evoarena.world.models import Enemy, Player, Position

__all__ = ["Agent", "AgentConfig", "BRAIN_OUTPUTS"]

# speed up, slow down, turn left, turn right
BRAIN_OUTPUTS: int = 4


class AgentConfig(BaseModel):
    """Motor limits of a brain-driven player, in world units per tick."""

    speed_min: float = Field(default=0.5, ge=0)
    speed_max: float = Field(default=3.0, gt=0)
    speed_accel: float = Field(default=0.5, gt=0)
    rotation_accel: float = Field(default=math.pi / 2, gt=0)

    @model_validator(mode="after")
    def _validate_speed_range(self) -> AgentConfig:
        if self.speed_min > self.speed_max:
            raise ValueError(
                f"speed_min ({self.speed_min}) must be <= speed_max ({self.speed_max})"
            )
        return self


class Agent:
    """A player steered by a neural network looking through an eye."""

    def __init__(self, player: Player, eye: Eye, brain: Network, config: AgentConfig):
        if brain.layers[0].input_size != eye.cells:
            raise BrainError(
                f"Brain expects {brain.layers[0].input_size} inputs but the eye has {eye.cells} cells"
            )
        if brain.layers[-1].output_size != BRAIN_OUTPUTS:
            raise BrainError(
                f"Brain must have {BRAIN_OUTPUTS} outputs, got {brain.layers[-1].output_size}"
            )
        self.player = player
        self.eye = eye
        self.brain = brain
        self.config = config
        self.player.speed = config.speed_max

    def think(self, enemies: list[Enemy]) -> tuple[float, float]:
        """Look around and return ``(speed_delta, rotation_delta)``."""
        vision = self.eye.process_vision(
            self.player.position, self.player.rotation, enemies
        )
        out = self.brain.propagate(vision)
        speed = float(
            np.clip(out[0] - out[1], -self.config.speed_accel, self.config.speed_accel)
        )
        rotation = float(
            np.clip(
                out[2] - out[3],
                -self.config.rotation_accel,
                self.config.rotation_accel,
            )
        )
        return speed, rotation

    def next_position(self, enemies: list[Enemy]) -> Position:
        """Apply the brain's decision and return where the player heads to.

        Speed and heading are updated in place; the position itself is left
        to the world so bounds and collisions stay in one place.
        """
        speed_delta, rotation_delta = self.think(enemies)
        player = self.player
        player.speed = float(
            np.clip(
                player.speed + speed_delta,
                self.config.speed_min,
                self.config.speed_max,
            )
        )
        player.rotation = wrap_angle(player.rotation + rotation_delta)
        return Position(
            x=player.position.x + player.speed * math.cos(player.rotation),
            y=player.position.y + player.speed * math.sin(player.rotation),
        )
