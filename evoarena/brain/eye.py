from __future__ import annotations

import math
from collections.abc import Iterable

import numpy as np
from pydantic import BaseModel, Field

from evoarena.world.models import Enemy, Position

__all__ = ["Eye", "wrap_angle"]


def wrap_angle(angle: float) -> float:
    """Wrap an angle in radians to [-pi, pi)."""
    return (angle + math.pi) % (2 * math.pi) - math.pi


class Eye(BaseModel):
    """Field-of-view sensor splitting what the player sees into cells.

    Each cell accumulates how close the enemies in its slice of the view
    are: an enemy right next to the player adds ~1, one at the edge of the
    range adds ~0.
    """

    fov_range: float = Field(default=120.0, gt=0)
    fov_angle: float = Field(default=0.75 * 2 * math.pi, gt=0, le=2 * math.pi)
    cells: int = Field(default=9, gt=0)

    def process_vision(
        self, position: Position, rotation: float, enemies: Iterable[Enemy]
    ) -> np.ndarray:
        out = np.zeros(self.cells)
        half_fov = self.fov_angle / 2

        for enemy in enemies:
            dx = enemy.position.x - position.x
            dy = enemy.position.y - position.y
            dist = math.hypot(dx, dy)
            if dist >= self.fov_range:
                continue

            angle = wrap_angle(math.atan2(dy, dx) - rotation)
            if angle < -half_fov or angle > half_fov:
                continue

            # shift into [0, fov_angle] and bin; the right edge belongs to the last cell
            cell = int((angle + half_fov) / self.fov_angle * self.cells)
            cell = min(cell, self.cells - 1)
            out[cell] += (self.fov_range - dist) / self.fov_range

        return out
