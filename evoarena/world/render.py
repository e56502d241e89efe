from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.patches import Circle  # noqa: E402

from evoarena.world.models import BACKGROUND, Color, Position, World  # noqa: E402

__all__ = ["draw_view", "save_snapshot"]


def draw_view(world: World, ax: plt.Axes) -> None:
    """Draw every entity of the world onto ``ax``.

    Enemies first, the player last so it stays visible when overlapped.
    """
    rect = world.config.rect
    ax.set_facecolor(BACKGROUND.as_unit_rgb())
    ax.set_xlim(rect.left, rect.right)
    ax.set_ylim(rect.bottom, rect.top)
    ax.set_aspect("equal")
    ax.set_xticks([])
    ax.set_yticks([])

    def _quick_draw(position: Position, radius: float, color: Color) -> None:
        ax.add_patch(
            Circle((position.x, position.y), radius, color=color.as_unit_rgb())
        )

    for enemy in world.enemies:
        _quick_draw(enemy.position, enemy.radius, enemy.color)
    player = world.player
    _quick_draw(player.position, player.radius, player.color)


def save_snapshot(world: World, path: str | Path, dpi: int = 100) -> Path:
    """Render the world to an image file and return its path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig, ax = plt.subplots(
        figsize=(world.config.width / dpi, world.config.height / dpi), dpi=dpi
    )
    try:
        draw_view(world, ax)
        ax.set_title(f"tick {world.tick}", fontsize=8)
        fig.savefig(path, facecolor=BACKGROUND.as_unit_rgb())
    finally:
        plt.close(fig)
    return path
