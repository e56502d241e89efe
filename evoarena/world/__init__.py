from evoarena.world.models import (
    BACKGROUND,
    BLACK,
    RED,
    WHITE,
    Color,
    Controls,
    Enemy,
    Player,
    Position,
    Rect,
    World,
    WorldConfig,
)
from evoarena.world.rules import (
    apply_controls,
    detect_collisions,
    enemy_spawn_position,
    gameplay,
    handle_bounds,
    setup_world,
    update,
    world_boundary,
)

__all__ = [
    "BACKGROUND",
    "BLACK",
    "RED",
    "WHITE",
    "Color",
    "Controls",
    "Enemy",
    "Player",
    "Position",
    "Rect",
    "World",
    "WorldConfig",
    "apply_controls",
    "detect_collisions",
    "enemy_spawn_position",
    "gameplay",
    "handle_bounds",
    "setup_world",
    "update",
    "world_boundary",
]
